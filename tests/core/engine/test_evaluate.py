# tests/core/engine/test_evaluate.py
"""
Testes do driver de avaliação (evaluate).

Este módulo valida a passada completa:
    documento → overrides declarativos → resolução → outputs → hooks → Manifest

Decisões arquiteturais:
    - Overrides programáticos compõem com os declarativos na camada USER
    - A camada FRAMEWORK padrão é aplicada quando não informada
    - Erros de resolução abortam antes de qualquer hook

Limites explícitos:
    - Não valida persistência do Manifest (ver traceability)
"""

import pytest

try:
    from atlas_buildconf import __version__
    from atlas_buildconf.core.config.document import parse_document
    from atlas_buildconf.core.engine.evaluate import Evaluation, evaluate
    from atlas_buildconf.core.hooks.link import LinkStatus
    from atlas_buildconf.core.pipeline.registry import OverrideRegistry
    from atlas_buildconf.core.pipeline.types import ConfigurationTree
    from atlas_buildconf.core.exceptions import (
        ConfigurationError,
        DuplicateOverrideError,
        EvaluationError,
        SideEffectError,
    )
except Exception as e:  # noqa: BLE001
    __version__ = None
    parse_document = None
    Evaluation = None
    evaluate = None
    LinkStatus = None
    OverrideRegistry = None
    ConfigurationTree = None
    ConfigurationError = None
    DuplicateOverrideError = None
    EvaluationError = None
    SideEffectError = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing evaluation driver. Implement:\n"
            "- src/atlas_buildconf/core/engine/evaluate.py (evaluate, Evaluation)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def _document(**extra):
    data = {
        "platform": "crate2nix",
        "rename_outputs": {"helix-term": "helix"},
        "default_outputs": {"app": "hx", "package": "helix"},
        "overrides": {
            "helix-term": {"buildInputs": ["${common.toolchain.cc_lib}"]},
            "build": {"rootFeatures": ["embed_runtime"]},
        },
        "hooks": {"helix-core": [{"link": {"source": "runtime", "dest": "../runtime"}}]},
    }
    data.update(extra)
    return parse_document(data)


def test_evaluate_full_pass(base_tree, common, project_root, eval_ctx):
    """
    Verifica a avaliação completa de um documento válido.

    Invariantes:
        - Configuração resolvida usa nomes originais; outputs usam nomes renomeados
        - Defaults referenciam outputs publicados
        - Hooks executados e registrados no Manifest
        - Manifest fechado com o hash da configuração resolvida
    """
    _require_imports()

    (project_root / "runtime").mkdir()

    result = evaluate(_document(), base=base_tree, common=common, ctx=eval_ctx)

    assert isinstance(result, Evaluation)
    assert result.platform == "crate2nix"
    assert result.resolved["helix-term"]["buildInputs"] == ["openssl", "pkg-config", "gcc-lib"]
    assert result.resolved["build"]["rootFeatures"] == ["embed_runtime"]
    assert "helix" in result.outputs and "helix-term" not in result.outputs
    assert result.defaults.to_dict() == {"app": "hx", "package": "helix"}
    assert [o.status for o in result.hook_outcomes] == [LinkStatus.CREATED]

    m = result.manifest
    assert m.run["run_id"] == "test-run"
    assert m.run["buildconf_version"] == __version__
    assert m.inputs["base_hash"] == ConfigurationTree(base_tree).fingerprint()
    assert m.inputs["document_hash"] == _document().document_hash()
    assert m.result["resolved_hash"] == result.resolved.fingerprint()
    assert m.result["outputs"] == result.outputs.targets()
    assert m.events[-1]["event_type"] == "evaluation_finished"
    assert eval_ctx.events[0]["message"] == "evaluation_started"
    assert eval_ctx.events[-1]["message"] == "evaluation_finished"


def test_framework_layer_runs_before_declarative_overrides(base_tree, common):
    _require_imports()

    result = evaluate(_document(hooks={}), base=base_tree, common=common)

    assert result.resolved["shell"] == {"packages": ["rustc", "cargo"], "env": []}
    assert result.manifest.targets["build"]["layers"] == ["framework", "user"]
    assert result.manifest.targets["helix-term"]["layers"] == ["user"]


def test_programmatic_overrides_compose_with_document(base_tree, common):
    _require_imports()

    def helix_view(common, previous):
        return {"buildInputs": ["fontconfig"]}

    result = evaluate(
        _document(hooks={}),
        base=base_tree,
        common=common,
        overrides={"helix-view": helix_view},
    )

    assert result.resolved["helix-view"]["buildInputs"] == ["fontconfig"]
    assert result.resolved["build"]["rootFeatures"] == ["embed_runtime"]


def test_programmatic_override_for_declared_target_is_duplicate(base_tree, common):
    _require_imports()

    with pytest.raises(DuplicateOverrideError):
        evaluate(
            _document(hooks={}),
            base=base_tree,
            common=common,
            overrides={"build": lambda c, p: {"rootFeatures": ["x"]}},
        )


def test_empty_framework_registry_disables_defaults(common):
    _require_imports()

    base = {"helix-term": {"buildInputs": []}, "shell": {"packages": ["rustc"]}}
    doc = parse_document({"platform": "crate2nix"})

    result = evaluate(doc, base=base, common=common, framework=OverrideRegistry())

    assert result.resolved == base
    assert result.hook_outcomes == ()


def test_unknown_override_target_fails_before_hooks(base_tree, common, project_root, eval_ctx):
    _require_imports()

    (project_root / "runtime").mkdir()
    doc = _document(overrides={"helix-lsp": {"buildInputs": ["x"]}})

    with pytest.raises(ConfigurationError):
        evaluate(doc, base=base_tree, common=common, ctx=eval_ctx)

    assert not common.build_root.exists()


def test_failing_declarative_reference_aborts(base_tree, common, project_root):
    _require_imports()

    (project_root / "runtime").mkdir()
    doc = _document(overrides={"helix-term": {"buildInputs": ["${common.toolchain.ld}"]}})

    with pytest.raises(EvaluationError):
        evaluate(doc, base=base_tree, common=common)

    assert not common.build_root.exists()


def test_missing_hook_source_fails_evaluation(base_tree, common):
    _require_imports()

    with pytest.raises(SideEffectError):
        evaluate(_document(), base=base_tree, common=common)


def test_hooks_can_be_disabled(base_tree, common):
    _require_imports()

    result = evaluate(_document(), base=base_tree, common=common, run_hooks=False)

    assert result.hook_outcomes == ()
    assert result.manifest.hooks == []


def test_hook_for_unknown_target_is_rejected_even_without_running_hooks(base_tree, common, eval_ctx):
    """Targets de hooks são validados antes da resolução, com ou sem `run_hooks`."""
    _require_imports()

    doc = _document(hooks={"helix-lsp": [{"link": {"source": "runtime", "dest": "runtime"}}]})

    with pytest.raises(ConfigurationError) as exc:
        evaluate(doc, base=base_tree, common=common, ctx=eval_ctx, run_hooks=False)

    assert exc.value.details["targets"] == ["helix-lsp"]
    assert not any(e["message"] == "target_resolved" for e in eval_ctx.events)


def test_default_package_must_be_renamed_output(base_tree, common):
    _require_imports()

    doc = _document(hooks={}, default_outputs={"app": "hx", "package": "helix-term"})

    with pytest.raises(ConfigurationError):
        evaluate(doc, base=base_tree, common=common)


def test_evaluation_is_deterministic(base_tree, common, project_root):
    _require_imports()

    (project_root / "runtime").mkdir()

    first = evaluate(_document(), base=base_tree, common=common)
    second = evaluate(_document(), base=base_tree, common=common)

    assert first.resolved.to_json() == second.resolved.to_json()
    assert first.manifest.result["resolved_hash"] == second.manifest.result["resolved_hash"]
    assert first.manifest.run["run_id"] != second.manifest.run["run_id"]
    assert [o.status for o in second.hook_outcomes] == [LinkStatus.UNCHANGED]
