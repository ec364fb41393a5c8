# tests/core/engine/test_planner.py
"""
Testes do planner de resolução.

Invariantes:
    - Um plano por target da árvore base, em ordem lexicográfica
    - Camadas de cada plano na ordem canônica FRAMEWORK → USER
    - Overrides para targets desconhecidos são rejeitados antes da avaliação
"""

import pytest

try:
    from atlas_buildconf.core.engine.planner import plan_resolution
    from atlas_buildconf.core.pipeline.registry import OverrideRegistry
    from atlas_buildconf.core.pipeline.types import ConfigurationTree, OverrideLayer, TargetKind
    from atlas_buildconf.core.exceptions import ConfigurationError
except Exception as e:  # noqa: BLE001
    plan_resolution = None
    OverrideRegistry = None
    ConfigurationTree = None
    OverrideLayer = None
    TargetKind = None
    ConfigurationError = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"Missing planner. Import error: {_IMPORT_ERR}")


def _noop(common, previous):
    return {}


def test_plan_covers_every_target_in_sorted_order(base_tree):
    _require_imports()

    reg = OverrideRegistry()
    reg.add("shell", _noop)
    reg.add("shell", _noop, layer=OverrideLayer.FRAMEWORK)

    plans = plan_resolution(ConfigurationTree(base_tree), reg)

    assert [p.target for p in plans] == ["build", "helix-core", "helix-term", "helix-view", "shell"]
    by_target = {p.target: p for p in plans}
    assert by_target["shell"].layer_names == ["framework", "user"]
    assert by_target["shell"].kind is TargetKind.SHELL
    assert by_target["helix-term"].layer_names == []
    assert by_target["helix-term"].kind is TargetKind.ARTIFACT


def test_unknown_framework_target_is_reported_first(base_tree):
    """A camada FRAMEWORK é validada antes da USER (ordem canônica)."""
    _require_imports()

    reg = OverrideRegistry()
    reg.add("helix-lsp", _noop, layer=OverrideLayer.USER)
    reg.add("docs", _noop, layer=OverrideLayer.FRAMEWORK)

    with pytest.raises(ConfigurationError) as exc:
        plan_resolution(ConfigurationTree(base_tree), reg)

    assert exc.value.details["layer"] == "framework"
    assert exc.value.details["unknown_targets"] == ["docs"]
    assert "shell" in exc.value.details["known_targets"]
