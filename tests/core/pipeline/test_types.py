# tests/core/pipeline/test_types.py
"""
Testes dos tipos canônicos: TargetKind, OverrideLayer e árvores imutáveis.

Invariantes:
    - `shell` e `build` são reservados; todo o resto é artefato
    - FRAMEWORK precede USER
    - Árvores ordenam targets e devolvem cópias em toda leitura
"""

import pytest

try:
    from atlas_buildconf.core.pipeline.types import (
        LAYER_ORDER,
        ConfigurationTree,
        OverrideLayer,
        ResolvedConfiguration,
        TargetKind,
        target_kind,
    )
    from atlas_buildconf.core.exceptions import ConfigurationError
except Exception as e:  # noqa: BLE001
    LAYER_ORDER = None
    ConfigurationTree = None
    OverrideLayer = None
    ResolvedConfiguration = None
    TargetKind = None
    target_kind = None
    ConfigurationError = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"Missing pipeline types. Import error: {_IMPORT_ERR}")


def test_target_kind_classification():
    _require_imports()

    assert target_kind("shell") is TargetKind.SHELL
    assert target_kind("build") is TargetKind.BUILD
    assert target_kind("helix-term") is TargetKind.ARTIFACT


def test_layer_order_is_framework_then_user():
    _require_imports()

    assert LAYER_ORDER == (OverrideLayer.FRAMEWORK, OverrideLayer.USER)


def test_tree_is_sorted_and_reads_are_copies(base_tree):
    """
    Verifica que a árvore base não pode ser mutada por quem a lê.

    Decisões arquiteturais:
        - `__getitem__` devolve cópia profunda
        - O dicionário de entrada é copiado na construção
    """
    _require_imports()

    tree = ConfigurationTree(base_tree)
    assert tree.targets() == sorted(base_tree)

    tree["helix-term"]["buildInputs"].append("mutated")
    base_tree["helix-term"]["buildInputs"].append("mutated-source")

    assert tree["helix-term"]["buildInputs"] == ["openssl", "pkg-config"]


def test_tree_equals_plain_mapping(base_tree):
    _require_imports()

    assert ConfigurationTree(base_tree) == base_tree
    assert ConfigurationTree(base_tree).fingerprint() == ConfigurationTree(dict(base_tree)).fingerprint()


@pytest.mark.parametrize(
    "values",
    [
        {"": {}},
        {1: {}},
        {"helix-term": ["not", "a", "dict"]},
    ],
)
def test_tree_rejects_invalid_entries(values):
    _require_imports()

    with pytest.raises(ConfigurationError):
        ConfigurationTree(values)


def test_resolved_artifacts_exclude_reserved_targets(base_tree):
    _require_imports()

    resolved = ResolvedConfiguration(base_tree)

    assert resolved.artifacts() == ["helix-core", "helix-term", "helix-view"]


def test_to_json_is_canonical(base_tree):
    _require_imports()

    resolved = ResolvedConfiguration({"shell": {"packages": [], "env": []}})

    assert resolved.to_json() == '{"shell":{"env":[],"packages":[]}}'
