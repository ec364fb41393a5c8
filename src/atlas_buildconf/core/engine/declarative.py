# src/atlas_buildconf/core/engine/declarative.py
"""
Overrides declarativos: patches do documento de build como funções.

Cada patch declarado em `overrides` do documento é compilado em um
`DeclarativeOverride`, um objeto-estratégia nomeado que implementa a
assinatura `(common, previous) -> Patch`.

Referências ao contexto compartilhado:
    - `"${common.toolchain.cc_lib}"` (string inteira) → o próprio objeto referenciado
    - `"prefix-${common.root}/x"` (embutida) → substituída por `str(valor)`
    - strings sem `${common.` não são tocadas (ex.: `$PWD/runtime` em `eval`
      do shell é avaliada apenas na exportação do ambiente)

Invariantes:
    - O patch declarado nunca é mutado
    - Referências inexistentes falham com `EvaluationError`
    - Sequências do contexto (tuplas congeladas) voltam a ser listas no patch
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping

from atlas_buildconf.core.pipeline.shared import SharedContext, thaw
from atlas_buildconf.core.pipeline.types import ConfigValue, Patch

_REF = re.compile(r"\$\{common\.([A-Za-z0-9_.\-]+)\}")


def interpolate(value: Any, common: SharedContext) -> Any:
    """Substitui referências `${common.<caminho>}` recursivamente."""
    if isinstance(value, dict):
        return {k: interpolate(v, common) for k, v in value.items()}
    if isinstance(value, list):
        return [interpolate(v, common) for v in value]
    if not isinstance(value, str):
        return value

    whole = _REF.fullmatch(value)
    if whole:
        return thaw(common.lookup(whole.group(1)))

    return _REF.sub(lambda m: str(common.lookup(m.group(1))), value)


@dataclass(frozen=True)
class DeclarativeOverride:
    """Override da camada USER compilado a partir do documento de build."""

    target: str
    patch: Dict[str, Any]

    def __call__(self, common: SharedContext, previous: ConfigValue) -> Patch:
        return interpolate(self.patch, common)


def compile_overrides(overrides: Mapping[str, Dict[str, Any]]) -> Dict[str, DeclarativeOverride]:
    """Compila os patches declarativos do documento, preservando a ordem declarada."""
    return {
        target: DeclarativeOverride(target=target, patch=dict(patch))
        for target, patch in overrides.items()
    }
