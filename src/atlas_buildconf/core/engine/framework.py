# src/atlas_buildconf/core/engine/framework.py
"""
Camada FRAMEWORK padrão.

Defaults que o framework de integração aplica antes de qualquer override
do usuário:
    - shell: garante `packages`/`env` como listas e anexa os pacotes do
      toolchain (`common.toolchain["packages"]`, quando presentes)
    - build: garante `rootFeatures` como lista

Só registra defaults para targets presentes na árvore base.
"""

from __future__ import annotations

from typing import Iterable

from atlas_buildconf.core.pipeline.registry import OverrideRegistry
from atlas_buildconf.core.pipeline.shared import SharedContext
from atlas_buildconf.core.pipeline.types import (
    BUILD_TARGET,
    SHELL_TARGET,
    ConfigValue,
    OverrideLayer,
    Patch,
)


def shell_defaults(common: SharedContext, previous: ConfigValue) -> Patch:
    return {
        "packages": list(common.toolchain.get("packages", ())),
        "env": [],
    }


def build_defaults(common: SharedContext, previous: ConfigValue) -> Patch:
    return {"rootFeatures": []}


def default_framework_overrides(targets: Iterable[str]) -> OverrideRegistry:
    present = set(targets)
    registry = OverrideRegistry()
    if SHELL_TARGET in present:
        registry.add(SHELL_TARGET, shell_defaults, layer=OverrideLayer.FRAMEWORK)
    if BUILD_TARGET in present:
        registry.add(BUILD_TARGET, build_defaults, layer=OverrideLayer.FRAMEWORK)
    return registry
