"""
# Pipeline Core — Atlas BuildConf

Este pacote define os **contratos canônicos** e as **estruturas fundamentais**
da composição de overrides.

## Componentes

- **types**
  - `ConfigurationTree` / `ResolvedConfiguration`: árvores imutáveis por target
  - `OverrideLayer`: camadas FRAMEWORK → USER
  - `TargetKind`: artifact, shell, build

- **shared**
  - `SharedContext`: fatos de ambiente somente leitura (`common`)

- **context**
  - `EvaluationContext`: log estruturado e warnings de uma avaliação

- **registry**
  - `OverrideRegistry`: unicidade por (camada, target)

## Princípios Fundamentais

- Funções de override são puras: leem `common`, devolvem um Patch
- Nenhuma função de override recebe o `EvaluationContext`
- Nenhuma decisão implícita ou silenciosa
"""

from .context import EvaluationContext
from .registry import OverrideRegistry
from .shared import SharedContext
from .types import (
    BUILD_TARGET,
    LAYER_ORDER,
    SHELL_TARGET,
    ConfigurationTree,
    OverrideLayer,
    ResolvedConfiguration,
    TargetKind,
    target_kind,
)

__all__ = [
    "EvaluationContext",
    "OverrideRegistry",
    "SharedContext",
    "BUILD_TARGET",
    "LAYER_ORDER",
    "SHELL_TARGET",
    "ConfigurationTree",
    "OverrideLayer",
    "ResolvedConfiguration",
    "TargetKind",
    "target_kind",
]
