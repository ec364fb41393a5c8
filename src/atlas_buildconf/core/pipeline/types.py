# src/atlas_buildconf/core/pipeline/types.py
"""
Tipos canônicos da composição de overrides do Atlas BuildConf.

Este módulo define as estruturas fundamentais trocadas entre o driver
externo de build, o Engine e os hooks pré-build.

Componentes principais:
    - TargetKind            → classificação de targets (artifact, shell, build)
    - OverrideLayer         → camadas de override em ordem canônica
    - ConfigurationTree     → árvore base imutável produzida pelo driver
    - ResolvedConfiguration → resultado final imutável entregue ao driver
    - OverrideFunction      → assinatura `(common, previous) -> Patch`

Princípios fundamentais:
    - Árvores são imutáveis: toda leitura devolve cópias
    - Valores de configuração são dados puros (JSON-like)
    - A ordem das camadas é um invariante, não um detalhe de implementação

Invariantes:
    - Targets são strings não vazias
    - Valores de target são sempre dicionários
    - FRAMEWORK precede USER na composição

Limites explícitos:
    - Não executa overrides
    - Não realiza merge
"""

from __future__ import annotations

from collections.abc import Mapping
from copy import deepcopy
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterator, List, Tuple

from atlas_buildconf.core.config.hashing import canonical_json, compute_config_hash
from atlas_buildconf.core.exceptions import ConfigurationError

if TYPE_CHECKING:  # pragma: no cover
    from .shared import SharedContext


SHELL_TARGET = "shell"
BUILD_TARGET = "build"

ConfigValue = Dict[str, Any]
Patch = Dict[str, Any]
OverrideFunction = Callable[["SharedContext", ConfigValue], Patch]


class TargetKind(str, Enum):
    """
    Classificação semântica de um target.

    Tipos definidos:
        - ARTIFACT: unidade compilável (ex.: um crate)
        - SHELL: shell interativo de desenvolvimento
        - BUILD: conjunto raiz de features do build

    Decisões arquiteturais:
        - O tipo é derivado do identificador (`shell` e `build` são reservados)
        - Apenas ARTIFACT pode receber hooks pré-build e renomeação
    """
    ARTIFACT = "artifact"
    SHELL = "shell"
    BUILD = "build"


def target_kind(target: str) -> TargetKind:
    if target == SHELL_TARGET:
        return TargetKind.SHELL
    if target == BUILD_TARGET:
        return TargetKind.BUILD
    return TargetKind.ARTIFACT


class OverrideLayer(str, Enum):
    """
    Camadas de override, na ordem canônica de aplicação.

    A camada USER sempre recebe como `previous` o resultado da camada
    FRAMEWORK para o mesmo target: overrides do usuário compõem depois dos
    defaults do framework, nunca antes.
    """
    FRAMEWORK = "framework"
    USER = "user"


LAYER_ORDER: Tuple[OverrideLayer, ...] = (OverrideLayer.FRAMEWORK, OverrideLayer.USER)


class _FrozenTree(Mapping):
    """Mapa imutável `target -> ConfigValue` com leituras por cópia."""

    def __init__(self, values: Mapping):
        if not isinstance(values, Mapping):
            raise ConfigurationError(
                message="Árvore de configuração deve ser um mapa",
                details={"received": type(values).__name__},
            )
        for target in values:
            if not isinstance(target, str) or not target.strip():
                raise ConfigurationError(
                    message="Target deve ser string não vazia",
                    details={"target": repr(target)},
                )
        frozen: Dict[str, ConfigValue] = {}
        for target in sorted(values):
            value = values[target]
            if not isinstance(value, dict):
                raise ConfigurationError(
                    message=f"Valor do target '{target}' deve ser um mapa",
                    details={"target": target, "received": type(value).__name__},
                )
            frozen[target] = deepcopy(value)
        self._values = MappingProxyType(frozen)

    def __getitem__(self, target: str) -> ConfigValue:
        return deepcopy(self._values[target])

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.targets()!r})"

    def targets(self) -> List[str]:
        return list(self._values)

    def artifacts(self) -> List[str]:
        return [t for t in self._values if target_kind(t) is TargetKind.ARTIFACT]

    def to_dict(self) -> Dict[str, ConfigValue]:
        return {t: deepcopy(v) for t, v in self._values.items()}

    def to_json(self) -> str:
        return canonical_json(self.to_dict())

    def fingerprint(self) -> str:
        return compute_config_hash(self.to_dict())


class ConfigurationTree(_FrozenTree):
    """
    Árvore base imutável produzida pela avaliação padrão do driver externo.

    Criada uma única vez no início da avaliação e nunca mutada: cada
    refinamento produz um novo valor. Targets são mantidos em ordem
    lexicográfica.
    """


class ResolvedConfiguration(_FrozenTree):
    """
    Configuração final por target, entregue ao driver externo.

    O Engine não mantém estado após produzi-la. Duas resoluções com as
    mesmas entradas produzem o mesmo `to_json()` byte a byte.
    """
