# src/atlas_buildconf/core/engine/planner.py
"""
Planejador da resolução de overrides.

Este módulo valida o conjunto de overrides registrados contra a árvore
base e produz um plano determinístico: para cada target, a sequência de
funções de override a aplicar, na ordem canônica de camadas.

Princípios fundamentais:
    - Validação estrutural ocorre antes de qualquer função de override rodar
    - A ordenação é determinística para a mesma entrada
    - Nenhuma decisão silenciosa: target desconhecido é erro, nunca ignorado

Decisões arquiteturais:
    - Targets são planejados em ordem lexicográfica (são independentes entre si)
    - Em cada target, FRAMEWORK sempre precede USER
    - Targets sem override aparecem no plano com zero camadas (pass-through)

Limites explícitos:
    - Não executa funções de override
    - Não realiza merge
    - Não executa hooks
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from atlas_buildconf.core.errors import unknown_targets
from atlas_buildconf.core.pipeline.registry import OverrideRegistry
from atlas_buildconf.core.pipeline.types import (
    LAYER_ORDER,
    ConfigurationTree,
    OverrideFunction,
    OverrideLayer,
    TargetKind,
    target_kind,
)


@dataclass(frozen=True)
class TargetPlan:
    """Plano de um target: camadas a aplicar, já na ordem canônica."""

    target: str
    kind: TargetKind
    layers: Tuple[Tuple[OverrideLayer, OverrideFunction], ...]

    @property
    def layer_names(self) -> List[str]:
        return [layer.value for layer, _ in self.layers]


def plan_resolution(base: ConfigurationTree, registry: OverrideRegistry) -> List[TargetPlan]:
    """
    Valida overrides e produz o plano determinístico de resolução.

    Decisões arquiteturais:
        - Overrides para targets ausentes da árvore base são erro de definição
        - A primeira camada (na ordem canônica) com targets desconhecidos
          determina o erro reportado

    Args:
        base (ConfigurationTree): Árvore base produzida pelo driver.
        registry (OverrideRegistry): Overrides registrados por camada.

    Returns:
        List[TargetPlan]: Um plano por target da árvore base, em ordem lexicográfica.

    Raises:
        ConfigurationError: Se algum override referenciar target inexistente.
    """
    known = set(base.targets())
    for layer in LAYER_ORDER:
        unknown = [t for t in registry.targets(layer) if t not in known]
        if unknown:
            raise unknown_targets(targets=unknown, layer=layer.value, known=sorted(known))

    return [
        TargetPlan(
            target=target,
            kind=target_kind(target),
            layers=tuple(registry.layers_for(target)),
        )
        for target in sorted(known)
    ]
