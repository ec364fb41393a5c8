# src/atlas_buildconf/core/pipeline/registry.py
"""
Registro estrutural de funções de override.

Este módulo define o `OverrideRegistry`, responsável por registrar funções
de override por (camada, target) e validar a integridade do conjunto antes
de qualquer planejamento ou avaliação.

O registry atua como uma camada de proteção antecipada, garantindo que:
    - cada target possua um identificador válido
    - exista no máximo um override por (camada, target)
    - a ordem de registro seja preservada explicitamente

Decisões arquiteturais:
    - A validação ocorre antes do planner e do Engine
    - Duplicidade é erro fatal de configuração
    - A camada é explícita no registro: a ordem FRAMEWORK → USER
      nunca depende da ordem de chamada de `add`

Limites explícitos:
    - Não verifica existência dos targets na árvore base (papel do planner)
    - Não executa funções de override
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

from atlas_buildconf.core.exceptions import ConfigurationError, DuplicateOverrideError

from .types import LAYER_ORDER, OverrideFunction, OverrideLayer


@dataclass
class OverrideRegistry:
    """
    Registro canônico de overrides para validação estrutural pré-avaliação.

    Invariantes:
        - Cada (camada, target) possui no máximo uma função
        - Apenas callables são aceitos
        - `entries()` reflete exatamente a ordem de registro
    """

    _overrides: Dict[Tuple[OverrideLayer, str], OverrideFunction] = field(
        default_factory=dict, init=False, repr=False
    )
    _order: List[Tuple[OverrideLayer, str]] = field(default_factory=list, init=False, repr=False)

    def add(
        self,
        target: str,
        fn: OverrideFunction,
        *,
        layer: OverrideLayer = OverrideLayer.USER,
    ) -> None:
        if not isinstance(target, str) or not target.strip():
            raise ConfigurationError(
                message="Target de override deve ser string não vazia",
                details={"target": repr(target)},
            )
        if not callable(fn):
            raise ConfigurationError(
                message=f"Override do target '{target}' não é uma função",
                details={"target": target, "received": type(fn).__name__},
            )

        layer = OverrideLayer(layer)
        key = (layer, target)
        if key in self._overrides:
            raise DuplicateOverrideError(
                message=f"Override duplicado para '{target}' na camada '{layer.value}'",
                details={"target": target, "layer": layer.value},
                hint="Combine os patches em uma única função por camada.",
            )

        self._overrides[key] = fn
        self._order.append(key)

    def get(self, target: str, layer: OverrideLayer = OverrideLayer.USER) -> Optional[OverrideFunction]:
        return self._overrides.get((OverrideLayer(layer), target))

    def targets(self, layer: Optional[OverrideLayer] = None) -> List[str]:
        seen: List[str] = []
        for lyr, target in self._order:
            if layer is not None and lyr is not OverrideLayer(layer):
                continue
            if target not in seen:
                seen.append(target)
        return seen

    def layers_for(self, target: str) -> List[Tuple[OverrideLayer, OverrideFunction]]:
        """Overrides do target na ordem canônica de camadas (FRAMEWORK, USER)."""
        return [
            (layer, self._overrides[(layer, target)])
            for layer in LAYER_ORDER
            if (layer, target) in self._overrides
        ]

    def entries(self) -> List[Tuple[OverrideLayer, str]]:
        return list(self._order)

    def __len__(self) -> int:
        return len(self._order)

    @classmethod
    def from_mapping(
        cls,
        overrides: Mapping[str, OverrideFunction],
        *,
        layer: OverrideLayer = OverrideLayer.USER,
    ) -> "OverrideRegistry":
        registry = cls()
        for target, fn in overrides.items():
            registry.add(target, fn, layer=layer)
        return registry

    def extend(self, other: "OverrideRegistry") -> None:
        for layer, target in other.entries():
            self.add(target, other._overrides[(layer, target)], layer=layer)
