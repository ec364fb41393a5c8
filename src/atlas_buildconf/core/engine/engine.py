# src/atlas_buildconf/core/engine/engine.py
"""
Engine de composição de overrides do Atlas BuildConf.

O Engine recebe a árvore base do driver externo, o contexto compartilhado
e os overrides por camada, e produz a `ResolvedConfiguration`.

Política de execução (v1):
- Planejamento completo antes de qualquer avaliação (targets desconhecidos
  falham antes de qualquer override rodar).
- Para cada target: base → FRAMEWORK → USER, cada camada recebendo o
  resultado da anterior como `previous` e devolvendo um Patch.
- Patches são mesclados com `merge_patch` (list-append / scalar-replace).
- Fail-fast: a primeira falha aborta a resolução inteira; nenhum resultado
  parcial é devolvido.
- Exceções não catalogadas em overrides são encapsuladas em
  `EvaluationError` (a exceção original fica encadeada em `__cause__`).
- Funções de override recebem uma cópia de `previous`; mutá-la nunca afeta
  a árvore base.
"""

from __future__ import annotations

from copy import deepcopy
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Union

from atlas_buildconf.core.config.hashing import compute_config_hash
from atlas_buildconf.core.config.merge import merge_patch
from atlas_buildconf.core.errors import exception_to_payload, override_failed
from atlas_buildconf.core.exceptions import BuildConfException, ConfigurationError
from atlas_buildconf.core.pipeline.context import EvaluationContext
from atlas_buildconf.core.pipeline.registry import OverrideRegistry
from atlas_buildconf.core.pipeline.shared import SharedContext, thaw
from atlas_buildconf.core.pipeline.types import (
    ConfigurationTree,
    ConfigValue,
    OverrideFunction,
    OverrideLayer,
    ResolvedConfiguration,
)
from atlas_buildconf.core.traceability.manifest import (
    ResolutionManifest,
    target_failed,
    target_resolved,
)

from .planner import TargetPlan, plan_resolution


Overrides = Union[OverrideRegistry, Mapping[str, OverrideFunction], None]


def _as_registry(overrides: Overrides, layer: OverrideLayer) -> OverrideRegistry:
    if overrides is None:
        return OverrideRegistry()
    if not isinstance(overrides, OverrideRegistry):
        return OverrideRegistry.from_mapping(overrides, layer=layer)

    foreign = [
        (entry_layer, target)
        for entry_layer, target in overrides.entries()
        if entry_layer is not layer
    ]
    if foreign:
        raise ConfigurationError(
            message=f"Registry da camada {layer.value.upper()} contém overrides de outra camada",
            details={
                "layer": layer.value,
                "entries": [{"layer": entry_layer.value, "target": target} for entry_layer, target in foreign],
            },
            hint="Passe overrides FRAMEWORK em `framework=` e overrides USER em `overrides=`.",
        )
    return overrides


def _as_tree(base: Union[ConfigurationTree, Mapping[str, Any]]) -> ConfigurationTree:
    if isinstance(base, ConfigurationTree):
        return base
    return ConfigurationTree(base)


class Resolver:
    """Engine canônico do Atlas BuildConf (planner + composição)."""

    def __init__(
        self,
        *,
        base: Union[ConfigurationTree, Mapping[str, Any]],
        common: SharedContext,
        overrides: Overrides = None,
        framework: Overrides = None,
        ctx: Optional[EvaluationContext] = None,
        manifest: Optional[ResolutionManifest] = None,
    ):
        self.base: ConfigurationTree = _as_tree(base)
        self.common: SharedContext = common
        self.ctx: Optional[EvaluationContext] = ctx
        self.manifest: Optional[ResolutionManifest] = manifest

        registry = OverrideRegistry()
        registry.extend(_as_registry(framework, OverrideLayer.FRAMEWORK))
        registry.extend(_as_registry(overrides, OverrideLayer.USER))
        self.registry: OverrideRegistry = registry

    def plan(self) -> List[TargetPlan]:
        return plan_resolution(self.base, self.registry)

    def _log(self, target: Optional[str], level: str, message: str, **extra: Any) -> None:
        if self.ctx is not None:
            self.ctx.log(target=target, level=level, message=message, **extra)

    def _apply(self, plan: TargetPlan) -> ConfigValue:
        value = self.base[plan.target]

        for layer, fn in plan.layers:
            try:
                # fatos de `common` chegam congelados (MappingProxyType/tuple)
                patch = thaw(fn(self.common, deepcopy(value)))
                value = merge_patch(value, patch, target=plan.target)
            except BuildConfException:
                raise
            except Exception as exc:
                raise override_failed(
                    target=plan.target,
                    layer=layer.value,
                    exc_type=exc.__class__.__name__,
                    exc_message=str(exc),
                ) from exc

        return value

    def run(self) -> ResolvedConfiguration:
        plans = self.plan()

        resolved: Dict[str, ConfigValue] = {}
        for plan in plans:
            try:
                value = self._apply(plan)
            except BuildConfException as exc:
                if self.manifest is not None:
                    target_failed(
                        self.manifest,
                        target=plan.target,
                        ts=datetime.now(timezone.utc),
                        error=exception_to_payload(exc).to_dict(),
                    )
                self._log(plan.target, "ERROR", "target_failed", error=str(exc))
                raise

            resolved[plan.target] = value
            if self.manifest is not None:
                target_resolved(
                    self.manifest,
                    target=plan.target,
                    kind=plan.kind.value,
                    ts=datetime.now(timezone.utc),
                    layers=plan.layer_names,
                    value_hash=compute_config_hash(value),
                )
            self._log(plan.target, "INFO", "target_resolved", layers=plan.layer_names)

        return ResolvedConfiguration(resolved)


def resolve(
    base: Union[ConfigurationTree, Mapping[str, Any]],
    overrides: Overrides = None,
    *,
    common: SharedContext,
    framework: Overrides = None,
    ctx: Optional[EvaluationContext] = None,
) -> ResolvedConfiguration:
    """
    Resolve a árvore base aplicando overrides em ordem canônica.

    Args:
        base: Árvore base (ou mapa equivalente) produzida pelo driver.
        overrides: Overrides da camada USER (mapa target → função, ou registry).
        common: Contexto compartilhado somente leitura.
        framework: Overrides da camada FRAMEWORK.
        ctx: Contexto de observabilidade opcional.

    Returns:
        ResolvedConfiguration: Configuração final por target.

    Raises:
        ConfigurationError: Target desconhecido ou patch malformado.
        EvaluationError: Falha de uma função de override.
    """
    return Resolver(
        base=base,
        common=common,
        overrides=overrides,
        framework=framework,
        ctx=ctx,
    ).run()
