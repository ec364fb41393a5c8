# src/atlas_buildconf/core/engine/evaluate.py
"""
Driver de avaliação do Atlas BuildConf.

Uma avaliação é uma passada única e síncrona sobre o documento de build:

    1. valida os targets dos hooks e compila os overrides declarativos
       do documento (camada USER)
    2. planeja e resolve todos os targets (FRAMEWORK → USER), fail-fast
    3. publica outputs renomeados e seleciona o par padrão (app, package)
    4. executa hooks pré-build (opcional)
    5. fecha o Manifest com o hash da configuração resolvida

Qualquer erro aborta a avaliação antes dos hooks: ou todos os targets
resolvem e todos os hooks têm sucesso, ou a configuração inteira é
rejeitada antes de qualquer compilação.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Tuple, Union
from uuid import uuid4

from atlas_buildconf import __version__
from atlas_buildconf.core.config.document import BuildDocument
from atlas_buildconf.core.hooks.link import HookOutcome
from atlas_buildconf.core.hooks.runner import (
    hooks_from_document,
    run_pre_build_hooks,
    validate_hook_targets,
)
from atlas_buildconf.core.pipeline.context import EvaluationContext
from atlas_buildconf.core.pipeline.registry import OverrideRegistry
from atlas_buildconf.core.pipeline.shared import SharedContext
from atlas_buildconf.core.pipeline.types import (
    ConfigurationTree,
    OverrideLayer,
    ResolvedConfiguration,
)
from atlas_buildconf.core.traceability.manifest import (
    ResolutionManifest,
    create_manifest,
    evaluation_finished,
)

from .declarative import compile_overrides
from .engine import Overrides, Resolver
from .framework import default_framework_overrides
from .outputs import DefaultOutputs, rename_outputs, select_defaults


@dataclass(frozen=True)
class Evaluation:
    """Resultado de uma avaliação completa."""

    platform: str
    resolved: ResolvedConfiguration
    outputs: ResolvedConfiguration
    defaults: DefaultOutputs
    hook_outcomes: Tuple[HookOutcome, ...]
    manifest: ResolutionManifest


def _user_registry(document: BuildDocument, overrides: Overrides) -> OverrideRegistry:
    registry = OverrideRegistry.from_mapping(compile_overrides(document.overrides), layer=OverrideLayer.USER)
    if isinstance(overrides, OverrideRegistry):
        registry.extend(overrides)
    elif overrides is not None:
        for target, fn in overrides.items():
            registry.add(target, fn, layer=OverrideLayer.USER)
    return registry


def evaluate(
    document: BuildDocument,
    *,
    base: Union[ConfigurationTree, Mapping[str, Any]],
    common: SharedContext,
    overrides: Overrides = None,
    framework: Overrides = None,
    ctx: Optional[EvaluationContext] = None,
    run_hooks: bool = True,
) -> Evaluation:
    """
    Avalia o documento de build contra a árvore base do driver externo.

    Args:
        document: Documento de build validado.
        base: Árvore base produzida pelo driver.
        common: Contexto compartilhado somente leitura.
        overrides: Overrides programáticos adicionais (camada USER).
        framework: Camada FRAMEWORK; `None` usa `default_framework_overrides`.
        ctx: Contexto de observabilidade; criado quando omitido.
        run_hooks: Executa os hooks pré-build quando verdadeiro.

    Returns:
        Evaluation: Configuração resolvida, outputs, defaults, hooks e Manifest.

    Raises:
        ConfigurationError: Documento, override, renomeação ou hook inconsistente.
        EvaluationError: Falha de uma função de override.
        SideEffectError: Falha de um hook pré-build.
    """
    tree = base if isinstance(base, ConfigurationTree) else ConfigurationTree(base)
    if ctx is None:
        ctx = EvaluationContext(run_id=uuid4().hex, created_at=datetime.now(timezone.utc))

    manifest = create_manifest(
        run_id=ctx.run_id,
        started_at=ctx.created_at,
        buildconf_version=__version__,
        platform=document.platform,
        document_hash=document.document_hash(),
        base_hash=tree.fingerprint(),
    )
    ctx.log(target=None, level="INFO", message="evaluation_started", platform=document.platform)

    hooks = hooks_from_document(document)
    validate_hook_targets(hooks, tree.artifacts())

    if framework is None:
        framework = default_framework_overrides(tree.targets())

    resolved = Resolver(
        base=tree,
        common=common,
        overrides=_user_registry(document, overrides),
        framework=framework,
        ctx=ctx,
        manifest=manifest,
    ).run()

    outputs = rename_outputs(resolved, document.rename_outputs)
    defaults = select_defaults(outputs, app=document.default_app, package=document.default_package)

    outcomes: Tuple[HookOutcome, ...] = ()
    if run_hooks:
        outcomes = run_pre_build_hooks(
            hooks,
            resolved=resolved,
            common=common,
            ctx=ctx,
            manifest=manifest,
        )

    evaluation_finished(
        manifest,
        ts=datetime.now(timezone.utc),
        resolved_hash=resolved.fingerprint(),
        outputs=outputs.targets(),
        defaults=defaults.to_dict(),
    )
    ctx.log(target=None, level="INFO", message="evaluation_finished", resolved_hash=resolved.fingerprint())

    return Evaluation(
        platform=document.platform,
        resolved=resolved,
        outputs=outputs,
        defaults=defaults,
        hook_outcomes=outcomes,
        manifest=manifest,
    )
