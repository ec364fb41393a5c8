# src/atlas_buildconf/core/hooks/runner.py
"""
Execução de hooks pré-build.

Este módulo constrói hooks a partir do documento de build e os executa
depois da resolução, na ordem determinística (target lexicográfico, depois
ordem de declaração).

Decisões arquiteturais:
    - Todos os targets de hooks são validados antes de qualquer hook rodar
    - Hooks só se aplicam a artefatos da configuração resolvida
    - A primeira falha aborta a execução (sem retry automático)
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence, Tuple

from atlas_buildconf.core.config.document import BuildDocument
from atlas_buildconf.core.exceptions import ConfigurationError
from atlas_buildconf.core.pipeline.context import EvaluationContext
from atlas_buildconf.core.pipeline.shared import SharedContext
from atlas_buildconf.core.pipeline.types import ResolvedConfiguration
from atlas_buildconf.core.traceability.manifest import ResolutionManifest, hook_applied

from .link import HookOutcome, PreBuildHook, SymlinkHook


def hooks_from_document(document: BuildDocument) -> List[SymlinkHook]:
    return [
        SymlinkHook(
            target=target,
            source=spec.source,
            dest=spec.dest,
            missing_source=document.missing_source,
        )
        for target, specs in document.hooks.items()
        for spec in specs
    ]


def validate_hook_targets(hooks: Sequence[PreBuildHook], artifacts: Iterable[str]) -> None:
    """
    Garante que todo hook aponta para um artefato da árvore.

    Chamada antes da resolução, para que um hook inválido seja rejeitado
    mesmo quando os hooks não serão executados.

    Raises:
        ConfigurationError: Hook para target que não é artefato.
    """
    known = set(artifacts)
    invalid = sorted({h.target for h in hooks if h.target not in known})
    if invalid:
        raise ConfigurationError(
            message="Hook pré-build para target que não é artefato resolvido",
            details={"targets": invalid, "artifacts": sorted(known)},
            hint="Hooks só se aplicam a artefatos presentes na árvore base.",
        )


def run_pre_build_hooks(
    hooks: Sequence[PreBuildHook],
    *,
    resolved: ResolvedConfiguration,
    common: SharedContext,
    ctx: Optional[EvaluationContext] = None,
    manifest: Optional[ResolutionManifest] = None,
) -> Tuple[HookOutcome, ...]:
    """
    Executa hooks pré-build para artefatos já resolvidos.

    Args:
        hooks: Hooks a executar.
        resolved: Configuração resolvida (define os artefatos válidos).
        common: Contexto compartilhado (raiz e diretórios de artefatos).
        ctx: Contexto de observabilidade opcional.
        manifest: Manifest opcional para registro dos resultados.

    Returns:
        Tuple[HookOutcome, ...]: Resultados na ordem de execução.

    Raises:
        ConfigurationError: Hook para target que não é artefato resolvido.
        SideEffectError: Falha ao criar um link.
    """
    validate_hook_targets(hooks, resolved.artifacts())

    outcomes: List[HookOutcome] = []
    for hook in sorted(hooks, key=lambda h: h.target):
        outcome = hook.apply(common, ctx)
        outcomes.append(outcome)
        if manifest is not None:
            hook_applied(manifest, ts=datetime.now(timezone.utc), outcome=outcome.to_dict())
        if ctx is not None:
            ctx.log(
                target=hook.target,
                level="INFO",
                message=f"link {outcome.status.value}",
                source=outcome.source,
                dest=outcome.dest,
            )

    return tuple(outcomes)
