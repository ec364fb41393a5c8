"""
Atlas BuildConf — Canonical Error Structures (v1)

Este módulo define o padrão canônico de erros do Atlas BuildConf.
Erros são artefatos do contrato operacional do sistema e devem ser:

- explícitos
- serializáveis
- rastreáveis
- acionáveis

Nenhuma resolução parcial é entregue ao driver externo: qualquer erro
aqui catalogado rejeita a configuração inteira antes da compilação.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional

from .exceptions import (
    BuildConfException,
    ConfigurationError,
    EvaluationError,
    SideEffectError,
)


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BuildErrorPayload:
    """
    Payload canônico de erro do Atlas BuildConf.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao operador (onde corrigir)
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
EVALUATION_ERROR = "EVALUATION_ERROR"
SIDE_EFFECT_ERROR = "SIDE_EFFECT_ERROR"

_CODES = {
    ConfigurationError: CONFIGURATION_ERROR,
    EvaluationError: EVALUATION_ERROR,
    SideEffectError: SIDE_EFFECT_ERROR,
}


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def unknown_targets(
    *,
    targets: List[str],
    layer: str,
    known: List[str],
    hint: str = "Declare o target na árvore base do driver ou remova o override correspondente.",
) -> ConfigurationError:
    return ConfigurationError(
        message="Override referencia target inexistente na árvore base",
        details={
            "unknown_targets": sorted(targets),
            "layer": layer,
            "known_targets": sorted(known),
        },
        hint=hint,
    )


def malformed_patch(
    *,
    target: Optional[str],
    field: Optional[str],
    expected: str,
    received: str,
    hint: str = "Ajuste o patch para respeitar o formato do campo na configuração anterior.",
) -> ConfigurationError:
    return ConfigurationError(
        message="Patch com formato incompatível",
        details={
            "target": target,
            "field": field,
            "expected": expected,
            "received": received,
        },
        hint=hint,
    )


def override_failed(
    *,
    target: str,
    layer: str,
    exc_type: str,
    exc_message: str,
    hint: str = "Verifique a função de override e os fatos disponíveis no contexto compartilhado.",
) -> EvaluationError:
    return EvaluationError(
        message=f"Override do target '{target}' falhou durante a avaliação",
        details={
            "target": target,
            "layer": layer,
            "exc_type": exc_type,
            "exc_message": exc_message,
        },
        hint=hint,
    )


def link_failed(
    *,
    target: str,
    source: str,
    dest: str,
    reason: str,
    hint: str = "Remova o caminho conflitante ou ajuste as permissões antes de reexecutar a avaliação.",
) -> SideEffectError:
    return SideEffectError(
        message=f"Link pré-build do target '{target}' não pôde ser criado",
        details={
            "target": target,
            "source": source,
            "dest": dest,
            "reason": reason,
        },
        hint=hint,
    )


def exception_to_payload(exc: BaseException) -> BuildErrorPayload:
    """Converte exceções em BuildErrorPayload (serializável, acionável).

    Regras:
    - Exceções do catálogo: código estável da taxonomia + details/hint.
    - Outras exceções: encapsular como EVALUATION_ERROR sem expor stack trace.
    """
    if isinstance(exc, BuildConfException):
        code = next(
            (c for cls, c in _CODES.items() if isinstance(exc, cls)),
            exc.__class__.__name__,
        )
        return BuildErrorPayload(
            type=code,
            message=str(exc) or "Erro de avaliação",
            details=dict(exc.details or {}),
            hint=exc.hint,
        )

    return BuildErrorPayload(
        type=EVALUATION_ERROR,
        message=str(exc) or "Erro inesperado durante avaliação",
        details={"exception_class": exc.__class__.__name__},
        hint="Verifique o log de eventos e o documento de configuração",
    )
