
"""
Atlas BuildConf — Canonical Exceptions (v1)

Este módulo define as exceções tipadas internas do Atlas BuildConf.

Objetivo:
- Permitir que o Engine, o planner e os hooks levantem exceções semânticas tipadas
- Facilitar o mapeamento determinístico para BuildErrorPayload
- Evitar ValueError/RuntimeError genéricos em guardrails críticos

Taxonomia (v1):
- ConfigurationError → override para target desconhecido, patch malformado,
  documento inválido
- EvaluationError    → falha de uma função de override (ex.: fato ausente no
  contexto compartilhado)
- SideEffectError    → hook pré-build não conseguiu criar o link no filesystem

Regras:
- Todas as falhas são fatais para a resolução inteira.
- Exceções devem carregar apenas dados estruturados (serializáveis).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class BuildConfException(Exception):
    """Base class para exceções internas do Atlas BuildConf.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Não embedar stack trace em payloads de erro
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover
        return self.message


# ---------------------------------------------------------------------------
# Configuração / Definição
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ConfigurationError(BuildConfException):
    """Override, patch ou documento inconsistente com a árvore base."""


@dataclass(frozen=True)
class DuplicateOverrideError(ConfigurationError):
    """Mais de um override registrado para o mesmo (layer, target)."""


# ---------------------------------------------------------------------------
# Avaliação
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EvaluationError(BuildConfException):
    """Função de override falhou durante a avaliação."""


# ---------------------------------------------------------------------------
# Efeitos colaterais (hooks pré-build)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SideEffectError(BuildConfException):
    """Hook pré-build não pôde ser aplicado no filesystem."""
