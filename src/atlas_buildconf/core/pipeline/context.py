# src/atlas_buildconf/core/pipeline/context.py
"""
Contexto de execução de uma avaliação do Atlas BuildConf.

Este módulo define o `EvaluationContext`, a estrutura que acompanha uma
única passada de avaliação (planejamento, resolução e hooks) e concentra
a observabilidade do processo.

O EvaluationContext é o meio canônico de:
    - registro de logs estruturados por target
    - coleta de warnings não fatais (ex.: link pulado por política `skip`)
    - metadados da avaliação (ex.: caminho do documento)

Princípios fundamentais:
    - Isolamento por avaliação (cada passada possui seu próprio contexto)
    - Logs são eventos estruturados, não texto livre
    - Ausência de estado global compartilhado

Invariantes:
    - Logs sempre incluem `run_id` e `target`
    - Warnings são agrupados por `target`

Limites explícitos:
    - Não é o `SharedContext`: funções de override nunca o recebem
    - Não executa overrides nem hooks
    - Não persiste dados automaticamente
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


@dataclass
class EvaluationContext:
    """
    Contexto de observabilidade de uma avaliação.

    Campos:
        - run_id: identificador único da avaliação
        - created_at: timestamp de criação (UTC)
        - meta: metadados livres da avaliação
        - events: log estruturado de eventos
        - warnings: warnings por target
    """
    run_id: str
    created_at: datetime
    meta: Dict[str, Any] = field(default_factory=dict)

    events: List[Dict[str, Any]] = field(default_factory=list, init=False)
    warnings: Dict[str, List[str]] = field(default_factory=dict, init=False)

    # -----------------------------
    # Logging & warnings
    # -----------------------------
    def log(self, *, target: Optional[str], level: str, message: str, **extra: Any) -> None:
        event = {
            "run_id": self.run_id,
            "target": target,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(self, *, target: str, message: str) -> None:
        if target not in self.warnings:
            self.warnings[target] = []
        self.warnings[target].append(message)
