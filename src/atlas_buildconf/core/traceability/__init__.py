# src/atlas_buildconf/core/traceability/__init__.py
"""
Pacote de rastreabilidade do Atlas BuildConf — Manifest v1.

API pública exposta:
    - ResolutionManifest  → estrutura canônica do Manifest
    - create_manifest     → criação explícita do Manifest
    - add_event           → registro explícito de eventos no Event Log
    - target_resolved     → registra resolução de um target
    - target_failed       → registra falha de um target
    - hook_applied        → registra resultado de um hook pré-build
    - evaluation_finished → registra o resumo final
    - save_manifest       → persistência em JSON
    - load_manifest       → restauração determinística

Decisões arquiteturais:
    - Nenhum evento é emitido implicitamente
    - A ordem do Event Log reflete a ordem de chamada
"""

from .manifest import (
    ResolutionManifest,
    add_event,
    create_manifest,
    evaluation_finished,
    hook_applied,
    load_manifest,
    save_manifest,
    target_failed,
    target_resolved,
)

__all__ = [
    "ResolutionManifest",
    "add_event",
    "create_manifest",
    "evaluation_finished",
    "hook_applied",
    "load_manifest",
    "save_manifest",
    "target_failed",
    "target_resolved",
]
