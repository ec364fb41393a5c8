# src/atlas_buildconf/core/traceability/manifest.py
"""
Manifest v1 — rastreabilidade de avaliações no Atlas BuildConf.

Este módulo define a estrutura e as operações canônicas do Manifest de
resolução, o artefato que registra, de forma determinística e auditável:
    - metadados da avaliação (run)
    - hashes das entradas (documento de build e árvore base)
    - estado final de cada target (camadas aplicadas, hash do valor)
    - hooks pré-build aplicados
    - Event Log ordenado de eventos explícitos

Princípios fundamentais:
    - Nenhum evento é emitido implicitamente
    - A ordem do Event Log reflete a ordem real da avaliação
    - O Manifest é serializável e reconstruível (round-trip)

Decisões arquiteturais:
    - UTC é o timezone canônico para todos os timestamps
    - O formato de persistência é JSON com chaves ordenadas

Limites explícitos:
    - Não avalia overrides
    - Não decide políticas de execução
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional


def _ensure_tzaware_utc(dt: datetime) -> datetime:
    """
    Normaliza um timestamp para timezone-aware em UTC.

    Timestamps timezone-naive são assumidos como UTC; os demais são
    convertidos para UTC preservando o instante.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _iso(dt: datetime) -> str:
    return _ensure_tzaware_utc(dt).isoformat()


@dataclass
class ResolutionManifest:
    """
    Manifest v1 — registro de uma avaliação de configuração.

    Campos principais:
        - run: metadados da avaliação (run_id, started_at, buildconf_version, platform)
        - inputs: hashes do documento e da árvore base
        - targets: estado final de cada target, indexado por id
        - hooks: resultados de hooks pré-build, na ordem de execução
        - result: resumo final (hash resolvido, outputs, defaults)
        - events: Event Log ordenado

    Invariantes:
        - `targets` é sempre um dicionário indexado por target
        - `events` e `hooks` são sempre listas ordenadas
        - A estrutura completa é serializável
    """

    run: Dict[str, Any]
    inputs: Dict[str, Any]
    targets: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    hooks: List[Dict[str, Any]] = field(default_factory=list)
    result: Dict[str, Any] = field(default_factory=dict)
    events: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """
        Converte o Manifest para sua representação em dicionário.

        O dicionário retornado é independente do estado interno: alterações
        no retorno não afetam o Manifest em memória.
        """
        return {
            "run": dict(self.run),
            "inputs": dict(self.inputs),
            "targets": {k: dict(v) for k, v in self.targets.items()},
            "hooks": [dict(h) for h in self.hooks],
            "result": dict(self.result),
            "events": [dict(e) for e in self.events],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResolutionManifest":
        """Reconstrói um Manifest a partir de `to_dict` (campos ausentes viram vazios)."""
        return cls(
            run=dict(data.get("run", {})),
            inputs=dict(data.get("inputs", {})),
            targets={k: dict(v) for k, v in (data.get("targets", {}) or {}).items()},
            hooks=[dict(h) for h in (data.get("hooks", []) or [])],
            result=dict(data.get("result", {}) or {}),
            events=[dict(e) for e in (data.get("events", []) or [])],
        )


def create_manifest(
    *,
    run_id: str,
    started_at: datetime,
    buildconf_version: str,
    platform: str,
    document_hash: str,
    base_hash: str,
) -> ResolutionManifest:
    """
    Cria o Manifest inicial de uma avaliação.

    ⚠️ Importante: esta função **não emite eventos implicitamente**.
    O Event Log inicia vazio.

    Args:
        run_id (str): Identificador único da avaliação.
        started_at (datetime): Timestamp de início.
        buildconf_version (str): Versão do Atlas BuildConf utilizada.
        platform (str): Plataforma de integração declarada no documento.
        document_hash (str): Hash do documento de build resolvido.
        base_hash (str): Hash da árvore base recebida do driver.

    Returns:
        ResolutionManifest: Manifest inicializado.
    """
    return ResolutionManifest(
        run={
            "run_id": run_id,
            "started_at": _iso(started_at),
            "buildconf_version": buildconf_version,
            "platform": platform,
        },
        inputs={
            "document_hash": document_hash,
            "base_hash": base_hash,
        },
    )


def add_event(
    manifest: ResolutionManifest,
    *,
    event_type: str,
    ts: datetime,
    target: Optional[str] = None,
    payload: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Adiciona um evento explícito ao Event Log do Manifest.

    Invariantes:
        - Cada chamada adiciona exatamente um evento
        - Eventos não são reordenados ou deduplicados
    """
    ev: Dict[str, Any] = {"event_type": event_type, "timestamp": _iso(ts)}
    if target is not None:
        ev["target"] = target
    if payload is not None:
        ev["payload"] = payload
    manifest.events.append(ev)


def target_resolved(
    manifest: ResolutionManifest,
    *,
    target: str,
    kind: str,
    ts: datetime,
    layers: List[str],
    value_hash: str,
) -> None:
    """Registra a resolução bem-sucedida de um target."""
    manifest.targets[target] = {
        "target": target,
        "kind": kind,
        "status": "resolved",
        "layers": list(layers),
        "value_hash": value_hash,
        "resolved_at": _iso(ts),
    }
    add_event(
        manifest,
        event_type="target_resolved",
        ts=ts,
        target=target,
        payload={"layers": list(layers)},
    )


def target_failed(
    manifest: ResolutionManifest,
    *,
    target: str,
    ts: datetime,
    error: Dict[str, Any],
) -> None:
    """Registra a falha de resolução de um target (payload de erro serializável)."""
    manifest.targets[target] = {
        "target": target,
        "status": "failed",
        "failed_at": _iso(ts),
        "error": dict(error),
    }
    add_event(manifest, event_type="target_failed", ts=ts, target=target, payload={"error": dict(error)})


def hook_applied(
    manifest: ResolutionManifest,
    *,
    ts: datetime,
    outcome: Dict[str, Any],
) -> None:
    """Registra o resultado de um hook pré-build."""
    manifest.hooks.append(dict(outcome))
    add_event(
        manifest,
        event_type="hook_applied",
        ts=ts,
        target=outcome.get("target"),
        payload={"status": outcome.get("status"), "dest": outcome.get("dest")},
    )


def evaluation_finished(
    manifest: ResolutionManifest,
    *,
    ts: datetime,
    resolved_hash: str,
    outputs: List[str],
    defaults: Dict[str, Any],
) -> None:
    """Registra o resumo final da avaliação."""
    manifest.result = {
        "resolved_hash": resolved_hash,
        "outputs": list(outputs),
        "defaults": dict(defaults),
        "finished_at": _iso(ts),
    }
    add_event(manifest, event_type="evaluation_finished", ts=ts, payload={"resolved_hash": resolved_hash})


def save_manifest(manifest: ResolutionManifest, path: Path) -> None:
    """Persiste o Manifest em JSON (chaves ordenadas, UTF-8)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(manifest.to_dict(), ensure_ascii=False, indent=2, sort_keys=True),
        encoding="utf-8",
    )


def load_manifest(path: Path) -> ResolutionManifest:
    """
    Carrega um Manifest persistido.

    Raises:
        FileNotFoundError: Se o arquivo não existir.
        json.JSONDecodeError: Em caso de JSON inválido.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return ResolutionManifest.from_dict(data)
