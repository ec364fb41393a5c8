# src/atlas_buildconf/core/config/document.py
"""
Documento declarativo de build do Atlas BuildConf.

Este módulo define o `BuildDocument`, a forma validada do documento
estático que descreve como um projeto é construído sobre o framework
externo de integração de build.

O documento declara:
    - platform        → identificador da plataforma de integração (obrigatório)
    - rename_outputs  → renomeação de outputs (nome antigo → nome novo)
    - default_outputs → par (app, package) selecionado por padrão
    - overrides       → patches declarativos por target (camada do usuário)
    - hooks           → hooks pré-build de link por artefato
    - hook_policy     → política explícita para fonte ausente (fail | skip)

Princípios fundamentais:
    - O documento é apenas dados: nenhuma função é executada aqui
    - Toda inconsistência estrutural é erro de configuração fatal
    - Hooks com múltiplas fontes são expandidos em links individuais

Limites explícitos:
    - Não lê arquivos (responsabilidade de `loader`)
    - Não avalia referências ao contexto compartilhado
    - Não conhece a árvore base do driver
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any, Dict, List, Optional

from atlas_buildconf.core.exceptions import ConfigurationError

from .hashing import compute_config_hash


MISSING_SOURCE_POLICIES = ("fail", "skip")
DEFAULT_OUTPUT_KEYS = ("app", "package")


@dataclass(frozen=True)
class LinkSpec:
    """Link declarado: `source` relativo à raiz do projeto, `dest` relativo ao artefato."""

    source: str
    dest: str

    def to_dict(self) -> Dict[str, str]:
        return {"source": self.source, "dest": self.dest}


@dataclass(frozen=True)
class BuildDocument:
    """
    Documento de build validado.

    Invariantes:
        - `platform` é uma string não vazia
        - `rename_outputs` é injetivo (sem dois outputs com o mesmo nome novo)
        - Cada patch em `overrides` é um dicionário
        - Cada hook é um `LinkSpec` com source e dest não vazios
        - `missing_source` pertence a `MISSING_SOURCE_POLICIES`
    """

    platform: str
    rename_outputs: Dict[str, str] = field(default_factory=dict)
    default_app: Optional[str] = None
    default_package: Optional[str] = None
    overrides: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    hooks: Dict[str, List[LinkSpec]] = field(default_factory=dict)
    missing_source: str = "fail"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "platform": self.platform,
            "rename_outputs": dict(self.rename_outputs),
            "default_outputs": {"app": self.default_app, "package": self.default_package},
            "overrides": {k: dict(v) for k, v in self.overrides.items()},
            "hooks": {k: [s.to_dict() for s in v] for k, v in self.hooks.items()},
            "hook_policy": {"missing_source": self.missing_source},
        }

    def document_hash(self) -> str:
        return compute_config_hash(self.to_dict())


def _invalid(message: str, **details: Any) -> ConfigurationError:
    return ConfigurationError(
        message=message,
        details=details,
        hint="Corrija o documento de build antes de reexecutar a avaliação.",
    )


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise _invalid(
            f"Seção '{key}' deve ser um mapa",
            section=key,
            received=type(value).__name__,
        )
    return value


def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _parse_renames(data: Dict[str, Any]) -> Dict[str, str]:
    renames = _section(data, "rename_outputs")
    seen: Dict[str, str] = {}
    for old, new in renames.items():
        if not _non_empty_str(old) or not _non_empty_str(new):
            raise _invalid("Renomeação de output inválida", old=old, new=new)
        if new in seen:
            raise _invalid(
                "Dois outputs renomeados para o mesmo nome",
                new=new,
                sources=sorted([seen[new], old]),
            )
        seen[new] = old
    return dict(renames)


def _parse_link(target: str, index: int, entry: Any) -> List[LinkSpec]:
    if not isinstance(entry, dict) or set(entry) != {"link"} or not isinstance(entry["link"], dict):
        raise _invalid("Hook deve ter a forma {link: {...}}", target=target, index=index)

    link = entry["link"]
    if set(link) == {"source", "dest"}:
        if not _non_empty_str(link["source"]) or not _non_empty_str(link["dest"]):
            raise _invalid("Link requer source e dest não vazios", target=target, index=index)
        return [LinkSpec(source=link["source"], dest=link["dest"])]

    if set(link) == {"sources", "into"}:
        sources = link["sources"]
        into = link["into"]
        if (
            not isinstance(sources, list)
            or not sources
            or not all(_non_empty_str(s) for s in sources)
            or not _non_empty_str(into)
        ):
            raise _invalid("Link requer lista de sources e into não vazios", target=target, index=index)
        return [
            LinkSpec(source=s, dest=str(PurePosixPath(into) / PurePosixPath(s).name))
            for s in sources
        ]

    raise _invalid(
        "Link deve declarar source+dest ou sources+into",
        target=target,
        index=index,
        keys=sorted(link),
    )


def _parse_hooks(data: Dict[str, Any]) -> Dict[str, List[LinkSpec]]:
    hooks: Dict[str, List[LinkSpec]] = {}
    for target, entries in _section(data, "hooks").items():
        if not _non_empty_str(target):
            raise _invalid("Target de hook inválido", target=target)
        if not isinstance(entries, list):
            raise _invalid("Hooks de um target devem ser uma lista", target=target)
        specs: List[LinkSpec] = []
        for i, entry in enumerate(entries):
            specs.extend(_parse_link(target, i, entry))
        hooks[target] = specs
    return hooks


def parse_document(data: Dict[str, Any]) -> BuildDocument:
    """
    Valida e converte um documento bruto (dict) em `BuildDocument`.

    Args:
        data (Dict[str, Any]): Documento já carregado (YAML/JSON) e resolvido.

    Returns:
        BuildDocument: Documento validado.

    Raises:
        ConfigurationError: Para qualquer inconsistência estrutural.
    """
    if not isinstance(data, dict):
        raise _invalid("Documento de build deve ser um mapa", received=type(data).__name__)

    platform = data.get("platform")
    if not _non_empty_str(platform):
        raise _invalid("Campo 'platform' é obrigatório", received=platform)

    defaults = _section(data, "default_outputs")
    unknown = sorted(set(defaults) - set(DEFAULT_OUTPUT_KEYS))
    if unknown:
        raise _invalid("Chaves desconhecidas em default_outputs", unknown=unknown)
    for key in DEFAULT_OUTPUT_KEYS:
        value = defaults.get(key)
        if value is not None and not _non_empty_str(value):
            raise _invalid(f"default_outputs.{key} deve ser string", received=value)

    overrides = _section(data, "overrides")
    for target, patch in overrides.items():
        if not _non_empty_str(target):
            raise _invalid("Target de override inválido", target=target)
        if not isinstance(patch, dict):
            raise _invalid(
                "Patch declarativo deve ser um mapa",
                target=target,
                received=type(patch).__name__,
            )

    policy = _section(data, "hook_policy").get("missing_source", "fail")
    if policy not in MISSING_SOURCE_POLICIES:
        raise _invalid(
            "Política missing_source desconhecida",
            received=policy,
            allowed=list(MISSING_SOURCE_POLICIES),
        )

    return BuildDocument(
        platform=platform,
        rename_outputs=_parse_renames(data),
        default_app=defaults.get("app"),
        default_package=defaults.get("package"),
        overrides={t: dict(p) for t, p in overrides.items()},
        hooks=_parse_hooks(data),
        missing_source=policy,
    )
