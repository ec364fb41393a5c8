# src/atlas_buildconf/core/hooks/link.py
"""
Hook pré-build de link simbólico.

Alguns artefatos esperam encontrar recursos externos no diretório de
trabalho antes da compilação (ex.: o diretório `runtime` para a feature
`embed_runtime`, ou arquivos `languages.toml`/`theme.toml`). O
`SymlinkHook` cria esse link depois da resolução e antes do driver
externo iniciar a compilação do artefato.

Política (v1):
    - dest ausente                           → cria o link (`created`)
    - dest já é link para a mesma fonte      → nada a fazer (`unchanged`)
    - dest é link para outra fonte           → SideEffectError
    - dest existe e não é link               → SideEffectError
    - erro do sistema operacional            → SideEffectError
    - fonte ausente, política `fail`         → SideEffectError
    - fonte ausente, política `skip`         → nada a fazer (`skipped`) + warning

Invariantes:
    - Reexecutar o hook não altera o estado do filesystem (idempotência)
    - `source` relativo é resolvido contra `common.root`
    - `dest` relativo é resolvido contra `common.artifact_dir(target)`
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Tuple, runtime_checkable

from atlas_buildconf.core.errors import link_failed
from atlas_buildconf.core.exceptions import SideEffectError
from atlas_buildconf.core.pipeline.context import EvaluationContext
from atlas_buildconf.core.pipeline.shared import SharedContext


class LinkStatus(str, Enum):
    CREATED = "created"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class HookOutcome:
    """Resultado serializável de um hook pré-build."""

    target: str
    source: str
    dest: str
    status: LinkStatus

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target": self.target,
            "source": self.source,
            "dest": self.dest,
            "status": self.status.value,
        }


@runtime_checkable
class PreBuildHook(Protocol):
    """
    Contrato de um hook pré-build.

    Atributos obrigatórios:
        - target: artefato cujo diretório de trabalho o hook prepara

    Decisões arquiteturais:
        - Hooks rodam após a resolução completa, nunca durante o merge
        - Hooks devem ser idempotentes
        - Falhas são `SideEffectError` e abortam a avaliação
    """
    target: str

    def apply(self, common: SharedContext, ctx: Optional[EvaluationContext] = None) -> HookOutcome:
        ...


def _normalized(path: Path) -> Path:
    return Path(os.path.normpath(str(path)))


@dataclass(frozen=True)
class SymlinkHook:
    """Link simbólico idempotente de um recurso externo no diretório do artefato."""

    target: str
    source: str
    dest: str
    missing_source: str = "fail"

    def paths(self, common: SharedContext) -> Tuple[Path, Path]:
        source = Path(self.source)
        if not source.is_absolute():
            source = common.root / source
        dest = Path(self.dest)
        if not dest.is_absolute():
            dest = common.artifact_dir(self.target) / dest
        return _normalized(source.absolute()), _normalized(dest.absolute())

    def _fail(self, source: Path, dest: Path, reason: str) -> SideEffectError:
        return link_failed(target=self.target, source=str(source), dest=str(dest), reason=reason)

    def _link(self, source: Path, dest: Path, ctx: Optional[EvaluationContext]) -> LinkStatus:
        if not source.exists():
            if self.missing_source == "skip":
                if ctx is not None:
                    ctx.add_warning(target=self.target, message=f"fonte ausente, link pulado: {source}")
                return LinkStatus.SKIPPED
            raise self._fail(source, dest, "source_missing")

        if dest.is_symlink():
            current = Path(os.readlink(dest))
            if not current.is_absolute():
                current = dest.parent / current
            if _normalized(current) == source:
                return LinkStatus.UNCHANGED
            raise self._fail(source, dest, f"conflicting_symlink -> {current}")

        if dest.exists():
            raise self._fail(source, dest, "conflicting_path")

        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.symlink_to(source, target_is_directory=source.is_dir())
        return LinkStatus.CREATED

    def apply(self, common: SharedContext, ctx: Optional[EvaluationContext] = None) -> HookOutcome:
        source, dest = self.paths(common)

        # inspeção e criação do link compartilham o mesmo tratamento de OSError
        try:
            status = self._link(source, dest, ctx)
        except OSError as exc:
            raise self._fail(source, dest, f"os_error: {exc.strerror or exc}") from exc

        return HookOutcome(target=self.target, source=str(source), dest=str(dest), status=status)
