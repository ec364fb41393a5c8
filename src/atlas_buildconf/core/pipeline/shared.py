# src/atlas_buildconf/core/pipeline/shared.py
"""
Contexto compartilhado (somente leitura) das funções de override.

Este módulo define o `SharedContext`, o objeto `common` recebido por toda
função de override. Ele concentra fatos de ambiente que não mudam durante
a avaliação: raiz do projeto, handle do toolchain de compilação, conjunto
de pacotes resolvido e diretório raiz dos artefatos.

Decisões arquiteturais:
    - Construído explicitamente e passado por referência: nunca estado global
    - Mapas internos são `MappingProxyType`, impedindo mutação por overrides
    - A ausência de um fato é erro de avaliação (`EvaluationError`)

Invariantes:
    - O contexto é imutável durante toda a avaliação
    - `lookup` é determinístico para o mesmo caminho

Limites explícitos:
    - Não executa overrides
    - Não acessa o filesystem
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

from atlas_buildconf.core.exceptions import EvaluationError


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


def thaw(value: Any) -> Any:
    """Inverso de `_freeze`: mapas viram `dict` e sequências viram `list`."""
    if isinstance(value, Mapping):
        return {k: thaw(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [thaw(v) for v in value]
    return value


@dataclass(frozen=True)
class SharedContext:
    """
    Fatos de ambiente compartilhados por todas as funções de override.

    Campos:
        - root: raiz do projeto (base dos links pré-build)
        - toolchain: handles do toolchain de compilação (ex.: `cc`, `cc_lib`)
        - packages: conjunto de pacotes resolvido pelo driver
        - build_root: diretório raiz dos diretórios de trabalho dos artefatos
          (padrão: `root / "build"`)
        - facts: fatos adicionais livres

    Exemplo:
        >>> common = SharedContext(root=Path("/src/helix"), toolchain={"cc_lib": "gcc-lib"})
        >>> common.lookup("toolchain.cc_lib")
        'gcc-lib'
    """

    root: Path
    toolchain: Mapping[str, Any] = field(default_factory=dict)
    packages: Mapping[str, Any] = field(default_factory=dict)
    build_root: Optional[Path] = None
    facts: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "root", Path(self.root))
        build_root = self.build_root if self.build_root is not None else self.root / "build"
        object.__setattr__(self, "build_root", Path(build_root))
        for name in ("toolchain", "packages", "facts"):
            object.__setattr__(self, name, _freeze(dict(getattr(self, name) or {})))

    def artifact_dir(self, target: str) -> Path:
        """Diretório de trabalho do artefato, onde os links pré-build são criados."""
        return self.build_root / target

    def lookup(self, path: str) -> Any:
        """
        Resolve um caminho pontilhado (ex.: `toolchain.cc_lib`, `root`).

        Raises:
            EvaluationError: Se algum segmento do caminho não existir.
        """
        parts = [p for p in str(path).split(".") if p]
        if not parts:
            raise EvaluationError(
                message="Referência vazia ao contexto compartilhado",
                details={"path": path},
            )

        head, rest = parts[0], parts[1:]
        if head not in ("root", "build_root", "toolchain", "packages", "facts"):
            raise EvaluationError(
                message=f"Fato desconhecido no contexto compartilhado: '{head}'",
                details={"path": path, "missing": head},
                hint="Fatos disponíveis: root, build_root, toolchain, packages, facts.",
            )

        current: Any = getattr(self, head)
        walked = head
        for part in rest:
            if not isinstance(current, Mapping) or part not in current:
                raise EvaluationError(
                    message=f"Contexto compartilhado não possui '{walked}.{part}'",
                    details={"path": path, "missing": f"{walked}.{part}"},
                    hint="Verifique os fatos fornecidos pelo driver externo.",
                )
            current = current[part]
            walked = f"{walked}.{part}"
        return current
