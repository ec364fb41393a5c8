# src/atlas_buildconf/core/engine/outputs.py
"""
Outputs publicados para o driver externo.

Após a resolução, os artefatos podem ser publicados sob outros nomes
(`rename_outputs`, ex.: `helix-term` → `helix`) e um par padrão
(app, package) é selecionado.

Invariantes:
    - Apenas artefatos podem ser renomeados (`shell` e `build` são reservados)
    - A renomeação é injetiva: nenhum output sobrescreve outro
    - O package padrão, quando declarado, nomeia um output existente
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from atlas_buildconf.core.exceptions import ConfigurationError
from atlas_buildconf.core.pipeline.types import (
    ConfigValue,
    ResolvedConfiguration,
    TargetKind,
    target_kind,
)


@dataclass(frozen=True)
class DefaultOutputs:
    """Executável padrão (`app`) e pacote padrão (`package`)."""

    app: Optional[str] = None
    package: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"app": self.app, "package": self.package}


def rename_outputs(
    resolved: ResolvedConfiguration,
    mapping: Mapping[str, str],
) -> ResolvedConfiguration:
    """
    Publica a configuração resolvida com artefatos renomeados.

    Raises:
        ConfigurationError: Nome de origem inexistente, target reservado ou colisão.
    """
    unknown = sorted(old for old in mapping if old not in resolved)
    if unknown:
        raise ConfigurationError(
            message="Renomeação referencia output inexistente",
            details={"unknown": unknown, "known": resolved.targets()},
        )

    reserved = sorted(
        name
        for pair in mapping.items()
        for name in pair
        if target_kind(name) is not TargetKind.ARTIFACT
    )
    if reserved:
        raise ConfigurationError(
            message="Targets reservados não podem ser renomeados",
            details={"reserved": reserved},
        )

    outputs: Dict[str, ConfigValue] = {}
    for target in resolved:
        name = mapping.get(target, target)
        if name in outputs:
            raise ConfigurationError(
                message=f"Renomeação produz output duplicado: '{name}'",
                details={"output": name, "source": target},
            )
        outputs[name] = resolved[target]

    return ResolvedConfiguration(outputs)


def select_defaults(
    outputs: ResolvedConfiguration,
    *,
    app: Optional[str] = None,
    package: Optional[str] = None,
) -> DefaultOutputs:
    """
    Seleciona o par padrão (app, package).

    O `app` nomeia um executável produzido por algum artefato e não é
    verificado contra a árvore; o `package` precisa ser um output.

    Raises:
        ConfigurationError: Se `package` não for um output publicado.
    """
    if package is not None and package not in outputs:
        raise ConfigurationError(
            message=f"Package padrão '{package}' não é um output publicado",
            details={"package": package, "outputs": outputs.targets()},
            hint="Use o nome após a renomeação de outputs.",
        )
    return DefaultOutputs(app=app, package=package)
