# src/atlas_buildconf/core/engine/environment.py
"""
Exportação do ambiente do shell interativo.

O valor resolvido do target `shell` carrega uma lista `env` de bindings:
    - `{"name": N, "value": V}` → literal escalar (booleanos viram `true`/`false`)
    - `{"name": N, "eval": EXPR}` → expressão avaliada na exportação

Expressões `eval` usam a sintaxe de `string.Template` (`$VAR`, `${VAR}`,
`$$` para `$` literal) e enxergam:
    - o ambiente base informado explicitamente (`base_env`)
    - `PWD`, igual à raiz do projeto quando não vier em `base_env`
    - os bindings exportados anteriormente na mesma lista

Decisões arquiteturais:
    - O ambiente do processo nunca é lido implicitamente
    - Bindings posteriores com o mesmo nome prevalecem
    - Variável indefinida em `eval` é erro de avaliação

Limites explícitos:
    - Não inicia subprocessos nem shells
"""

from __future__ import annotations

from string import Template
from typing import Any, Dict, Mapping, Optional

from atlas_buildconf.core.exceptions import ConfigurationError, EvaluationError
from atlas_buildconf.core.pipeline.shared import SharedContext
from atlas_buildconf.core.pipeline.types import ConfigValue


def _binding_error(index: int, entry: Any, message: str) -> ConfigurationError:
    return ConfigurationError(
        message=message,
        details={"target": "shell", "field": f"env[{index}]", "entry": repr(entry)},
        hint="Cada binding deve ter 'name' e exatamente um de 'value' ou 'eval'.",
    )


def _literal(index: int, entry: Dict[str, Any]) -> str:
    value = entry["value"]
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise _binding_error(index, entry, "Literal de ambiente deve ser string, número ou booleano")


def shell_environment(
    shell: ConfigValue,
    common: SharedContext,
    *,
    base_env: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Avalia a lista `env` do shell resolvido em um mapa exportável.

    Args:
        shell: Valor resolvido do target `shell`.
        common: Contexto compartilhado (fornece a raiz para `PWD`).
        base_env: Ambiente base explícito visível às expressões `eval`.

    Returns:
        Dict[str, str]: Variáveis exportadas, na ordem de declaração.

    Raises:
        ConfigurationError: Binding malformado.
        EvaluationError: Expressão `eval` com variável indefinida ou inválida.
    """
    scope: Dict[str, str] = dict(base_env or {})
    scope.setdefault("PWD", str(common.root))

    entries = shell.get("env") or []
    if not isinstance(entries, list):
        raise _binding_error(-1, entries, "Campo 'env' do shell deve ser uma lista")

    exported: Dict[str, str] = {}
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict) or not isinstance(entry.get("name"), str) or not entry["name"]:
            raise _binding_error(i, entry, "Binding de ambiente sem 'name'")
        if ("value" in entry) == ("eval" in entry):
            raise _binding_error(i, entry, "Binding deve declarar exatamente um de 'value' ou 'eval'")

        name = entry["name"]
        if "value" in entry:
            value = _literal(i, entry)
        else:
            try:
                value = Template(str(entry["eval"])).substitute(scope)
            except KeyError as exc:
                raise EvaluationError(
                    message=f"Variável indefinida na expressão de '{name}'",
                    details={"target": "shell", "name": name, "missing": exc.args[0]},
                    hint="Informe a variável em base_env ou declare-a antes na lista env.",
                ) from exc
            except ValueError as exc:
                raise EvaluationError(
                    message=f"Expressão inválida em '{name}'",
                    details={"target": "shell", "name": name, "eval": entry["eval"]},
                ) from exc

        exported[name] = value
        scope[name] = value

    return exported
