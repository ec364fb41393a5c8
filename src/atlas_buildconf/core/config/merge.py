# src/atlas_buildconf/core/config/merge.py
"""
Utilitários canônicos de merge do Atlas BuildConf.

Este módulo implementa as duas políticas de merge usadas pelo framework,
cada uma com um escopo bem delimitado:

1. `deep_merge` — resolução do *documento* declarativo de build
   (documento base + documento local opcional):
       - dict → merge recursivo por chave
       - list → sobrescrita total
       - escalar → sobrescrita direta
       - conflito de tipos → erro estrutural explícito

2. `merge_patch` — composição de *camadas de override* sobre o valor de
   configuração de um target:
       - list → append (itens anteriores preservados, novos ao final)
       - dict → merge recursivo com a mesma política
       - escalar → sobrescrita direta
       - formato incompatível (list vs não-list, dict vs não-dict) → erro

O append em listas é o que permite que camadas independentes (framework e
usuário) contribuam para o mesmo campo sem que uma descarte a outra.

Princípios fundamentais:
    - O merge é determinístico e puramente funcional
    - Nenhum input é mutado durante o processo
    - Não existem heurísticas implícitas

Limites explícitos:
    - Não carrega arquivos
    - Não avalia funções de override
    - Não realiza coerção de tipos
"""

from copy import deepcopy
from typing import Any, Dict, Optional

from atlas_buildconf.core.errors import malformed_patch

from .errors import ConfigTypeConflictError


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Realiza um deep-merge determinístico entre dois documentos de configuração.

    Política de merge (v1):
        - dict + dict → merge recursivo por chave
        - list        → sobrescrita total (sem merge elemento a elemento)
        - escalar     → sobrescrita direta pelo override
        - conflito de tipos → erro estrutural explícito

    Invariantes:
        - A estrutura retornada é sempre um novo dicionário
        - Chaves não presentes no override são preservadas da base
        - O mesmo par (base, override) sempre produz o mesmo resultado

    Args:
        base (Dict[str, Any]): Documento base.
        override (Dict[str, Any]): Documento local de overrides.

    Returns:
        Dict[str, Any]: Novo documento resultante do deep-merge.

    Raises:
        ConfigTypeConflictError: Se ocorrer conflito de tipo entre base e override.
    """

    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"Deep-merge requer dicts no nível raiz, recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )

    result: Dict[str, Any] = deepcopy(base)

    for key, override_value in override.items():
        if key not in result:
            result[key] = deepcopy(override_value)
            continue

        base_value = result[key]

        # dict -> merge recursivo
        if isinstance(base_value, dict) and isinstance(override_value, dict):
            result[key] = deep_merge(base_value, override_value)
            continue

        # list -> sobrescrita total
        if isinstance(override_value, list):
            result[key] = deepcopy(override_value)
            continue

        if type(base_value) is not type(override_value):
            raise ConfigTypeConflictError(
                f"Conflito de tipo na chave '{key}': "
                f"{type(base_value).__name__} vs {type(override_value).__name__}"
            )

        result[key] = deepcopy(override_value)

    return result


def _shape(value: Any) -> str:
    if isinstance(value, list):
        return "list"
    if isinstance(value, dict):
        return "dict"
    return "scalar"


def merge_patch(
    previous: Dict[str, Any],
    patch: Dict[str, Any],
    *,
    target: Optional[str] = None,
    _prefix: str = "",
) -> Dict[str, Any]:
    """
    Mescla um Patch sobre o valor anterior de um target.

    Política (v1):
        - campo lista em `previous` → itens do patch são anexados em ordem
        - campo dict em `previous` → merge recursivo com a mesma política
        - campo escalar (ou None) em `previous` → sobrescrita pelo patch
        - campo ausente em `previous` → copiado do patch
        - lista recebendo não-lista, dict recebendo não-dict, ou escalar
          recebendo lista/dict → ConfigurationError

    Invariantes:
        - `previous` e `patch` nunca são mutados
        - Itens anteriores de listas mantêm posição e ordem
        - Um patch vazio produz uma cópia idêntica de `previous`

    Args:
        previous (Dict[str, Any]): Valor produzido pela camada anterior.
        patch (Dict[str, Any]): Patch retornado pela função de override.
        target (Optional[str]): Target em resolução (apenas para diagnóstico).

    Returns:
        Dict[str, Any]: Novo valor de configuração do target.

    Raises:
        ConfigurationError: Se o patch não for dict ou tiver formato incompatível.
    """
    if not isinstance(patch, dict):
        raise malformed_patch(
            target=target,
            field=_prefix.rstrip(".") or None,
            expected="dict",
            received=type(patch).__name__,
        )
    if not isinstance(previous, dict):
        raise malformed_patch(
            target=target,
            field=_prefix.rstrip(".") or None,
            expected="dict",
            received=type(previous).__name__,
        )

    result: Dict[str, Any] = deepcopy(previous)

    for key, value in patch.items():
        field = f"{_prefix}{key}"
        current = result.get(key)

        if key not in result or current is None:
            result[key] = deepcopy(value)
            continue

        if isinstance(current, list):
            if not isinstance(value, list):
                raise malformed_patch(
                    target=target, field=field, expected="list", received=_shape(value)
                )
            result[key] = current + deepcopy(value)
            continue

        if isinstance(current, dict):
            if not isinstance(value, dict):
                raise malformed_patch(
                    target=target, field=field, expected="dict", received=_shape(value)
                )
            result[key] = merge_patch(current, value, target=target, _prefix=f"{field}.")
            continue

        if isinstance(value, (list, dict)):
            raise malformed_patch(
                target=target, field=field, expected="scalar", received=_shape(value)
            )

        result[key] = deepcopy(value)

    return result
