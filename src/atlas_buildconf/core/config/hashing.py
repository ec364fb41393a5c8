# src/atlas_buildconf/core/config/hashing.py
"""
Hashing canônico de configuração do Atlas BuildConf.

Este módulo gera a identidade estrutural de documentos, árvores base e
configurações resolvidas. O hash é a prova operacional do determinismo da
resolução: a mesma entrada precisa produzir exatamente os mesmos bytes
canônicos e, portanto, o mesmo hash.

Política de hashing (v1):
    - Serialização JSON canônica (chaves ordenadas, separadores compactos)
    - Codificação UTF-8
    - SHA-256

Invariantes:
    - Configurações estruturalmente equivalentes produzem o mesmo hash
    - O valor gerado é sempre uma string hexadecimal de 64 caracteres

Limites explícitos:
    - Não valida semântica
    - Não persiste o hash
"""


import json
import hashlib
from typing import Dict, Any


def canonical_json(config: Dict[str, Any]) -> str:
    """
    Serializa a configuração em JSON canônico.

    Valores não nativos de JSON (ex.: `pathlib.Path`) são convertidos via
    `str`, preservando o determinismo.

    Raises:
        TypeError: Se o objeto fornecido não for um dicionário.
    """
    if not isinstance(config, dict):
        raise TypeError(
            f"Config para hashing deve ser dict, recebido: {type(config).__name__}"
        )

    return json.dumps(
        config,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )


def compute_config_hash(config: Dict[str, Any]) -> str:
    """
    Gera um hash SHA-256 determinístico da configuração.

    Args:
        config (Dict[str, Any]): Documento, árvore base ou configuração resolvida.

    Returns:
        str: Hash SHA-256 hexadecimal da configuração.

    Raises:
        TypeError: Se o objeto fornecido não for um dicionário.
    """
    return hashlib.sha256(canonical_json(config).encode("utf-8")).hexdigest()
