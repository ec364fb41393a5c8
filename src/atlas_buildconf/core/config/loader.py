# src/atlas_buildconf/core/config/loader.py
"""
Loader canônico do documento de build do Atlas BuildConf.

O documento efetivo é resolvido a partir de:
    - um documento base (obrigatório)
    - um documento local de overrides (opcional)

Responsabilidades do módulo:
    - Carregar arquivos em YAML ou JSON
    - Validar o tipo raiz do conteúdo
    - Resolver o documento final via deep-merge determinístico
    - Converter o resultado em `BuildDocument` validado

Invariantes:
    - O documento base é obrigatório
    - O documento local nunca muta o base
    - A mesma entrada sempre produz o mesmo documento final

Limites explícitos:
    - Não avalia overrides
    - Não executa hooks
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union
import json

import yaml  # PyYAML

from .document import BuildDocument, parse_document
from .merge import deep_merge
from .errors import (
    DocumentNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)


def _load_file(path: Path) -> Dict[str, Any]:
    """
    Carrega um arquivo de configuração e valida sua estrutura básica.

    Decisões arquiteturais:
        - Arquivos vazios são interpretados como dicionários vazios
        - Formatos não suportados geram erro explícito

    Raises:
        DocumentNotFoundError: Se o arquivo não existir.
        UnsupportedConfigFormatError: Se o formato do arquivo não for suportado.
        InvalidConfigRootTypeError: Se o conteúdo raiz não for um dicionário.
    """
    if not path.exists():
        raise DocumentNotFoundError(f"Documento de build não encontrado: {path}")

    suffix = path.suffix.lower()

    if suffix in {".yaml", ".yml"}:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

    elif suffix == ".json":
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)

    else:
        raise UnsupportedConfigFormatError(f"Formato não suportado: {path.suffix}")

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Config root deve ser dict, recebido: {type(data).__name__}"
        )

    return data


def load_raw_document(
    path: Union[str, Path],
    local_path: Optional[Union[str, Path]] = None,
) -> Dict[str, Any]:
    """
    Carrega o documento base e aplica o documento local, quando existir.

    O documento local é opcional: se o caminho for informado mas o arquivo
    não existir, o documento base é retornado sem alteração.

    Returns:
        Dict[str, Any]: Documento bruto resolvido.
    """
    effective = _load_file(Path(path))

    if local_path is not None:
        local_file = Path(local_path)
        if local_file.exists():
            effective = deep_merge(effective, _load_file(local_file))

    return effective


def load_document(
    path: Union[str, Path],
    local_path: Optional[Union[str, Path]] = None,
) -> BuildDocument:
    """
    Carrega, resolve e valida o documento de build.

    Args:
        path: Caminho do documento base (YAML ou JSON).
        local_path: Caminho opcional do documento local de overrides.

    Returns:
        BuildDocument: Documento validado.

    Raises:
        DocumentNotFoundError: Se o documento base não existir.
        UnsupportedConfigFormatError: Se o formato do arquivo não for suportado.
        InvalidConfigRootTypeError: Se o conteúdo não for um dicionário.
        ConfigTypeConflictError: Se ocorrer conflito estrutural durante o merge.
        ConfigurationError: Se o documento resolvido for estruturalmente inválido.
    """
    return parse_document(load_raw_document(path, local_path))
