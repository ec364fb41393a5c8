# src/atlas_buildconf/core/config/__init__.py

"""
Camada de configuração do Atlas BuildConf.

Este pacote reúne tudo o que é *dado* no processo de avaliação:
    - carregamento do documento de build (YAML/JSON, base + local)
    - validação estrutural do documento (`BuildDocument`)
    - políticas de merge (documento e patches de override)
    - hashing canônico para rastreabilidade e verificação de determinismo

Princípios fundamentais:
    - Configuração não contém lógica de avaliação
    - Overrides são sempre explícitos
    - A mesma entrada sempre produz a mesma configuração final

Limites explícitos:
    - Não executa funções de override
    - Não executa hooks pré-build
"""

from .document import BuildDocument, LinkSpec, parse_document
from .hashing import canonical_json, compute_config_hash
from .loader import load_document, load_raw_document
from .merge import deep_merge, merge_patch

__all__ = [
    "BuildDocument",
    "LinkSpec",
    "parse_document",
    "canonical_json",
    "compute_config_hash",
    "load_document",
    "load_raw_document",
    "deep_merge",
    "merge_patch",
]
