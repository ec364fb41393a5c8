# src/atlas_buildconf/core/config/errors.py
"""
Exceções canônicas de carregamento do documento de configuração.

Este módulo define a hierarquia de exceções utilizadas durante a leitura
e a resolução estrutural do documento declarativo de build (arquivo base
mais overrides locais opcionais).

As exceções aqui definidas representam **violações estruturais do
arquivo**, e não falhas de avaliação de overrides ou de hooks, que vivem
em `atlas_buildconf.core.exceptions`.

Invariantes:
    - Todas as exceções de carregamento herdam de `ConfigError`
    - Nenhuma exceção representa erro de avaliação de target

Limites explícitos:
    - Não executa resolução de overrides
    - Não realiza fallback ou recovery
"""


class ConfigError(Exception):
    """
    Exceção base para erros de carregamento do documento de configuração.

    Esta hierarquia permite:
        - captura genérica de erros de leitura do documento
        - distinção clara entre falhas de arquivo e falhas de avaliação
    """


class DocumentNotFoundError(ConfigError):
    """
    Exceção levantada quando o documento base não é encontrado no
    caminho especificado.

    Decisões arquiteturais:
        - O documento base é obrigatório
        - O documento local de overrides é opcional e nunca gera este erro
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Exceção levantada quando o formato do arquivo não é suportado.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)

    Limites explícitos:
        - Não tenta inferir formato por conteúdo
    """


class InvalidConfigRootTypeError(ConfigError):
    """
    Exceção levantada quando o conteúdo raiz do documento não é um
    dicionário (`dict`).
    """


class ConfigTypeConflictError(ConfigError):
    """
    Exceção levantada quando ocorre conflito de tipos durante o deep-merge
    do documento base com o documento local.

    Exemplo de conflito:
        - base:  {"default_outputs": {"app": "hx"}}
        - local: {"default_outputs": "hx"}

    Invariantes:
        - Nenhum merge parcial é produzido em caso de conflito
    """
