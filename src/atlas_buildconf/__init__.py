# src/atlas_buildconf/__init__.py
"""
Atlas BuildConf: composição em camadas de overrides para configurações de build.

Este pacote raiz define o namespace público do Atlas BuildConf. O driver
externo de build produz uma árvore base (um valor de configuração por
target) e o BuildConf aplica, target a target, as camadas de override
FRAMEWORK → USER, devolvendo uma configuração resolvida, determinística
e rastreável.

Princípios centrais:
    - Funções de override são puras: leem `common` e devolvem um Patch
    - Listas são estendidas, escalares substituídos, ausentes copiados
    - A resolução é fail-fast: nenhuma configuração parcial é publicada
    - Efeitos colaterais (hooks) acontecem depois da resolução, nunca durante

Arquitetura em alto nível:
    - core.config       → documento de build, loader, merge e hashing
    - core.pipeline     → tipos, SharedContext, EvaluationContext e registry
    - core.engine       → planejamento, resolução, ambiente do shell e outputs
    - core.hooks        → hooks pré-build (links simbólicos)
    - core.traceability → Manifest e Event Log da avaliação

Limites explícitos:
    - Não baixa fontes, não resolve dependências e não invoca compiladores
    - Não executa o shell de desenvolvimento
"""

__version__ = "0.1.0"

from .core.config import BuildDocument, load_document, parse_document
from .core.engine import Evaluation, Resolver, evaluate, resolve, shell_environment
from .core.pipeline import (
    ConfigurationTree,
    EvaluationContext,
    OverrideLayer,
    OverrideRegistry,
    ResolvedConfiguration,
    SharedContext,
)

__all__ = [
    "__version__",
    "BuildDocument",
    "load_document",
    "parse_document",
    "Evaluation",
    "Resolver",
    "evaluate",
    "resolve",
    "shell_environment",
    "ConfigurationTree",
    "EvaluationContext",
    "OverrideLayer",
    "OverrideRegistry",
    "ResolvedConfiguration",
    "SharedContext",
]
