# src/atlas_buildconf/core/engine/__init__.py
"""
Engine do Atlas BuildConf.

Este pacote contém a implementação responsável por **planejar** e
**resolver** a configuração de cada target, além dos pós-processamentos
da configuração resolvida.

Componentes principais:
    - planner     → validação de targets e ordem determinística
    - engine      → Resolver fail-fast (FRAMEWORK → USER)
    - declarative → overrides declarativos do documento de build
    - framework   → defaults da camada FRAMEWORK
    - environment → ambiente efetivo do shell de desenvolvimento
    - outputs     → renomeação de outputs e par padrão (app, package)
    - evaluate    → driver de avaliação completa

Invariantes:
    - Cada override é invocado exatamente uma vez por avaliação
    - Camadas são aplicadas na ordem FRAMEWORK → USER
    - A mesma entrada produz sempre a mesma configuração resolvida
"""

from .declarative import DeclarativeOverride, compile_overrides, interpolate
from .engine import Resolver, resolve
from .environment import shell_environment
from .evaluate import Evaluation, evaluate
from .framework import default_framework_overrides
from .outputs import DefaultOutputs, rename_outputs, select_defaults
from .planner import TargetPlan, plan_resolution

__all__ = [
    "DeclarativeOverride",
    "compile_overrides",
    "interpolate",
    "Resolver",
    "resolve",
    "shell_environment",
    "Evaluation",
    "evaluate",
    "default_framework_overrides",
    "DefaultOutputs",
    "rename_outputs",
    "select_defaults",
    "TargetPlan",
    "plan_resolution",
]
