"""
Hooks pré-build do Atlas BuildConf.

Hooks são efeitos colaterais explícitos (hoje: links simbólicos) que
preparam o diretório de trabalho de um artefato depois da resolução e
antes do driver externo iniciar a compilação. Nunca fazem parte do merge.
"""

from .link import HookOutcome, LinkStatus, PreBuildHook, SymlinkHook
from .runner import hooks_from_document, run_pre_build_hooks, validate_hook_targets

__all__ = [
    "HookOutcome",
    "LinkStatus",
    "PreBuildHook",
    "SymlinkHook",
    "hooks_from_document",
    "run_pre_build_hooks",
    "validate_hook_targets",
]
