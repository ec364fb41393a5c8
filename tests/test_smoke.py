# tests/test_smoke.py
"""
Testes de sanidade estrutural (smoke tests) do Atlas BuildConf.

Este módulo contém testes mínimos cujo único objetivo é garantir que:
- o ambiente de testes (pytest) está funcional
- o pacote raiz pode ser importado e expõe sua versão

Invariantes:
    - Estes testes devem sempre passar em um setup correto
    - Não dependem de filesystem ou I/O

Limites explícitos:
    - Não testar lógica de resolução
    - Não acumular asserts funcionais
"""


def test_smoke():
    """Smoke test mínimo do repositório."""
    assert True


def test_package_exposes_version():
    import atlas_buildconf

    assert atlas_buildconf.__version__ == "0.1.0"
    assert callable(atlas_buildconf.evaluate)
