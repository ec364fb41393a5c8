# tests/conftest.py
"""
Fixtures compartilhados para testes do Atlas BuildConf.

Este módulo define fixtures reutilizáveis que fornecem:
- uma árvore base mínima e determinística (artefatos, shell e build)
- um contexto compartilhado (`common`) com toolchain e pacotes fixos
- um contexto de avaliação controlado (EvaluationContext)
- documentos de build em YAML semelhantes ao uso real do projeto

O objetivo destas fixtures é permitir testes do core
(config, pipeline, engine, hooks e traceability) sem depender de:
- um driver externo de build real
- variáveis de ambiente do processo
- toolchains instalados na máquina

Decisões arquiteturais:
    - Fixtures são mantidas simples e explícitas
    - Dados retornados são determinísticos e isolados
    - A raiz do projeto vive sempre em `tmp_path`
    - Imports do core são realizados de forma lazy para
      melhorar a clareza de erros durante falhas

Invariantes:
    - Nenhuma fixture executa resolução ou hooks
    - Nenhuma fixture escreve fora de `tmp_path`
    - Cada teste recebe cópias novas dos dados

Limites explícitos:
    - Não substituir testes de integração
    - Não representar necessariamente um projeto real completo
"""

import pytest
from datetime import datetime, timezone


# =====================================================
# Documento de build
# =====================================================

@pytest.fixture
def helix_document_yaml() -> str:
    """
    Documento de build em YAML semelhante ao projeto real (editor modal em Rust).

    Declara:
        - plataforma de integração `crate2nix`
        - renomeação `helix-term → helix` e defaults (app=hx, package=helix)
        - overrides declarativos para artefato, shell e build
        - hooks de link para `helix-core` (runtime) e `helix-view` (toml)

    Decisões arquiteturais:
        - Documento fornecido como string para que cada teste decida onde gravá-lo
        - Referências ao contexto compartilhado usam `${common.<caminho>}`
        - Expressões `eval` do shell usam `$VAR` e só são avaliadas na exportação

    Usado por:
        - Testes do loader e do parser de documento
        - Testes do driver de avaliação e e2e
    """
    return """
platform: crate2nix

rename_outputs:
  helix-term: helix

default_outputs:
  app: hx
  package: helix

overrides:
  helix-term:
    buildInputs: ["${common.toolchain.cc_lib}"]
  shell:
    packages: ["${common.packages.lld_10}", "${common.packages.lldb}"]
    env:
      - {name: HELIX_RUNTIME, eval: "$PWD/runtime"}
      - {name: RUST_BACKTRACE, value: "1"}
      - {name: RUSTFLAGS, value: "-C link-arg=-fuse-ld=lld -C target-cpu=native"}
  build:
    rootFeatures: [embed_runtime]

hooks:
  helix-core:
    - link: {source: runtime, dest: ../runtime}
  helix-view:
    - link: {sources: [languages.toml, theme.toml], into: ..}

hook_policy:
  missing_source: fail
""".lstrip()


@pytest.fixture
def helix_local_yaml() -> str:
    """
    Documento local (override) aplicado sobre o documento base via deep-merge.

    Altera apenas a política de hooks e o app padrão; todo o resto deve
    ser preservado do documento base.
    """
    return """
default_outputs:
  app: helix-dev

hook_policy:
  missing_source: skip
""".lstrip()


# =====================================================
# Árvore base e contexto compartilhado
# =====================================================

@pytest.fixture
def base_tree() -> dict:
    """
    Árvore base mínima produzida pelo "driver externo".

    Contém três artefatos, o shell de desenvolvimento e o conjunto raiz
    de features do build. Listas já preenchidas permitem verificar a lei
    de append (itens originais preservados e primeiro).
    """
    return {
        "helix-core": {"crateName": "helix-core", "buildInputs": []},
        "helix-term": {"crateName": "helix-term", "buildInputs": ["openssl", "pkg-config"]},
        "helix-view": {"crateName": "helix-view", "buildInputs": []},
        "shell": {"packages": ["rustc", "cargo"], "env": []},
        "build": {"rootFeatures": []},
    }


@pytest.fixture
def project_root(tmp_path):
    root = tmp_path / "helix"
    root.mkdir()
    return root


@pytest.fixture
def common(project_root):
    """
    Contexto compartilhado (`common`) com toolchain e pacotes fixos.

    A raiz aponta para um diretório vazio em `tmp_path`; testes de hooks
    criam ali as fontes que precisam.
    """
    from atlas_buildconf.core.pipeline.shared import SharedContext

    return SharedContext(
        root=project_root,
        toolchain={"cc": "gcc-wrapper", "cc_lib": "gcc-lib"},
        packages={"lld_10": "lld-10.0.1", "lldb": "lldb-11.0.0"},
    )


@pytest.fixture
def eval_ctx():
    """EvaluationContext com run_id e timestamp fixos."""
    from atlas_buildconf.core.pipeline.context import EvaluationContext

    return EvaluationContext(
        run_id="test-run",
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        meta={"document": "buildconf.yaml"},
    )
