# src/atlas_buildconf/core/__init__.py
"""
Core do Atlas BuildConf.

Este pacote reúne a implementação canônica da composição de overrides:
documento de build, resolução em camadas, hooks pré-build e
rastreabilidade.

O core é projetado para ser:
    - determinístico
    - testável de forma isolada
    - livre de dependências do driver externo de build

Componentes principais:
    - config       → documento de build (YAML/JSON), merge e hashing
    - pipeline     → tipos canônicos, contexto compartilhado e registry
    - engine       → planner, resolver, ambiente do shell, outputs e avaliação
    - hooks        → efeitos colaterais pré-build
    - traceability → Manifest e Event Log

Limites explícitos:
    - Não compila artefatos
    - Não resolve grafo de dependências entre targets
"""
