# src/dagflow/core/__init__.py
"""
Core do dagflow.

Componentes principais:
    - state      → State: status, data bag, progresso e serialização
    - pipeline   → contrato Runnable, RunContext, opções e registry de handlers
    - engine     → planner (grafo + ordenação topológica) e Step/Pipeline/Dag
    - config     → loader YAML/JSON, deep-merge e builder declarativo

Princípios fundamentais:
    - Execução síncrona, sequencial e determinística
    - Erros sinalizados por exceção, nunca engolidos
    - Progresso sempre recuperável a partir do State serializado

Limites explícitos:
    - Não depende da camada de visualização
    - Sem paralelismo, retry ou rollback
"""
