# src/dagflow/core/pipeline/types.py
"""
Tipos canônicos de execução do dagflow.

Este módulo define as estruturas e enums fundamentais compartilhados por
State, Runnables (Step, Pipeline, Dag) e camadas de apresentação.

Componentes principais:
    - StateStatus        → enum de status de execução de um Runnable
    - VALID_TRANSITIONS  → tabela fechada de transições da máquina de estados
    - StepHandler        → assinatura da função executada por um Step

Princípios fundamentais:
    - Tipos são estáveis e serializáveis
    - Valores textuais são projetados para persistência em JSON
    - Nenhuma lógica de execução vive neste módulo

Invariantes:
    - O valor textual de cada status é estável e canônico
    - `complete` e `failed` são terminais (sem transições de saída)

Limites explícitos:
    - Não executa Runnables
    - Não aplica transições (responsabilidade de `State`)
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Mapping, Tuple


class StateStatus(str, Enum):
    """
    Status de execução de um Runnable.

    Os valores são strings para facilitar:
        - serialização em JSON
        - restauração de State em uma nova instância de processo
        - comparação direta com literais (`status == "running"`)

    Estados definidos:
        - WAITING: nunca iniciado (valor vazio)
        - RUNNING: em execução
        - PAUSED: suspenso, retomável via `resume`
        - COMPLETE: concluído com sucesso (terminal)
        - FAILED: interrompido por erro (terminal)
    """
    WAITING = ""
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETE = "complete"
    FAILED = "failed"


VALID_TRANSITIONS: Mapping[StateStatus, FrozenSet[StateStatus]] = {
    StateStatus.WAITING: frozenset({StateStatus.RUNNING}),
    StateStatus.RUNNING: frozenset({StateStatus.PAUSED, StateStatus.COMPLETE, StateStatus.FAILED}),
    StateStatus.PAUSED: frozenset({StateStatus.RUNNING}),
    StateStatus.COMPLETE: frozenset(),
    StateStatus.FAILED: frozenset(),
}


# handler(ctx, data) -> (ctx, data); erros são sinalizados via exceção.
StepHandler = Callable[[Any, Dict[str, Any]], Tuple[Any, Dict[str, Any]]]
