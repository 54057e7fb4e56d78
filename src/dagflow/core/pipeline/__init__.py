# src/dagflow/core/pipeline/__init__.py
"""
# Pipeline Core: dagflow

Este pacote define os **contratos canônicos** e as **estruturas de apoio**
compartilhadas por todos os Runnables do dagflow.

## Componentes

- **types**
  - `StateStatus`: status de execução (waiting/running/paused/complete/failed)
  - `VALID_TRANSITIONS`: tabela fechada da máquina de estados
  - `StepHandler`: assinatura `handler(ctx, data) -> (ctx, data)`

- **runnable**
  - `Runnable` (Protocol): contrato mínimo de Step, Pipeline e Dag

- **context**
  - `RunContext`: carrier da run (artefatos, cancelamento, eventos, warnings)

- **options**
  - `WithName`, `WithID`, `WithHandler`, `WithRunnables`, `WithDependency`

- **registry**
  - `HandlerRegistry`: handlers nomeados para workflows declarativos

## Limites Explícitos

- Não planeja execução (ver `dagflow.core.engine.planner`)
- Não executa Runnables
"""

from .context import RunContext
from .options import WithDependency, WithHandler, WithID, WithName, WithRunnables
from .registry import DuplicateHandlerError, HandlerRegistry
from .runnable import Runnable, RunnableRef
from .types import VALID_TRANSITIONS, StateStatus, StepHandler

__all__ = [
    "RunContext",
    "Runnable",
    "RunnableRef",
    "StateStatus",
    "StepHandler",
    "VALID_TRANSITIONS",
    "HandlerRegistry",
    "DuplicateHandlerError",
    "WithName",
    "WithID",
    "WithHandler",
    "WithRunnables",
    "WithDependency",
]
