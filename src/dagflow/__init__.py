# src/dagflow/__init__.py
"""
dagflow: engine de workflows retomáveis (Step, Pipeline e Dag).

Um workflow é um conjunto de Runnables executados em ordem sequencial
(Pipeline) ou derivada de dependências (Dag). Cada Runnable possui um
State serializável que permite pausar e retomar a execução exatamente de
onde parou, inclusive em outro processo.

Arquitetura em alto nível:
    - core.state     → State e máquina de estados
    - core.pipeline  → contratos, RunContext, opções e registry
    - core.engine    → planner e executores
    - core.config    → configuração e builder declarativo
    - visualization  → renderização DOT (apresentação)
"""

from .core.engine import (
    CycleDetectedError,
    Dag,
    Pipeline,
    Step,
    new_dag,
    new_pipeline,
    new_step,
)
from .core.exceptions import (
    DagflowError,
    HandlerNotSetError,
    InvalidHandlerResultError,
    InvalidTransitionError,
    StateDeserializationError,
    StateSerializationError,
    WorkflowNotPausedError,
    WorkflowNotRunningError,
)
from .core.ids import new_id
from .core.pipeline import (
    HandlerRegistry,
    RunContext,
    Runnable,
    StateStatus,
    WithDependency,
    WithHandler,
    WithID,
    WithName,
    WithRunnables,
)
from .core.state import State, load_state, new_state, save_state

__version__ = "0.1.0"

__all__ = [
    "Step",
    "Pipeline",
    "Dag",
    "new_step",
    "new_pipeline",
    "new_dag",
    "Runnable",
    "RunContext",
    "HandlerRegistry",
    "State",
    "StateStatus",
    "new_state",
    "save_state",
    "load_state",
    "new_id",
    "WithName",
    "WithID",
    "WithHandler",
    "WithRunnables",
    "WithDependency",
    "DagflowError",
    "CycleDetectedError",
    "InvalidTransitionError",
    "WorkflowNotRunningError",
    "WorkflowNotPausedError",
    "StateDeserializationError",
    "StateSerializationError",
    "HandlerNotSetError",
    "InvalidHandlerResultError",
]
