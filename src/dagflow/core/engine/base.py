# src/dagflow/core/engine/base.py
"""
Comportamento comum de identidade, State e controle de Runnables.

Step, Pipeline e Dag compartilham:
    - identidade (`id`, `name`)
    - posse de exatamente um `State`
    - projeção de status (`is_running`, `is_paused`, ...)
    - a regra de `pause` (apenas em `running`)

A lógica de execução (`run` / `resume`) é definida por cada variante.
"""

from __future__ import annotations

from typing import Optional

from ..exceptions import WorkflowNotPausedError, WorkflowNotRunningError
from ..ids import new_id
from ..pipeline.types import StateStatus
from ..state import State


class RunnableBase:
    default_name = ""

    def __init__(self, *, id: Optional[str] = None, name: Optional[str] = None):
        self.id: str = new_id() if id is None else id
        self.name: str = self.default_name if name is None else name
        self._state: State = State()

    # -----------------------------
    # State
    # -----------------------------
    def get_state(self) -> State:
        return self._state

    def set_state(self, state: State) -> None:
        if not isinstance(state, State):
            raise TypeError(f"state must be a State, got: {type(state).__name__}")
        self._state = state

    def is_running(self) -> bool:
        return self._state.status == StateStatus.RUNNING

    def is_paused(self) -> bool:
        return self._state.status == StateStatus.PAUSED

    def is_completed(self) -> bool:
        return self._state.status == StateStatus.COMPLETE

    def is_failed(self) -> bool:
        return self._state.status == StateStatus.FAILED

    def is_waiting(self) -> bool:
        return self._state.status == StateStatus.WAITING

    # -----------------------------
    # Controle
    # -----------------------------
    def pause(self) -> None:
        if not self.is_running():
            raise WorkflowNotRunningError(
                "workflow is not running",
                details={"id": self.id, "status": self._state.status.value},
            )
        self._state.set_status(StateStatus.PAUSED)

    def _require_paused(self) -> None:
        if not self.is_paused():
            raise WorkflowNotPausedError(
                "workflow is not paused",
                details={"id": self.id, "status": self._state.status.value},
            )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(id={self.id!r}, name={self.name!r}, "
            f"status={self._state.status.value!r})"
        )
