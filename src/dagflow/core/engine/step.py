# src/dagflow/core/engine/step.py
"""
Step: unidade atômica de execução do dagflow.

Um Step envolve exatamente um handler `handler(ctx, data) -> (ctx, data)`
e é a única variante de Runnable com lógica executável própria.

Ciclo de vida:
    - `run`: se pausado, segue o caminho de retomada; senão inicia um
      State novo (`running`), invoca o handler uma vez e, em sucesso,
      registra a si mesmo em `completed_steps` e vai para `complete`
    - Erro do handler: status `failed` e a exceção é relançada inalterada
    - `resume`: apenas em `paused`; reinvoca o handler com o bag salvo
      combinado ao bag do chamador (chamador vence)

Invariantes:
    - `completed_steps` de um Step contém no máximo um id: o próprio
    - Nenhum retry é feito
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from ..exceptions import HandlerNotSetError, InvalidHandlerResultError
from ..pipeline.options import apply_options
from ..pipeline.types import StateStatus, StepHandler
from ..state import new_state
from .base import RunnableBase
from .executor import merge_resume_data


class Step(RunnableBase):
    """Runnable folha que executa um único handler."""

    def __init__(
        self,
        *,
        id: Optional[str] = None,
        name: Optional[str] = None,
        handler: Optional[StepHandler] = None,
    ):
        super().__init__(id=id, name=name)
        self._handler: Optional[StepHandler] = handler

    @property
    def handler(self) -> Optional[StepHandler]:
        return self._handler

    def set_handler(self, handler: StepHandler) -> None:
        self._handler = handler

    def run(self, ctx: Any, data: Optional[Dict[str, Any]] = None) -> Tuple[Any, Dict[str, Any]]:
        if self.is_paused():
            return self.resume(ctx, data)

        if data is None:
            data = {}

        self._state = new_state()
        self._state.set_data(data)
        self._state.set_current_step_id(self.id)
        return self._invoke(ctx, data)

    def resume(self, ctx: Any, data: Optional[Dict[str, Any]] = None) -> Tuple[Any, Dict[str, Any]]:
        self._require_paused()

        data = merge_resume_data(self._state.get_data(), data)
        self._state.set_status(StateStatus.RUNNING)
        self._state.set_data(data)
        self._state.set_current_step_id(self.id)
        return self._invoke(ctx, data)

    def _invoke(self, ctx: Any, data: Dict[str, Any]) -> Tuple[Any, Dict[str, Any]]:
        if self._handler is None:
            self._state.set_status(StateStatus.FAILED)
            raise HandlerNotSetError(
                f"step '{self.id}' has no handler",
                details={"step_id": self.id},
                hint="Configure o handler via WithHandler ou set_handler",
            )

        try:
            result = self._handler(ctx, data)
        except Exception:
            self._state.set_data(data)
            self._state.set_status(StateStatus.FAILED)
            raise

        ctx, data = self._unpack(result, data)
        self._state.set_data(data)

        # pausado de dentro do handler: não conclui
        if self.is_paused():
            return ctx, data

        self._state.add_completed_step(self.id)
        self._state.set_status(StateStatus.COMPLETE)
        return ctx, data

    def _unpack(self, result: Any, data: Dict[str, Any]) -> Tuple[Any, Dict[str, Any]]:
        if not isinstance(result, tuple) or len(result) != 2 or not isinstance(result[1], dict):
            self._state.set_data(data)
            self._state.set_status(StateStatus.FAILED)
            raise InvalidHandlerResultError(
                "handler must return a (ctx, data) tuple with a dict data bag",
                details={"step_id": self.id, "received": type(result).__name__},
            )
        return result[0], result[1]


def new_step(*options: Any) -> Step:
    """Constrói um Step aplicando as opções na ordem recebida."""
    step = Step()
    apply_options(step, options)
    return step
