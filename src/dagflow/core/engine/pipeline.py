# src/dagflow/core/engine/pipeline.py
"""
Pipeline: sequência fixa de Runnables executada em ordem de inserção.

Pipelines não possuem mapa de dependências; a ordem de execução é a
própria ordem de `runnable_add`. A caminhada, a pausa cooperativa e o
pulo idempotente de filhos concluídos vêm de `executor.execute_order`.

`resume` reentra a caminhada a partir do índice de `current_step_id`
(0 se o id não estiver mais presente).

Os ids dos filhos são únicos no Pipeline: id vazio ou em colisão recebe
um id novo em `runnable_add`, e readicionar o mesmo objeto não tem efeito.
`runnable_remove` aceita o Runnable ou o seu id.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..ids import new_id
from ..pipeline.options import apply_options
from ..pipeline.runnable import Runnable, RunnableRef
from ..pipeline.types import StateStatus
from ..state import new_state
from .base import RunnableBase
from .executor import execute_order, index_of, merge_resume_data


class Pipeline(RunnableBase):
    """Container sequencial de Runnables."""

    def __init__(
        self,
        *,
        id: Optional[str] = None,
        name: Optional[str] = None,
        runnables: Optional[Iterable[Runnable]] = None,
    ):
        super().__init__(id=id, name=name)
        self._runnables: List[Runnable] = []
        if runnables:
            self.runnable_add(*runnables)

    # -----------------------------
    # Coleção
    # -----------------------------
    def runnable_add(self, *runnables: Optional[Runnable]) -> None:
        for r in runnables:
            if r is None or any(existing is r for existing in self._runnables):
                continue
            if not r.id or any(existing.id == r.id for existing in self._runnables):
                r.id = new_id()
            self._runnables.append(r)

    def runnable_remove(self, runnable: RunnableRef) -> bool:
        target_id = runnable if isinstance(runnable, str) else getattr(runnable, "id", "")
        if not target_id:
            return False
        for i, r in enumerate(self._runnables):
            if r.id == target_id:
                del self._runnables[i]
                return True
        return False

    def runnable_list(self) -> List[Runnable]:
        return list(self._runnables)

    # -----------------------------
    # Execução
    # -----------------------------
    def run(self, ctx: Any, data: Optional[Dict[str, Any]] = None) -> Tuple[Any, Dict[str, Any]]:
        if self.is_paused():
            return self.resume(ctx, data)

        if data is None:
            data = {}

        self._state = new_state()
        self._state.set_data(data)
        return execute_order(self, self.runnable_list(), ctx, data)

    def resume(self, ctx: Any, data: Optional[Dict[str, Any]] = None) -> Tuple[Any, Dict[str, Any]]:
        self._require_paused()

        data = merge_resume_data(self._state.get_data(), data)
        self._state.set_status(StateStatus.RUNNING)
        self._state.set_data(data)

        order = self.runnable_list()
        start = index_of(order, self._state.get_current_step_id())
        return execute_order(self, order, ctx, data, start_index=start)


def new_pipeline(*options: Any) -> Pipeline:
    """Constrói um Pipeline aplicando as opções na ordem recebida."""
    pipeline = Pipeline()
    apply_options(pipeline, options)
    return pipeline
