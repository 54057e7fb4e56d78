# src/dagflow/core/engine/dag.py
"""
Dag: grafo de Runnables ordenado por dependências declaradas.

O Dag mantém:
    - nós indexados por id (ordem de inserção preservada)
    - mapa `dependente-id -> [dependência-id]`

A ordem de execução é recalculada a cada `run` / `resume` via
`planner.build_dependency_graph` + `planner.topological_sort`. Um ciclo
interrompe a run antes de qualquer filho executar e leva o Dag a `failed`.

Decisões arquiteturais:
    - `runnable_add` garante unicidade de id: id vazio recebe id novo e
      id em colisão é renomeado silenciosamente; readicionar o mesmo
      objeto não tem efeito
    - `runnable_remove` remove o nó e toda aresta que o menciona, nas
      duas direções
    - `dependency_add` não deduplica arestas
    - Arestas pendentes (ids ausentes) são descartadas no planejamento e
      registradas como warning quando o carrier é um RunContext

Limites explícitos:
    - Execução sequencial (sem paralelismo entre ramos independentes)
    - Não valida contratos de dados entre Runnables
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..ids import new_id
from ..pipeline.context import RunContext
from ..pipeline.options import apply_options
from ..pipeline.runnable import Runnable, RunnableRef
from ..pipeline.types import StateStatus
from ..state import new_state
from .base import RunnableBase
from .executor import emit, execute_order, index_of, merge_resume_data
from .planner import (
    CycleDetectedError,
    build_dependency_graph,
    dangling_dependencies,
    topological_sort,
)


def _ref_id(ref: RunnableRef) -> str:
    return ref if isinstance(ref, str) else ref.id


class Dag(RunnableBase):
    """Container de Runnables executados em ordem topológica."""

    default_name = "New DAG"

    def __init__(
        self,
        *,
        id: Optional[str] = None,
        name: Optional[str] = None,
        runnables: Optional[Iterable[Runnable]] = None,
        dependencies: Optional[Mapping[str, Sequence[str]]] = None,
    ):
        super().__init__(id=id, name=name)
        self._runnables: Dict[str, Runnable] = {}
        self._dependencies: Dict[str, List[str]] = {}
        if runnables:
            self.runnable_add(*runnables)
        for dependent_id, dep_ids in (dependencies or {}).items():
            self.dependency_add(dependent_id, *dep_ids)

    # -----------------------------
    # Nós
    # -----------------------------
    def runnable_add(self, *runnables: Optional[Runnable]) -> None:
        for r in runnables:
            if r is None or self._runnables.get(r.id) is r:
                continue
            if not r.id or r.id in self._runnables:
                r.id = new_id()
            self._runnables[r.id] = r

    def runnable_remove(self, runnable: RunnableRef) -> bool:
        target_id = _ref_id(runnable)
        if target_id not in self._runnables:
            return False

        del self._runnables[target_id]
        self._dependencies.pop(target_id, None)
        for dependent_id in list(self._dependencies):
            self._dependencies[dependent_id] = [
                d for d in self._dependencies[dependent_id] if d != target_id
            ]
        return True

    def runnable_list(self) -> List[Runnable]:
        return list(self._runnables.values())

    def runnable_get(self, runnable_id: str) -> Optional[Runnable]:
        return self._runnables.get(runnable_id)

    # -----------------------------
    # Arestas
    # -----------------------------
    def dependency_add(self, dependent: Optional[RunnableRef], *dependencies: Optional[RunnableRef]) -> None:
        if dependent is None:
            return
        dep_ids = [_ref_id(d) for d in dependencies if d is not None]
        if not dep_ids:
            return
        self._dependencies.setdefault(_ref_id(dependent), []).extend(dep_ids)

    def dependency_list(self, runnable: RunnableRef) -> List[Runnable]:
        """Dependências diretas de `runnable`, resolvidas contra os nós vivos."""
        resolved: List[Runnable] = []
        for dep_id in self._dependencies.get(_ref_id(runnable), []):
            dep = self._runnables.get(dep_id)
            if dep is not None:
                resolved.append(dep)
        return resolved

    @property
    def dependencies(self) -> Dict[str, List[str]]:
        return {k: list(v) for k, v in self._dependencies.items()}

    # -----------------------------
    # Planejamento
    # -----------------------------
    def _plan(self, ctx: Any) -> List[Runnable]:
        if isinstance(ctx, RunContext):
            for dependent_id, dep_id in dangling_dependencies(self._runnables, self._dependencies):
                ctx.add_warning(
                    step_id=self.id,
                    message=f"dependency '{dependent_id}' -> '{dep_id}' ignored: unknown runnable",
                )

        graph = build_dependency_graph(self._runnables, self._dependencies)
        try:
            return topological_sort(graph)
        except CycleDetectedError as e:
            self._state.set_status(StateStatus.FAILED)
            emit(
                ctx,
                step_id=self.id,
                level="error",
                message="runnable_failed",
                container_id=self.id,
                error_type=e.__class__.__name__,
                error=str(e),
            )
            raise

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
        order = self._plan(ctx)
        return execute_order(self, order, ctx, data)

    def resume(self, ctx: Any, data: Optional[Dict[str, Any]] = None) -> Tuple[Any, Dict[str, Any]]:
        self._require_paused()

        data = merge_resume_data(self._state.get_data(), data)
        self._state.set_status(StateStatus.RUNNING)
        self._state.set_data(data)

        order = self._plan(ctx)
        start = index_of(order, self._state.get_current_step_id())
        return execute_order(self, order, ctx, data, start_index=start)


def new_dag(*options: Any) -> Dag:
    """Constrói um Dag aplicando as opções na ordem recebida."""
    dag = Dag()
    apply_options(dag, options)
    return dag
