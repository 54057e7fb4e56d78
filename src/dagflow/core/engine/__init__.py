# src/dagflow/core/engine/__init__.py
"""
Engine do dagflow: planejamento e execução de Runnables.

- planner: grafo de dependências e ordenação topológica determinística
- executor: caminhada ordenada compartilhada (pausa, falha, retomada)
- step / pipeline / dag: as três variantes de Runnable
"""

from .dag import Dag, new_dag
from .pipeline import Pipeline, new_pipeline
from .planner import CycleDetectedError, build_dependency_graph, topological_sort
from .step import Step, new_step

__all__ = [
    "Step",
    "Pipeline",
    "Dag",
    "new_step",
    "new_pipeline",
    "new_dag",
    "build_dependency_graph",
    "topological_sort",
    "CycleDetectedError",
]
