# src/dagflow/core/pipeline/runnable.py
"""
Contrato canônico de Runnable do dagflow.

Este módulo define o protocolo formal que Step, Pipeline e Dag
satisfazem, e que qualquer unidade de trabalho customizada deve
satisfazer para ser composta dentro de um Pipeline ou Dag.

Um Runnable expõe três capacidades:
    - identidade (`id`, `name`)
    - execução (`run`, `pause`, `resume`)
    - projeção de status (`is_running`, `is_paused`, ...) derivada do State

Princípios fundamentais:
    - Containers compõem Runnables por referência (sem herança)
    - Conformidade é garantida por duck typing (@runtime_checkable)
    - Erros são sinalizados por exceção e propagam inalterados

Invariantes:
    - `id` é único dentro de um container
    - Cada Runnable possui exatamente um State

Limites explícitos:
    - Não define ordem de execução
    - Não define política de retry ou rollback
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional, Protocol, Tuple, Union, runtime_checkable

if TYPE_CHECKING:
    from ..state import State


@runtime_checkable
class Runnable(Protocol):
    """
    Contrato canônico de um Runnable.

    Atributos obrigatórios:
        - id: identificador único e estável dentro do container
        - name: rótulo de exibição (não único)

    `run(ctx, data)` retorna `(ctx, data)`; qualquer falha é levantada
    como exceção. O `ctx` é repassado aos handlers sem interpretação.
    """
    id: str
    name: str

    def run(self, ctx: Any, data: Optional[Dict[str, Any]]) -> Tuple[Any, Dict[str, Any]]:
        ...

    def pause(self) -> None:
        ...

    def resume(self, ctx: Any, data: Optional[Dict[str, Any]]) -> Tuple[Any, Dict[str, Any]]:
        ...

    def get_state(self) -> State:
        ...

    def set_state(self, state: State) -> None:
        ...

    def is_running(self) -> bool:
        ...

    def is_paused(self) -> bool:
        ...

    def is_completed(self) -> bool:
        ...

    def is_failed(self) -> bool:
        ...

    def is_waiting(self) -> bool:
        ...


# Referência a um filho de container: o próprio Runnable ou o seu id.
RunnableRef = Union[Runnable, str]
