# src/dagflow/core/engine/executor.py
"""
Protocolo de execução/retomada compartilhado por Pipeline e Dag.

Pipeline e Dag diferem apenas em como produzem a lista ordenada de
filhos; a caminhada sobre essa lista é a mesma e vive aqui.

Para cada filho, em ordem:
    1. Filhos já presentes em `completed_steps` são pulados
    2. `current_step_id` aponta para o filho
    3. O filho é executado com o `(ctx, data)` corrente
    4. Exceção: o container vai para `failed` e a exceção é relançada
       inalterada (mesmo objeto)
    5. Sucesso: checkpoint do data bag; se o filho ficou pausado, o
       container pausa e para; senão o filho entra em `completed_steps`
       e, se o próprio container foi pausado durante o filho, para

Concluída a lista, o container vai para `complete`.

Decisões arquiteturais:
    - Pausa é cooperativa e observada somente entre filhos
    - Eventos são registrados apenas quando `ctx` é um `RunContext`
    - Nenhum erro é engolido ou encapsulado

Limites explícitos:
    - Não decide a ordem (responsabilidade do container)
    - Não observa cancelamento
    - Não faz retry nem rollback
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..pipeline.context import RunContext
from ..pipeline.runnable import Runnable
from ..pipeline.types import StateStatus


def merge_resume_data(saved: Optional[Dict[str, Any]], data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Combina o data bag salvo com o fornecido na retomada.

    O resultado parte do bag salvo e aplica as chaves do chamador por
    cima (o chamador vence em conflito). O dict do chamador é atualizado
    in place e retornado.
    """
    if data is None:
        data = {}
    for key, value in (saved or {}).items():
        data.setdefault(key, value)
    return data


def emit(ctx: Any, *, step_id: str, level: str, message: str, **extra: Any) -> None:
    """Registra um evento estruturado quando o carrier é um RunContext."""
    if isinstance(ctx, RunContext):
        ctx.log(step_id=step_id, level=level, message=message, **extra)


def index_of(order: Sequence[Runnable], runnable_id: str) -> int:
    """Posição do primeiro filho com o id informado (0 se ausente)."""
    for i, child in enumerate(order):
        if child.id == runnable_id:
            return i
    return 0


def execute_order(
    owner: Any,
    order: List[Runnable],
    ctx: Any,
    data: Dict[str, Any],
    *,
    start_index: int = 0,
) -> Tuple[Any, Dict[str, Any]]:
    """
    Caminha `order[start_index:]` executando cada filho de `owner`.

    Args:
        owner: Pipeline ou Dag dono do State sendo atualizado.
        order: Filhos em ordem de execução.
        ctx: Carrier repassado aos filhos (pode ser substituído por eles).
        data: Data bag corrente.
        start_index: Posição inicial (retomada).

    Returns:
        Tuple[Any, Dict[str, Any]]: `(ctx, data)` ao final da caminhada,
        seja por conclusão ou por pausa.

    Pausa vinda de um handler:
        - pausar o container marca o filho corrente como concluído; a
          retomada segue a partir do próximo filho
        - um handler que precisa ser reexecutado na retomada (ex.: aguardar
          uma confirmação externa) deve pausar o próprio Step, não o
          container
    """
    state = owner.get_state()

    for child in order[start_index:]:
        child_id = child.id

        if state.is_step_completed(child_id):
            emit(ctx, step_id=child_id, level="info", message="runnable_skipped", container_id=owner.id)
            continue

        state.set_current_step_id(child_id)
        emit(ctx, step_id=child_id, level="info", message="runnable_started", container_id=owner.id)

        try:
            ctx, data = child.run(ctx, data)
        except Exception as e:
            state.set_data(data)
            state.set_status(StateStatus.FAILED)
            emit(
                ctx,
                step_id=child_id,
                level="error",
                message="runnable_failed",
                container_id=owner.id,
                error_type=e.__class__.__name__,
                error=str(e),
            )
            raise

        state.set_data(data)

        if child.is_paused():
            state.set_status(StateStatus.PAUSED)
            emit(ctx, step_id=child_id, level="info", message="runnable_paused", container_id=owner.id)
            return ctx, data

        state.add_completed_step(child_id)
        emit(ctx, step_id=child_id, level="info", message="runnable_finished", container_id=owner.id)

        if state.status == StateStatus.PAUSED:
            emit(ctx, step_id=owner.id, level="info", message="runnable_paused", container_id=owner.id)
            return ctx, data

    state.set_status(StateStatus.COMPLETE)
    return ctx, data
