# tests/core/engine/test_step_run.py
"""
Testes de execução do Step.

Os testes asseguram que:
- o handler é invocado exatamente uma vez por run
- sucesso leva a `complete` com o próprio id em completed_steps
- erro do handler leva a `failed` e propaga a mesma exceção
- pause/resume respeitam a máquina de estados
- a retomada combina o bag salvo com o do chamador (chamador vence)
"""

import pytest

try:
    from dagflow.core.engine.step import Step, new_step
    from dagflow.core.exceptions import (
        HandlerNotSetError,
        InvalidHandlerResultError,
        WorkflowNotPausedError,
        WorkflowNotRunningError,
    )
    from dagflow.core.pipeline.context import RunContext
    from dagflow.core.pipeline.options import WithHandler, WithID, WithName
    from dagflow.core.pipeline.types import StateStatus
    from dagflow.core.state import State
except Exception as e:
    Step = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"""Missing Step. Implement:
- src/dagflow/core/engine/step.py (Step, new_step)
Import error: {_IMPORT_ERR}
""")


def test_step_run_success(make_step, calls, dummy_ctx):
    _require_imports()
    step = make_step("s1")
    data = {"input": 1}

    ctx, out = step.run(dummy_ctx, data)

    assert ctx is dummy_ctx
    assert out is data
    assert out == {"input": 1, "s1": True}
    assert calls == ["s1"]
    assert step.is_completed()
    state = step.get_state()
    assert state.completed_steps == ["s1"]
    assert state.current_step_id == "s1"
    assert state.data == {"input": 1, "s1": True}


def test_step_run_with_none_data_and_none_ctx(make_step):
    _require_imports()
    step = make_step("s1")
    ctx, out = step.run(None, None)
    assert ctx is None
    assert out == {"s1": True}


def test_fresh_step_is_waiting_with_defaults():
    _require_imports()
    step = Step()
    assert step.is_waiting()
    assert step.name == ""
    assert isinstance(step.id, str) and step.id
    assert Step().id != step.id


def test_step_handler_error_propagates_unchanged(failing_handler, calls):
    """
    Verifica que a exceção do handler é relançada como o mesmo objeto,
    que o Step vai para `failed` e que a mutação parcial permanece no bag.
    """
    _require_imports()
    err = RuntimeError("boom")
    step = Step(id="bad", handler=failing_handler("bad", error=err))
    data = {}

    with pytest.raises(RuntimeError) as excinfo:
        step.run(None, data)

    assert excinfo.value is err
    assert step.is_failed()
    assert data == {"bad_partial": True}
    assert step.get_state().completed_steps == []
    assert calls == ["bad"]


def test_step_without_handler_fails():
    _require_imports()
    step = Step(id="empty")
    with pytest.raises(HandlerNotSetError):
        step.run(None, {})
    assert step.is_failed()


def test_step_invalid_handler_result_fails():
    _require_imports()
    step = Step(id="odd", handler=lambda ctx, data: data)
    with pytest.raises(InvalidHandlerResultError):
        step.run(None, {"k": 1})
    assert step.is_failed()


def test_step_handler_may_replace_ctx_and_data():
    _require_imports()
    replacement = {"fresh": True}
    step = Step(id="swap", handler=lambda ctx, data: ("new-ctx", replacement))

    ctx, out = step.run("old-ctx", {"stale": True})

    assert ctx == "new-ctx"
    assert out is replacement
    assert step.get_state().data == {"fresh": True}


def test_pause_requires_running():
    _require_imports()
    step = Step(id="s")
    before = step.get_state().last_updated

    with pytest.raises(WorkflowNotRunningError):
        step.pause()

    assert step.is_waiting()
    assert step.get_state().last_updated == before


def test_resume_requires_paused(make_step):
    _require_imports()
    step = make_step("s")
    step.run(None, {})

    with pytest.raises(WorkflowNotPausedError):
        step.resume(None, {})

    assert step.is_completed()


def test_step_paused_from_handler_then_resumed():
    """
    Verifica a pausa cooperativa: o handler alcança o Step via RunContext
    e o pausa; o Step não se marca concluído. Na retomada, o handler é
    reinvocado e o Step conclui.
    """
    _require_imports()
    ctx = RunContext(run_id="r1")
    invocations = []

    def handler(c, data):
        invocations.append(dict(data))
        if not data.get("approved"):
            c.get_artifact("workflow").pause()
        return c, data

    step = Step(id="approval", handler=handler)
    ctx.set_artifact("workflow", step)

    step.run(ctx, {"request": "x"})
    assert step.is_paused()
    assert step.get_state().completed_steps == []

    step.run(ctx, {"approved": True})

    assert step.is_completed()
    assert invocations == [{"request": "x"}, {"request": "x", "approved": True}]


def test_resume_merge_caller_wins_and_updates_caller_dict():
    _require_imports()
    seen = {}

    def handler(ctx, data):
        seen.update(data)
        return ctx, data

    paused = State(status=StateStatus.PAUSED, data={"a": 1, "b": 2}, current_step_id="s")
    step = Step(id="s", handler=handler)
    step.set_state(paused)

    caller = {"b": 3}
    _, out = step.resume(None, caller)

    assert seen == {"a": 1, "b": 3}
    assert out is caller
    assert caller == {"a": 1, "b": 3}
    assert step.is_completed()


def test_new_step_applies_options_in_order():
    _require_imports()
    handler = lambda ctx, data: (ctx, data)
    step = new_step(WithName("first"), WithID("s-1"), WithHandler(handler), WithName("second"))

    assert step.id == "s-1"
    assert step.name == "second"
    assert step.handler is handler
