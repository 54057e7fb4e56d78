# tests/core/engine/test_pipeline_run.py
"""
Testes de execução do Pipeline.

Os testes asseguram que:
- filhos executam em ordem de inserção, cada um uma única vez
- a primeira falha interrompe a caminhada (cenário C)
- a pausa cooperativa para a caminhada após o filho corrente
- a retomada executa apenas o que falta
- ids de filhos são únicos (vazio ou em colisão recebe id novo)
- as operações de coleção aceitam o Runnable ou o seu id
- um Step que pausa a si mesmo é reexecutado na retomada
"""

import pytest

try:
    from dagflow.core.engine.pipeline import Pipeline, new_pipeline
    from dagflow.core.engine.step import Step
    from dagflow.core.pipeline.context import RunContext
    from dagflow.core.pipeline.options import WithHandler, WithName, WithRunnables
    from dagflow.core.pipeline.types import StateStatus
except Exception as e:
    Pipeline = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"""Missing Pipeline. Implement:
- src/dagflow/core/engine/pipeline.py (Pipeline, new_pipeline)
Import error: {_IMPORT_ERR}
""")


def test_pipeline_runs_children_in_insertion_order(make_step, calls):
    _require_imports()
    pipeline = Pipeline(id="p", runnables=[make_step("c"), make_step("a"), make_step("b")])

    _, data = pipeline.run(None, {})

    assert calls == ["c", "a", "b"]
    assert data == {"c": True, "a": True, "b": True}
    assert pipeline.is_completed()
    assert pipeline.get_state().completed_steps == ["c", "a", "b"]
    assert pipeline.get_state().status == StateStatus.COMPLETE


def test_empty_pipeline_completes():
    _require_imports()
    pipeline = Pipeline()
    _, data = pipeline.run(None, None)
    assert data == {}
    assert pipeline.is_completed()
    assert pipeline.name == ""


def test_pipeline_first_failure_stops_walk(make_step, failing_handler, calls):
    """Cenário C: [S1 falha, S2]; S2 nunca executa e o erro de S1 propaga."""
    _require_imports()
    err = RuntimeError("s1 broke")
    s1 = Step(id="s1", handler=failing_handler("s1", error=err))
    s2 = make_step("s2")
    pipeline = Pipeline(id="p", runnables=[s1, s2])
    data = {}

    with pytest.raises(RuntimeError) as excinfo:
        pipeline.run(None, data)

    assert excinfo.value is err
    assert calls == ["s1"]
    assert data == {"s1_partial": True}
    assert pipeline.is_failed()
    assert s1.is_failed()
    assert s2.is_waiting()
    assert pipeline.get_state().current_step_id == "s1"
    assert pipeline.get_state().completed_steps == []


def test_nested_failure_marks_every_level_failed(failing_handler):
    _require_imports()
    err = ValueError("deep")
    inner = Pipeline(id="inner", runnables=[Step(id="x", handler=failing_handler("x", error=err))])
    outer = Pipeline(id="outer", runnables=[inner])

    with pytest.raises(ValueError) as excinfo:
        outer.run(None, {})

    assert excinfo.value is err
    assert inner.is_failed()
    assert outer.is_failed()


def test_pipeline_cooperative_pause_and_resume(make_step, calls):
    """
    Verifica que, quando um handler pausa o Pipeline, o filho corrente é
    registrado como concluído e nenhum filho posterior executa; a
    retomada executa somente o restante.
    """
    _require_imports()
    ctx = RunContext(run_id="pause-run")

    def pausing(c, data):
        calls.append("s2")
        data["s2"] = True
        if not data.get("resumed"):
            c.get_artifact("workflow").pause()
        return c, data

    pipeline = Pipeline(
        id="p",
        runnables=[make_step("s1"), Step(id="s2", handler=pausing), make_step("s3")],
    )
    ctx.set_artifact("workflow", pipeline)

    pipeline.run(ctx, {})

    assert pipeline.is_paused()
    assert calls == ["s1", "s2"]
    assert pipeline.get_state().completed_steps == ["s1", "s2"]
    assert pipeline.get_state().current_step_id == "s2"

    _, data = pipeline.resume(ctx, {"resumed": True})

    assert calls == ["s1", "s2", "s3"]
    assert pipeline.is_completed()
    assert data == {"s1": True, "s2": True, "s3": True, "resumed": True}


def test_completed_pipeline_run_starts_fresh(make_step, calls):
    _require_imports()
    pipeline = Pipeline(runnables=[make_step("a")])
    pipeline.run(None, {})
    pipeline.run(None, {})
    assert calls == ["a", "a"]
    assert pipeline.get_state().completed_steps == ["a"]


def test_runnable_add_skips_none_and_list_is_a_copy(make_step):
    _require_imports()
    pipeline = Pipeline()
    a = make_step("a")
    pipeline.runnable_add(None, a, None)

    listed = pipeline.runnable_list()
    listed.clear()

    assert [r.id for r in pipeline.runnable_list()] == ["a"]


def test_runnable_remove_matches_by_id(make_step):
    _require_imports()
    x, y = make_step("x"), make_step("y")
    pipeline = Pipeline(runnables=[x, y])

    assert pipeline.runnable_remove(make_step("x")) is True
    assert pipeline.runnable_list() == [y]
    assert pipeline.runnable_remove(make_step("missing")) is False


def test_runnable_remove_accepts_id(make_step):
    _require_imports()
    a, b = make_step("a"), make_step("b")
    pipeline = Pipeline(runnables=[a, b])

    assert pipeline.runnable_remove("b") is True
    assert pipeline.runnable_list() == [a]
    assert pipeline.runnable_remove("b") is False
    assert pipeline.runnable_remove("") is False


def test_colliding_and_empty_ids_are_renamed_and_all_run(recording_handler, calls):
    """Filhos com id vazio ou repetido recebem id novo e todos executam."""
    _require_imports()
    e1 = Step(id="", handler=recording_handler("e1"))
    e2 = Step(id="", handler=recording_handler("e2"))
    d1 = Step(id="dup", handler=recording_handler("d1"))
    d2 = Step(id="dup", handler=recording_handler("d2"))
    pipeline = Pipeline(runnables=[e1, e2, d1, d2])

    ids = [r.id for r in pipeline.runnable_list()]
    assert all(ids)
    assert len(set(ids)) == 4
    assert d1.id == "dup"

    pipeline.run(None, {})

    assert calls == ["e1", "e2", "d1", "d2"]
    assert pipeline.is_completed()
    assert pipeline.get_state().completed_steps == ids


def test_readding_same_runnable_is_ignored(make_step, calls):
    _require_imports()
    a = make_step("a")
    pipeline = Pipeline(runnables=[a])
    pipeline.runnable_add(a)

    assert a.id == "a"
    assert pipeline.runnable_list() == [a]

    pipeline.run(None, {})
    assert calls == ["a"]


def test_step_pausing_itself_is_rerun_on_resume(make_step, calls):
    """
    Um handler que pausa o próprio Step não é registrado como concluído:
    a retomada o reexecuta com o bag combinado.
    """
    _require_imports()

    def verify(c, data):
        calls.append("verify")
        if "code" not in data:
            verify_step.pause()
        else:
            data["verified"] = True
        return c, data

    verify_step = Step(id="verify", handler=verify)
    pipeline = Pipeline(id="p", runnables=[make_step("send"), verify_step, make_step("done")])

    pipeline.run(None, {})

    assert pipeline.is_paused()
    assert verify_step.is_paused()
    assert pipeline.get_state().completed_steps == ["send"]
    assert pipeline.get_state().current_step_id == "verify"

    _, data = pipeline.resume(None, {"code": "1"})

    assert calls == ["send", "verify", "verify", "done"]
    assert data["verified"] is True
    assert pipeline.is_completed()
    assert pipeline.get_state().completed_steps == ["send", "verify", "done"]


def test_runnable_remove_rejects_empty_id(make_step):
    _require_imports()
    pipeline = Pipeline(runnables=[make_step("a")])
    assert pipeline.runnable_remove(Step(id="")) is False
    assert len(pipeline.runnable_list()) == 1


def test_new_pipeline_options(make_step):
    _require_imports()
    a, b = make_step("a"), make_step("b")
    pipeline = new_pipeline(WithName("etl"), WithRunnables(a, None, b), WithHandler(lambda c, d: (c, d)))

    assert pipeline.name == "etl"
    assert pipeline.runnable_list() == [a, b]
    assert not hasattr(pipeline, "handler")


def test_pipeline_logs_lifecycle_events(make_step, failing_handler, dummy_ctx):
    _require_imports()
    pipeline = Pipeline(id="p", runnables=[make_step("ok"), Step(id="ko", handler=failing_handler("ko"))])

    with pytest.raises(RuntimeError):
        pipeline.run(dummy_ctx, {})

    messages = [(e["step_id"], e["message"]) for e in dummy_ctx.events]
    assert messages == [
        ("ok", "runnable_started"),
        ("ok", "runnable_finished"),
        ("ko", "runnable_started"),
        ("ko", "runnable_failed"),
    ]
    failed = dummy_ctx.events[-1]
    assert failed["level"] == "error"
    assert failed["container_id"] == "p"
    assert failed["error_type"] == "RuntimeError"
    assert failed["run_id"] == "run-test-001"
