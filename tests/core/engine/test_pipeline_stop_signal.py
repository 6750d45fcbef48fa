# tests/core/engine/test_pipeline_stop_signal.py
"""
Testes do sinal cooperativo StopPipeline.

Um handler pode pedir o encerramento da run via `handles.signal`. O
Step corrente termina normalmente (seu fragmento é incorporado) e
nenhum Step posterior é executado.
"""

from seqflow.core.pipeline.types import PipelineState, Signal


def test_stop_signal_skips_remaining_steps(pipeline, recording_handler):
    calls = []

    def _stop(ctx, handles):
        calls.append("b")
        handles.signal(Signal.STOP_PIPELINE)
        return {"b": 2}

    pipeline.add_step(name="a", handle=recording_handler("a", {"a": 1}, calls))
    pipeline.add_step(name="b", handle=_stop)
    pipeline.add_step(name="c", handle=recording_handler("c", {"c": 3}, calls))

    final = pipeline.run()

    assert calls == ["a", "b"]
    assert final == {"a": 1, "b": 2}
    assert pipeline.state == PipelineState.COMPLETED
    assert pipeline.signals == frozenset({"StopPipeline"})
    assert "Pipeline stopped by signal 'StopPipeline' after step 'b'" in pipeline.log.format()


def test_signal_by_name_is_accepted(pipeline, recording_handler):
    calls = []

    def _stop(ctx, handles):
        handles.signal("StopPipeline")

    pipeline.add_step(name="a", handle=_stop)
    pipeline.add_step(name="b", handle=recording_handler("b", None, calls))
    pipeline.run()

    assert calls == []


def test_stop_does_not_leak_into_next_run(pipeline, recording_handler):
    calls = []

    def _stop(ctx, handles):
        handles.signal(Signal.STOP_PIPELINE)

    pipeline.add_step(name="stopper", handle=_stop)
    pipeline.add_step(name="after", handle=recording_handler("after", None, calls))

    pipeline.run()
    assert calls == []

    pipeline.run(include_steps=["after"])
    assert calls == ["after"]


def test_unknown_signal_is_recorded_but_ignored(pipeline, recording_handler):
    calls = []

    def _odd(ctx, handles):
        handles.signal("Pause")

    pipeline.add_step(name="odd", handle=_odd)
    pipeline.add_step(name="next", handle=recording_handler("next", None, calls))
    pipeline.run()

    assert calls == ["next"]
    assert "Pause" in pipeline.signals
    assert "Unrecognized signal 'Pause' ignored" in pipeline.log.format()
