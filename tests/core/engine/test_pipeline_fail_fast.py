# tests/core/engine/test_pipeline_fail_fast.py
"""
Testes da política fail-fast do Pipeline.

A primeira exceção de um Step encerra a run. O Pipeline não encapsula
a falha: o chamador recebe exatamente a exceção lançada pelo handler.

Os testes asseguram que:
- nenhum Step roda após a falha
- o contexto produzido antes da falha permanece em `pipeline.context`
- o log é gravado em disco com o payload da falha antes de relançar
- inputs obrigatórios ausentes falham com ValidationError sem chamar o handler

Limites explícitos:
    - Não há retry nem recuperação parcial
"""

import json

import pytest

from seqflow.core.engine.pipeline import Pipeline
from seqflow.core.exceptions import ValidationError
from seqflow.core.pipeline.types import PipelineState
from seqflow.core.traceability.run_log import RunLog


class StepBoom(RuntimeError):
    pass


def test_failure_stops_run_and_keeps_partial_context(tmp_path, recording_handler):
    calls = []
    error = StepBoom("boom")

    def _fail(ctx, handles):
        calls.append("b")
        raise error

    log = RunLog(log_dir=str(tmp_path), log_file_name="run.log")
    pipe = Pipeline(log=log)
    pipe.add_step(name="a", handle=recording_handler("a", {"a": 1}, calls))
    pipe.add_step(name="b", handle=_fail)
    pipe.add_step(name="c", handle=recording_handler("c", {"c": 3}, calls))

    with pytest.raises(StepBoom) as exc_info:
        pipe.run()

    assert exc_info.value is error
    assert calls == ["a", "b"]
    assert pipe.context == {"a": 1}
    assert pipe.state == PipelineState.FAILED

    written = (tmp_path / "run.log").read_text(encoding="utf-8")
    assert "Step 'b' failed" in written
    assert "boom" in written
    assert "Log written" in written


def test_missing_required_input_fails_before_handler(pipeline):
    """
    Verifica que um input obrigatório ausente falha a run com ValidationError.

    Invariantes:
        - O handler do Step inválido nunca é chamado
        - A mensagem lista o caminho ausente
        - O payload gravado no log usa o tipo STEP_VALIDATION_ERROR
    """
    called = []

    pipeline.add_step(name="load", handle=lambda ctx, h: {"data": {"rows": 3}})
    pipeline.add_step(
        name="report",
        handle=lambda ctx, h: called.append(True),
        inputs={"data.columns": {"required": True}},
    )

    with pytest.raises(ValidationError) as exc_info:
        pipeline.run()

    assert called == []
    assert exc_info.value.errors == ["Missing required context path 'data.columns'"]
    assert "STEP_VALIDATION_ERROR" in pipeline.log.format()


def test_failure_payload_is_valid_json_in_log(pipeline):
    def _fail(ctx, handles):
        raise ValueError("bad value")

    pipeline.add_step(name="only", handle=_fail)
    with pytest.raises(ValueError):
        pipeline.run()

    lines = pipeline.log.lines()
    start = next(i for i, line in enumerate(lines) if line.strip().startswith("Step 'only' failed: {"))
    block = [lines[start].split("failed: ", 1)[1]]
    for line in lines[start + 1:]:
        block.append(line)
        if line.strip() == "}":
            break
    payload = json.loads("\n".join(block))

    assert payload["type"] == "STEP_HANDLER_ERROR"
    assert payload["name"] == "ValueError"
    assert payload["details"] == {"step": "only"}


def test_pipeline_can_run_again_after_failure(pipeline):
    state = {"fail": True}

    def _flaky(ctx, handles):
        if state["fail"]:
            raise RuntimeError("first time")
        return {"ok": True}

    pipeline.add_step(name="flaky", handle=_flaky)
    with pytest.raises(RuntimeError):
        pipeline.run()

    state["fail"] = False
    assert pipeline.run() == {"ok": True}
    assert pipeline.state == PipelineState.COMPLETED


class AbortRun(BaseException):
    pass


def test_base_exception_is_logged_and_flushed(tmp_path):
    """
    Verifica que interrupções fora de `Exception` (ex.: cancelamento) também
    são serializadas no log e gravadas em disco antes de propagar.
    """
    async def _abort(ctx, handles):
        raise AbortRun("cancelled by operator")

    pipe = Pipeline(log=RunLog(log_dir=str(tmp_path), log_file_name="run.log"))
    pipe.add_step(name="a", handle=lambda ctx, h: {"a": 1})
    pipe.add_step(name="abort", handle=_abort)

    with pytest.raises(AbortRun):
        pipe.run()

    assert pipe.state == PipelineState.FAILED
    assert pipe.context == {"a": 1}
    written = (tmp_path / "run.log").read_text(encoding="utf-8")
    assert "Step 'abort' failed" in written
    assert "cancelled by operator" in written
