# tests/core/pipeline/test_step_run.py
"""
Testes de execução de um Step isolado.

Este módulo valida `Step.run` / `Step.run_async`, garantindo que:
- o fragmento devolvido pelo handler é retornado ao chamador
- handlers síncronos e assíncronos são aceitos
- `None` equivale a "nenhuma alteração" (retorna `{}`)
- inputs obrigatórios ausentes impedem a chamada do handler
- falhas do handler se propagam sem modificação
- Steps vinculados a um Pipeline fazem exatamente um merge por run

Limites explícitos:
    - Não valida filtragem nem dependências
    - Não valida escrita do RunLog em disco
"""

import asyncio

import pytest

try:
    from seqflow.core.pipeline.step import Handles, Step
    from seqflow.core.exceptions import PipelineStateError, ValidationError
except Exception as e:  # noqa: BLE001
    Step = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"""Missing Step. Implement:
- src/seqflow/core/pipeline/step.py (Step, Handles)
Import error: {_IMPORT_ERR}
""")


def test_step_can_be_created_without_pipeline():
    _require_imports()
    step = Step(name="test-step", handle=lambda ctx, h: {})

    assert step.name == "test-step"
    assert step.pipeline is None
    assert step.owner_token is None


def test_run_returns_handler_fragment():
    _require_imports()
    step = Step(name="test-step", handle=lambda ctx, h: {"a": 1})

    assert step.run({}) == {"a": 1}


def test_run_awaits_async_handler():
    """
    Verifica que handlers `async def` são aguardados até o fim.

    O Step só resolve depois que o trabalho assíncrono termina, tanto via
    `run_async` dentro de um event loop quanto via `run` síncrono.
    """
    _require_imports()

    async def handle(ctx, handles):
        await asyncio.sleep(0)
        return {"b": ctx["a"] + 1}

    step = Step(name="async-step", handle=handle)

    assert asyncio.run(step.run_async({"a": 1})) == {"b": 2}
    assert step.run({"a": 41}) == {"b": 42}


def test_none_result_returns_empty_fragment():
    _require_imports()
    step = Step(name="noop", handle=lambda ctx, h: None)

    assert step.run({"a": 1}) == {}


def test_missing_required_input_rejects_without_calling_handler():
    _require_imports()
    calls = []

    def handle(ctx, handles):
        calls.append(ctx)
        return {"output": ctx["input"] + 1}

    step = Step(name="needs-input", handle=handle, inputs={"input": {"required": True}})

    assert step.run({"input": 1}) == {"output": 2}

    with pytest.raises(ValidationError) as exc_info:
        step.run({})

    assert str(exc_info.value) == "Invalid input"
    assert exc_info.value.errors == ["Missing required context path 'input'"]
    assert len(calls) == 1


def test_handler_failure_propagates_unmodified():
    _require_imports()
    boom = RuntimeError("boom")

    def handle(ctx, handles):
        raise boom

    step = Step(name="fails", handle=handle)

    with pytest.raises(RuntimeError) as exc_info:
        step.run({})
    assert exc_info.value is boom


def test_non_mapping_result_is_rejected():
    _require_imports()
    step = Step(name="bad", handle=lambda ctx, h: [1, 2])

    with pytest.raises(TypeError):
        step.run({})


def test_bound_step_merges_its_fragment_once(pipeline):
    """
    Verifica que um Step criado pelo Pipeline encaminha o fragmento ao merge.

    Invariantes:
        - exatamente um merge por run bem-sucedida
        - o fragmento também é devolvido ao chamador
    """
    _require_imports()
    step = pipeline.create_step(name="adds", handle=lambda ctx, h: {"items": [1]})

    assert step.run(pipeline.context) == {"items": [1]}
    assert pipeline.context == {"items": [1]}

    step.run(pipeline.context)
    assert pipeline.context == {"items": [1, 1]}


def test_failed_bound_step_does_not_merge(pipeline):
    _require_imports()

    def handle(ctx, handles):
        raise ValueError("nope")

    step = pipeline.create_step(name="fails", handle=handle)

    with pytest.raises(ValueError):
        step.run({})
    assert pipeline.context == {}


def test_signal_without_pipeline_is_rejected(memory_log):
    _require_imports()
    handles = Handles(log=memory_log)

    with pytest.raises(PipelineStateError):
        handles.signal("StopPipeline")


def test_invalid_step_definitions_are_rejected():
    _require_imports()
    with pytest.raises(ValueError):
        Step(name="  ", handle=lambda ctx, h: None)
    with pytest.raises(TypeError):
        Step(name="x", handle="not callable")
    with pytest.raises(TypeError):
        Step(name="x", handle=lambda ctx, h: None, depends_on="a")
