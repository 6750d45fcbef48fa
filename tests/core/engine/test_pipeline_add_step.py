# tests/core/engine/test_pipeline_add_step.py
"""
Testes de registro de Steps no Pipeline (`add_step` / `create_step`).

Os testes asseguram que:
- `add_step` é encadeável e preserva a ordem de registro
- nomes omitidos são gerados como `step-<n>`
- parâmetros podem vir como keywords, mapping ou StepParams
- `create_step` cria um Step vinculado sem registrá-lo
- Steps avulsos são adotados no registro; Steps de outro Pipeline não
"""

import pytest

from seqflow.core.engine.pipeline import Pipeline
from seqflow.core.exceptions import RegistrationError
from seqflow.core.pipeline.step import Step
from seqflow.core.pipeline.types import StepParams


def _noop(ctx, handles):
    return None


def test_add_step_is_chainable(pipeline):
    result = pipeline.add_step(name="a", handle=_noop).add_step(name="b", handle=_noop)
    assert result is pipeline
    assert [s.name for s in pipeline.steps] == ["a", "b"]


def test_missing_names_are_generated(pipeline):
    pipeline.add_step(handle=_noop).add_step(handle=_noop)
    assert [s.name for s in pipeline.steps] == ["step-1", "step-2"]


def test_params_accept_mapping_and_dataclass(pipeline):
    pipeline.add_step({"name": "a", "handle": _noop})
    pipeline.add_step(StepParams(handle=_noop, name="b", depends_on=["a"]))

    b = pipeline.steps[1]
    assert b.depends_on == ("a",)
    assert b.pipeline is pipeline


def test_unknown_parameters_are_rejected(pipeline):
    with pytest.raises(TypeError):
        pipeline.add_step(name="a", handle=_noop, retries=3)


def test_create_step_does_not_register(pipeline):
    step = pipeline.create_step(name="draft", handle=_noop)
    assert step.pipeline is pipeline
    assert pipeline.steps == ()

    pipeline.add_step(step)
    assert pipeline.steps == (step,)


def test_unowned_step_is_adopted(pipeline):
    step = Step(name="loose", handle=_noop)
    pipeline.add_step(step)
    assert step.pipeline is pipeline


def test_step_from_another_pipeline_is_rejected(pipeline):
    other = Pipeline()
    step = other.create_step(name="x", handle=_noop)

    with pytest.raises(RegistrationError):
        pipeline.add_step(step)
    assert len(pipeline.steps) == 0


def test_duplicate_keeps_registry_unchanged(pipeline):
    pipeline.add_step(name="a", handle=_noop)
    with pytest.raises(RegistrationError):
        pipeline.add_step(name="a", handle=lambda c, h: {"x": 1})
    assert len(pipeline.steps) == 1


def test_generated_names_skip_names_taken_explicitly(pipeline):
    pipeline.add_step(name="step-2", handle=_noop)
    pipeline.add_step(handle=_noop).add_step(handle=_noop)

    assert [s.name for s in pipeline.steps] == ["step-2", "step-1", "step-3"]


def test_generated_names_never_repeat_for_unregistered_drafts(pipeline):
    draft = pipeline.create_step(handle=_noop)
    pipeline.add_step(handle=_noop)
    pipeline.add_step(draft)

    assert [s.name for s in pipeline.steps] == ["step-2", "step-1"]
