# src/seqflow/core/pipeline/__init__.py
"""
# Pipeline Core — seqflow

Este pacote define os contratos e estruturas fundamentais de um pipeline
no seqflow: o Step, o registry de Steps e os tipos compartilhados.

## Componentes

- **types**
  - `InputOptions`, `StepParams`: declaração de Steps
  - `RunOptions`: slice, include/exclude e verbose de uma execução
  - `ValidationReport`: erros e warnings de dependências
  - `Signal`, `PipelineState`

- **step**
  - `Step`: unidade nomeada de trabalho com validação de inputs
  - `Handles`: capacidades entregues ao handler (log + pipeline)

- **registry**
  - `StepRegistry`: unicidade de nomes e verificação de posse

## Invariantes

- Cada Step possui um nome único no Pipeline dono
- Steps não escrevem no contexto; devolvem fragmentos
"""

from .registry import StepRegistry
from .step import Handles, Step
from .types import (
    InputOptions,
    PipelineState,
    RunOptions,
    Signal,
    StepParams,
    ValidationReport,
)

__all__ = [
    "Handles",
    "InputOptions",
    "PipelineState",
    "RunOptions",
    "Signal",
    "Step",
    "StepParams",
    "StepRegistry",
    "ValidationReport",
]
