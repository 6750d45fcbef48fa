# src/seqflow/__init__.py
"""
seqflow — engine de pipelines sequenciais orientados a contexto.

Um pipeline é uma lista ordenada de Steps nomeados; cada Step lê o
contexto compartilhado e devolve um fragmento que o Pipeline incorpora
via merge antes de executar o próximo Step.

Arquitetura em alto nível:
    - core.context      → regras de merge (mappings recursivos, listas concatenadas)
    - core.pipeline     → Step, StepRegistry e tipos
    - core.engine       → filtro, validação de dependências e execução
    - core.config       → defaults + overrides locais em YAML/JSON
    - core.traceability → RunLog

Limites explícitos:
    - Não agenda Steps concorrentemente
    - Não faz retry de Steps que falharam
    - Não persiste nem retoma estado entre processos
"""

from .core.config import PipelineSettings, load_config
from .core.context import get_path, has_path, merge_context
from .core.engine import Pipeline, filter_steps, validate_dependencies
from .core.errors import ErrorPayload, error_payload_from_exception
from .core.exceptions import (
    DependencyError,
    PipelineStateError,
    RegistrationError,
    RunOptionsError,
    SeqflowException,
    ValidationError,
)
from .core.pipeline import (
    Handles,
    InputOptions,
    PipelineState,
    RunOptions,
    Signal,
    Step,
    StepParams,
    ValidationReport,
)
from .core.traceability import RunLog

__version__ = "0.1.0"

__all__ = [
    "DependencyError",
    "ErrorPayload",
    "Handles",
    "InputOptions",
    "Pipeline",
    "PipelineSettings",
    "PipelineState",
    "PipelineStateError",
    "RegistrationError",
    "RunLog",
    "RunOptions",
    "RunOptionsError",
    "SeqflowException",
    "Signal",
    "Step",
    "StepParams",
    "ValidationError",
    "ValidationReport",
    "error_payload_from_exception",
    "filter_steps",
    "get_path",
    "has_path",
    "load_config",
    "merge_context",
    "validate_dependencies",
    "__version__",
]
