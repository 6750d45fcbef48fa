"""
seqflow — Canonical Error Structures (v1)

Este módulo define o payload canônico usado para registrar falhas no log
de execução. Quando um Step falha, o Pipeline serializa a exceção com
`error_payload_from_exception`, grava o resultado no RunLog e faz flush
antes de relançar a exceção original.

O payload deve ser:

- explícito
- serializável
- rastreável (inclui stack trace para o log técnico)
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Optional

from .exceptions import DependencyError, SeqflowException, ValidationError


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

STEP_VALIDATION_ERROR = "STEP_VALIDATION_ERROR"
STEP_HANDLER_ERROR = "STEP_HANDLER_ERROR"
PIPELINE_DEPENDENCY_ERROR = "PIPELINE_DEPENDENCY_ERROR"


@dataclass(frozen=True)
class ErrorPayload:
    """
    Payload canônico de erro do seqflow.

    Campos:
    - type: código estável do erro (não é texto livre)
    - name: nome da classe da exceção original
    - message: mensagem curta e humana
    - details: dados estruturados anexados à exceção
    - stack: stack trace formatado (pode ser vazio)
    - hint: ação sugerida ao operador
    """

    type: str
    name: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    stack: str = ""
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


def _error_type_for(exc: BaseException) -> str:
    if isinstance(exc, ValidationError):
        return STEP_VALIDATION_ERROR
    if isinstance(exc, DependencyError):
        return PIPELINE_DEPENDENCY_ERROR
    return STEP_HANDLER_ERROR


def error_payload_from_exception(exc: BaseException, *, step: Optional[str] = None) -> ErrorPayload:
    """Converte qualquer exceção em ErrorPayload.

    Regras:
    - SeqflowException: `details` e `hint` são copiados da exceção.
    - Outras exceções: dados anexados em `details`, `data` ou `errors`
      (quando presentes) são preservados.
    - O nome do Step, quando informado, entra em `details["step"]`.
    """
    details: Dict[str, Any] = {}
    hint: Optional[str] = None

    if isinstance(exc, SeqflowException):
        details.update(exc.details)
        hint = exc.hint
    else:
        for attr in ("details", "data"):
            value = getattr(exc, attr, None)
            if isinstance(value, dict):
                details.update(value)
            elif value is not None:
                details[attr] = value
        errors = getattr(exc, "errors", None)
        if isinstance(errors, (list, tuple)) and "errors" not in details:
            details["errors"] = list(errors)

    if step is not None:
        details["step"] = step

    stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    return ErrorPayload(
        type=_error_type_for(exc),
        name=exc.__class__.__name__,
        message=str(exc),
        details=details,
        stack=stack.rstrip("\n"),
        hint=hint,
    )
