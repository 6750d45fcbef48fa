"""
seqflow — Canonical Exceptions (v1)

Este módulo define as exceções tipadas do seqflow.

Objetivo:
- Permitir que Step e Pipeline levantem exceções semânticas tipadas
- Facilitar o mapeamento determinístico para ErrorPayload (ver `core.errors`)
- Evitar ValueError/RuntimeError genéricos em guardrails críticos

Taxonomia:
- ValidationError     → input obrigatório ausente antes do handler rodar (Step)
- DependencyError     → dependência ausente ou fora de ordem (Pipeline, antes da run)
- RegistrationError   → nome duplicado ou Step de outro Pipeline (add_step)
- RunOptionsError     → opções de run inconsistentes (ex.: include + exclude)
- PipelineStateError  → run concorrente sobre a mesma instância

Regras:
- Falhas de handler NÃO são encapsuladas: a exceção original chega ao chamador.
- Exceções carregam apenas dados estruturados (serializáveis) em `details`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(eq=False)
class SeqflowException(Exception):
    """Base class para exceções internas do seqflow.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Step
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class ValidationError(SeqflowException):
    """Um ou mais caminhos obrigatórios do contexto estão ausentes."""

    errors: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        super().__post_init__()
        self.details.setdefault("errors", list(self.errors))


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class DependencyError(SeqflowException):
    """A sequência efetiva viola dependências declaradas pelos Steps."""

    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        super().__post_init__()
        self.details.setdefault("errors", list(self.errors))
        self.details.setdefault("warnings", list(self.warnings))

    def __str__(self) -> str:
        if not self.errors:
            return self.message
        return "\n  - ".join([self.message, *self.errors])


@dataclass(eq=False)
class RegistrationError(SeqflowException):
    """Registro de Step rejeitado; o registry permanece inalterado."""


@dataclass(eq=False)
class RunOptionsError(SeqflowException):
    """Opções de execução inválidas ou contraditórias."""


@dataclass(eq=False)
class PipelineStateError(SeqflowException):
    """Operação incompatível com o estado atual do Pipeline."""
