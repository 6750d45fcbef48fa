# src/seqflow/core/pipeline/types.py
"""
Tipos canônicos do pipeline do seqflow.

Este módulo define as estruturas que padronizam a comunicação entre
quem declara Steps, o Pipeline e o planner.

Componentes principais:
    - InputOptions     → requisitos de um caminho do contexto
    - StepParams       → parâmetros declarativos de criação de um Step
    - RunOptions       → opções resolvidas de uma execução (filtro + verbose)
    - ValidationReport → resultado estruturado da validação de dependências
    - Signal           → sinais cooperativos emitidos por handlers
    - PipelineState    → estados de uma execução

Princípios fundamentais:
    - Tipos são estáveis e serializáveis
    - Nenhuma lógica de execução vive neste módulo
    - Opções contraditórias são rejeitadas na construção

Limites explícitos:
    - Não executa Steps
    - Não filtra nem valida sequências
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from seqflow.core.exceptions import RunOptionsError

if TYPE_CHECKING:
    from .step import Handles

Fragment = Mapping[str, Any]
HandlerResult = Union[Optional[Fragment], Awaitable[Optional[Fragment]]]
Handler = Callable[[Dict[str, Any], "Handles"], HandlerResult]


class Signal(str, Enum):
    """
    Sinais cooperativos que um handler pode emitir via `handles.signal`.

    - STOP_PIPELINE: nenhum Step é executado após o Step corrente; a saída
      do Step corrente ainda é incorporada ao contexto.

    Os valores são strings para facilitar logs e comparação com nomes
    recebidos como texto (`pipeline.signal("StopPipeline")`).
    """
    STOP_PIPELINE = "StopPipeline"


class PipelineState(str, Enum):
    """Estados de uma execução: Idle → Validating → Running → Completed | Failed."""
    IDLE = "idle"
    VALIDATING = "validating"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class InputOptions:
    """Requisitos de um caminho do contexto. `type` é apenas descritivo."""
    required: bool = False
    type: Optional[str] = None

    @classmethod
    def coerce(cls, value: Union["InputOptions", Mapping[str, Any], bool]) -> "InputOptions":
        if isinstance(value, InputOptions):
            return value
        if isinstance(value, bool):
            return cls(required=value)
        if isinstance(value, Mapping):
            return cls(**dict(value))
        raise TypeError(f"Invalid input options: {value!r}")


@dataclass(frozen=True)
class StepParams:
    """
    Parâmetros declarativos para criação de um Step.

    Campos:
        - handle: função `(context, handles) -> fragment | None`, síncrona ou async
        - name: nome único no pipeline (gerado como `step-<n>` se omitido)
        - depends_on: nomes de Steps que precisam aparecer antes deste
        - exclude_by_default: só executa quando nomeado em `include_steps`
        - inputs: caminho do contexto → InputOptions (ou dict/bool equivalente)
    """
    handle: Handler
    name: Optional[str] = None
    depends_on: Sequence[str] = ()
    exclude_by_default: bool = False
    inputs: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, params: Mapping[str, Any]) -> "StepParams":
        unknown = set(params) - {"handle", "name", "depends_on", "exclude_by_default", "inputs"}
        if unknown:
            raise TypeError(f"Unknown step parameters: {sorted(unknown)}")
        return cls(**dict(params))


@dataclass(frozen=True)
class RunOptions:
    """
    Opções resolvidas de uma execução.

    `slice` segue a semântica de fatiamento do Python: `(start,)` ou
    `(start, end)`, fim exclusivo, índices negativos contam do final.
    `include_steps` e `exclude_steps` são mutuamente exclusivos.
    """
    slice: Tuple[int, ...] = (0,)
    include_steps: Optional[Tuple[str, ...]] = None
    exclude_steps: Optional[Tuple[str, ...]] = None
    verbose: bool = False

    def __post_init__(self) -> None:
        bounds = (self.slice,) if isinstance(self.slice, int) else tuple(self.slice)
        if len(bounds) not in (1, 2) or not all(
            isinstance(b, int) and not isinstance(b, bool) for b in bounds
        ):
            raise RunOptionsError(
                "slice must be (start,) or (start, end) with integer bounds",
                details={"slice": list(bounds)},
            )
        object.__setattr__(self, "slice", bounds)

        if self.include_steps is not None and self.exclude_steps is not None:
            raise RunOptionsError(
                "include_steps and exclude_steps are mutually exclusive",
                details={
                    "include_steps": list(self.include_steps),
                    "exclude_steps": list(self.exclude_steps),
                },
                hint="Use either include_steps or exclude_steps, not both",
            )
        for attr in ("include_steps", "exclude_steps"):
            names = getattr(self, attr)
            if names is None:
                continue
            if isinstance(names, str):
                raise RunOptionsError(f"{attr} must be a sequence of step names, not a string")
            object.__setattr__(self, attr, tuple(names))

    @property
    def has_filter(self) -> bool:
        return self.slice != (0,) or self.include_steps is not None or self.exclude_steps is not None

    @classmethod
    def build(cls, options: Optional["RunOptions"] = None, **kwargs: Any) -> "RunOptions":
        if options is not None and kwargs:
            raise RunOptionsError("Pass either a RunOptions instance or keyword options, not both")
        if options is not None:
            return options
        if kwargs.get("slice") is None:
            kwargs.pop("slice", None)
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slice": list(self.slice),
            "include_steps": None if self.include_steps is None else list(self.include_steps),
            "exclude_steps": None if self.exclude_steps is None else list(self.exclude_steps),
            "verbose": self.verbose,
        }


@dataclass(frozen=True)
class ValidationReport:
    """Resultado da validação de dependências: erros bloqueiam a run, warnings não."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, List[str]]:
        return {"errors": list(self.errors), "warnings": list(self.warnings)}
