# src/seqflow/core/pipeline/step.py
"""
Step canônico do seqflow.

Um Step é a menor unidade executável do pipeline: um nome, um handler e
as declarações de que ele precisa (dependências e inputs obrigatórios).

Responsabilidades de um Step:
    - validar suas próprias pré-condições (inputs obrigatórios no contexto)
    - invocar o handler com `(context, handles)` e aguardar o resultado
    - encaminhar o fragmento produzido ao Pipeline dono (um merge por run)

Princípios fundamentais:
    - O Step não escreve no contexto; ele devolve um fragmento
    - Falhas do handler se propagam sem encapsulamento
    - A posse (Pipeline dono) é fixada na criação ou no registro

Invariantes:
    - Handler não é chamado se algum input obrigatório estiver ausente
    - No máximo um merge de contexto por execução bem-sucedida
    - Nenhum merge ocorre para um handler que falhou

Limites explícitos:
    - Não decide ordem de execução
    - Não valida dependências (responsabilidade do planner)
    - Não faz retry
"""

from __future__ import annotations

import asyncio
import inspect
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence, Union

from seqflow.core.context import has_path
from seqflow.core.exceptions import PipelineStateError, ValidationError
from seqflow.core.traceability.run_log import RunLog

from .types import Handler, InputOptions, Signal

if TYPE_CHECKING:
    from seqflow.core.engine.pipeline import Pipeline


@dataclass
class Handles:
    """
    Capacidades entregues a cada handler durante uma run.

    - log: RunLog da execução (sink de logging)
    - pipeline: referência ao Pipeline dono, usada para sinais e leitura

    Construído uma vez por run pelo Pipeline.
    """
    log: RunLog
    pipeline: Optional["Pipeline"] = None

    def append(self, entry: Any, **options: Any) -> None:
        self.log.append(entry, **options)

    def signal(self, name: Union[Signal, str]) -> None:
        if self.pipeline is None:
            raise PipelineStateError(
                "Cannot raise a signal outside of a pipeline",
                details={"signal": str(getattr(name, "value", name))},
            )
        self.pipeline.signal(name)


class Step:
    """
    Unidade nomeada de trabalho que envolve um handler.

    Atributos:
        - name: identificador único no pipeline
        - handle: `(context, handles) -> fragment | None` (sync ou async)
        - depends_on: nomes dos Steps que precisam rodar antes
        - exclude_by_default: pulado salvo se nomeado em `include_steps`
        - inputs: caminho pontuado → InputOptions
        - pipeline: Pipeline dono (None para Steps avulsos)

    Steps criados fora de um Pipeline são aceitos por `add_step`, que os
    vincula ao Pipeline no registro. Um Step já vinculado a outro Pipeline
    é rejeitado.
    """

    def __init__(
        self,
        *,
        name: str,
        handle: Handler,
        depends_on: Sequence[str] = (),
        exclude_by_default: bool = False,
        inputs: Optional[Mapping[str, Any]] = None,
        pipeline: Optional["Pipeline"] = None,
    ):
        if not isinstance(name, str) or not name.strip():
            raise ValueError("step name must be a non-empty string")
        if not callable(handle):
            raise TypeError(f"handle of step '{name}' must be callable")
        if isinstance(depends_on, str):
            raise TypeError(f"depends_on of step '{name}' must be a sequence of names, not a string")

        self.name = name
        self.handle = handle
        self.depends_on = tuple(depends_on)
        self.exclude_by_default = bool(exclude_by_default)
        self.inputs: Mapping[str, InputOptions] = MappingProxyType(
            {path: InputOptions.coerce(opts) for path, opts in (inputs or {}).items()}
        )
        self._pipeline = pipeline

    def __repr__(self) -> str:
        return f"Step(name={self.name!r}, depends_on={list(self.depends_on)!r})"

    # -----------------------------
    # Posse
    # -----------------------------
    @property
    def pipeline(self) -> Optional["Pipeline"]:
        return self._pipeline

    @property
    def owner_token(self) -> Optional[str]:
        return None if self._pipeline is None else self._pipeline.token

    def bind(self, pipeline: "Pipeline") -> None:
        """Vincula um Step avulso ao Pipeline. Vincular a outro dono é erro."""
        if self._pipeline is not None and self._pipeline.token != pipeline.token:
            raise PipelineStateError(
                f"Step '{self.name}' already belongs to another pipeline",
                details={"step": self.name},
            )
        self._pipeline = pipeline

    # -----------------------------
    # Inputs
    # -----------------------------
    def validate_inputs(self, context: Mapping[str, Any]) -> List[str]:
        messages: List[str] = []
        for path, options in self.inputs.items():
            if options.required and not has_path(context, path):
                messages.append(f"Missing required context path '{path}'")
        return messages

    def is_input_valid(self, context: Mapping[str, Any]) -> bool:
        return not self.validate_inputs(context)

    # -----------------------------
    # Execução
    # -----------------------------
    async def run_async(
        self,
        context: Optional[Mapping[str, Any]] = None,
        handles: Optional[Handles] = None,
    ) -> Dict[str, Any]:
        """
        Executa o Step uma vez e devolve o fragmento produzido.

        Fluxo:
            1. inputs obrigatórios ausentes → ValidationError (handler não roda)
            2. handler chamado com `(context, handles)`; awaitables são aguardados
            3. fragmento não vazio → um merge no Pipeline dono, e é devolvido
            4. `None` ou fragmento vazio → devolve `{}` sem merge

        Raises:
            ValidationError: Se algum input obrigatório estiver ausente.
            TypeError: Se o handler devolver algo que não é mapping nem None.
            Exception: Qualquer falha do handler, sem modificação.
        """
        context = {} if context is None else context
        errors = self.validate_inputs(context)
        if errors:
            raise ValidationError("Invalid input", details={"step": self.name}, errors=errors)

        if handles is None:
            handles = Handles(log=RunLog(), pipeline=self._pipeline)

        result = self.handle(context, handles)
        if inspect.isawaitable(result):
            result = await result

        if result is None:
            return {}
        if not isinstance(result, Mapping):
            raise TypeError(
                f"Step '{self.name}' returned {type(result).__name__}; expected a mapping or None"
            )
        if not result:
            return {}

        if self._pipeline is not None:
            self._pipeline.update_context(result)
        return dict(result)

    def run(
        self,
        context: Optional[Mapping[str, Any]] = None,
        handles: Optional[Handles] = None,
    ) -> Dict[str, Any]:
        """Versão síncrona de `run_async`; não pode ser chamada dentro de um event loop ativo."""
        return asyncio.run(self.run_async(context, handles))
