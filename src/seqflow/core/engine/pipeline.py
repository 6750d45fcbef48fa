# src/seqflow/core/engine/pipeline.py
"""
Pipeline — orquestrador de execução do seqflow.

O Pipeline é dono do registry de Steps e do contexto vivo de uma run.
Ele compõe planner (filtro + validação de dependências), Steps e RunLog
para executar uma sequência validada, um Step por vez.

Fluxo de `run`:
    1. resolve RunOptions (verbose + filtro; defaults de settings quando
       o chamador não filtra)
    2. grava o cabeçalho no RunLog (Steps definidos, ativos, inativos, opções)
    3. valida dependências; erros → DependencyError, nenhum Step executa
    4. calcula a sequência filtrada
    5. executa cada Step em ordem; o próprio Step faz o merge do fragmento.
       Falha → payload serializado no log, flush, relança a exceção original.
       Sinal StopPipeline → encerra após o Step corrente
    6. flush do log e retorno do contexto final

Invariantes:
    - Nomes de Steps são únicos no registry a qualquer momento
    - Cada Step vê o contexto resultante de todos os Steps anteriores
    - Contexto produzido antes de uma falha permanece em `pipeline.context`
    - Uma única run por vez por instância

Limites explícitos:
    - Não executa Steps em paralelo
    - Não faz retry
    - Não persiste nem retoma contexto entre processos
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Set, Tuple, Union

from seqflow.core.config.loader import load_config
from seqflow.core.config.settings import PipelineSettings
from seqflow.core.context import Context, copy_tree, merge_context
from seqflow.core.errors import error_payload_from_exception
from seqflow.core.exceptions import DependencyError, PipelineStateError
from seqflow.core.pipeline.registry import StepRegistry
from seqflow.core.pipeline.step import Handles, Step
from seqflow.core.pipeline.types import (
    PipelineState,
    RunOptions,
    Signal,
    StepParams,
    ValidationReport,
)
from seqflow.core.traceability.run_log import RunLog

from .planner import filter_steps, validate_dependencies

logger = logging.getLogger(__name__)

StepSpec = Union[StepParams, Mapping[str, Any], Step]


class Pipeline:
    """
    Orquestrador canônico: registry de Steps + contexto vivo.

    Args:
        context: contexto inicial (incorporado via merge sobre `{}`)
        log: RunLog a utilizar; quando omitido, um é criado a partir de `settings`
        settings: destino do log e defaults de execução
    """

    def __init__(
        self,
        context: Optional[Mapping[str, Any]] = None,
        *,
        log: Optional[RunLog] = None,
        settings: Optional[PipelineSettings] = None,
    ):
        self.settings = settings or PipelineSettings()
        self.token = uuid.uuid4().hex
        self.log = log if log is not None else RunLog(
            log_dir=self.settings.log_dir,
            log_file_name=self.settings.log_file_name,
            verbose=self.settings.verbose,
        )
        self.state = PipelineState.IDLE

        self._registry = StepRegistry(owner_token=self.token)
        self._context: Context = {}
        self._signals: Set[str] = set()
        self._run_signals: List[str] = []
        self._created = 0

        self.update_context(context)

    @classmethod
    def from_config(
        cls,
        config: Optional[Mapping[str, Any]],
        context: Optional[Mapping[str, Any]] = None,
        *,
        log: Optional[RunLog] = None,
    ) -> "Pipeline":
        return cls(context, log=log, settings=PipelineSettings.from_config(config))

    @classmethod
    def from_config_file(
        cls,
        defaults_path: Union[str, Path],
        local_path: Optional[Union[str, Path]] = None,
        context: Optional[Mapping[str, Any]] = None,
        *,
        log: Optional[RunLog] = None,
    ) -> "Pipeline":
        """Carrega defaults + overrides locais (YAML/JSON) e constrói o Pipeline."""
        config = load_config(defaults_path=defaults_path, local_path=local_path)
        return cls.from_config(config, context, log=log)

    def __repr__(self) -> str:
        return f"Pipeline(steps={self._registry.names()!r}, state={self.state.value!r})"

    # -----------------------------
    # Estado público
    # -----------------------------
    @property
    def context(self) -> Context:
        return self._context

    @property
    def steps(self) -> Tuple[Step, ...]:
        return tuple(self._registry.list())

    @property
    def signals(self) -> FrozenSet[str]:
        return frozenset(self._signals)

    # -----------------------------
    # Registro de Steps
    # -----------------------------
    @staticmethod
    def _coerce_params(spec: Any, kwargs: Dict[str, Any]) -> StepParams:
        if spec is None:
            return StepParams.from_mapping(kwargs)
        if kwargs:
            raise TypeError("Pass step parameters either as one object or as keywords, not both")
        if isinstance(spec, StepParams):
            return spec
        if isinstance(spec, Mapping):
            return StepParams.from_mapping(spec)
        raise TypeError(f"Expected StepParams, a mapping or a Step, got {type(spec).__name__}")

    def _next_auto_name(self) -> str:
        # contador monotônico; pula nomes já registrados explicitamente
        while True:
            self._created += 1
            name = f"step-{self._created}"
            if name not in self._registry:
                return name

    def create_step(self, params: Optional[Union[StepParams, Mapping[str, Any]]] = None, **kwargs: Any) -> Step:
        """Cria um Step vinculado a este Pipeline, sem registrá-lo."""
        spec = self._coerce_params(params, kwargs)
        return Step(
            name=spec.name if spec.name is not None else self._next_auto_name(),
            handle=spec.handle,
            depends_on=spec.depends_on,
            exclude_by_default=spec.exclude_by_default,
            inputs=spec.inputs,
            pipeline=self,
        )

    def add_step(self, spec: Optional[StepSpec] = None, **kwargs: Any) -> "Pipeline":
        """
        Registra um Step e devolve o próprio Pipeline (encadeável).

        `spec` pode ser:
            - Step pré-construído: aceito se for deste Pipeline ou avulso
              (Steps avulsos são vinculados no registro)
            - StepParams, mapping de parâmetros ou keywords: um novo Step é
              criado via `create_step`

        Raises:
            RegistrationError: Nome duplicado ou Step de outro Pipeline.
        """
        if isinstance(spec, Step):
            if kwargs:
                raise TypeError("Keyword parameters cannot be combined with a pre-built Step")
            step = spec
            self._registry.check(step)
            step.bind(self)
        else:
            step = self.create_step(spec, **kwargs)

        self._registry.add(step)
        logger.debug("Registered step %r (%d total)", step.name, len(self._registry))
        return self

    # -----------------------------
    # Planejamento
    # -----------------------------
    def filter_steps(self, options: Optional[RunOptions] = None, **kwargs: Any) -> List[Step]:
        return filter_steps(self._registry.list(), RunOptions.build(options, **kwargs))

    def validate(self, options: Optional[RunOptions] = None, **kwargs: Any) -> ValidationReport:
        """
        Valida dependências sobre a sequência filtrada. Não altera estado.

        Além do relatório de dependências, nomes em `include_steps` ou
        `exclude_steps` que não correspondem a nenhum Step geram warnings.
        """
        resolved = RunOptions.build(options, **kwargs)
        report = validate_dependencies(filter_steps(self._registry.list(), resolved))

        warnings = list(report.warnings)
        for attr in ("include_steps", "exclude_steps"):
            for name in getattr(resolved, attr) or ():
                if name not in self._registry:
                    warnings.append(f"Unknown step '{name}' in {attr}")

        return ValidationReport(errors=list(report.errors), warnings=warnings)

    # -----------------------------
    # Contexto e sinais
    # -----------------------------
    def update_context(self, fragment: Optional[Mapping[str, Any]]) -> Context:
        self._context = merge_context(self._context, fragment)
        return self._context

    def signal(self, name: Union[Signal, str]) -> None:
        value = name.value if isinstance(name, Signal) else str(name)
        self._signals.add(value)
        self._run_signals.append(value)

        if value not in {s.value for s in Signal}:
            self.log.append(f"Unrecognized signal '{value}' ignored", run_level=1)
            logger.warning("Unrecognized pipeline signal %r", value)
        else:
            logger.debug("Signal %r raised", value)

    def _stop_requested(self) -> bool:
        return Signal.STOP_PIPELINE.value in self._run_signals

    # -----------------------------
    # Execução
    # -----------------------------
    def _resolve_run_options(self, options: Optional[RunOptions], kwargs: Dict[str, Any]) -> RunOptions:
        resolved = RunOptions.build(options, **kwargs)
        caller_filtered = options is not None or any(
            kwargs.get(key) is not None for key in ("slice", "include_steps", "exclude_steps")
        )
        if not caller_filtered:
            resolved = replace(self.settings.run_defaults, verbose=resolved.verbose)
        return replace(resolved, verbose=resolved.verbose or self.settings.verbose)

    def _log_header(self, options: RunOptions, active: List[Step]) -> None:
        active_names = [s.name for s in active]
        self.log.append("Pipeline run started", prepend_timestamp=True, section_break_before=True)
        self.log.append(
            {
                "steps_defined": self._registry.names(),
                "steps_active": active_names,
                "steps_inactive": [n for n in self._registry.names() if n not in active_names],
                "options": options.to_dict(),
            },
            prefix="Run",
            section_break_after=True,
        )

    async def run_async(self, options: Optional[RunOptions] = None, **kwargs: Any) -> Context:
        """
        Executa a sequência filtrada e devolve o contexto final.

        Raises:
            DependencyError: Se a validação encontrar erros (nenhum Step executa).
            PipelineStateError: Se outra run estiver em andamento nesta instância.
            BaseException: A falha original do primeiro Step que falhar (inclusive
                cancelamentos), já gravada no log.
        """
        if self.state in (PipelineState.VALIDATING, PipelineState.RUNNING):
            raise PipelineStateError(
                "Pipeline is already running",
                details={"state": self.state.value},
            )

        resolved = self._resolve_run_options(options, kwargs)
        previous_verbose = self.log.verbose
        if resolved.verbose:
            self.log.verbose = True

        self.state = PipelineState.VALIDATING
        self._run_signals = []
        try:
            sequence = filter_steps(self._registry.list(), resolved)
            self._log_header(resolved, sequence)

            report = self.validate(resolved)
            if report.errors:
                self.log.append(report.to_dict(), prefix="Validation failed")
                self.log.flush()
                self.state = PipelineState.FAILED
                raise DependencyError(
                    f"Pipeline validation failed with {len(report.errors)} error(s)",
                    errors=list(report.errors),
                    warnings=list(report.warnings),
                )
            if report.warnings:
                self.log.append(report.to_dict(), prefix="Validation warnings")

            self.state = PipelineState.RUNNING
            handles = Handles(log=self.log, pipeline=self)

            for step in sequence:
                self.log.append(f"Started step '{step.name}'", prepend_timestamp=True, run_level=1)
                logger.debug("Running step %r", step.name)
                try:
                    await step.run_async(copy_tree(self._context), handles)
                except BaseException as exc:
                    payload = error_payload_from_exception(exc, step=step.name)
                    self.log.append(
                        payload.to_dict(),
                        prefix=f"Step '{step.name}' failed",
                        section_break_before=True,
                        run_level=1,
                    )
                    self.log.flush()
                    self.state = PipelineState.FAILED
                    raise

                if self._stop_requested():
                    self.log.append(
                        f"Pipeline stopped by signal '{Signal.STOP_PIPELINE.value}' after step '{step.name}'",
                        run_level=1,
                    )
                    logger.debug("Stop requested by step %r", step.name)
                    break

            self.log.append("Pipeline run completed", prepend_timestamp=True)
            self.log.flush()
            self.state = PipelineState.COMPLETED
            return self._context

        except BaseException:
            if self.state in (PipelineState.VALIDATING, PipelineState.RUNNING):
                self.state = PipelineState.FAILED
            raise

        finally:
            self.log.verbose = previous_verbose

    def run(self, options: Optional[RunOptions] = None, **kwargs: Any) -> Context:
        """Versão síncrona de `run_async`; não pode ser chamada dentro de um event loop ativo."""
        return asyncio.run(self.run_async(options, **kwargs))
