# src/seqflow/core/config/settings.py
"""
Settings do Pipeline resolvidos a partir da configuração efetiva.

Lê exclusivamente a seção `pipeline` da configuração:

    pipeline:
      log:
        dir: logs            # diretório do RunLog
        file_name: run.log   # vazio desabilita escrita em disco
        verbose: false       # ecoa entradas no logging padrão
      run:                   # defaults de run() quando o chamador não filtra
        slice: [0]
        include_steps: null
        exclude_steps: null

Chaves desconhecidas são rejeitadas para que erros de digitação não
passem silenciosamente.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from seqflow.core.exceptions import RunOptionsError
from seqflow.core.pipeline.types import RunOptions

from .errors import InvalidConfigValueError, UnknownConfigKeyError

_ALLOWED_KEYS = {
    "pipeline": {"log", "run"},
    "pipeline.log": {"dir", "file_name", "verbose"},
    "pipeline.run": {"slice", "include_steps", "exclude_steps"},
}


def _section(config: Mapping[str, Any], name: str) -> Dict[str, Any]:
    node: Any = config
    for segment in name.split("."):
        node = node.get(segment)
        if node is None:
            return {}
        if not isinstance(node, Mapping):
            raise InvalidConfigValueError(f"'{name}' must be a mapping, got {type(node).__name__}")
    unknown = set(node) - _ALLOWED_KEYS[name]
    if unknown:
        raise UnknownConfigKeyError(f"Unknown keys under '{name}': {sorted(unknown)}")
    return dict(node)


@dataclass(frozen=True)
class PipelineSettings:
    """Configuração ambiente de um Pipeline: destino do log e defaults de execução."""

    log_dir: str = "logs"
    log_file_name: str = ""
    verbose: bool = False
    run_defaults: RunOptions = field(default_factory=RunOptions)

    @classmethod
    def from_config(cls, config: Optional[Mapping[str, Any]]) -> "PipelineSettings":
        config = config or {}
        _section(config, "pipeline")
        log_cfg = _section(config, "pipeline.log")
        run_cfg = _section(config, "pipeline.run")

        verbose = log_cfg.get("verbose", False)
        if not isinstance(verbose, bool):
            raise InvalidConfigValueError("'pipeline.log.verbose' must be a boolean")

        try:
            run_defaults = RunOptions.build(**{k: v for k, v in run_cfg.items() if v is not None})
        except RunOptionsError as exc:
            raise InvalidConfigValueError(f"Invalid 'pipeline.run' section: {exc}") from exc

        return cls(
            log_dir=str(log_cfg.get("dir") or "logs"),
            log_file_name=str(log_cfg.get("file_name") or ""),
            verbose=verbose,
            run_defaults=run_defaults,
        )
