# src/seqflow/core/config/loader.py
"""
Loader de configuração do seqflow.

A configuração efetiva de um Pipeline é resolvida a partir de:
    - um arquivo de defaults (obrigatório), versionado com o projeto
    - um arquivo local de overrides (opcional; ignorado se não existir),
      tipicamente fora do controle de versão

O resultado alimenta `PipelineSettings.from_config` e, por consequência,
`Pipeline.from_config_file`.

Invariantes:
    - O arquivo de defaults é obrigatório
    - O resultado é sempre um `dict` cuja raiz é um mapping
    - Overrides nunca mutam os defaults

Limites explícitos:
    - Não interpreta a seção `pipeline` (ver `settings.py`)
"""

import json
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

import yaml  # PyYAML

from .errors import (
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .merge import deep_merge

PathLike = Union[str, Path]


def _parse_json(text: str) -> Any:
    return json.loads(text) if text.strip() else None


_READERS: Dict[str, Callable[[str], Any]] = {
    ".yaml": yaml.safe_load,
    ".yml": yaml.safe_load,
    ".json": _parse_json,
}


def read_config_file(path: PathLike) -> Dict[str, Any]:
    """
    Lê um único arquivo de configuração (YAML ou JSON).

    Arquivos vazios valem `{}`.

    Raises:
        DefaultsNotFoundError: Se o arquivo não existir.
        UnsupportedConfigFormatError: Se a extensão não for .yaml, .yml ou .json.
        InvalidConfigRootTypeError: Se a raiz não for um mapping.
    """
    path = Path(path)
    if not path.is_file():
        raise DefaultsNotFoundError(f"Config file not found: {path}")

    reader = _READERS.get(path.suffix.lower())
    if reader is None:
        raise UnsupportedConfigFormatError(
            f"Unsupported config format '{path.suffix}' (expected one of {sorted(_READERS)})"
        )

    data = reader(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Config root in {path.name} must be a mapping, got {type(data).__name__}"
        )
    return data


def load_config(*, defaults_path: PathLike, local_path: Optional[PathLike] = None) -> Dict[str, Any]:
    """
    Resolve a configuração efetiva: defaults + overrides locais (se existirem).

    Raises:
        DefaultsNotFoundError: Se o arquivo de defaults não existir.
        UnsupportedConfigFormatError: Formato não suportado.
        InvalidConfigRootTypeError: Raiz que não é mapping.
        ConfigTypeConflictError: Conflito estrutural durante o merge.
    """
    effective = read_config_file(defaults_path)
    if local_path is not None and Path(local_path).is_file():
        effective = deep_merge(effective, read_config_file(local_path))
    return effective
