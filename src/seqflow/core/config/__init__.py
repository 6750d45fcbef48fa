# src/seqflow/core/config/__init__.py

"""
Camada de configuração do seqflow.

Responsabilidades do pacote:
    - Carregamento de arquivos de configuração (defaults + overrides locais)
    - Resolução de configuração final via deep-merge determinístico
    - Interpretação da seção `pipeline` em `PipelineSettings`

Princípios fundamentais:
    - Configuração não contém lógica de execução
    - Overrides são sempre explícitos
    - A mesma entrada sempre produz a mesma configuração final
"""

from .errors import (
    ConfigError,
    ConfigTypeConflictError,
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    InvalidConfigValueError,
    UnknownConfigKeyError,
    UnsupportedConfigFormatError,
)
from .loader import load_config, read_config_file
from .merge import deep_merge
from .settings import PipelineSettings

__all__ = [
    "ConfigError",
    "ConfigTypeConflictError",
    "DefaultsNotFoundError",
    "InvalidConfigRootTypeError",
    "InvalidConfigValueError",
    "UnknownConfigKeyError",
    "UnsupportedConfigFormatError",
    "PipelineSettings",
    "deep_merge",
    "load_config",
    "read_config_file",
]
