# src/seqflow/core/config/errors.py
"""
Exceções canônicas da camada de configuração do seqflow.

As exceções aqui definidas representam violações estruturais da
configuração (arquivo ausente, formato não suportado, tipos
incompatíveis), e não erros de execução de Steps.

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - Nenhuma exceção representa erro de execução do pipeline
"""


class ConfigError(Exception):
    """
    Exceção base para erros relacionados à configuração do seqflow.

    Permite captura genérica de falhas de carregamento, merge e
    resolução de settings, separando-as das falhas de execução.
    """


class DefaultsNotFoundError(ConfigError):
    """
    O arquivo de configuração base (defaults) não existe.

    O arquivo de defaults é obrigatório; o arquivo local é opcional.
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Formato de arquivo não suportado pelo loader.

    Formatos suportados: YAML (.yaml, .yml) e JSON (.json).
    """


class InvalidConfigRootTypeError(ConfigError):
    """O conteúdo raiz do arquivo não é um mapa chave-valor."""


class ConfigTypeConflictError(ConfigError):
    """
    Uma mesma chave possui tipos incompatíveis entre base e override.

    Exemplo de conflito:
        - base:     {"pipeline": {"log": {"verbose": false}}}
        - override: {"pipeline": {"log": "DEBUG"}}
    """


class UnknownConfigKeyError(ConfigError):
    """A seção `pipeline` contém chaves que o seqflow não reconhece."""


class InvalidConfigValueError(ConfigError):
    """Um valor da seção `pipeline` tem tipo ou formato inválido."""
