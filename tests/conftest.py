# tests/conftest.py
"""
Fixtures compartilhados para testes do seqflow.

Este módulo define fixtures reutilizáveis que fornecem:
- um RunLog em memória (sem escrita em disco)
- um Pipeline vazio ligado a esse log
- handlers de gravação que registram chamadas e devolvem fragmentos fixos
- YAMLs de configuração semelhantes ao uso real

Decisões arquiteturais:
    - Fixtures são mantidas simples e explícitas
    - Nenhuma fixture escreve em disco; testes de arquivo usam `tmp_path`
    - Imports do core são feitos de forma lazy para erros mais legíveis

Invariantes:
    - Nenhuma fixture executa uma run
    - Todas as fixtures são isoladas entre testes
"""

import pytest


# =====================================================
# Config fixtures
# =====================================================

@pytest.fixture
def pipeline_config_defaults_yaml() -> str:
    """
    YAML de defaults semelhante a um `seqflow.defaults.yaml` de projeto.

    Representa a base completa sobre a qual overrides locais são aplicados.
    """
    return """\
pipeline:
  log:
    dir: logs
    file_name: ""
    verbose: false
  run:
    slice: [0]
    exclude_steps: [publish]
"""


@pytest.fixture
def pipeline_config_local_yaml() -> str:
    """YAML de overrides locais: liga o arquivo de log e troca a lista de exclusão."""
    return """\
pipeline:
  log:
    file_name: run.log
  run:
    exclude_steps: [notify]
"""


# =====================================================
# Pipeline fixtures
# =====================================================

@pytest.fixture
def memory_log():
    """RunLog sem nome de arquivo: `flush()` nunca toca o filesystem."""
    from seqflow.core.traceability.run_log import RunLog

    return RunLog()


@pytest.fixture
def pipeline(memory_log):
    """Pipeline vazio, sem contexto inicial, ligado a um RunLog em memória."""
    from seqflow.core.engine.pipeline import Pipeline

    return Pipeline(log=memory_log)


@pytest.fixture
def recording_handler():
    """
    Fábrica de handlers que registram cada chamada.

    Uso:
        calls = []
        handle = recording_handler("a", {"a": 1}, calls)

    O handler anexa `name` em `calls` e devolve `fragment`.
    """
    def _make(name, fragment=None, calls=None):
        def _handle(context, handles):
            if calls is not None:
                calls.append(name)
            return fragment

        return _handle

    return _make
