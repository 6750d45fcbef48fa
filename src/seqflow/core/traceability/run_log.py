# src/seqflow/core/traceability/run_log.py
"""
RunLog — log de execução orientado a linhas do seqflow.

Este módulo define o colaborador de log consumido pelo Pipeline e pelos
handlers (via `handles.log`). O log é mantido em memória como uma lista
ordenada de linhas e só é persistido em disco por chamadas explícitas a
`flush()`.

Princípios fundamentais:
    - Nenhuma linha é escrita em disco implicitamente
    - A ordem das linhas reflete a ordem das chamadas
    - UTC é o timezone canônico para todos os timestamps
    - Sem nome de arquivo configurado, `flush()` não toca o filesystem

Formato:
    - strings são divididas em linhas
    - mappings/listas são renderizados como JSON indentado
    - `run_level` indenta 2 espaços por nível acima de 1
    - quebras de seção (40 hífens) nunca são duplicadas em sequência

Limites explícitos:
    - Não decide quando fazer flush (responsabilidade do Pipeline)
    - Não interpreta o conteúdo das entradas
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional

logger = logging.getLogger(__name__)

INDENT_WIDTH = 2
SECTION_BREAK = "-" * 40


def to_utc_datetime_text(dt: Optional[datetime] = None) -> str:
    """
    Formata um timestamp como `YYYY-MM-DD HH:MM:SS UTC`.

    Timestamps timezone-naive são assumidos como UTC; os demais são
    convertidos para UTC. Sem argumento, usa o instante atual.
    """
    if dt is None:
        dt = datetime.now(timezone.utc)
    elif dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%d %H:%M:%S") + " UTC"


def _indent(run_level: int) -> str:
    return " " * (INDENT_WIDTH * max(0, run_level - 1))


class RunLog:
    """
    Log de execução em memória com persistência explícita.

    Args:
        log_dir: diretório de destino (relativo ao cwd quando não absoluto)
        log_file_name: nome do arquivo; vazio desabilita a escrita em disco
        verbose: ecoa cada entrada no logger `seqflow.core.traceability.run_log`
    """

    def __init__(self, *, log_dir: str = "logs", log_file_name: str = "", verbose: bool = False):
        self.log_dir = log_dir
        self.log_file_name = log_file_name
        self.verbose = verbose
        self._lines: List[str] = []

        self.append("Log created", prepend_timestamp=True, section_break_after=True)

    def append(
        self,
        entry: Any,
        *,
        prefix: str = "",
        section_break_before: bool = False,
        section_break_after: bool = False,
        prepend_timestamp: bool = False,
        run_level: int = 0,
    ) -> None:
        indent = _indent(run_level)
        timestamp = f"{to_utc_datetime_text()} | " if prepend_timestamp else ""

        if isinstance(entry, str):
            block = entry
            resolved_prefix = prefix
        else:
            block = json.dumps(entry, indent=2, default=str, ensure_ascii=False)
            resolved_prefix = f"{prefix}: " if prefix else ""

        if section_break_before:
            self.add_section_break(run_level)

        formatted = [
            f"{indent}{timestamp}{'' if index else resolved_prefix}{line}"
            for index, line in enumerate(block.split("\n"))
        ]
        self._lines.extend(formatted)

        if section_break_after:
            self.add_section_break(run_level)

        if self.verbose:
            logger.info("\n".join(formatted))

    def add_section_break(self, run_level: int = 1) -> None:
        if self._lines and SECTION_BREAK in self._lines[-1]:
            return
        self._lines.append(_indent(run_level) + SECTION_BREAK)

    def lines(self) -> List[str]:
        return list(self._lines)

    def format(self) -> str:
        return "\n".join(self._lines)

    def get_destination(self) -> Optional[Path]:
        """Caminho absoluto do arquivo de log, ou None quando a escrita está desabilitada."""
        if not self.log_file_name:
            return None
        return Path(self.log_dir or ".").resolve() / self.log_file_name

    def flush(self) -> Optional[Path]:
        """
        Persiste o log completo no destino configurado.

        Adiciona uma entrada `Log written` e sobrescreve o arquivo com todas
        as linhas acumuladas (UTF-8). Flushes repetidos são seguros: o arquivo
        reflete sempre o log inteiro.

        Returns:
            Optional[Path]: Caminho escrito, ou None se não houver destino.
        """
        destination = self.get_destination()
        if destination is None:
            return None

        self.append("Log written", prepend_timestamp=True, section_break_before=True)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(self.format(), encoding="utf-8")
        return destination
