"""
Pacote de rastreabilidade (traceability) do seqflow.

Define o RunLog, o log de execução orientado a linhas que o Pipeline
alimenta (cabeçalho, início de Steps, falhas serializadas, sinais) e
que os handlers recebem via `handles.log`.

API pública exposta:
    - RunLog               → log em memória com flush explícito para arquivo
    - to_utc_datetime_text → formatação canônica de timestamps UTC
"""

from .run_log import RunLog, SECTION_BREAK, to_utc_datetime_text

__all__ = [
    "RunLog",
    "SECTION_BREAK",
    "to_utc_datetime_text",
]
