"""
Engine do seqflow.

Este pacote contém o planner (filtro da sequência e validação de
dependências) e o Pipeline, orquestrador que executa a sequência
validada um Step por vez.

Princípios fundamentais:
    - Filtragem e validação são funções puras, testáveis isoladamente
    - A ordem de execução é a ordem de registro; nunca há reordenação
    - Steps executam estritamente em série, sem sobreposição

Limites explícitos:
    - Não agenda Steps em paralelo
    - Não faz retry nem retomada de runs
"""

from .pipeline import Pipeline
from .planner import filter_steps, validate_dependencies

__all__ = [
    "Pipeline",
    "filter_steps",
    "validate_dependencies",
]
