"""
Core do seqflow.

Componentes principais:
    - context       → merge de contexto e resolução de caminhos pontuados
    - pipeline      → Step, registry e tipos compartilhados
    - engine        → planner (filtro + dependências) e Pipeline
    - config        → carregamento, merge e settings de execução
    - traceability  → RunLog (log de execução persistido sob demanda)

Princípios fundamentais:
    - Nenhuma decisão silenciosa: todo comportamento é explícito e testado
    - Estado compartilhado (o contexto) tem um único escritor: o Pipeline
"""
