# src/seqflow/core/engine/planner.py
"""
Planejador da sequência de execução do pipeline.

Este módulo resolve QUAIS Steps rodam em uma execução e verifica se a
ordem resultante respeita as dependências declaradas. Diferente de um
planner de DAG, ele nunca reordena: a ordem de execução é sempre a
ordem de registro, e a validação de dependências existe justamente para
detectar quando essa ordem viola o que os Steps declaram.

Componentes:
    - filter_steps           → slice, include/exclude e veto exclude_by_default
    - validate_dependencies  → dependências ausentes ou fora de ordem

Princípios fundamentais:
    - Funções puras sobre sequências de Steps
    - Determinismo: a mesma entrada produz sempre a mesma saída
    - Erros são agregados (uma mensagem por violação), não lançados

Limites explícitos:
    - Não executa Steps
    - Não interage com o contexto nem com o RunLog
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from seqflow.core.pipeline.step import Step
from seqflow.core.pipeline.types import RunOptions, ValidationReport


def filter_steps(steps: Sequence[Step], options: Optional[RunOptions] = None) -> List[Step]:
    """
    Calcula o subconjunto ordenado de Steps a executar.

    Ordem de aplicação:
        1. slice `(start,)` ou `(start, end)` com semântica de fatiamento do Python
        2. `exclude_steps` remove nomes; ou `include_steps` mantém apenas os nomes
           (a ordem do registry prevalece sobre a ordem da lista)
        3. Steps com `exclude_by_default` são descartados, exceto quando
           nomeados explicitamente em `include_steps`

    Args:
        steps (Sequence[Step]): Steps na ordem de registro.
        options (Optional[RunOptions]): Critérios de filtro; None equivale ao padrão.

    Returns:
        List[Step]: Subsequência na ordem original.
    """
    options = options or RunOptions()

    start, *rest = options.slice
    end = rest[0] if rest else None
    selected = list(steps)[start:end]

    included = set(options.include_steps) if options.include_steps is not None else None
    if options.exclude_steps is not None:
        excluded = set(options.exclude_steps)
        selected = [s for s in selected if s.name not in excluded]
    elif included is not None:
        selected = [s for s in selected if s.name in included]

    return [
        s for s in selected
        if not s.exclude_by_default or (included is not None and s.name in included)
    ]


def validate_dependencies(sequence: Iterable[Step]) -> ValidationReport:
    """
    Verifica se cada dependência declarada está presente e ocorre antes do dependente.

    Mensagens (uma por violação, na ordem de declaração):
        - dependência ausente da sequência
        - dependência posicionada depois do dependente
        - Step que depende de si mesmo

    Dependências repetidas em um mesmo Step geram warning.

    Returns:
        ValidationReport: `errors` e `warnings`; nada é lançado.
    """
    ordered = list(sequence)
    position: Dict[str, int] = {step.name: index for index, step in enumerate(ordered)}

    errors: List[str] = []
    warnings: List[str] = []

    for index, step in enumerate(ordered):
        seen = set()
        for dep in step.depends_on:
            if dep in seen:
                warnings.append(f"Step '{step.name}' lists dependency '{dep}' more than once")
                continue
            seen.add(dep)

            if dep == step.name:
                errors.append(f"Step '{step.name}' cannot depend on itself")
            elif dep not in position:
                errors.append(f"Step '{dep}', required by '{step.name}', is not in the pipeline")
            elif position[dep] > index:
                errors.append(
                    f"Step '{dep}', required by '{step.name}', must run before it "
                    f"but is scheduled after it"
                )

    return ValidationReport(errors=errors, warnings=warnings)
