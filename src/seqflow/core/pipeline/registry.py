# src/seqflow/core/pipeline/registry.py
"""
Registro estrutural de Steps do pipeline.

Este módulo define o `StepRegistry`, responsável por registrar Steps
e validar a integridade estrutural do pipeline antes de qualquer
filtragem ou execução.

Responsabilidades do módulo:
    - Validar unicidade de `step.name`
    - Validar a posse do Step (token do Pipeline dono)
    - Preservar ordem de registro (ordem padrão de execução)

Invariantes:
    - Cada Step registrado possui um nome único
    - A lista de Steps reflete exatamente a ordem de registro
    - Um registro rejeitado não altera o estado do registry

Limites explícitos:
    - Não valida dependências
    - Não executa Steps
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from seqflow.core.exceptions import RegistrationError

from .step import Step


@dataclass
class StepRegistry:
    """
    Registro append-only de Steps de um único Pipeline.

    O `owner_token` identifica o Pipeline dono: Steps criados por outro
    Pipeline (token diferente) são rejeitados com `RegistrationError`.
    """

    owner_token: Optional[str] = None
    _steps: Dict[str, Step] = field(default_factory=dict, init=False, repr=False)
    _order: List[str] = field(default_factory=list, init=False, repr=False)

    def check(self, step: Step) -> None:
        """Valida o Step sem registrá-lo."""
        if step.name in self._steps:
            raise RegistrationError(
                f"Duplicate step name: {step.name}",
                details={"step": step.name},
                hint="Step names must be unique within a pipeline",
            )

        token = step.owner_token
        if token is not None and self.owner_token is not None and token != self.owner_token:
            raise RegistrationError(
                f"Step '{step.name}' was created by a different pipeline",
                details={"step": step.name},
                hint="Create the step with this pipeline's create_step or add_step",
            )

    def add(self, step: Step) -> None:
        self.check(step)
        self._steps[step.name] = step
        self._order.append(step.name)

    def get(self, name: str) -> Step:
        return self._steps[name]

    def list(self) -> List[Step]:
        return [self._steps[name] for name in self._order]

    def names(self) -> List[str]:
        return list(self._order)

    def __contains__(self, name: object) -> bool:
        return name in self._steps

    def __len__(self) -> int:
        return len(self._order)
