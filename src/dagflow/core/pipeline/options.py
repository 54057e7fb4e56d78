# src/dagflow/core/pipeline/options.py
"""
Opções de construção de Runnables.

Cada opção é um valor imutável com exatamente um efeito, aplicado no
momento da construção via `new_step`, `new_pipeline` ou `new_dag`:

    - WithName(name)                      → define `name`
    - WithID(id)                          → define `id`
    - WithHandler(handler)                → define o handler (apenas Step)
    - WithRunnables(*nodes)               → adiciona filhos (Pipeline/Dag)
    - WithDependency(dependent, *deps)    → adiciona aresta (apenas Dag)

Opções não aplicáveis a uma variante são ignoradas (ex.: `WithHandler`
em um Dag). `None` em listas de Runnables é descartado.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from .types import StepHandler


@dataclass(frozen=True)
class WithName:
    name: str

    def apply(self, target: Any) -> None:
        target.name = self.name


@dataclass(frozen=True)
class WithID:
    id: str

    def apply(self, target: Any) -> None:
        target.id = self.id


@dataclass(frozen=True)
class WithHandler:
    handler: StepHandler

    def apply(self, target: Any) -> None:
        if hasattr(target, "set_handler"):
            target.set_handler(self.handler)


@dataclass(frozen=True)
class WithRunnables:
    runnables: Tuple[Any, ...]

    def __init__(self, *runnables: Any):
        object.__setattr__(self, "runnables", tuple(runnables))

    def apply(self, target: Any) -> None:
        if hasattr(target, "runnable_add"):
            target.runnable_add(*[r for r in self.runnables if r is not None])


@dataclass(frozen=True)
class WithDependency:
    """Aresta `dependent` depende de `dependencies`; ignorada se não houver o que ligar."""
    dependent: Optional[Any]
    dependencies: Tuple[Any, ...]

    def __init__(self, dependent: Optional[Any], *dependencies: Any):
        object.__setattr__(self, "dependent", dependent)
        object.__setattr__(self, "dependencies", tuple(dependencies))

    def apply(self, target: Any) -> None:
        if not hasattr(target, "dependency_add"):
            return
        deps = [d for d in self.dependencies if d is not None]
        if self.dependent is None or not deps:
            return
        target.dependency_add(self.dependent, *deps)


def apply_options(target: Any, options: Tuple[Any, ...]) -> None:
    for opt in options:
        if opt is None:
            continue
        opt.apply(target)
