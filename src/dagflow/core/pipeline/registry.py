# src/dagflow/core/pipeline/registry.py
"""
Registro nomeado de handlers.

Este módulo define o `HandlerRegistry`, responsável por registrar
funções handler sob nomes estáveis, para que workflows declarados em
configuração (YAML/JSON) possam referenciá-las por nome.

Decisões arquiteturais:
    - A validação ocorre no registro, antes de qualquer build de workflow
    - Nomes duplicados são tratados como falha fatal
    - A ordem de registro é preservada separadamente do armazenamento

Invariantes:
    - Cada nome registrado é único e não vazio
    - `list()` reflete exatamente a ordem de registro

Limites explícitos:
    - Não executa handlers
    - Não constrói Runnables (ver `dagflow.core.config.builder`)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from .types import StepHandler


class DuplicateHandlerError(ValueError):
    """
    Exceção levantada quando um nome de handler já está registrado.

    A exceção é lançada no momento do registro; o registry não tenta
    renomear nem sobrescrever o handler existente.
    """


@dataclass
class HandlerRegistry:
    """Registro canônico `nome -> handler`, com ordem de registro preservada."""

    _handlers: Dict[str, StepHandler] = field(default_factory=dict, init=False, repr=False)
    _order: List[str] = field(default_factory=list, init=False, repr=False)

    def add(self, name: str, handler: StepHandler) -> None:
        if not isinstance(name, str) or not name.strip():
            raise ValueError("handler name must be a non-empty string")
        if not callable(handler):
            raise TypeError(f"handler '{name}' must be callable")

        if name in self._handlers:
            raise DuplicateHandlerError(f"Duplicate handler name: {name}")

        self._handlers[name] = handler
        self._order.append(name)

    def register(self, name: Optional[str] = None) -> Callable[[StepHandler], StepHandler]:
        """Decorator: registra a função sob `name` (default: `__name__`)."""
        def decorator(fn: StepHandler) -> StepHandler:
            self.add(name or fn.__name__, fn)
            return fn
        return decorator

    def get(self, name: str) -> StepHandler:
        return self._handlers[name]

    def has(self, name: str) -> bool:
        return name in self._handlers

    def list(self) -> List[str]:
        return list(self._order)
