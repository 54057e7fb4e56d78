# src/dagflow/core/pipeline/context.py
"""
Contexto de execução (carrier) compartilhado de uma run.

Este módulo define o `RunContext`, a estrutura canônica passada como
`ctx` a todos os handlers durante a execução de um Step, Pipeline ou Dag.

O RunContext atua como:
    - portador de valores (artifact store por chave explícita)
    - sinal de cancelamento cooperativo (`cancel` / `cancelled`)
    - registro de eventos estruturados de execução (log)
    - coleta de warnings não fatais por Runnable

Princípios fundamentais:
    - Isolamento por execução (cada run possui seu próprio contexto)
    - Comunicação explícita e rastreável
    - Ausência de estado global compartilhado

Invariantes:
    - Artefatos são indexados por chave explícita
    - Logs sempre incluem `run_id` e `step_id`
    - Warnings são agrupados por `step_id`

Limites explícitos:
    - Não executa Runnables
    - O engine nunca observa `cancelled`; apenas handlers o consultam
    - Não persiste dados automaticamente

Qualquer outro objeto pode ser usado como `ctx`; nesse caso o engine
apenas o repassa aos handlers, sem registrar eventos.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List

from ..ids import new_id


@dataclass
class RunContext:
    """
    Contexto de execução compartilhado de uma run.

    Campos canônicos:
    - run_id: identificador único da execução
    - created_at: timestamp UTC de criação do contexto
    - config: configuração efetiva (opcional)
    - meta: metadados livres da execução
    - events: log estruturado de eventos
    - warnings: warnings por step_id
    - _artifacts: store de valores (key -> value)
    """
    run_id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    config: Dict[str, Any] = field(default_factory=dict)
    meta: Dict[str, Any] = field(default_factory=dict)

    _artifacts: Dict[str, Any] = field(default_factory=dict, init=False, repr=False)
    _cancelled: bool = field(default=False, init=False, repr=False)
    events: List[Dict[str, Any]] = field(default_factory=list, init=False)
    warnings: Dict[str, List[str]] = field(default_factory=dict, init=False)

    # -----------------------------
    # Artifact store
    # -----------------------------
    def set_artifact(self, key: str, value: Any) -> None:
        self._artifacts[key] = value

    def has_artifact(self, key: str) -> bool:
        return key in self._artifacts

    def get_artifact(self, key: str) -> Any:
        if key not in self._artifacts:
            raise KeyError(key)
        return self._artifacts[key]

    # -----------------------------
    # Cancelamento cooperativo
    # -----------------------------
    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    # -----------------------------
    # Logging & warnings
    # -----------------------------
    def log(self, *, step_id: str, level: str, message: str, **extra: Any) -> None:
        event = {
            "run_id": self.run_id,
            "step_id": step_id,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(self, *, step_id: str, message: str) -> None:
        if step_id not in self.warnings:
            self.warnings[step_id] = []
        self.warnings[step_id].append(message)

    def events_for(self, step_id: str) -> List[Dict[str, Any]]:
        return [e for e in self.events if e.get("step_id") == step_id]
