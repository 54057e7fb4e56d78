# src/dagflow/core/state.py
"""
State v1: checkpoint de execução de um Runnable no dagflow.

Este módulo define a estrutura e as operações canônicas do `State`,
o registro que permite suspender e retomar a execução de um Runnable,
inclusive em outro processo, a partir de bytes serializados.

O State consolida:
    - status de execução (máquina de estados fechada)
    - data bag mutável no último checkpoint
    - id do passo corrente
    - histórico ordenado de passos concluídos
    - timestamp UTC da última mutação

Princípios fundamentais:
    - Toda mutação ocorre por setters explícitos
    - Transições inválidas são rejeitadas silenciosamente (status inalterado)
    - A serialização é JSON determinístico (round-trip)
    - A desserialização é tudo-ou-nada

Decisões arquiteturais:
    - UTC é o timezone canônico para `last_updated`
    - `completed_steps` é append-only dentro de uma run lógica
    - `to_json` não altera o State (serialização pura)

Invariantes:
    - `status` é sempre um `StateStatus` conhecido
    - `completed_steps` nunca encolhe nem é reordenado
    - Falha de desserialização nunca altera parcialmente o receptor

Limites explícitos:
    - Não executa Runnables
    - Não decide ordem de execução
    - Não valida o schema do data bag (responsabilidade dos handlers)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Union

from .exceptions import StateDeserializationError, StateSerializationError
from .pipeline.types import VALID_TRANSITIONS, StateStatus


STATE_FIELDS = ("status", "data", "current_step_id", "completed_steps", "last_updated")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _ensure_tzaware_utc(dt: datetime) -> datetime:
    """Normaliza um timestamp para timezone-aware em UTC (naive é assumido UTC)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@dataclass
class State:
    """
    Checkpoint de execução de um Runnable.

    Cada Step, Pipeline e Dag possui exatamente um State. Um State recém
    construído está em `waiting` (status vazio); `new_state()` produz o
    State inicial de uma nova run (`running`).

    Campos:
        - status: status corrente (`StateStatus`)
        - data: data bag no último checkpoint
        - current_step_id: filho em execução (ou prestes a executar)
        - completed_steps: ids de filhos concluídos nesta run, em ordem
        - last_updated: timestamp UTC da última mutação

    Decisões arquiteturais:
        - `set_status` aplica a tabela `VALID_TRANSITIONS`
        - Transições fora da tabela não levantam erro: o chamador
          inspeciona `status` para detectar a rejeição
        - Todo setter e toda transição aceita atualizam `last_updated`
    """

    status: StateStatus = StateStatus.WAITING
    data: Dict[str, Any] = field(default_factory=dict)
    current_step_id: str = ""
    completed_steps: List[str] = field(default_factory=list)
    last_updated: datetime = field(default_factory=_utcnow)

    # -----------------------------
    # Status (máquina de estados)
    # -----------------------------
    def get_status(self) -> StateStatus:
        return self.status

    def set_status(self, status: Union[StateStatus, str]) -> bool:
        """Aplica a transição se permitida. Retorna True quando aceita."""
        try:
            target = StateStatus(status)
        except ValueError:
            return False

        if target not in VALID_TRANSITIONS[self.status]:
            return False

        self.status = target
        self.last_updated = _utcnow()
        return True

    def can_transition(self, status: Union[StateStatus, str]) -> bool:
        try:
            return StateStatus(status) in VALID_TRANSITIONS[self.status]
        except ValueError:
            return False

    # -----------------------------
    # Data bag
    # -----------------------------
    def get_data(self) -> Dict[str, Any]:
        return self.data

    def set_data(self, data: Dict[str, Any]) -> None:
        self.data = data if data is not None else {}
        self.last_updated = _utcnow()

    # -----------------------------
    # Progresso
    # -----------------------------
    def get_current_step_id(self) -> str:
        return self.current_step_id

    def set_current_step_id(self, step_id: str) -> None:
        self.current_step_id = step_id
        self.last_updated = _utcnow()

    def get_completed_steps(self) -> List[str]:
        return self.completed_steps

    def add_completed_step(self, step_id: str) -> None:
        self.completed_steps.append(step_id)
        self.last_updated = _utcnow()

    def is_step_completed(self, step_id: str) -> bool:
        return step_id in self.completed_steps

    def get_last_updated(self) -> datetime:
        return self.last_updated

    def set_last_updated(self, ts: datetime) -> None:
        self.last_updated = _ensure_tzaware_utc(ts)

    # -----------------------------
    # Serialização
    # -----------------------------
    def to_dict(self) -> Dict[str, Any]:
        """Representação serializável; independente do estado interno."""
        return {
            "status": self.status.value,
            "data": dict(self.data),
            "current_step_id": self.current_step_id,
            "completed_steps": list(self.completed_steps),
            "last_updated": _ensure_tzaware_utc(self.last_updated).isoformat(),
        }

    @classmethod
    def from_dict(cls, payload: Any) -> "State":
        """
        Reconstrói um State a partir de sua representação em dicionário.

        Diferente de uma reconstrução permissiva, todos os cinco campos
        canônicos são obrigatórios e validados por tipo. Qualquer desvio
        resulta em `StateDeserializationError`.

        Args:
            payload (Any): Dicionário produzido por `to_dict` (ou JSON equivalente).

        Returns:
            State: Nova instância reconstruída.

        Raises:
            StateDeserializationError: Se a estrutura ou os tipos forem inválidos.
        """
        if not isinstance(payload, dict):
            raise StateDeserializationError(
                f"State root must be a JSON object, got: {type(payload).__name__}",
                details={"received": type(payload).__name__},
            )

        missing = [k for k in STATE_FIELDS if k not in payload]
        if missing:
            raise StateDeserializationError(
                f"State is missing fields: {', '.join(missing)}",
                details={"missing": missing},
            )

        raw_status = payload["status"]
        try:
            status = StateStatus(raw_status)
        except ValueError:
            raise StateDeserializationError(
                f"Unknown state status: {raw_status!r}",
                details={"status": raw_status},
            ) from None

        data = payload["data"]
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise StateDeserializationError(
                f"State data must be an object, got: {type(data).__name__}",
                details={"field": "data"},
            )

        current_step_id = payload["current_step_id"]
        if current_step_id is None:
            current_step_id = ""
        if not isinstance(current_step_id, str):
            raise StateDeserializationError(
                "State current_step_id must be a string",
                details={"field": "current_step_id"},
            )

        completed = payload["completed_steps"]
        if completed is None:
            completed = []
        if not isinstance(completed, list) or not all(isinstance(s, str) for s in completed):
            raise StateDeserializationError(
                "State completed_steps must be a list of strings",
                details={"field": "completed_steps"},
            )

        raw_ts = payload["last_updated"]
        try:
            last_updated = _ensure_tzaware_utc(datetime.fromisoformat(raw_ts))
        except (TypeError, ValueError):
            raise StateDeserializationError(
                f"State last_updated is not an ISO-8601 timestamp: {raw_ts!r}",
                details={"field": "last_updated"},
            ) from None

        return cls(
            status=status,
            data=dict(data),
            current_step_id=current_step_id,
            completed_steps=list(completed),
            last_updated=last_updated,
        )

    def to_json(self) -> bytes:
        try:
            text = json.dumps(self.to_dict(), ensure_ascii=False, sort_keys=True)
        except (TypeError, ValueError) as e:
            raise StateSerializationError(
                f"State data is not JSON serializable: {e}",
                details={"exception_class": e.__class__.__name__},
                hint="Mantenha no data bag apenas valores compatíveis com JSON",
            ) from e
        return text.encode("utf-8")

    def from_json(self, raw: Union[bytes, bytearray, str]) -> None:
        """
        Substitui integralmente este State a partir de bytes JSON.

        A operação é tudo-ou-nada: o payload é decodificado e validado
        por completo antes de qualquer campo do receptor ser alterado.

        Raises:
            StateDeserializationError: Entrada vazia, JSON inválido ou schema inválido.
        """
        if raw is None or len(raw) == 0:
            raise StateDeserializationError("Cannot deserialize state from empty input")

        try:
            text = raw.decode("utf-8") if isinstance(raw, (bytes, bytearray)) else raw
            payload = json.loads(text)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise StateDeserializationError(
                f"Malformed state JSON: {e}",
                details={"exception_class": e.__class__.__name__},
            ) from e

        restored = State.from_dict(payload)

        self.status = restored.status
        self.data = restored.data
        self.current_step_id = restored.current_step_id
        self.completed_steps = restored.completed_steps
        self.last_updated = restored.last_updated

    @classmethod
    def loads(cls, raw: Union[bytes, bytearray, str]) -> "State":
        """Atalho: cria um State novo a partir de bytes JSON."""
        state = cls()
        state.from_json(raw)
        return state


def new_state() -> State:
    """State inicial de uma nova run: `running`, data e histórico vazios."""
    state = State()
    state.set_status(StateStatus.RUNNING)
    return state


def save_state(state: State, path: Path) -> None:
    """
    Persiste um State em disco no formato JSON.

    O arquivo produzido é compatível com o round-trip via `load_state`
    e com `State.from_json` (mesmo schema).
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(state.to_json())


def load_state(path: Path) -> State:
    """
    Carrega um State persistido a partir de um arquivo JSON.

    Raises:
        FileNotFoundError: Se o arquivo não existir.
        StateDeserializationError: Em caso de conteúdo inválido.
    """
    return State.loads(Path(path).read_bytes())
