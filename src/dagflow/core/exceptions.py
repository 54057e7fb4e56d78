# src/dagflow/core/exceptions.py
"""
dagflow: Canonical Exceptions (v1)

Este módulo define as exceções tipadas do dagflow.

Objetivo:
- Permitir que State, Runnables e Engine levantem exceções semânticas tipadas
- Manter mensagens curtas e dados estruturados em `details`
- Evitar ValueError/RuntimeError genéricos em guardrails críticos

Regras:
- Erros de handler NÃO são encapsulados: propagam inalterados (mesmo objeto).
- Exceções devem carregar apenas dados estruturados (serializáveis).
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class DagflowError(Exception):
    """Base class para exceções internas do dagflow.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Mensagem deve ser curta e humana
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Dict[str, Any]] = None,
        hint: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = dict(details or {})
        self.hint = hint

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "details": dict(self.details),
            "hint": self.hint,
        }


# ---------------------------------------------------------------------------
# Máquina de estados
# ---------------------------------------------------------------------------

class InvalidTransitionError(DagflowError):
    """Operação de controle (pause/resume) chamada em status incompatível."""


class WorkflowNotRunningError(InvalidTransitionError):
    """`pause` chamado enquanto o Runnable não está em `running`."""


class WorkflowNotPausedError(InvalidTransitionError):
    """`resume` chamado enquanto o Runnable não está em `paused`."""


# ---------------------------------------------------------------------------
# Serialização de State
# ---------------------------------------------------------------------------

class StateDeserializationError(DagflowError, ValueError):
    """Bytes malformados, vazios ou com schema inválido ao restaurar State."""


class StateSerializationError(DagflowError, TypeError):
    """State contém dados que não podem ser serializados em JSON."""


# ---------------------------------------------------------------------------
# Step / handler
# ---------------------------------------------------------------------------

class HandlerNotSetError(DagflowError):
    """Step executado sem handler configurado."""


class InvalidHandlerResultError(DagflowError, TypeError):
    """Handler retornou algo diferente de `(ctx, data)`."""
