# src/dagflow/core/ids.py
"""Geração de identificadores únicos para Runnables."""

from __future__ import annotations

import uuid


def new_id() -> str:
    """Retorna um identificador novo e único a cada chamada (uuid4 hex)."""
    return uuid.uuid4().hex
