# src/dagflow/core/config/merge.py
"""
Deep-merge determinístico de configuração.

Política:
    - dict + dict → merge recursivo por chave
    - list        → substituída por inteiro
    - escalar     → substituído pelo override
    - tipos diferentes na mesma chave → ConfigTypeConflictError

O merge é puramente funcional: nenhum input é mutado e a mesma entrada
sempre produz a mesma saída.
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict

from .errors import ConfigTypeConflictError


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Combina `override` sobre `base`, retornando um novo dicionário.

    Args:
        base (Dict[str, Any]): Configuração base (defaults).
        override (Dict[str, Any]): Overrides explícitos.

    Returns:
        Dict[str, Any]: Nova configuração resultante.

    Raises:
        ConfigTypeConflictError: Se uma chave tiver tipos incompatíveis.
    """
    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            "Deep-merge requer dicts no nível raiz",
            details={"base": type(base).__name__, "override": type(override).__name__},
        )

    merged: Dict[str, Any] = deepcopy(base)

    for key, value in override.items():
        if key not in merged:
            merged[key] = deepcopy(value)
            continue

        current = merged[key]

        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        elif isinstance(value, list):
            merged[key] = deepcopy(value)
        elif type(current) is not type(value):
            raise ConfigTypeConflictError(
                f"Conflito de tipo na chave '{key}'",
                details={
                    "key": key,
                    "base": type(current).__name__,
                    "override": type(value).__name__,
                },
            )
        else:
            merged[key] = deepcopy(value)

    return merged
