# src/dagflow/core/config/loader.py
"""
Loader de configuração do dagflow.

A configuração efetiva é resolvida a partir de:
    - um arquivo de defaults (obrigatório)
    - um arquivo local de overrides (opcional, ignorado se ausente)

Responsabilidades:
    - Ler YAML (PyYAML `safe_load`) ou JSON
    - Validar o tipo raiz (dict)
    - Resolver defaults + local via `deep_merge`

Invariantes:
    - O resultado é sempre um `dict` puro
    - Overrides nunca mutam os defaults
    - Arquivo vazio equivale a `{}`

Limites explícitos:
    - Não valida a seção `workflow` (ver `builder`)
    - Não persiste configuração
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml  # PyYAML

from .errors import (
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .merge import deep_merge


PathLike = Union[str, Path]

YAML_SUFFIXES = {".yaml", ".yml"}
JSON_SUFFIXES = {".json"}


def _read_file(path: Path) -> Dict[str, Any]:
    """
    Lê um arquivo de configuração e valida sua estrutura mínima.

    Raises:
        DefaultsNotFoundError: Se o arquivo não existir.
        UnsupportedConfigFormatError: Se a extensão não for suportada.
        InvalidConfigRootTypeError: Se a raiz não for um dicionário.
    """
    if not path.exists():
        raise DefaultsNotFoundError(
            f"Arquivo de defaults não encontrado: {path}",
            details={"path": str(path)},
        )

    suffix = path.suffix.lower()
    with path.open("r", encoding="utf-8") as f:
        if suffix in YAML_SUFFIXES:
            content = yaml.safe_load(f)
        elif suffix in JSON_SUFFIXES:
            content = json.load(f)
        else:
            raise UnsupportedConfigFormatError(
                f"Formato não suportado: {path.suffix}",
                details={"path": str(path), "suffix": path.suffix},
            )

    if content is None:
        return {}

    if not isinstance(content, dict):
        raise InvalidConfigRootTypeError(
            f"Config root deve ser dict, recebido: {type(content).__name__}",
            details={"path": str(path), "received": type(content).__name__},
        )

    return content


def load_config(
    *,
    defaults_path: PathLike,
    local_path: Optional[PathLike] = None,
) -> Dict[str, Any]:
    """
    Carrega e resolve a configuração efetiva.

    Política de resolução:
        - defaults é obrigatório
        - local é opcional; quando existe, vence defaults via `deep_merge`

    Args:
        defaults_path (PathLike): Caminho do arquivo base.
        local_path (Optional[PathLike]): Caminho opcional de overrides.

    Returns:
        Dict[str, Any]: Configuração final resolvida.

    Raises:
        DefaultsNotFoundError: Se o arquivo de defaults não existir.
        UnsupportedConfigFormatError: Se o formato não for suportado.
        InvalidConfigRootTypeError: Se a raiz não for um dicionário.
        ConfigTypeConflictError: Em conflito de tipos durante o merge.
    """
    effective = _read_file(Path(defaults_path))

    if local_path is not None:
        local_file = Path(local_path)
        if local_file.exists():
            effective = deep_merge(effective, _read_file(local_file))

    return effective
