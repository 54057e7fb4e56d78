# src/dagflow/core/config/__init__.py
"""
Camada de configuração do dagflow.

Responsabilidades do pacote:
    - Carregamento de arquivos (defaults + overrides locais)
    - Resolução via deep-merge determinístico
    - Construção declarativa de workflows (seção `workflow`)

Limites explícitos:
    - Não executa workflows
"""

from .builder import build_workflow
from .errors import (
    ConfigError,
    ConfigTypeConflictError,
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    InvalidWorkflowDefinitionError,
    UnknownHandlerError,
    UnsupportedConfigFormatError,
)
from .loader import load_config
from .merge import deep_merge

__all__ = [
    "load_config",
    "deep_merge",
    "build_workflow",
    "ConfigError",
    "DefaultsNotFoundError",
    "UnsupportedConfigFormatError",
    "InvalidConfigRootTypeError",
    "ConfigTypeConflictError",
    "InvalidWorkflowDefinitionError",
    "UnknownHandlerError",
]
