# src/dagflow/core/config/errors.py
"""
Exceções da camada de configuração do dagflow.

Cobrem duas fases distintas:
    - carregamento e merge de arquivos (YAML/JSON)
    - construção declarativa de workflows a partir da seção `workflow`

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - Nenhuma delas representa erro de execução de handler

Limites explícitos:
    - Não realiza fallback ou recovery
"""

from __future__ import annotations

from ..exceptions import DagflowError


class ConfigError(DagflowError):
    """Base para erros de carregamento, merge e build de configuração."""


class DefaultsNotFoundError(ConfigError):
    """
    O arquivo de defaults não existe no caminho informado.

    O arquivo de defaults é obrigatório; sem ele não há configuração
    efetiva válida e nada é inferido automaticamente.
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Extensão de arquivo não suportada.

    Formatos aceitos: YAML (.yaml, .yml) e JSON (.json). O formato não é
    inferido pelo conteúdo.
    """


class InvalidConfigRootTypeError(ConfigError):
    """O conteúdo raiz do arquivo não é um mapa chave-valor."""


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos para a mesma chave durante o deep-merge.

    Exemplo:
        - base:     {"workflow": {"name": "Ingest"}}
        - override: {"workflow": "ingest"}

    Nenhum merge parcial é produzido e não há coerção de tipos.
    """


class InvalidWorkflowDefinitionError(ConfigError):
    """A seção `workflow` (ou um nó dela) não respeita o schema declarativo."""


class UnknownHandlerError(ConfigError):
    """Um Step declarado referencia um handler ausente do HandlerRegistry."""
