# src/dagflow/core/config/builder.py
"""
Construção declarativa de workflows a partir da configuração.

Lê a seção `workflow` da configuração efetiva e produz o Runnable
correspondente (Dag, Pipeline ou Step), resolvendo handlers por nome
em um `HandlerRegistry`.

Schema (YAML):

    workflow:
      type: dag            # dag | pipeline | step (default: dag)
      id: ingest
      name: Ingest
      runnables:
        - {id: fetch, name: Fetch, handler: fetch}
        - {id: clean, handler: clean}
        - {id: nested, type: pipeline, runnables: [{id: x, handler: x}]}
      dependencies:
        clean: [fetch]

Regras:
    - Nós filhos são `step` quando `type` é omitido
    - Nós com `enabled: false` são omitidos do workflow construído
    - `dependencies` só é aceito em Dags
    - Ids explícitos devem ser únicos dentro do mesmo container

Limites explícitos:
    - Não executa o workflow
    - Não carrega arquivos (ver `loader.load_config`)
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Set

from ..engine.dag import Dag
from ..engine.pipeline import Pipeline
from ..engine.step import Step
from ..pipeline.registry import HandlerRegistry
from ..pipeline.runnable import Runnable
from .errors import InvalidWorkflowDefinitionError, UnknownHandlerError


RUNNABLE_TYPES = ("dag", "pipeline", "step")


def _invalid(path: str, message: str) -> InvalidWorkflowDefinitionError:
    return InvalidWorkflowDefinitionError(f"{path}: {message}", details={"path": path})


def _optional_str(node: Mapping[str, Any], key: str, path: str) -> Optional[str]:
    value = node.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise _invalid(f"{path}.{key}", f"deve ser string, recebido: {type(value).__name__}")
    return value


def _is_enabled(node: Mapping[str, Any], path: str) -> bool:
    enabled = node.get("enabled", True)
    if not isinstance(enabled, bool):
        raise _invalid(f"{path}.enabled", "deve ser booleano")
    return enabled


def _build_children(node: Mapping[str, Any], registry: HandlerRegistry, path: str) -> List[Runnable]:
    raw = node.get("runnables") or []
    if not isinstance(raw, list):
        raise _invalid(f"{path}.runnables", "deve ser uma lista")

    children: List[Runnable] = []
    seen: Set[str] = set()

    for i, child in enumerate(raw):
        child_path = f"{path}.runnables[{i}]"
        if not isinstance(child, dict):
            raise _invalid(child_path, "deve ser um mapa")
        if not _is_enabled(child, child_path):
            continue

        built = _build_node(child, registry, child_path, default_type="step")
        if child.get("id") is not None:
            if built.id in seen:
                raise _invalid(child_path, f"id duplicado: {built.id}")
            seen.add(built.id)
        children.append(built)

    return children


def _build_step(node: Mapping[str, Any], registry: HandlerRegistry, path: str) -> Step:
    handler_name = _optional_str(node, "handler", path)
    if not handler_name:
        raise _invalid(f"{path}.handler", "step exige um handler")
    if not registry.has(handler_name):
        raise UnknownHandlerError(
            f"Handler não registrado: {handler_name}",
            details={"path": path, "handler": handler_name, "available": registry.list()},
        )
    return Step(
        id=_optional_str(node, "id", path),
        name=_optional_str(node, "name", path),
        handler=registry.get(handler_name),
    )


def _build_node(
    node: Mapping[str, Any],
    registry: HandlerRegistry,
    path: str,
    *,
    default_type: str,
) -> Runnable:
    kind = node.get("type", default_type)
    if kind not in RUNNABLE_TYPES:
        raise _invalid(f"{path}.type", f"tipo desconhecido: {kind!r}")

    if kind == "step":
        return _build_step(node, registry, path)

    node_id = _optional_str(node, "id", path)
    name = _optional_str(node, "name", path)
    children = _build_children(node, registry, path)

    if kind == "pipeline":
        if node.get("dependencies"):
            raise _invalid(f"{path}.dependencies", "pipelines não aceitam dependências")
        return Pipeline(id=node_id, name=name, runnables=children)

    dependencies = node.get("dependencies") or {}
    if not isinstance(dependencies, dict):
        raise _invalid(f"{path}.dependencies", "deve ser um mapa dependente -> [dependências]")

    normalized: Dict[str, List[str]] = {}
    for dependent, deps in dependencies.items():
        if isinstance(deps, str):
            deps = [deps]
        if not isinstance(deps, list) or not all(isinstance(d, str) for d in deps):
            raise _invalid(f"{path}.dependencies.{dependent}", "deve ser lista de ids")
        normalized[str(dependent)] = list(deps)

    return Dag(id=node_id, name=name, runnables=children, dependencies=normalized)


def build_workflow(config: Mapping[str, Any], registry: HandlerRegistry) -> Runnable:
    """
    Constrói o Runnable descrito pela seção `workflow` da configuração.

    Args:
        config (Mapping[str, Any]): Configuração efetiva (ex.: `load_config`).
        registry (HandlerRegistry): Handlers disponíveis por nome.

    Returns:
        Runnable: Dag, Pipeline ou Step pronto para `run`.

    Raises:
        InvalidWorkflowDefinitionError: Se a seção estiver ausente ou inválida.
        UnknownHandlerError: Se um Step referenciar handler não registrado.
    """
    workflow = config.get("workflow") if isinstance(config, Mapping) else None
    if not isinstance(workflow, dict):
        raise _invalid("workflow", "seção ausente ou não é um mapa")

    return _build_node(workflow, registry, "workflow", default_type="dag")
