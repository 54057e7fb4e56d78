# src/dagflow/visualization/dot.py
"""
Renderização DOT (Graphviz) de Runnables.

Camada de apresentação pura: lê apenas a projeção exposta pelo core
    - nós (`runnable_list()`)
    - arestas do Dag (`dependency_list(node)`) ou a ordem do Pipeline
    - snapshot do State (`get_state()`: status, current step, completed)

e produz um digraph textual. Nenhum Runnable é executado ou alterado.

Cores:
    - running  → azul
    - complete → verde (nós concluídos e arestas percorridas)
    - failed   → vermelho
    - paused   → amarelo
    - demais   → branco (nó) / cinza (aresta)

Limites explícitos:
    - Não invoca o binário Graphviz
    - O core nunca importa este módulo
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple

from dagflow.core.pipeline.types import StateStatus


COLOR_WHITE = "#ffffff"
COLOR_RED = "#F44336"
COLOR_YELLOW = "#FFC107"
COLOR_BLUE = "#2196F3"
COLOR_GREEN = "#4CAF50"
COLOR_GREY = "#9E9E9E"

STYLE_SOLID = "solid"
STYLE_FILLED = "filled"

_STATUS_FILL = {
    StateStatus.RUNNING: COLOR_BLUE,
    StateStatus.COMPLETE: COLOR_GREEN,
    StateStatus.FAILED: COLOR_RED,
    StateStatus.PAUSED: COLOR_YELLOW,
}

# status do container que colorem o passo corrente (complete não colore)
_CURRENT_FILL = {
    StateStatus.RUNNING: COLOR_BLUE,
    StateStatus.FAILED: COLOR_RED,
    StateStatus.PAUSED: COLOR_YELLOW,
}


@dataclass(frozen=True)
class DotNode:
    name: str
    label: str
    style: str = STYLE_SOLID
    fill_color: str = COLOR_WHITE


@dataclass(frozen=True)
class DotEdge:
    source: str
    target: str
    tooltip: str
    color: str = COLOR_GREY


def escape_dot(value: str) -> str:
    """Escapa uma string para uso entre aspas em DOT."""
    return (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
    )


def _label(runnable: Any) -> str:
    return runnable.name or runnable.id


def _snapshot(runnable: Any) -> Tuple[StateStatus, str, List[str]]:
    state = runnable.get_state()
    return state.status, state.current_step_id, list(state.completed_steps)


def _node(runnable: Any, style: str = STYLE_SOLID, fill: str = COLOR_WHITE) -> DotNode:
    return DotNode(name=runnable.id, label=_label(runnable), style=style, fill_color=fill)


def _edge(source: Any, target: Any, color: str) -> DotEdge:
    return DotEdge(
        source=source.id,
        target=target.id,
        tooltip=f"From {_label(source)} to {_label(target)}",
        color=color,
    )


def _current_node(runnable: Any, status: StateStatus) -> DotNode:
    fill = _CURRENT_FILL.get(status)
    if fill is None:
        return _node(runnable)
    return _node(runnable, STYLE_FILLED, fill)


def _step_graph(step: Any) -> Tuple[List[DotNode], List[DotEdge]]:
    status, _, _ = _snapshot(step)
    fill = _STATUS_FILL.get(status)
    if fill is None:
        return [_node(step)], []
    return [_node(step, STYLE_FILLED, fill)], []


def _pipeline_graph(pipeline: Any) -> Tuple[List[DotNode], List[DotEdge]]:
    children = pipeline.runnable_list()
    status, current_id, completed = _snapshot(pipeline)
    active = status in (StateStatus.RUNNING, StateStatus.COMPLETE)

    current_index = -1
    for i, child in enumerate(children):
        if current_id and child.id == current_id:
            current_index = i
            break

    nodes: List[DotNode] = []
    for i, child in enumerate(children):
        if current_id and child.id == current_id:
            nodes.append(_current_node(child, status))
        elif active and child.id in completed and (
            status != StateStatus.COMPLETE or i < len(children) - 1
        ):
            nodes.append(_node(child, STYLE_FILLED, COLOR_GREEN))
        else:
            nodes.append(_node(child))

    edges: List[DotEdge] = []
    for i in range(1, len(children)):
        traversed = status == StateStatus.COMPLETE or (
            status == StateStatus.RUNNING and current_index != -1 and i <= current_index
        )
        edges.append(_edge(children[i - 1], children[i], COLOR_GREEN if traversed else COLOR_GREY))

    return nodes, edges


def _dag_graph(dag: Any) -> Tuple[List[DotNode], List[DotEdge]]:
    children = dag.runnable_list()
    status, current_id, completed = _snapshot(dag)

    nodes: List[DotNode] = []
    for child in children:
        if current_id and child.id == current_id:
            nodes.append(_current_node(child, status))
        elif status == StateStatus.RUNNING and child.id in completed:
            nodes.append(_node(child, STYLE_FILLED, COLOR_GREEN))
        else:
            nodes.append(_node(child))

    edges: List[DotEdge] = []
    for dependent in children:
        for dependency in dag.dependency_list(dependent):
            traversed = status == StateStatus.COMPLETE or (
                status == StateStatus.RUNNING and dependency.id in completed
            )
            edges.append(_edge(dependency, dependent, COLOR_GREEN if traversed else COLOR_GREY))

    return nodes, edges


def format_dot(nodes: Sequence[DotNode], edges: Sequence[DotEdge]) -> str:
    lines = [
        "digraph {",
        '\trankdir = "LR";',
        '\tnode [fontname="Arial", shape=box];',
        '\tedge [fontname="Arial"];',
        "",
        "\t// Nodes",
    ]

    for n in nodes:
        attrs = (
            f'label="{escape_dot(n.label)}", style={n.style}, '
            f'tooltip="{escape_dot("Step: " + n.label)}", fillcolor="{n.fill_color}"'
        )
        if n.style == STYLE_FILLED:
            attrs += ', fontcolor="white"'
        lines.append(f'\t"{escape_dot(n.name)}" [{attrs}];')

    lines.append("")
    lines.append("\t// Edges")

    for e in edges:
        lines.append(
            f'\t"{escape_dot(e.source)}" -> "{escape_dot(e.target)}" '
            f'[style={STYLE_SOLID}, tooltip="{escape_dot(e.tooltip)}", color="{e.color}"];'
        )

    lines.append("}")
    return "\n".join(lines) + "\n"


def render_dot(runnable: Any) -> str:
    """
    Produz a descrição DOT de um Step, Pipeline ou Dag.

    A variante é identificada pela projeção que o objeto expõe:
    `dependency_list` (Dag), `runnable_list` (Pipeline) ou nenhuma (Step).
    Containers vazios produzem um digraph sem nós.
    """
    if hasattr(runnable, "dependency_list"):
        nodes, edges = _dag_graph(runnable)
    elif hasattr(runnable, "runnable_list"):
        nodes, edges = _pipeline_graph(runnable)
    else:
        nodes, edges = _step_graph(runnable)
    return format_dot(nodes, edges)
