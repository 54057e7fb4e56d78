# src/dagflow/core/engine/planner.py
"""
Planejador de execução de Dags.

Este módulo é responsável por transformar o conjunto de nós de um Dag
e seu mapa de dependências em uma ordem de execução topológica
determinística.

O planner opera exclusivamente em nível estrutural, analisando:
    - identificadores de Runnables
    - dependências declaradas (dependente -> dependências)
    - formação de ciclos

Princípios fundamentais:
    - O grafo deve ser acíclico para produzir uma ordem
    - A ordenação é determinística para a mesma entrada
    - Referências não resolvíveis são toleradas (edições parciais)

Decisões arquiteturais:
    - Detecção de ciclos por DFS com marcas temporária/permanente,
      implementada com pilha explícita (sem limite de recursão)
    - Ordem final por Kahn modificado sobre o resultado da DFS
    - Empates resolvidos por ordem lexicográfica de `id` (depois `name`)

Invariantes:
    - Nenhum Runnable aparece antes de suas dependências
    - Todos os nós do grafo aparecem exatamente uma vez
    - Em presença de ciclo nenhuma ordem parcial é retornada

Limites explícitos:
    - Não executa Runnables
    - Não interage com RunContext
    - Não altera o Dag

Este módulo existe para garantir correção estrutural,
determinismo e previsibilidade na execução de Dags.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Mapping, Sequence, Set, Tuple

from ..exceptions import DagflowError
from ..pipeline.runnable import Runnable


class CycleDetectedError(DagflowError, ValueError):
    """
    Exceção levantada quando o grafo de dependências contém um ciclo.

    Decisões arquiteturais:
        - Dags devem ser acíclicos
        - Ciclos são tratados como erro estrutural fatal
        - Nenhuma execução parcial é permitida em presença de ciclos

    Limites explícitos:
        - Não tenta resolver ou quebrar ciclos automaticamente
        - Não modifica Runnables ou dependências
    """


DependencyGraph = Dict[Runnable, List[Runnable]]


def build_dependency_graph(
    runnables: Mapping[str, Runnable],
    dependencies: Mapping[str, Sequence[str]],
) -> DependencyGraph:
    """
    Resolve o mapa `dependente-id -> [dependência-id]` contra os nós vivos.

    Todo nó aparece no grafo, mesmo sem arestas. Ids desconhecidos em
    qualquer lado da aresta são descartados sem erro: esta função nunca
    falha e não valida ciclos.

    Args:
        runnables (Mapping[str, Runnable]): Nós indexados por id.
        dependencies (Mapping[str, Sequence[str]]): Arestas declaradas.

    Returns:
        DependencyGraph: Runnable -> Runnables dos quais depende, na ordem
        dos nós recebidos.
    """
    graph: DependencyGraph = {node: [] for node in runnables.values()}

    for dependent_id, dep_ids in dependencies.items():
        dependent = runnables.get(dependent_id)
        if dependent is None:
            continue
        for dep_id in dep_ids or []:
            dep = runnables.get(dep_id)
            if dep is None:
                continue
            graph[dependent].append(dep)

    return graph


def dangling_dependencies(
    runnables: Mapping[str, Runnable],
    dependencies: Mapping[str, Sequence[str]],
) -> List[Tuple[str, str]]:
    """Arestas `(dependente, dependência)` que `build_dependency_graph` descarta."""
    dangling: List[Tuple[str, str]] = []
    for dependent_id, dep_ids in dependencies.items():
        for dep_id in dep_ids or []:
            if dependent_id not in runnables or dep_id not in runnables:
                dangling.append((dependent_id, dep_id))
    return dangling


def _depth_first_order(graph: DependencyGraph) -> List[Runnable]:
    """Pós-ordem (dependências primeiro); levanta CycleDetectedError."""
    visited: Set[int] = set()
    in_progress: Set[int] = set()
    order: List[Runnable] = []

    def children(node: Runnable) -> Iterator[Runnable]:
        return iter(graph.get(node, ()))

    for root in graph:
        if id(root) in visited:
            continue

        in_progress.add(id(root))
        stack: List[Tuple[Runnable, Iterator[Runnable]]] = [(root, children(root))]

        while stack:
            node, pending = stack[-1]
            descended = False

            for dep in pending:
                if id(dep) in in_progress:
                    raise CycleDetectedError(
                        "cycle detected",
                        details={"node_id": getattr(dep, "id", None)},
                    )
                if id(dep) in visited:
                    continue
                in_progress.add(id(dep))
                stack.append((dep, children(dep)))
                descended = True
                break

            if not descended:
                stack.pop()
                in_progress.discard(id(node))
                visited.add(id(node))
                order.append(node)

    return order


def topological_sort(graph: DependencyGraph) -> List[Runnable]:
    """
    Produz uma ordem topológica determinística do grafo.

    A DFS detecta ciclos e estabelece a ordem base; em seguida um passo
    de Kahn reordena o resultado de modo que, sempre que mais de um nó
    está pronto, vence o menor `id` (e então `name`). Arestas reais nunca
    são violadas, nem transitivamente.

    Args:
        graph (DependencyGraph): Saída de `build_dependency_graph`.

    Returns:
        List[Runnable]: Runnables com dependências antes de dependentes.

    Raises:
        CycleDetectedError: Se houver ciclo (inclui auto-referência).
    """
    base = _depth_first_order(graph)
    if not base:
        return []

    position = {id(node): i for i, node in enumerate(base)}

    def tie_break(node: Any) -> Tuple[str, str, int]:
        return (str(getattr(node, "id", "")), str(getattr(node, "name", "")), position[id(node)])

    pending_deps: Dict[int, int] = {}
    dependents: Dict[int, List[Runnable]] = {id(node): [] for node in base}

    for node in base:
        unique = {id(dep): dep for dep in graph.get(node, ())}
        pending_deps[id(node)] = len(unique)
        for dep in unique.values():
            dependents[id(dep)].append(node)

    ready: List[Runnable] = sorted(
        (node for node in base if pending_deps[id(node)] == 0),
        key=tie_break,
    )
    order: List[Runnable] = []

    while ready:
        node = ready.pop(0)
        order.append(node)
        for child in dependents[id(node)]:
            pending_deps[id(child)] -= 1
            if pending_deps[id(child)] == 0:
                ready.append(child)
                ready.sort(key=tie_break)

    return order
