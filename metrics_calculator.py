# metrics_calculator.py
from typing import List

import networkx as nx

from cfg_builder import CLEANUP_LABELS, BlockEdges, to_networkx


def calculate_metrics(cfg: List[BlockEdges]) -> dict:
    """Structural counts for one extracted CFG."""
    graph = to_networkx(cfg)
    n_blocks = graph.number_of_nodes()
    n_edges = graph.number_of_edges()

    cleanup = sum(1 for _, _, label in graph.edges(data="label") if label in CLEANUP_LABELS)
    terminal = sum(1 for node in graph.nodes if graph.out_degree(node) == 0)

    if n_blocks:
        reachable = nx.descendants(graph, 0) | {0}
        unreachable = n_blocks - len(reachable)
    else:
        unreachable = 0

    return {
        "blocks": n_blocks,
        "edges": n_edges,
        "terminal_blocks": terminal,
        "cleanup_edges": cleanup,
        "unreachable_blocks": unreachable,
        "cyclomatic_complexity": max(1, n_edges - n_blocks + 2) if n_blocks else 1,
    }
