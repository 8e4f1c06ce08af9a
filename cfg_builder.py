# cfg_builder.py
from typing import List, Optional, Tuple

import networkx as nx

from errors import MalformedIRError
from ir_model import (
    Assert,
    BasicBlock,
    Call,
    Drop,
    DropAndReplace,
    FunctionBody,
    Goto,
    Resume,
    Return,
    SwitchInt,
    Unreachable,
)

# (destination block index, edge label)
Edge = Tuple[int, str]
BlockEdges = Tuple[BasicBlock, List[Edge]]

CLEANUP_LABELS = ("Cleanup", "Unwind")


def successor_edges(term) -> List[Edge]:
    """Map a terminator to its outgoing edges.

    The normal-path edge always comes before the cleanup/unwind edge.
    Anything that is not a known terminator raises MalformedIRError.
    """
    if term is None:
        return []

    if isinstance(term, Goto):
        return [(term.target, "Goto")]

    elif isinstance(term, SwitchInt):
        edges = [(t, "SwitchInt") for t in term.targets]
        if term.otherwise is not None:
            edges.append((term.otherwise, "SwitchInt"))
        return edges

    elif isinstance(term, Call):
        edges = []
        if term.destination is not None:
            edges.append((term.destination, "Call"))
        if term.cleanup is not None:
            edges.append((term.cleanup, "Cleanup"))
        return edges

    elif isinstance(term, (Resume, Return, Unreachable)):
        return []

    elif isinstance(term, DropAndReplace):
        return _with_exceptional((term.target, "DropReplace"), term.unwind, "Unwind")

    elif isinstance(term, Drop):
        return _with_exceptional((term.target, "Drop"), term.unwind, "Unwind")

    elif isinstance(term, Assert):
        return _with_exceptional((term.target, "Assert"), term.cleanup, "Cleanup")

    raise MalformedIRError(f"unknown terminator kind {type(term).__name__}")


def _with_exceptional(normal: Edge, other: Optional[int], label: str) -> List[Edge]:
    edges = [normal]
    if other is not None:
        edges.append((other, label))
    return edges


def extract_cfg(body: FunctionBody, unit_id: Optional[str] = None) -> List[BlockEdges]:
    """Classify every block of `body`, in block order.

    Errors are re-raised with the unit id and block index attached. Edges
    pointing outside the body are malformed too: they would name a node the
    renderer never emits.
    """
    count = len(body.blocks)
    cfg = []
    for index, block in enumerate(body.blocks):
        try:
            edges = successor_edges(block.terminator)
        except MalformedIRError as exc:
            raise exc.with_context(unit_id=unit_id, block=index) from exc
        for target, label in edges:
            if not isinstance(target, int) or not 0 <= target < count:
                raise MalformedIRError(
                    f"{label} edge targets bb{target}, body has {count} blocks",
                    unit_id=unit_id,
                    block=index,
                )
        cfg.append((block, edges))
    return cfg


def to_networkx(cfg: List[BlockEdges]) -> nx.MultiDiGraph:
    """Build a multigraph; two edges may leave one block for the same target."""
    graph = nx.MultiDiGraph()
    for index, (block, _) in enumerate(cfg):
        graph.add_node(index, statements=list(block.statements))
    for index, (_, edges) in enumerate(cfg):
        for target, label in edges:
            graph.add_edge(index, target, label=label)
    return graph
