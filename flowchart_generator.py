# flowchart_generator.py
import os
import re
import tempfile
from pathlib import Path
from typing import Dict, List, Optional

from cfg_builder import BlockEdges
from errors import SinkCollisionError, SinkError
from ir_model import Item

PROLOGUE = "digraph CFG { node [shape=box];"
EPILOGUE = "}"
DOT_SUFFIX = ".dot"


def _escape(text: str) -> str:
    """Make a statement safe inside a quoted DOT label."""
    return str(text).replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


class FlowchartBuilder:
    def __init__(self):
        self.lines: List[str] = []

    def build(self, cfg: List[BlockEdges]) -> str:
        self.lines = [PROLOGUE]
        for index, (block, _) in enumerate(cfg):
            self._add_node(index, block.statements)
        for index, (_, edges) in enumerate(cfg):
            for target, label in edges:
                self.lines.append(f'{index} -> {target} [label="{label}"];')
        self.lines.append(EPILOGUE)
        return "\n".join(self.lines) + "\n"

    def _add_node(self, index, statements):
        body = "\\n".join(_escape(s) for s in statements)
        self.lines.append(f'{index} [label="{index}\\n\\n{body}"];')


def render(cfg: List[BlockEdges]) -> str:
    """Serialize an extracted CFG to a DOT graph description."""
    return FlowchartBuilder().build(cfg)


def write(description: str, sink) -> None:
    """Write a full description to a path or an open text stream.

    Paths are written through a temporary file and renamed into place, so an
    interrupted write never leaves a truncated diagram behind.
    """
    if hasattr(sink, "write"):
        try:
            sink.write(description)
        except (OSError, ValueError) as exc:
            raise SinkError(f"cannot write graph description: {exc}", sink=sink) from exc
        return

    path = Path(sink)
    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(description)
        os.replace(tmp_name, path)
    except OSError as exc:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise SinkError(f"cannot write {path}: {exc}", sink=path) from exc


def sink_name(unit: Item) -> str:
    """File name for a unit's diagram, derived from its display name."""
    stem = re.sub(r"[^A-Za-z0-9_.-]", "_", unit.name).strip(".") or "unit"
    return stem + DOT_SUFFIX


class SinkRegistry:
    """Hands out one output path per unit and refuses to reuse a path."""

    def __init__(self, out_dir):
        self.out_dir = Path(out_dir)
        self.claimed: Dict[Path, str] = {}

    def claim(self, unit: Item) -> Path:
        path = self.out_dir / sink_name(unit)
        owner: Optional[str] = self.claimed.get(path)
        if owner is not None and owner != unit.id:
            raise SinkCollisionError(
                f"unit {unit.id} ({unit.name}) would overwrite {path}, already written for unit {owner}",
                sink=path,
            )
        self.claimed[path] = unit.id
        return path
