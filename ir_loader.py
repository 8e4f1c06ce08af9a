# ir_loader.py
"""Read a JSON IR dump produced by the compiler frontend.

Layout::

    {
      "items":  [{"id": "0:3", "kind": "fn", "name": "main"}, ...],
      "bodies": {"0:3": {"blocks": [{"statements": [...], "terminator": {...}}]}}
    }

Terminators are objects with a "kind" key (Goto, SwitchInt, Call, Resume,
Return, Unreachable, Drop, DropAndReplace, Assert) or null.
"""
import json
import logging
from typing import Any, Dict, Optional

from errors import MalformedIRError
from ir_model import (
    Assert,
    BasicBlock,
    Call,
    Drop,
    DropAndReplace,
    FunctionBody,
    Goto,
    Item,
    ItemKind,
    Program,
    Resume,
    Return,
    SwitchInt,
    Unreachable,
)

logger = logging.getLogger(__name__)


def load_program(source) -> Program:
    """Load a dump from a file path or an open text stream."""
    if hasattr(source, "read"):
        data = json.load(source)
    else:
        with open(source, encoding="utf-8") as f:
            data = json.load(f)
    return parse_program(data)


def parse_program(data: Dict[str, Any]) -> Program:
    if not isinstance(data, dict):
        raise MalformedIRError(f"dump must be a JSON object, got {type(data).__name__}")
    items = [_parse_item(raw, position) for position, raw in enumerate(_field(data, "items", list))]
    bodies = {}
    for unit_id, raw_body in _field(data, "bodies", dict).items():
        bodies[str(unit_id)] = parse_body(raw_body, unit_id=str(unit_id))
    logger.debug("loaded %d items, %d bodies", len(items), len(bodies))
    return Program(items=items, bodies=bodies)


def _field(raw: Dict[str, Any], key: str, kind: type, unit_id: Optional[str] = None, block: Optional[int] = None):
    value = raw.get(key)
    if value is None:
        return kind()
    if not isinstance(value, kind):
        raise MalformedIRError(f"'{key}' must be a JSON {kind.__name__}", unit_id=unit_id, block=block)
    return value


def _parse_item(raw, position: int) -> Item:
    if not isinstance(raw, dict) or raw.get("id") is None:
        raise MalformedIRError(f"item #{position} has no 'id'")
    unit_id = str(raw["id"])
    return Item(id=unit_id, kind=ItemKind.parse(str(raw.get("kind", ""))), name=str(raw.get("name", unit_id)))


def parse_body(raw: Dict[str, Any], unit_id: Optional[str] = None) -> FunctionBody:
    if not isinstance(raw, dict):
        raise MalformedIRError("body must be a JSON object", unit_id=unit_id)
    blocks = []
    for index, raw_block in enumerate(_field(raw, "blocks", list, unit_id=unit_id)):
        if not isinstance(raw_block, dict):
            raise MalformedIRError("block must be a JSON object", unit_id=unit_id, block=index)
        statements = tuple(str(s) for s in _field(raw_block, "statements", list, unit_id=unit_id, block=index))
        terminator = raw_block.get("terminator")
        if terminator is not None and not isinstance(terminator, dict):
            raise MalformedIRError("terminator must be a JSON object or null", unit_id=unit_id, block=index)
        try:
            terminator = parse_terminator(terminator)
        except MalformedIRError as exc:
            raise exc.with_context(unit_id=unit_id, block=index) from exc
        blocks.append(BasicBlock(statements=statements, terminator=terminator))
    return FunctionBody(blocks=tuple(blocks))


def _index(raw: Dict[str, Any], key: str, required: bool = True) -> Optional[int]:
    value = raw.get(key)
    if value is None:
        if required:
            raise MalformedIRError(f"{raw.get('kind')} terminator is missing '{key}'")
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedIRError(f"{raw.get('kind')} '{key}' is not a block index: {value!r}")
    return value


def parse_terminator(raw: Optional[Dict[str, Any]]):
    if raw is None:
        return None
    kind = raw.get("kind")

    if kind == "Goto":
        return Goto(target=_index(raw, "target"))
    elif kind == "SwitchInt":
        targets = _field(raw, "targets", list)
        return SwitchInt(
            targets=tuple(_index({"kind": kind, "target": t}, "target") for t in targets),
            otherwise=_index(raw, "otherwise", required=False),
            values=tuple(str(v) for v in _field(raw, "values", list)),
            discr=str(raw.get("discr", "")),
        )
    elif kind == "Call":
        return Call(
            func=str(raw.get("func", "")),
            destination=_index(raw, "destination", required=False),
            cleanup=_index(raw, "cleanup", required=False),
        )
    elif kind == "Resume":
        return Resume()
    elif kind == "Return":
        return Return()
    elif kind == "Unreachable":
        return Unreachable()
    elif kind == "Drop":
        return Drop(
            target=_index(raw, "target"),
            unwind=_index(raw, "unwind", required=False),
            place=str(raw.get("place", "")),
        )
    elif kind == "DropAndReplace":
        return DropAndReplace(
            target=_index(raw, "target"),
            unwind=_index(raw, "unwind", required=False),
            place=str(raw.get("place", "")),
            value=str(raw.get("value", "")),
        )
    elif kind == "Assert":
        return Assert(
            target=_index(raw, "target"),
            cleanup=_index(raw, "cleanup", required=False),
            cond=str(raw.get("cond", "")),
            expected=bool(raw.get("expected", True)),
            msg=str(raw.get("msg", "")),
        )

    raise MalformedIRError(f"unknown terminator kind {kind!r}")
