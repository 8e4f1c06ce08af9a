# ir_model.py
"""In-memory view of a lowered function body.

Items, basic blocks and terminators mirror what the compiler frontend dumps.
Everything here is immutable; the extractor only reads it.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from errors import LookupFailedError


class ItemKind(Enum):
    FUNCTION = "fn"
    STRUCT = "struct"
    ENUM = "enum"
    UNION = "union"
    TRAIT = "trait"
    IMPL = "impl"
    MODULE = "mod"
    STATIC = "static"
    CONST = "const"
    TYPE_ALIAS = "type"
    USE = "use"
    EXTERN_CRATE = "extern_crate"
    FOREIGN_MOD = "foreign_mod"
    TRAIT_ITEM = "trait_item"
    IMPL_ITEM = "impl_item"
    OTHER = "other"

    @classmethod
    def parse(cls, tag: str) -> "ItemKind":
        try:
            return cls(tag)
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True)
class Item:
    """A top-level program item. `id` is the stable lookup key."""
    id: str
    kind: ItemKind
    name: str


# --- Terminators: one case per kind of control transfer ---

@dataclass(frozen=True)
class Goto:
    target: int


@dataclass(frozen=True)
class SwitchInt:
    targets: Tuple[int, ...]
    otherwise: Optional[int] = None
    values: Tuple[str, ...] = ()
    discr: str = ""


@dataclass(frozen=True)
class Call:
    func: str = ""
    destination: Optional[int] = None
    cleanup: Optional[int] = None


@dataclass(frozen=True)
class Resume:
    pass


@dataclass(frozen=True)
class Return:
    pass


@dataclass(frozen=True)
class Unreachable:
    pass


@dataclass(frozen=True)
class Drop:
    target: int
    unwind: Optional[int] = None
    place: str = ""


@dataclass(frozen=True)
class DropAndReplace:
    target: int
    unwind: Optional[int] = None
    place: str = ""
    value: str = ""


@dataclass(frozen=True)
class Assert:
    target: int
    cleanup: Optional[int] = None
    cond: str = ""
    expected: bool = True
    msg: str = ""


TERMINATOR_TYPES = (Goto, SwitchInt, Call, Resume, Return, Unreachable, Drop, DropAndReplace, Assert)


@dataclass(frozen=True)
class BasicBlock:
    statements: Tuple[str, ...] = ()
    terminator: Optional[object] = None


@dataclass(frozen=True)
class FunctionBody:
    """Ordered basic blocks; a block's position is its index."""
    blocks: Tuple[BasicBlock, ...] = ()

    def __len__(self):
        return len(self.blocks)


@dataclass
class Program:
    """Items plus a body lookup keyed by item id, as supplied by the frontend."""
    items: List[Item] = field(default_factory=list)
    bodies: Dict[str, FunctionBody] = field(default_factory=dict)

    def item(self, unit_id: str) -> Optional[Item]:
        for it in self.items:
            if it.id == unit_id:
                return it
        return None

    def body(self, unit_id: str) -> FunctionBody:
        try:
            return self.bodies[unit_id]
        except KeyError:
            raise LookupFailedError(unit_id) from None
