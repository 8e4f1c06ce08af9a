# errors.py
"""Exceptions raised while extracting and rendering control-flow graphs.

Every error carries enough context (unit id, block index) to locate the
failure in the IR dump.
"""
from typing import Optional


class CfgError(Exception):
    """Base exception for CFG extraction and rendering."""

    pass


class MalformedIRError(CfgError):
    """Raised when a block carries a terminator the classifier does not know.

    Attributes:
        unit_id: Id of the unit being extracted, if known
        block: Index of the offending basic block, if known
    """

    def __init__(self, message: str, unit_id: Optional[str] = None, block: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.unit_id = unit_id
        self.block = block

    def with_context(self, unit_id: Optional[str] = None, block: Optional[int] = None) -> "MalformedIRError":
        """Return a copy with missing location fields filled in."""
        return MalformedIRError(
            self.message,
            unit_id=self.unit_id if self.unit_id is not None else unit_id,
            block=self.block if self.block is not None else block,
        )

    def __str__(self):
        where = []
        if self.unit_id is not None:
            where.append(f"unit {self.unit_id}")
        if self.block is not None:
            where.append(f"bb{self.block}")
        if where:
            return f"{', '.join(where)}: {self.message}"
        return self.message


class LookupFailedError(CfgError):
    """Raised when a unit id has no function body in the program."""

    def __init__(self, unit_id: str):
        super().__init__(f"no function body for unit {unit_id}")
        self.unit_id = unit_id


class SinkError(CfgError):
    """Raised when a graph description cannot be written."""

    def __init__(self, message: str, sink=None):
        super().__init__(message)
        self.sink = sink


class SinkCollisionError(SinkError):
    """Raised when two units would write the same output file."""

    pass
