"""Shared fixtures for CFG extraction tests"""

from pathlib import Path

import pytest

from ir_factory import fn
from ir_model import Program

EXAMPLES = Path(__file__).resolve().parent.parent / "examples"


@pytest.fixture
def sample_dump_path():
    return EXAMPLES / "sample_mir.json"


@pytest.fixture
def make_program():
    def _make(bodies, items=None):
        if items is None:
            items = [fn(unit_id) for unit_id in bodies]
        return Program(items=list(items), bodies=dict(bodies))

    return _make
