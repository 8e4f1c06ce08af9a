"""
Tests for terminator classification and CFG extraction
"""

import pytest

from cfg_builder import extract_cfg, successor_edges, to_networkx
from ir_factory import block, body
from errors import MalformedIRError
from ir_model import (
    TERMINATOR_TYPES,
    Assert,
    Call,
    Drop,
    DropAndReplace,
    Goto,
    Resume,
    Return,
    SwitchInt,
    Unreachable,
)


class Yield:
    """A terminator kind the classifier has never heard of"""

    target = 1


class TestSuccessorEdges:
    @pytest.mark.parametrize("term", [None, Resume(), Return(), Unreachable()])
    def test_terminal_kinds_have_no_edges(self, term):
        assert successor_edges(term) == []

    def test_goto(self):
        assert successor_edges(Goto(target=3)) == [(3, "Goto")]

    def test_switch_int_keeps_target_order_and_default_last(self):
        term = SwitchInt(targets=(4, 2, 7), otherwise=1, values=("0", "1", "2"))
        assert successor_edges(term) == [
            (4, "SwitchInt"),
            (2, "SwitchInt"),
            (7, "SwitchInt"),
            (1, "SwitchInt"),
        ]

    def test_switch_int_without_default(self):
        assert successor_edges(SwitchInt(targets=(1, 2))) == [(1, "SwitchInt"), (2, "SwitchInt")]

    def test_switch_int_repeated_target(self):
        """Two values branching to one block give two edges"""
        assert successor_edges(SwitchInt(targets=(2, 2), otherwise=3)) == [
            (2, "SwitchInt"),
            (2, "SwitchInt"),
            (3, "SwitchInt"),
        ]

    @pytest.mark.parametrize(
        "term, expected",
        [
            (Call(), []),
            (Call(destination=1), [(1, "Call")]),
            (Call(cleanup=2), [(2, "Cleanup")]),
            (Call(destination=1, cleanup=2), [(1, "Call"), (2, "Cleanup")]),
        ],
    )
    def test_call_edges_follow_present_targets(self, term, expected):
        assert successor_edges(term) == expected

    def test_drop(self):
        assert successor_edges(Drop(target=1)) == [(1, "Drop")]
        assert successor_edges(Drop(target=1, unwind=5)) == [(1, "Drop"), (5, "Unwind")]

    def test_drop_and_replace(self):
        assert successor_edges(DropAndReplace(target=2)) == [(2, "DropReplace")]
        assert successor_edges(DropAndReplace(target=2, unwind=6)) == [(2, "DropReplace"), (6, "Unwind")]

    def test_assert(self):
        assert successor_edges(Assert(target=1)) == [(1, "Assert")]
        assert successor_edges(Assert(target=1, cleanup=3)) == [(1, "Assert"), (3, "Cleanup")]

    def test_unknown_terminator_is_fatal(self):
        with pytest.raises(MalformedIRError, match="Yield"):
            successor_edges(Yield())

    def test_every_terminator_type_is_classified(self):
        """Adding a terminator type without classifying it must fail here"""
        samples = {
            Goto: Goto(target=0),
            SwitchInt: SwitchInt(targets=(0,)),
            Call: Call(),
            Resume: Resume(),
            Return: Return(),
            Unreachable: Unreachable(),
            Drop: Drop(target=0),
            DropAndReplace: DropAndReplace(target=0),
            Assert: Assert(target=0),
        }
        assert set(samples) == set(TERMINATOR_TYPES)
        for term in samples.values():
            assert isinstance(successor_edges(term), list)


class TestExtractCfg:
    def test_one_entry_per_block_in_order(self):
        b0 = block("x = 1", term=Goto(target=1))
        b1 = block(term=Return())
        cfg = extract_cfg(body(b0, b1))
        assert cfg == [(b0, [(1, "Goto")]), (b1, [])]

    def test_empty_body(self):
        assert extract_cfg(body()) == []

    def test_unknown_terminator_reports_unit_and_block(self):
        fn_body = body(block(term=Goto(target=1)), block(term=Yield()))
        with pytest.raises(MalformedIRError) as excinfo:
            extract_cfg(fn_body, unit_id="0:7")
        assert excinfo.value.unit_id == "0:7"
        assert excinfo.value.block == 1
        assert "unit 0:7, bb1" in str(excinfo.value)

    def test_edge_outside_body_is_malformed(self):
        with pytest.raises(MalformedIRError) as excinfo:
            extract_cfg(body(block(term=Goto(target=9))))
        assert excinfo.value.block == 0


class TestToNetworkx:
    def test_parallel_edges_are_kept(self):
        cfg = extract_cfg(
            body(
                block("_2 = discriminant(_1)", term=SwitchInt(targets=(1, 1), otherwise=1)),
                block(term=Return()),
            )
        )
        graph = to_networkx(cfg)
        assert graph.number_of_nodes() == 2
        assert graph.number_of_edges() == 3
        assert graph.nodes[0]["statements"] == ["_2 = discriminant(_1)"]
        assert [label for _, _, label in graph.edges(data="label")] == ["SwitchInt"] * 3
