import dataclasses

import pytest

from glicol.ast import Ref
from glicol.messages import (
    GlicolPara,
    Index,
    IndexOrder,
    ParaKind,
    ResetOrder,
    SetPattern,
    SetRefOrder,
    SetSamplePattern,
    SetToNumber,
    SetToSeq,
    SetToSymbol,
)


def test_set_to_number_fields_and_equality():
    msg = SetToNumber(0, 100.0)
    assert msg.pos == 0
    assert msg.value == 100.0
    assert msg == SetToNumber(0, 100.0)
    assert not (msg == SetToNumber(1, 100.0))


def test_messages_are_frozen():
    msg = SetToSymbol(0, "\\saw")
    with pytest.raises(dataclasses.FrozenInstanceError):
        msg.symbol = "\\squ"
    assert msg.symbol == "\\saw"


def test_reset_order_instances_are_equal():
    messages = [Index(0), ResetOrder()]
    assert messages.index(ResetOrder()) == 1
    assert not (ResetOrder() == Index(0))


def test_index_messages():
    assert Index(3).index == 3
    order = IndexOrder(1, 5)
    assert (order.pos, order.index) == (1, 5)


def test_set_to_seq_keeps_references():
    events = [(0.0, 60), (0.5, Ref("~a"))]
    msg = SetToSeq(0, events)
    assert msg.events[1][1] == Ref("~a")
    assert msg.events[0] == (0.0, 60)


def test_ref_order_and_sample_pattern():
    assert SetRefOrder({"~a": 0, "~b": 1}).order["~b"] == 1
    sample = ([0.9, 0.8], 1, 44100)
    msg = SetSamplePattern([("\\bd", 0.0)], 1.0, {"\\bd": sample})
    assert msg.samples["\\bd"] == sample
    assert msg.pattern == [("\\bd", 0.0)]


def test_set_pattern():
    msg = SetPattern([(400.0, 0.5), (600.0, 0.9)], 1.0)
    assert msg.span == 1.0
    assert msg.pattern[1] == (600.0, 0.9)


def test_para_kind_lookup_by_value():
    assert ParaKind("number") is ParaKind.NUMBER
    assert ParaKind("sample_symbol") is ParaKind.SAMPLE_SYMBOL


def test_pattern_para_needs_span():
    with pytest.raises(ValueError):
        GlicolPara(ParaKind.PATTERN, [])


def test_non_pattern_para_has_no_span():
    with pytest.raises(ValueError):
        GlicolPara(ParaKind.NUMBER, 1.0, span=1.0)


def test_pattern_para_nests_values():
    inner = GlicolPara(ParaKind.NUMBER, 60.0)
    para = GlicolPara(ParaKind.PATTERN, [(inner, 0.0)], span=2.0)
    assert para.value[0][0] == GlicolPara(ParaKind.NUMBER, 60.0)
    assert para.span == 2.0