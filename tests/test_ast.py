import pytest

from glicol.ast import (
    Add,
    Adsr,
    ApfmsGain,
    Arrange,
    Ast,
    Balance,
    Bd,
    Choose,
    CodeBlock,
    ConstSig,
    Delayms,
    Delayn,
    Duration,
    DurationUnit,
    Eval,
    EventInner,
    Get,
    Hh,
    Imp,
    Lpf,
    Mix,
    Mul,
    Onepole,
    Pan,
    Pattern,
    Points,
    PSampler,
    Ref,
    Rhpf,
    Saw,
    SawSynth,
    Seq,
    Sin,
    Sn,
    Sp,
    Squ,
    TimeList,
    Tri,
)


@pytest.mark.parametrize(
    "cls", [Delayms, Imp, Tri, Squ, Saw, Onepole, Sin, Mul, Add, Pan, Bd, Sn, Hh]
)
def test_single_param_reference(cls):
    assert cls(Ref("~mod")).all_references() == ["~mod"]
    assert cls(0.5).all_references() == []


def test_delayn_reference_and_integer():
    assert Delayn(Ref("o")).all_references() == ["o"]
    assert Delayn(8).all_references() == []


def test_seq_references_keep_order_and_duplicates():
    seq = Seq([(0.0, 60), (1.0, Ref("~a")), (2.0, Ref("~b")), (3.0, Ref("~a"))])
    assert seq.all_references() == ["~a", "~b", "~a"]


def test_arrange_references():
    arrange = Arrange([Ref("~t1"), 3.0, Ref("~t2"), 1.0])
    assert arrange.all_references() == ["~t1", "~t2"]


def test_mix_references_are_a_copy():
    mix = Mix(["~bd", "~sn"])
    refs = mix.all_references()
    refs.append("~hh")
    assert mix.nodes == ["~bd", "~sn"]


def test_balance_and_get_references():
    assert Balance("~llll", "right0").all_references() == ["~llll", "right0"]
    assert Get("~x").all_references() == ["~x"]


def test_filters_references():
    assert Lpf(Ref("~mod"), 1.0).all_references() == ["~mod"]
    assert Lpf(100.0, 1.0).all_references() == []
    pattern = Pattern(EventInner([(400.0, 0.5)]), 1.0)
    assert Lpf(pattern, 1.0).all_references() == []
    assert Rhpf(Ref("~c"), 1.0).all_references() == ["~c"]
    assert Rhpf(200.0, 1.0).all_references() == []
    assert ApfmsGain(Ref("~d"), 0.5).all_references() == ["~d"]
    assert ApfmsGain(10.0, 0.5).all_references() == []


def test_components_without_references():
    components = [
        Choose([52.0]),
        ConstSig(4.0),
        Sp("\\808db"),
        SawSynth(0.01, 0.3),
        Adsr(0.1, 0.2, 0.3, 0.4),
        Eval(CodeBlock("x")),
        PSampler(Pattern(EventInner([("'bd'", 0.0)]))),
        Points([(TimeList(0.5), 1.0)], -1.0, False),
    ]
    assert all(c.all_references() == [] for c in components)


def test_equality_distinguishes_type_and_value():
    assert Sin(440.0) == Sin(440.0)
    assert Sin(440.0) != Saw(440.0)
    assert Sin(Ref("i")) != Sin(440.0)
    assert Mul(Ref("i")) == Mul(Ref("i"))


def test_ast_equality():
    a = Ast({"o": [Saw(440.0), Mul(0.3)]})
    b = Ast({"o": [Saw(440.0), Mul(0.3)]})
    c = Ast({"o": [Saw(440.0), Mul(Ref("i"))]})
    assert a == b
    assert a != c


def test_pattern_default_span_and_ref_str():
    assert Pattern(EventInner()).span == 1.0
    assert str(Ref("~a")) == "~a"


def test_timelist_with_duration():
    t = TimeList(0.5, Duration(DurationUnit.MILLISECONDS, -100.0))
    assert t == TimeList(0.5, Duration(DurationUnit.MILLISECONDS, -100.0))
    assert t != TimeList(0.5, Duration(DurationUnit.SECONDS, -100.0))
    assert TimeList(0.25).time is None