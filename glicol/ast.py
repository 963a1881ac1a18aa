"""Syntax tree of a parsed program: named chains of node components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


@dataclass(frozen=True)
class Ref:
    """A reference to another chain, such as ``~mod``."""

    name: str

    def __str__(self) -> str:
        return self.name


NumberOrRef = Union[float, Ref]
IntOrRef = Union[int, Ref]
EventValue = Union[str, float]


class DurationUnit(Enum):
    BAR = "bar"
    SECONDS = "seconds"
    MILLISECONDS = "milliseconds"


@dataclass
class Duration:
    unit: DurationUnit
    value: float


@dataclass
class TimeList:
    """A point in time: a fraction of a bar plus an optional offset."""

    bar: float
    time: Duration | None = None


@dataclass
class EventInner:
    """Values (numbers or symbols) paired with their relative times."""

    val_times: list[tuple[EventValue, float]] = field(default_factory=list)


@dataclass
class Pattern:
    event: EventInner
    span: float = 1.0


@dataclass
class CodeBlock:
    code: str


Signal = Union[float, Ref, EventInner, Pattern]


class Component:
    """Base of every node that can appear in a chain."""

    def all_references(self) -> list[str]:
        """Names of all the chains this component reads from."""
        return []


class _SingleParam(Component):
    param: object

    def all_references(self) -> list[str]:
        return [self.param.name] if isinstance(self.param, Ref) else []


@dataclass
class Ast:
    nodes: dict[str, list[Component]] = field(default_factory=dict)


@dataclass
class Points(Component):
    points: list[tuple[TimeList, float]]
    span: float
    is_looping: bool


@dataclass
class Delayn(_SingleParam):
    param: IntOrRef


@dataclass
class Delayms(_SingleParam):
    param: NumberOrRef


@dataclass
class Imp(_SingleParam):
    param: NumberOrRef


@dataclass
class Tri(_SingleParam):
    param: NumberOrRef


@dataclass
class Squ(_SingleParam):
    param: NumberOrRef


@dataclass
class Saw(_SingleParam):
    param: NumberOrRef


@dataclass
class Onepole(_SingleParam):
    param: NumberOrRef


@dataclass
class Sin(_SingleParam):
    param: NumberOrRef


@dataclass
class Mul(_SingleParam):
    param: NumberOrRef


@dataclass
class Add(_SingleParam):
    param: NumberOrRef


@dataclass
class Pan(_SingleParam):
    param: NumberOrRef


@dataclass
class Bd(_SingleParam):
    param: NumberOrRef


@dataclass
class Sn(_SingleParam):
    param: NumberOrRef


@dataclass
class Hh(_SingleParam):
    param: NumberOrRef


@dataclass
class Seq(Component):
    events: list[tuple[float, IntOrRef]]

    def all_references(self) -> list[str]:
        return [note.name for _, note in self.events if isinstance(note, Ref)]


@dataclass
class Choose(Component):
    choices: list[float]


@dataclass
class Arrange(Component):
    events: list[NumberOrRef]

    def all_references(self) -> list[str]:
        return [event.name for event in self.events if isinstance(event, Ref)]


@dataclass
class Mix(Component):
    nodes: list[str]

    def all_references(self) -> list[str]:
        return list(self.nodes)


@dataclass
class Sp(Component):
    sample_sym: str


@dataclass
class Speed(Component):
    speed: float


@dataclass
class ConstSig(Component):
    value: float


@dataclass
class Adc(Component):
    port: int


@dataclass
class SawSynth(Component):
    attack: float
    decay: float


@dataclass
class SquSynth(Component):
    attack: float
    decay: float


@dataclass
class TriSynth(Component):
    attack: float
    decay: float


@dataclass
class MsgSynth(Component):
    symbol: str
    attack: float
    decay: float


@dataclass
class PatternSynth(Component):
    symbol: str
    span: float


@dataclass
class Lpf(Component):
    signal: Signal
    qvalue: float

    def all_references(self) -> list[str]:
        return [self.signal.name] if isinstance(self.signal, Ref) else []


@dataclass
class PSampler(Component):
    source: EventInner | Pattern


@dataclass
class Balance(Component):
    left: str
    right: str

    def all_references(self) -> list[str]:
        return [self.left, self.right]


@dataclass
class Rhpf(Component):
    cutoff: NumberOrRef
    qvalue: float

    def all_references(self) -> list[str]:
        return [self.cutoff.name] if isinstance(self.cutoff, Ref) else []


@dataclass
class ApfmsGain(Component):
    delay: NumberOrRef
    gain: float

    def all_references(self) -> list[str]:
        return [self.delay.name] if isinstance(self.delay, Ref) else []


@dataclass
class Reverb(Component):
    dampening: float
    room_size: float
    width: float
    wet: float
    dry: float


@dataclass
class Plate(Component):
    mix: float


@dataclass
class EnvPerc(Component):
    attack: float
    decay: float


@dataclass
class Adsr(Component):
    attack: float
    decay: float
    sustain: float
    release: float


@dataclass
class Get(Component):
    reference: str

    def all_references(self) -> list[str]:
        return [self.reference]


@dataclass
class Noise(Component):
    seed: int


@dataclass
class Meta(Component):
    code: CodeBlock


@dataclass
class Expr(Component):
    code: CodeBlock


@dataclass
class Eval(Component):
    code: CodeBlock