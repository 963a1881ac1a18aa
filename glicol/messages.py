"""Messages sent to nodes and the parameter values they can carry."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from .ast import Ref

Sample = tuple[Sequence[float], int, int]
"""Sample data, number of channels and sample rate."""


class ParaKind(Enum):
    """Kinds of parameter a :class:`GlicolPara` can hold."""

    NUMBER = "number"
    BOOL = "bool"
    NUMBER_LIST = "number_list"
    REFERENCE = "reference"
    SAMPLE_SYMBOL = "sample_symbol"
    SYMBOL = "symbol"
    SEQUENCE = "sequence"
    PATTERN = "pattern"
    EVENT = "event"
    POINTS = "points"
    BAR = "bar"
    SECOND = "second"
    MILLISECOND = "millisecond"


@dataclass(frozen=True)
class GlicolPara:
    """A parameter value of a node.

    ``span`` belongs to patterns only: it is required for
    :attr:`ParaKind.PATTERN` and not allowed for any other kind.
    """

    kind: ParaKind
    value: object
    span: float | None = None

    def __post_init__(self) -> None:
        if self.kind is ParaKind.PATTERN and self.span is None:
            raise ValueError("a pattern parameter needs a span")
        if self.kind is not ParaKind.PATTERN and self.span is not None:
            raise ValueError(f"a {self.kind.value} parameter has no span")


@dataclass(frozen=True)
class SetToNumber:
    pos: int
    value: float


@dataclass(frozen=True)
class SetToNumberList:
    pos: int
    values: list[float]


@dataclass(frozen=True)
class SetToSymbol:
    pos: int
    symbol: str


@dataclass(frozen=True)
class SetToSamples:
    pos: int
    sample: Sample


@dataclass(frozen=True)
class SetSamplePattern:
    pattern: list[tuple[str, float]]
    span: float
    samples: dict[str, Sample] = field(default_factory=dict)


@dataclass(frozen=True)
class SetPattern:
    pattern: list[tuple[float, float]]
    span: float


@dataclass(frozen=True)
class SetToSeq:
    pos: int
    events: list[tuple[float, Union[int, Ref]]]


@dataclass(frozen=True)
class SetRefOrder:
    order: dict[str, int]


@dataclass(frozen=True)
class SetBPM:
    bpm: float


@dataclass(frozen=True)
class SetSampleRate:
    sr: int


@dataclass(frozen=True)
class MainInput:
    index: int


@dataclass(frozen=True)
class SidechainInput:
    index: int


@dataclass(frozen=True)
class Index:
    """Tell a node that the node at ``index`` now feeds it."""

    index: int


@dataclass(frozen=True)
class IndexOrder:
    """Tell a node that the node at ``index`` feeds its input ``pos``."""

    pos: int
    index: int


@dataclass(frozen=True)
class ResetOrder:
    """Tell a node to forget the order of its inputs."""


@dataclass(frozen=True)
class SetParam:
    pos: int
    para: GlicolPara


@dataclass(frozen=True)
class SetToBool:
    pos: int
    value: bool


Message = Union[
    SetToNumber,
    SetToNumberList,
    SetToSymbol,
    SetToSamples,
    SetSamplePattern,
    SetPattern,
    SetToSeq,
    SetRefOrder,
    SetBPM,
    SetSampleRate,
    MainInput,
    SidechainInput,
    Index,
    IndexOrder,
    ResetOrder,
    SetParam,
    SetToBool,
]