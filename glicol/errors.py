"""Grammar rules, parse errors and the errors raised by the engine."""

from __future__ import annotations

from enum import Enum
from typing import Iterable


class Rule(str, Enum):
    """Names of the grammar rules that parse errors refer to."""

    block = "block"
    line = "line"
    reference = "reference"
    chain = "chain"
    node = "node"
    number = "number"
    integer = "integer"
    rest = "rest"
    note_ref = "note_ref"
    points_inner = "points_inner"
    math_expression = "math_expression"
    is_looping = "is_looping"
    time = "time"
    bar = "bar"
    second = "second"
    ms = "ms"
    symbol = "symbol"
    event = "event"
    pattern = "pattern"
    pattern_event_body = "pattern_event_body"
    value_time = "value_time"
    code = "code"
    code_block = "code"
    points = "points"
    delayn = "delayn"
    delayms = "delayms"
    imp = "imp"
    tri = "tri"
    squ = "squ"
    saw = "saw"
    onepole = "onepole"
    sin = "sin"
    mul = "mul"
    add = "add"
    pan = "pan"
    seq = "seq"
    choose = "choose"
    mix = "mix"
    sp = "sp"
    speed = "speed"
    constsig = "constsig"
    adc = "adc"
    bd = "bd"
    sn = "sn"
    hh = "hh"
    sawsynth = "sawsynth"
    squsynth = "squsynth"
    trisynth = "trisynth"
    lpf = "lpf"
    psampler = "psampler"
    balance = "balance"
    rhpf = "rhpf"
    apfmsgain = "apfmsgain"
    reverb = "reverb"
    envperc = "envperc"
    adsr = "adsr"
    plate = "plate"
    get = "get"
    noise = "noise"
    meta = "meta"
    expr = "expr"
    eval = "eval"
    arrange = "arrange"
    msgsynth = "msgsynth"
    pattern_synth = "pattern_synth"

    def __str__(self) -> str:
        return self.value


def _enumerate(rules: tuple[Rule, ...]) -> str:
    names = [rule.value for rule in rules]
    if len(names) == 1:
        return names[0]
    if len(names) == 2:
        return f"{names[0]} or {names[1]}"
    return ", ".join(names[:-1]) + f", or {names[-1]}"


class ParseError(Exception):
    """Source text did not match the grammar.

    ``positives`` are the rules that were expected at ``pos``,
    ``negatives`` the rules that were found but not allowed there.
    """

    def __init__(
        self,
        positives: Iterable[Rule] = (),
        negatives: Iterable[Rule] = (),
        pos: int = 0,
        code: str = "",
    ) -> None:
        self.positives = tuple(positives)
        self.negatives = tuple(negatives)
        self.pos = pos
        self.code = code
        super().__init__(self.message)

    @property
    def message(self) -> str:
        if self.positives and self.negatives:
            return (
                f"unexpected {_enumerate(self.negatives)}; "
                f"expected {_enumerate(self.positives)}"
            )
        if self.positives:
            return f"expected {_enumerate(self.positives)}"
        if self.negatives:
            return f"unexpected {_enumerate(self.negatives)}"
        return "unknown parsing error"

    @property
    def line_col(self) -> tuple[int, int]:
        """One-based line and column of ``pos`` within ``code``."""
        before = self.code[: self.pos]
        line = before.count("\n") + 1
        col = self.pos - (before.rfind("\n") + 1) + 1
        return line, col

    def __str__(self) -> str:
        line, col = self.line_col
        return f"{line}:{col}: {self.message}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParseError):
            return NotImplemented
        return (self.positives, self.negatives, self.pos, self.code) == (
            other.positives,
            other.negatives,
            other.pos,
            other.code,
        )

    def __hash__(self) -> int:
        return hash((self.positives, self.negatives, self.pos, self.code))


class EngineError(Exception):
    """Base class of the errors an engine update can raise."""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EngineError):
            return NotImplemented
        return type(self) is type(other) and self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class ParsingError(EngineError):
    """The code given to the engine could not be parsed."""

    def __init__(self, error: ParseError) -> None:
        super().__init__(error)
        self.error = error

    def __str__(self) -> str:
        return f"Parsing error: {self.error}"


class NonExistReference(EngineError):
    """A chain refers to a reference that does not exist."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"There is no reference named {self.name}"


class NonExistSample(EngineError):
    """A node refers to a sample that has not been loaded."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"There is no sample named {self.name}s"


def get_error_info(error: ParseError | ParsingError) -> tuple[list[Rule], list[Rule]]:
    """Return the expected and the unexpected rules of a parse error."""
    if isinstance(error, ParsingError):
        error = error.error
    if not isinstance(error, ParseError):
        raise TypeError(f"not a parse error: {error!r}")
    return list(error.positives), list(error.negatives)