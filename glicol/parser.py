"""Parser that turns program text into an :class:`~glicol.ast.Ast`.

A program is a list of lines separated by new lines or ``;``.  Each line
names a chain (``name: node >> node >> ...``).  Parameters of a node are
separated by spaces on the same line; a chain may continue on the next
line with ``>>``.  ``//`` starts a comment that runs to the end of the line.
"""

from __future__ import annotations

import math
import re
from typing import Callable

from .ast import (
    Adc,
    Add,
    Adsr,
    ApfmsGain,
    Arrange,
    Ast,
    Balance,
    Bd,
    Choose,
    CodeBlock,
    Component,
    ConstSig,
    Delayms,
    Delayn,
    Duration,
    DurationUnit,
    EnvPerc,
    Eval,
    EventInner,
    Expr,
    Get,
    Hh,
    Imp,
    Lpf,
    Meta,
    Mix,
    MsgSynth,
    Mul,
    Noise,
    Onepole,
    Pan,
    Pattern,
    PatternSynth,
    Plate,
    Points,
    PSampler,
    Ref,
    Reverb,
    Rhpf,
    Saw,
    SawSynth,
    Seq,
    Sin,
    Sn,
    Sp,
    Speed,
    Squ,
    SquSynth,
    TimeList,
    Tri,
    TriSynth,
)
from .errors import ParseError, Rule

_NUMBER = re.compile(r"[+-]?(?:\d+(?:\.\d+)?|\.\d+)")
_INTEGER_TEXT = re.compile(r"\+?\d+")
_INTEGER = re.compile(r"\d+")
_REST = re.compile(r"_")
_NOTE_REF = re.compile(r"~[A-Za-z]+")
_REFERENCE = re.compile(r"~?[A-Za-z][A-Za-z0-9_]*(?:\.\.)?")
_WORD = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_SAMPLE = re.compile(r"\\[A-Za-z0-9_]+")
_SYMBOL = re.compile(r"\\[A-Za-z0-9_]+|`[^`]*`")
_QUOTED = re.compile(r"'[^'\n]*'")
_CODE = re.compile(r"`[^`]*`")
_DURATION = re.compile(r"(\d+(?:\.\d+)?)_?(ms|s)(?![A-Za-z0-9_])")
_INLINE_WS = re.compile(r"[ \t\r]*")
_SPACE = re.compile(r"(?:\s+|//[^\n]*)*")
_MATH_LEXEME = re.compile(r"\d+(?:\.\d*)?|\.\d+|[-+*/^()]|\S")
_MATH_CHARS = frozenset("0123456789.+-*/^()")
_LINE_ENDS = ("\n", ";", ">>", "//")


class _Scanner:
    """Cursor over the program text."""

    def __init__(self, code: str) -> None:
        self.code = code
        self.pos = 0

    def error(self, *positives: Rule, pos: int | None = None) -> ParseError:
        return ParseError(
            positives=positives,
            pos=self.pos if pos is None else pos,
            code=self.code,
        )

    def at_end(self) -> bool:
        return self.pos >= len(self.code)

    def peek(self, text: str) -> bool:
        return self.code.startswith(text, self.pos)

    def take(self, pattern: re.Pattern[str]) -> str | None:
        match = pattern.match(self.code, self.pos)
        if match is None or not match.group():
            return None
        self.pos = match.end()
        return match.group()

    def literal(self, text: str) -> bool:
        if self.peek(text):
            self.pos += len(text)
            return True
        return False

    def skip_inline(self) -> None:
        self.pos = _INLINE_WS.match(self.code, self.pos).end()

    def skip_space(self) -> bool:
        """Skip white space and comments; tell whether a new line was crossed."""
        match = _SPACE.match(self.code, self.pos)
        self.pos = match.end()
        return "\n" in match.group()

    def gap(self, *positives: Rule) -> None:
        """Require the space that separates a parameter from what precedes it."""
        start = self.pos
        self.skip_inline()
        if self.pos == start:
            raise self.error(*positives)

    def has_param(self) -> bool:
        """Tell whether another parameter follows on the same line."""
        end = _INLINE_WS.match(self.code, self.pos).end()
        if end == self.pos or end >= len(self.code):
            return False
        return not self.code.startswith(_LINE_ENDS, end)


def _divide(top: float, bottom: float) -> float:
    if bottom != 0:
        return top / bottom
    if top == 0 or math.isnan(top):
        return math.nan
    return math.copysign(math.inf, top) * math.copysign(1.0, bottom)


def _evaluate(text: str) -> float:
    """Evaluate an arithmetic expression of numbers, + - * / ^ and parentheses."""
    lexemes = _MATH_LEXEME.findall(text)
    position = 0

    def peek() -> str | None:
        return lexemes[position] if position < len(lexemes) else None

    def advance() -> str:
        nonlocal position
        item = lexemes[position]
        position += 1
        return item

    def expression() -> float:
        value = term()
        while peek() in ("+", "-"):
            op = advance()
            rhs = term()
            value = value + rhs if op == "+" else value - rhs
        return value

    def term() -> float:
        value = unary()
        while peek() in ("*", "/"):
            op = advance()
            rhs = unary()
            value = value * rhs if op == "*" else _divide(value, rhs)
        return value

    def unary() -> float:
        if peek() in ("+", "-"):
            op = advance()
            value = unary()
            return -value if op == "-" else value
        return power()

    def power() -> float:
        base = atom()
        if peek() == "^":
            advance()
            exponent = unary()
            try:
                return math.pow(base, exponent)
            except OverflowError:
                return math.inf
        return base

    def atom() -> float:
        item = peek()
        if item is None:
            raise ValueError("unexpected end of expression")
        advance()
        if item == "(":
            value = expression()
            if peek() != ")":
                raise ValueError("missing closing parenthesis")
            advance()
            return value
        return float(item)

    result = expression()
    if position != len(lexemes):
        raise ValueError(f"unexpected {lexemes[position]!r}")
    return result


def _number(s: _Scanner) -> float:
    s.gap(Rule.number)
    text = s.take(_NUMBER)
    if text is None:
        raise s.error(Rule.number)
    return float(text)


def _integer(s: _Scanner) -> int:
    s.gap(Rule.integer)
    start = s.pos
    text = s.take(_NUMBER)
    if text is None or not _INTEGER_TEXT.fullmatch(text):
        raise s.error(Rule.integer, pos=start)
    return int(text)


def _number_or_ref(s: _Scanner) -> float | Ref:
    s.gap(Rule.reference, Rule.number)
    text = s.take(_NUMBER)
    if text is not None:
        return float(text)
    name = s.take(_REFERENCE)
    if name is not None:
        return Ref(name)
    raise s.error(Rule.reference, Rule.number)


def _int_or_ref(s: _Scanner) -> int | Ref:
    s.gap(Rule.integer, Rule.reference)
    start = s.pos
    text = s.take(_NUMBER)
    if text is not None:
        if not _INTEGER_TEXT.fullmatch(text):
            raise s.error(Rule.integer, pos=start)
        return int(text)
    name = s.take(_REFERENCE)
    if name is not None:
        return Ref(name)
    raise s.error(Rule.integer, Rule.reference)


def _reference(s: _Scanner) -> str:
    s.gap(Rule.reference)
    name = s.take(_REFERENCE)
    if name is None:
        raise s.error(Rule.reference)
    return name


def _symbol(s: _Scanner, pattern: re.Pattern[str] = _SYMBOL) -> str:
    s.gap(Rule.symbol)
    text = s.take(pattern)
    if text is None:
        raise s.error(Rule.symbol)
    return text


def _code_block(s: _Scanner) -> CodeBlock:
    s.gap(Rule.code_block)
    text = s.take(_CODE)
    if text is None:
        raise s.error(Rule.code_block)
    return CodeBlock(text[1:-1])


def _numbers(s: _Scanner, count: int) -> list[float]:
    return [_number(s) for _ in range(count)]


def _many(s: _Scanner, read: Callable[[_Scanner], object]) -> list:
    items = [read(s)]
    while s.has_param():
        items.append(read(s))
    return items


def _compound(s: _Scanner) -> list[tuple[Rule, str]]:
    elements: list[tuple[Rule, str]] = []
    while True:
        if (text := s.take(_INTEGER)) is not None:
            elements.append((Rule.integer, text))
        elif (text := s.take(_REST)) is not None:
            elements.append((Rule.rest, text))
        elif (text := s.take(_NOTE_REF)) is not None:
            elements.append((Rule.note_ref, text))
        else:
            return elements


def _seq(s: _Scanner) -> Seq:
    positives = (Rule.integer, Rule.rest, Rule.note_ref)
    s.gap(*positives)
    events: list[tuple[float, int | Ref]] = []
    index = 0
    while True:
        elements = _compound(s)
        if not elements:
            raise s.error(*positives)
        count = len(elements)
        for j, (kind, text) in enumerate(elements):
            time = j / count + index
            if kind is Rule.integer:
                events.append((time, int(text)))
            elif kind is Rule.note_ref:
                events.append((time, Ref(text)))
        index += 1
        if not s.has_param():
            return Seq(events)
        s.skip_inline()


def _event_value(s: _Scanner) -> str | float:
    if (text := s.take(_QUOTED)) is not None:
        return text[1:-1]
    if (text := s.take(_SAMPLE)) is not None:
        return text
    if (text := s.take(_NUMBER)) is not None:
        return float(text)
    raise s.error(Rule.number, Rule.symbol)


def _event(s: _Scanner) -> EventInner:
    if not s.literal('"'):
        raise s.error(Rule.event)
    val_times: list[tuple[str | float, float]] = []
    while True:
        s.skip_inline()
        if s.literal('"'):
            return EventInner(val_times)
        if s.at_end() or s.peek("\n"):
            raise s.error(Rule.value_time)
        if val_times and s.code[s.pos - 1] not in " \t":
            raise s.error(Rule.value_time)
        value = _event_value(s)
        if not s.literal("@"):
            raise s.error(Rule.number)
        time = s.take(_NUMBER)
        if time is None:
            raise s.error(Rule.number)
        val_times.append((value, float(time)))


def _event_or_pattern(s: _Scanner) -> EventInner | Pattern:
    event = _event(s)
    if not s.literal("("):
        return event
    s.skip_inline()
    span = s.take(_NUMBER)
    if span is None:
        raise s.error(Rule.number)
    s.skip_inline()
    if not s.literal(")"):
        raise s.error(Rule.number)
    return Pattern(event, float(span))


_SIGNAL_RULES = (Rule.number, Rule.reference, Rule.event, Rule.pattern)


def _signal(s: _Scanner) -> float | Ref | EventInner | Pattern:
    s.gap(*_SIGNAL_RULES)
    if s.peek('"'):
        return _event_or_pattern(s)
    if (text := s.take(_NUMBER)) is not None:
        return float(text)
    if (name := s.take(_REFERENCE)) is not None:
        return Ref(name)
    raise s.error(*_SIGNAL_RULES)


def _psampler(s: _Scanner) -> PSampler:
    s.gap(Rule.event, Rule.pattern)
    if not s.peek('"'):
        raise s.error(Rule.event, Rule.pattern)
    return PSampler(_event_or_pattern(s))


def _bar(s: _Scanner) -> float:
    top = s.take(_NUMBER)
    if top is None:
        raise s.error(Rule.number, Rule.bar)
    mark = s.pos
    s.skip_inline()
    if not s.literal("/"):
        s.pos = mark
        return float(top)
    s.skip_inline()
    bottom = s.take(_NUMBER)
    if bottom is None:
        raise s.error(Rule.number)
    return _divide(float(top), float(bottom))


def _point(s: _Scanner) -> tuple[TimeList, float]:
    bar = _bar(s)
    s.skip_inline()
    offset = None
    if s.peek("+") or s.peek("-"):
        sign = -1.0 if s.peek("-") else 1.0
        s.pos += 1
        s.skip_inline()
        match = _DURATION.match(s.code, s.pos)
        if match is None:
            raise s.error(Rule.second, Rule.ms)
        s.pos = match.end()
        unit = DurationUnit.MILLISECONDS if match.group(2) == "ms" else DurationUnit.SECONDS
        offset = Duration(unit, sign * float(match.group(1)))
        s.skip_inline()
    if not s.literal("=>"):
        raise s.error(Rule.number)
    s.skip_inline()
    value = s.take(_NUMBER)
    if value is None:
        raise s.error(Rule.number)
    return TimeList(bar, offset), float(value)


def _points(s: _Scanner) -> Points:
    s.literal("[")
    points: list[tuple[TimeList, float]] = []
    while True:
        s.skip_space()
        if s.literal("]"):
            break
        points.append(_point(s))
        s.skip_space()
        if s.literal(","):
            continue
        if s.literal("]"):
            break
        raise s.error(Rule.points_inner)

    span = -1.0
    looping = False
    if s.code[s.pos : s.pos + 1] in ("*", "/", "+", "-", "^"):
        start = end = s.pos
        while (
            end < len(s.code)
            and s.code[end] in _MATH_CHARS
            and not s.code.startswith("..", end)
        ):
            end += 1
        s.pos = end
        try:
            span = _evaluate("1" + s.code[start:end])
        except ValueError:
            raise s.error(Rule.math_expression, pos=start) from None
        looping = s.literal("..")
    elif s.literal(".."):
        span = 1.0
        looping = True
    return Points(points, span, looping)


def _two(cls: type) -> Callable[[_Scanner], Component]:
    return lambda s: cls(*_numbers(s, 2))


def _one_number_or_ref(cls: type) -> Callable[[_Scanner], Component]:
    return lambda s: cls(_number_or_ref(s))


def _msgsynth(s: _Scanner) -> MsgSynth:
    symbol = _symbol(s)
    attack, decay = _numbers(s, 2)
    return MsgSynth(symbol, attack, decay)


def _pattern_synth(s: _Scanner) -> PatternSynth:
    symbol = _symbol(s)
    return PatternSynth(symbol, _number(s))


def _lpf(s: _Scanner) -> Lpf:
    signal = _signal(s)
    return Lpf(signal, _number(s))


def _rhpf(s: _Scanner) -> Rhpf:
    cutoff = _number_or_ref(s)
    return Rhpf(cutoff, _number(s))


def _apfmsgain(s: _Scanner) -> ApfmsGain:
    delay = _number_or_ref(s)
    return ApfmsGain(delay, _number(s))


def _balance(s: _Scanner) -> Balance:
    left = _reference(s)
    return Balance(left, _reference(s))


_NODES: dict[str, Callable[[_Scanner], Component]] = {
    "delayn": lambda s: Delayn(_int_or_ref(s)),
    "delayms": _one_number_or_ref(Delayms),
    "imp": _one_number_or_ref(Imp),
    "tri": _one_number_or_ref(Tri),
    "squ": _one_number_or_ref(Squ),
    "saw": _one_number_or_ref(Saw),
    "onepole": _one_number_or_ref(Onepole),
    "sin": _one_number_or_ref(Sin),
    "mul": _one_number_or_ref(Mul),
    "add": _one_number_or_ref(Add),
    "pan": _one_number_or_ref(Pan),
    "bd": _one_number_or_ref(Bd),
    "sn": _one_number_or_ref(Sn),
    "hh": _one_number_or_ref(Hh),
    "seq": _seq,
    "choose": lambda s: Choose(_many(s, _number)),
    "arrange": lambda s: Arrange(_many(s, _number_or_ref)),
    "mix": lambda s: Mix(_many(s, _reference)),
    "sp": lambda s: Sp(_symbol(s, _SAMPLE)),
    "speed": lambda s: Speed(_number(s)),
    "constsig": lambda s: ConstSig(_number(s)),
    "sig": lambda s: ConstSig(_number(s)),
    "adc": lambda s: Adc(_integer(s)),
    "sawsynth": _two(SawSynth),
    "squsynth": _two(SquSynth),
    "trisynth": _two(TriSynth),
    "msgsynth": _msgsynth,
    "pattern_synth": _pattern_synth,
    "lpf": _lpf,
    "psampler": _psampler,
    "balance": _balance,
    "rhpf": _rhpf,
    "apfmsgain": _apfmsgain,
    "reverb": lambda s: Reverb(*_numbers(s, 5)),
    "envperc": _two(EnvPerc),
    "adsr": lambda s: Adsr(*_numbers(s, 4)),
    "plate": lambda s: Plate(_number(s)),
    "get": lambda s: Get(_reference(s)),
    "noise": lambda s: Noise(_integer(s)),
    "meta": lambda s: Meta(_code_block(s)),
    "expr": lambda s: Expr(_code_block(s)),
    "eval": lambda s: Eval(_code_block(s)),
}


def _node(s: _Scanner) -> Component:
    start = s.pos
    if s.peek("["):
        return _points(s)
    word = s.take(_WORD)
    parse = _NODES.get(word) if word else None
    if parse is None:
        raise s.error(Rule.node, pos=start)
    return parse(s)


def _line(s: _Scanner) -> tuple[str, list[Component]]:
    name = s.take(_REFERENCE)
    if name is None:
        raise s.error(Rule.reference)
    s.skip_inline()
    if not s.literal(":"):
        raise s.error(Rule.chain)
    s.skip_space()
    chain = [_node(s)]
    while True:
        crossed = s.skip_space()
        if not s.literal(">>"):
            break
        s.skip_space()
        chain.append(_node(s))
    if not (s.at_end() or crossed or s.literal(";")):
        raise s.error(Rule.line)
    return name, chain


def get_ast(code: str) -> Ast:
    """Parse ``code`` into an :class:`Ast`; raise :class:`ParseError` if it is invalid."""
    s = _Scanner(code)
    nodes: dict[str, list[Component]] = {}
    while True:
        s.skip_space()
        while s.literal(";"):
            s.skip_space()
        if s.at_end():
            return Ast(nodes)
        name, chain = _line(s)
        nodes[name] = chain