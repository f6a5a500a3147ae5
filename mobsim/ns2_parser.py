"""Tokenising and classifying the lines of an ns-2 movement trace.

Recognised statements::

    $node_(0) set X_ 151.05
    $ns_ at 1.0 "$node_(0) setdest 2 3 4"
    $ns_ at 4.6 "$node_(0) set X_ 28.6"
"""

from __future__ import annotations

import logging
import re
import sys
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

AT = "at"
X_COORD = "X_"
Y_COORD = "Y_"
Z_COORD = "Z_"
COORDS = (X_COORD, Y_COORD, Z_COORD)
SETDEST = "setdest"
SET = "set"
NS_SCHEDULER = "$ns_"

_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1

# What strtod accepts: optional leading whitespace, then a decimal or hex float,
# an infinity or a NaN.
_STRTOD_RE = re.compile(
    r"""[ \t\n\v\f\r]*[+-]?(
        (\d+\.?\d*|\.\d+)([eE][+-]?\d+)?
        | 0[xX]([0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)([pP][+-]?\d+)?
        | [iI][nN][fF]([iI][nN][iI][tT][yY])?
        | [nN][aA][nN](\([0-9A-Za-z_]*\))?
    )""",
    re.VERBOSE,
)
# What stream extraction of an int or a double consumes.
_STREAM_INT_RE = re.compile(r"[ \t\n\v\f\r]*([+-]?\d+)")
_STREAM_FLOAT_RE = re.compile(r"[ \t\n\v\f\r]*([+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?)")
_WORD_RE = re.compile(r"[^ \t\n\v\f\r]+")


@dataclass(frozen=True)
class Token:
    """One word of a trace line and the values it carries.

    ``value`` is the word itself, or just the number between brackets when the
    word names a node such as ``$node_(4)``.
    """

    text: str
    value: str
    int_value: int | None
    float_value: float | None

    @classmethod
    def from_text(cls, text: str) -> Token:
        """Build a token from a word, reading its numeric values."""
        value = node_id_from_token(text) if has_node_id_number(text) else text
        if _is_value(value):
            return cls(text, value, _read_int(value), _read_float(value))
        return cls(text, value, None, None)


@dataclass
class ParseResult:
    """The tokens of one trace line; empty when the line names no node."""

    tokens: list[Token] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.tokens)

    def __getitem__(self, index: int) -> Token:
        return self.tokens[index]

    @property
    def texts(self) -> list[str]:
        """The words of the line."""
        return [token.text for token in self.tokens]


def _is_value(text: str) -> bool:
    return bool(text) and is_number(text)


def _read_int(text: str) -> int:
    match = _STREAM_INT_RE.match(text)
    if match is None:
        return 0
    return max(_INT_MIN, min(_INT_MAX, int(match.group(1))))


def _read_float(text: str) -> float:
    match = _STREAM_FLOAT_RE.match(text)
    if match is None:
        return 0.0
    value = float(match.group(1))
    if value in (float("inf"), float("-inf")):
        return sys.float_info.max if value > 0 else -sys.float_info.max
    return value


def _bracketed(text: str) -> str | None:
    """The text between the first '(' and the first ')', or None without both."""
    start = text.find("(")
    end = text.find(")")
    if start == -1 or end == -1:
        return None
    if end < start:
        return text[start + 1:]
    return text[start + 1:end]


def is_number(text: str) -> bool:
    """True if the whole text reads as a floating-point number (an empty text counts)."""
    if text == "":
        return True
    return _STRTOD_RE.fullmatch(text) is not None


def has_node_id_number(text: str) -> bool:
    """True if the text holds a non-negative integer between brackets."""
    node_id = _bracketed(text)
    if node_id is None:
        return False
    return is_number(node_id) and "." not in node_id and not node_id.startswith("-")


def node_id_from_token(text: str) -> str:
    """The node number of a word like ``$node_(4)``, or '' if it has none."""
    if not has_node_id_number(text):
        return ""
    return _bracketed(text) or ""


def trim_ns2_line(line: str) -> str:
    """Strip leading blanks and trailing blanks and semicolons."""
    return line.lstrip(" \t").rstrip(" \t;")


def parse_ns2_line(line: str) -> ParseResult:
    """Split a trace line into tokens, dropping comments and stray closing quotes."""
    line = trim_ns2_line(line.split("#", 1)[0])
    if not has_node_id_number(line):
        logger.debug("Line has no node Id: %s", line)
        return ParseResult()

    tokens = [Token.from_text(word) for word in _WORD_RE.findall(line)]
    count = len(tokens)
    last = tokens[-1].text
    if count in (7, 8) and last.endswith('"'):
        tokens[-1] = Token.from_text(last[:-1])
    elif count in (8, 9) and last == '"':
        # A quote standing alone after the values, as in: setdest 2 2 1  "
        tokens.pop()
    return ParseResult(tokens)


def node_id_int(result: ParseResult) -> int:
    """Node number of a recognised line shape, or -1 for any other shape."""
    if len(result) == 4:
        token = result[0]
    elif len(result) in (7, 8):
        token = result[3]
    else:
        return -1
    return token.int_value if token.int_value is not None else 0


def node_id_string(result: ParseResult) -> str:
    """Node number as text for a recognised line shape, or ''."""
    if len(result) == 4:
        return result[0].value
    if len(result) in (7, 8):
        return result[3].value
    return ""


def is_set_initial_pos(result: ParseResult) -> bool:
    """True for a line like ``$node_(0) set X_ 123``."""
    return (
        len(result) == 4
        and has_node_id_number(result[0].text)
        and result[1].text == SET
        and result[3].float_value is not None
        and result[2].text in COORDS
    )


def is_sched_set_pos(result: ParseResult) -> bool:
    """True for a line like ``$ns_ at 1 "$node_(0) set X_ 2"``."""
    return (
        len(result) == 7
        and result[0].text == NS_SCHEDULER
        and result[1].text == AT
        and result[4].text == SET
        and result[2].float_value is not None
        and result[3].float_value is not None
        and result[5].text in COORDS
    )


def is_sched_mobility_pos(result: ParseResult) -> bool:
    """True for a line like ``$ns_ at 1 "$node_(0) setdest 2 3 4"``."""
    return (
        len(result) == 8
        and result[0].text == NS_SCHEDULER
        and result[1].text == AT
        and all(result[i].float_value is not None for i in (2, 5, 6, 7))
        and result[4].text == SETDEST
    )