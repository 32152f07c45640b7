"""Typed option values for the command-line parser, and the errors it raises."""

from __future__ import annotations

import re
from functools import partial
from typing import Any, Callable, List

LQUOTE = "\u2018"
RQUOTE = "\u2019"

VECTOR_DELIMITER = ","


def _quote(text: str) -> str:
    return f"{LQUOTE}{text}{RQUOTE}"


class OptionError(Exception):
    """Base class of every error raised by option handling."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class OptionSpecError(OptionError):
    """An option was declared incorrectly."""


class OptionParseError(OptionError):
    """The command line could not be parsed."""


class OptionExistsError(OptionSpecError):
    def __init__(self, option: str) -> None:
        super().__init__(f"Option {_quote(option)} already exists")
        self.option = option


class InvalidOptionFormatError(OptionSpecError):
    def __init__(self, format: str) -> None:
        super().__init__(f"Invalid option format {_quote(format)}")
        self.format = format


class OptionSyntaxError(OptionParseError):
    def __init__(self, text: str) -> None:
        super().__init__(
            f"Argument {_quote(text)} starts with a - but has incorrect syntax"
        )
        self.text = text


class OptionNotExistsError(OptionParseError):
    def __init__(self, option: str) -> None:
        super().__init__(f"Option {_quote(option)} does not exist")
        self.option = option


class MissingArgumentError(OptionParseError):
    def __init__(self, option: str) -> None:
        super().__init__(f"Option {_quote(option)} is missing an argument")
        self.option = option


class OptionRequiresArgumentError(OptionParseError):
    def __init__(self, option: str) -> None:
        super().__init__(f"Option {_quote(option)} requires an argument")
        self.option = option


class OptionNotHasArgumentError(OptionParseError):
    def __init__(self, option: str, arg: str) -> None:
        super().__init__(
            f"Option {_quote(option)} does not take an argument, "
            f"but argument {_quote(arg)} given"
        )
        self.option = option
        self.arg = arg


class OptionNotPresentError(OptionParseError):
    def __init__(self, option: str) -> None:
        super().__init__(f"Option {_quote(option)} not present")
        self.option = option


class ArgumentIncorrectTypeError(OptionParseError):
    def __init__(self, arg: str) -> None:
        super().__init__(f"Argument {_quote(arg)} failed to parse")
        self.arg = arg


class OptionRequiredError(OptionParseError):
    def __init__(self, option: str) -> None:
        super().__init__(f"Option {_quote(option)} is required but not present")
        self.option = option


_INTEGER_PATTERN = re.compile(r"(-)?(0x)?([0-9a-zA-Z]+)|((0x)?0)")
_TRUTHY_PATTERN = re.compile(r"(t|T)(rue)?|1")
_FALSY_PATTERN = re.compile(r"(f|F)(alse)?|0")
_FLOAT_PREFIX = re.compile(r"\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def parse_integer(text: str, bits: int = 32, signed: bool = True) -> int:
    """Parse a decimal or ``0x`` hexadecimal integer that fits the given width."""
    match = _INTEGER_PATTERN.fullmatch(text)
    if match is None:
        raise ArgumentIncorrectTypeError(text)
    if match.group(4):
        return 0

    negative = bool(match.group(1))
    base = 16 if match.group(2) else 10
    limit = 1 << bits

    result = 0
    for ch in match.group(3):
        if "0" <= ch <= "9":
            digit = ord(ch) - ord("0")
        elif base == 16 and "a" <= ch <= "f":
            digit = ord(ch) - ord("a") + 10
        elif base == 16 and "A" <= ch <= "F":
            digit = ord(ch) - ord("A") + 10
        else:
            raise ArgumentIncorrectTypeError(text)
        result = result * base + digit
        if result >= limit:
            raise ArgumentIncorrectTypeError(text)

    if signed:
        bound = 1 << (bits - 1)
        if negative:
            if result > bound:
                raise ArgumentIncorrectTypeError(text)
        elif result > bound - 1:
            raise ArgumentIncorrectTypeError(text)
    elif negative:
        raise ArgumentIncorrectTypeError(text)

    return -result if negative else result


def parse_bool(text: str) -> bool:
    """Parse ``t``, ``true``, ``1`` and their false counterparts."""
    if _TRUTHY_PATTERN.fullmatch(text):
        return True
    if _FALSY_PATTERN.fullmatch(text):
        return False
    raise ArgumentIncorrectTypeError(text)


def parse_char(text: str) -> str:
    """Accept exactly one character."""
    if len(text) != 1:
        raise ArgumentIncorrectTypeError(text)
    return text


def parse_float(text: str) -> float:
    """Parse the leading floating-point number of ``text``."""
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        raise ArgumentIncorrectTypeError(text)
    return float(match.group(0))


def parse_list(
    text: str,
    item_parser: Callable[[str], Any] = str,
    delimiter: str = VECTOR_DELIMITER,
) -> list:
    """Split ``text`` at ``delimiter`` and parse each piece.

    A trailing delimiter adds no empty item; an empty text gives no items.
    """
    parts = text.split(delimiter)
    if parts[-1] == "":
        parts.pop()
    return [item_parser(part) for part in parts]


_SCALARS: dict[str, tuple[Callable[[str], Any], Any]] = {
    "bool": (parse_bool, False),
    "string": (str, ""),
    "str": (str, ""),
    "char": (parse_char, "\0"),
    "float": (parse_float, 0.0),
    "double": (parse_float, 0.0),
}
for _bits in (8, 16, 32, 64):
    _SCALARS[f"int{_bits}"] = (partial(parse_integer, bits=_bits, signed=True), 0)
    _SCALARS[f"uint{_bits}"] = (partial(parse_integer, bits=_bits, signed=False), 0)
_SCALARS["int"] = _SCALARS["int32"]

_PY_TYPES = {bool: "bool", int: "int32", float: "double", str: "string"}


class Value:
    """A typed value an option parses its arguments into."""

    def __init__(
        self,
        parser: Callable[[str], Any],
        initial: Any,
        *,
        is_container: bool = False,
        is_boolean: bool = False,
    ) -> None:
        self._parser = parser
        self._initial = initial
        self.is_container = is_container
        self.is_boolean = is_boolean
        self.has_default = False
        self.has_implicit = False
        self.default_text = ""
        self.implicit_text = ""
        self.result: Any = list(initial) if is_container else initial
        if is_boolean:
            self.default_value("false")
            self.implicit_value("true")

    def default_value(self, value: str) -> "Value":
        """Use ``value`` when the option is absent."""
        self.has_default = True
        self.default_text = value
        return self

    def implicit_value(self, value: str) -> "Value":
        """Use ``value`` when the option is given without an argument."""
        self.has_implicit = True
        self.implicit_text = value
        return self

    def no_implicit_value(self) -> "Value":
        self.has_implicit = False
        return self

    def _store(self, text: str) -> None:
        if self.is_container:
            self.result.extend(parse_list(text, self._parser))
        else:
            self.result = self._parser(text)

    def parse(self, text: str) -> None:
        """Parse an argument into the stored result."""
        self._store(text)

    def parse_default(self) -> None:
        """Parse the default text into the stored result."""
        self._store(self.default_text)

    def clone(self) -> "Value":
        """Return a value with the same settings and fresh storage."""
        other = Value(
            self._parser,
            self._initial,
            is_container=self.is_container,
            is_boolean=self.is_boolean,
        )
        other.has_default = self.has_default
        other.has_implicit = self.has_implicit
        other.default_text = self.default_text
        other.implicit_text = self.implicit_text
        return other


def _scalar(kind: Any) -> tuple[Callable[[str], Any], Any, bool]:
    name = _PY_TYPES.get(kind, kind) if isinstance(kind, type) else kind
    if not isinstance(name, str) or name not in _SCALARS:
        raise TypeError(f"unsupported value kind: {kind!r}")
    parser, initial = _SCALARS[name]
    return parser, initial, name == "bool"


def value(kind: Any = bool) -> Value:
    """Create a value of the given kind.

    ``kind`` is ``bool``, ``int``, ``float``, ``str``, a name such as
    ``"uint8"`` or ``"char"``, or a one-item list such as ``[int]`` for a
    list of values.
    """
    if isinstance(kind, (list, tuple)):
        if len(kind) != 1:
            raise TypeError("a list kind must name exactly one item kind")
        parser, _, _ = _scalar(kind[0])
        return Value(parser, [], is_container=True)
    parser, initial, is_boolean = _scalar(kind)
    return Value(parser, initial, is_boolean=is_boolean)


__all__: List[str] = [
    "OptionError",
    "OptionSpecError",
    "OptionParseError",
    "OptionExistsError",
    "InvalidOptionFormatError",
    "OptionSyntaxError",
    "OptionNotExistsError",
    "MissingArgumentError",
    "OptionRequiresArgumentError",
    "OptionNotHasArgumentError",
    "OptionNotPresentError",
    "ArgumentIncorrectTypeError",
    "OptionRequiredError",
    "parse_integer",
    "parse_bool",
    "parse_char",
    "parse_float",
    "parse_list",
    "Value",
    "value",
]