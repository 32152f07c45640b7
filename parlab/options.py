"""Command-line option declaration, parsing and help text generation."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Sequence, Union

from parlab.optvalues import (
    InvalidOptionFormatError,
    MissingArgumentError,
    OptionExistsError,
    OptionNotExistsError,
    OptionNotPresentError,
    OptionRequiresArgumentError,
    OptionSyntaxError,
    Value,
    value as make_value,
)

OPTION_LONGEST = 30
OPTION_DESC_GAP = 2

_ALNUM = "A-Za-z0-9"
_OPTION_MATCHER = re.compile(
    rf"--([{_ALNUM}][-_{_ALNUM}]+)(=(.*))?|-([{_ALNUM}]+)"
)
_OPTION_SPECIFIER = re.compile(rf"(([{_ALNUM}]),)?[ ]*([{_ALNUM}][-_{_ALNUM}]*)?")


@dataclass
class HelpOptionDetails:
    """What the help text needs to know about one option."""

    s: str
    l: str
    desc: str
    has_default: bool
    default_value: str
    has_implicit: bool
    implicit_value: str
    arg_help: str
    is_container: bool
    is_boolean: bool


@dataclass
class HelpGroupDetails:
    """The options declared in one help group."""

    name: str = ""
    description: str = ""
    options: list[HelpOptionDetails] = field(default_factory=list)


@dataclass(eq=False)
class OptionDetails:
    """A declared option: its names, description and value prototype."""

    short_name: str
    long_name: str
    description: str
    value: Value

    def make_storage(self) -> Value:
        return self.value.clone()


class OptionValue:
    """The parsed state of one option."""

    def __init__(self) -> None:
        self._value: Optional[Value] = None
        self._count = 0
        self._default = False

    def _ensure_value(self, details: OptionDetails) -> Value:
        if self._value is None:
            self._value = details.make_storage()
        return self._value

    def parse(self, details: OptionDetails, text: str) -> None:
        stored = self._ensure_value(details)
        self._count += 1
        stored.parse(text)

    def parse_default(self, details: OptionDetails) -> None:
        stored = self._ensure_value(details)
        self._default = True
        stored.parse_default()

    def count(self) -> int:
        """How many times the option was given."""
        return self._count

    def has_default(self) -> bool:
        """Whether the value came from the option's default."""
        return self._default

    def get(self) -> Any:
        """Return the parsed value; raise ValueError if there is none."""
        if self._value is None:
            raise ValueError("No value")
        return self._value.result


@dataclass(frozen=True)
class KeyValue:
    """One option occurrence in command-line order."""

    key: str
    value: str

    def as_type(self, kind: Any) -> Any:
        """Parse the argument text as the given value kind."""
        parsed = make_value(kind)
        parsed.parse(self.value)
        return parsed.result


class ParseResult:
    """The outcome of parsing a command line.

    ``unmatched`` holds the arguments, after the program name, that were
    neither options nor consumed as positional values.
    """

    def __init__(
        self,
        options: dict[str, OptionDetails],
        positional: Sequence[str],
        allow_unrecognised: bool,
        argv: Sequence[str],
    ) -> None:
        self._options = options
        self._positional = list(positional)
        self._next_positional = 0
        self._allow_unrecognised = allow_unrecognised
        self._results: dict[OptionDetails, OptionValue] = {}
        self._sequential: list[KeyValue] = []
        self.unmatched: list[str] = []
        self._parse(list(argv))

    def count(self, option: str) -> int:
        details = self._options.get(option)
        if details is None:
            return 0
        stored = self._results.get(details)
        return stored.count() if stored is not None else 0

    def __getitem__(self, option: str) -> OptionValue:
        details = self._options.get(option)
        if details is None:
            raise OptionNotPresentError(option)
        return self._result_for(details)

    def arguments(self) -> list[KeyValue]:
        """Every option occurrence in the order it was parsed."""
        return list(self._sequential)

    def _result_for(self, details: OptionDetails) -> OptionValue:
        return self._results.setdefault(details, OptionValue())

    def _parse_option(self, details: OptionDetails, arg: str) -> None:
        self._result_for(details).parse(details, arg)
        self._sequential.append(KeyValue(details.long_name, arg))

    def _add_to_option(self, option: str, arg: str) -> None:
        details = self._options.get(option)
        if details is None:
            raise OptionNotExistsError(option)
        self._parse_option(details, arg)

    def _consume_positional(self, arg: str) -> bool:
        while self._next_positional < len(self._positional):
            name = self._positional[self._next_positional]
            details = self._options.get(name)
            if details is None:
                raise OptionNotExistsError(name)
            if details.value.is_container:
                self._add_to_option(name, arg)
                return True
            self._next_positional += 1
            if self._result_for(details).count() == 0:
                self._add_to_option(name, arg)
                return True
        return False

    def _checked_parse_arg(
        self, argv: list[str], current: int, details: OptionDetails, name: str
    ) -> int:
        """Parse the option's argument and return the index of the last word used."""
        proto = details.value
        if proto.has_implicit:
            self._parse_option(details, proto.implicit_text)
        elif current + 1 >= len(argv):
            raise MissingArgumentError(name)
        else:
            self._parse_option(details, argv[current + 1])
            current += 1
        return current

    def _parse(self, argv: list[str]) -> None:
        current = 1
        consume_remaining = False

        while current < len(argv):
            arg = argv[current]
            if arg == "--":
                consume_remaining = True
                current += 1
                break

            match = _OPTION_MATCHER.fullmatch(arg)
            if match is None:
                if arg.startswith("-") and len(arg) > 1 and not self._allow_unrecognised:
                    raise OptionSyntaxError(arg)
                if not self._consume_positional(arg):
                    self.unmatched.append(arg)
            elif match.group(4):
                shorts = match.group(4)
                for position, letter in enumerate(shorts):
                    details = self._options.get(letter)
                    if details is None:
                        if self._allow_unrecognised:
                            continue
                        raise OptionNotExistsError(letter)
                    if position + 1 == len(shorts):
                        current = self._checked_parse_arg(argv, current, details, letter)
                    elif details.value.has_implicit:
                        self._parse_option(details, details.value.implicit_text)
                    else:
                        raise OptionRequiresArgumentError(letter)
            elif match.group(1):
                name = match.group(1)
                details = self._options.get(name)
                if details is None:
                    if self._allow_unrecognised:
                        self.unmatched.append(arg)
                        current += 1
                        continue
                    raise OptionNotExistsError(name)
                if match.group(2):
                    self._parse_option(details, match.group(3))
                else:
                    current = self._checked_parse_arg(argv, current, details, name)
            current += 1

        for details in self._options.values():
            stored = self._result_for(details)
            if details.value.has_default and not stored.count() and not stored.has_default():
                stored.parse_default(details)

        if consume_remaining:
            while current < len(argv) and self._consume_positional(argv[current]):
                current += 1
            self.unmatched.extend(argv[current:])


class OptionAdder:
    """Declares options in one group; calls can be chained."""

    def __init__(self, options: "Options", group: str) -> None:
        self._options = options
        self._group = group

    def __call__(
        self,
        opts: str,
        desc: str,
        value: Optional[Value] = None,
        arg_help: str = "",
    ) -> "OptionAdder":
        match = _OPTION_SPECIFIER.fullmatch(opts)
        if match is None:
            raise InvalidOptionFormatError(opts)
        short = match.group(2) or ""
        long = match.group(3) or ""
        if not short and not long:
            raise InvalidOptionFormatError(opts)
        if len(long) == 1 and short:
            raise InvalidOptionFormatError(opts)
        if len(long) == 1:
            short, long = long, short
        self._options.add_option(
            self._group,
            short,
            long,
            desc,
            make_value(bool) if value is None else value,
            arg_help,
        )
        return self


def _format_option(o: HelpOptionDetails) -> str:
    result = "  "
    result += f"-{o.s}," if o.s else "   "
    if o.l:
        result += f" --{o.l}"
    arg = o.arg_help or "arg"
    if not o.is_boolean:
        if o.has_implicit:
            result += f" [={arg}(={o.implicit_value})]"
        else:
            result += f" {arg}"
    return result


def _format_description(o: HelpOptionDetails, start: int, width: int) -> str:
    desc = o.desc
    if o.has_default and (not o.is_boolean or o.default_value != "false"):
        if o.default_value != "":
            desc += f" (default: {o.default_value})"
        else:
            desc += ' (default: "")'

    pieces: list[str] = []
    indent = "\n" + " " * start
    start_line = last_space = size = 0
    for current, ch in enumerate(desc):
        if ch == " ":
            last_space = current
        if ch == "\n":
            start_line = current + 1
            last_space = start_line
        elif size > width:
            if last_space == start_line:
                pieces.append(desc[start_line:current + 1] + indent)
                start_line = current + 1
            else:
                pieces.append(desc[start_line:last_space] + indent)
                start_line = last_space + 1
            last_space = start_line
            size = 0
        else:
            size += 1
    pieces.append(desc[start_line:])
    return "".join(pieces)


class Options:
    """A set of declared options for one program."""

    def __init__(self, program: str, help_string: str = "") -> None:
        self._program = program
        self._help_string = help_string
        self._custom_help = "[OPTION...]"
        self._positional_help = "positional parameters"
        self._show_positional = False
        self._allow_unrecognised = False
        self._options: dict[str, OptionDetails] = {}
        self._positional: list[str] = []
        self._positional_set: set[str] = set()
        self._help: dict[str, HelpGroupDetails] = {}

    def positional_help(self, help_text: str) -> "Options":
        self._positional_help = help_text
        return self

    def custom_help(self, help_text: str) -> "Options":
        self._custom_help = help_text
        return self

    def show_positional_help(self) -> "Options":
        self._show_positional = True
        return self

    def allow_unrecognised_options(self) -> "Options":
        self._allow_unrecognised = True
        return self

    def add_options(self, group: str = "") -> OptionAdder:
        """Return an adder that declares options in ``group``."""
        return OptionAdder(self, group)

    def add_option(
        self,
        group: str,
        short: str,
        long: str,
        desc: str,
        value: Value,
        arg_help: str = "",
    ) -> None:
        details = OptionDetails(short, long, desc, value)
        for name in (short, long):
            if name:
                if name in self._options:
                    raise OptionExistsError(name)
                self._options[name] = details
        entry = self._help.setdefault(group, HelpGroupDetails(name=group))
        entry.options.append(
            HelpOptionDetails(
                s=short,
                l=long,
                desc=desc,
                has_default=value.has_default,
                default_value=value.default_text,
                has_implicit=value.has_implicit,
                implicit_value=value.implicit_text,
                arg_help=arg_help,
                is_container=value.is_container,
                is_boolean=value.is_boolean,
            )
        )

    def parse_positional(self, *args: Union[str, Iterable[str]]) -> None:
        """Name the options that take positional arguments, in order."""
        names: list[str] = []
        for arg in args:
            if isinstance(arg, str):
                names.append(arg)
            else:
                names.extend(arg)
        self._positional = names
        self._positional_set.update(names)

    def parse(self, argv: Sequence[str]) -> ParseResult:
        """Parse ``argv``, whose first item is the program name."""
        return ParseResult(
            self._options, self._positional, self._allow_unrecognised, argv
        )

    def _help_one_group(self, group: str) -> str:
        details = self._help.get(group)
        if details is None:
            return ""
        shown = [
            o
            for o in details.options
            if self._show_positional or o.l not in self._positional_set
        ]
        formatted = [_format_option(o) for o in shown]
        longest = min(max((len(s) for s in formatted), default=0), OPTION_LONGEST)
        allowed = 76 - longest - OPTION_DESC_GAP

        result = f" {group} options:\n" if group else ""
        for o, s in zip(shown, formatted):
            d = _format_description(o, longest + OPTION_DESC_GAP, allowed)
            result += s
            if len(s) > longest:
                result += "\n" + " " * (longest + OPTION_DESC_GAP)
            else:
                result += " " * (longest + OPTION_DESC_GAP - len(s))
            result += d + "\n"
        return result

    def _group_help_text(self, groups: Sequence[str]) -> str:
        result = ""
        for i, group in enumerate(groups):
            text = self._help_one_group(group)
            if not text:
                continue
            result += text
            if i < len(groups) - 1:
                result += "\n"
        return result

    def help(self, groups: Optional[Sequence[str]] = None) -> str:
        """Return the help text for ``groups``, or for every group."""
        result = f"{self._help_string}\nUsage:\n  {self._program} {self._custom_help}"
        if self._positional and self._positional_help:
            result += f" {self._positional_help}"
        result += "\n\n"
        result += self._group_help_text(list(groups) if groups else self.groups())
        return result

    def groups(self) -> list[str]:
        """The declared group names, sorted."""
        return sorted(self._help)

    def group_help(self, group: str) -> HelpGroupDetails:
        """Return the details of ``group``; raise KeyError if it is unknown."""
        return self._help[group]