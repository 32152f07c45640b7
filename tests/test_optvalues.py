import pytest

from parlab.optvalues import (
    ArgumentIncorrectTypeError,
    OptionError,
    OptionExistsError,
    OptionNotExistsError,
    OptionNotHasArgumentError,
    OptionParseError,
    OptionSpecError,
    parse_bool,
    parse_char,
    parse_float,
    parse_integer,
    parse_list,
    value,
)


@pytest.mark.parametrize("n", [0, 1, 42, 65535, 2**31 - 1])
def test_integer_decimal_and_hex_round_trip(n):
    assert parse_integer(str(n)) == n
    assert parse_integer(hex(n)) == n


@pytest.mark.parametrize("n", [1, 100, 2**31])
def test_negative_round_trip(n):
    assert parse_integer(f"-{n}") == -n


def test_integer_width_limits():
    assert parse_integer("255", 8, False) == 255
    assert parse_integer("-128", 8, True) == -128
    assert parse_integer("127", 8, True) == 127
    for text, bits, signed in [("256", 8, False), ("128", 8, True), ("-129", 8, True)]:
        with pytest.raises(ArgumentIncorrectTypeError):
            parse_integer(text, bits, signed)


@pytest.mark.parametrize("text", ["-1", "1.5", "abc", "0XFF", "", "--1"])
def test_integer_rejects(text):
    with pytest.raises(ArgumentIncorrectTypeError):
        parse_integer(text, 32, False)


def test_bool_patterns():
    for text in ["t", "T", "true", "True", "1"]:
        assert parse_bool(text) is True
    for text in ["f", "F", "false", "False", "0"]:
        assert parse_bool(text) is False
    with pytest.raises(ArgumentIncorrectTypeError):
        parse_bool("TRUE")


def test_char():
    assert parse_char("x") == "x"
    with pytest.raises(ArgumentIncorrectTypeError):
        parse_char("xy")


def test_float_prefix():
    assert parse_float("1.5abc") == 1.5
    assert parse_float("2e3") == 2e3
    with pytest.raises(ArgumentIncorrectTypeError):
        parse_float("abc")


def test_list_splitting():
    assert parse_list("1,2,3", parse_integer) == [1, 2, 3]
    assert parse_list("a,b,") == ["a", "b"]
    assert parse_list("") == []
    assert parse_list(",a") == ["", "a"]
    assert parse_list("a;b", delimiter=";") == ["a", "b"]


def test_error_messages_and_hierarchy():
    err = OptionNotExistsError("x")
    assert str(err) == "Option \u2018x\u2019 does not exist"
    assert isinstance(err, OptionParseError)
    assert isinstance(OptionExistsError("x"), OptionSpecError)
    assert isinstance(OptionNotHasArgumentError("a", "b"), OptionError)
    assert str(ArgumentIncorrectTypeError("q")) == "Argument \u2018q\u2019 failed to parse"


def test_bool_value_defaults():
    v = value(bool)
    assert v.is_boolean
    assert v.has_default and v.default_text == "false"
    assert v.has_implicit and v.implicit_text == "true"
    v.parse("true")
    assert v.result is True
    v.parse_default()
    assert v.result is False


def test_value_settings_chain_and_parse():
    v = value(int).default_value("7").implicit_value("9")
    assert v.has_default and v.has_implicit
    v.parse_default()
    assert v.result == 7
    v.no_implicit_value()
    assert v.has_implicit is False
    with pytest.raises(ArgumentIncorrectTypeError):
        v.parse("nope")


def test_container_value_accumulates():
    v = value([int])
    assert v.is_container
    v.parse("1,2")
    v.parse("3")
    assert v.result == [1, 2, 3]


def test_clone_has_fresh_storage():
    v = value([str]).default_value("a,b")
    v.parse("x")
    c = v.clone()
    assert c.result == []
    assert c.default_text == "a,b"
    c.parse_default()
    assert c.result == ["a", "b"]
    assert v.result == ["x"]


def test_named_kinds():
    v = value("uint8")
    with pytest.raises(ArgumentIncorrectTypeError):
        v.parse("300")
    c = value("char")
    c.parse("z")
    assert c.result == "z"
    with pytest.raises(TypeError):
        value("complex")