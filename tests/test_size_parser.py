import pytest

from unbytify.size_parser import (
    InvalidSizeError,
    ParseErrorKind,
    SizeOverflowError,
    SizeParseError,
    parse_size,
    parse_size_bytes,
    parse_size_env,
)
from unbytify.units import SUFFIXES, U64_MAX


def test_parse_size_accepts_plain_integer() -> None:
    assert parse_size("1") == 1
    assert parse_size("1024") == 1024
    assert parse_size(str(U64_MAX)) == U64_MAX


def test_parse_size_accepts_integral_float_without_unit() -> None:
    assert parse_size("1.0") == 1
    assert parse_size("1e3") == 1000


def test_parse_size_rejects_negative_values() -> None:
    for value in ("-1", "- 1", "-1.0", "- 1.0", "-1K"):
        with pytest.raises(InvalidSizeError):
            parse_size(value)


def test_parse_size_returns_zero_for_any_unit() -> None:
    assert parse_size("0") == 0
    assert parse_size("0K") == 0
    assert parse_size("0 EiB") == 0
    assert parse_size("0.5K") == 0


def test_parse_size_accepts_binary_units() -> None:
    assert parse_size("1K") == 1024
    assert parse_size(" 1 K ") == 1024
    assert parse_size("1.0K") == 1024
    assert parse_size("100MiB") == 104_857_600
    assert parse_size("1 GiB") == 1_073_741_824
    assert parse_size("2gb") == 2 * 1024**3


def test_parse_size_floors_fractional_values() -> None:
    assert parse_size("1.5K") == 1024 + 512
    assert parse_size("1.25K") == 1024 + 256
    assert parse_size("1.2K") == int(1.2 * 1024.0)
    assert parse_size("1.5b") == 1
    assert parse_size("15.75E") == 15 * 1024**6 + 3 * (1024**6 // 4)


def test_parse_size_detects_overflow() -> None:
    for value in ("16E", "42E", "16.000001E", "18446744073709551616", "inf K"):
        with pytest.raises(SizeOverflowError):
            parse_size(value)


def test_parse_size_rejects_malformed_input() -> None:
    for value in ("", "   ", "1.5", "1O", "K", "abc", "1kx", "1kib2", "1 .5K", "nanK", "1_000"):
        with pytest.raises(InvalidSizeError):
            parse_size(value)


def test_parse_size_error_carries_kind_and_input() -> None:
    with pytest.raises(SizeParseError) as invalid:
        parse_size("1O")
    assert invalid.value.kind is ParseErrorKind.INVALID
    assert invalid.value.value == "1O"
    assert isinstance(invalid.value, ValueError)

    with pytest.raises(SizeParseError) as overflow:
        parse_size("42E")
    assert overflow.value.kind is ParseErrorKind.OVERFLOW
    assert "42E" in str(overflow.value)


def test_parse_size_accepts_every_spelling_of_every_unit() -> None:
    for idx, suffix in enumerate(SUFFIXES):
        expected = 4 * 2 ** (10 * idx)
        assert parse_size("4" + suffix) == expected
        assert parse_size("4" + suffix[:1]) == expected
        assert parse_size("4" + suffix.lower()) == expected
        assert parse_size("4" + suffix[:1].lower()) == expected
        assert parse_size("4 " + suffix.upper()) == expected


def test_parse_size_scans_units_in_ascending_order() -> None:
    # The exponent is consumed before the exbi letter is tried.
    assert parse_size("1e3k") == 1000 * 1024
    assert parse_size("4kib") == 4096


def test_parse_size_rejects_non_string() -> None:
    with pytest.raises(TypeError):
        parse_size(1024)  # type: ignore[arg-type]


def test_parse_size_bytes_falls_back_to_default() -> None:
    assert parse_size_bytes("1.5K", 1) == 1536
    assert parse_size_bytes(None, 123) == 123
    assert parse_size_bytes("", 123) == 123
    assert parse_size_bytes("0", 123) == 123
    assert parse_size_bytes("abc", 123) == 123
    assert parse_size_bytes("42E", 123) == 123


def test_parse_size_env_accepts_binary_suffix(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TEST_SIZE", "100MiB")
    assert parse_size_env("TEST_SIZE", 1) == 104_857_600


def test_parse_size_env_uses_default_when_empty(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TEST_SIZE", raising=False)
    assert parse_size_env("TEST_SIZE", 1234) == 1234
    monkeypatch.setenv("TEST_SIZE", "  ")
    assert parse_size_env("TEST_SIZE", 1234) == 1234


def test_parse_size_env_rejects_invalid_value(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TEST_SIZE", "abc")
    with pytest.raises(ValueError, match="TEST_SIZE"):
        parse_size_env("TEST_SIZE", 1)


def test_parse_size_rejects_non_ascii_digits() -> None:
    for value in ("١٢٣", "١K", "４KiB", "1.٥K", "२ MiB"):
        with pytest.raises(InvalidSizeError):
            parse_size(value)


def test_parse_size_accepts_doubled_byte_suffix() -> None:
    # "b" is the byte letter, so "bb" and "bib" are letter plus tail.
    assert parse_size("1bb") == 1
    assert parse_size("2BiB") == 2
