"""Tests for jwtkit.diagnostics: error formatting and actionable hints."""

from __future__ import annotations

from jwtkit.diagnostics import format_error_with_hint, format_hint
from jwtkit.errors import (
    InvalidKeyError,
    JWTConfigError,
    JWTError,
    MalformedTokenError,
    MissingKeyError,
    SignatureInvalidError,
    TokenExpiredError,
    TokenNotYetActiveError,
    UnsupportedAlgorithmError,
)


def test_hint_for_config_file_errors() -> None:
    hint = format_hint(JWTConfigError("Invalid TOML in /x/jwtkit.toml: boom"))
    assert hint is not None
    assert "version = 1" in hint


def test_hint_for_key_source_errors() -> None:
    hint = format_hint(JWTConfigError("No key available: pass --key"))
    assert hint is not None
    assert "--key-file" in hint


def test_hint_for_unsupported_algorithm_lists_table() -> None:
    hint = format_hint(UnsupportedAlgorithmError("Algorithm not supported: 'none'"))
    assert hint == "use one of: HS256, HS384, HS512, RS256"


def test_hints_for_token_errors() -> None:
    for exc in (
        MissingKeyError("Key is required"),
        InvalidKeyError("bad pem"),
        MalformedTokenError("Invalid token"),
        SignatureInvalidError("Signature verification failed"),
        TokenExpiredError("Token expired"),
        TokenNotYetActiveError("Token not yet active"),
    ):
        assert format_hint(exc)


def test_expired_hint_mentions_exp() -> None:
    hint = format_hint(TokenExpiredError("Token expired"))
    assert hint is not None
    assert "exp" in hint


def test_no_hint_for_unknown_errors() -> None:
    assert format_hint(JWTError("something")) is None
    assert format_hint(RuntimeError("x")) is None


def test_format_error_with_hint_includes_both_lines() -> None:
    out = format_error_with_hint(SignatureInvalidError("Signature verification failed"))
    lines = out.splitlines()
    assert lines[0] == "error: Signature verification failed"
    assert lines[1].startswith("hint: ")


def test_format_error_with_hint_keyerror_names_variable() -> None:
    out = format_error_with_hint(KeyError("JWT_SECRET"))
    assert out.startswith("error: missing environment variable JWT_SECRET")
    assert "hint: " in out


def test_format_error_without_hint() -> None:
    assert format_error_with_hint(ValueError("bad payload")) == "error: bad payload"
