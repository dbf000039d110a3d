"""Unit tests for the exception hierarchy and its messages."""

import pytest

import subtok as st
from subtok.errors import (
    ConfigError,
    ModelLoadError,
    SpecialTokenError,
    StrategyError,
    SubtokError,
)


@pytest.mark.parametrize(
    "exc",
    [
        ConfigError("bad"),
        SpecialTokenError("bad"),
        StrategyError("bad"),
        ModelLoadError("bad"),
    ],
)
def test_all_errors_share_base(exc):
    """Every library error can be caught as SubtokError."""
    assert isinstance(exc, SubtokError)


def test_message_without_details_is_unchanged():
    """No details means the plain message."""
    assert str(ConfigError("empty split pattern")) == "empty split pattern"


def test_config_error_message_names_pattern_and_options():
    """Pattern and options are appended to the message."""
    err = ConfigError("invalid split pattern", pattern="(a", options="gi")
    assert str(err) == "invalid split pattern (pattern: '(a') (options: 'gi')"


def test_special_token_error_lists_found_tokens_sorted():
    """Found tokens are listed in sorted order."""
    err = SpecialTokenError("not allowed", found_tokens={"<b>", "<a>"})
    assert str(err) == "not allowed (found: <a>, <b>)"


def test_model_load_error_reports_versions():
    """A version mismatch names both versions."""
    with pytest.raises(ModelLoadError) as exc_info:
        st.VocabularyModel.from_dict({"version": "9", "vocab": {}, "merges": []})
    assert exc_info.value.version_mismatch == ("9", "1")
    assert "(got: 9) (expected: 1)" in str(exc_info.value)


def test_strategy_error_names_choices():
    """An unknown strategy name lists the valid ones."""
    with pytest.raises(StrategyError) as exc_info:
        st.get_strategy("sometimes")
    assert exc_info.value.invalid_name == "sometimes"
    assert "none-raise" in str(exc_info.value)
