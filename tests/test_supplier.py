"""Unit tests for resolving split configs from presets or a pattern generator."""

import pytest

import subtok as st
from subtok.errors import ConfigError


def test_preset_name_skips_generator():
    """A preset name resolves without calling the generator."""

    def generator(prompt):
        raise AssertionError("generator should not be called")

    assert st.resolve_split_config("social", generator) == st.get_split_config("social")


def test_no_generator_falls_back():
    """Without a generator the fallback preset is used."""
    config = st.resolve_split_config("keep emails together")
    assert config == st.get_split_config("whitespace")


def test_generated_mapping_is_used():
    """A valid generated config is returned."""

    def generator(prompt):
        return {"regex": r"[\w.]+@[\w.]+|\S+", "flags": "g", "name": "Emails"}

    config = st.resolve_split_config("keep emails together", generator)
    assert config.pattern == r"[\w.]+@[\w.]+|\S+"
    assert config.name == "Emails"


def test_generated_split_config_is_used():
    """A generator may return a SplitConfig directly."""
    wanted = st.SplitConfig(r"#\w+|\w+", "g")
    assert st.resolve_split_config("hashtags", lambda prompt: wanted) == wanted


@pytest.mark.parametrize(
    "answer",
    [None, {"regex": "(unclosed", "flags": "g"}, {"regex": r"\w+", "flags": "gq"}, {"flags": "g"}],
)
def test_bad_generated_config_falls_back(answer):
    """Empty or invalid candidates are replaced by the fallback."""
    config = st.resolve_split_config("anything", lambda prompt: answer, fallback="code")
    assert config == st.get_split_config("code")


def test_generator_error_falls_back():
    """A failing generator does not propagate."""

    def generator(prompt):
        raise RuntimeError("service unavailable")

    assert st.resolve_split_config("anything", generator) == st.get_split_config("whitespace")


def test_invalid_fallback_raises():
    """The fallback itself must be a known preset."""
    with pytest.raises(ConfigError):
        st.resolve_split_config("anything", fallback="no-such-preset")
