"""Unit tests for the vocabulary model: transport form, validation and rendering."""

import dataclasses
import json

import pytest

import subtok as st
from subtok.errors import ConfigError, ModelLoadError


# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def model():
    """Return a trained model with special tokens."""
    return st.train(
        "hug pug pun bun hugs", 16, "word-punct", special_tokens=["<UNK>", "<EOS>"]
    )


# Transport form
# ---------------------------------------------------------------------------


def test_to_dict_shape(model):
    """The transport form holds vocab, merge pairs, specials and split config."""
    data = model.to_dict()

    assert set(data) == {"version", "vocab", "merges", "special_tokens", "split_config"}
    assert data["merges"] == [[m.left, m.right] for m in model.merges]
    assert data["special_tokens"] == ["<UNK>", "<EOS>"]
    assert data["split_config"] == {"pattern": r"\w+|[^\w\s]+", "options": "g"}


def test_from_dict_restores_model(model):
    """Loading the transport form rebuilds mappings, ranks and config."""
    loaded = st.VocabularyModel.from_dict(model.to_dict())

    assert dict(loaded.id_of) == dict(model.id_of)
    assert dict(loaded.string_of) == dict(model.string_of)
    assert loaded.merges == model.merges
    assert loaded.special_tokens == model.special_tokens
    assert loaded.split_config == model.split_config


def test_json_transport(model):
    """to_json()/from_json() carry the same model."""
    payload = model.to_json()
    assert json.loads(payload)["vocab"] == dict(model.id_of)
    assert st.VocabularyModel.from_json(payload).merges == model.merges


def test_ranks_come_from_merge_positions():
    """Rank is the index of the pair in the merges list."""
    loaded = st.VocabularyModel.from_dict(
        {
            "vocab": {"a": 0, "b": 1, "ab": 2, "abb": 3},
            "merges": [["a", "b"], ["ab", "b"]],
            "special_tokens": [],
            "split_config": {"pattern": r"\S+", "options": "g"},
        }
    )

    assert [(m.result, m.rank) for m in loaded.merges] == [("ab", 0), ("abb", 1)]
    assert loaded.ranks[("ab", "b")] == 1


def test_camel_case_payload():
    """Payloads with specialTokens/regexConfig keys load too."""
    loaded = st.VocabularyModel.from_dict(
        {
            "vocab": {"<UNK>": 0, "a": 1, "b": 2, "ab": 3},
            "merges": [["a", "b"]],
            "specialTokens": ["<UNK>"],
            "regexConfig": {"name": "Whitespace", "regex": r"\S+", "flags": "g"},
        }
    )

    assert loaded.special_tokens == ("<UNK>",)
    assert loaded.split_config.pattern == r"\S+"
    assert [t.value for t in st.encode("ab", loaded)] == ["ab"]


def test_camel_case_pattern_options_survive_loading():
    """splitConfig.patternOptions is kept, so the loaded model splits like the trained one."""
    trained = st.train("ab ab AB", 20, st.SplitConfig("[a-z]+", "gi"))
    data = trained.to_dict()
    payload = {
        "vocab": data["vocab"],
        "merges": data["merges"],
        "specialTokens": [],
        "splitConfig": {"pattern": "[a-z]+", "patternOptions": "gi"},
    }

    loaded = st.VocabularyModel.from_dict(payload)

    assert loaded.split_config == trained.split_config
    assert [t.value for t in st.encode("AB ab", loaded)] == [
        t.value for t in st.encode("AB ab", trained)
    ]
    assert [t.value for t in st.encode("AB ab", loaded)] == ["AB", "ab"]


# Validation
# ---------------------------------------------------------------------------


def test_missing_vocab_raises():
    """A payload without vocab is rejected."""
    with pytest.raises(ModelLoadError):
        st.VocabularyModel.from_dict({"merges": []})


def test_sparse_ids_raise():
    """Ids with gaps are rejected."""
    with pytest.raises(ModelLoadError):
        st.VocabularyModel.from_dict({"vocab": {"a": 0, "b": 2}, "merges": []})


def test_duplicate_ids_raise():
    """Two units sharing an id are rejected."""
    with pytest.raises(ModelLoadError):
        st.VocabularyModel.from_dict({"vocab": {"a": 0, "b": 0}, "merges": []})


def test_merge_with_unknown_unit_raises():
    """A merge whose result is missing from vocab is rejected."""
    with pytest.raises(ModelLoadError):
        st.VocabularyModel.from_dict({"vocab": {"a": 0, "b": 1}, "merges": [["a", "b"]]})


def test_special_token_missing_from_vocab_raises():
    """Every special token needs a vocabulary entry."""
    with pytest.raises(ModelLoadError):
        st.VocabularyModel.from_dict(
            {"vocab": {"a": 0}, "merges": [], "special_tokens": ["<UNK>"]}
        )


def test_version_mismatch_raises(model):
    """An unknown format version is rejected."""
    data = model.to_dict()
    data["version"] = "99"
    with pytest.raises(ModelLoadError):
        st.VocabularyModel.from_dict(data)


def test_invalid_json_raises():
    """Text that is not JSON is rejected."""
    with pytest.raises(ModelLoadError):
        st.VocabularyModel.from_json("{not json")


def test_special_token_off_the_lowest_ids_raises():
    """Special tokens must hold ids 0..k-1 in order."""
    with pytest.raises(ModelLoadError):
        st.VocabularyModel.from_dict(
            {"vocab": {"a": 0, "<UNK>": 1}, "merges": [], "special_tokens": ["<UNK>"]}
        )
    with pytest.raises(ModelLoadError):
        st.VocabularyModel.from_dict(
            {
                "vocab": {"<EOS>": 0, "<UNK>": 1},
                "merges": [],
                "special_tokens": ["<UNK>", "<EOS>"],
            }
        )


def test_repeated_merge_pair_raises():
    """A merge pair listed twice would give it two ranks."""
    with pytest.raises(ModelLoadError):
        st.VocabularyModel.from_dict(
            {"vocab": {"a": 0, "b": 1, "ab": 2}, "merges": [["a", "b"], ["a", "b"]]}
        )


def test_invalid_split_pattern_raises_config_error(model):
    """A stored pattern that does not compile fails at load time."""
    data = model.to_dict()
    data["split_config"] = {"pattern": "[unclosed", "options": "g"}
    with pytest.raises(ConfigError):
        st.VocabularyModel.from_dict(data)


# Immutability
# ---------------------------------------------------------------------------


def test_mappings_are_read_only(model):
    """id_of and string_of reject writes."""
    with pytest.raises(TypeError):
        model.id_of["new"] = 999
    with pytest.raises(TypeError):
        model.string_of[999] = "new"


def test_model_fields_are_frozen(model):
    """Model attributes cannot be reassigned."""
    with pytest.raises(dataclasses.FrozenInstanceError):
        model.merges = ()


def test_model_is_hashable(model):
    """Equal models hash alike and can key a dict."""
    loaded = st.VocabularyModel.from_dict(model.to_dict())

    assert loaded == model
    assert hash(loaded) == hash(model)
    assert {model: "trained"}[loaded] == "trained"


# Lookups and rendering
# ---------------------------------------------------------------------------


def test_lookups(model):
    """id_for/string_for return None for missing entries."""
    assert model.id_for("<UNK>") == 0
    assert model.string_for(1) == "<EOS>"
    assert model.id_for("zzz") is None
    assert model.string_for(-1) is None
    assert model.is_special("<EOS>")
    assert not model.is_special("h")


def test_alphabet_is_sorted(model):
    """Base units come in code point order right after the special tokens."""
    assert model.alphabet == tuple(sorted(set("hugpnbs")))
    assert [model.id_of[c] for c in model.alphabet] == list(range(2, 2 + len(model.alphabet)))


def test_render_lists_merge_derivations():
    """render() shows special tokens, base units and merge derivations."""
    model = st.train("aaab", 10, "whole-text", special_tokens=["<UNK>"])
    lines = model.render().splitlines()

    assert lines[0] == "ST [0] <UNK>"
    assert "[1] a" in lines
    assert "[3] [a][a] -> aa" in lines


def test_render_escapes_control_characters():
    """Control characters are escaped in the listing."""
    model = st.train("a\nb", 10, "whole-text")
    assert "\\u000a" in model.render()
