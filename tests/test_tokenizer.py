"""Unit tests for the Tokenizer facade and factory functions."""

import pytest

import subtok as st
from subtok.errors import ConfigError


CORPUS = """Hello, Tokenizer!
This is a sample text to test your "custom" build.
Try adding an email like test@example.com or a #hashtag to see how it splits."""


# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def tokenizer():
    """Return a tokenizer trained with the social preset."""
    return st.Tokenizer.train(
        CORPUS, 120, "social", special_tokens=["<UNK>", "<PAD>", "<EOS>"]
    )


# Encode-decode
# ---------------------------------------------------------------------------


def test_roundtrip_corpus_line(tokenizer):
    """Corpus text decodes to its pre-tokens joined."""
    text = "Try adding a #hashtag"
    assert tokenizer.decode(tokenizer.encode_ids(text)) == "Tryaddinga#hashtag"


def test_hashtag_stays_one_pre_token(tokenizer):
    """The social preset keeps the hashtag together."""
    steps = tokenizer.trace("#hashtag")
    assert [s.pre_token for s in steps] == ["#hashtag"]


def test_unknown_character_uses_unk(tokenizer):
    """Characters never seen fall back to the <UNK> id."""
    tokens = tokenizer.encode("Hello Ω")
    assert tokens[-1].value == "Ω"
    assert tokens[-1].id == 0


def test_strategy_by_name(tokenizer):
    """Strategies can be passed by name."""
    tokens = tokenizer.encode("Hello<EOS>", strategy="all")
    assert tokens[-1].value == "<EOS>"
    assert tokens[-1].is_special


def test_encode_batch(tokenizer):
    """Batch encoding keeps input order."""
    texts = ["Hello", "test", ""]
    assert tokenizer.encode_batch(texts, num_workers=1) == [
        tokenizer.encode(text) for text in texts
    ]
    assert tokenizer.encode_batch([]) == []


def test_decode_batch(tokenizer):
    """Batch decoding matches single decoding."""
    batch = [tokenizer.encode_ids("Hello"), tokenizer.encode_ids("test")]
    assert tokenizer.decode_batch(batch) == ["Hello", "test"]


def test_stats(tokenizer):
    """stats() summarises the encoding of a text."""
    stats = tokenizer.stats("test test")
    assert stats.character_count == 8
    assert stats.total_tokens >= 2


def test_vocab_size(tokenizer):
    """Vocab size never exceeds the requested size."""
    assert tokenizer.vocab_size() <= 120
    assert tokenizer.vocab_size() == tokenizer.model.size


# Loading
# ---------------------------------------------------------------------------


def test_from_pretrained_json(tokenizer):
    """A tokenizer loaded from JSON encodes identically."""
    loaded = st.from_pretrained(tokenizer.to_json())
    text = "This is a sample text"
    assert loaded.encode(text) == tokenizer.encode(text)


def test_from_pretrained_dict(tokenizer):
    """A tokenizer loaded from a dict encodes identically."""
    loaded = st.from_pretrained(tokenizer.to_dict())
    assert loaded.encode_ids("email") == tokenizer.encode_ids("email")


def test_render_vocab(tokenizer):
    """The vocabulary listing starts with the special tokens."""
    assert tokenizer.render_vocab().splitlines()[:3] == [
        "ST [0] <UNK>",
        "ST [1] <PAD>",
        "ST [2] <EOS>",
    ]


# Factory
# ---------------------------------------------------------------------------


def test_get_trainer_with_preset():
    """get_trainer() resolves preset names."""
    trainer = st.get_trainer(50, "word-punct")
    assert trainer.split_config == st.get_split_config("word-punct")


def test_get_trainer_with_custom_pattern():
    """A custom pattern and options override the preset."""
    trainer = st.get_trainer(50, custom_pattern=r"[a-z]+", options="gi")
    tok = st.Tokenizer(trainer.train("Abc abc ABC").model)
    assert [s.pre_token for s in tok.trace("Abc ABC")] == ["Abc", "ABC"]
    assert tok.decode(tok.encode_ids("ABC")) == "ABC"


def test_get_trainer_invalid_pattern():
    """An invalid custom pattern fails when the trainer is created."""
    with pytest.raises(ConfigError):
        st.get_trainer(50, custom_pattern="[a-z")


def test_retraining_creates_new_model(tokenizer):
    """Training again leaves the earlier tokenizer untouched."""
    before = tokenizer.to_json()
    other = st.Tokenizer.train("completely different text", 40)
    assert tokenizer.to_json() == before
    assert other.model is not tokenizer.model
