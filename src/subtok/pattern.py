"""Pre-tokenization: split patterns, presets and the pattern splitter."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Final

import regex as re

from .errors import ConfigError
from .types import Span


class TokenPattern(str, Enum):
    """
    Pre-defined split patterns.

    Sources:
    - GPT2 and GPT4: https://github.com/openai/tiktoken/blob/main/tiktoken_ext/openai_public.py
    - LLAMA3: https://github.com/ggerganov/llama.cpp
    - the rest are simple general-purpose presets
    """

    WHITESPACE = r"\S+"
    WORD_PUNCT = r"\w+|[^\w\s]+"
    SIMPLE_WORD = r"[a-zA-Z]+"
    SOCIAL = r"[#@]?[\w]+|[^\w\s]+"
    CODE = r"\w+|==|!=|<=|>=|&&|\|\||\p{P}"
    # whole input as a single pre-token
    WHOLE_TEXT = r"[\s\S]+"

    # OpenAI models
    GPT2 = (
        r"'(?:[sdmt]|ll|ve|re)|"
        r" ?\p{L}+|"
        r" ?\p{N}+|"
        r" ?[^\s\p{L}\p{N}]+|"
        r"\s+(?!\S)|"
        r"\s+"
    )

    GPT4 = (
        r"'(?i:[sdmt]|ll|ve|re)|"
        r"[^\r\n\p{L}\p{N}]?+\p{L}+|"
        r"\p{N}{1,3}|"
        r" ?[^\s\p{L}\p{N}]++[\r\n]*|"
        r"\s*[\r\n]|"
        r"\s+(?!\S)|"
        r"\s+"
    )

    # Meta models
    LLAMA3 = (
        r"(?:'[sS]|'[tT]|'[rR][eE]|'[vV][eE]|'[mM]|'[lL][lL]|'[dD])|"
        r"[^\r\n\p{L}\p{N}]?\p{L}+|"
        r"\p{N}{1,3}|"
        r" ?[^\s\p{L}\p{N}]+[\r\n]*|"
        r"\s*[\r\n]+|"
        r"\s+(?!\S)|"
        r"\s+"
    )

    @classmethod
    def get(cls, name: str) -> str:
        """Get patterns by name (case-insensitive)."""
        return cls.member(name).value

    @classmethod
    def member(cls, name: str) -> "TokenPattern":
        try:
            return cls[name.upper().replace("-", "_")]
        except KeyError:
            raise ConfigError(
                f"Unknown pattern: {name!r}. "
                f"Valid patterns: {', '.join(pat.name for pat in cls)}"
            ) from None


_PRESET_OPTIONS: Final[dict[TokenPattern, str]] = {
    TokenPattern.CODE: "gu",
}

_PRESET_DESCRIPTIONS: Final[dict[TokenPattern, str]] = {
    TokenPattern.WHITESPACE: "Splits text by whitespace characters. Matches any non-whitespace sequence.",
    TokenPattern.WORD_PUNCT: "Matches words and sequences of punctuation separately.",
    TokenPattern.SIMPLE_WORD: "Extracts only alphabetic words, ignoring numbers and punctuation.",
    TokenPattern.SOCIAL: "Keeps hashtags (#tag) and mentions (@user) together as single tokens.",
    TokenPattern.CODE: "Attempts to keep code operators together while splitting keywords.",
    TokenPattern.WHOLE_TEXT: "Treats the whole input as one pre-token.",
}

# option letters follow the regex flag alphabet split configs are written in;
# "g", "u", "v" and "d" are always in effect for str patterns
_OPTION_FLAGS: Final[dict[str, int]] = {
    "g": 0,
    "u": 0,
    "v": 0,
    "d": 0,
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
    "y": 0,
}


@dataclass(frozen=True)
class SplitConfig:
    """A split pattern plus its dialect option letters."""

    pattern: str
    options: str = "g"
    name: str = field(default="Custom", compare=False)
    description: str | None = field(default=None, compare=False)

    def to_dict(self) -> dict[str, str]:
        return {"pattern": self.pattern, "options": self.options}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SplitConfig":
        """
        Build a config from its transport form.

        Also accepts the camelCase ``patternOptions`` key and the ``regex``/``flags`` pair.
        """
        pattern = data.get("pattern", data.get("regex"))
        options = data.get("options", data.get("patternOptions", data.get("flags", "g")))
        if not isinstance(pattern, str) or not isinstance(options, str):
            raise ConfigError("split config needs string pattern and options")
        return cls(
            pattern=pattern,
            options=options,
            name=data.get("name", "Custom"),
            description=data.get("description"),
        )


def list_patterns() -> list[str]:
    """Return names of all available built-in split patterns."""
    return [pat.name for pat in TokenPattern]


def get_pattern(name: str) -> str:
    return TokenPattern.get(name)


def get_split_config(name: str) -> SplitConfig:
    """Return the preset split config registered under ``name``."""
    pat = TokenPattern.member(name)
    return SplitConfig(
        pattern=pat.value,
        options=_PRESET_OPTIONS.get(pat, "g"),
        name=pat.name,
        description=_PRESET_DESCRIPTIONS.get(pat),
    )


DEFAULT_SPLIT_CONFIG: Final[SplitConfig] = get_split_config("whitespace")


def as_split_config(value: "SplitConfig | str | None") -> SplitConfig:
    """Accept a config, a preset name or ``None`` (the whitespace preset)."""
    if value is None:
        return DEFAULT_SPLIT_CONFIG
    if isinstance(value, SplitConfig):
        return value
    if isinstance(value, str):
        return get_split_config(value)
    raise ConfigError(f"expected SplitConfig or preset name, got {type(value).__name__}")


class PatternSplitter:
    """
    Compiled matcher for one split config.

    Only matched text becomes a pre-token; anything between matches is dropped.
    Zero-length matches never produce a pre-token.
    """

    def __init__(self, config: SplitConfig) -> None:
        """Compile ``config``; raises ConfigError before any text is seen."""
        self.config = config
        flags = _parse_options(config)
        self.sticky = "y" in config.options
        self.compiled: re.Pattern = _compile_pattern(config, flags)

    def split(self, text: str) -> list[Span]:
        """Return ``(pre_token, start_offset)`` pairs in order of appearance."""
        if self.sticky:
            return self._split_sticky(text)
        return [(m.group(0), m.start()) for m in self.compiled.finditer(text) if m.end() > m.start()]

    def pre_tokens(self, text: str) -> list[str]:
        return [seq for seq, _ in self.split(text)]

    def _split_sticky(self, text: str) -> list[Span]:
        """Matches must follow each other with no gap; the first gap ends the scan."""
        spans: list[Span] = []
        pos = 0
        while pos <= len(text):
            m = self.compiled.match(text, pos)
            if m is None:
                break
            if m.end() == m.start():
                # empty match: step past it like a global scan would
                pos += 1
                continue
            spans.append((m.group(0), m.start()))
            pos = m.end()
        return spans


def split(text: str, config: SplitConfig) -> list[Span]:
    """One-shot form of ``PatternSplitter(config).split(text)``."""
    return PatternSplitter(config).split(text)


def _parse_options(config: SplitConfig) -> int:
    """Translate option letters to regex flags; unknown or repeated letters are rejected."""
    flags = 0
    seen: set[str] = set()
    for letter in config.options:
        if letter not in _OPTION_FLAGS:
            raise ConfigError(
                f"unsupported pattern option {letter!r}",
                pattern=config.pattern,
                options=config.options,
            )
        if letter in seen:
            raise ConfigError(
                f"repeated pattern option {letter!r}",
                pattern=config.pattern,
                options=config.options,
            )
        seen.add(letter)
        flags |= _OPTION_FLAGS[letter]
    return flags


def _compile_pattern(config: SplitConfig, flags: int) -> re.Pattern:
    """
    Compile and validate a split pattern.

    :param config: Split config holding the pattern string.
    :param flags: regex flags derived from the config options.
    :return: Compiled pattern.
    :raises ConfigError: If pattern is invalid.
    """
    if not config.pattern:
        raise ConfigError("empty split pattern", pattern=config.pattern)
    try:
        return re.compile(config.pattern, flags)
    except re.error as e:
        raise ConfigError(
            "invalid split pattern",
            pattern=config.pattern,
            options=config.options,
            regex_err=e,
        ) from e


__all__ = [
    "TokenPattern",
    "SplitConfig",
    "PatternSplitter",
    "DEFAULT_SPLIT_CONFIG",
    "as_split_config",
    "split",
    "get_pattern",
    "get_split_config",
    "list_patterns",
]
