"""Exception hierarchy for subtok."""

import regex as re


def _with_details(message: str, **details: object) -> str:
    """Append ``(key: value)`` notes for every detail that is set."""
    notes = [f"({key}: {value})" for key, value in details.items() if value not in (None, "")]
    return " ".join([message, *notes])


class SubtokError(Exception):
    """Base exception for all subtok errors."""


class ConfigError(SubtokError):
    """
    Raised when a split configuration or training setting is invalid.

    Covers patterns that do not compile, unsupported option letters, unknown
    preset names and a non-integer ``vocab_size``.
    """

    def __init__(
        self,
        message: str,
        *,
        pattern: str | None = None,
        options: str | None = None,
        regex_err: re.error | None = None,
    ) -> None:
        """
        Args:
            message: Error message.
            pattern: The split pattern that failed.
            options: The option letters supplied with the pattern.
            regex_err: The underlying error from the regex library.
        """
        super().__init__(
            _with_details(
                message,
                pattern=None if pattern is None else repr(pattern),
                options=None if not options else repr(options),
                reason=regex_err,
            )
        )
        self.pattern = pattern
        self.options = options
        self.regex_err = regex_err


class SpecialTokenError(SubtokError):
    """Raised when text contains special tokens the active strategy forbids."""

    def __init__(self, message: str, *, found_tokens: set[str] | None = None) -> None:
        found = ", ".join(sorted(found_tokens)) if found_tokens else None
        super().__init__(_with_details(message, found=found))
        self.found_tokens = found_tokens


class StrategyError(SubtokError):
    """Raised for an unknown strategy name or a custom strategy without a subset."""

    def __init__(
        self,
        message: str,
        *,
        invalid_name: str | None = None,
        available_strats: list[str] | None = None,
    ) -> None:
        super().__init__(_with_details(message, got=invalid_name, available=available_strats))
        self.invalid_name = invalid_name
        self.available_strats = available_strats


class ModelLoadError(SubtokError):
    """Raised when rebuilding a vocabulary model from its transport form fails."""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        version_mismatch: tuple[str, str] | None = None,
    ) -> None:
        """
        Args:
            message: Error message.
            field: Payload field that was missing or malformed.
            version_mismatch: ``(found, expected)`` format versions.
        """
        found, expected = version_mismatch if version_mismatch is not None else (None, None)
        super().__init__(_with_details(message, field=field, got=found, expected=expected))
        self.field = field
        self.version_mismatch = version_mismatch


__all__ = [
    "SubtokError",
    "ConfigError",
    "SpecialTokenError",
    "StrategyError",
    "ModelLoadError",
]
