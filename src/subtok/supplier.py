"""
Resolving split configs from preset names or an injected pattern generator.

A generator is any callable turning a natural-language request ("keep
hashtags together") into a candidate config, e.g. a client for a hosted
language model. It is passed in by the caller; nothing here holds one
globally, and every failure of it falls back to a preset.
"""

from collections.abc import Mapping
import logging
from typing import Any, Protocol

from .errors import ConfigError
from .pattern import PatternSplitter, SplitConfig, TokenPattern, as_split_config

log = logging.getLogger(__name__)


class PatternGenerator(Protocol):
    def __call__(self, prompt: str) -> SplitConfig | Mapping[str, Any] | None: ...


def resolve_split_config(
    request: str,
    generator: PatternGenerator | None = None,
    fallback: SplitConfig | str = "whitespace",
) -> SplitConfig:
    """
    Turn ``request`` into a split config that is known to compile.

    ``request`` naming a preset returns that preset. Otherwise ``generator``
    is asked for a candidate; the candidate is compiled before it is
    returned. No generator, a generator error, an empty answer or a pattern
    that does not compile all yield ``fallback``.

    :raises ConfigError: Only if ``fallback`` itself is not a valid preset name.
    """
    fallback_config = as_split_config(fallback)

    if request.upper().replace("-", "_") in TokenPattern.__members__:
        return as_split_config(request)

    if generator is None:
        log.warning(f"no pattern generator configured, using {fallback_config.name} preset")
        return fallback_config

    try:
        candidate = generator(request)
    except Exception:
        log.warning(
            f"pattern generator failed, using {fallback_config.name} preset", exc_info=True
        )
        return fallback_config

    if candidate is None:
        log.warning(f"pattern generator returned nothing, using {fallback_config.name} preset")
        return fallback_config

    try:
        config = candidate if isinstance(candidate, SplitConfig) else SplitConfig.from_dict(dict(candidate))
        PatternSplitter(config)
    except (ConfigError, TypeError, ValueError) as e:
        log.warning(f"generated split config rejected ({e}), using {fallback_config.name} preset")
        return fallback_config

    log.info(f"using generated split config {config.name!r}: {config.pattern!r}")
    return config


__all__ = ["PatternGenerator", "resolve_split_config"]
