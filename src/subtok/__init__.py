"""subtok: character-level BPE subword tokenization library."""

from ._progress import disable_progress, enable_progress
from .decoder import Decoder, decode
from .encoder import EncodeStep, Encoder, encode
from .errors import (
    ConfigError,
    ModelLoadError,
    SpecialTokenError,
    StrategyError,
    SubtokError,
)
from .factory import from_pretrained, get_trainer
from .pattern import (
    PatternSplitter,
    SplitConfig,
    TokenPattern,
    get_pattern,
    get_split_config,
    list_patterns,
)
from .stats import TokenStats, token_stats
from .strategy import (
    AllowAllStrategy,
    AllowCustomStrategy,
    AllowNoneRaiseStrategy,
    AllowNoneStrategy,
    SpecialTokenStrategy,
    get_strategy,
    list_strategies,
)
from .supplier import PatternGenerator, resolve_split_config
from .tokenizer import Tokenizer
from .trainer import BPETrainer, TrainingResult, train
from .types import UNKNOWN_ID, Token
from .vocab import Merge, VocabularyModel

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("subtok")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "Tokenizer",
    "VocabularyModel",
    "Merge",
    "Token",
    "UNKNOWN_ID",
    "SplitConfig",
    "PatternSplitter",
    "TokenPattern",
    "BPETrainer",
    "TrainingResult",
    "Encoder",
    "EncodeStep",
    "Decoder",
    "TokenStats",
    "SpecialTokenStrategy",
    "AllowAllStrategy",
    "AllowNoneStrategy",
    "AllowNoneRaiseStrategy",
    "AllowCustomStrategy",
    "PatternGenerator",
    "SubtokError",
    "ConfigError",
    "SpecialTokenError",
    "StrategyError",
    "ModelLoadError",
    "train",
    "encode",
    "decode",
    "token_stats",
    "resolve_split_config",
    "get_trainer",
    "get_strategy",
    "get_pattern",
    "get_split_config",
    "from_pretrained",
    "list_patterns",
    "list_strategies",
    "enable_progress",
    "disable_progress",
]
