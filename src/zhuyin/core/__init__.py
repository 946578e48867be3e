"""
核心抽象層

定義語言模型介面、輸入狀態、按鍵與處理結果。
"""

from .events import KeyHandlerError, KeyHandlerResult
from .keys import Key, KeyName
from .language_model import Bigram, LanguageModel, Unigram
from .protocols import LanguageModelLoaderProtocol
from .states import (
    ChoosingCandidate,
    Committing,
    Empty,
    EmptyIgnoringPrevious,
    InputState,
    InputStateKind,
    Inputting,
    Marking,
    NotEmpty,
)

__all__ = [
    "LanguageModel",
    "Unigram",
    "Bigram",
    "LanguageModelLoaderProtocol",
    "Key",
    "KeyName",
    "KeyHandlerResult",
    "KeyHandlerError",
    "InputState",
    "InputStateKind",
    "Empty",
    "EmptyIgnoringPrevious",
    "Committing",
    "NotEmpty",
    "Inputting",
    "ChoosingCandidate",
    "Marking",
]
