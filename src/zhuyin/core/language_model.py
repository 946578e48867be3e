"""
語言模型抽象基類

組字格 (Grid) 只透過此介面向語言模型查詢候選字詞。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class Unigram:
    """
    單詞條目

    Attributes:
        key: 讀音，多音節以 "-" 連接，例如 "ㄋㄧˇ-ㄏㄠˇ"
        value: 字詞，例如 "你好"
        score: 對數機率分數，越高越好（通常為負數）
    """
    key: str
    value: str
    score: float = 0.0


@dataclass(frozen=True)
class Bigram:
    preceding_key: str
    key: str
    value: str
    score: float = 0.0


class LanguageModel(ABC):
    """
    語言模型介面

    子類實現:
    - InputMethodLanguageModel: 主詞庫 + 使用者詞 + 排除詞 + 替換表的 facade
    """

    @abstractmethod
    def unigrams_for_key(self, key: str) -> List[Unigram]:
        pass

    @abstractmethod
    def has_unigrams_for_key(self, key: str) -> bool:
        pass

    def bigrams_for_keys(self, preceding_key: str, key: str) -> List[Bigram]:
        """不支援 bigram，永遠回傳空列表"""
        return []
