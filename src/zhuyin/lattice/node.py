"""
組字格節點 (Node)

一個節點涵蓋連續數個讀音，帶有依分數排序的候選字詞。
節點的選擇有三種：預設（最高分候選）、浮動（使用者習慣給的分數）、
固定（使用者在候選窗明確選字）。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from zhuyin.core.language_model import Unigram

# 固定選字的節點使用此分數，讓最佳路徑一定經過它
SELECTED_CANDIDATE_SCORE = 99.0


class Node:
    def __init__(self, key: str, unigrams: Sequence[Unigram]):
        self._key = key
        # sorted() 為穩定排序，同分時保留語言模型順序
        self._unigrams: List[Unigram] = sorted(unigrams, key=lambda u: u.score, reverse=True)
        self._selected_index = 0
        self._candidate_fixed = False
        self._score = self._unigrams[0].score if self._unigrams else 0.0

    def __repr__(self) -> str:
        return f"Node({self._key!r}, current={self.current_value!r}, score={self._score})"

    @property
    def key(self) -> str:
        return self._key

    @property
    def unigrams(self) -> List[Unigram]:
        return list(self._unigrams)

    @property
    def candidates(self) -> List[str]:
        return [u.value for u in self._unigrams]

    @property
    def score(self) -> float:
        return self._score

    @property
    def is_candidate_fixed(self) -> bool:
        return self._candidate_fixed

    @property
    def current_unigram(self) -> Optional[Unigram]:
        if not self._unigrams:
            return None
        return self._unigrams[self._selected_index]

    @property
    def current_value(self) -> str:
        unigram = self.current_unigram
        return unigram.value if unigram else ""

    def highest_unigram_score(self) -> float:
        return self._unigrams[0].score if self._unigrams else 0.0

    def score_for_candidate(self, value: str) -> float:
        for unigram in self._unigrams:
            if unigram.value == value:
                return unigram.score
        return 0.0

    def index_of_candidate(self, value: str) -> Optional[int]:
        for i, unigram in enumerate(self._unigrams):
            if unigram.value == value:
                return i
        return None

    def select_candidate_at_index(self, index: int, fix: bool = True) -> None:
        """固定選字；之後的 walk 會強制經過此節點"""
        if not 0 <= index < len(self._unigrams):
            raise IndexError(f"候選索引超出範圍: {index}")
        self._selected_index = index
        self._candidate_fixed = fix
        self._score = SELECTED_CANDIDATE_SCORE

    def select_floating_candidate_at_index(self, index: int, score: float) -> None:
        """浮動選字：換掉目前候選與分數，但仍可被更好的路徑取代"""
        if not 0 <= index < len(self._unigrams):
            raise IndexError(f"候選索引超出範圍: {index}")
        self._selected_index = index
        self._candidate_fixed = False
        self._score = score

    def reset_candidate(self) -> None:
        self._selected_index = 0
        self._candidate_fixed = False
        self._score = self.highest_unigram_score()


@dataclass(frozen=True)
class NodeAnchor:
    """
    節點在組字格中的位置

    Attributes:
        node: 節點
        location: 起始讀音索引
        spanning_length: 涵蓋的讀音數
    """
    node: Node
    location: int
    spanning_length: int

    @property
    def end(self) -> int:
        return self.location + self.spanning_length
