"""
使用者選字習慣模型 (User Override Model)

記錄使用者在某個上下文中把解碼結果改成了哪個字詞，之後遇到相同上下文時
建議同一個字詞。上下文由游標所在節點及其前兩個節點組成：

    ((前前節點讀音,字詞),(前一節點讀音,字詞),目前節點讀音)

遇到句末標點時上下文會被切斷，前面的節點以 "()" 表示。

建議分數 = 該字詞次數 / 此上下文總次數 × 時間衰減
時間衰減 = exp(ln(0.5) / half_life × 經過秒數)，低於 1/2^20 視為 0。

容量有上限，超過時淘汰最久沒有被觀察到的上下文（LRU）。
"""

from __future__ import annotations

import math
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from zhuyin.lattice.node import NodeAnchor
from zhuyin.utils.logger import get_logger

DEFAULT_CAPACITY = 500
DEFAULT_HALF_LIFE = 5400.0  # 1.5 小時
DEFAULT_NO_OVERRIDE_THRESHOLD = -8.0
DECAY_THRESHOLD = 1.0 / 1048576.0

ENDING_PUNCTUATION = frozenset("，。！？」』”’")

EMPTY_CONTEXT = "()"


@dataclass
class _Override:
    count: int = 0
    timestamp: float = 0.0


@dataclass
class Observation:
    """某個上下文的觀察紀錄"""
    count: int = 0
    overrides: Dict[str, _Override] = field(default_factory=dict)

    def update(self, candidate: str, timestamp: float) -> None:
        self.count += 1
        override = self.overrides.setdefault(candidate, _Override())
        override.count += 1
        override.timestamp = timestamp


def is_ending_punctuation(value: str) -> bool:
    return value in ENDING_PUNCTUATION


def _context_prefix(walked_path: Sequence[NodeAnchor], cursor_index: int) -> List[NodeAnchor]:
    prefix: List[NodeAnchor] = []
    covered = 0
    for anchor in walked_path:
        prefix.append(anchor)
        covered += anchor.spanning_length
        if covered >= cursor_index:
            break
    return prefix


def walked_nodes_to_key(walked_path: Sequence[NodeAnchor], cursor_index: int) -> str:
    """
    由解碼路徑與游標位置產生上下文簽章

    Args:
        walked_path: 目前的解碼路徑
        cursor_index: 組字格游標（或候選游標）位置

    Returns:
        str: 上下文簽章；路徑為空時回傳空字串
    """
    prefix = _context_prefix(walked_path, cursor_index)
    if not prefix:
        return ""

    current = prefix[-1].node.key
    remaining = list(reversed(prefix[:-1]))

    parts: List[str] = []
    for _ in range(2):
        if not remaining:
            parts.append(EMPTY_CONTEXT)
            continue
        node = remaining.pop(0).node
        value = node.current_value
        if is_ending_punctuation(value):
            parts.append(EMPTY_CONTEXT)
            remaining = []
        else:
            parts.append(f"({node.key},{value})")

    previous, anterior = parts
    return f"({anterior},{previous},{current})"


def _score(event_count: int, total_count: int, event_timestamp: float, timestamp: float, lam: float) -> float:
    decay = math.exp((timestamp - event_timestamp) * lam)
    if decay < DECAY_THRESHOLD:
        return 0.0
    return event_count / total_count * decay


class UserOverrideModel:
    """
    使用範例:
        >>> model = UserOverrideModel()
        >>> model.observe(path, 1, "市", timestamp=0.0, candidate_score=-2.0)
        >>> model.suggest(path, 1, timestamp=0.0)
        '市'
    """

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        half_life: float = DEFAULT_HALF_LIFE,
        no_override_threshold: float = DEFAULT_NO_OVERRIDE_THRESHOLD,
    ):
        if capacity <= 0:
            raise ValueError(f"capacity 必須 > 0，收到 {capacity}")
        if half_life <= 0:
            raise ValueError(f"half_life 必須 > 0，收到 {half_life}")
        self._capacity = capacity
        self._half_life = half_life
        self._decay_exponent = math.log(0.5) / half_life
        self._no_override_threshold = no_override_threshold
        # 最近觀察到的上下文放在尾端
        self._lru: "OrderedDict[str, Observation]" = OrderedDict()
        self._logger = get_logger("lm.user_override_model")

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def half_life(self) -> float:
        return self._half_life

    @property
    def no_override_threshold(self) -> float:
        return self._no_override_threshold

    def __len__(self) -> int:
        return len(self._lru)

    def __contains__(self, context_key: str) -> bool:
        return context_key in self._lru

    def clear(self) -> None:
        self._lru.clear()

    def observe(
        self,
        walked_path: Sequence[NodeAnchor],
        cursor_index: int,
        candidate: str,
        timestamp: float,
        candidate_score: Optional[float] = None,
    ) -> bool:
        """
        記錄一次選字

        Args:
            walked_path: 選字「之前」的解碼路徑
            cursor_index: 選字的位置
            candidate: 使用者選的字詞
            timestamp: 秒
            candidate_score: 該字詞在語言模型中的分數；未提供時從上下文節點查詢

        Returns:
            bool: 是否被記錄（分數不高於門檻或路徑為空時不記錄）
        """
        prefix = _context_prefix(walked_path, cursor_index)
        if not prefix:
            return False

        if candidate_score is None:
            candidate_score = prefix[-1].node.score_for_candidate(candidate)
        if candidate_score <= self._no_override_threshold:
            self._logger.debug(f"[Observe] 略過 {candidate!r}: score={candidate_score}")
            return False

        key = walked_nodes_to_key(walked_path, cursor_index)
        observation = self._lru.get(key)
        if observation is None:
            observation = Observation()
            self._lru[key] = observation
            if len(self._lru) > self._capacity:
                evicted, _ = self._lru.popitem(last=False)
                self._logger.debug(f"[Observe] 淘汰 {evicted}")
        else:
            self._lru.move_to_end(key)
        observation.update(candidate, timestamp)
        self._logger.debug(f"[Observe] {key} -> {candidate!r}")
        return True

    def suggest_with_score(
        self,
        walked_path: Sequence[NodeAnchor],
        cursor_index: int,
        timestamp: float,
    ) -> Optional[Tuple[str, float]]:
        key = walked_nodes_to_key(walked_path, cursor_index)
        observation = self._lru.get(key)
        if observation is None:
            return None

        best: Optional[Tuple[str, float]] = None
        for candidate, override in observation.overrides.items():
            score = _score(override.count, observation.count, override.timestamp, timestamp, self._decay_exponent)
            if score == 0.0:
                continue
            if best is None or score > best[1]:
                best = (candidate, score)
        return best

    def suggest(
        self,
        walked_path: Sequence[NodeAnchor],
        cursor_index: int,
        timestamp: float,
    ) -> Optional[str]:
        """回傳建議的字詞；沒有紀錄或已衰減殆盡時回傳 None"""
        result = self.suggest_with_score(walked_path, cursor_index, timestamp)
        return result[0] if result else None
