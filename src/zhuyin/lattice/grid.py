"""
組字格 (Grid / Composing Lattice)

組字格保存目前的讀音序列、游標，以及所有可能的節點。
節點以 (起點, 長度) 為索引存放在字典中；插入或刪除讀音時，
只移除跨越異動點的節點、平移其後的節點，再向語言模型補建異動點附近的節點。

使用方式:
    grid = Grid(language_model)
    grid.insert_reading_at_cursor("ㄋㄧˇ")
    grid.insert_reading_at_cursor("ㄏㄠˇ")
    path = Walker(grid).walk()
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from zhuyin.core.language_model import LanguageModel
from zhuyin.utils.logger import get_logger

from .node import Node, NodeAnchor

JOIN_SEPARATOR = "-"
MAXIMUM_SPAN_LENGTH = 6


class Grid:
    """
    組字格

    不變量:
    - 0 <= cursor <= length
    - 所有節點都在 [0, length) 之內
    - 節點長度介於 1 與 maximum_span_length 之間
    """

    def __init__(
        self,
        language_model: LanguageModel,
        join_separator: str = JOIN_SEPARATOR,
        maximum_span_length: int = MAXIMUM_SPAN_LENGTH,
    ):
        if maximum_span_length < 1:
            raise ValueError(f"maximum_span_length 必須 >= 1，收到 {maximum_span_length}")
        self._lm = language_model
        self._join_separator = join_separator
        self._maximum_span_length = maximum_span_length
        self._readings: List[str] = []
        self._cursor = 0
        self._nodes: Dict[Tuple[int, int], Node] = {}
        self._logger = get_logger("lattice.grid")

    # ========== 屬性 ==========

    @property
    def language_model(self) -> LanguageModel:
        return self._lm

    @property
    def join_separator(self) -> str:
        return self._join_separator

    @property
    def maximum_span_length(self) -> int:
        return self._maximum_span_length

    @property
    def readings(self) -> Tuple[str, ...]:
        return tuple(self._readings)

    @property
    def length(self) -> int:
        return len(self._readings)

    @property
    def width(self) -> int:
        return len(self._readings)

    def __len__(self) -> int:
        return len(self._readings)

    @property
    def cursor(self) -> int:
        return self._cursor

    @cursor.setter
    def cursor(self, index: int) -> None:
        if not 0 <= index <= len(self._readings):
            raise ValueError(f"游標超出範圍: {index}（長度 {len(self._readings)}）")
        self._cursor = index

    def node_count(self) -> int:
        return len(self._nodes)

    def node_at(self, location: int, spanning_length: int) -> Optional[Node]:
        return self._nodes.get((location, spanning_length))

    def joined_reading(self, location: int, spanning_length: int) -> str:
        return self._join_separator.join(self._readings[location:location + spanning_length])

    # ========== 異動 ==========

    def clear(self) -> None:
        self._readings.clear()
        self._nodes.clear()
        self._cursor = 0

    def insert_reading_at_cursor(self, reading: str) -> None:
        location = self._cursor
        self._readings.insert(location, reading)
        self._expand_at(location)
        self._build(location)
        self._cursor += 1

    def delete_reading_before_cursor(self) -> bool:
        if self._cursor == 0:
            return False
        self._cursor -= 1
        del self._readings[self._cursor]
        self._shrink_at(self._cursor)
        self._build(self._cursor)
        return True

    def delete_reading_after_cursor(self) -> bool:
        if self._cursor >= len(self._readings):
            return False
        del self._readings[self._cursor]
        self._shrink_at(self._cursor)
        self._build(self._cursor)
        return True

    def remove_head_readings(self, count: int) -> bool:
        """
        移除開頭的 count 個讀音（組字區過長時使用）

        游標會一併左移 count 格（最小為 0）。

        Returns:
            bool: count 大於目前長度時回傳 False 且不做任何事
        """
        if count < 0 or count > len(self._readings):
            return False
        for _ in range(count):
            if self._cursor:
                self._cursor -= 1
            del self._readings[0]
            self._shrink_at(0)
        self._build(0)
        return True

    def _expand_at(self, location: int) -> None:
        # 跨越插入點的節點失效；插入點之後的節點右移一格
        nodes: Dict[Tuple[int, int], Node] = {}
        for (start, length), node in self._nodes.items():
            if start >= location:
                nodes[(start + 1, length)] = node
            elif start + length <= location:
                nodes[(start, length)] = node
        self._nodes = nodes

    def _shrink_at(self, location: int) -> None:
        # 含有被刪讀音的節點失效；其後的節點左移一格
        nodes: Dict[Tuple[int, int], Node] = {}
        for (start, length), node in self._nodes.items():
            if start > location:
                nodes[(start - 1, length)] = node
            elif start + length <= location:
                nodes[(start, length)] = node
        self._nodes = nodes

    def _build(self, location: int) -> None:
        """補建 location 附近（前後各 maximum_span_length）缺少的節點"""
        span = self._maximum_span_length
        begin = max(0, location - span)
        end = min(len(self._readings), location + span)
        added = 0
        for p in range(begin, end):
            for q in range(1, span + 1):
                if p + q > end:
                    break
                key = self.joined_reading(p, q)
                existing = self._nodes.get((p, q))
                if existing is not None and existing.key == key:
                    continue
                unigrams = self._lm.unigrams_for_key(key)
                if unigrams:
                    self._nodes[(p, q)] = Node(key, unigrams)
                    added += 1
                elif existing is not None:
                    del self._nodes[(p, q)]
        if added:
            self._logger.debug(f"[Build] location={location} added={added} nodes={len(self._nodes)}")

    # ========== 查詢 ==========

    def nodes_starting_at(self, location: int) -> List[NodeAnchor]:
        """從 location 出發的節點，依長度由短到長"""
        anchors = []
        for length in range(1, self._maximum_span_length + 1):
            node = self._nodes.get((location, length))
            if node is not None:
                anchors.append(NodeAnchor(node, location, length))
        return anchors

    def nodes_crossing_or_ending_at(self, location: int) -> List[NodeAnchor]:
        """
        涵蓋或結束於 location 的節點

        依起點、再依長度排序。location 為 0 或超出長度時回傳空列表。
        """
        anchors: List[NodeAnchor] = []
        if not self._readings or location > len(self._readings):
            return anchors
        for start in range(max(0, location - self._maximum_span_length), location):
            for length in range(location - start, self._maximum_span_length + 1):
                node = self._nodes.get((start, length))
                if node is not None:
                    anchors.append(NodeAnchor(node, start, length))
        return anchors

    def fix_node_selected_candidate(self, location: int, value: str) -> Optional[NodeAnchor]:
        """
        固定 location 處的選字

        先重設所有涵蓋 location 的節點，再把候選中含有 value 的節點裡
        涵蓋最長者（與候選窗排列順序一致）固定為 value。

        Returns:
            Optional[NodeAnchor]: 被固定的節點；找不到 value 時為 None
        """
        anchors = self.nodes_crossing_or_ending_at(location)
        for anchor in anchors:
            anchor.node.reset_candidate()

        for anchor in sorted(anchors, key=lambda a: a.spanning_length, reverse=True):
            index = anchor.node.index_of_candidate(value)
            if index is not None:
                anchor.node.select_candidate_at_index(index)
                return anchor

        self._logger.debug(f"[Fix] location={location} 找不到候選 {value!r}")
        return None

    def override_node_score_for_selected_candidate(self, location: int, value: str, score: float) -> None:
        """以浮動分數選定 location 處所有含有 value 的節點（候選列表不變）"""
        for anchor in self.nodes_crossing_or_ending_at(location):
            node = anchor.node
            node.reset_candidate()
            index = node.index_of_candidate(value)
            if index is not None:
                node.select_floating_candidate_at_index(index, score)
