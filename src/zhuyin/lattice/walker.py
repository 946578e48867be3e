"""
最佳路徑解碼 (Walker)

把組字格視為有向無環圖：讀音位置 0..W 為狀態，節點 [i, j) 為 i→j 的邊，
邊的權重是節點目前的分數。由尾端往前做動態規劃，記錄每個位置的最佳累積分數
與最佳出邊，再從位置 0 往後追蹤，得到覆蓋整個組字格、互不重疊的節點序列。

同分處理規則：
    每個位置依「涵蓋長度由長到短」檢查出邊，只有累積分數「嚴格大於」目前最佳
    才會取代。因此同分時，最早的位置會選擇最長的節點。

複雜度為 O(W × 最大節點長度)，不超過 O(W²)；組字區長度上限即為了控制此成本。
"""

from __future__ import annotations

from typing import List, Optional

from zhuyin.utils.logger import get_logger

from .grid import Grid
from .node import NodeAnchor

WalkedPath = List[NodeAnchor]

logger = get_logger("lattice.walker")


class Walker:
    def __init__(self, grid: Grid):
        self._grid = grid

    def walk(self) -> WalkedPath:
        """
        計算最佳路徑

        Returns:
            WalkedPath: 由前往後、首尾相接且覆蓋 [0, width) 的節點；
                        組字格為空或無法完整覆蓋時回傳空列表
        """
        width = self._grid.width
        if width == 0:
            return []

        best_score: List[Optional[float]] = [None] * (width + 1)
        best_edge: List[Optional[NodeAnchor]] = [None] * (width + 1)
        best_score[width] = 0.0

        for position in range(width - 1, -1, -1):
            for anchor in reversed(self._grid.nodes_starting_at(position)):
                tail = best_score[anchor.end]
                if tail is None:
                    continue
                total = anchor.node.score + tail
                incumbent = best_score[position]
                if incumbent is None or total > incumbent:
                    best_score[position] = total
                    best_edge[position] = anchor

        if best_score[0] is None:
            logger.warning(f"組字格無法完整覆蓋: readings={self._grid.readings}")
            return []

        path: WalkedPath = []
        position = 0
        while position < width:
            anchor = best_edge[position]
            path.append(anchor)
            position = anchor.end
        return path


def walked_values(path: WalkedPath) -> List[str]:
    """路徑上每個節點目前的字詞"""
    return [anchor.node.current_value for anchor in path]


def composed_text(path: WalkedPath) -> str:
    return "".join(walked_values(path))
