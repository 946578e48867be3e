"""
組字格模組

- Grid: 讀音序列與候選節點
- Node / NodeAnchor: 節點與其位置
- Walker: 最佳路徑解碼
"""

from .grid import JOIN_SEPARATOR, MAXIMUM_SPAN_LENGTH, Grid
from .node import SELECTED_CANDIDATE_SCORE, Node, NodeAnchor
from .walker import WalkedPath, Walker, composed_text, walked_values

__all__ = [
    "Grid",
    "Node",
    "NodeAnchor",
    "Walker",
    "WalkedPath",
    "walked_values",
    "composed_text",
    "JOIN_SEPARATOR",
    "MAXIMUM_SPAN_LENGTH",
    "SELECTED_CANDIDATE_SCORE",
]
