"""
測試使用者選字習慣模型

驗證：
1. 上下文簽章（含句末標點切斷）
2. 觀察後建議、時間衰減與門檻
3. 分數下限過濾
4. LRU 淘汰
"""

import pytest

from zhuyin.core.language_model import Unigram
from zhuyin.lattice import Node, NodeAnchor
from zhuyin.lm.user_override_model import UserOverrideModel, walked_nodes_to_key

HALF_LIFE = 5400.0


def _anchor(key, values, location, spanning_length=1, score=-1.0):
    node = Node(key, [Unigram(key, value, score - i) for i, value in enumerate(values)])
    return NodeAnchor(node, location, spanning_length)


def _path(*specs):
    anchors = []
    location = 0
    for key, values in specs:
        anchors.append(_anchor(key, values, location))
        location += 1
    return anchors


class TestContextKey:
    """測試上下文簽章"""

    def test_single_node(self):
        path = _path(("ㄕˋ", ["是"]))
        assert walked_nodes_to_key(path, 1) == "((),(),ㄕˋ)"

    def test_two_previous_nodes(self):
        path = _path(("ㄋㄧˇ", ["你"]), ("ㄏㄠˇ", ["好"]), ("ㄕˋ", ["是"]))
        assert walked_nodes_to_key(path, 3) == "((ㄋㄧˇ,你),(ㄏㄠˇ,好),ㄕˋ)"

    def test_prefix_stops_at_cursor(self):
        path = _path(("ㄋㄧˇ", ["你"]), ("ㄏㄠˇ", ["好"]), ("ㄕˋ", ["是"]))
        assert walked_nodes_to_key(path, 2) == "((),(ㄋㄧˇ,你),ㄏㄠˇ)"

    def test_ending_punctuation_cuts_context(self):
        path = _path(("ㄋㄧˇ", ["你"]), ("_punctuation_list", ["。"]), ("ㄕˋ", ["是"]))
        assert walked_nodes_to_key(path, 3) == "((),(),ㄕˋ)"

    def test_empty_path(self):
        assert walked_nodes_to_key([], 0) == ""


class TestObserveAndSuggest:
    """測試觀察與建議"""

    def setup_method(self):
        self.model = UserOverrideModel(capacity=500, half_life=HALF_LIFE)
        self.path = _path(("ㄕˋ", ["是", "事", "市"]))

    def test_suggest_after_observe(self):
        assert self.model.observe(self.path, 1, "市", 1000.0)
        assert self.model.suggest(self.path, 1, 1000.0) == "市"
        assert self.model.suggest_with_score(self.path, 1, 1000.0) == ("市", pytest.approx(1.0))

    def test_no_observation(self):
        assert self.model.suggest(self.path, 1, 0.0) is None
        assert self.model.suggest_with_score(self.path, 1, 0.0) is None

    def test_half_life_halves_score(self):
        self.model.observe(self.path, 1, "市", 0.0)
        value, score = self.model.suggest_with_score(self.path, 1, HALF_LIFE)
        assert value == "市"
        assert score == pytest.approx(0.5)

    def test_decayed_beyond_threshold(self):
        self.model.observe(self.path, 1, "市", 0.0)
        assert self.model.suggest(self.path, 1, HALF_LIFE * 19) == "市"
        assert self.model.suggest(self.path, 1, HALF_LIFE * 25) is None

    def test_more_frequent_candidate_wins(self):
        self.model.observe(self.path, 1, "市", 0.0)
        self.model.observe(self.path, 1, "事", 0.0)
        self.model.observe(self.path, 1, "事", 0.0)
        value, score = self.model.suggest_with_score(self.path, 1, 0.0)
        assert value == "事"
        assert score == pytest.approx(2 / 3)

    def test_score_floor_filters(self):
        assert not self.model.observe(self.path, 1, "市", 0.0, candidate_score=-9.0)
        assert len(self.model) == 0

    def test_score_looked_up_from_node(self):
        path = [_anchor("ㄕˋ", ["是", "市"], 0, score=-8.5)]
        assert not self.model.observe(path, 1, "市", 0.0)
        path = [_anchor("ㄕˋ", ["是", "市"], 0, score=-1.0)]
        assert self.model.observe(path, 1, "市", 0.0)

    def test_empty_path_not_recorded(self):
        assert not self.model.observe([], 0, "市", 0.0)

    def test_clear(self):
        self.model.observe(self.path, 1, "市", 0.0)
        self.model.clear()
        assert len(self.model) == 0
        assert self.model.suggest(self.path, 1, 0.0) is None

    @pytest.mark.parametrize("kwargs", [{"capacity": 0}, {"half_life": 0.0}])
    def test_invalid_arguments(self, kwargs):
        with pytest.raises(ValueError):
            UserOverrideModel(**kwargs)


class TestLruEviction:
    """測試容量上限"""

    def setup_method(self):
        self.model = UserOverrideModel(capacity=2)
        self.paths = [_path((f"ㄅ{i}", ["八"])) for i in range(3)]

    def test_oldest_evicted(self):
        for path in self.paths:
            self.model.observe(path, 1, "八", 0.0)
        assert len(self.model) == 2
        assert self.model.suggest(self.paths[0], 1, 0.0) is None
        assert self.model.suggest(self.paths[2], 1, 0.0) == "八"

    def test_observe_refreshes_recency(self):
        self.model.observe(self.paths[0], 1, "八", 0.0)
        self.model.observe(self.paths[1], 1, "八", 0.0)
        self.model.observe(self.paths[0], 1, "八", 0.0)
        self.model.observe(self.paths[2], 1, "八", 0.0)
        assert self.model.suggest(self.paths[0], 1, 0.0) == "八"
        assert self.model.suggest(self.paths[1], 1, 0.0) is None

    def test_suggest_does_not_refresh(self):
        self.model.observe(self.paths[0], 1, "八", 0.0)
        self.model.observe(self.paths[1], 1, "八", 0.0)
        self.model.suggest(self.paths[0], 1, 0.0)
        self.model.observe(self.paths[2], 1, "八", 0.0)
        assert self.model.suggest(self.paths[0], 1, 0.0) is None
