"""
測試語言模型 facade、載入者與外部轉換器

驗證：
1. 查詢流程順序（使用者詞、排除詞、替換、轉換、去重）
2. 空白鍵的特殊讀音
3. 重新載入時查詢只看到完整的舊表或新表
4. 使用者詞載入者
5. 各輸入情境的查詢視圖
"""

import logging
import threading

import pytest

from zhuyin.core.language_model import LanguageModel
from zhuyin.lm import (
    InputMethodLanguageModel,
    LanguageModelLoader,
    LookupOptions,
    to_simplified_chinese,
)


def _values(unigrams):
    return [u.value for u in unigrams]


class TestFacadePipeline:
    """測試查詢流程"""

    def setup_method(self):
        self.lm = InputMethodLanguageModel()
        self.lm.load_language_model([
            ("ㄕˋ", "是", -1.0),
            ("ㄕˋ", "事", -1.5),
            ("ㄕˋ", "市", -2.0),
        ])

    def test_is_language_model(self):
        assert isinstance(self.lm, LanguageModel)
        assert self.lm.bigrams_for_keys("ㄕˋ", "ㄕˋ") == []

    def test_primary_lookup(self):
        assert _values(self.lm.unigrams_for_key("ㄕˋ")) == ["是", "事", "市"]
        assert self.lm.unigrams_for_key("ㄅ") == []

    def test_user_phrases_come_first_with_zero_score(self):
        self.lm.load_user_phrases([("ㄕˋ", "士")])
        unigrams = self.lm.unigrams_for_key("ㄕˋ")
        assert _values(unigrams) == ["士", "是", "事", "市"]
        assert unigrams[0].score == 0.0

    def test_user_phrase_duplicate_of_primary(self):
        """使用者詞與主詞庫重複時保留使用者詞"""
        self.lm.load_user_phrases([("ㄕˋ", "市")])
        unigrams = self.lm.unigrams_for_key("ㄕˋ")
        assert _values(unigrams) == ["市", "是", "事"]
        assert unigrams[0].score == 0.0

    def test_excluded_phrases_removed(self):
        self.lm.load_user_phrases([], [("ㄕˋ", "事")])
        assert _values(self.lm.unigrams_for_key("ㄕˋ")) == ["是", "市"]

    def test_excluded_applies_before_replacement(self):
        self.lm.load_user_phrases([], [("ㄕˋ", "事")])
        self.lm.load_phrase_replacement_map([("是", "事")])
        self.lm.phrase_replacement_enabled = True
        # 「是」被替換成「事」；主詞庫的「事」已經先被排除
        assert _values(self.lm.unigrams_for_key("ㄕˋ")) == ["事", "市"]

    def test_replacement_disabled_by_default(self):
        self.lm.load_phrase_replacement_map([("是", "事")])
        assert _values(self.lm.unigrams_for_key("ㄕˋ")) == ["是", "事", "市"]

    def test_replacement_dedupes_first_wins(self):
        self.lm.load_phrase_replacement_map([("是", "事")])
        self.lm.phrase_replacement_enabled = True
        unigrams = self.lm.unigrams_for_key("ㄕˋ")
        assert _values(unigrams) == ["事", "市"]
        assert unigrams[0].score == -1.0

    def test_external_converter_after_replacement(self):
        seen = []

        def converter(value):
            seen.append(value)
            return value + "!"

        self.lm.load_phrase_replacement_map([("是", "事")])
        self.lm.phrase_replacement_enabled = True
        self.lm.external_converter = converter
        self.lm.external_converter_enabled = True
        assert _values(self.lm.unigrams_for_key("ㄕˋ")) == ["事!", "市!"]
        assert seen[0] == "事"

    def test_converter_collapsing_values(self):
        self.lm.external_converter = lambda value: "X"
        self.lm.external_converter_enabled = True
        assert _values(self.lm.unigrams_for_key("ㄕˋ")) == ["X"]

    def test_has_unigrams_uses_pipeline(self):
        self.lm.load_user_phrases([], [("ㄕˋ", "是"), ("ㄕˋ", "事"), ("ㄕˋ", "市")])
        assert not self.lm.has_unigrams_for_key("ㄕˋ")

    def test_space_key(self):
        unigrams = self.lm.unigrams_for_key(" ")
        assert _values(unigrams) == [" "]
        assert self.lm.has_unigrams_for_key(" ")

    def test_is_data_model_loaded(self):
        assert self.lm.is_data_model_loaded()
        assert not InputMethodLanguageModel().is_data_model_loaded()


class TestFacadeReload:
    """測試重新載入"""

    def test_reload_replaces_table(self):
        lm = InputMethodLanguageModel()
        lm.load_language_model([("ㄕˋ", "是", -1.0)])
        lm.load_language_model([("ㄕˋ", "事", -1.0)])
        assert _values(lm.unigrams_for_key("ㄕˋ")) == ["事"]

    def test_lookup_in_progress_sees_old_tables(self):
        """查詢途中重新載入，該次查詢仍完整使用舊表"""
        lm = InputMethodLanguageModel()
        lm.load_language_model([("ㄕˋ", "是", -1.0), ("ㄕˋ", "事", -1.5)])

        def reloading_converter(value):
            lm.load_language_model([("ㄕˋ", "市", -1.0)])
            return value

        lm.external_converter = reloading_converter
        lm.external_converter_enabled = True
        assert _values(lm.unigrams_for_key("ㄕˋ")) == ["是", "事"]

        lm.external_converter_enabled = False
        assert _values(lm.unigrams_for_key("ㄕˋ")) == ["市"]

    def test_concurrent_reload(self):
        lm = InputMethodLanguageModel()
        tables = [
            [("ㄕˋ", f"是{i}", -1.0), ("ㄕˋ", f"事{i}", -1.5)]
            for i in range(2)
        ]
        lm.load_language_model(tables[0])
        errors = []
        stop = threading.Event()

        def reader():
            while not stop.is_set():
                values = _values(lm.unigrams_for_key("ㄕˋ"))
                if len(values) != 2 or values[0][-1] != values[1][-1]:
                    errors.append(values)

        thread = threading.Thread(target=reader)
        thread.start()
        for i in range(200):
            lm.load_language_model(tables[i % 2])
        stop.set()
        thread.join()
        assert errors == []


class TestLanguageModelLoader:
    """測試使用者詞載入者"""

    def setup_method(self):
        self.lm = InputMethodLanguageModel()
        self.lm.load_language_model([("ㄕˋ", "是", -1.0)])
        self.loader = LanguageModelLoader(self.lm)

    def test_add_user_phrase_reloads(self):
        self.loader.add_user_phrase("ㄕˋ-ㄓㄨㄥ", "是中")
        assert _values(self.lm.unigrams_for_key("ㄕˋ-ㄓㄨㄥ")) == ["是中"]

    def test_duplicate_ignored(self):
        self.loader.add_user_phrase("ㄕˋ", "士")
        self.loader.add_user_phrase("ㄕˋ", "士")
        assert self.loader.user_phrases == [("ㄕˋ", "士")]

    def test_exclude_then_add_back(self):
        self.loader.exclude_phrase("ㄕˋ", "是")
        assert self.lm.unigrams_for_key("ㄕˋ") == []
        self.loader.add_user_phrase("ㄕˋ", "是")
        assert _values(self.lm.unigrams_for_key("ㄕˋ")) == ["是"]
        assert self.loader.excluded_phrases == []

    def test_initial_rows_loaded(self):
        loader = LanguageModelLoader(self.lm, user_rows=[("ㄕˋ", "士")])
        assert loader.language_model is self.lm
        assert _values(self.lm.unigrams_for_key("ㄕˋ")) == ["士", "是"]


class TestConverters:
    """測試繁簡轉換（需要 hanziconv）"""

    def test_to_simplified(self):
        assert to_simplified_chinese("中國") == "中国"

    def test_as_external_converter(self):
        lm = InputMethodLanguageModel()
        lm.load_language_model([("ㄍㄨㄛˊ", "國", -1.0)])
        lm.external_converter = to_simplified_chinese
        lm.external_converter_enabled = True
        assert _values(lm.unigrams_for_key("ㄍㄨㄛˊ")) == ["国"]

    @pytest.mark.parametrize("text", ["", "abc"])
    def test_passthrough(self, text):
        assert to_simplified_chinese(text) == text


class TestSessionView:
    """測試輸入情境的查詢視圖"""

    def setup_method(self):
        self.lm = InputMethodLanguageModel()
        self.lm.load_language_model([("ㄕˋ", "是", -1.0), ("ㄕˋ", "事", -1.5)])
        self.lm.load_phrase_replacement_map([("是", "市")])

    def test_views_keep_their_own_options(self):
        replacing = self.lm.session_view(LookupOptions(phrase_replacement_enabled=True))
        plain = self.lm.session_view(LookupOptions())
        assert _values(replacing.unigrams_for_key("ㄕˋ")) == ["市", "事"]
        assert _values(plain.unigrams_for_key("ㄕˋ")) == ["是", "事"]
        assert not self.lm.phrase_replacement_enabled

    def test_view_sees_reloaded_tables(self):
        view = self.lm.session_view(LookupOptions())
        self.lm.load_user_phrases([("ㄕˋ", "士")])
        assert _values(view.unigrams_for_key("ㄕˋ")) == ["士", "是", "事"]
        assert view.has_unigrams_for_key("ㄕˋ")
        assert view.facade is self.lm

    def test_facade_flags_do_not_leak_into_views(self):
        view = self.lm.session_view(LookupOptions())
        self.lm.phrase_replacement_enabled = True
        assert _values(self.lm.unigrams_for_key("ㄕˋ")) == ["市", "事"]
        assert _values(view.unigrams_for_key("ㄕˋ")) == ["是", "事"]

    def test_load_is_timed(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="zhuyin"):
            self.lm.load_language_model([("ㄕˋ", "是", -1.0)])
        assert "[Timing] InputMethodLanguageModel.load_language_model" in caplog.text
