"""
測試 Engine、配置與日誌工具

驗證：
1. ZhuyinEngine 建立 KeyHandler 並共用語言模型與選字習慣
2. KeyHandlerConfig 參數檢查
3. 計時回呼與 logger 命名空間
"""

import logging

import pytest

import zhuyin
from zhuyin import Empty, Key, KeyHandlerConfig, KeyName, ZhuyinEngine
from zhuyin.utils.logger import TimingContext, get_logger, log_timing


class TestZhuyinEngine:
    """測試 Engine"""

    def setup_method(self):
        self.clock_now = 1_000_000.0
        self.engine = ZhuyinEngine(
            [("ㄕˋ", "是", -1.0), ("ㄕˋ", "事", -1.5)],
            clock=lambda: self.clock_now,
        )

    def _type(self, handler, keys):
        state = Empty()
        for ch in keys:
            state = handler.handle(Key.from_char(ch), state).state
        return state

    def test_initialized(self):
        assert self.engine.is_initialized()
        assert self.engine.language_model.is_data_model_loaded()

    def test_create_key_handler(self):
        handler = self.engine.create_key_handler()
        state = self._type(handler, "g4")
        assert state.composing_buffer == "是"

    def test_handlers_share_override_model(self):
        first = self.engine.create_key_handler()
        second = self.engine.create_key_handler()
        assert first.user_override_model is second.user_override_model
        assert first.user_override_model is self.engine.user_override_model

        self._type(first, "g4")
        first.candidate_selected("事")
        assert len(self.engine.user_override_model) == 1
        state = self._type(second, "g4")
        assert state.composing_buffer == "事"

    def test_handlers_have_own_grid(self):
        first = self.engine.create_key_handler()
        second = self.engine.create_key_handler()
        self._type(first, "g4")
        assert first.grid.length == 1
        assert second.grid.length == 0

    def test_add_user_phrase(self):
        self.engine.add_user_phrase("ㄕˋ", "士")
        values = [u.value for u in self.engine.language_model.unigrams_for_key("ㄕˋ")]
        assert values[0] == "士"
        assert self.engine.get_stats()["user_phrases"] == 1

    def test_user_and_excluded_rows(self):
        engine = ZhuyinEngine(
            [("ㄕˋ", "是", -1.0), ("ㄕˋ", "事", -1.5)],
            user_phrase_rows=[("ㄕˋ", "士")],
            excluded_phrase_rows=[("ㄕˋ", "是")],
        )
        values = [u.value for u in engine.language_model.unigrams_for_key("ㄕˋ")]
        assert values == ["士", "事"]

    def test_phrase_replacement(self):
        engine = ZhuyinEngine(
            [("ㄕˋ", "是", -1.0)],
            phrase_replacement_rows=[("是", "事")],
            config=KeyHandlerConfig(phrase_replacement_enabled=True),
        )
        handler = engine.create_key_handler()
        assert self._type(handler, "g4").composing_buffer == "事"

    def test_session_configs_are_independent(self):
        """不同配置的 KeyHandler 各自套用替換表"""
        engine = ZhuyinEngine([("ㄕˋ", "是", -1.0)], phrase_replacement_rows=[("是", "事")])
        replacing = engine.create_key_handler(KeyHandlerConfig(phrase_replacement_enabled=True))
        assert self._type(replacing, "g4").composing_buffer == "事"

        plain = engine.create_key_handler()
        assert self._type(plain, "g4").composing_buffer == "是"
        replacing.reset()
        assert self._type(replacing, "g4").composing_buffer == "事"
        assert not engine.language_model.phrase_replacement_enabled

    def test_timing_callback(self):
        timings = []
        engine = ZhuyinEngine(
            [("ㄕˋ", "是", -1.0)],
            on_timing=lambda op, elapsed: timings.append(op),
        )
        handler = engine.create_key_handler()
        self._type(handler, "g4")
        assert "ZhuyinEngine.__init__" in timings
        assert "ZhuyinEngine.create_key_handler" in timings
        assert "KeyHandler.walk" in timings

    def test_space_key_passthrough_when_empty(self):
        handler = self.engine.create_key_handler()
        assert not handler.handle(Key.named(KeyName.SPACE), Empty()).absorbed


class TestKeyHandlerConfig:
    """測試配置"""

    def test_defaults(self):
        config = KeyHandlerConfig()
        assert config.keyboard_layout == "standard"
        assert config.composing_buffer_size == 10
        assert config.user_override_capacity == 500
        assert config.observed_override_half_life == 5400.0
        assert config.no_override_threshold == -8.0
        assert not config.select_phrase_after_cursor

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"keyboard_layout": "dvorak"},
            {"composing_buffer_size": 0},
            {"user_override_capacity": 0},
            {"observed_override_half_life": 0.0},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            KeyHandlerConfig(**kwargs)


class TestLogging:
    """測試日誌工具"""

    def test_logger_namespace(self):
        assert get_logger("key_handler").name == "zhuyin.key_handler"
        assert get_logger("zhuyin.lm").name == "zhuyin.lm"
        assert get_logger().name == "zhuyin"

    def test_timing_context_callback(self):
        calls = []
        with TimingContext("op", callback=lambda op, elapsed: calls.append((op, elapsed))) as timer:
            pass
        assert calls == [("op", timer.elapsed)]
        assert timer.elapsed >= 0

    def test_timing_context_logs(self, caplog):
        logger = get_logger("timing")
        with caplog.at_level(logging.DEBUG, logger="zhuyin"):
            with TimingContext("walk", logger):
                pass
        assert "[Timing] walk" in caplog.text

    def test_log_timing_decorator(self):
        @log_timing("add")
        def add(a, b):
            return a + b

        assert add(1, 2) == 3

    def test_public_api(self):
        for name in zhuyin.__all__:
            assert hasattr(zhuyin, name)


class TestOptionalDependencies:
    """測試選用相依套件檢查"""

    def test_available_when_installed(self):
        assert zhuyin.is_pinyin_available()
        assert zhuyin.is_converter_available()
        zhuyin.check_pinyin_dependencies()
        zhuyin.check_converter_dependencies()
