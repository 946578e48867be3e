"""
注音輸入引擎 (ZhuyinEngine)

負責持有共享的語言模型、詞庫載入者與選字習慣模型，
並提供工廠方法建立輕量的 KeyHandler（每個輸入情境一個）。

生命週期:
- Engine 應在輸入法啟動時建立一次，並載入詞庫
- 之後每個輸入情境透過 create_key_handler() 取得自己的 KeyHandler
- 所有 KeyHandler 共用同一個選字習慣模型
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Iterable, Optional

from .config import KeyHandlerConfig
from .key_handler import KeyHandler
from .lm.facade import InputMethodLanguageModel
from .lm.loader import LanguageModelLoader
from .lm.tables import PhraseRow, ReplacementRow, UnigramRow
from .lm.user_override_model import UserOverrideModel
from .utils.logger import TimingContext, get_logger, setup_logger


class ZhuyinEngine:
    """
    使用範例:
        >>> engine = ZhuyinEngine()
        >>> engine.load_language_model([("ㄕˋ", "是", -1.0), ("ㄕˋ", "事", -1.5)])
        >>> handler = engine.create_key_handler()
    """

    _engine_name = "zhuyin"

    def __init__(
        self,
        language_model_rows: Optional[Iterable[UnigramRow]] = None,
        *,
        user_phrase_rows: Iterable[PhraseRow] = (),
        excluded_phrase_rows: Iterable[PhraseRow] = (),
        phrase_replacement_rows: Iterable[ReplacementRow] = (),
        config: Optional[KeyHandlerConfig] = None,
        clock: Callable[[], float] = time.time,
        verbose: bool = False,
        on_timing: Optional[Callable[[str, float], None]] = None,
    ):
        self._config = config if config is not None else KeyHandlerConfig()
        self._init_logger(verbose=verbose or self._config.verbose, on_timing=on_timing or self._config.on_timing)

        with self._log_timing("ZhuyinEngine.__init__"):
            self._clock = clock
            self._language_model = InputMethodLanguageModel()
            if language_model_rows is not None:
                self._language_model.load_language_model(language_model_rows)
            self._language_model.load_phrase_replacement_map(phrase_replacement_rows)
            self._loader = LanguageModelLoader(
                self._language_model,
                user_rows=user_phrase_rows,
                excluded_rows=excluded_phrase_rows,
            )
            self._user_override_model = UserOverrideModel(
                capacity=self._config.user_override_capacity,
                half_life=self._config.observed_override_half_life,
                no_override_threshold=self._config.no_override_threshold,
            )
            self._initialized = True
            self._logger.info("ZhuyinEngine initialized")

    def _init_logger(
        self,
        verbose: bool = False,
        on_timing: Optional[Callable[[str, float], None]] = None,
    ) -> None:
        self._verbose = verbose
        self._timing_callback = on_timing

        if verbose:
            setup_logger(level=logging.DEBUG)

        self._logger = get_logger(f"engine.{self._engine_name}")

    def _log_timing(self, operation: str) -> TimingContext:
        return TimingContext(
            operation=operation,
            logger=self._logger,
            level=logging.DEBUG,
            callback=self._timing_callback,
        )

    # ========== 屬性 ==========

    @property
    def language_model(self) -> InputMethodLanguageModel:
        return self._language_model

    @property
    def loader(self) -> LanguageModelLoader:
        return self._loader

    @property
    def user_override_model(self) -> UserOverrideModel:
        return self._user_override_model

    @property
    def config(self) -> KeyHandlerConfig:
        return self._config

    def is_initialized(self) -> bool:
        return self._initialized

    def get_stats(self) -> Dict[str, Any]:
        return {
            "data_model_loaded": self._language_model.is_data_model_loaded(),
            "user_phrases": len(self._loader.user_phrases),
            "excluded_phrases": len(self._loader.excluded_phrases),
            "override_contexts": len(self._user_override_model),
        }

    # ========== 詞庫 ==========

    def load_language_model(self, rows: Iterable[UnigramRow]) -> None:
        with self._log_timing("ZhuyinEngine.load_language_model"):
            self._language_model.load_language_model(rows)

    def load_phrase_replacement_map(self, rows: Iterable[ReplacementRow]) -> None:
        self._language_model.load_phrase_replacement_map(rows)

    def add_user_phrase(self, reading: str, phrase: str) -> None:
        self._loader.add_user_phrase(reading, phrase)

    # ========== 工廠 ==========

    def create_key_handler(self, config: Optional[KeyHandlerConfig] = None) -> KeyHandler:
        """
        建立 KeyHandler

        Args:
            config: 此輸入情境的配置；未提供時使用 Engine 的配置

        Returns:
            KeyHandler: 共用語言模型與選字習慣模型的新 KeyHandler
        """
        if config is None:
            config = self._config

        with self._log_timing("ZhuyinEngine.create_key_handler"):
            handler = KeyHandler(
                self._language_model,
                loader=self._loader,
                config=config,
                user_override_model=self._user_override_model,
                clock=self._clock,
                on_timing=config.on_timing or self._timing_callback,
            )
        self._logger.debug(f"Creating key handler: layout={config.keyboard_layout}")
        return handler
