"""
語言模型 Facade (InputMethodLanguageModel)

組合主詞庫、使用者詞、排除詞與替換表，對組字格提供單一查詢介面。

查詢流程 (unigrams_for_key):
    1. 收集此讀音的排除詞
    2. 使用者詞（分數 0）在前、主詞庫在後
    3. 去掉排除詞
    4. 套用替換表（若啟用）
    5. 套用外部轉換器，例如繁轉簡（若啟用）
    6. 依轉換後的字詞去重，保留第一次出現者

每個輸入情境以 session_view() 取得自己的查詢選項（替換表、外部轉換器開關），
資料表仍與 facade 共用，一個情境改變選項不會影響其他情境。

載入:
    每次載入都建立新的資料表，再於鎖內以一次指派換掉整組快照；
    查詢只讀取當下的快照，因此只會看到完整的舊資料或完整的新資料。
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from typing import Callable, Iterable, List, Optional, Set

from zhuyin.core.language_model import LanguageModel, Unigram
from zhuyin.utils.logger import get_logger, log_timing

from .tables import (
    PhraseReplacementMap,
    PhraseRow,
    ReplacementRow,
    UnigramRow,
    UnigramTable,
    UserPhraseTable,
)

ExternalConverter = Callable[[str], str]

SPACE_KEY = " "


@dataclass(frozen=True)
class LookupOptions:
    """查詢時的轉換選項"""

    phrase_replacement_enabled: bool = False
    external_converter_enabled: bool = False
    external_converter: Optional[ExternalConverter] = None


@dataclass(frozen=True)
class _Tables:
    language_model: UnigramTable
    user_phrases: UserPhraseTable
    excluded_phrases: UserPhraseTable
    phrase_replacement: PhraseReplacementMap
    language_model_loaded: bool = False


class InputMethodLanguageModel(LanguageModel):
    """
    輸入法語言模型

    使用範例:
        >>> lm = InputMethodLanguageModel()
        >>> lm.load_language_model([("ㄕˋ", "是", -1.0)])
        >>> [u.value for u in lm.unigrams_for_key("ㄕˋ")]
        ['是']
    """

    def __init__(self):
        self._tables = _Tables(
            language_model=UnigramTable(),
            user_phrases=UserPhraseTable(),
            excluded_phrases=UserPhraseTable(),
            phrase_replacement=PhraseReplacementMap(),
        )
        self._write_lock = threading.Lock()
        self._options = LookupOptions()
        self._logger = get_logger("lm.facade")

    # ========== 載入 ==========

    @log_timing("InputMethodLanguageModel.load_language_model")
    def load_language_model(self, rows: Iterable[UnigramRow]) -> None:
        """載入主詞庫（整個取代）"""
        table = UnigramTable(rows)
        with self._write_lock:
            self._tables = replace(self._tables, language_model=table, language_model_loaded=True)
        self._logger.info(f"主詞庫已載入: {len(table)} 筆")

    @log_timing("InputMethodLanguageModel.load_user_phrases")
    def load_user_phrases(
        self,
        user_rows: Iterable[PhraseRow],
        excluded_rows: Iterable[PhraseRow] = (),
    ) -> None:
        """載入使用者詞與排除詞（兩者一起取代）"""
        user = UserPhraseTable(user_rows)
        excluded = UserPhraseTable(excluded_rows)
        with self._write_lock:
            self._tables = replace(self._tables, user_phrases=user, excluded_phrases=excluded)
        self._logger.debug(f"使用者詞已載入: user={len(user)} excluded={len(excluded)}")

    def load_phrase_replacement_map(self, rows: Iterable[ReplacementRow]) -> None:
        mapping = PhraseReplacementMap(rows)
        with self._write_lock:
            self._tables = replace(self._tables, phrase_replacement=mapping)
        self._logger.debug(f"替換表已載入: {len(mapping)} 筆")

    def is_data_model_loaded(self) -> bool:
        return self._tables.language_model_loaded

    # ========== 設定 ==========

    @property
    def options(self) -> LookupOptions:
        return self._options

    @property
    def phrase_replacement_enabled(self) -> bool:
        return self._options.phrase_replacement_enabled

    @phrase_replacement_enabled.setter
    def phrase_replacement_enabled(self, enabled: bool) -> None:
        self._options = replace(self._options, phrase_replacement_enabled=bool(enabled))

    @property
    def external_converter_enabled(self) -> bool:
        return self._options.external_converter_enabled

    @external_converter_enabled.setter
    def external_converter_enabled(self, enabled: bool) -> None:
        self._options = replace(self._options, external_converter_enabled=bool(enabled))

    @property
    def external_converter(self) -> Optional[ExternalConverter]:
        return self._options.external_converter

    @external_converter.setter
    def external_converter(self, converter: Optional[ExternalConverter]) -> None:
        self._options = replace(self._options, external_converter=converter)

    def session_view(self, options: LookupOptions) -> "LanguageModelSession":
        """
        建立輸入情境專用的查詢視圖

        Args:
            options: 此情境的轉換選項

        Returns:
            LanguageModelSession: 與此 facade 共用資料表的視圖
        """
        return LanguageModelSession(self, options)

    # ========== 查詢 ==========

    def unigrams_for_key(self, key: str) -> List[Unigram]:
        return self.lookup(key, self._options)

    def has_unigrams_for_key(self, key: str) -> bool:
        return bool(self.unigrams_for_key(key))

    def lookup(self, key: str, options: LookupOptions) -> List[Unigram]:
        """以指定的轉換選項查詢讀音"""
        if key == SPACE_KEY:
            return [Unigram(SPACE_KEY, SPACE_KEY, 0.0)]

        tables = self._tables
        excluded = set(tables.excluded_phrases.values_for_key(key))

        results: List[Unigram] = []
        seen: Set[str] = set()
        for source in (tables.user_phrases, tables.language_model):
            for unigram in source.unigrams_for_key(key):
                if unigram.value in excluded:
                    continue
                value = _transform(unigram.value, tables, options)
                if value in seen:
                    continue
                seen.add(value)
                results.append(unigram if value == unigram.value else replace(unigram, value=value))
        return results


class LanguageModelSession(LanguageModel):
    """
    單一輸入情境的語言模型視圖

    查詢走 facade 當下的資料表，轉換選項則屬於此視圖自己。
    """

    def __init__(self, facade: InputMethodLanguageModel, options: LookupOptions):
        self._facade = facade
        self._options = options

    @property
    def facade(self) -> InputMethodLanguageModel:
        return self._facade

    @property
    def options(self) -> LookupOptions:
        return self._options

    @options.setter
    def options(self, options: LookupOptions) -> None:
        self._options = options

    def unigrams_for_key(self, key: str) -> List[Unigram]:
        return self._facade.lookup(key, self._options)

    def has_unigrams_for_key(self, key: str) -> bool:
        return bool(self.unigrams_for_key(key))


def _transform(value: str, tables: _Tables, options: LookupOptions) -> str:
    if options.phrase_replacement_enabled:
        value = tables.phrase_replacement.value_for_key(value)
    if options.external_converter_enabled and options.external_converter is not None:
        value = options.external_converter(value)
    return value
