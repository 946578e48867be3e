"""
記憶體中的詞庫載入者

保存使用者詞與排除詞的資料列，使用者在標記模式按 Enter 加入自訂詞時，
更新資料列並重新載入 facade 的使用者詞。檔案讀寫由宿主負責。
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

from zhuyin.utils.logger import get_logger

from .facade import InputMethodLanguageModel
from .tables import PhraseRow


class LanguageModelLoader:
    def __init__(
        self,
        language_model: InputMethodLanguageModel,
        user_rows: Iterable[PhraseRow] = (),
        excluded_rows: Iterable[PhraseRow] = (),
    ):
        self._lm = language_model
        self._user_rows: List[Tuple[str, str]] = list(user_rows)
        self._excluded_rows: List[Tuple[str, str]] = list(excluded_rows)
        self._logger = get_logger("lm.loader")
        self.reload_user_phrases()

    @property
    def language_model(self) -> InputMethodLanguageModel:
        return self._lm

    @property
    def user_phrases(self) -> List[Tuple[str, str]]:
        return list(self._user_rows)

    @property
    def excluded_phrases(self) -> List[Tuple[str, str]]:
        return list(self._excluded_rows)

    def reload_user_phrases(self) -> None:
        self._lm.load_user_phrases(self._user_rows, self._excluded_rows)

    def add_user_phrase(self, reading: str, phrase: str) -> None:
        """
        加入使用者詞並重新載入

        已存在的 (讀音, 字詞) 不會重複加入；若此詞在排除清單中則一併移除。
        """
        row = (reading, phrase)
        if row in self._excluded_rows:
            self._excluded_rows.remove(row)
        elif row in self._user_rows:
            self._logger.debug(f"使用者詞已存在: {reading} {phrase}")
            return
        if row not in self._user_rows:
            self._user_rows.append(row)
        self._logger.info(f"加入使用者詞: {reading} {phrase}")
        self.reload_user_phrases()

    def exclude_phrase(self, reading: str, phrase: str) -> None:
        """把字詞加入排除清單並重新載入"""
        row = (reading, phrase)
        if row in self._user_rows:
            self._user_rows.remove(row)
        if row not in self._excluded_rows:
            self._excluded_rows.append(row)
        self.reload_user_phrases()
