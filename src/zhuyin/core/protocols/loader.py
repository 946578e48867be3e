"""
Language Model Loader Protocol

定義詞庫載入者的最小介面：KeyHandler 在使用者加入自訂詞時呼叫。
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class LanguageModelLoaderProtocol(Protocol):
    def add_user_phrase(self, reading: str, phrase: str) -> None:
        """把 (讀音, 字詞) 加入使用者詞庫"""
        ...
