"""
語言模型模組

- InputMethodLanguageModel: 主詞庫 + 使用者詞 + 排除詞 + 替換表的查詢 facade
- LanguageModelSession: 單一輸入情境的查詢視圖（各自的 LookupOptions）
- LanguageModelLoader: 記憶體中的使用者詞載入者
- UserOverrideModel: 使用者選字習慣
- to_simplified_chinese: 預設外部轉換器（需要 hanziconv）
"""

from .converters import to_simplified_chinese
from .facade import ExternalConverter, InputMethodLanguageModel, LanguageModelSession, LookupOptions
from .loader import LanguageModelLoader
from .tables import PhraseReplacementMap, UnigramTable, UserPhraseTable
from .user_override_model import UserOverrideModel, walked_nodes_to_key

__all__ = [
    "InputMethodLanguageModel",
    "ExternalConverter",
    "LanguageModelSession",
    "LookupOptions",
    "LanguageModelLoader",
    "UnigramTable",
    "UserPhraseTable",
    "PhraseReplacementMap",
    "UserOverrideModel",
    "walked_nodes_to_key",
    "to_simplified_chinese",
]
