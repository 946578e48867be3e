"""
共用測試資料

小型詞庫涵蓋單字、雙字詞與標點符號，分數都是可以精確表示的二進位小數
或足以拉開差距的值，讓解碼結果可以預期。
"""

import pytest

from zhuyin.core.events import KeyHandlerResult
from zhuyin.core.keys import Key, KeyName
from zhuyin.core.states import Empty, InputState
from zhuyin.lm.facade import InputMethodLanguageModel

SAMPLE_ROWS = [
    ("ㄋㄧˇ", "你", -1.0),
    ("ㄋㄧˇ", "妳", -2.0),
    ("ㄏㄠˇ", "好", -1.0),
    ("ㄋㄧˇ-ㄏㄠˇ", "你好", -1.5),
    ("ㄕˋ", "是", -1.0),
    ("ㄕˋ", "事", -1.5),
    ("ㄕˋ", "市", -2.0),
    ("ㄐㄧㄝˋ", "界", -2.0),
    ("ㄐㄧㄝˋ", "借", -2.5),
    ("ㄕˋ-ㄐㄧㄝˋ", "世界", -2.5),
    ("ㄓㄨㄥ", "中", -1.0),
    ("ㄨㄣˊ", "文", -1.25),
    ("ㄓㄨㄥ-ㄨㄣˊ", "中文", -1.75),
    ("ㄇㄚ", "媽", -1.5),
    ("_punctuation_list", "，", -1.0),
    ("_punctuation_list", "。", -1.0),
    ("_punctuation_Standard_<", "，", -1.0),
    ("_punctuation_?", "？", -1.0),
    ("_punctuation_.", "。", -1.0),
]


@pytest.fixture
def sample_rows():
    return list(SAMPLE_ROWS)


@pytest.fixture
def language_model():
    lm = InputMethodLanguageModel()
    lm.load_language_model(SAMPLE_ROWS)
    return lm


def _key_for(ch: str) -> Key:
    return Key.from_char(ch)


@pytest.fixture
def press():
    """
    依序按下多個按鍵

    使用方式:
        result, state = press(handler, "su3cl3")
        result, state = press(handler, [Key.named(KeyName.LEFT)], state)
    """

    def _press(handler, keys, state: InputState = None):
        state = state if state is not None else Empty()
        result = KeyHandlerResult.not_absorbed()
        for key in keys:
            if isinstance(key, str):
                key = _key_for(key)
            result = handler.handle(key, state)
            if result.state is not None:
                state = result.state
        return result, state

    return _press


@pytest.fixture
def space_key():
    return Key.named(KeyName.SPACE)
