"""
注音輸入範例

模擬使用者以標準鍵盤輸入「你好世界」，開啟候選窗改字，最後送出。
也展示如何用 verbose=True 與 on_timing 觀察解碼耗時。
"""

from zhuyin import (
    ChoosingCandidate,
    Committing,
    Empty,
    Key,
    KeyName,
    ZhuyinEngine,
)

DICTIONARY = [
    ("ㄋㄧˇ", "你", -1.0),
    ("ㄋㄧˇ", "妳", -2.0),
    ("ㄏㄠˇ", "好", -1.0),
    ("ㄋㄧˇ-ㄏㄠˇ", "你好", -1.5),
    ("ㄕˋ", "是", -1.0),
    ("ㄕˋ", "世", -2.2),
    ("ㄐㄧㄝˋ", "界", -2.0),
    ("ㄕˋ-ㄐㄧㄝˋ", "世界", -2.5),
]


def type_keys(handler, keys, state):
    for ch in keys:
        result = handler.handle(Key.from_char(ch), state)
        state = result.state or state
        print(f"  {ch!r:>5} -> {state.kind.value:<20} {getattr(state, 'composing_buffer', '')}")
    return state


def demo_typing():
    print("=" * 60)
    print("範例 1: 輸入與選字")
    print("=" * 60)

    engine = ZhuyinEngine(DICTIONARY)
    handler = engine.create_key_handler()

    state = type_keys(handler, "su3cl3g4ru,4", Empty())

    state = handler.handle(Key.named(KeyName.HOME), state).state
    result = handler.handle(Key.named(KeyName.SPACE), state)
    if isinstance(result.state, ChoosingCandidate):
        print(f"  候選: {result.state.candidates}")
        state = handler.candidate_selected("妳").state
        print(f"  選「妳」之後: {state.composing_buffer}")

    result = handler.handle(Key.named(KeyName.RETURN), state)
    if isinstance(result.state, Committing):
        print(f"  送出: {result.state.text}")
    print()


def demo_timing():
    print("=" * 60)
    print("範例 2: 計時回呼")
    print("=" * 60)

    timings = []
    engine = ZhuyinEngine(DICTIONARY, on_timing=lambda op, elapsed: timings.append((op, elapsed)))
    handler = engine.create_key_handler()
    type_keys(handler, "su3cl3", Empty())

    for op, elapsed in timings:
        print(f"  {op}: {elapsed * 1000:.3f} ms")
    print()


if __name__ == "__main__":
    demo_typing()
    demo_timing()
