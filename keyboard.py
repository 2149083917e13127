from __future__ import annotations

from enum import Enum

from rich.text import Text


KEYBOARD_LAYOUT = [
    ["Q", "W", "E", "R", "T", "Y", "U", "I", "O", "P"],
    ["A", "S", "D", "F", "G", "H", "J", "K", "L"],
    ["Z", "X", "C", "V", "B", "N", "M"],
]
SPACE = " "

HAND_POSITIONS = {
    "left": ["A", "S", "D", "F"],
    "right": ["J", "K", "L", ";"],
}


class KeyStyle(str, Enum):
    CURRENT = "current"
    FOCUS = "focus"
    HOME_LEFT = "home_left"
    HOME_RIGHT = "home_right"
    NORMAL = "normal"


KEY_STYLES = {
    KeyStyle.CURRENT: "bold black on #e0a030",
    KeyStyle.FOCUS: "bold #60a0ff on #1f2f4f",
    KeyStyle.HOME_LEFT: "on #3a3a3a",
    KeyStyle.HOME_RIGHT: "#a0a0a0 on #2a2a2a",
    KeyStyle.NORMAL: "#a0a0a0 on #2a2a2a",
}


def key_for_char(ch: str | None) -> str | None:
    """Map the next expected character to the key label that types it."""
    if not ch:
        return None
    if ch == SPACE:
        return SPACE
    label = ch.upper()
    if any(label in row for row in KEYBOARD_LAYOUT):
        return label
    return None


def key_style(key: str, current_key: str | None, focus_keys: str = "") -> KeyStyle:
    if current_key is not None and key == current_key:
        return KeyStyle.CURRENT
    if key in focus_keys and key != SPACE:
        return KeyStyle.FOCUS
    if key in HAND_POSITIONS["left"]:
        return KeyStyle.HOME_LEFT
    if key in HAND_POSITIONS["right"]:
        return KeyStyle.HOME_RIGHT
    return KeyStyle.NORMAL


def render_keyboard(current_char: str | None, focus_keys: str = "") -> Text:
    current_key = key_for_char(current_char)
    rendered = Text(justify="center")
    for indent, row in enumerate(KEYBOARD_LAYOUT):
        rendered.append(" " * indent)
        for key in row:
            style = KEY_STYLES[key_style(key, current_key, focus_keys)]
            rendered.append(f" {key} ", style=style)
            rendered.append(" ")
        rendered.append("\n")
    space_style = KEY_STYLES[key_style(SPACE, current_key, focus_keys)]
    rendered.append(f"{'Space':^23}", style=space_style)
    return rendered
