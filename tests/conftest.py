"""Shared fixtures: a fake python-xlib display with a small US layout."""

import struct
from types import SimpleNamespace
from typing import Any, Callable, Optional

import pytest

from Xlib import XK

import autotype.control.keysend_linux as keysend_linux
import autotype.control.xconnection as xconnection

FOCUS_WINDOW = 0x3A00007
ROOT_WINDOW = 0x1E1

SHIFT_L_KEYCODE = 50
LEVEL3_KEYCODE = 108

# Cyrillic group keysyms, not loaded into Xlib.XK by default
UKRAINIAN_I_LOWER = 0x6A6
UKRAINIAN_I_UPPER = 0x6B6


def _keymap() -> dict[int, list[int]]:
    """US layout, plus AltGr+e for the euro sign and AltGr+` for Ukrainian i."""
    keymap: dict[int, list[int]] = {
        10: [ord("1"), ord("!"), 0, 0],
        11: [ord("2"), ord("@"), 0, 0],
        20: [ord("-"), ord("_"), 0, 0],
        23: [XK.XK_Tab, XK.XK_ISO_Left_Tab, 0, 0],
        49: [ord("`"), ord("~"), UKRAINIAN_I_LOWER, UKRAINIAN_I_UPPER],
        36: [XK.XK_Return, 0, 0, 0],
        22: [XK.XK_BackSpace, 0, 0, 0],
        9: [XK.XK_Escape, 0, 0, 0],
        65: [ord(" "), 0, 0, 0],
        SHIFT_L_KEYCODE: [XK.XK_Shift_L, 0, 0, 0],
        LEVEL3_KEYCODE: [XK.XK_ISO_Level3_Shift, 0, 0, 0],
        37: [XK.XK_Control_L, 0, 0, 0],
        64: [XK.XK_Alt_L, XK.XK_Meta_L, 0, 0],
    }
    letters = {
        "q": 24, "w": 25, "e": 26, "r": 27, "t": 28, "y": 29, "u": 30,
        "i": 31, "o": 32, "p": 33, "a": 38, "s": 39, "d": 40, "f": 41,
        "g": 42, "h": 43, "j": 44, "k": 45, "l": 46, "z": 52, "x": 53,
        "c": 54, "v": 55, "b": 56, "n": 57, "m": 58,
    }
    for letter, keycode in letters.items():
        keymap[keycode] = [ord(letter), ord(letter.upper()), 0, 0]
    keymap[26][2] = 0x20AC  # EuroSign on AltGr+e
    return keymap


def _modifier_map() -> list[list[int]]:
    return [
        [SHIFT_L_KEYCODE, 0],   # Shift
        [0, 0],                 # Lock
        [37, 0],                # Control
        [64, 0],                # Mod1
        [0, 0],                 # Mod2
        [0, 0],                 # Mod3
        [0, 0],                 # Mod4
        [LEVEL3_KEYCODE, 0],    # Mod5
    ]


class FakeProtocolDisplay:
    """Stands in for Xlib.protocol.display.Display (holds the error handler)."""

    def __init__(self):
        self.error_handler: Any = None

    def get_resource_class(self, class_name: str, default: Any = None) -> Any:
        return default


class FakeDisplay:
    """Fake python-xlib Display recording every call made by the engine."""

    def __init__(self, xtest: bool = True):
        self.keymap = _keymap()
        self.modmap = _modifier_map()
        self.xtest = xtest
        self.display = FakeProtocolDisplay()
        self.handler_history: list[Any] = []
        self.sent_events: list[tuple[Any, Any, int, bool]] = []
        self.flush_calls = 0
        self.sync_calls = 0
        self.closed = False
        self.on_send_event: Optional[Callable[["FakeDisplay"], None]] = None
        self.on_sync: Optional[Callable[["FakeDisplay"], None]] = None
        self.focus_error: Optional[Exception] = None
        self.handler_at_focus: Any = None

    # Connection
    def get_input_focus(self) -> SimpleNamespace:
        self.handler_at_focus = self.display.error_handler
        if self.focus_error is not None:
            raise self.focus_error
        return SimpleNamespace(focus=FOCUS_WINDOW, revert_to=1)

    def screen(self) -> SimpleNamespace:
        return SimpleNamespace(root=ROOT_WINDOW)

    def query_extension(self, name: str) -> Optional[object]:
        if name == "XTEST" and self.xtest:
            return object()
        return None

    def close(self) -> None:
        self.closed = True

    def flush(self) -> None:
        self.flush_calls += 1

    def sync(self) -> None:
        self.sync_calls += 1
        if self.on_sync:
            self.on_sync(self)

    def set_error_handler(self, handler: Any) -> None:
        self.handler_history.append(handler)
        self.display.error_handler = handler

    # Keyboard mapping
    def keysym_to_keycode(self, keysym: int) -> int:
        matches = sorted(
            (index, keycode)
            for keycode, syms in self.keymap.items()
            for index, sym in enumerate(syms)
            if sym == keysym and sym != 0
        )
        return matches[0][1] if matches else 0

    def get_keyboard_mapping(self, first_keycode: int, count: int) -> list[list[int]]:
        return [
            list(self.keymap.get(keycode, [0, 0, 0, 0]))
            for keycode in range(first_keycode, first_keycode + count)
        ]

    def get_modifier_mapping(self) -> list[list[int]]:
        return [list(row) for row in self.modmap]

    # Events
    def send_event(self, destination: Any, event: Any, event_mask: int = 0, propagate: bool = False) -> None:
        self.sent_events.append((destination, event, event_mask, propagate))
        if self.on_send_event:
            self.on_send_event(self)

    def raise_x_error(self, err: Any) -> None:
        """Deliver an error the way python-xlib does when reading replies."""
        handler = self.display.error_handler
        assert handler is not None, "no error handler installed"
        handler(err, None)


def make_x_error(error_class: type, code: int, major_opcode: int, minor_opcode: int = 0, resource_id: int = 0) -> Any:
    """Parse a python-xlib error object from a 32-byte X11 error packet."""
    packet = struct.pack(
        "=BBHLHB21x", 0, code, 1, resource_id, minor_opcode, major_opcode,
    )
    return error_class(FakeProtocolDisplay(), packet)


@pytest.fixture
def fake_display(monkeypatch):
    """Patch Xlib.display.Display to return a single FakeDisplay."""
    fake = FakeDisplay()
    opened: list[Optional[str]] = []

    def _factory(name=None):
        opened.append(name)
        return fake

    monkeypatch.setattr(xconnection.display, "Display", _factory)
    fake.opened = opened
    return fake


@pytest.fixture
def xtest_calls(monkeypatch):
    """Record XTEST fake_input/grab_control calls instead of sending them."""
    calls: list[tuple] = []
    hooks: dict[str, Any] = {"on_fake_input": None}

    def _fake_input(display, event_type, detail=0, **kwargs):
        calls.append(("fake_input", event_type, detail))
        if hooks["on_fake_input"]:
            hooks["on_fake_input"](display, len([c for c in calls if c[0] == "fake_input"]))

    def _grab_control(display, impervious):
        calls.append(("grab_control", impervious))

    monkeypatch.setattr(keysend_linux.xtest, "fake_input", _fake_input)
    monkeypatch.setattr(keysend_linux.xtest, "grab_control", _grab_control)
    calls_hooks = SimpleNamespace(calls=calls, hooks=hooks)
    return calls_hooks


@pytest.fixture
def sleeps(monkeypatch):
    """Record inter-key pauses without sleeping."""
    recorded: list[float] = []
    monkeypatch.setattr(keysend_linux.time, "sleep", recorded.append)
    return recorded
