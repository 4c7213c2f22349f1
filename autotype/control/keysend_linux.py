"""X11 implementation of autotype key injection.

This module uses python-xlib to translate characters into keycodes and
modifier states for the active keyboard layout, then injects them into
the window holding input focus, either through the XTEST extension or
by sending synthetic KeyPress/KeyRelease events.

Every character is resolved before the first key is sent, so a string
that cannot be typed completely is not typed at all.
"""

import logging
import time
from enum import Enum
from typing import Any, Callable, Optional

from Xlib import X, XK, error
from Xlib.ext import xtest
from Xlib.protocol import event

from .keysend_base import (
    AutotypeMethod,
    AutotypeRequest,
    KeycodeResolutionFailed,
    KeyPress,
    KeySenderBase,
    ProtocolError,
    UnmappableCharacter,
)
from .keysyms import (
    NO_SYMBOL,
    char_to_keysym,
    describe_char,
    filter_sentinels,
    keysym_name,
)
from .xconnection import XConnection, XErrorCollector, format_x_error

logger = logging.getLogger(__name__)

# Layout-defined extra shift levels, in the order they are tried
LEVEL_SHIFT_KEYSYMS = (XK.XK_Mode_switch, XK.XK_ISO_Level3_Shift)


class InjectionStrategy(Enum):
    """How resolved keypresses reach the focused window."""
    XTEST = "xtest"
    XSENDEVENT = "xsendevent"


def select_strategy(method: AutotypeMethod, xtest_available: bool) -> InjectionStrategy:
    """
    Pick the injection strategy for one call.

    XTEST is used only when requested and advertised by the server;
    otherwise the call falls back to XSendEvent.
    """
    if method is AutotypeMethod.XTEST and xtest_available:
        return InjectionStrategy.XTEST
    return InjectionStrategy.XSENDEVENT


# =============================================================================
# Resolution
# =============================================================================

def resolve_keycode(xdisplay: Any, keysym: int, code_point: int) -> int:
    """
    Find the keycode bound to a keysym in the active layout.

    Raises:
        KeycodeResolutionFailed: If no key produces the keysym.
    """
    keycode = xdisplay.keysym_to_keycode(keysym)
    if keycode:
        return keycode

    raise KeycodeResolutionFailed(
        f"Could not get keycode for key char({describe_char(code_point)}) - "
        f"sym({keysym:#X}) - str({keysym_name(keysym) or 'NULL'}). "
        "Aborting autotype.\n\n"
        "If 'xmodmap -pk' does not list this KeySym, you probably need "
        "to install an appropriate keyboard layout.",
        keysym,
    )


def find_modifier_row(xdisplay: Any, keysym: int) -> int:
    """
    Find the modifier row whose keys can produce the given keysym.

    Scans the modifier map from Mod1 onward.

    Returns:
        Row index (Mod1MapIndex..Mod5MapIndex), or 0 if no modifier key
        carries the keysym.
    """
    modmap = xdisplay.get_modifier_mapping()
    for row in range(X.Mod1MapIndex, len(modmap)):
        for keycode in modmap[row]:
            if not keycode:
                continue
            symlist = xdisplay.get_keyboard_mapping(keycode, 1)
            if symlist and keysym in symlist[0]:
                return row
    return 0


def calc_modifiers(xdisplay: Any, keycode: int, keysym: int) -> int:
    """
    Determine the modifier state that makes keycode produce keysym.

    Candidates are tried narrowest first: none, Shift, then combinations
    with any layout-specific level shift (Mode_switch, ISO_Level3_Shift).
    The keysym's position in the keycode's symbol list selects the
    candidate. When nothing matches, no modifiers are used.
    """
    mapping = xdisplay.get_keyboard_mapping(keycode, 1)
    if not mapping or not mapping[0]:
        return 0
    symlist = list(mapping[0])

    masks = [0, X.ShiftMask]
    for level_keysym in LEVEL_SHIFT_KEYSYMS:
        row = find_modifier_row(xdisplay, level_keysym)
        if row and (1 << row) not in masks:
            masks.extend([mask | (1 << row) for mask in masks])

    limit = min(len(masks), len(symlist))
    for index in range(limit):
        if symlist[index] == keysym:
            return masks[index]

    logger.debug(
        "No modifier combination yields keysym %#x on keycode %d", keysym, keycode
    )
    return 0


def resolve_keypresses(xdisplay: Any, code_points: tuple[int, ...]) -> list[KeyPress]:
    """
    Resolve every character to a KeyPress before anything is sent.

    Raises:
        UnmappableCharacter: If a character has no keysym.
        KeycodeResolutionFailed: If a keysym has no keycode.
    """
    keypresses: list[KeyPress] = []

    for code_point in filter_sentinels(code_points):
        keysym = char_to_keysym(code_point)
        if keysym == NO_SYMBOL:
            raise UnmappableCharacter(
                f"Cannot convert '{describe_char(code_point)}' "
                f"[U+{code_point:04X}] to keysym. Aborting autotype",
                code_point,
            )

        keycode = resolve_keycode(xdisplay, keysym, code_point)
        state = calc_modifiers(xdisplay, keycode, keysym)
        keypresses.append(KeyPress(keycode=keycode, state=state))

    return keypresses


# =============================================================================
# Injection
# =============================================================================

def _xtest_send_key(conn: XConnection, keypress: KeyPress) -> None:
    """Press and release a key through XTEST, bracketing it with Shift."""
    xdisplay = conn.display
    shift_keycode = 0

    # XTEST events carry no state, so Shift must be held physically
    if keypress.state & X.ShiftMask:
        shift_keycode = xdisplay.keysym_to_keycode(XK.XK_Shift_L)
        xtest.fake_input(xdisplay, X.KeyPress, shift_keycode)

    xtest.fake_input(xdisplay, X.KeyPress, keypress.keycode)
    xtest.fake_input(xdisplay, X.KeyRelease, keypress.keycode)

    if shift_keycode:
        xtest.fake_input(xdisplay, X.KeyRelease, shift_keycode)

    xdisplay.flush()


def _xsendevent_send_key(conn: XConnection, keypress: KeyPress) -> None:
    """Send a KeyPress/KeyRelease pair to the focused window."""
    for event_class in (event.KeyPress, event.KeyRelease):
        key_event = event_class(
            time=X.CurrentTime,
            root=conn.root,
            window=conn.focus,
            child=X.NONE,
            root_x=1,
            root_y=1,
            event_x=1,
            event_y=1,
            state=keypress.state,
            detail=keypress.keycode,
            same_screen=1,
        )
        conn.display.send_event(
            conn.focus, key_event, event_mask=X.KeyPressMask, propagate=True
        )

    conn.display.flush()


_KEY_SENDERS: dict[InjectionStrategy, Callable[[XConnection, KeyPress], None]] = {
    InjectionStrategy.XTEST: _xtest_send_key,
    InjectionStrategy.XSENDEVENT: _xsendevent_send_key,
}


class X11KeySender(KeySenderBase):
    """
    python-xlib based key sender for X11.

    Each call opens its own display connection, targets whichever window
    had focus when the connection was opened, and closes it again.
    Calls must not run concurrently.
    """

    def __init__(self, display_name: Optional[str] = None):
        """
        Initialize the key sender.

        Args:
            display_name: X display to connect to (None uses $DISPLAY).
        """
        self._display_name = display_name
        self._last_strategy: Optional[InjectionStrategy] = None
        self._keys_sent = 0

    @property
    def last_strategy(self) -> Optional[str]:
        if self._last_strategy is None:
            return None
        return self._last_strategy.value

    def send(self, request: AutotypeRequest) -> int:
        """
        Resolve and type the request into the focused window.

        Returns:
            Number of keypresses injected.

        Raises:
            ConnectionUnavailable: If the X display cannot be opened.
            UnmappableCharacter: If a character has no keysym.
            KeycodeResolutionFailed: If a keysym is missing from the layout.
            ProtocolError: If the server reported an error or dropped the
                connection.
        """
        self._last_strategy = None
        self._keys_sent = 0

        try:
            with XConnection(self._display_name) as conn:
                with XErrorCollector(conn.display) as errors:
                    self._send_on(conn, errors, request)
        except error.ConnectionClosedError as e:
            raise ProtocolError(str(e), keys_sent=self._keys_sent) from e
        except error.XError as e:
            raise ProtocolError(format_x_error(e), keys_sent=self._keys_sent) from e

        return self._keys_sent

    def _send_on(self, conn: XConnection, errors: XErrorCollector, request: AutotypeRequest) -> None:
        conn.snapshot_focus()
        keypresses = resolve_keypresses(conn.display, request.code_points)
        logger.debug(
            "Resolved %d keypresses from %d characters",
            len(keypresses), len(request.code_points),
        )
        if not keypresses:
            return

        strategy = select_strategy(request.method, conn.has_xtest())
        self._last_strategy = strategy
        logger.debug("Injecting with %s strategy", strategy.value)

        self._inject(conn, strategy, keypresses, request.delay_ms, errors)

        if errors.error_detected:
            raise ProtocolError(errors.error_text, keys_sent=self._keys_sent)

    def _inject(
        self,
        conn: XConnection,
        strategy: InjectionStrategy,
        keypresses: list[KeyPress],
        delay_ms: int,
        errors: XErrorCollector,
    ) -> None:
        """Send resolved keypresses in order, pausing between keys."""
        send_key = _KEY_SENDERS[strategy]
        delay = delay_ms / 1000.0

        if strategy is InjectionStrategy.XTEST:
            xtest.grab_control(conn.display, True)

        try:
            for keypress in keypresses:
                if errors.error_detected:
                    break
                if self._keys_sent and delay > 0:
                    time.sleep(delay)
                send_key(conn, keypress)
                self._keys_sent += 1
        finally:
            if strategy is InjectionStrategy.XTEST:
                xtest.grab_control(conn.display, False)
            conn.display.sync()
