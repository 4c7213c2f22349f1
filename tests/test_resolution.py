"""Tests for keycode and modifier resolution against a fake layout."""

import pytest
from Xlib import X, XK

from autotype.control.keysend_base import KeycodeResolutionFailed, KeyPress, UnmappableCharacter
from autotype.control.keysend_linux import (
    calc_modifiers,
    find_modifier_row,
    resolve_keycode,
    resolve_keypresses,
)

from .conftest import LEVEL3_KEYCODE, FakeDisplay


@pytest.fixture
def xdisplay():
    return FakeDisplay()


class TestResolveKeycode:

    def test_known_keysym(self, xdisplay):
        assert resolve_keycode(xdisplay, ord("a"), ord("a")) == 38

    def test_missing_keysym_fails_with_hint(self, xdisplay):
        with pytest.raises(KeycodeResolutionFailed) as exc_info:
            resolve_keycode(xdisplay, 0x1A3, 0x0141)

        message = str(exc_info.value)
        assert "key char(Ł)" in message
        assert "sym(0X1A3)" in message
        assert "str(Lstroke)" in message
        assert "xmodmap -pk" in message
        assert exc_info.value.keysym == 0x1A3

    def test_unnamed_keysym_reports_null(self, xdisplay):
        with pytest.raises(KeycodeResolutionFailed) as exc_info:
            resolve_keycode(xdisplay, 0x00FFFFF0, 0x41)
        assert "str(NULL)" in str(exc_info.value)


class TestModifierSearch:

    def test_level3_row_is_found(self, xdisplay):
        assert find_modifier_row(xdisplay, XK.XK_ISO_Level3_Shift) == X.Mod5MapIndex

    def test_absent_modifier_returns_zero(self, xdisplay):
        assert find_modifier_row(xdisplay, XK.XK_Mode_switch) == 0

    def test_shift_row_is_not_scanned(self, xdisplay):
        # Shift lives below Mod1 and is never reported as a level shift
        assert find_modifier_row(xdisplay, XK.XK_Shift_L) == 0

    def test_unshifted_letter(self, xdisplay):
        assert calc_modifiers(xdisplay, 38, ord("a")) == 0

    def test_shifted_letter(self, xdisplay):
        assert calc_modifiers(xdisplay, 38, ord("A")) == X.ShiftMask

    def test_shifted_symbol(self, xdisplay):
        assert calc_modifiers(xdisplay, 10, ord("!")) == X.ShiftMask

    def test_level3_symbol(self, xdisplay):
        assert calc_modifiers(xdisplay, 26, 0x20AC) == X.Mod5Mask

    def test_level3_shift_combination(self, xdisplay):
        xdisplay.keymap[26][3] = 0x1A3
        assert calc_modifiers(xdisplay, 26, 0x1A3) == X.Mod5Mask | X.ShiftMask

    def test_level_shift_on_same_row_is_added_once(self, xdisplay):
        # Mode_switch on the same modifier row as ISO_Level3_Shift
        xdisplay.keymap[LEVEL3_KEYCODE][1] = XK.XK_Mode_switch
        xdisplay.keymap[26] = [ord("e"), ord("E"), 0x20AC, 0, 0x1A3, 0]
        # Only four candidates exist, so index 4 is never considered
        assert calc_modifiers(xdisplay, 26, 0x1A3) == 0

    def test_two_distinct_level_shifts(self, xdisplay):
        xdisplay.modmap[X.Mod3MapIndex] = [92, 0]
        xdisplay.keymap[92] = [XK.XK_Mode_switch, 0, 0, 0]
        xdisplay.keymap[26] = [ord("e"), ord("E"), 0x20AC, 0, 0x1A3, 0, 0, 0]
        # Candidates: 0, Shift, Mod3, Mod3|Shift, Mod5, Mod5|Shift, ...
        assert calc_modifiers(xdisplay, 26, 0x20AC) == X.Mod3Mask
        assert calc_modifiers(xdisplay, 26, 0x1A3) == X.Mod5Mask

    def test_no_match_falls_back_to_no_modifiers(self, xdisplay):
        assert calc_modifiers(xdisplay, 38, ord("q")) == 0

    def test_empty_mapping(self, xdisplay):
        assert calc_modifiers(xdisplay, 250, ord("a")) == 0


class TestResolveKeypresses:

    def test_printable_ascii(self, xdisplay):
        keypresses = resolve_keypresses(xdisplay, tuple(map(ord, "Pass1!")))
        assert keypresses == [
            KeyPress(33, X.ShiftMask),
            KeyPress(38, 0),
            KeyPress(39, 0),
            KeyPress(39, 0),
            KeyPress(10, 0),
            KeyPress(10, X.ShiftMask),
        ]

    def test_vertical_tab_is_filtered(self, xdisplay):
        with_sentinel = resolve_keypresses(xdisplay, tuple(map(ord, "ab\vcd")))
        without = resolve_keypresses(xdisplay, tuple(map(ord, "abcd")))
        assert with_sentinel == without

    def test_control_keys(self, xdisplay):
        keypresses = resolve_keypresses(xdisplay, tuple(map(ord, "\t\r")))
        assert [kp.keycode for kp in keypresses] == [23, 36]

    def test_unmappable_character(self, xdisplay):
        with pytest.raises(UnmappableCharacter) as exc_info:
            resolve_keypresses(xdisplay, (ord("a"), 0x110000))

        assert "[U+110000]" in str(exc_info.value)
        assert exc_info.value.code_point == 0x110000

    def test_unprintable_character_is_transliterated(self, xdisplay):
        with pytest.raises(UnmappableCharacter) as exc_info:
            resolve_keypresses(xdisplay, (0x01,))
        assert "'U+0001' [U+0001]" in str(exc_info.value)
