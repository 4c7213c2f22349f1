"""Control module - keystroke injection into the focused window.

This module provides:
- keysend: Platform selection and the send_string entry point
- keysyms: Unicode to keysym translation
- xconnection: Per-call X display scope and error collection

Platform support:
- Linux/BSD: X11 via python-xlib (XTEST or XSendEvent)
"""

from . import keysend

__all__ = ["keysend"]
