"""X server connection scope and error collection for one autotype call."""

import logging
from typing import Any, Optional

from Xlib import display, error

from .keysend_base import ConnectionUnavailable

logger = logging.getLogger(__name__)


class XConnection:
    """
    Per-call connection to the X server.

    Opens the display on entry. snapshot_focus() records the window that
    holds input focus at that instant; the snapshot is never refreshed.
    The display is closed on exit whatever the outcome.
    """

    def __init__(self, display_name: Optional[str] = None):
        self._display_name = display_name
        self.display: Any = None
        self.focus: Any = None
        self.root: Any = None

    def __enter__(self) -> "XConnection":
        try:
            self.display = display.Display(self._display_name)
        except (error.DisplayError, OSError) as e:
            raise ConnectionUnavailable(
                f"Could not open X display for autotyping: {e}"
            ) from e

        logger.debug("Opened X display %s", self._display_name or "$DISPLAY")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Close the display if it is open."""
        if self.display is None:
            return
        try:
            self.display.close()
        except Exception as e:
            logger.debug("Error closing X display: %s", e)
        finally:
            self.display = None

    def snapshot_focus(self) -> None:
        """Record the focused window and the screen root as event targets."""
        self.focus = self.display.get_input_focus().focus
        self.root = self.display.screen().root
        logger.debug("Focus snapshot: window %s", _resource_id(self.focus))

    def has_xtest(self) -> bool:
        """Check whether the server advertises the XTEST extension."""
        return self.display.query_extension("XTEST") is not None


class XErrorCollector:
    """
    Scoped X error handler bound to one display.

    Records the first protocol error reported while installed. The handler
    is a bound method, so all error state lives on this instance rather
    than in module globals.
    """

    def __init__(self, xdisplay: Any):
        self._display = xdisplay
        self._previous_handler: Any = None
        self.error_detected = False
        self.error_text = ""
        self.ignored = 0

    def __enter__(self) -> "XErrorCollector":
        # python-xlib keeps the handler on the protocol-level display
        self._previous_handler = getattr(
            getattr(self._display, "display", None), "error_handler", None
        )
        self._display.set_error_handler(self.handle)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._display.set_error_handler(self._previous_handler)
        if self.ignored:
            logger.debug("Ignored %d further X errors", self.ignored)

    def handle(self, err: Any, request: Any = None) -> None:
        """Error callback with the python-xlib (error, request) signature."""
        if self.error_detected:
            self.ignored += 1
            return

        self.error_detected = True
        self.error_text = format_x_error(err)
        logger.debug("X error captured: %s", self.error_text)


def format_x_error(err: Any) -> str:
    """
    Format an X protocol error as 'X error (<code>): <description>'.

    The failing request is appended by major opcode, with the minor
    opcode for extension requests (major opcode 128 and above).
    """
    code = getattr(err, "code", None)
    description = type(err).__name__
    major_opcode = getattr(err, "major_opcode", None)

    text = f"X error ({code}): {description}"
    if major_opcode is not None:
        if major_opcode >= 128:
            text += f" (request {major_opcode}.{getattr(err, 'minor_opcode', 0)})"
        else:
            text += f" (request {major_opcode})"
    return text


def _resource_id(resource: Any) -> Any:
    return getattr(resource, "id", resource)
