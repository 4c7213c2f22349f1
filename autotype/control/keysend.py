"""Platform key sender selection and module-level autotype API.

The appropriate platform-specific implementation is selected at import
time. Only X11 is supported.

Usage:
    from autotype.control.keysend import send_string, AutotypeMethod

    result = send_string("correct horse", AutotypeMethod.XTEST, delay_ms=10)
    if not result.success:
        print(result.error)
"""

import logging
import sys
from typing import Iterable, Optional, Union

from .keysend_base import AutotypeMethod, KeySenderBase, SendResult

logger = logging.getLogger(__name__)

IS_LINUX = sys.platform.startswith("linux")
IS_BSD = "bsd" in sys.platform

# The actual KeySender class will be set based on platform
KeySender: Optional[type[KeySenderBase]] = None
AUTOTYPE_AVAILABLE = False
AUTOTYPE_ERROR: Optional[str] = None

if IS_LINUX or IS_BSD:
    try:
        from .keysend_linux import X11KeySender as KeySender
        AUTOTYPE_AVAILABLE = True
        logger.debug("Using X11 key sender")
    except ImportError as e:
        AUTOTYPE_ERROR = "python-xlib is not installed. Install it with: pip install python-xlib"
        logger.warning("X11 key sender not available: %s", e)
else:
    AUTOTYPE_ERROR = f"Unsupported platform: {sys.platform}"
    logger.error(AUTOTYPE_ERROR)


__all__ = [
    "AutotypeMethod",
    "KeySender",
    "SendResult",
    "AUTOTYPE_AVAILABLE",
    "get_sender",
    "is_autotype_available",
    "get_autotype_error",
    "send_string",
]


_sender: Optional[KeySenderBase] = None


def get_sender() -> KeySenderBase:
    """Get or create the global KeySender instance.

    Raises:
        ImportError: If no key sender is available on this platform.
    """
    global _sender
    if not AUTOTYPE_AVAILABLE or KeySender is None:
        raise ImportError(AUTOTYPE_ERROR or "No key sender available")
    if _sender is None:
        _sender = KeySender()
    return _sender


def is_autotype_available() -> bool:
    """Check if autotype is available on this platform."""
    return AUTOTYPE_AVAILABLE


def get_autotype_error() -> Optional[str]:
    """Get the error message if autotype is not available."""
    return AUTOTYPE_ERROR


def send_string(
    text: Union[str, Iterable[int]],
    method: Union[AutotypeMethod, str] = AutotypeMethod.XTEST,
    delay_ms: int = 0,
) -> SendResult:
    """Type text into the window that currently has input focus."""
    try:
        sender = get_sender()
    except ImportError as e:
        return SendResult(success=False, keys_sent=0, error=str(e))
    return sender.send_string(text, method=method, delay_ms=delay_ms)
