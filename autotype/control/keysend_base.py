"""Abstract base class and shared types for platform key senders.

This module defines the KeySender interface that platform-specific
implementations must follow, along with the request/result types and
the error taxonomy shared by every autotype backend.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Union

logger = logging.getLogger(__name__)


class AutotypeMethod(Enum):
    """Caller preference for how keystrokes are injected."""
    XTEST = "xtest"          # Prefer the native extension when available
    XSENDKEYS = "xsendkeys"  # Always use synthetic application events

    @classmethod
    def parse(cls, value: Union["AutotypeMethod", str]) -> "AutotypeMethod":
        """
        Convert a method name or value into an AutotypeMethod.

        Args:
            value: An AutotypeMethod, or its value/name in any case.

        Returns:
            The matching AutotypeMethod.

        Raises:
            ValueError: If the value is not a known method.
        """
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        for method in cls:
            if normalized in (method.value, method.name.lower()):
                return method
        raise ValueError(f"Unknown autotype method: {value}")


@dataclass(frozen=True)
class KeyPress:
    """A physical keycode plus the modifier state needed to produce a keysym."""
    keycode: int
    state: int


@dataclass(frozen=True)
class AutotypeRequest:
    """One autotype call: code points, method preference and pacing."""
    code_points: tuple[int, ...]
    method: AutotypeMethod = AutotypeMethod.XTEST
    delay_ms: int = 0

    @classmethod
    def create(
        cls,
        text: Union[str, Iterable[int]],
        method: Union[AutotypeMethod, str] = AutotypeMethod.XTEST,
        delay_ms: int = 0,
    ) -> "AutotypeRequest":
        """
        Build a request from a string or a sequence of code points.

        Integer sequences allow values that a Python str cannot hold
        (for example anything above U+10FFFF).

        Raises:
            ValueError: If delay_ms is negative or the method is unknown.
        """
        if isinstance(text, str):
            code_points = tuple(ord(ch) for ch in text)
        else:
            code_points = tuple(int(cp) for cp in text)

        delay_ms = int(delay_ms)
        if delay_ms < 0:
            raise ValueError(f"Inter-key delay must be >= 0 ms, got {delay_ms}")

        return cls(
            code_points=code_points,
            method=AutotypeMethod.parse(method),
            delay_ms=delay_ms,
        )


@dataclass
class SendResult:
    """Result of an autotype operation."""
    success: bool
    keys_sent: int
    error: Optional[str] = None
    strategy: Optional[str] = None


class AutotypeError(Exception):
    """Base exception for autotype failures."""
    pass


class ConnectionUnavailable(AutotypeError):
    """Raised when the display server cannot be reached."""
    pass


class UnmappableCharacter(AutotypeError):
    """Raised when a character has no keysym representation."""

    def __init__(self, message: str, code_point: int):
        super().__init__(message)
        self.code_point = code_point


class KeycodeResolutionFailed(AutotypeError):
    """Raised when a keysym is not bound to any keycode in the active layout."""

    def __init__(self, message: str, keysym: int):
        super().__init__(message)
        self.keysym = keysym


class ProtocolError(AutotypeError):
    """Raised when the server reported an error or the connection dropped."""

    def __init__(self, message: str, keys_sent: int = 0):
        super().__init__(message)
        self.keys_sent = keys_sent


class KeySenderBase(ABC):
    """
    Abstract base class for key senders.

    Platform-specific implementations resolve the whole request before
    injecting anything, so a translation failure never types a fragment.
    """

    # Default delay between injected keys (milliseconds)
    DEFAULT_DELAY_MS = 0

    @abstractmethod
    def send(self, request: AutotypeRequest) -> int:
        """
        Resolve and inject every character of the request.

        Args:
            request: The autotype request.

        Returns:
            Number of keypresses injected.

        Raises:
            AutotypeError: On any resolution, connection or protocol failure.
        """
        pass

    def send_string(
        self,
        text: Union[str, Iterable[int]],
        method: Union[AutotypeMethod, str] = AutotypeMethod.XTEST,
        delay_ms: int = DEFAULT_DELAY_MS,
    ) -> SendResult:
        """
        Type text into the window that currently has input focus.

        Args:
            text: String or sequence of Unicode code points.
            method: Injection preference (xtest or xsendkeys).
            delay_ms: Delay between successive keys in milliseconds.

        Returns:
            SendResult indicating success/failure.
        """
        try:
            request = AutotypeRequest.create(text, method=method, delay_ms=delay_ms)
        except ValueError as e:
            return SendResult(success=False, keys_sent=0, error=str(e))

        if not request.code_points:
            return SendResult(success=True, keys_sent=0)

        try:
            keys_sent = self.send(request)
            return SendResult(
                success=True,
                keys_sent=keys_sent,
                strategy=self.last_strategy,
            )
        except ProtocolError as e:
            logger.error("Autotype interrupted by server error: %s", e)
            return SendResult(
                success=False,
                keys_sent=e.keys_sent,
                error=str(e),
                strategy=self.last_strategy,
            )
        except AutotypeError as e:
            logger.error("Autotype failed: %s", e)
            return SendResult(success=False, keys_sent=0, error=str(e))

    @property
    def last_strategy(self) -> Optional[str]:
        """Name of the injection strategy used by the most recent call."""
        return None
