"""Entry point for the autotype command-line tool."""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Any, Optional

import yaml

from .audit.logger import AuditLogger, configure_audit_logger
from .control.keysend_base import AutotypeMethod, SendResult
from .control.keysend_linux import X11KeySender

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict[str, dict[str, Any]] = {
    "autotype": {
        "method": AutotypeMethod.XTEST.value,
        "delay_ms": 10,
        "initial_wait": 0.0,
        "display": None,
    },
    "audit": {
        "enabled": False,
        "log_dir": "logs",
    },
}


def load_config(config_path: Optional[Path] = None) -> dict:
    """
    Load configuration from a YAML file merged over the defaults.

    Args:
        config_path: Optional path to a YAML configuration file.

    Returns:
        The merged configuration dictionary.
    """
    config = {section: dict(values) for section, values in DEFAULT_CONFIG.items()}

    if config_path and config_path.exists():
        try:
            with open(config_path) as f:
                file_config = yaml.safe_load(f)
            if file_config:
                for key, value in file_config.items():
                    if key in config and isinstance(value, dict):
                        config[key].update(value)
                    else:
                        config[key] = value
            logger.info("Loaded configuration from %s", config_path)
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Failed to load config file: %s", e)
    elif config_path:
        logger.warning("Config file not found: %s", config_path)

    return config


class AutotypeApplication:
    """Runs one autotype request with configuration and auditing applied."""

    def __init__(self, config: dict, audit: Optional[AuditLogger] = None):
        """
        Initialize the application.

        Args:
            config: Merged configuration (see load_config).
            audit: Optional audit logger; None disables auditing.
        """
        settings = config["autotype"]
        self._method = AutotypeMethod.parse(settings["method"])
        self._delay_ms = int(settings["delay_ms"])
        self._initial_wait = float(settings.get("initial_wait") or 0.0)
        self._display_name = settings.get("display")
        self._sender = X11KeySender(display_name=self._display_name)
        self._audit = audit

    def run(self, text: str) -> SendResult:
        """Type text into the focused window and record the outcome."""
        if self._audit:
            self._audit.log_requested(
                char_count=len(text),
                method=self._method.value,
                delay_ms=self._delay_ms,
                display=self._display_name,
                initial_wait=self._initial_wait,
            )

        if self._initial_wait > 0:
            logger.info("Typing in %.1f seconds", self._initial_wait)
            time.sleep(self._initial_wait)

        started = time.monotonic()
        result = self._sender.send_string(text, method=self._method, delay_ms=self._delay_ms)
        duration_ms = (time.monotonic() - started) * 1000

        if result.success:
            logger.info(
                "Typed %d keys via %s in %.0f ms",
                result.keys_sent, result.strategy or "no-op", duration_ms,
            )

        if self._audit:
            self._audit.log_result(
                success=result.success,
                keys_sent=result.keys_sent,
                strategy=result.strategy,
                duration_ms=duration_ms,
                error=result.error,
            )

        return result


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Type text into the window that currently has input focus",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--text",
        type=str,
        default=None,
        help="Text to type (read from stdin if omitted)",
    )

    parser.add_argument(
        "--method",
        choices=[m.value for m in AutotypeMethod],
        default=None,
        help="Injection method (overrides config)",
    )

    parser.add_argument(
        "--delay",
        type=int,
        default=None,
        help="Delay between keys in milliseconds (overrides config)",
    )

    parser.add_argument(
        "--wait",
        type=float,
        default=None,
        help="Seconds to wait before typing (overrides config)",
    )

    parser.add_argument(
        "--display",
        type=str,
        default=None,
        help="X display to use (defaults to $DISPLAY)",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file",
    )

    parser.add_argument(
        "--audit-dir",
        type=Path,
        default=None,
        help="Write an audit log to this directory",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    return parser.parse_args(argv)


def apply_overrides(config: dict, args: argparse.Namespace) -> dict:
    """Apply command-line overrides on top of the loaded configuration."""
    settings = config["autotype"]
    if args.method is not None:
        settings["method"] = args.method
    if args.delay is not None:
        settings["delay_ms"] = args.delay
    if args.wait is not None:
        settings["initial_wait"] = args.wait
    if args.display is not None:
        settings["display"] = args.display
    if args.audit_dir is not None:
        config["audit"]["enabled"] = True
        config["audit"]["log_dir"] = str(args.audit_dir)
    return config


def read_text(args: argparse.Namespace) -> str:
    """Return the text to type from --text or stdin."""
    if args.text is not None:
        return args.text
    text = sys.stdin.read()
    if text.endswith("\n"):
        text = text[:-1]
    return text


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )
    logger.debug("Verbose logging enabled")

    # Use default config if not specified
    config_path = args.config
    if config_path is None:
        default_config = Path(__file__).parent / "config.yaml"
        if default_config.exists():
            config_path = default_config

    config = apply_overrides(load_config(config_path), args)

    audit = None
    if config["audit"].get("enabled"):
        audit = configure_audit_logger(log_dir=Path(config["audit"]["log_dir"]))

    try:
        app = AutotypeApplication(config, audit=audit)
    except ValueError as e:
        print(f"autotype: {e}", file=sys.stderr)
        return 1

    result = app.run(read_text(args))
    if not result.success:
        print(f"autotype: {result.error}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
