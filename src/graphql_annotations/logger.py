"""Logging for graphql-annotations with console helpers for the command line."""

import logging

from rich.console import Console
from rich.logging import RichHandler


class AnnotationsLogger(logging.Logger):
    """
    Logger that combines Python logging with CLI formatting methods.

    Provides the standard logging levels (debug, info, warning, error, critical)
    and two console helpers (success, key_value) used by the CLI.
    """

    def __init__(self, name: str, level: int = logging.INFO) -> None:
        super().__init__(name, level)
        self.console = Console(stderr=True)

        handler = RichHandler(
            console=self.console,
            rich_tracebacks=True,
            show_time=True,
            show_path=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        self.addHandler(handler)
        self.propagate = False

    def print(self, message: str) -> None:
        """Print a plain message (with Rich markup support)."""
        self.console.print(message)

    def success(self, message: str) -> None:
        """Print a success message in green with checkmark icon."""
        self.print(f"[green]✓[/green] {message}")

    def key_value(self, key: str, value: object, key_style: str = "dim") -> None:
        """
        Print a formatted key-value pair.

        Args:
            key: The key/label to display
            value: The value to display
            key_style: Style for the key (default: "dim")
        """
        self.print(f"[{key_style}]{key}:[/{key_style}] {value}")


def get_logger(name: str = "graphql_annotations") -> AnnotationsLogger:
    """
    Get or create an AnnotationsLogger instance.

    The logger class is swapped only while the logger is created so other
    libraries keep getting plain loggers.

    Args:
        name: Logger name (default: "graphql_annotations")

    Returns:
        AnnotationsLogger instance
    """
    previous_class = logging.getLoggerClass()
    logging.setLoggerClass(AnnotationsLogger)
    try:
        logger = logging.getLogger(name)
    finally:
        logging.setLoggerClass(previous_class)

    return logger  # type: ignore[return-value]
