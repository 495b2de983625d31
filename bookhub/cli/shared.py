"""Shared CLI helpers: console and logger."""

from rich.console import Console

from bookhub.utils.logger import get_logger

console = Console()
logger = get_logger("bookhub.cli")
