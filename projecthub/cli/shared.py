"""Shared CLI helpers: console and logger."""

from rich.console import Console

from projecthub.utils.logger import get_logger

console = Console()
logger = get_logger("projecthub.cli")
