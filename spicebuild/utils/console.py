"""Console output and small filesystem helpers for the CLI."""

from __future__ import annotations

from pathlib import Path


class Colors:
    RED = "\033[0;31m"
    GREEN = "\033[0;32m"
    YELLOW = "\033[1;33m"
    CYAN = "\033[0;36m"
    NC = "\033[0m"  # No Color


def print_colored(message: str, color: str = Colors.NC) -> None:
    print(f"{color}{message}{Colors.NC}")


def print_success(message: str) -> None:
    print_colored(f"✓ {message}", Colors.GREEN)


def print_error(message: str) -> None:
    print_colored(f"✗ {message}", Colors.RED)


def print_warning(message: str) -> None:
    print_colored(f"! {message}", Colors.YELLOW)


def print_info(message: str) -> None:
    print_colored(message, Colors.CYAN)


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path
