"""Output handler implementations: console, null, buffered."""

from __future__ import annotations

from colorama import Fore, Style
from tqdm import tqdm

from pygit_workspace.protocols import OutputHandler

SECTION_WIDTH = 50
INDENT = "  "


class ConsoleOutputHandler:
    """Console output with colors."""

    def __init__(self, verbose: bool = False):
        """Create a console handler. Set verbose=True to enable debug output."""
        self.verbose = verbose

    def _write(self, message: str, indent: int = 0, color: str = "") -> None:
        text = f"{color}{message}{Style.RESET_ALL}" if color else message
        tqdm.write(INDENT * indent + text)

    def info(self, message: str, indent: int = 0) -> None:
        """Print an informational message."""
        self._write(message, indent)

    def success(self, message: str, indent: int = 0) -> None:
        """Print a green success message."""
        self._write(message, indent, Fore.GREEN)

    def warning(self, message: str, indent: int = 0) -> None:
        """Print a yellow warning message."""
        self._write(message, indent, Fore.YELLOW)

    def error(self, message: str, indent: int = 0) -> None:
        """Print a red error message."""
        self._write(message, indent, Fore.RED)

    def section(self, title: str) -> None:
        """Print a section header with a divider line."""
        tqdm.write("")
        tqdm.write(title)
        tqdm.write("-" * SECTION_WIDTH)

    def debug(self, message: str) -> None:
        """Print a cyan debug message (only when verbose is enabled)."""
        if self.verbose:
            self._write(f"[DEBUG] {message}", color=Fore.CYAN)


class NullOutputHandler:
    """Silent output handler for testing and JSON mode."""

    def info(self, message: str, indent: int = 0) -> None:
        pass

    def success(self, message: str, indent: int = 0) -> None:
        pass

    def warning(self, message: str, indent: int = 0) -> None:
        pass

    def error(self, message: str, indent: int = 0) -> None:
        pass

    def section(self, title: str) -> None:
        pass

    def debug(self, message: str) -> None:
        pass


class BufferedOutputHandler:
    """Records calls for deferred replay (one buffer per repository in parallel mode)."""

    def __init__(self):
        """Initialize with an empty buffer."""
        self.messages: list[tuple[str, tuple]] = []

    def info(self, message: str, indent: int = 0) -> None:
        self.messages.append(("info", (message, indent)))

    def success(self, message: str, indent: int = 0) -> None:
        self.messages.append(("success", (message, indent)))

    def warning(self, message: str, indent: int = 0) -> None:
        self.messages.append(("warning", (message, indent)))

    def error(self, message: str, indent: int = 0) -> None:
        self.messages.append(("error", (message, indent)))

    def section(self, title: str) -> None:
        self.messages.append(("section", (title,)))

    def debug(self, message: str) -> None:
        self.messages.append(("debug", (message,)))

    def flush_to(self, target: OutputHandler) -> None:
        """Replay every buffered call on target, in order, and clear the buffer."""
        for level, args in self.messages:
            getattr(target, level)(*args)
        self.messages.clear()
