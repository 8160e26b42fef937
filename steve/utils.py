"""Console output, logging, process execution and confirmation helpers."""

import enum
import logging
import shlex
import subprocess
from typing import Callable, Sequence

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .errors import ExternalProcessError

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

ConfirmFunc = Callable[[str], bool]


def log(msg: str, level: str = "info") -> None:
    """Print a prefixed log message; errors go to stderr."""
    styles = {
        "info": "blue",
        "success": "green",
        "warning": "yellow",
        "error": "red",
        "step": "cyan",
    }
    prefix = {
        "info": "i",
        "success": "+",
        "warning": "!",
        "error": "x",
        "step": ">",
    }
    style = styles.get(level, "blue")
    symbol = prefix.get(level, "*")
    target = err_console if level == "error" else console
    target.print(f"[{style}]\\[{symbol}][/{style}] {escape(msg)}", soft_wrap=True, highlight=False)


def log_header(msg: str) -> None:
    """Print a header message."""
    console.print()
    console.print(f"[bold cyan]=== {escape(msg)} ===[/bold cyan]", highlight=False)
    console.print()


def log_subheader(msg: str) -> None:
    """Print a subheader message."""
    console.print(f"[bold]{escape(msg)}[/bold]", highlight=False)


def setup_logging(debug: bool = False, level: str = "WARNING") -> None:
    """Send the steve logger to stderr through rich.

    Args:
        debug: Trace parser decisions, dispatch and commands
        level: Level to use when not debugging
    """
    root = logging.getLogger("steve")
    for handler in list(root.handlers):
        root.removeHandler(handler)
    handler = RichHandler(console=err_console, show_path=False, show_time=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else level.upper())
    root.propagate = False


class Runner:
    """Runs external commands one at a time, failing fast."""

    def run(
        self,
        cmd: Sequence[str],
        capture: bool = False,
    ) -> subprocess.CompletedProcess:
        """Run a command and block until it exits.

        Args:
            cmd: Command and its arguments
            capture: Capture stdout/stderr instead of inheriting them

        Returns:
            CompletedProcess instance

        Raises:
            ExternalProcessError: The command exited non-zero or was not found
        """
        logger.debug("Running: %s", shlex.join(cmd))
        try:
            result = subprocess.run(
                list(cmd),
                check=True,
                capture_output=capture,
                text=True,
            )
        except subprocess.CalledProcessError as e:
            raise ExternalProcessError(cmd, e.returncode, e.stderr or e.stdout or "") from e
        except FileNotFoundError as e:
            raise ExternalProcessError(cmd, 127, str(e)) from e
        except PermissionError as e:
            raise ExternalProcessError(cmd, 126, str(e)) from e
        return result


def confirm(msg: str, default: bool = False) -> bool:
    """Ask for user confirmation.

    Args:
        msg: Message to display
        default: Default value if user just presses Enter

    Returns:
        True if confirmed, False otherwise
    """
    suffix = "[Y/n]" if default else "[y/N]"
    try:
        response = console.input(f"{escape(msg)} {escape(suffix)} ").strip().lower()
        if not response:
            return default
        return response in ("y", "yes")
    except (KeyboardInterrupt, EOFError):
        console.print()
        return False


class GateState(enum.Enum):
    """States of a confirm gate."""

    PROMPTED = "prompted"
    CONFIRMED = "confirmed"
    DECLINED = "declined"
    EXECUTING = "executing"
    DONE = "done"


class ConfirmGate:
    """Two-step confirmation guarding a destructive operation.

    PROMPTED -> CONFIRMED -> EXECUTING -> DONE, or PROMPTED -> DECLINED.
    A gate runs at most once.
    """

    def __init__(self, ask: ConfirmFunc, prompt: str, second_prompt: str) -> None:
        self._ask = ask
        self._prompts = (prompt, second_prompt)
        self.state = GateState.PROMPTED

    def run(self, operation: Callable[[], None]) -> bool:
        """Run the operation once both confirmations are given.

        Returns:
            True if the operation ran
        """
        if self.state is not GateState.PROMPTED:
            raise RuntimeError(f"Confirm gate already {self.state.value}")

        if all(self._ask(prompt) for prompt in self._prompts):
            self.state = GateState.CONFIRMED
        else:
            self.state = GateState.DECLINED
            logger.debug("Confirm gate declined")
            return False

        self.state = GateState.EXECUTING
        try:
            operation()
        finally:
            self.state = GateState.DONE
        return True
