"""Console collaborators of the traversal engine.

The engine writes matched entries to an OutputSink, keeps a busy
indicator spinning while pages are fetched and asks a Prompter before
descending into another level. Each is passed in explicitly so the
engine holds no global state and can be driven by test doubles.
"""

import logging
import sys
from abc import ABC, abstractmethod
from typing import Any, Optional, TextIO

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.prompt import Confirm

from ._common.config import PresentationOptions
from ._common.render import format_entry

logger = logging.getLogger(__name__)


class OutputSink:
    """Log-style sink for listing output and user-facing warnings.

    Streams default to the current ``sys.stdout`` / ``sys.stderr`` at
    write time so redirection and capture keep working.
    """

    def __init__(self, out: Optional[TextIO] = None, err: Optional[TextIO] = None):
        self._out = out
        self._err = err

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    @property
    def err(self) -> TextIO:
        return self._err if self._err is not None else sys.stderr

    def logf(self, fmt: str, *args: Any) -> None:
        """Formatted write to the output stream, no newline added."""
        self.out.write(fmt % args if args else fmt)

    def logln(self, *args: Any) -> None:
        """Plain newline-terminated write to the output stream."""
        self.out.write(" ".join(str(a) for a in args) + "\n")

    def log_errf(self, fmt: str, *args: Any) -> None:
        self.err.write(fmt % args if args else fmt)

    def log_errln(self, *args: Any) -> None:
        self.err.write(" ".join(str(a) for a in args) + "\n")

    def debugf(self, fmt: str, *args: Any) -> None:
        """Diagnostic trace, emitted only when debug logging is enabled."""
        logger.debug(fmt, *args)

    def render(self, entry: Any, opt: PresentationOptions) -> None:
        """Write one formatted entry line."""
        self.logf("%s", format_entry(entry, opt))


class BusyIndicator(ABC):
    """Progress indicator that can be paused around interactive output.

    ``play`` and ``pause`` are idempotent, so any traversal depth can
    pause and resume without counting nesting. ``stop`` is final.
    """

    @abstractmethod
    def play(self) -> None:
        pass

    @abstractmethod
    def pause(self) -> None:
        pass

    @abstractmethod
    def stop(self) -> None:
        pass


class NullIndicator(BusyIndicator):
    """Indicator that shows nothing."""

    def play(self) -> None:
        pass

    def pause(self) -> None:
        pass

    def stop(self) -> None:
        pass


class SpinnerIndicator(BusyIndicator):
    """Transient rich spinner on stderr."""

    def __init__(self, description: str = "Listing…", console: Optional[Console] = None):
        self.description = description
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
            console=console or Console(stderr=True),
        )
        self._task = None
        self._playing = False
        self._stopped = False

    @property
    def playing(self) -> bool:
        return self._playing

    def play(self) -> None:
        if self._stopped or self._playing:
            return
        self._progress.start()
        if self._task is None:
            self._task = self._progress.add_task(self.description, total=None)
        self._playing = True

    def pause(self) -> None:
        if not self._playing:
            return
        self._progress.stop()
        self._playing = False

    def stop(self) -> None:
        self.pause()
        self._stopped = True


def make_indicator(enabled: bool = True) -> BusyIndicator:
    """Spinner when stderr is a terminal and indicators are wanted."""
    if enabled and sys.stderr.isatty():
        return SpinnerIndicator()
    return NullIndicator()


class Prompter(ABC):
    """Decides whether to continue into the next directory level."""

    @abstractmethod
    def can_prompt(self) -> bool:
        pass

    @abstractmethod
    def confirm_continue(self) -> bool:
        pass


class NeverPrompter(Prompter):
    """Never asks; listings run to completion."""

    def can_prompt(self) -> bool:
        return False

    def confirm_continue(self) -> bool:
        return True


class ConsolePrompter(Prompter):
    """Asks on the terminal with a rich confirmation prompt."""

    def __init__(self, message: str = "---More---", console: Optional[Console] = None):
        self.message = message
        self.console = console

    def can_prompt(self) -> bool:
        return sys.stdin.isatty()

    def confirm_continue(self) -> bool:
        answer = Confirm.ask(self.message, default=True, console=self.console)
        logger.debug("continue prompt answered %s", answer)
        return answer
