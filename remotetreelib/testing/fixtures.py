"""Test fixtures for RemoteTreeLib consumers.

These doubles stand in for the terminal: a sink that captures lines, an
indicator that records its calls, and a prompter that replays scripted
answers. None of them touch a real terminal.
"""

import io
from typing import Iterable, List, Optional

from ..aio.adapters.memory import MemoryDrive
from ..console import BusyIndicator, OutputSink, Prompter


class CapturingSink(OutputSink):
    """OutputSink writing into in-memory buffers.

    Example:
        sink = CapturingSink()
        await RemoteLister(drive, options, sink=sink).list()
        assert sink.lines == ["/docs/report.csv"]
    """

    def __init__(self):
        super().__init__(out=io.StringIO(), err=io.StringIO())

    @property
    def output(self) -> str:
        return self.out.getvalue()

    @property
    def errors(self) -> str:
        return self.err.getvalue()

    @property
    def lines(self) -> List[str]:
        """Output lines without trailing newlines."""
        return self.output.splitlines()


class RecordingIndicator(BusyIndicator):
    """Indicator recording every call it receives."""

    def __init__(self):
        self.calls: List[str] = []
        self.playing = False
        self.stopped = False

    def play(self) -> None:
        self.calls.append("play")
        if not self.stopped:
            self.playing = True

    def pause(self) -> None:
        self.calls.append("pause")
        self.playing = False

    def stop(self) -> None:
        self.calls.append("stop")
        self.playing = False
        self.stopped = True


class ScriptedPrompter(Prompter):
    """Prompter replaying a fixed list of answers.

    Once the script runs out, ``default`` is returned.
    """

    def __init__(self, answers: Optional[Iterable[bool]] = None, default: bool = True,
                 interactive: bool = True, indicator: Optional[RecordingIndicator] = None):
        self.answers = list(answers or [])
        self.default = default
        self.interactive = interactive
        self.indicator = indicator
        self.asked = 0
        self.playing_when_asked: List[bool] = []

    def can_prompt(self) -> bool:
        return self.interactive

    def confirm_continue(self) -> bool:
        self.asked += 1
        if self.indicator is not None:
            self.playing_when_asked.append(self.indicator.playing)
        if self.answers:
            return self.answers.pop(0)
        return self.default


def build_sample_drive(page_delay: float = 0.0) -> MemoryDrive:
    """A small drive used across the test suite.

    Structure::

        My Drive
        ├── docs/
        │   ├── report.csv         (120 bytes, v2)
        │   ├── report.csv.bak     (80 bytes)
        │   ├── .secret            (hidden)
        │   └── archive/
        │       └── 2014/
        │           └── old.txt
        ├── photos/
        │   └── cat.png            (image/png, shared)
        └── notes.txt
    """
    drive = MemoryDrive(page_delay=page_delay)
    docs = drive.add_folder("root", "docs", id="docs")
    drive.add_file(docs.id, "report.csv", id="report", size=120, version=2,
                   mime_type="text/csv", owner_names=["alice"])
    drive.add_file(docs.id, "report.csv.bak", id="report-bak", size=80,
                   owner_names=["bob"])
    drive.add_file(docs.id, ".secret", id="secret", size=1)
    archive = drive.add_folder(docs.id, "archive", id="archive")
    year = drive.add_folder(archive.id, "2014", id="y2014")
    drive.add_file(year.id, "old.txt", id="old", size=10)
    photos = drive.add_folder("root", "photos", id="photos")
    drive.add_file(photos.id, "cat.png", id="cat", size=2048, mime_type="image/png",
                   shared=True, owner_names=["carol"])
    drive.add_file("root", "notes.txt", id="notes", size=5)
    return drive
