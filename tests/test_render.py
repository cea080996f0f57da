"""Tests for entry line formatting."""

from datetime import datetime

import pytest

from remotetreelib._common.config import PresentationOptions, TypeMask
from remotetreelib._common.render import format_entry, pretty_bytes
from remotetreelib.aio import Entry, Permission
from remotetreelib.testing import CapturingSink


@pytest.fixture
def report():
    return Entry(
        "report", "report.csv", size=120, version=2,
        mod_time=datetime(2015, 1, 1), owner_names=["alice", "bob"],
        user_permission=Permission("owner"),
    )


@pytest.mark.parametrize("size, expected", [
    (0, "0.00B"),
    (120, "120.00B"),
    (1536, "1.50KB"),
    (5 * 1024 ** 3, "5.00GB"),
])
def test_pretty_bytes(size, expected):
    assert pretty_bytes(size) == expected


class TestDiskUsageOnly:

    def test_size_and_path_only(self, report):
        opt = PresentationOptions(disk_usage_only=True, parent="/docs")
        assert format_entry(report, opt) == f"{120:<12} /docs/report.csv\n"

    def test_ignores_owner_and_version_flags(self, report):
        mask = TypeMask.DISK_USAGE_ONLY | TypeMask.OWNERS | TypeMask.VERSION | TypeMask.MINIMAL
        line = format_entry(report, PresentationOptions.from_mask(mask, "/docs"))
        assert "alice" not in line
        assert "v2" not in line
        assert "report\t" not in line
        assert "2015" not in line
        assert line == f"{120:<12} /docs/report.csv\n"


class TestMinimal:

    def test_path_only(self, report):
        opt = PresentationOptions(minimal=True, parent="/docs")
        assert format_entry(report, opt) == "/docs/report.csv\n"

    def test_owners_and_version_still_appended(self, report):
        opt = PresentationOptions(minimal=True, show_owners=True, show_version=True, parent="/docs")
        assert format_entry(report, opt) == "/docs/report.csv alice & bob  v2\n"

    def test_root_parent(self, report):
        opt = PresentationOptions.from_mask(TypeMask.MINIMAL, "/")
        assert format_entry(report, opt) == "/report.csv\n"


class TestFullMode:

    def test_columns(self, report):
        line = format_entry(report, PresentationOptions(parent="/docs"))
        assert line.startswith("-- owner      ")
        assert f" {'120.00B':<10}\t{'report':<10}\t\t" in line
        assert str(datetime(2015, 1, 1)) in line
        assert line.endswith("\t/docs/report.csv\n")

    def test_directory_and_shared_flags(self):
        folder = Entry("d1", "docs", is_dir=True, shared=True)
        line = format_entry(folder, PresentationOptions())
        assert line.startswith("ds ")
        assert line.endswith("\t/docs\n")

    def test_owners_and_version_columns(self, report):
        opt = PresentationOptions(show_owners=True, show_version=True, parent="")
        line = format_entry(report, opt)
        assert " alice & bob  v2 " in line


def test_sink_render_writes_line(report):
    sink = CapturingSink()
    sink.render(report, PresentationOptions(minimal=True, parent=""))
    sink.logf("%s-%d\n", "x", 1)
    sink.logln("done", 2)
    assert sink.lines == ["/report.csv", "x-1", "done 2"]
    assert sink.errors == ""
