"""Tests for the command-line interface."""

from pathlib import Path
from unittest.mock import patch

import requests

from wordcamp_gcal.cli import main

FIXTURES = Path(__file__).parent / "fixtures"
SCHEDULE_URL = "https://europe.wordcamp.org/2025/schedule/"


def test_links_from_saved_html(capsys):
    rc = main([SCHEDULE_URL, "--html-file", str(FIXTURES / "schedule.html"), "-f", "links"])
    assert rc == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 4
    assert lines[0].startswith("Contributor Day Kickoff\thttps://calendar.google.com/")


def test_html_output_adds_extension(tmp_path):
    out = tmp_path / "annotated"
    rc = main([SCHEDULE_URL, "--html-file", str(FIXTURES / "schedule.html"), "-o", str(out)])
    assert rc == 0
    assert (tmp_path / "annotated.html").exists()


def test_ics_output(tmp_path):
    out = tmp_path / "talk"
    rc = main(
        [
            "https://us.wordcamp.org/2025/session/scaling-wordpress/",
            "--html-file",
            str(FIXTURES / "session_wcus.html"),
            "-f",
            "ics",
            "-o",
            str(out),
        ]
    )
    assert rc == 0
    assert "BEGIN:VEVENT" in (tmp_path / "talk.ics").read_text(encoding="utf-8")


def test_forced_site_for_local_file(capsys):
    rc = main(
        [
            "file:///saved/schedule.html",
            "--site",
            "wceu-2025",
            "--html-file",
            str(FIXTURES / "schedule.html"),
            "-f",
            "links",
        ]
    )
    assert rc == 0
    assert len(capsys.readouterr().out.splitlines()) == 4


def test_unsupported_url(capsys):
    assert main(["https://example.com/", "-f", "links"]) == 1
    assert "Unsupported page URL" in capsys.readouterr().err


def test_missing_html_file(tmp_path, capsys):
    rc = main([SCHEDULE_URL, "--html-file", str(tmp_path / "nope.html")])
    assert rc == 1
    assert "--html-file not found" in capsys.readouterr().err


def test_fetch_error(capsys):
    with patch(
        "wordcamp_gcal.wordcamp_gcal.requests.get",
        side_effect=requests.ConnectionError("offline"),
    ):
        rc = main([SCHEDULE_URL, "-f", "links"])
    assert rc == 1
    assert "Error fetching page" in capsys.readouterr().err
