"""
Tests for report folding and serialization.
"""

import json

import pytest

from docs_link_checker.models import Check
from docs_link_checker.report import Report, write_report


def failing(file, line, url, message):
    return Check(file=file, line=line, url=url).fail(message)


def passing(file, line, url):
    return Check(file=file, line=line, url=url).succeed()


def test_passing_checks_are_discarded():
    report = Report()

    assert report.add(passing("a.txt", 1, "https://example.com")) is False
    assert not report
    assert report.to_dict() == {}


def test_later_failure_on_same_line_replaces_earlier():
    report = Report()
    report.add(failing("drivers.txt", 3, "https://github.com/foo/bar", "stale (last commit more than a year ago)"))
    report.add(failing("drivers.txt", 3, "https://example.com/page", "got status code 404"))

    assert len(report) == 1
    assert report.get("drivers.txt", 3) == {"url": "https://example.com/page", "message": "got status code 404"}


def test_json_shape():
    report = Report()
    report.extend([
        failing("b.txt", 10, "https://example.com/x", "unable to resolve"),
        failing("a.rst", 2, "https://example.com/y", "got status code 500"),
        passing("a.rst", 3, "https://example.com/z"),
        failing("a.rst", 1, "https://github.com/o", "malformed github reference"),
    ])

    data = json.loads(report.to_json())

    assert data == {
        "a.rst": {
            "line warnings": {
                "1": {"url": "https://github.com/o", "message": "malformed github reference"},
                "2": {"url": "https://example.com/y", "message": "got status code 500"},
            }
        },
        "b.txt": {
            "line warnings": {
                "10": {"url": "https://example.com/x", "message": "unable to resolve"},
            }
        },
    }
    assert list(report.entries())[0][:2] == ("a.rst", 1)


def test_write_report_to_stdout(capsys):
    report = Report()
    report.add(failing("a.txt", 1, "https://example.com", "got status code 404"))

    write_report(report)

    out = capsys.readouterr().out
    assert json.loads(out)["a.txt"]["line warnings"]["1"]["message"] == "got status code 404"


def test_write_report_to_file(tmp_path, capsys):
    outfile = tmp_path / "results.json"

    write_report(Report(), str(outfile))

    assert json.loads(outfile.read_text()) == {}
    assert capsys.readouterr().out == ""


class TestCheckResolution:

    def test_check_resolves_once(self):
        check = Check(file="a.txt", line=1, url="https://example.com")
        check.fail("got status code 404")

        with pytest.raises(RuntimeError):
            check.succeed()

    def test_failure_needs_a_message(self):
        with pytest.raises(ValueError):
            Check(file="a.txt", line=1, url="https://example.com").fail("")

    def test_ok_iff_message_empty(self):
        ok = passing("a.txt", 1, "https://example.com")
        bad = failing("a.txt", 1, "https://example.com", "unable to resolve")

        assert ok.ok and ok.message == ""
        assert not bad.ok and bad.message
        assert bad.to_dict() == {
            "file": "a.txt", "line": 1, "url": "https://example.com", "ok": False, "message": "unable to resolve",
        }
