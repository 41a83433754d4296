"""Unit tests for :mod:`gerbil.config`."""

import pytest

from gerbil import config
from gerbil.errors import InvalidReportSinkError


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, "console"),
        ("", "console"),
        ("console", "console"),
        ("LOGGING", "logging"),
        ("  logging ", "logging"),
    ],
)
def test_get_report_sink(monkeypatch, value, expected):
    """The sink is read case-insensitively and defaults to the console."""
    if value is None:
        monkeypatch.delenv(config.REPORT_SINK_ENV, raising=False)
    else:
        monkeypatch.setenv(config.REPORT_SINK_ENV, value)
    assert config.get_report_sink() == expected


def test_get_report_sink_rejects_unknown(monkeypatch):
    """An unknown sink raises InvalidReportSinkError."""
    monkeypatch.setenv(config.REPORT_SINK_ENV, "syslog")
    with pytest.raises(InvalidReportSinkError) as excinfo:
        config.get_report_sink()
    assert excinfo.value.sink == "syslog"


def test_default_log_path(monkeypatch, tmp_path):
    """The flight recorder defaults to latest.log in the user log directory."""
    calls = []

    def fake_user_log_dir(appname, **kwargs):
        calls.append((appname, kwargs))
        return str(tmp_path)

    monkeypatch.setattr(config, "user_log_dir", fake_user_log_dir)

    assert config.default_log_path() == tmp_path / "latest.log"
    assert calls == [("gerbil", {"appauthor": False, "ensure_exists": True})]


def test_reserved_hooks():
    """The four hook names, in lifecycle order."""
    assert config.RESERVED_HOOKS == ("setup", "before", "after", "cleanup")
