import logging

import pytest

from niri_launcher.entry import Entry, OpenType
from niri_launcher.errors import CompositorError, DispatchError, IPCConnectionError, WindowIdError
from niri_launcher.launch import graphical_command, launch_and_record, launch_entry, parse_window_id
from niri_launcher.usage import UsageTracker

from tests.conftest import FakeClient

TERMINAL = ["foot", "-e"]


def test_graphical_drops_field_codes(fake_client):
    launch_entry(Entry("Firefox", "firefox --new-window %u", "firefox"), fake_client)
    assert fake_client.spawned == [["firefox", "--new-window"]]


def test_graphical_with_empty_exec_still_spawns(fake_client):
    launch_entry(Entry("Nothing", "%F", "x"), fake_client)
    assert fake_client.spawned == [[]]


def test_graphical_command_splits_on_whitespace():
    assert graphical_command("  env  FOO=1\tapp  %U --x=%k ") == ["env", "FOO=1", "app"]


def test_terminal_passes_exec_unsplit(fake_client):
    launch_entry(Entry("htop", "htop --tree -d 5", "htop", OpenType.TERMINAL), fake_client, terminal=TERMINAL)
    assert fake_client.spawned == [["foot", "-e", "htop --tree -d 5"]]


def test_terminal_default_from_environment(monkeypatch, fake_client):
    monkeypatch.setenv("NIRI_LAUNCHER_TERMINAL", "kitty --single-instance")
    launch_entry(Entry("htop", "htop", "htop", OpenType.TERMINAL), fake_client)
    assert fake_client.spawned == [["kitty", "--single-instance", "htop"]]


def test_window_is_focused(fake_client):
    launch_entry(Entry("Mail", "18446744073709551615", "x", OpenType.WINDOW), fake_client)
    assert fake_client.focused == [2**64 - 1]
    assert fake_client.spawned == []


@pytest.mark.parametrize("bad", ["abc", "", "-1", "1.5", " 12", "18446744073709551616", "0x10"])
def test_malformed_window_id_never_reaches_niri(fake_client, bad):
    with pytest.raises(WindowIdError):
        launch_entry(Entry("Mail", bad, "x", OpenType.WINDOW), fake_client)
    assert fake_client.focused == []


def test_parse_window_id():
    assert parse_window_id("0") == 0
    assert parse_window_id("+7") == 7


@pytest.mark.parametrize("error", [IPCConnectionError("down"), CompositorError("nope")])
def test_transport_failures_become_dispatch_errors(error):
    client = FakeClient(error=error)
    with pytest.raises(DispatchError) as info:
        launch_entry(Entry("Firefox", "firefox", "firefox"), client)
    assert info.value.__cause__ is error


def test_launch_and_record_counts_applications(tmp_path, fake_client):
    tracker = UsageTracker(path=str(tmp_path / "usage.dat"))
    launch_and_record(Entry("Firefox", "firefox", "firefox"), tracker, fake_client)
    assert tracker.get_stats("Firefox").use_count == 1
    assert UsageTracker.load(tracker.path).get_stats("Firefox").use_count == 1


def test_launch_and_record_skips_windows(tmp_path, fake_client):
    tracker = UsageTracker(path=str(tmp_path / "usage.dat"))
    launch_and_record(Entry("Mail", "4", "x", OpenType.WINDOW), tracker, fake_client)
    assert len(tracker) == 0
    assert fake_client.focused == [4]


def test_launch_and_record_does_not_record_failures(tmp_path):
    tracker = UsageTracker(path=str(tmp_path / "usage.dat"))
    with pytest.raises(DispatchError):
        launch_and_record(Entry("Firefox", "firefox", "firefox"), tracker, FakeClient(error=IPCConnectionError("x")))
    assert len(tracker) == 0


def test_launch_and_record_survives_save_failure(tmp_path, fake_client, caplog):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    tracker = UsageTracker(path=str(blocker / "usage.dat"))
    with caplog.at_level(logging.WARNING, logger="niri_launcher.launch"):
        launch_and_record(Entry("Firefox", "firefox", "firefox"), tracker, fake_client)
    assert tracker.get_stats("Firefox").use_count == 1
    assert "Failed to save usage data" in caplog.text
