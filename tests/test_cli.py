import json
import os
import subprocess
import sys
from pathlib import Path

SRC = Path(__file__).resolve().parent.parent / "src"


def _run_module(*args):
    env = dict(os.environ)
    env["PYTHONPATH"] = str(SRC) + os.pathsep + env.get("PYTHONPATH", "")
    return subprocess.run(
        [sys.executable, "-m", "livelistarr", *args],
        capture_output=True,
        text=True,
        env=env,
    )


def test_sync_help_runs():
    result = _run_module("sync", "--help")

    assert result.returncode == 0
    assert "--json" in result.stdout


def test_auth_help_runs():
    result = _run_module("auth", "--help")

    assert result.returncode == 0
    assert "setup" in result.stdout


def test_help_command_routes_to_subcommand(capsys):
    from livelistarr import main

    assert main(["help", "logs"]) == 0
    assert "list" in capsys.readouterr().out


def test_status_json_before_any_sync(capsys):
    from livelistarr import main

    assert main(["status", "--json"]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["last_sync_at"] is None
    assert data["playlists"] == []


def test_sync_without_config_exits_2(capsys):
    from livelistarr import main

    assert main(["sync", "--json"]) == 2

    data = json.loads(capsys.readouterr().out)
    assert data["status"] == "config_invalid"


def test_sync_end_to_end_exit_0(monkeypatch, capsys, playlists_file):
    import runner
    from fakes import FakeSource, live

    source = FakeSource(live_by_channel={"UCa": [live("v1")]})
    path = playlists_file(
        {"playlists": [{"name": "Launches", "playlistId": "PLa", "channels": ["UCa"]}]}
    )
    monkeypatch.setenv("LIVELISTARR_PLAYLISTS_FILE", str(path))
    monkeypatch.setattr(runner, "_build_source", lambda env: (None, source))

    from livelistarr import main

    assert main(["sync", "--json"]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["summary"]["total_added"] == 1
    assert source.added == [("PLa", "v1")]


def test_auth_check_without_credentials_exits_2():
    from livelistarr import main

    assert main(["auth", "check", "--quiet"]) == 2


def test_logs_list_shows_run_status(tmp_path, capsys):
    from livelistarr import main

    log_dir = tmp_path / "logs" / "sync"
    log_dir.mkdir(parents=True)
    (log_dir / "sync-old.log").write_text("x | RUN_STATUS=auth_invalid\n", encoding="utf-8")

    assert main(["logs", "list"]) == 0

    out = capsys.readouterr().out
    assert "sync-old" in out
    assert "auth_invalid" in out


def test_logs_commands_never_trigger_a_sync(monkeypatch, tmp_path, capsys):
    import runner

    calls = []
    monkeypatch.setattr(runner, "run_once", lambda **kw: calls.append(kw))

    log_dir = tmp_path / "logs" / "auth"
    log_dir.mkdir(parents=True)
    (log_dir / "auth-1.log").write_text("line one\nRUN_STATUS=completed\n", encoding="utf-8")

    from livelistarr import main

    assert main(["logs", "list", "--command", "auth"]) == 0
    assert main(["logs", "show", "auth-1", "--command", "auth"]) == 0

    assert calls == []
    out = capsys.readouterr().out
    assert "auth-1" in out
    assert "line one" in out


def test_logs_command_option_does_not_clobber_dispatch():
    from livelistarr import build_parser

    args = build_parser().parse_args(["logs", "list", "--command", "auth"])

    assert args.command == "logs"
    assert args.log_command == "auth"
