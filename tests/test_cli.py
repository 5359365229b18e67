from __future__ import annotations

import json
from pathlib import Path

from crosspoint_settings.cli import main, parse_value
from crosspoint_settings.enums import FontFamily


def test_parse_value_accepts_member_names_and_ints() -> None:
    assert parse_value("font_family", "notosans") == FontFamily.NOTOSANS
    assert parse_value("font_family", "2") == 2
    assert parse_value("screen_margin", "0x10") == 16
    assert parse_value("opds_username", "  spaced ") == "  spaced "


def test_cli_show_without_file_reports_defaults(tmp_path: Path, capsys) -> None:
    rc = main(["--root", str(tmp_path), "show", "--json"])
    out = capsys.readouterr().out
    assert rc == 1
    payload = json.loads(out)
    assert payload["settings"]["font_family"] == 0
    assert payload["derived"]["reader_font_id"] == "bookerly_14"


def test_cli_set_then_show(tmp_path: Path, capsys) -> None:
    assert main(["--root", str(tmp_path), "set", "font_family", "NOTOSANS"]) == 0
    assert main(["--root", str(tmp_path), "set", "font_size", "large"]) == 0
    capsys.readouterr()

    assert main(["--root", str(tmp_path), "show", "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["settings"]["font_family"] == 1
    assert payload["settings"]["font_size"] == 2
    assert payload["derived"]["reader_font_id"] == "notosans_16"


def test_cli_show_masks_password(tmp_path: Path, capsys) -> None:
    assert main(["--root", str(tmp_path), "set", "opds_password", "hunter2"]) == 0
    capsys.readouterr()
    assert main(["--root", str(tmp_path), "show"]) == 0
    out = capsys.readouterr().out
    assert "hunter2" not in out
    assert "********" in out


def test_cli_rejects_bad_values(tmp_path: Path, capsys) -> None:
    assert main(["--root", str(tmp_path), "set", "font_size", "huge"]) == 2
    assert main(["--root", str(tmp_path), "set", "screen_margin", "999"]) == 2
    assert not (tmp_path / ".crosspoint" / "settings.bin").exists()


def test_cli_reset(tmp_path: Path) -> None:
    assert main(["--root", str(tmp_path), "reset"]) == 0
    assert (tmp_path / ".crosspoint" / "settings.bin").is_file()


def test_cli_json_masks_password(tmp_path: Path, capsys) -> None:
    assert main(["--root", str(tmp_path), "set", "opds_password", "hunter2"]) == 0
    capsys.readouterr()
    assert main(["--root", str(tmp_path), "show", "--json"]) == 0
    out = capsys.readouterr().out
    assert "hunter2" not in out
    assert json.loads(out)["settings"]["opds_password"] == "********"


def test_cli_set_over_unreadable_file_keeps_a_backup(tmp_path: Path, capsys) -> None:
    path = tmp_path / ".crosspoint" / "settings.bin"
    path.parent.mkdir(parents=True)
    newer = bytes([2, 40]) + bytes(40)
    path.write_bytes(newer)

    assert main(["--root", str(tmp_path), "set", "font_size", "large"]) == 0
    err = capsys.readouterr().err
    assert "backed up" in err

    baks = list(path.parent.glob("settings.bin.bak.*"))
    assert len(baks) == 1
    assert baks[0].read_bytes() == newer
