from __future__ import annotations

import runpy
from pathlib import Path

import pytest

from sample_shrinker import cli
from sample_shrinker.application.shrink_service import ShrinkSample
from sample_shrinker.interfaces import cli_handlers


@pytest.fixture(autouse=True)
def _in_tmp_path(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def fake_service(monkeypatch, fake_tool):
    monkeypatch.setattr(
        cli_handlers,
        "build_service",
        lambda context: ShrinkSample(context=context, tool=fake_tool),
    )
    return fake_tool


def test_help_exits_zero(capsys) -> None:
    assert cli.main(["-h"]) == 0

    out = capsys.readouterr().out
    assert "Usage" in out
    assert "-b" in out


def test_missing_inputs_is_a_usage_error(capsys) -> None:
    assert cli.main([]) == 1

    assert "At least one FILE or DIRECTORY" in capsys.readouterr().err


@pytest.mark.parametrize("flag", ["-b", "-B"])
def test_invalid_bit_depth_exits_one(flag: str, capsys, write_sample) -> None:
    write_sample(Path("kick.wav"))

    assert cli.main([flag, "12", "kick.wav"]) == 1

    assert "got invalid value: '12'" in capsys.readouterr().err


def test_positive_auto_mono_threshold_exits_one(capsys, write_sample) -> None:
    write_sample(Path("kick.wav"))

    assert cli.main(["-A5", "kick.wav"]) == 1

    assert "auto_mono_threshold_db" in capsys.readouterr().err


def test_options_after_paths_are_rejected(capsys, write_sample) -> None:
    write_sample(Path("samples/kick.wav"))

    assert cli.main(["samples", "-n"]) == 1

    assert "options must be provided before" in capsys.readouterr().err


def test_list_mode_reports_pending_changes(capsys, write_sample) -> None:
    write_sample(Path("samples/kick.wav"), subtype="PCM_24")
    write_sample(Path("samples/snare.wav"), subtype="PCM_16")

    assert cli.main(["-l", "samples"]) == 0

    out = capsys.readouterr().out
    lines = out.splitlines()
    assert lines[0].startswith("24->16")
    assert lines[0].endswith("samples/kick.wav [CHANGE]")
    assert lines[1].endswith("samples/snare.wav")
    assert "Summary: total=2 skipped=0 listed=2" in out
    assert Path("samples/kick.wav").exists()
    assert not Path("_backup").exists()


def test_dry_run_prints_commands(capsys, write_sample) -> None:
    write_sample(Path("samples/kick.wav"), subtype="PCM_24")

    assert cli.main(["-n", "samples"]) == 0

    out = capsys.readouterr().out
    assert "    sox samples/kick.wav --bits=16 samples/kick.wav" in out
    assert "dry_run=1" in out
    assert not Path("_backup").exists()


def test_invalid_channel_target_is_ignored(capsys, write_sample) -> None:
    write_sample(Path("samples/wide.wav"), channels=2, signal="wide")

    assert cli.main(["-c", "3", "-l", "samples"]) == 0

    out = capsys.readouterr().out
    assert "st " in out
    assert "[CHANGE]" not in out


def test_non_numeric_channel_target_is_ignored(capsys, write_sample) -> None:
    write_sample(Path("samples/wide.wav"), channels=2, signal="wide")

    assert cli.main(["-vv", "-c", "abc", "-l", "samples"]) == 0

    captured = capsys.readouterr()
    assert "[CHANGE]" not in captured.out
    assert "Ignoring invalid -c value 'abc'" in captured.err


def test_mono_channel_target_mixes_down_stereo(capsys, write_sample) -> None:
    write_sample(Path("samples/wide.wav"), channels=2, signal="wide")

    assert cli.main(["-c", "1", "-l", "samples"]) == 0

    out = capsys.readouterr().out
    assert "st->m " in out
    assert out.splitlines()[0].endswith("samples/wide.wav [CHANGE]")


def test_convert_mode_backs_up_and_reports(capsys, fake_service, write_sample) -> None:
    write_sample(Path("samples/kick.wav"), subtype="PCM_24")
    write_sample(Path("samples/pad.aif"), file_format="AIFF")

    assert cli.main(["-S", "-d", "originals", "samples", "samples/pad.aif"]) == 0

    out = capsys.readouterr().out
    assert "samples/kick.wav [CHANGED]" in out
    assert "succeeded=2" in out
    assert Path("originals/samples/kick.wav").exists()
    assert Path("originals/samples/pad.aif").exists()
    assert Path("samples/pad.wav").read_bytes() == b"converted"
    assert fake_service.spectrograms == []


def test_backup_directory_is_not_reprocessed(
    capsys, fake_service, write_sample
) -> None:
    write_sample(Path("samples/kick.wav"), subtype="PCM_24")
    write_sample(Path("samples/_backup/old.wav"), subtype="PCM_24")

    assert cli.main(["-S", "-d", "samples/_backup", "samples"]) == 0

    converted = [plan.source_path for plan, _ in fake_service.conversions]
    assert converted == [Path("samples/kick.wav")]


def test_conversion_failures_do_not_change_exit_code(
    capsys, fake_service, write_sample
) -> None:
    write_sample(Path("samples/kick.wav"), subtype="PCM_24")
    fake_service.fail = True

    assert cli.main(["samples"]) == 0

    out = capsys.readouterr().out
    assert "[FAILED] samples/kick.wav error=" in out
    assert "failed=1" in out


def test_yaml_config_supplies_defaults(tmp_path, capsys, write_sample) -> None:
    write_sample(Path("samples/kick.wav"), subtype="PCM_24")
    config_path = tmp_path / "shrink.yaml"
    config_path.write_text("target_bit_depth: 24\nmode: list\n", encoding="utf-8")

    assert cli.main(["--config", str(config_path), "samples"]) == 0
    first = capsys.readouterr().out
    assert "[CHANGE]" not in first

    assert cli.main(["--config", str(config_path), "-b", "8", "samples"]) == 0
    second = capsys.readouterr().out
    assert "24->8" in second


def test_unknown_config_keys_are_rejected(tmp_path, capsys, write_sample) -> None:
    write_sample(Path("kick.wav"))
    config_path = tmp_path / "shrink.json"
    config_path.write_text('{"target_bitdepth": 8}', encoding="utf-8")

    assert cli.main(["--config", str(config_path), "kick.wav"]) == 1

    assert "target_bitdepth" in capsys.readouterr().err


def test_log_file_receives_errors(tmp_path, capsys) -> None:
    Path("broken.wav").write_bytes(b"not audio")
    log_path = tmp_path / "logs" / "shrink.log"

    assert cli.main(["-o", str(log_path), "broken.wav"]) == 0

    text = log_path.read_text(encoding="utf-8")
    assert "[ERROR]  [convert] FAILED (inspection)" in text
    assert "[ERROR]" in capsys.readouterr().err


def test_missing_input_is_skipped_with_warning(capsys, write_sample) -> None:
    write_sample(Path("kick.wav"))

    assert cli.main(["-l", "kick.wav", "missing.wav"]) == 0

    captured = capsys.readouterr()
    assert "SKIPPING: Not a file or directory: 'missing.wav'" in captured.err
    assert "total=1" in captured.out


def test_module_entrypoint_calls_cli_main(monkeypatch) -> None:
    called = {"value": False}

    def fake_main():
        called["value"] = True
        return 0

    monkeypatch.setattr(cli, "main", fake_main)

    with pytest.raises(SystemExit) as exc_info:
        runpy.run_module("sample_shrinker.__main__", run_name="__main__")

    assert called["value"]
    assert exc_info.value.code == 0
