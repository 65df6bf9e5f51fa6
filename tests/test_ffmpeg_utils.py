import sys

import ffmpeg

from opus_finalizer.utils import ffmpeg_utils
from opus_finalizer.utils.ffmpeg_utils import format_cmd, probe_stream_codec, run_cmd


def test_run_cmd_captures_output():
    res = run_cmd([sys.executable, "-c", "import sys; print('out'); print('err', file=sys.stderr)"])

    assert res.returncode == 0
    assert res.stdout.strip() == "out"
    assert res.stderr.strip() == "err"


def test_run_cmd_respects_cwd(tmp_path):
    res = run_cmd([sys.executable, "-c", "import os; print(os.getcwd())"], cwd=tmp_path)

    assert res.stdout.strip() == str(tmp_path)


def test_run_cmd_missing_executable_returns_none():
    assert run_cmd(["definitely-not-a-real-tool-4711", "--version"]) is None


def test_run_cmd_empty_command_returns_none():
    assert run_cmd([]) is None


def test_format_cmd_quotes_spaces():
    if sys.platform != "win32":
        assert format_cmd(["kid3-cli", "-c", "set picture:a b.jpg"]) == "kid3-cli -c 'set picture:a b.jpg'"


def test_probe_stream_codec_lowercases(monkeypatch, tmp_path):
    calls = []

    def fake_probe(filename, cmd="ffprobe", **kwargs):
        calls.append(kwargs)
        return {"streams": [{"codec_name": "MJPEG"}]}

    monkeypatch.setattr(ffmpeg_utils.ffmpeg, "probe", fake_probe)

    assert probe_stream_codec(tmp_path / "a.opus", "v:0") == "mjpeg"
    assert calls == [{"select_streams": "v:0"}]


def test_probe_stream_codec_without_stream(monkeypatch, tmp_path):
    monkeypatch.setattr(ffmpeg_utils.ffmpeg, "probe", lambda *args, **kwargs: {"streams": []})

    assert probe_stream_codec(tmp_path / "a.opus", "v:0") is None


def test_probe_stream_codec_probe_error(monkeypatch, tmp_path):
    def failing_probe(*args, **kwargs):
        raise ffmpeg.Error("ffprobe", b"", b"Invalid data found when processing input")

    monkeypatch.setattr(ffmpeg_utils.ffmpeg, "probe", failing_probe)

    assert probe_stream_codec(tmp_path / "a.opus", "a:0") is None
