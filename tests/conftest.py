"""
Shared fixtures.

External tools never run in the test suite. `FakeTools` stands in for
`run_cmd` and `probe_stream_codec` in every service module and simulates
what ffmpeg, ImageMagick, kid3-cli and yt-dlp would do to the filesystem.
"""

import shlex
import subprocess
from pathlib import Path
from typing import Optional

import pytest

from opus_finalizer.config.audio import TEMP_TRANSCODE_SUFFIX
from opus_finalizer.domain.models import BatchConfig
from opus_finalizer.services import (
    cover_injector,
    cover_resolver,
    downloader,
    transcoder,
    verifier,
)

OPUS_MAGIC = b"OPUS:"

RUN_CMD_MODULES = (cover_resolver, transcoder, cover_injector, verifier, downloader)
PROBE_MODULES = (cover_resolver, verifier)


def _base_name(path: Path) -> str:
    name = path.name
    if name.endswith(TEMP_TRANSCODE_SUFFIX):
        return name[: -len(TEMP_TRANSCODE_SUFFIX)]
    return path.stem


class FakeTools:
    """
    Simulated external tools.

    Configure behavior per track base name:
        covers: base name -> bytes of the embedded cover picture.
        broken_covers: base names announcing a picture ffmpeg cannot extract.
        fail_transcode / corrupt_output / fail_crop / fail_inject: base names
            for which that stage fails.
    After a run, `injected` maps base name -> cover bytes kid3-cli embedded,
    and `calls` lists every command in order.
    """

    def __init__(self):
        self.covers: dict[str, bytes] = {}
        self.broken_covers: set[str] = set()
        self.fail_transcode: set[str] = set()
        self.corrupt_output: set[str] = set()
        self.fail_crop: set[str] = set()
        self.fail_inject: set[str] = set()
        self.fail_download = False
        self.square_side = "360"
        self.injected: dict[str, bytes] = {}
        self.calls: list[list[str]] = []

    # --- helpers ---
    @staticmethod
    def _done(cmd, returncode=0, stdout="", stderr=""):
        return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr=stderr)

    @staticmethod
    def _input_of(cmd) -> Path:
        return Path(cmd[cmd.index("-i") + 1])

    def commands(self, tool: str) -> list[list[str]]:
        return [c for c in self.calls if c[0] == tool]

    # --- stand-ins ---
    def run_cmd(self, cmd_list, src_file_for_log=Path(), show_cmd=False, cwd=None):
        cmd = [str(c) for c in cmd_list]
        self.calls.append(cmd)
        tool = cmd[0]
        if tool == "ffmpeg":
            if "-vcodec" in cmd:
                return self._extract(cmd)
            if "-c:a" in cmd:
                return self._transcode(cmd)
            if "null" in cmd:
                return self._decode_check(cmd)
        if tool == "magick":
            if cmd[1] == "identify":
                return self._identify(cmd)
            return self._crop(cmd)
        if tool == "kid3-cli":
            return self._inject(cmd, Path(cwd))
        if tool == "yt-dlp":
            if self.fail_download:
                return self._done(cmd, 1, stderr="ERROR: Unsupported URL")
            return self._done(cmd)
        raise AssertionError(f"unexpected command {cmd}")

    def probe_stream_codec(self, path: Path, stream_selector: str) -> Optional[str]:
        if stream_selector == "v:0":
            base = _base_name(path)
            return "mjpeg" if base in self.covers or base in self.broken_covers else None
        if stream_selector == "a:0":
            if path.is_file() and path.read_bytes().startswith(OPUS_MAGIC):
                return "opus"
            return None
        raise AssertionError(f"unexpected selector {stream_selector}")

    # --- tool behavior ---
    def _extract(self, cmd):
        source, output = self._input_of(cmd), Path(cmd[-1])
        base = _base_name(source)
        if base in self.covers:
            output.write_bytes(self.covers[base])
            return self._done(cmd)
        if base in self.broken_covers:
            return self._done(cmd, 1, stderr="Invalid data found when processing input")
        return self._done(cmd, 1, stderr="Output file does not contain any stream")

    def _transcode(self, cmd):
        source, output = self._input_of(cmd), Path(cmd[-1])
        base = _base_name(source)
        if base in self.fail_transcode:
            output.write_bytes(b"half-written")
            return self._done(cmd, 1, stderr="Error while encoding")
        payload = OPUS_MAGIC + source.read_bytes()
        if base in self.corrupt_output:
            payload = b"garbage"
        output.write_bytes(payload)
        return self._done(cmd)

    def _decode_check(self, cmd):
        target = self._input_of(cmd)
        if not target.read_bytes().startswith(OPUS_MAGIC):
            return self._done(cmd, 1, stderr="Invalid data found when processing input")
        return self._done(cmd)

    def _identify(self, cmd):
        image = Path(cmd[-1].removesuffix("[0]"))
        if image.stem.split(".")[0] in self.fail_crop:
            return self._done(cmd, 1, stderr="identify: improper image header")
        return self._done(cmd, stdout=self.square_side)

    def _crop(self, cmd):
        image, output = Path(cmd[1].removesuffix("[0]")), Path(cmd[-1])
        output.write_bytes(image.read_bytes())
        return self._done(cmd)

    def _inject(self, cmd, cwd: Path):
        target = cwd / cmd[-1]
        # kid3-cli splits its command on unquoted whitespace, like a shell.
        tokens = shlex.split(cmd[2])
        if len(tokens) != 3 or tokens[0] != "set" or not tokens[1].startswith("picture:"):
            return self._done(cmd, 1, stderr=f"unexpected kid3-cli command {tokens}")
        picture_name = tokens[1].split(":", 1)[1]
        picture = cwd / picture_name
        base = _base_name(target)
        if base in self.fail_inject or not picture.is_file() or not target.is_file():
            return self._done(cmd, 1, stderr="could not set picture")
        self.injected[base] = picture.read_bytes()
        return self._done(cmd)


@pytest.fixture
def fake_tools(monkeypatch) -> FakeTools:
    tools = FakeTools()
    for module in RUN_CMD_MODULES:
        monkeypatch.setattr(module, "run_cmd", tools.run_cmd)
    for module in PROBE_MODULES:
        monkeypatch.setattr(module, "probe_stream_codec", tools.probe_stream_codec)
    return tools


@pytest.fixture
def working_dir(tmp_path) -> Path:
    path = tmp_path / "_yt-dlp"
    path.mkdir()
    return path


@pytest.fixture
def destination_dir(tmp_path) -> Path:
    return tmp_path / "yt-dlp"


@pytest.fixture
def make_config(working_dir, destination_dir):
    def _make(**overrides) -> BatchConfig:
        values = dict(
            bitrate="64k",
            skip_download=True,
            skip_cover_art=False,
            collection_mode=False,
            working_dir=working_dir,
            destination_dir=destination_dir,
        )
        values.update(overrides)
        return BatchConfig(**values)

    return _make


@pytest.fixture
def config(make_config) -> BatchConfig:
    return make_config()


@pytest.fixture
def add_track(working_dir):
    def _add(name: str, content: bytes = b"audio") -> Path:
        path = working_dir / name
        path.write_bytes(content)
        return path

    return _add
