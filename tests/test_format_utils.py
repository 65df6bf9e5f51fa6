import pytest

from opus_finalizer.utils.format_utils import contains_any_extensions, file_size_text, formatted_size


@pytest.mark.parametrize(
    "size, expected",
    [(0, "0 B"), (512, "512 B"), (1536, "1.50 KB"), (2097152, "2 MB")],
)
def test_formatted_size(size, expected):
    assert formatted_size(size) == expected


def test_file_size_text(tmp_path):
    path = tmp_path / "a.opus"
    assert file_size_text(path) == "missing"
    path.write_bytes(b"x" * 10)
    assert file_size_text(path) == "10 B"


def test_contains_any_extensions_ignores_case(tmp_path):
    assert contains_any_extensions(tmp_path / "Song.FLAC", [".flac", "mp3"])
    assert contains_any_extensions(tmp_path / "song.mp3", [".flac", "mp3"])
    assert not contains_any_extensions(tmp_path / "song.opus.part", [".opus"])
    assert not contains_any_extensions(tmp_path / "song.opus", [])
