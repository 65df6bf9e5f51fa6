import dataclasses

import pytest

from opus_finalizer.domain.models import (
    BatchCoverMemory,
    CoverArtState,
    CoverOutcome,
    ErrorKind,
    ErrorRecord,
    Track,
)


def test_track_paths_are_derived_from_base_name(config, working_dir, destination_dir):
    track = Track.from_path(working_dir / "Artist -- Album -- 01 -- Song.mp3", config)

    assert track.base_name == "Artist -- Album -- 01 -- Song"
    assert track.temp_path == working_dir / "Artist -- Album -- 01 -- Song.tmp.opus"
    assert track.destination_path == destination_dir / "Artist -- Album -- 01 -- Song.opus"
    assert track.cropped_cover_path == working_dir / "Artist -- Album -- 01 -- Song.cover.jpg"
    assert track.extracted_cover_path("png") == working_dir / "Artist -- Album -- 01 -- Song.cover.tmp.png"


def test_track_naming_is_idempotent(config, working_dir):
    first = Track.from_path(working_dir / "song.flac", config)
    second = Track.from_path(working_dir / "song.flac", config)

    assert first == second
    assert first.temp_path == second.temp_path
    assert first.destination_path == second.destination_path


def test_track_and_config_are_immutable(config, working_dir):
    track = Track.from_path(working_dir / "song.opus", config)

    with pytest.raises(dataclasses.FrozenInstanceError):
        track.base_name = "other"
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.bitrate = "128k"


def test_transient_cover_paths_handle_brackets(config, working_dir):
    track = Track.from_path(working_dir / "Song [Official Audio].opus", config)
    extracted = track.extracted_cover_path("webp")
    extracted.write_bytes(b"img")
    (working_dir / "Other.cover.tmp.jpg").write_bytes(b"img")

    paths = track.transient_cover_paths()

    assert extracted in paths
    assert track.cropped_cover_path in paths
    assert working_dir / "Other.cover.tmp.jpg" not in paths


def test_cover_state_availability():
    assert not CoverArtState().is_available
    assert not CoverArtState(outcome=CoverOutcome.EXTRACTED).is_available
    assert CoverArtState(outcome=CoverOutcome.FALLBACK_USED, cropped_path=object()).is_available


def test_cover_memory_starts_empty(working_dir):
    memory = BatchCoverMemory(working_dir)

    assert memory.path is None
    assert not memory.is_usable


def test_cover_memory_remember_copies_into_fallback(working_dir):
    cropped = working_dir / "a.cover.jpg"
    cropped.write_bytes(b"cover-a")
    memory = BatchCoverMemory(working_dir)

    assert memory.remember(cropped)
    cropped.unlink()

    assert memory.is_usable
    assert memory.path.name == "cover.fallback.jpg"
    assert memory.path.read_bytes() == b"cover-a"


def test_cover_memory_failed_remember_keeps_previous(working_dir):
    cropped = working_dir / "a.cover.jpg"
    cropped.write_bytes(b"cover-a")
    memory = BatchCoverMemory(working_dir)
    memory.remember(cropped)

    assert not memory.remember(working_dir / "missing.cover.jpg")

    assert memory.is_usable
    assert memory.path.read_bytes() == b"cover-a"


def test_cover_memory_discard_removes_file(working_dir):
    cropped = working_dir / "a.cover.jpg"
    cropped.write_bytes(b"cover-a")
    memory = BatchCoverMemory(working_dir)
    memory.remember(cropped)

    memory.discard()
    memory.discard()

    assert not (working_dir / "cover.fallback.jpg").exists()


def test_error_record_render_names_stage_and_track(config, working_dir):
    track = Track.from_path(working_dir / "song.mp3", config)
    record = ErrorRecord(track=track, kind=ErrorKind.TRANSCODE_FAILED, message="ffmpeg exited with 1")

    assert record.render() == "[transcode] song.mp3: ffmpeg exited with 1"
