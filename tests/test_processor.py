"""Tests for one-shot file tagging."""

from mutagen.flac import FLAC
from mutagen.id3 import ID3

from tagfill import fill_file

from conftest import ORIGINAL

def test_fill_mp3(mp3_file, png_bytes):
    """Every field in the mapping is applied and the cover MIME is sniffed."""
    result = fill_file(mp3_file, {
        "title": "Title",
        "album": "Album",
        "artist": "A; B",
        "comment": "Comment",
        "cover": png_bytes,
    })

    assert result['passed'] is True
    assert result['error'] is None
    assert result['format'] == 'mp3'
    assert result['requested'] == ['title', 'album', 'artist', 'comment', 'cover']

    tags = ID3(mp3_file)
    assert tags['TIT2'].text == ["Title"]
    assert tags['TPE1'].text == ["A", "B"]
    assert tags.getall('APIC')[0].mime == "image/png"

def test_fill_flac_with_cover_url(flac_file):
    result = fill_file(flac_file, {
        "title": "Title",
        "artist": ["A", "B"],
        "comment": "dropped",
        "cover_url": "https://x/y.jpg",
    })

    assert result['passed'] is True
    audio = FLAC(flac_file)
    assert audio['ARTIST'] == ["A", "B"]
    assert 'COMMENT' not in audio.tags
    assert audio.pictures[0].mime == "-->"

def test_existing_tags_win(tagged_mp3):
    result = fill_file(tagged_mp3, {"title": "New"})
    assert result['passed'] is True
    assert ID3(tagged_mp3)['TIT2'].text == [ORIGINAL["title"]]

def test_explicit_format_overrides_extension(tmp_path, flac_file):
    renamed = tmp_path / "audio.bin"
    flac_file.rename(renamed)

    result = fill_file(renamed, {"title": "Title"}, fmt="FLAC")
    assert result['passed'] is True
    assert FLAC(renamed)['TITLE'] == ["Title"]

def test_bad_cover_is_a_warning(flac_file):
    """An unusable cover is reported but the text fields are still written."""
    result = fill_file(flac_file, {
        "title": "Title",
        "cover": b"not an image",
        "cover_mime": "image/png",
    })

    assert result['passed'] is True
    assert len(result['warnings']) == 1
    assert result['warnings'][0].startswith('cover:')
    audio = FLAC(flac_file)
    assert audio['TITLE'] == ["Title"]
    assert audio.pictures == []

def test_unrecognised_cover_without_mime(mp3_file):
    result = fill_file(mp3_file, {"cover": b"not an image"})
    assert result['passed'] is True
    assert result['warnings'] == ['cover: unrecognised image data']
    assert result['requested'] == []

def test_unsupported_format(tmp_path):
    path = tmp_path / "song.ogg"
    path.write_bytes(b"OggS" + b"\x00" * 32)

    result = fill_file(path, {"title": "Title"})
    assert result['passed'] is False
    assert "not supported" in result['error']

def test_malformed_file(tmp_path):
    path = tmp_path / "fake.flac"
    path.write_bytes(b"RIFF" + b"\x00" * 64)

    result = fill_file(path, {"title": "Title"})
    assert result['passed'] is False
    assert result['error']
