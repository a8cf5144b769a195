"""
Pytest configuration and shared fixtures.
"""

import struct
import pytest
from io import BytesIO
from pathlib import Path
from typing import Optional
from PIL import Image
from mutagen.flac import FLAC
from mutagen.id3 import ID3, TIT2, TPE1, TALB, COMM, APIC, Encoding, PictureType

from tagfill.utils import Config

# ---------- Constants ----------

# One MPEG-1 Layer III frame header followed by silence
MP3_AUDIO = b'\xFF\xFB\x90\x00' + b'\x00' * 1024

ORIGINAL = {
    "title": "Original Title",
    "album": "Original Album",
    "artist": ["Original Artist"],
    "comment": "Original Comment",
}

# ---------- Helper Functions ----------

def metadata_block(code: int, payload: bytes, last: bool = False, length: Optional[int] = None) -> bytes:
    """Frame a FLAC metadata block; ``length`` overrides the declared payload size."""
    size = len(payload) if length is None else length
    return bytes([(0x80 if last else 0) | code]) + size.to_bytes(3, 'big') + payload

def flac_bytes(sample_rate: int = 44100, channels: int = 2, bits: int = 16, samples: int = 44100,
               blocks=(), audio: bool = True) -> bytes:
    """
    Build a minimal FLAC stream: marker, STREAMINFO, any extra ``blocks``
    (already framed, the caller flags the last one) and dummy frame data.
    """
    packed = (sample_rate << 44) | ((channels - 1) << 41) | ((bits - 1) << 36) | samples
    streaminfo = (
        struct.pack('>HH', 4096, 4096)
        + b'\x00\x00\x00' + b'\x00\x00\x00'
        + struct.pack('>Q', packed)
        + b'\x00' * 16
    )
    data = b'fLaC' + metadata_block(0, streaminfo, last=not blocks) + b''.join(blocks)
    if audio:
        data += b'\xFF\xF8' + b'\x00' * 1024
    return data

def image_bytes(fmt: str = 'PNG', mode: str = 'RGB', size=(4, 3)) -> bytes:
    """Render a small solid image with Pillow."""
    buf = BytesIO()
    Image.new(mode, size).save(buf, format=fmt)
    return buf.getvalue()

# ---------- Fixtures ----------

@pytest.fixture(autouse=True)
def restore_config():
    """Undo any Config changes a test makes."""
    saved = {k: v for k, v in vars(Config).items() if k.isupper()}
    yield
    for k, v in saved.items():
        setattr(Config, k, v)

@pytest.fixture
def mp3_file(tmp_path) -> Path:
    """An MP3 file with no ID3 tag at all."""
    path = tmp_path / "untagged.mp3"
    path.write_bytes(MP3_AUDIO)
    return path

@pytest.fixture
def tagged_mp3(tmp_path) -> Path:
    """An MP3 file that already carries title, album, artist, comment and a cover."""
    path = tmp_path / "tagged.mp3"
    path.write_bytes(MP3_AUDIO)
    tags = ID3()
    tags.add(TIT2(encoding=Encoding.UTF8, text=[ORIGINAL["title"]]))
    tags.add(TALB(encoding=Encoding.UTF8, text=[ORIGINAL["album"]]))
    tags.add(TPE1(encoding=Encoding.UTF8, text=ORIGINAL["artist"]))
    tags.add(COMM(encoding=Encoding.UTF8, lang='eng', desc='', text=[ORIGINAL["comment"]]))
    tags.add(APIC(encoding=Encoding.LATIN1, mime='image/png', type=PictureType.COVER_FRONT,
                  desc='Front cover', data=image_bytes()))
    tags.save(path)
    return path

@pytest.fixture
def flac_file(tmp_path) -> Path:
    """A FLAC file with only a STREAMINFO block."""
    path = tmp_path / "untagged.flac"
    path.write_bytes(flac_bytes())
    return path

@pytest.fixture
def tagged_flac(tmp_path) -> Path:
    """A FLAC file that already has a Vorbis comment block with title, album and artist."""
    path = tmp_path / "tagged.flac"
    path.write_bytes(flac_bytes())
    audio = FLAC(path)
    audio.add_tags()
    audio['TITLE'] = [ORIGINAL["title"]]
    audio['ALBUM'] = [ORIGINAL["album"]]
    audio['ARTIST'] = ORIGINAL["artist"]
    audio['DESCRIPTION'] = ["keep me"]
    audio.save()
    return path

@pytest.fixture
def png_bytes() -> bytes:
    return image_bytes('PNG')

@pytest.fixture
def jpeg_bytes() -> bytes:
    return image_bytes('JPEG')
