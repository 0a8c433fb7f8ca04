"""
In-place minification of exported images.

svg goes through scour, png and jpg are re-encoded with Pillow. A file is only
rewritten when the result is actually smaller.
"""
import io
import logging
import pathlib
from typing import Optional

from PIL import Image
from scour import scour

from .models import CompressionStats, SUPPORTED_FORMATS
from .storage import folder_size

logger = logging.getLogger(__name__)

JPEG_QUALITY = 84


def _minify_svg(data: bytes) -> bytes:
    return scour.scourString(data.decode('utf-8')).encode('utf-8')


def _minify_raster(data: bytes, fmt: str) -> bytes:
    with Image.open(io.BytesIO(data)) as img:
        img.load()
        out = io.BytesIO()
        if fmt == 'jpg':
            if img.mode not in ('RGB', 'L'):
                img = img.convert('RGB')
            img.save(out, format='JPEG', quality=JPEG_QUALITY, optimize=True)
        else:
            img.save(out, format='PNG', optimize=True)
        return out.getvalue()


def compress_file(path: pathlib.Path) -> Optional[int]:
    """Minify one file in place. Returns bytes saved, or None if left untouched."""
    fmt = path.suffix.lower().lstrip('.')
    if fmt not in SUPPORTED_FORMATS:
        return None
    original = path.read_bytes()
    if fmt == 'svg':
        minified = _minify_svg(original)
    else:
        minified = _minify_raster(original, fmt)
    if len(minified) >= len(original):
        logger.debug('%s: already minimal (%d bytes)', path.name, len(original))
        return None
    path.write_bytes(minified)
    return len(original) - len(minified)


def compress(directory: pathlib.Path) -> CompressionStats:
    """Minify every svg/png/jpg directly inside directory; sizes are measured recursively."""
    before = folder_size(directory)
    for path in sorted(directory.iterdir()):
        if path.is_file():
            saved = compress_file(path)
            if saved:
                logger.debug('%s: -%d bytes', path.name, saved)
    after = folder_size(directory)
    return CompressionStats(bytes_before=before, bytes_after=after)
