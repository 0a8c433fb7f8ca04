"""
Utility functions shared across the package.
"""
import json
import pathlib
import re
from typing import Any
from urllib.parse import urlparse

_FLATTEN_RE = re.compile(r'[/.]')
_BYTE_UNITS = ['Bytes', 'KB', 'MB', 'GB', 'TB']


def write_json(path: pathlib.Path, data: Any) -> None:
    """Write JSON data to file with pretty formatting."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding='utf-8')


def flatten_name(name: str, char: str = '_') -> str:
    """Replace '/' and '.' so layer paths like 'icons/home' become one file name."""
    return _FLATTEN_RE.sub(char, name or '')


def convert_bytes(num: int) -> str:
    """Human readable size, e.g. 2048 -> '2.0 KB'."""
    if not num:
        return 'n/a'
    i = 0
    while i < len(_BYTE_UNITS) - 1 and num >= 1024 ** (i + 1):
        i += 1
    if i == 0:
        return f'{num} {_BYTE_UNITS[0]}'
    return f'{num / 1024 ** i:.1f} {_BYTE_UNITS[i]}'


def extract_file_key(value: str) -> str:
    """Accept either a bare file key or a figma.com/file|design/<key>/... URL."""
    if '/' not in value:
        return value
    parts = [p for p in urlparse(value).path.split('/') if p]
    for marker in ('design', 'file'):
        if marker in parts:
            idx = parts.index(marker)
            if idx + 1 < len(parts):
                return parts[idx + 1]
    raise ValueError(f'Could not parse Figma file key from URL: {value}')


def figma_file_url(file_id: str) -> str:
    return f'https://www.figma.com/file/{file_id}/'
