"""
Filesystem side of an export run: streaming downloads, folder sizes and the debug dump.
"""
import logging
import pathlib
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Sequence, Tuple

import requests

from .errors import DownloadError
from .models import ResolvedAsset
from .utils import write_json

logger = logging.getLogger(__name__)

SAVE_ERROR_SUFFIX = 'Error saving images to filesystem'
CHUNK_SIZE = 64 * 1024


def write_stream(
    url: str,
    filename: str,
    output_dir: pathlib.Path,
    session: Optional[requests.Session] = None,
    timeout: float = 120,
) -> Optional[pathlib.Path]:
    """Stream url into output_dir/filename. Returns None when the source is not 200."""
    getter = session or requests
    res = getter.get(url, stream=True, timeout=timeout)
    try:
        if res.status_code != 200:
            logger.debug('Skipping %s: HTTP %s from %s', filename, res.status_code, url)
            return None
        output_dir.mkdir(parents=True, exist_ok=True)
        out_path = output_dir / filename
        try:
            with open(out_path, 'wb') as f:
                for chunk in res.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
        except (OSError, requests.RequestException):
            out_path.unlink(missing_ok=True)
            raise
        return out_path
    finally:
        res.close()


def save_assets(
    assets: Sequence[ResolvedAsset],
    output_dir: pathlib.Path,
    workers: int = 8,
    timeout: float = 120,
    session: Optional[requests.Session] = None,
) -> List[pathlib.Path]:
    """Download every asset; failures are collected and raised together as DownloadError."""
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DownloadError(f'{e}\n{SAVE_ERROR_SUFFIX}', failures=[(str(output_dir), str(e))]) from e

    saved: List[pathlib.Path] = []
    failures: List[Tuple[str, str]] = []
    with ThreadPoolExecutor(max_workers=max(1, workers)) as ex:
        jobs = [
            (asset, ex.submit(write_stream, asset.url, asset.filename, output_dir, session, timeout))
            for asset in assets
        ]
        for asset, fut in jobs:
            try:
                path = fut.result()
            except (OSError, requests.RequestException) as e:
                logger.error('Failed to save %s: %s', asset.filename, e)
                failures.append((asset.filename, str(e)))
                continue
            if path is not None:
                saved.append(path)

    if failures:
        lines = '\n'.join(f'  {name}: {err}' for name, err in failures)
        raise DownloadError(
            f'{len(failures)} of {len(assets)} images failed:\n{lines}\n{SAVE_ERROR_SUFFIX}',
            failures=failures,
        )
    return saved


def folder_size(directory: pathlib.Path) -> int:
    """Total size in bytes of all files below directory."""
    return sum(p.stat().st_size for p in directory.rglob('*') if p.is_file())


def dump_debug(raw_file: Dict[str, Any], file_id: str, directory: pathlib.Path = pathlib.Path('.')) -> pathlib.Path:
    out_path = directory / f'figma-debug-{file_id}.json'
    write_json(out_path, raw_file)
    return out_path
