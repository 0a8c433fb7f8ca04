"""
Thin requests-based client for the two Figma REST endpoints the exporter needs.
"""
import logging
from typing import Any, Dict, List, Optional

import requests

from .errors import FigmaConnectionError

logger = logging.getLogger(__name__)

API_BASE = 'https://api.figma.com/v1'


def format_scale(scale: float) -> str:
    """Query value for scale: integral values without a decimal point, others exactly."""
    value = float(scale)
    if value.is_integer():
        return str(int(value))
    return repr(value)


class FigmaClient:
    def __init__(self, token: str, timeout: float = 60, session: Optional[requests.Session] = None):
        if not token:
            raise FigmaConnectionError('Missing Figma token. Pass --token or set FIGMA_TOKEN in .env')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({'X-Figma-Token': token})

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        url = f'{API_BASE}{path}'
        logger.debug('GET %s params=%s', url, params)
        try:
            return self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise FigmaConnectionError(f'Network error: {e}') from e

    @staticmethod
    def _raise_for_status(res: requests.Response) -> None:
        try:
            res.raise_for_status()
        except requests.HTTPError as e:
            raise FigmaConnectionError(
                f'Figma API error: {res.status_code} {res.reason}\n{res.text}',
                status_code=res.status_code,
            ) from e

    @staticmethod
    def _json(res: requests.Response) -> Dict[str, Any]:
        try:
            return res.json()
        except ValueError as e:
            raise FigmaConnectionError(
                f'Figma API returned a non-JSON body: {res.status_code}\n{res.text[:500]}',
                status_code=res.status_code,
            ) from e

    def fetch_file(self, file_id: str) -> Dict[str, Any]:
        """Raw JSON of GET /files/{key}."""
        res = self._get(f'/files/{file_id}')
        self._raise_for_status(res)
        return self._json(res)

    def fetch_render_urls(self, file_id: str, ids: List[str], format: str, scale: float) -> Dict[str, Any]:
        """GET /images/{key}; returns the body, including an 'err' the API reports."""
        params = {
            'ids': ','.join(ids),
            'format': format,
            'scale': format_scale(scale),
        }
        res = self._get(f'/images/{file_id}', params=params)
        if not res.ok:
            try:
                body = res.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and body.get('err'):
                return body
        self._raise_for_status(res)
        return self._json(res)

    def close(self) -> None:
        self.session.close()
