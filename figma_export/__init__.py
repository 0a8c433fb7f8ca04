"""
figma_export - pull assets marked for export out of a Figma file.

Modules:
- tree:         find exportable nodes under a page
- grouping:     bucket export settings by (format, scale)
- resolver:     one render request per bucket, urls merged back onto assets
- pipeline:     stage runner used by the CLI
- figma_client, storage, compression: network, filesystem and minify collaborators
"""
from .errors import (
    CompressionError,
    DiscoveryError,
    DownloadError,
    ExportError,
    FigmaConnectionError,
    ResolutionError,
)
from .grouping import group_by_format
from .resolver import resolve_render_urls
from .tree import collect_exportable_nodes, iter_exportable_nodes, resolve_root

__version__ = '0.1.0'

__all__ = [
    'CompressionError',
    'DiscoveryError',
    'DownloadError',
    'ExportError',
    'FigmaConnectionError',
    'ResolutionError',
    'collect_exportable_nodes',
    'group_by_format',
    'iter_exportable_nodes',
    'resolve_render_urls',
    'resolve_root',
]
