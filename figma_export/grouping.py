"""
Bucket export settings by (format, scale) so each bucket maps to one render request.
"""
from typing import Dict, Iterable, List

from .models import AssetStub, ExportableNode, GroupKey


def group_by_format(nodes: Iterable[ExportableNode]) -> Dict[GroupKey, List[AssetStub]]:
    """Return {GroupKey: [AssetStub]} in first-seen key order.

    One stub per (node, export setting); stubs inside a bucket keep
    traversal order x export-setting order.
    """
    groups: Dict[GroupKey, List[AssetStub]] = {}
    for node in nodes:
        for setting in node.export_settings or ():
            key = GroupKey(format=setting.format.lower(), scale=setting.scale)
            stub = AssetStub(
                id=node.id,
                name=node.name,
                suffix=setting.suffix,
                format=key.format,
                scale=key.scale,
            )
            groups.setdefault(key, []).append(stub)
    return groups
