"""
Locate exportable nodes in a Figma document tree.

A node is exportable when it has a name and at least one export setting.
Collected nodes are still descended into, so a frame flagged for export can
contain icons that are flagged as well.
Nodes are parsed one level at a time as the walk reaches them.
"""
import logging
from typing import Iterator, List, Optional, Sequence, Union

from .models import DocumentNode, DocumentTree, ExportableNode

logger = logging.getLogger(__name__)

Root = Union[DocumentNode, Sequence[DocumentNode]]


def resolve_root(tree: DocumentTree, page: Optional[str] = None) -> Root:
    """Pick the subtree to scan from a page name or node id.

    Falls back to all top-level pages when nothing matches or when the match
    has no children.
    """
    pages = tree.pages
    match: Optional[DocumentNode] = None
    if page:
        match = next((p for p in pages if p.name == page or p.id == page), None)
    if match is None or not match.children:
        if page:
            logger.debug('page %r not usable as root, scanning all %d pages', page, len(pages))
        return pages
    return match


def is_exportable(node: DocumentNode) -> bool:
    return bool(node.name) and bool(node.export_settings)


def iter_exportable_nodes(root: Root) -> Iterator[ExportableNode]:
    """Depth-first pre-order walk, children in document order."""
    if isinstance(root, DocumentNode):
        start = root.child_nodes()
    else:
        start = root
    stack: List[DocumentNode] = list(reversed(start))
    while stack:
        node = stack.pop()
        if is_exportable(node):
            yield ExportableNode(
                node=node,
                id=node.id,
                name=node.name,
                export_settings=tuple(node.export_settings),
            )
        if node.children:
            stack.extend(reversed(node.child_nodes()))


def collect_exportable_nodes(root: Root) -> List[ExportableNode]:
    return list(iter_exportable_nodes(root))
