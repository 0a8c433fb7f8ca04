"""
Resolve render URLs for grouped assets.

Each (format, scale) group costs exactly one call to the images endpoint.
Any group reporting an error aborts the whole resolve step.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Mapping, Sequence

from .errors import ResolutionError
from .models import AssetStub, GroupKey, ResolvedAsset

logger = logging.getLogger(__name__)

# fetch(ids=[...], format='png', scale=2.0) -> {'err': ..., 'images': {id: url}}
RenderFetcher = Callable[..., Dict[str, Any]]


def resolve_group(key: GroupKey, group: Sequence[AssetStub], fetch: RenderFetcher) -> List[ResolvedAsset]:
    if not group:
        return []
    first = group[0]
    ids = [stub.id for stub in group]
    response = fetch(ids=ids, format=first.format, scale=first.scale) or {}
    err = response.get('err')
    if err:
        raise ResolutionError(str(key), str(err))

    images = response.get('images') or {}
    resolved: List[ResolvedAsset] = []
    dropped: List[str] = []
    for stub in group:
        url = images.get(stub.id)
        if url:
            resolved.append(ResolvedAsset.from_stub(stub, url))
        else:
            dropped.append(stub.id)
    if dropped:
        logger.warning('No render url for %d node(s) in %s: %s', len(dropped), key, ', '.join(dropped))
    return resolved


def resolve_render_urls(
    groups: Mapping[GroupKey, Sequence[AssetStub]],
    fetch: RenderFetcher,
    max_workers: int = 1,
) -> List[ResolvedAsset]:
    """Flatten all groups into ResolvedAssets, concatenated in group insertion order.

    With max_workers > 1 the requests run concurrently; results are still
    concatenated in insertion order and the first failing group (in that
    order) is the one raised.
    """
    items = list(groups.items())
    assets: List[ResolvedAsset] = []
    if max_workers <= 1 or len(items) <= 1:
        for key, group in items:
            assets.extend(resolve_group(key, group, fetch))
        return assets

    with ThreadPoolExecutor(max_workers=min(max_workers, len(items))) as ex:
        futures = [ex.submit(resolve_group, key, group, fetch) for key, group in items]
        try:
            for fut in futures:
                assets.extend(fut.result())
        except Exception:
            for fut in futures:
                fut.cancel()
            raise
    return assets
