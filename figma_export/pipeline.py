"""
Export pipeline: connect, read file, find assets, resolve urls, save, minify.

Every stage receives the frozen RunState produced by the previous one and
returns a new one. The first ExportError stops the run; the result records
which stages finished and which one failed.
"""
import dataclasses
import functools
import logging
import pathlib
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from .compression import compress
from .errors import CompressionError, DiscoveryError, ExportError, FigmaConnectionError
from .figma_client import FigmaClient
from .grouping import group_by_format
from .models import CompressionStats, DocumentTree, ExportableNode, ExportOptions, ResolvedAsset
from .resolver import resolve_render_urls
from .storage import dump_debug, save_assets
from .tree import collect_exportable_nodes, resolve_root
from .utils import convert_bytes, figma_file_url

logger = logging.getLogger(__name__)

MINIFY_ERROR_SUFFIX = 'Error minifying image assets'


@dataclass(frozen=True)
class RunState:
    options: ExportOptions
    client: Any = None
    raw_file: Optional[Dict[str, Any]] = None
    document: Optional[DocumentTree] = None
    nodes: Tuple[ExportableNode, ...] = ()
    assets: Tuple[ResolvedAsset, ...] = ()
    saved: Tuple[pathlib.Path, ...] = ()
    debug_path: Optional[pathlib.Path] = None
    compression: Optional[CompressionStats] = None


@dataclass(frozen=True)
class StageResult:
    state: RunState
    title: str


@dataclass
class Stage:
    title: str
    run: Callable[[RunState], StageResult]
    enabled: Callable[[RunState], bool] = lambda state: True
    skip: Callable[[RunState], Optional[str]] = lambda state: None


@dataclass
class PipelineResult:
    state: RunState
    completed: List[str] = field(default_factory=list)
    failed_stage: Optional[str] = None
    error: Optional[ExportError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


ClientFactory = Callable[..., Any]


def _connect(client_factory: ClientFactory, state: RunState) -> StageResult:
    opts = state.options
    client = client_factory(opts.token, timeout=opts.timeout)
    return StageResult(dataclasses.replace(state, client=client), 'Connected to Figma')


def _read_file(state: RunState) -> StageResult:
    file_id = state.options.file_id
    raw = state.client.fetch_file(file_id)
    try:
        document = DocumentTree.model_validate(raw)
    except ValidationError as e:
        raise FigmaConnectionError(f'Unexpected file payload for {file_id}:\n{e}') from e
    new_state = dataclasses.replace(state, raw_file=raw, document=document)
    return StageResult(new_state, f'Reading file {figma_file_url(file_id)}')


def _save_debug(state: RunState) -> StageResult:
    try:
        path = dump_debug(state.raw_file or {}, state.options.file_id)
    except OSError as e:
        raise ExportError(f'Could not write debug file: {e}') from e
    return StageResult(dataclasses.replace(state, debug_path=path), f'Debug: saved {path}')


def _find_assets(state: RunState) -> StageResult:
    try:
        root = resolve_root(state.document, state.options.page)
        nodes = collect_exportable_nodes(root)
    except ValidationError as e:
        raise FigmaConnectionError(f'Unexpected file payload for {state.options.file_id}:\n{e}') from e
    if not nodes:
        raise DiscoveryError('No exportable assets found.')
    return StageResult(
        dataclasses.replace(state, nodes=tuple(nodes)),
        f'Found {len(nodes)} exportable assets',
    )


def _resolve_urls(state: RunState) -> StageResult:
    groups = group_by_format(state.nodes)
    logger.debug('Format groups: %s', ', '.join(f'{k} ({len(v)})' for k, v in groups.items()))
    fetch = functools.partial(state.client.fetch_render_urls, state.options.file_id)
    assets = resolve_render_urls(groups, fetch, max_workers=state.options.render_workers)
    return StageResult(
        dataclasses.replace(state, assets=tuple(assets)),
        f'Got {len(assets)} image urls',
    )


def _save_images(state: RunState) -> StageResult:
    opts = state.options
    output = pathlib.Path(opts.output)
    saved = save_assets(
        state.assets,
        output,
        workers=opts.download_workers,
        timeout=opts.timeout * 2,
    )
    return StageResult(
        dataclasses.replace(state, saved=tuple(saved)),
        f"Saved {len(saved)} images to '{opts.output}'",
    )


def _minify(state: RunState) -> StageResult:
    try:
        stats = compress(pathlib.Path(state.options.output))
    except Exception as e:
        raise CompressionError(f'{e}\n{MINIFY_ERROR_SUFFIX}') from e
    title = ' '.join([
        'Minified images:',
        convert_bytes(stats.bytes_before),
        '->',
        convert_bytes(stats.bytes_after),
        f'({stats.percentage}%)',
    ])
    return StageResult(dataclasses.replace(state, compression=stats), title)


def build_stages(client_factory: ClientFactory = FigmaClient) -> List[Stage]:
    return [
        Stage('Connect to Figma', functools.partial(_connect, client_factory)),
        Stage('Reading file …', _read_file),
        Stage(
            'Debug: Save json file for reference',
            _save_debug,
            enabled=lambda state: state.options.debug,
        ),
        Stage('Find exportable assets', _find_assets),
        Stage(
            'Get urls for all export formats',
            _resolve_urls,
            skip=lambda state: None if state.nodes else 'no exportable assets found',
        ),
        Stage('Save images', _save_images),
        Stage(
            'Minify image assets',
            _minify,
            enabled=lambda state: state.options.compress,
            skip=lambda state: None if state.assets else 'no images to minify',
        ),
    ]


def run_stages(
    stages: Sequence[Stage],
    state: RunState,
    result: Optional[PipelineResult] = None,
) -> PipelineResult:
    """Run stages in order, recording progress on result as it goes."""
    if result is None:
        result = PipelineResult(state=state)
    for stage in stages:
        if not stage.enabled(result.state):
            continue
        reason = stage.skip(result.state)
        if reason:
            logger.info('%s [skipped: %s]', stage.title, reason)
            continue
        logger.debug('-> %s', stage.title)
        try:
            outcome = stage.run(result.state)
        except ExportError as e:
            logger.error('%s [failed]', stage.title)
            result.failed_stage = stage.title
            result.error = e
            return result
        result.state = outcome.state
        result.completed.append(outcome.title)
        logger.info(outcome.title)
    return result


def run_pipeline(options: ExportOptions, client_factory: ClientFactory = FigmaClient) -> PipelineResult:
    stages = build_stages(client_factory)
    state = RunState(options=options)
    result = PipelineResult(state=state)
    try:
        result = run_stages(stages, state, result)
    finally:
        client = result.state.client
        if client is not None and hasattr(client, 'close'):
            client.close()
    return result
