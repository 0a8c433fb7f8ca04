"""
Data models for the export pipeline.

Figma JSON is parsed into pydantic models (unknown keys are ignored); the
records built from it during a run are plain frozen dataclasses.
"""
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .utils import flatten_name

SUPPORTED_FORMATS = ('svg', 'png', 'jpg')


class Constraint(BaseModel):
    model_config = ConfigDict(extra='ignore')

    type: Optional[str] = None
    value: Optional[float] = None


class ExportSetting(BaseModel):
    """One rendering of a node: format, scale (via constraint) and file suffix."""
    model_config = ConfigDict(extra='ignore')

    format: str
    suffix: str = ''
    constraint: Optional[Constraint] = None

    @field_validator('format')
    @classmethod
    def _lower_format(cls, v: str) -> str:
        return v.lower()

    @field_validator('suffix', mode='before')
    @classmethod
    def _default_suffix(cls, v: Any) -> str:
        return v or ''

    @property
    def scale(self) -> float:
        return (self.constraint and self.constraint.value) or 1


class DocumentNode(BaseModel):
    """One node of the document. Children stay raw dicts; child_nodes() parses a single level."""
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    id: str
    name: Optional[str] = None
    type: Optional[str] = None
    children: Optional[List[Any]] = None
    export_settings: Optional[List[ExportSetting]] = Field(default=None, alias='exportSettings')

    def child_nodes(self) -> List['DocumentNode']:
        return [DocumentNode.model_validate(c) for c in self.children or []]


class DocumentTree(BaseModel):
    """Response of GET /v1/files/{key}; top-level pages are document.children."""
    model_config = ConfigDict(extra='ignore')

    name: Optional[str] = None
    document: DocumentNode

    @property
    def pages(self) -> List[DocumentNode]:
        return self.document.child_nodes()


class ExportOptions(BaseModel):
    token: str = ''
    file_id: str = Field(min_length=1)
    page: Optional[str] = None
    output: str = 'assets/icons'
    compress: bool = False
    debug: bool = False
    timeout: float = Field(default=60, gt=0)
    download_workers: int = Field(default=8, ge=1)
    render_workers: int = Field(default=1, ge=1)


@dataclass(frozen=True)
class ExportableNode:
    node: DocumentNode
    id: str
    name: str
    export_settings: Tuple[ExportSetting, ...]


@dataclass(frozen=True)
class GroupKey:
    format: str
    scale: float

    def __str__(self) -> str:
        return f'{self.format}{self.scale:g}'


@dataclass(frozen=True)
class AssetStub:
    id: str
    name: str
    suffix: str
    format: str
    scale: float


@dataclass(frozen=True)
class ResolvedAsset(AssetStub):
    url: str

    @classmethod
    def from_stub(cls, stub: AssetStub, url: str) -> 'ResolvedAsset':
        return cls(url=url, **asdict(stub))

    @property
    def filename(self) -> str:
        return f'{flatten_name(self.name)}{self.suffix}.{self.format}'


@dataclass(frozen=True)
class CompressionStats:
    bytes_before: int
    bytes_after: int

    @property
    def percentage(self) -> float:
        if not self.bytes_before:
            return 0.0
        return round((1 - self.bytes_after / self.bytes_before) * 10000) / 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            'bytes_before': self.bytes_before,
            'bytes_after': self.bytes_after,
            'percentage': self.percentage,
        }
