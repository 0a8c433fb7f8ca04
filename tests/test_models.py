"""
Pydantic parsing of Figma payloads and derived record fields.
"""
import pytest
from pydantic import ValidationError

from figma_export.models import (
    AssetStub,
    CompressionStats,
    DocumentNode,
    ExportOptions,
    ExportSetting,
    GroupKey,
    ResolvedAsset,
)


class TestExportSetting:
    """Export setting normalisation"""

    def test_format_lowercased(self):
        assert ExportSetting.model_validate({'format': 'SVG'}).format == 'svg'

    def test_scale_from_constraint(self):
        s = ExportSetting.model_validate({'format': 'PNG', 'constraint': {'type': 'SCALE', 'value': 3}})
        assert s.scale == 3

    def test_scale_defaults_to_one(self):
        assert ExportSetting.model_validate({'format': 'PNG'}).scale == 1

    def test_zero_constraint_value_defaults_to_one(self):
        s = ExportSetting.model_validate({'format': 'PNG', 'constraint': {'type': 'SCALE', 'value': 0}})
        assert s.scale == 1

    def test_null_suffix_becomes_empty(self):
        assert ExportSetting.model_validate({'format': 'PNG', 'suffix': None}).suffix == ''


class TestDocumentNode:
    """Node model parsed one level at a time"""

    def test_unknown_keys_ignored(self):
        n = DocumentNode.model_validate({'id': '1', 'name': 'x', 'fills': [], 'absoluteBoundingBox': {}})
        assert n.id == '1'

    def test_nested_children_and_alias(self):
        n = DocumentNode.model_validate({
            'id': '1',
            'name': 'page',
            'children': [{'id': '2', 'name': 'icon', 'exportSettings': [{'format': 'JPG'}]}],
        })
        assert n.child_nodes()[0].export_settings[0].format == 'jpg'
        assert n.export_settings is None

    def test_children_stay_raw_until_parsed(self):
        n = DocumentNode.model_validate({'id': '1', 'children': [{'id': '2', 'extra': True}]})
        assert n.children == [{'id': '2', 'extra': True}]
        assert n.child_nodes()[0].id == '2'

    def test_malformed_child_fails_when_parsed(self):
        n = DocumentNode.model_validate({'id': '1', 'children': [{'name': 'no id'}]})
        with pytest.raises(ValidationError):
            n.child_nodes()

    def test_id_required(self):
        with pytest.raises(ValidationError):
            DocumentNode.model_validate({'name': 'no id'})


class TestGroupKey:
    """Composite key rendering"""

    def test_integer_scale(self):
        assert str(GroupKey('png', 2.0)) == 'png2'

    def test_fractional_scale(self):
        assert str(GroupKey('png', 0.5)) == 'png0.5'

    def test_hashable(self):
        assert {GroupKey('svg', 1): 1}[GroupKey('svg', 1.0)] == 1


class TestResolvedAsset:
    """File naming"""

    def _asset(self, name, suffix='', fmt='png'):
        return ResolvedAsset.from_stub(AssetStub('1:1', name, suffix, fmt, 1), 'http://x/1')

    def test_from_stub_copies_fields(self):
        a = self._asset('home', '@2x')
        assert (a.id, a.name, a.suffix, a.format, a.scale, a.url) == ('1:1', 'home', '@2x', 'png', 1, 'http://x/1')

    def test_filename_flattens_slashes_and_dots(self):
        assert self._asset('a/b.c').filename == 'a_b_c.png'

    def test_filename_appends_suffix(self):
        assert self._asset('icons/home', '@2x', 'svg').filename == 'icons_home@2x.svg'


class TestCompressionStats:
    def test_percentage(self):
        assert CompressionStats(1000, 750).percentage == 25.0

    def test_percentage_rounds_to_two_places(self):
        assert CompressionStats(3, 2).percentage == 33.33

    def test_empty_directory(self):
        assert CompressionStats(0, 0).percentage == 0.0


class TestExportOptions:
    def test_defaults(self):
        opts = ExportOptions(file_id='abc')
        assert opts.output == 'assets/icons'
        assert opts.compress is False
        assert opts.render_workers == 1

    def test_file_id_required(self):
        with pytest.raises(ValidationError):
            ExportOptions(file_id='')
