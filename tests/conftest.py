import pytest

from figma_export.models import DocumentTree

from factories import file_payload, node


@pytest.fixture
def icons_file():
    """Page 'Icons' with one svg and one png@2x asset, plus an unrelated page."""
    return file_payload([
        node('1:0', 'Icons', type='CANVAS', children=[
            node('1:1', 'home', export=[{'format': 'SVG', 'suffix': '', 'constraint': {'type': 'SCALE', 'value': 1}}]),
            node('1:2', 'a/b.c', export=[{'format': 'PNG', 'suffix': '', 'constraint': {'type': 'SCALE', 'value': 2}}]),
        ]),
        node('2:0', 'Cover', type='CANVAS', children=[
            node('2:1', 'logo', export=[{'format': 'JPG'}]),
        ]),
    ])


@pytest.fixture
def icons_tree(icons_file):
    return DocumentTree.model_validate(icons_file)
