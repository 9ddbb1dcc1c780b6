"""Shared test fixtures for generator tests."""
import pytest


def make_node(name, node_type='RECTANGLE', fills=None, children=None, visible=True,
              bbox=(0, 0, 100, 100), **extra):
    """Figma-shaped node dict."""
    node = {
        'id': f'1:{abs(hash(name)) % 1000}',
        'name': name,
        'type': node_type,
        'visible': visible,
        'fills': fills or [],
        'children': children or [],
    }
    if bbox is not None:
        x, y, w, h = bbox
        node['absoluteBoundingBox'] = {'x': x, 'y': y, 'width': w, 'height': h}
    node.update(extra)
    return node


def solid(r, g, b, a=1, visible=True, **extra):
    fill = {'type': 'SOLID', 'visible': visible, 'color': {'r': r, 'g': g, 'b': b, 'a': a}}
    fill.update(extra)
    return fill


@pytest.fixture
def red_box():
    """Visible rectangle 'Box' at (10, 20), 100x50, one red fill."""
    return make_node('Box', bbox=(10, 20, 100, 50), fills=[solid(1, 0, 0)])


@pytest.fixture
def red_box_hidden_fill():
    """Same as red_box but the fill is switched off."""
    return make_node('Box', bbox=(10, 20, 100, 50), fills=[solid(1, 0, 0, visible=False)])


@pytest.fixture
def node_with_linear_gradient():
    """Rectangle with a left-to-right red -> half transparent blue gradient."""
    return make_node('Banner', bbox=(0, 0, 300, 150), fills=[{
        'type': 'GRADIENT_LINEAR', 'visible': True,
        'gradientStops': [
            {'color': {'r': 1, 'g': 0, 'b': 0, 'a': 1}, 'position': 0},
            {'color': {'r': 0, 'g': 0, 'b': 1, 'a': 0.5}, 'position': 1},
        ],
        'gradientHandlePositions': [
            {'x': 0.0, 'y': 0.5},
            {'x': 1.0, 'y': 0.5},
            {'x': 0.0, 'y': 1.0},
        ],
    }])


@pytest.fixture
def node_with_radial_gradient():
    """Figma node with RADIAL gradient fill (300x150 dimensions)."""
    return make_node('Glow', node_type='ELLIPSE', bbox=(0, 0, 300, 150), fills=[{
        'type': 'GRADIENT_RADIAL', 'visible': True, 'opacity': 0.5,
        'gradientStops': [
            {'color': {'r': 1, 'g': 0, 'b': 0, 'a': 1}, 'position': 0},
            {'color': {'r': 0, 'g': 0, 'b': 1, 'a': 1}, 'position': 1},
        ],
        'gradientHandlePositions': [
            {'x': 0.5, 'y': 0.5},
            {'x': 0.75, 'y': 0.5},
            {'x': 0.5, 'y': 1.0},
        ],
    }])


@pytest.fixture
def text_node():
    """TEXT node with REST-style font info."""
    return make_node(
        'Title', node_type='TEXT', bbox=(16, 16, 200, 24),
        characters='Welcome back',
        style={'fontFamily': 'Inter', 'fontSize': 16},
    )


@pytest.fixture
def card_frame(text_node):
    """Frame holding a text node and a hidden rectangle."""
    hidden = make_node('Hidden', fills=[solid(0, 0, 0)], visible=False)
    return make_node(
        'Card', node_type='FRAME', bbox=(0, 0, 320, 200),
        fills=[solid(1, 1, 1)], children=[text_node, hidden],
    )
