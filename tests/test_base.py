"""Tests for color encoding, number formatting and node parsing."""
import re

import pytest

from generators.base import (
    to_hex, ColorValue, GradientStop, format_fixed, format_number,
    parse_node, parse_nodes, parse_paint, NodeType,
    SolidPaint, LinearGradientPaint, RadialGradientPaint, ImagePaint, UnsupportedPaint,
)
from generators.errors import ContractViolation
from conftest import make_node, solid


class TestColorEncoder:
    """Verify fixed-width lowercase hex output."""

    def test_black_and_white(self):
        assert to_hex(0, 0, 0) == '#000000'
        assert to_hex(1, 1, 1) == '#ffffff'

    def test_rgb_shape(self):
        for value in (0.0, 0.01, 0.25, 0.5, 0.999, 1.0):
            result = to_hex(value, 1 - value, value)
            assert len(result) == 7
            assert re.fullmatch(r'#[0-9a-f]{6}', result)

    def test_alpha_goes_first(self):
        assert to_hex(1, 0, 0, 0.5) == '#80ff0000'
        assert re.fullmatch(r'#[0-9a-f]{8}', to_hex(0.2, 0.4, 0.6, 0.8))

    def test_rounds_to_nearest(self):
        assert to_hex(0.5, 0.5, 0.5) == '#808080'
        assert to_hex(1 / 255, 0, 0) == '#010000'

    def test_out_of_range_channel_is_fatal(self):
        with pytest.raises(ContractViolation):
            to_hex(1.5, 0, 0)
        with pytest.raises(ContractViolation):
            to_hex(0, -0.1, 0)
        with pytest.raises(ContractViolation):
            to_hex(0, 0, 0, 2)


class TestColorValue:

    def test_hex_is_opaque(self):
        assert ColorValue(r=1.0, g=0.0, b=0.0, a=0.5).hex == '#ff0000'

    def test_argb_uses_own_alpha(self):
        assert ColorValue(r=1.0, g=0.0, b=0.0, a=0.5).argb == '#80ff0000'
        assert ColorValue(r=0, g=0, b=1).argb == '#ff0000ff'

    def test_validated_on_construction(self):
        with pytest.raises(ContractViolation):
            ColorValue(r=2, g=0, b=0)

    def test_stop_offset_validated(self):
        with pytest.raises(ContractViolation):
            GradientStop(color=ColorValue(r=0, g=0, b=0), position=1.2)


class TestNumberFormatting:

    def test_fixed_three_digits(self):
        assert format_fixed(10) == '10.000'
        assert format_fixed(0.12345) == '0.123'
        assert format_fixed(-0.0001) == '0.000'

    def test_compact(self):
        assert format_number(100.0) == '100'
        assert format_number(10.5) == '10.5'
        assert format_number(0.3333) == '0.333'
        assert format_number(0) == '0'
        assert format_number(-12.25) == '-12.25'


class TestParsing:

    def test_paint_variants(self):
        assert isinstance(parse_paint(solid(1, 0, 0)), SolidPaint)
        stops = [{'color': {'r': 0, 'g': 0, 'b': 0}, 'position': 0}]
        assert isinstance(parse_paint({'type': 'GRADIENT_LINEAR', 'gradientStops': stops}), LinearGradientPaint)
        assert isinstance(parse_paint({'type': 'GRADIENT_RADIAL', 'gradientStops': stops}), RadialGradientPaint)
        assert isinstance(parse_paint({'type': 'IMAGE', 'imageRef': 'abc'}), ImagePaint)
        unsupported = parse_paint({'type': 'GRADIENT_ANGULAR', 'gradientStops': stops})
        assert isinstance(unsupported, UnsupportedPaint)
        assert unsupported.kind == 'GRADIENT_ANGULAR'

    def test_plugin_image_hash(self):
        paint = parse_paint({'type': 'IMAGE', 'imageHash': 'deadbeef'})
        assert paint.image_ref == 'deadbeef'

    def test_solid_opacity_only_when_declared(self):
        assert parse_paint(solid(1, 0, 0)).opacity is None
        assert parse_paint(solid(1, 0, 0, opacity=0.4)).opacity == 0.4

    def test_empty_gradient_stops_is_fatal(self):
        with pytest.raises(ContractViolation):
            parse_paint({'type': 'GRADIENT_LINEAR', 'gradientStops': []})

    def test_bad_color_names_the_node(self):
        node = make_node('Broken', fills=[solid(1.5, 0, 0)])
        with pytest.raises(ContractViolation, match='Broken'):
            parse_node(node)

    def test_node_type_mapping(self):
        assert parse_node(make_node('a', node_type='INSTANCE')).type == NodeType.FRAME
        assert parse_node(make_node('b', node_type='BOOLEAN_OPERATION')).type == NodeType.GROUP
        assert parse_node(make_node('c', node_type='LINE')).type == NodeType.RECTANGLE
        other = parse_node(make_node('d', node_type='STICKY'))
        assert other.type == NodeType.OTHER
        assert other.raw_type == 'STICKY'

    def test_opacity_only_when_exposed(self):
        assert parse_node(make_node('a')).opacity is None
        assert parse_node(make_node('b', opacity=0.8)).opacity == 0.8

    def test_missing_bounds(self):
        assert parse_node(make_node('a', bbox=None)).bounds is None

    def test_mixed_font_reads_as_missing(self):
        node = parse_node(make_node(
            'T', node_type='TEXT', characters='Hi', fontName='MIXED', fontSize='MIXED'
        ))
        assert node.text.characters == 'Hi'
        assert node.text.font_family is None
        assert node.text.font_size is None

    def test_plugin_font_name(self):
        node = parse_node(make_node(
            'T', node_type='TEXT', characters='Hi',
            fontName={'family': 'Roboto', 'style': 'Bold'}, fontSize=14,
        ))
        assert node.text.font_family == 'Roboto'
        assert node.text.font_size == 14.0

    def test_parse_nodes_accepts_single_dict(self, red_box):
        nodes = parse_nodes(red_box)
        assert len(nodes) == 1
        assert nodes[0].name == 'Box'

    def test_children_parsed_in_order(self, card_frame):
        card = parse_node(card_frame)
        assert [child.name for child in card.children] == ['Title', 'Hidden']
        assert card.children[1].visible is False

    def test_paint_opacity_out_of_range_is_fatal(self):
        with pytest.raises(ContractViolation, match='paint opacity'):
            parse_paint(solid(1, 0, 0, opacity=1.5))
        with pytest.raises(ContractViolation):
            parse_paint({'type': 'IMAGE', 'imageRef': 'abc', 'opacity': -0.2})

    def test_paint_opacity_must_be_numeric(self):
        stops = [{'color': {'r': 0, 'g': 0, 'b': 0}, 'position': 0}]
        with pytest.raises(ContractViolation):
            parse_paint(solid(1, 0, 0, opacity='0.5'))
        with pytest.raises(ContractViolation):
            parse_paint({'type': 'GRADIENT_RADIAL', 'gradientStops': stops, 'opacity': '1'})

    def test_bad_paint_opacity_names_the_node(self):
        with pytest.raises(ContractViolation, match='Faded'):
            parse_node(make_node('Faded', fills=[solid(0, 0, 0, opacity=2)]))

    def test_null_color_reads_as_black(self):
        paint = parse_paint({'type': 'SOLID', 'color': None})
        assert paint.color.hex == '#000000'
        gradient = parse_paint({'type': 'GRADIENT_LINEAR',
                                'gradientStops': [{'color': None, 'position': 0.5}]})
        assert gradient.stops[0].color.argb == '#ff000000'
