"""Unit tests for layer and group decoding."""

import xml.etree.ElementTree as ET

import numpy as np
import pytest

from tmx_reader import (Image, ImageLayer, ObjectLayer, TiledDecodeError,
                        TileLayer, UnsupportedEncodingError)
from tmx_reader.layers import (parse_group, parse_groups, parse_image,
                               parse_layer, parse_layers)


def layer(xml, infinite=False):
    return parse_layer(ET.fromstring(xml), infinite)


class TestCommonAttributes:
    """Attributes shared by every layer kind."""

    def test_defaults(self):
        """Missing opacity, parallax, visible and locked take Tiled's defaults."""
        result = layer('<layer id="1" name="Ground" width="1" height="1">'
                       '<data encoding="csv">0</data></layer>')
        assert result.opacity == 1.0
        assert (result.parallax_x, result.parallax_y) == (1.0, 1.0)
        assert result.visible is True
        assert result.locked is False
        assert (result.offset_x, result.offset_y) == (0.0, 0.0)
        assert result.tint_color is None
        assert result.class_name == ""
        assert result.properties == ()

    def test_explicit_values(self):
        result = layer('<objectgroup id="4" name="Objs" visible="0" locked="1" '
                       'opacity="0.25" offsetx="3" offsety="-2" parallaxx="0.5" '
                       'parallaxy="2" tintcolor="#ff0000" class="fx">'
                       '<properties><property name="a" value="b"/></properties>'
                       '</objectgroup>')
        assert result.id == 4
        assert result.name == "Objs"
        assert result.visible is False
        assert result.locked is True
        assert result.opacity == 0.25
        assert (result.offset_x, result.offset_y) == (3.0, -2.0)
        assert (result.parallax_x, result.parallax_y) == (0.5, 2.0)
        assert result.tint_color == "#ff0000"
        assert result.class_name == "fx"
        assert result.properties[0].value == "b"

    def test_non_tile_layers_have_zero_size(self):
        assert layer('<objectgroup id="1" name="o"/>').width == 0

    @pytest.mark.parametrize("xml", [
        '<objectgroup name="o"/>',
        '<objectgroup id="1"/>',
        '<objectgroup id="one" name="o"/>',
    ])
    def test_required_attributes(self, xml):
        with pytest.raises(TiledDecodeError):
            layer(xml)


class TestTileLayer:
    """Tile layers on finite and infinite maps."""

    def test_csv_data(self):
        result = layer('<layer id="1" name="g" width="2" height="2">'
                       '<data encoding="csv">1,%d,\n3,0</data></layer>' % (0x80000002))
        assert isinstance(result, TileLayer)
        np.testing.assert_array_equal(result.data, [1, 2, 3, 0])
        np.testing.assert_array_equal(result.flags, [0, 4, 0, 0])
        assert result.chunks == ()
        assert not result.is_infinite
        assert result.get_tile_gid(1, 1) == 0
        assert result.get_tile_gid(0, 1) == 3
        assert result.get_tile_gid(5, 5) == 0

    @pytest.mark.parametrize("compression", [None, "zlib", "gzip"])
    def test_base64_data(self, encode_cells, compression):
        attr = ' compression="%s"' % compression if compression else ''
        result = layer('<layer id="1" name="g" width="3" height="1">'
                       '<data encoding="base64"%s>%s</data></layer>'
                       % (attr, encode_cells([4, 0x40000005, 6], compression)))
        np.testing.assert_array_equal(result.data, [4, 5, 6])
        np.testing.assert_array_equal(result.flags, [0, 2, 0])

    def test_zstd_rejected(self, encode_cells):
        with pytest.raises(UnsupportedEncodingError):
            layer('<layer id="1" name="g" width="1" height="1">'
                  '<data encoding="base64" compression="zstd">%s</data></layer>'
                  % encode_cells([1]))

    def test_unknown_compression_rejected_for_csv(self):
        with pytest.raises(UnsupportedEncodingError):
            layer('<layer id="1" name="g" width="1" height="1">'
                  '<data encoding="csv" compression="lz4">1</data></layer>')

    def test_xml_tile_elements_unsupported(self):
        with pytest.raises(UnsupportedEncodingError):
            layer('<layer id="1" name="g" width="1" height="1">'
                  '<data encoding="xml"><tile gid="1"/></data></layer>')

    def test_missing_encoding(self):
        with pytest.raises(TiledDecodeError):
            layer('<layer id="1" name="g"><data>1</data></layer>')

    def test_missing_data(self):
        with pytest.raises(TiledDecodeError):
            layer('<layer id="1" name="g" width="1" height="1"/>')

    def test_infinite_chunks(self, encode_cells):
        result = layer(
            '<layer id="1" name="g" width="32" height="16">'
            '<data encoding="base64" compression="zlib">'
            '<chunk x="-16" y="0" width="2" height="1">%s</chunk>'
            '<chunk x="0" y="16" width="1" height="2">%s</chunk>'
            '</data></layer>'
            % (encode_cells([1, 0x20000002], "zlib"), encode_cells([3, 4], "zlib")),
            infinite=True)

        assert result.is_infinite
        assert result.data is None and result.flags is None
        first, second = result.chunks
        assert (first.x, first.y, first.width, first.height) == (-16, 0, 2, 1)
        np.testing.assert_array_equal(first.data, [1, 2])
        np.testing.assert_array_equal(first.flags, [0, 1])
        assert (second.x, second.y) == (0, 16)
        np.testing.assert_array_equal(second.data, [3, 4])

    def test_infinite_csv_chunk(self):
        result = layer('<layer id="1" name="g"><data encoding="csv">'
                       '<chunk x="0" y="0" width="2" height="1">\n7,8\n</chunk>'
                       '</data></layer>', infinite=True)
        np.testing.assert_array_equal(result.chunks[0].data, [7, 8])

    def test_chunk_missing_position(self):
        with pytest.raises(TiledDecodeError):
            layer('<layer id="1" name="g"><data encoding="csv">'
                  '<chunk y="0" width="1" height="1">1</chunk></data></layer>',
                  infinite=True)


class TestObjectAndImageLayers:
    """Kind-specific payloads of object and image layers."""

    def test_object_layer(self):
        result = layer('<objectgroup id="2" name="o" color="#00ff00" draworder="index">'
                       '<object id="5" x="1" y="2"/><object id="6" x="3" y="4"/>'
                       '</objectgroup>')
        assert isinstance(result, ObjectLayer)
        assert [o.id for o in result.objects] == [5, 6]
        assert result.color == "#00ff00"
        assert result.draw_order == "index"

    def test_image_layer(self):
        result = layer('<imagelayer id="3" name="bg" repeaty="1">'
                       '<image source="bg.png" width="640" height="480"/></imagelayer>')
        assert isinstance(result, ImageLayer)
        assert result.image == Image(source="bg.png", width=640, height=480)
        assert (result.repeat_x, result.repeat_y) == (False, True)

    def test_image_layer_without_image(self):
        assert layer('<imagelayer id="3" name="bg"/>').image is None

    def test_image_requires_size(self):
        with pytest.raises(TiledDecodeError):
            parse_image(ET.fromstring('<image source="a.png"/>'))

    def test_unknown_tag(self):
        with pytest.raises(TiledDecodeError):
            layer('<tileset id="1" name="x"/>')


class TestLayerOrdering:
    """Layers are grouped by kind, not kept in document order."""

    def test_grouped_by_kind(self):
        elem = ET.fromstring(
            '<map>'
            '<imagelayer id="1" name="img"/>'
            '<objectgroup id="2" name="obj1"/>'
            '<layer id="3" name="tiles1"><data encoding="csv">1</data></layer>'
            '<objectgroup id="4" name="obj2"/>'
            '<layer id="5" name="tiles2"><data encoding="csv">2</data></layer>'
            '</map>')
        names = [l.name for l in parse_layers(elem, infinite=False)]
        assert names == ["tiles1", "tiles2", "obj1", "obj2", "img"]


class TestGroups:
    """Recursive group decoding."""

    GROUP_XML = (
        '<group id="1" name="outer" locked="1">'
        '<properties><property name="depth" type="int" value="0"/></properties>'
        '<objectgroup id="2" name="things"><object id="1" x="0" y="0"/></objectgroup>'
        '<layer id="3" name="floor"><data encoding="csv">1</data></layer>'
        '<group id="4" name="middle" visible="0">'
        '<group id="5" name="inner">'
        '<imagelayer id="6" name="pic"/>'
        '</group>'
        '</group>'
        '</group>'
    )

    def test_nested_tree(self):
        outer = parse_group(ET.fromstring(self.GROUP_XML), infinite=False)

        assert (outer.id, outer.name, outer.locked, outer.visible) == (1, "outer", True, True)
        assert outer.properties[0].name == "depth"
        assert [l.name for l in outer.layers] == ["floor", "things"]

        middle, = outer.groups
        assert middle.visible is False
        assert middle.layers == ()

        inner, = middle.groups
        assert [l.name for l in inner.layers] == ["pic"]
        assert inner.groups == ()

    def test_group_objects(self):
        outer = parse_group(ET.fromstring(self.GROUP_XML), infinite=False)
        assert [o.id for o in outer.objects] == [1]
        assert outer.groups[0].objects == ()

    def test_infinite_flag_reaches_nested_layers(self):
        elem = ET.fromstring(
            '<map><group id="1" name="g">'
            '<layer id="2" name="t"><data encoding="csv">'
            '<chunk x="0" y="0" width="1" height="1">9</chunk>'
            '</data></layer></group></map>')
        group, = parse_groups(elem, infinite=True)
        assert group.layers[0].chunks[0].data[0] == 9

    def test_group_requires_id(self):
        with pytest.raises(TiledDecodeError):
            parse_group(ET.fromstring('<group name="g"/>'), infinite=False)
