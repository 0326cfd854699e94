import unittest
from xml.etree import ElementTree

from tmxlevel import builder
from tmxlevel.loader import build_subrects
from tmxlevel.objects import MapMetadata, Point, Rect
from tmxlevel.utils import RangeError, StructureError


def make_layer_xml(gids, opacity=None):
    tiles = "".join(
        "<tile/>" if gid is None else '<tile gid="{}"/>'.format(gid) for gid in gids
    )
    attrib = "" if opacity is None else ' opacity="{}"'.format(opacity)
    return "<layer{}><data>{}</data></layer>".format(attrib, tiles)


class OpacityTest(unittest.TestCase):
    def test_missing_is_opaque(self):
        self.assertEqual(255, builder.opacity_to_alpha(None))

    def test_half_is_truncated(self):
        self.assertEqual(127, builder.opacity_to_alpha(0.5))

    def test_bounds(self):
        self.assertEqual(0, builder.opacity_to_alpha(0.0))
        self.assertEqual(255, builder.opacity_to_alpha(1.0))

    def test_clamped(self):
        self.assertEqual(255, builder.opacity_to_alpha(1.5))
        self.assertEqual(0, builder.opacity_to_alpha(-0.5))

    def test_nan_is_opaque(self):
        self.assertEqual(255, builder.opacity_to_alpha(float("nan")))


class CursorTest(unittest.TestCase):
    def test_advance_in_row(self):
        self.assertEqual((1, 0), builder.advance_cursor(0, 0, 3, 2))

    def test_wrap_to_next_row(self):
        self.assertEqual((0, 1), builder.advance_cursor(2, 0, 3, 2))

    def test_wrap_to_first_row(self):
        self.assertEqual((0, 0), builder.advance_cursor(2, 1, 3, 2))

    def test_full_layer_returns_to_origin(self):
        width, height = 5, 4
        x = y = 0
        seen = list()
        for i in range(width * height):
            seen.append((x, y))
            x, y = builder.advance_cursor(x, y, width, height)
        self.assertEqual((0, 0), (x, y))
        self.assertEqual(width * height, len(set(seen)))
        self.assertEqual((width - 1, height - 1), seen[-1])

    def test_zero_width_does_not_fail(self):
        self.assertEqual((0, 0), builder.advance_cursor(0, 0, 0, 0))


class LookupSubrectTest(unittest.TestCase):
    def setUp(self):
        self.subrects = build_subrects(32, 16, 16, 16)

    def test_in_range(self):
        self.assertEqual(Rect(16, 0, 16, 16), builder.lookup_subrect(self.subrects, 1))

    def test_past_end(self):
        with self.assertRaises(RangeError):
            builder.lookup_subrect(self.subrects, 2)

    def test_negative(self):
        with self.assertRaises(RangeError):
            builder.lookup_subrect(self.subrects, -1)


class PropertiesTest(unittest.TestCase):
    def parse(self, xml):
        return builder.parse_properties(ElementTree.fromstring(xml))

    def test_no_properties(self):
        self.assertEqual(dict(), self.parse("<object/>"))

    def test_properties(self):
        result = self.parse(
            "<object><properties>"
            '<property name="a" value="1"/>'
            '<property name="b" value=""/>'
            "</properties></object>"
        )
        self.assertEqual({"a": "1", "b": ""}, result)

    def test_last_duplicate_wins(self):
        result = self.parse(
            "<object><properties>"
            '<property name="a" value="first"/>'
            '<property name="a" value="second"/>'
            "</properties></object>"
        )
        self.assertEqual({"a": "second"}, result)

    def test_value_from_text(self):
        result = self.parse(
            '<object><properties><property name="a">text</property></properties></object>'
        )
        self.assertEqual({"a": "text"}, result)

    def test_missing_name(self):
        with self.assertRaises(StructureError):
            self.parse('<object><properties><property value="1"/></properties></object>')

    def test_missing_value(self):
        with self.assertRaises(StructureError):
            self.parse('<object><properties><property name="a"/></properties></object>')


class BuildLayerTest(unittest.TestCase):
    def setUp(self):
        self.metadata = MapMetadata(
            width=2, height=1, tilewidth=16, tileheight=16, firstgid=1
        )
        self.subrects = build_subrects(32, 16, 16, 16)

    def build(self, xml, metadata=None):
        node = ElementTree.fromstring(xml)
        return builder.build_layer(node, metadata or self.metadata, self.subrects)

    def test_two_tiles(self):
        layer = self.build(make_layer_xml([1, 2]))
        self.assertEqual(255, layer.opacity)
        self.assertEqual(2, len(layer.tiles))
        first, second = layer.tiles
        self.assertEqual(0, first.index)
        self.assertEqual(Point(0, 0), first.position)
        self.assertEqual(Rect(0, 0, 16, 16), first.rect)
        self.assertEqual(1, second.index)
        self.assertEqual(Point(16, 0), second.position)
        self.assertEqual(Rect(16, 0, 16, 16), second.rect)
        self.assertEqual((255, 255, 255, 255), second.color)

    def test_empty_cells_still_move_cursor(self):
        layer = self.build(make_layer_xml([None, 2]))
        self.assertEqual(1, len(layer.tiles))
        self.assertEqual(Point(16, 0), layer.tiles[0].position)

        layer = self.build(make_layer_xml([0, 1]))
        self.assertEqual(1, len(layer.tiles))
        self.assertEqual(Point(16, 0), layer.tiles[0].position)

    def test_gid_below_firstgid_is_empty(self):
        metadata = MapMetadata(2, 1, 16, 16, firstgid=5)
        layer = self.build(make_layer_xml([3, 5]), metadata)
        self.assertEqual(1, len(layer.tiles))
        self.assertEqual(0, layer.tiles[0].index)
        self.assertEqual(Point(16, 0), layer.tiles[0].position)

    def test_rows(self):
        metadata = MapMetadata(2, 2, 16, 8, firstgid=1)
        layer = self.build(make_layer_xml([1, None, None, 2]), metadata)
        positions = [tile.position for tile in layer]
        self.assertEqual([Point(0, 0), Point(16, 8)], positions)

    def test_opacity(self):
        layer = self.build(make_layer_xml([1, 2], opacity=0.5))
        self.assertEqual(127, layer.opacity)
        self.assertEqual({(255, 255, 255, 127)}, {tile.color for tile in layer})

    def test_malformed_opacity_is_opaque(self):
        for value in ("nan", "abc", ""):
            layer = self.build('<layer opacity="{}"><data/></layer>'.format(value))
            self.assertEqual(255, layer.opacity, value)

    def test_name(self):
        layer = self.build('<layer name="Ground"><data/></layer>')
        self.assertEqual("Ground", layer.name)
        self.assertEqual(0, len(layer))

    def test_missing_data(self):
        with self.assertRaises(StructureError):
            self.build("<layer/>")

    def test_encoded_data_not_supported(self):
        with self.assertRaises(StructureError):
            self.build('<layer><data encoding="csv">1,2</data></layer>')

    def test_gid_out_of_range(self):
        with self.assertRaises(RangeError):
            self.build(make_layer_xml([1, 3]))


class BuildObjectTest(unittest.TestCase):
    def setUp(self):
        self.metadata = MapMetadata(4, 4, 16, 16, firstgid=1)
        self.subrects = build_subrects(32, 32, 16, 16)

    def build(self, xml):
        node = ElementTree.fromstring(xml)
        return builder.build_object(node, self.metadata, self.subrects)

    def test_marker_object(self):
        obj = self.build('<object x="10" y="20"/>')
        self.assertEqual(Rect(10, 20, 0, 0), obj.rect)
        self.assertEqual("", obj.name)
        self.assertEqual("", obj.type)
        self.assertEqual(dict(), obj.properties)
        self.assertIsNone(obj.image_rect)

    def test_sized_object(self):
        obj = self.build('<object name="door" type="trigger" x="1" y="2" width="3" height="4"/>')
        self.assertEqual("door", obj.name)
        self.assertEqual("trigger", obj.type)
        self.assertEqual(Rect(1, 2, 3, 4), obj.rect)
        self.assertIsNone(obj.image_rect)

    def test_tile_object_takes_tile_size(self):
        obj = self.build('<object gid="4" x="5" y="6"/>')
        self.assertEqual(Rect(5, 6, 16, 16), obj.rect)
        self.assertEqual(Rect(16, 16, 16, 16), obj.image_rect)
        self.assertEqual(4, obj.gid)

    def test_size_overrides_tile_size(self):
        obj = self.build('<object gid="2" x="0" y="0" width="8" height="4"/>')
        self.assertEqual(Rect(0, 0, 8, 4), obj.rect)
        self.assertEqual(Rect(16, 0, 16, 16), obj.image_rect)

    def test_fractional_coordinates(self):
        obj = self.build('<object x="10.75" y="bad"/>')
        self.assertEqual(Rect(10, 0, 0, 0), obj.rect)

    def test_gid_out_of_range(self):
        with self.assertRaises(RangeError):
            self.build('<object gid="5" x="0" y="0"/>')
        with self.assertRaises(RangeError):
            self.build('<object gid="9" x="0" y="0" width="1" height="1"/>')

    def test_gid_below_firstgid(self):
        with self.assertRaises(RangeError):
            self.build('<object gid="0" x="0" y="0"/>')


class BuildTest(unittest.TestCase):
    def test_layers_and_groups_in_order(self):
        root = ElementTree.fromstring(
            '<map width="2" height="1" tilewidth="16" tileheight="16">'
            + make_layer_xml([1, None])
            + '<objectgroup><object name="a" x="0" y="0"/><object name="b" x="0" y="0"/></objectgroup>'
            + make_layer_xml([None, 2], opacity=0.25)
            + '<objectgroup><object name="c" x="0" y="0"/></objectgroup>'
            + "</map>"
        )
        metadata = MapMetadata(2, 1, 16, 16, 1)
        layers, objects = builder.build(root, metadata, build_subrects(32, 16, 16, 16))
        self.assertEqual([255, 63], [layer.opacity for layer in layers])
        self.assertEqual(["a", "b", "c"], [obj.name for obj in objects])

    def test_no_object_groups(self):
        root = ElementTree.fromstring("<map>" + make_layer_xml([]) + "</map>")
        layers, objects = builder.build(root, MapMetadata(1, 1, 1, 1, 1), [])
        self.assertEqual(1, len(layers))
        self.assertEqual([], objects)
