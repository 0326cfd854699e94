"""
Copyright (C) 2012-2023, Leif Theden <leif.theden@gmail.com>

This file is part of tmxlevel.

tmxlevel is free software: you can redistribute it and/or modify
it under the terms of the GNU Lesser General Public License as
published by the Free Software Foundation, either version 3 of the
License, or (at your option) any later version.

tmxlevel is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU Lesser General Public License for more details.

You should have received a copy of the GNU Lesser General Public
License along with tmxlevel.  If not, see <https://www.gnu.org/licenses/>.
"""
import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple
from xml.etree import ElementTree

from .objects import Layer, MapMetadata, Object, PlacedTile, Point, Rect
from .utils import (
    RangeError,
    StructureError,
    convert_to_int,
    getdefault,
    has_attribute,
)

__all__ = [
    "advance_cursor",
    "build",
    "build_layer",
    "build_object",
    "lookup_subrect",
    "opacity_to_alpha",
    "parse_properties",
]

logger = logging.getLogger(__name__)


def opacity_to_alpha(opacity: Optional[float]) -> int:
    """Convert a Tiled opacity fraction to an alpha value from 0 to 255

    Missing or malformed opacity ("abc", "nan") is fully opaque.  The
    fraction is clamped to [0, 1] and the result is truncated, so 0.5
    becomes 127.

    """
    if opacity is None or math.isnan(opacity):
        return 255
    opacity = min(max(opacity, 0.0), 1.0)
    return int(255 * opacity)


def advance_cursor(x: int, y: int, width: int, height: int) -> Tuple[int, int]:
    """Move a raster cursor one cell right, wrapping to the next row

    The row wraps back to 0 after the last one; a layer with exactly
    width * height tiles leaves the cursor where it started.

    """
    x += 1
    if x >= width:
        x = 0
        y += 1
        if y >= height:
            y = 0
    return x, y


def lookup_subrect(subrects: Sequence[Rect], index: int) -> Rect:
    """Return the sub-rectangle for a tileset index

    Raises:
        RangeError: if index is outside of the sub-rectangle table.

    """
    if not 0 <= index < len(subrects):
        msg = "Tile index {0} is outside of the tileset (0-{1})"
        msg = msg.format(index, len(subrects) - 1)
        logger.error(msg)
        raise RangeError(msg)
    return subrects[index]


def parse_properties(node: ElementTree.Element) -> Dict[str, str]:
    """Parse the Tiled properties of an xml node and return a dict.

    Later properties with the same name replace earlier ones.

    Args:
        node (ElementTree.Element): Etree element to inspect.

    Raises:
        StructureError: if a property has no name or no value.

    Returns:
        Dict[str, str]: Dictionary of the properties, as set in the Tiled editor.

    """
    d = dict()
    properties = node.find("properties")
    if properties is None:
        return d
    for subnode in properties.findall("property"):
        name = subnode.get("name")
        if name is None:
            msg = "property missing name"
            logger.error(msg)
            raise StructureError(msg)
        # multi-line strings are stored as element text
        value = subnode.get("value", subnode.text)
        if value is None:
            msg = 'property "{0}" missing value'.format(name)
            logger.error(msg)
            raise StructureError(msg)
        d[name] = value
    return d


def build_layer(
    node: ElementTree.Element,
    metadata: MapMetadata,
    subrects: Sequence[Rect],
) -> Layer:
    """Build a tile layer from a <layer> node.

    Tiles carry no coordinates in the map; the position of each one is
    taken from a raster cursor that moves one cell per <tile> element.

    Args:
        node (ElementTree.Element): The layer node.
        metadata (MapMetadata): Map dimensions and firstgid.
        subrects (Sequence[Rect]): Tileset sub-rectangle table.

    Raises:
        StructureError: if the layer has no usable data.
        RangeError: if a GID is past the end of the tileset.

    Returns:
        Layer: The layer, holding only cells that have a tile.

    """
    get = getdefault(node)
    name = get("name", default="")
    opacity = opacity_to_alpha(get("opacity", float))
    layer = Layer(name=name, opacity=opacity)

    data_node = node.find("data")
    if data_node is None:
        msg = "layer missing data"
        logger.error(msg)
        raise StructureError(msg)

    encoding = data_node.get("encoding")
    if encoding:
        msg = 'layer "{0}": data encoding {1} is not supported'.format(name, encoding)
        logger.error(msg)
        raise StructureError(msg)

    color = (255, 255, 255, opacity)
    tw, th = metadata.tilewidth, metadata.tileheight
    x = y = 0
    for tile_node in data_node.findall("tile"):
        gid = getdefault(tile_node)("gid", convert_to_int, 0)
        if gid:
            index = gid - metadata.firstgid
            if index >= 0:
                rect = lookup_subrect(subrects, index)
                position = Point(x * tw, y * th)
                layer.tiles.append(PlacedTile(index, rect, position, color))
        x, y = advance_cursor(x, y, metadata.width, metadata.height)

    return layer


def build_object(
    node: ElementTree.Element,
    metadata: MapMetadata,
    subrects: Sequence[Rect],
) -> Object:
    """Build an Object from an <object> node.

    Size comes from the width/height attributes when present; otherwise a
    tile object takes the size of its tile, and anything else is a 0x0
    marker.

    Raises:
        RangeError: if the object GID is outside of the tileset.

    """
    get = getdefault(node)
    x = get("x", convert_to_int, 0)
    y = get("y", convert_to_int, 0)
    width = height = 0
    image_rect = None
    gid = 0

    if has_attribute(node, "width"):
        width = get("width", convert_to_int, 0)
        height = get("height", convert_to_int, 0)
        if has_attribute(node, "gid"):
            gid = get("gid", convert_to_int, 0)
            image_rect = lookup_subrect(subrects, gid - metadata.firstgid)
    elif has_attribute(node, "gid"):
        gid = get("gid", convert_to_int, 0)
        image_rect = lookup_subrect(subrects, gid - metadata.firstgid)
        width = image_rect.width
        height = image_rect.height

    return Object(
        name=get("name", default=""),
        type=get("type", default=""),
        rect=Rect(x, y, width, height),
        properties=parse_properties(node),
        image_rect=image_rect,
        gid=gid,
    )


def build(
    root: ElementTree.Element,
    metadata: MapMetadata,
    subrects: Sequence[Rect],
) -> Tuple[List[Layer], List[Object]]:
    """Build the tile layers and objects of a map.

    Layers keep their document order.  Objects from every object group are
    collected into one list, in document order.

    Args:
        root (ElementTree.Element): The <map> node.
        metadata (MapMetadata): Map dimensions and firstgid.
        subrects (Sequence[Rect]): Tileset sub-rectangle table.

    Returns:
        Tuple[List[Layer], List[Object]]: The layers and objects.

    """
    layers = [build_layer(node, metadata, subrects) for node in root.findall("layer")]

    objects = list()
    groups = root.findall("objectgroup")
    if not groups:
        logger.debug("No object groups found")
    for group in groups:
        objects.extend(
            build_object(node, metadata, subrects) for node in group.findall("object")
        )

    return layers, objects
