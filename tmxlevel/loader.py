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
import os
from itertools import product
from typing import Any, List, Tuple
from xml.etree import ElementTree

from . import builder
from .objects import ImagePlaceholder, Level, MapMetadata, Rect, Tileset
from .utils import (
    AssetError,
    FileError,
    StructureError,
    convert_to_int,
    getdefault,
)

__all__ = [
    "COLORKEY",
    "build_subrects",
    "default_image_loader",
    "find_tileset",
    "load_atlas",
    "load_level",
    "parse_document",
    "read_metadata",
]

logger = logging.getLogger(__name__)

# pixels of this color in the tileset image are transparent
COLORKEY = (109, 159, 185)


def default_image_loader(filename: str, colorkey, **kwargs) -> ImagePlaceholder:
    """This default image loader does not decode the image.

    It returns a placeholder sized from the width and height declared on the
    tileset <image> node.  Suitable for loading a map without the images.

    Raises:
        FileError: if the image file does not exist.
        AssetError: if the image size is not declared in the map.

    """
    if not os.path.exists(filename):
        msg = "Failed to load tile sheet {0}: file not found".format(filename)
        logger.error(msg)
        raise FileError(msg)

    width = kwargs.get("width")
    height = kwargs.get("height")
    if not width or not height:
        msg = "Size of image {0} is not declared in the map".format(filename)
        logger.error(msg)
        raise AssetError(msg)
    return ImagePlaceholder(filename, width, height, colorkey)


def parse_document(filename: str) -> ElementTree.Element:
    """Parse the map file and return the root node

    Raises:
        FileError: if the file cannot be read or is not well-formed xml.

    """
    try:
        return ElementTree.parse(filename).getroot()
    except (OSError, ElementTree.ParseError) as err:
        msg = 'Loading level "{0}" failed: {1}'.format(filename, err)
        logger.error(msg)
        raise FileError(msg) from err


def find_tileset(root: ElementTree.Element) -> ElementTree.Element:
    """Return the tileset node of the map.

    Only one tileset per map is supported; others are ignored.

    Raises:
        StructureError: if the map has no tileset.

    """
    tilesets = root.findall("tileset")
    if not tilesets:
        msg = "missing tileset"
        logger.error(msg)
        raise StructureError(msg)
    if len(tilesets) > 1:
        logger.warning(
            "Map has %d tilesets, only the first is used", len(tilesets)
        )
    return tilesets[0]


def read_metadata(
    root: ElementTree.Element, tileset_node: ElementTree.Element
) -> MapMetadata:
    """Read the map dimensions and the tileset firstgid.

    Missing or malformed numbers are read as 0.

    """
    get = getdefault(root)
    return MapMetadata(
        width=get("width", convert_to_int, 0),
        height=get("height", convert_to_int, 0),
        tilewidth=get("tilewidth", convert_to_int, 0),
        tileheight=get("tileheight", convert_to_int, 0),
        firstgid=getdefault(tileset_node)("firstgid", convert_to_int, 0),
    )


def load_atlas(
    filename: str,
    tileset_node: ElementTree.Element,
    image_loader=default_image_loader,
    **kwargs,
) -> Tuple[str, Any]:
    """Load the tileset image with the color key applied.

    The image source is relative to the map file.

    Args:
        filename (str): Path of the map file.
        tileset_node (ElementTree.Element): The tileset node.
        image_loader: Function that will load the image.
        **kwargs: Passed to the image loader.

    Raises:
        StructureError: if the tileset has no image source.

    Returns:
        Tuple[str, Any]: The image source and the loaded atlas.

    """
    image_node = tileset_node.find("image")
    source = None if image_node is None else image_node.get("source")
    if not source:
        msg = "missing tileset image"
        logger.error(msg)
        raise StructureError(msg)

    get = getdefault(image_node)
    path = os.path.join(os.path.dirname(filename), source)
    atlas = image_loader(
        path,
        COLORKEY,
        width=get("width", convert_to_int),
        height=get("height", convert_to_int),
        **kwargs,
    )
    return source, atlas


def build_subrects(
    width: int, height: int, tilewidth: int, tileheight: int
) -> List[Rect]:
    """Split the atlas into tile sized rects, row by row.

    Partial tiles at the right and bottom edges are ignored.

    Args:
        width (int): Atlas width in pixels.
        height (int): Atlas height in pixels.
        tilewidth (int): Width of a tile in pixels.
        tileheight (int): Height of a tile in pixels.

    Returns:
        List[Rect]: columns * rows rects.

    """
    columns = width // tilewidth
    rows = height // tileheight
    return [
        Rect(x * tilewidth, y * tileheight, tilewidth, tileheight)
        for y, x in product(range(rows), range(columns))
    ]


def load_level(
    filename: str,
    image_loader=default_image_loader,
    **kwargs,
) -> Level:
    """Load a Tiled map and its tileset image.

    Args:
        filename (str): Filename of tiled map to load.
        image_loader: Function that will load the tileset image.  It is
            called with the path, the color key, the width and height
            declared in the map, and **kwargs.  The returned image must
            have a get_size() method.
        **kwargs: Additional keyword arguments for the image loader.

    Raises:
        FileError: if the map or image file cannot be read.
        StructureError: if the map is missing required elements.
        AssetError: if the image cannot be decoded.
        RangeError: if a tile GID is outside of the tileset.

    Returns:
        Level: The fully built level.

    """
    root = parse_document(filename)
    if root.tag != "map":
        msg = "missing map element"
        logger.error(msg)
        raise StructureError(msg)

    tileset_node = find_tileset(root)
    metadata = read_metadata(root, tileset_node)
    if metadata.width < 1 or metadata.height < 1:
        logger.warning(
            'Map "%s" has no size (%dx%d)', filename, metadata.width, metadata.height
        )

    # ***   the image must be loaded before gids are resolved   *** #
    source, atlas = load_atlas(filename, tileset_node, image_loader, **kwargs)

    if metadata.tilewidth < 1 or metadata.tileheight < 1:
        msg = "Tile size must be positive, got {0}x{1}".format(
            metadata.tilewidth, metadata.tileheight
        )
        logger.error(msg)
        raise StructureError(msg)

    atlas_width, atlas_height = atlas.get_size()
    columns = atlas_width // metadata.tilewidth
    rows = atlas_height // metadata.tileheight
    if columns < 1 or rows < 1:
        msg = "Tileset image {0} ({1}x{2}) is smaller than one tile".format(
            source, atlas_width, atlas_height
        )
        logger.error(msg)
        raise StructureError(msg)

    tileset = Tileset(
        firstgid=metadata.firstgid,
        source=source,
        width=atlas_width,
        height=atlas_height,
        columns=columns,
        rows=rows,
    )
    subrects = build_subrects(
        atlas_width, atlas_height, metadata.tilewidth, metadata.tileheight
    )
    layers, objects = builder.build(root, metadata, subrects)

    logger.debug(
        'Loaded "%s": %d layers, %d objects, %d tiles in tileset',
        filename,
        len(layers),
        len(objects),
        len(subrects),
    )
    return Level(
        filename=filename,
        metadata=metadata,
        tileset=tileset,
        atlas=atlas,
        subrects=subrects,
        layers=layers,
        objects=objects,
    )
