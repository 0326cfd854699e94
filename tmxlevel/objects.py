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
from __future__ import annotations

from collections import namedtuple
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .utils import convert_to_bool, convert_to_int

__all__ = (
    "Rect",
    "Point",
    "Color",
    "MapMetadata",
    "Tileset",
    "ImagePlaceholder",
    "PlacedTile",
    "Layer",
    "Object",
    "Level",
)

# Rect is accepted by pygame wherever a rect-style tuple is
Rect = namedtuple("Rect", ["left", "top", "width", "height"])
Point = namedtuple("Point", ["x", "y"])
Color = Tuple[int, int, int, int]


@dataclass(frozen=True)
class MapMetadata:
    width: int  # width of map in tiles
    height: int  # height of map in tiles
    tilewidth: int  # width of a tile in pixels
    tileheight: int  # height of a tile in pixels
    firstgid: int


@dataclass(frozen=True)
class Tileset:
    firstgid: int
    source: str
    width: int  # atlas width in pixels
    height: int  # atlas height in pixels
    columns: int
    rows: int

    @property
    def tilecount(self) -> int:
        return self.columns * self.rows


@dataclass
class ImagePlaceholder:
    """Stand-in atlas returned by the default image loader"""

    source: str
    width: int
    height: int
    colorkey: Optional[Tuple[int, int, int]] = None

    def get_size(self) -> Tuple[int, int]:
        return self.width, self.height


@dataclass
class PlacedTile:
    index: int  # index into the sub-rectangle table
    rect: Rect  # area of the atlas
    position: Point  # pixel position on the map
    color: Color  # white, with the layer opacity as alpha


@dataclass
class Layer:
    name: str
    opacity: int
    tiles: List[PlacedTile] = field(default_factory=list)

    def __iter__(self) -> Iterator[PlacedTile]:
        yield from self.tiles

    def __len__(self) -> int:
        return len(self.tiles)


@dataclass
class Object:
    name: str
    type: str
    rect: Rect
    properties: Dict[str, str] = field(default_factory=dict)
    image_rect: Optional[Rect] = None
    gid: int = 0

    @property
    def x(self) -> int:
        return self.rect.left

    @property
    def y(self) -> int:
        return self.rect.top

    @property
    def width(self) -> int:
        return self.rect.width

    @property
    def height(self) -> int:
        return self.rect.height

    def get_property_string(self, name: str, default: str = "") -> str:
        return self.properties.get(name, default)

    def get_property_int(self, name: str, default: int = 0) -> int:
        """Return property as int, or default if it is not set or not a number

        Fractional values are truncated, so "1.5" is 1.

        """
        try:
            return convert_to_int(self.properties[name])
        except (KeyError, ValueError, OverflowError):
            return default

    def get_property_float(self, name: str, default: float = 0.0) -> float:
        try:
            return float(self.properties[name])
        except (KeyError, ValueError):
            return default

    def get_property_bool(self, name: str, default: bool = False) -> bool:
        try:
            return convert_to_bool(self.properties[name])
        except KeyError:
            return default


@dataclass
class Level:
    """Layers, objects and the tileset atlas loaded from a .tmx map.

    The level is built once by the loader and should be treated as read-only.

    """

    filename: str
    metadata: MapMetadata
    tileset: Tileset
    atlas: Any  # the image object type will depend on the loader
    subrects: List[Rect]
    layers: List[Layer] = field(default_factory=list)
    objects: List[Object] = field(default_factory=list)

    def __repr__(self):
        return '<{0}: "{1}">'.format(self.__class__.__name__, self.filename)

    # iterate over placed tiles in draw order
    def __iter__(self) -> Iterator[PlacedTile]:
        for layer in self.layers:
            yield from layer

    @property
    def width(self) -> int:
        return self.metadata.width

    @property
    def height(self) -> int:
        return self.metadata.height

    @property
    def firstgid(self) -> int:
        return self.metadata.firstgid

    @property
    def tile_size(self) -> Tuple[int, int]:
        return self.metadata.tilewidth, self.metadata.tileheight

    @property
    def pixel_size(self) -> Tuple[int, int]:
        return (
            self.metadata.width * self.metadata.tilewidth,
            self.metadata.height * self.metadata.tileheight,
        )

    def get_layer_by_name(self, name: str) -> Optional[Layer]:
        """Return the first layer with this name, or None"""
        for layer in self.layers:
            if layer.name == name:
                return layer
        return None

    def get_object(self, name: str) -> Optional[Object]:
        """Find the first object by name, case-sensitive.

        Args:
            name (str): The object's name.

        Returns:
            Optional[Object]: The object, or None if no object has this name.

        """
        for obj in self.objects:
            if obj.name == name:
                return obj
        return None

    def get_objects(self, name: str) -> List[Object]:
        """Return all objects with this name, in map order"""
        return [obj for obj in self.objects if obj.name == name]
