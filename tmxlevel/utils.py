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
from typing import Any, Callable, Optional
from xml.etree import ElementTree

__all__ = [
    "LevelError",
    "FileError",
    "StructureError",
    "AssetError",
    "RangeError",
    "convert_to_bool",
    "convert_to_int",
    "getdefault",
    "has_attribute",
]

logger = logging.getLogger(__name__)


class LevelError(Exception):
    """Base class for every error raised while loading a level."""


class FileError(LevelError):
    """The map file or atlas image is missing, unreadable or not XML."""


class StructureError(LevelError):
    """A required element or attribute is absent from the map."""


class AssetError(LevelError):
    """The atlas image cannot be decoded."""


class RangeError(LevelError):
    """A GID resolves outside of the tileset sub-rectangle table."""


def convert_to_bool(value: Any) -> bool:
    """Convert a few common variations of "true" and "false" to boolean

    Args:
        value (Any): Value to test.

    Raises:
        ValueError: If `value` cannot be converted to a boolean.

    Returns:
        bool: The converted boolean.

    """
    value = str(value).strip()
    if value:
        value = value.lower()[0]
        if value in ("1", "y", "t"):
            return True
        if value in ("-", "0", "n", "f"):
            return False
        raise ValueError('cannot parse "{}" as bool'.format(value))
    else:
        return False


def convert_to_int(value: str) -> int:
    """Convert decimal text to int, truncating fractional values toward zero

    Tiled writes pixel coordinates such as "10.5"; those become 10.

    Raises:
        ValueError: If `value` is not a decimal number.

    """
    try:
        return int(value)
    except ValueError:
        return int(float(value))


def has_attribute(node: ElementTree.Element, key: str) -> bool:
    """Return True if the attribute is present on the node, even if empty"""
    return key in node.attrib


def getdefault(node: ElementTree.Element):
    """Return typed attribute reader for an xml node

    The reader never fails: an absent attribute, or one that the converter
    rejects, returns `default`.

    >>> get = getdefault(node)
    >>> get("width", convert_to_int, 0)

    """
    attrib = node.attrib

    def get(key: str, type: Optional[Callable] = None, default: Any = None):
        try:
            value = attrib[key]
        except KeyError:
            return default
        if type is None:
            return value
        try:
            return type(value)
        except (ValueError, OverflowError):
            msg = 'Attribute {0}="{1}" on <{2}> is malformed, using {3}'
            logger.debug(msg.format(key, value, node.tag, default))
            return default

    return get
