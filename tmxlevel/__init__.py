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

from .loader import COLORKEY, default_image_loader, load_level
from .objects import *
from .utils import (
    AssetError,
    FileError,
    LevelError,
    RangeError,
    StructureError,
    convert_to_bool,
)

logger = logging.getLogger(__name__)

try:
    from tmxlevel.util_pygame import load_pygame
except ImportError:
    logger.debug("cannot import pygame tools")

__version__ = (1, 0)
__author__ = "bitcraft"
__author_email__ = "leif.theden@gmail.com"
__description__ = "Tile layer and object loader for single-tileset TMX levels"
