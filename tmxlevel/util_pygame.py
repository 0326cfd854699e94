# -*- coding: utf-8 -*-
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
from typing import Optional, Tuple

from tmxlevel.loader import load_level
from tmxlevel.objects import Level
from tmxlevel.utils import AssetError, FileError

logger = logging.getLogger(__name__)

try:
    import pygame
except ImportError:
    logger.error("cannot import pygame (is it installed?)")
    raise

__all__ = ["load_pygame", "pygame_image_loader", "draw_level"]


def smart_convert(
    original: pygame.Surface,
    colorkey: Optional[Tuple[int, int, int]],
    pixelalpha: bool,
) -> pygame.Surface:
    """
    Return new pygame Surface with optimal pixel format for blitting

    Conversion needs a display mode; without one the surface is only
    given its colorkey.

    Parameters:
        original: atlas surface
        colorkey: color that will be transparent
        pixelalpha: if true, keep per-pixel alpha of the source image

    Returns:
        new surface

    """
    if pygame.display.get_init() and pygame.display.get_surface():
        if pixelalpha and original.get_flags() & pygame.SRCALPHA:
            surface = original.convert_alpha()
        else:
            surface = original.convert()
    else:
        surface = original.copy()

    if colorkey:
        apply_colorkey(surface, colorkey)
    return surface


def apply_colorkey(surface: pygame.Surface, colorkey: Tuple[int, int, int]) -> None:
    """Make every pixel of the colorkey color transparent, in place"""
    if surface.get_flags() & pygame.SRCALPHA:
        # colorkeys are ignored on per-pixel alpha surfaces
        pixels = pygame.PixelArray(surface)
        pixels.replace(pygame.Color(*colorkey), pygame.Color(0, 0, 0, 0))
        pixels.close()
    else:
        surface.set_colorkey(colorkey, pygame.RLEACCEL)


def pygame_image_loader(filename: str, colorkey, **kwargs) -> pygame.Surface:
    """
    tmxlevel image loader for pygame

    Parameters:
        filename: filename, including path, to load
        colorkey: color of the transparent pixels

    Raises:
        FileError: if the file does not exist
        AssetError: if pygame cannot decode the image

    Returns:
        the atlas surface

    """
    pixelalpha = kwargs.get("pixelalpha", True)

    if not os.path.exists(filename):
        msg = "Failed to load tile sheet {0}: file not found".format(filename)
        logger.error(msg)
        raise FileError(msg)

    try:
        image = pygame.image.load(filename)
    except pygame.error as err:
        msg = "Failed to load tile sheet {0}: {1}".format(filename, err)
        logger.error(msg)
        raise AssetError(msg) from err

    return smart_convert(image, colorkey, pixelalpha)


def load_pygame(filename: str, **kwargs) -> Level:
    """Load a TMX file and its tileset image, and return a Level

    PYGAME USERS: Use me.

    The atlas is a pygame Surface with the tileset colorkey already set.
    If a display mode is set, the atlas is also converted for fast
    blitting, so load after creating the window.

    Parameters:
        filename: filename to load
        pixelalpha: keep per-pixel alpha of the tileset image (default True)

    Returns:
        new Level object

    """
    kwargs["image_loader"] = pygame_image_loader
    return load_level(filename, **kwargs)


def draw_level(
    surface: pygame.Surface,
    level: Level,
    offset: Tuple[int, int] = (0, 0),
) -> None:
    """Blit every tile of the level to the surface, in layer order

    The layer opacity is applied as the alpha of the atlas while the
    layer is drawn.

    Parameters:
        surface: destination surface
        level: Level loaded with load_pygame
        offset: pixel offset of the map on the surface

    """
    atlas = level.atlas
    ox, oy = offset
    surface_blit = surface.blit
    original_alpha = atlas.get_alpha()
    try:
        for layer in level.layers:
            atlas.set_alpha(layer.opacity)
            for tile in layer:
                x, y = tile.position
                surface_blit(atlas, (x + ox, y + oy), tile.rect)
    finally:
        atlas.set_alpha(original_alpha)
