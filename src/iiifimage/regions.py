#
# QIS IIIF Image Core
#
# Document:      regions.py
# Date started:  19 Oct 2026
# By:            Quru Ltd
# Purpose:       IIIF region parameter parsing and resolution
# Requires:
# Copyright:     Quru Ltd (www.quru.com)
# Licence:
#
#   This program is free software: you can redistribute it and/or modify
#   it under the terms of the GNU Affero General Public License as published
#   by the Free Software Foundation, either version 3 of the License, or
#   (at your option) any later version.
#
#   This program is distributed in the hope that it will be useful,
#   but WITHOUT ANY WARRANTY; without even the implied warranty of
#   MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
#   GNU Affero General Public License for more details.
#
#   You should have received a copy of the GNU Affero General Public License
#   along with this program.  If not, see http://www.gnu.org/licenses/
#
# Notable modifications:
# Date       By    Details
# =========  ====  ============================================================
#
# The region types are plain immutable values. Consumers (the cache key,
# the command factories) match on the type explicitly and raise a TypeError
# for a type they do not know, so that adding a grammar means visiting them all.
#

import re
from collections import namedtuple

from .errors import InvalidAttributeError
from .util import format_number, parse_number, round_half_up


class FullRegion(namedtuple('FullRegion', [])):
    """
    The whole image, no cropping.
    """
    __slots__ = ()


class SquareRegion(namedtuple('SquareRegion', [])):
    """
    The largest centred square of the image.
    The size and offset depend on the image dimensions.
    """
    __slots__ = ()


class AbsoluteRegion(namedtuple('AbsoluteRegion', ['x', 'y', 'width', 'height'])):
    """
    A crop box in pixels.
    """
    __slots__ = ()


class PercentageRegion(namedtuple('PercentageRegion', ['x', 'y', 'width', 'height'])):
    """
    A crop box in percentages of the image width and height.
    """
    __slots__ = ()


class CropBox(namedtuple('CropBox', ['x', 'y', 'width', 'height'])):
    """
    A region resolved into pixels for a particular image.
    Offsets are whole pixels, the width and height may be fractional
    for a percentage region.
    """
    __slots__ = ()


FULL_REGION = FullRegion()
SQUARE_REGION = SquareRegion()

_NUM = r'(\d+(?:\.\d+)?)'
_INT = r'(\d+)'

# In order of precedence, first match wins
_REGION_RULES = [
    (re.compile(r'full'), lambda m: FULL_REGION),
    (re.compile(r'square'), lambda m: SQUARE_REGION),
    (re.compile(r'pct:' + ','.join([_NUM] * 4)),
     lambda m: PercentageRegion(*[parse_number(v) for v in m.groups()])),
    (re.compile(','.join([_INT] * 4)),
     lambda m: AbsoluteRegion(*[int(v) for v in m.groups()])),
]


def decode_region(region):
    """
    Parses a IIIF region parameter, returning one of the region types.
    None is treated the same as "full".

    Raises an InvalidAttributeError if the value is not a valid region,
    including a region with a zero width or height.
    """
    if region is None:
        return FULL_REGION
    for (rx, make_region) in _REGION_RULES:
        match = rx.fullmatch(region)
        if match:
            decoded = make_region(match)
            # IIIF Image API 2.1 section 4.1: a zero width or height is a 400 error
            if isinstance(decoded, (AbsoluteRegion, PercentageRegion)):
                if decoded.width == 0 or decoded.height == 0:
                    break
            return decoded
    raise InvalidAttributeError('Invalid region: ' + str(region), 'region', region)


def region_to_str(region):
    """
    Returns the normalised IIIF form of a region, or None for the full image.
    """
    if isinstance(region, FullRegion):
        return None
    elif isinstance(region, SquareRegion):
        return 'square'
    elif isinstance(region, PercentageRegion):
        return 'pct:' + ','.join(format_number(v) for v in region)
    elif isinstance(region, AbsoluteRegion):
        return ','.join(str(v) for v in region)
    raise TypeError('Unknown region type: ' + type(region).__name__)


def square_offsets(image_info):
    """
    Returns a tuple of (side, x offset, y offset) for the largest centred
    square of an image.
    """
    side = min(image_info.width, image_info.height)
    offset = (max(image_info.width, image_info.height) - side) // 2
    if image_info.height >= image_info.width:
        return (side, 0, offset)
    else:
        return (side, offset, 0)


def percentage_offsets(region, image_info):
    """
    Returns a tuple of the (x, y) pixel offsets for a percentage region,
    rounded to whole pixels with halves rounded up.
    """
    return (
        round_half_up(image_info.width * float(region.x) / 100.0),
        round_half_up(image_info.height * float(region.y) / 100.0)
    )


def resolve_region(region, image_info):
    """
    Resolves a region into a CropBox for an image of the given dimensions.
    The returned box is clipped so that it lies within the image.

    Raises an InvalidAttributeError if the region lies entirely outside
    the image.
    """
    if isinstance(region, FullRegion):
        box = (0, 0, image_info.width, image_info.height)
    elif isinstance(region, SquareRegion):
        side, x, y = square_offsets(image_info)
        box = (x, y, side, side)
    elif isinstance(region, PercentageRegion):
        x, y = percentage_offsets(region, image_info)
        box = (
            x, y,
            image_info.width * float(region.width) / 100.0,
            image_info.height * float(region.height) / 100.0
        )
    elif isinstance(region, AbsoluteRegion):
        box = tuple(region)
    else:
        raise TypeError('Unknown region type: ' + type(region).__name__)

    (x, y, w, h) = box
    if x >= image_info.width or y >= image_info.height:
        raw = region_to_str(region)
        raise InvalidAttributeError('Invalid region: ' + str(raw), 'region', raw)
    return CropBox(
        x, y,
        min(w, image_info.width - x),
        min(h, image_info.height - y)
    )
