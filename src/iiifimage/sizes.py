#
# QIS IIIF Image Core
#
# Document:      sizes.py
# Date started:  19 Oct 2026
# By:            Quru Ltd
# Purpose:       IIIF size parameter parsing and target dimensions
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

import re
from collections import namedtuple

from .errors import InvalidAttributeError
from .util import format_number, parse_number, round_half_up


class FullSize(namedtuple('FullSize', [])):
    """
    No resizing.
    """
    __slots__ = ()


class AbsoluteSize(namedtuple('AbsoluteSize', ['width', 'height'])):
    """
    A resize to a width, a height, or both. When only one is given the
    other is scaled to keep the aspect ratio. When both are given the image
    is forced to exactly that size, distorting it if required.
    """
    __slots__ = ()


class PercentageSize(namedtuple('PercentageSize', ['percent'])):
    """
    A resize by a percentage of the image (or region) dimensions.
    """
    __slots__ = ()


class BestFitSize(namedtuple('BestFitSize', ['width', 'height'])):
    """
    A resize to fit inside a bounding box, keeping the aspect ratio.
    """
    __slots__ = ()


FULL_SIZE = FullSize()

# In order of precedence, first match wins
_SIZE_RULES = [
    (re.compile(r'full'), lambda m: FULL_SIZE),
    (re.compile(r',(\d+)'), lambda m: AbsoluteSize(None, int(m.group(1)))),
    (re.compile(r'(\d+),'), lambda m: AbsoluteSize(int(m.group(1)), None)),
    (re.compile(r'pct:(\d+(?:\.\d+)?)'), lambda m: PercentageSize(parse_number(m.group(1)))),
    (re.compile(r'(\d+),(\d+)'), lambda m: AbsoluteSize(int(m.group(1)), int(m.group(2)))),
    (re.compile(r'!(\d+),(\d+)'), lambda m: BestFitSize(int(m.group(1)), int(m.group(2)))),
]


def decode_size(size):
    """
    Parses a IIIF size parameter, returning one of the size types.
    None is treated the same as "full".

    Raises an InvalidAttributeError if the value is not a valid size.
    """
    if size is None:
        return FULL_SIZE
    for (rx, make_size) in _SIZE_RULES:
        match = rx.fullmatch(size)
        if match:
            decoded = make_size(match)
            if 0 in decoded:
                break
            return decoded
    raise InvalidAttributeError('Invalid size: ' + str(size), 'size', size)


def size_to_str(size):
    """
    Returns the normalised IIIF form of a size, or None for the full size.
    """
    if isinstance(size, FullSize):
        return None
    elif isinstance(size, AbsoluteSize):
        return '%s,%s' % (
            '' if size.width is None else size.width,
            '' if size.height is None else size.height
        )
    elif isinstance(size, PercentageSize):
        return 'pct:' + format_number(size.percent)
    elif isinstance(size, BestFitSize):
        return '!%d,%d' % (size.width, size.height)
    raise TypeError('Unknown size type: ' + type(size).__name__)


def target_dimensions(size, image_info):
    """
    Returns a tuple of the (width, height) in whole pixels that a size
    produces from an image of the given dimensions.
    """
    (img_w, img_h) = image_info
    if isinstance(size, FullSize):
        return (img_w, img_h)
    elif isinstance(size, AbsoluteSize):
        if size.width is not None and size.height is not None:
            return (size.width, size.height)
        elif size.width is not None:
            return (size.width, max(1, round_half_up(img_h * float(size.width) / img_w)))
        else:
            return (max(1, round_half_up(img_w * float(size.height) / img_h)), size.height)
    elif isinstance(size, PercentageSize):
        scale = float(size.percent) / 100.0
    elif isinstance(size, BestFitSize):
        scale = min(float(size.width) / img_w, float(size.height) / img_h)
    else:
        raise TypeError('Unknown size type: ' + type(size).__name__)
    return (
        max(1, round_half_up(img_w * scale)),
        max(1, round_half_up(img_h * scale))
    )


def preserves_aspect(size, image_info):
    """
    Returns whether a size keeps the aspect ratio of an image of the given
    dimensions. An exact width and height keeps the aspect ratio if either
    one, derived from the other, comes to within 1 pixel of the requested value.
    """
    if isinstance(size, (FullSize, PercentageSize, BestFitSize)):
        return True
    elif isinstance(size, AbsoluteSize):
        if size.width is None or size.height is None:
            return True
        (img_w, img_h) = image_info
        derived_w = round_half_up(img_w * float(size.height) / img_h)
        derived_h = round_half_up(img_h * float(size.width) / img_w)
        return abs(derived_w - size.width) <= 1 or abs(derived_h - size.height) <= 1
    raise TypeError('Unknown size type: ' + type(size).__name__)
