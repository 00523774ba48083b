#
# QIS IIIF Image Core
#
# Document:      transformation.py
# Date started:  19 Oct 2026
# By:            Quru Ltd
# Purpose:       The decoded image request and multi-resolution reduction
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

from collections import namedtuple

from .image_info import ImageInformation
from .regions import FULL_REGION
from .sizes import (
    AbsoluteSize, BestFitSize, FullSize, PercentageSize,
    preserves_aspect, target_dimensions
)

# Kakadu's default number of wavelet decomposition levels
MAX_REDUCTION_FACTOR = 5


class Transformation(namedtuple('Transformation',
                                ['region', 'size', 'quality', 'rotation', 'format'])):
    """
    The complete set of decoded image request parameters.

    region   - one of the region types from regions.py
    size     - one of the size types from sizes.py
    quality  - None, or "grey" or "bitonal"
    rotation - None, or the non-zero number of degrees to rotate clockwise
    format   - the output file format, e.g. "jpg"
    """
    __slots__ = ()

    def without_crop(self):
        """
        Returns a copy of this transformation for an image that has
        already been cropped to the requested region.
        """
        return self._replace(region=FULL_REGION)

    def reduce(self, factor):
        """
        Returns a copy of this transformation for an image that has already
        been reduced in size by 2^factor.
        """
        return self._replace(size=reduce_size(self.size, factor))


def reduce_size(size, factor):
    """
    Returns the size to apply to an image that has already been reduced
    by 2^factor, so that the final size is unchanged. Only percentages are
    relative to the image size, the other size types are returned as-is.
    """
    if not factor:
        return size
    if isinstance(size, PercentageSize):
        return PercentageSize(size.percent * (2 ** factor))
    elif isinstance(size, (FullSize, AbsoluteSize, BestFitSize)):
        return size
    raise TypeError('Unknown size type: ' + type(size).__name__)


def reduced_dimensions(image_info, factor):
    """
    Returns the ImageInformation of an image decoded at 1/2^factor scale.
    Partial pixels are rounded up, as JPEG 2000 decoders do.
    """
    if not factor:
        return image_info
    divisor = 2 ** factor
    return ImageInformation(
        -(-image_info.width // divisor),
        -(-image_info.height // divisor)
    )


def reduction_factor(size, image_info, max_factor=MAX_REDUCTION_FACTOR):
    """
    Returns the largest number of times (up to max_factor) that an image
    of the given dimensions can be halved in size while remaining at least
    as large as the requested size in both width and height. The result
    is 0 if the image cannot be halved.

    Returns None for the full size, and for an exact width and height that
    change the aspect ratio, since the image must then be decoded at full
    resolution.
    """
    if isinstance(size, FullSize):
        return None
    elif isinstance(size, (AbsoluteSize, PercentageSize, BestFitSize)):
        if not preserves_aspect(size, image_info):
            return None
    else:
        raise TypeError('Unknown size type: ' + type(size).__name__)

    (target_w, target_h) = target_dimensions(size, image_info)
    scale = max(
        float(target_w) / image_info.width,
        float(target_h) / image_info.height
    )
    factor = 0
    while factor < max_factor and scale * 2 <= 1.0:
        scale *= 2
        factor += 1
    # Back off if rounding leaves the reduced image too small
    while factor > 0 and not _reduction_covers(image_info, factor, target_w, target_h):
        factor -= 1
    return factor


def _reduction_covers(image_info, factor, target_w, target_h):
    divisor = float(2 ** factor)
    return (
        image_info.width / divisor >= target_w and
        image_info.height / divisor >= target_h
    )
