#
# QIS IIIF Image Core
#
# Document:      imaging_magick.py
# Date started:  19 Oct 2026
# By:            Quru Ltd
# Purpose:       Builds ImageMagick command lines for a Transformation
# Requires:      ImageMagick convert and identify
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
import shlex

from .image_attrs import QUALITY_BITONAL, QUALITY_GREY
from .image_info import ImageInformation
from .regions import (
    AbsoluteRegion, FullRegion, PercentageRegion, SquareRegion,
    percentage_offsets, resolve_region, square_offsets
)
from .sizes import AbsoluteSize, BestFitSize, FullSize, PercentageSize
from .util import format_number

_IDENTIFY_RX = re.compile(r'\s*(\d+)x(\d+)')


class ImageMagickCommandFactory(object):
    """
    Translates a Transformation into an ImageMagick "convert" command line
    that writes the encoded image to standard output.

    The options are always in the order crop, resize, rotate, colorspace,
    because each step works on the image geometry left by the one before.
    """
    def __init__(self, convert_path='convert', identify_path='identify'):
        self._convert_path = convert_path
        self._identify_path = identify_path

    def command(self, input_path, transformation, info_fn):
        """
        Returns the convert command line for an image file.

        info_fn is a function returning the ImageInformation of the image,
        and is only called if there is a region to crop.
        """
        options = [self._convert_path]
        crop = self.crop_geometry(transformation.region, info_fn)
        if crop:
            options += ['-crop', crop]
        resize = self.resize_geometry(transformation.size)
        if resize:
            options += ['-resize', resize]
        if transformation.rotation is not None:
            # Fill the corners exposed by the rotation
            options += [
                '-virtual-pixel', 'white',
                '+distort', 'srt', format_number(transformation.rotation)
            ]
        if transformation.quality in (QUALITY_GREY, QUALITY_BITONAL):
            options += ['-colorspace', 'Gray']
        if transformation.quality == QUALITY_BITONAL:
            options += ['-type', 'Bilevel']
        options += [shlex.quote(input_path), transformation.format + ':-']
        return ' '.join(options)

    def identify_command(self, input_path):
        """
        Returns the identify command line that prints an image's dimensions
        as "<height>x<width>".
        """
        return ' '.join([self._identify_path, '-format', '%hx%w', shlex.quote(input_path)])

    @staticmethod
    def parse_identify_output(output):
        """
        Returns an ImageInformation from the output of identify_command(),
        as bytes or string. Raises a ValueError if the output is not recognised.
        """
        if isinstance(output, bytes):
            output = output.decode('utf8', 'replace')
        match = _IDENTIFY_RX.match(output)
        if not match:
            raise ValueError('Unrecognised image dimensions: ' + output[:100])
        return ImageInformation(width=int(match.group(2)), height=int(match.group(1)))

    @staticmethod
    def crop_geometry(region, info_fn):
        """
        Returns the ImageMagick geometry for a region, or None for no cropping.

        A percentage region keeps its width and height as percentages,
        which ImageMagick supports, but ImageMagick does not support
        percentage offsets, so these are calculated in pixels.

        Raises an InvalidAttributeError if the region lies outside the image.
        """
        if isinstance(region, FullRegion):
            return None
        if not isinstance(region, (SquareRegion, PercentageRegion, AbsoluteRegion)):
            raise TypeError('Unknown region type: ' + type(region).__name__)
        image_info = info_fn()
        resolve_region(region, image_info)
        if isinstance(region, SquareRegion):
            side, x, y = square_offsets(image_info)
            return '%dx%d+%d+%d' % (side, side, x, y)
        elif isinstance(region, PercentageRegion):
            x, y = percentage_offsets(region, image_info)
            return '%s%%x%s+%d+%d' % (
                format_number(region.width), format_number(region.height), x, y
            )
        else:
            return '%dx%d+%d+%d' % (region.width, region.height, region.x, region.y)

    @staticmethod
    def resize_geometry(size):
        """
        Returns the ImageMagick geometry for a size, or None for no resizing.
        """
        if isinstance(size, FullSize):
            return None
        elif isinstance(size, AbsoluteSize):
            if size.width is None:
                return 'x%d' % size.height
            elif size.height is None:
                return '%d' % size.width
            else:
                # Force the exact size, ignoring the aspect ratio
                return '%dx%d!' % (size.width, size.height)
        elif isinstance(size, PercentageSize):
            return format_number(size.percent) + '%'
        elif isinstance(size, BestFitSize):
            return '%dx%d' % (size.width, size.height)
        raise TypeError('Unknown size type: ' + type(size).__name__)
