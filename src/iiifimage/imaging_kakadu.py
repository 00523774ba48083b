#
# QIS IIIF Image Core
#
# Document:      imaging_kakadu.py
# Date started:  19 Oct 2026
# By:            Quru Ltd
# Purpose:       Builds Kakadu kdu_expand command lines for JPEG 2000 images
# Requires:      Kakadu kdu_expand
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

import shlex

from .image_info import ImageInformation
from .regions import FullRegion, resolve_region
from .sizes import FullSize
from .transformation import MAX_REDUCTION_FACTOR
from .transformation import reduction_factor as size_reduction_factor


class KakaduCommandFactory(object):
    """
    Translates the region and size of a Transformation into a "kdu_expand"
    command line that decodes a JPEG 2000 image to a file.

    The region is given to Kakadu as fractions of the image width and height,
    and when the requested size allows, a reduction factor tells Kakadu
    to decode from a smaller resolution level. Rotation, quality and format
    are left for post-processing of the decoded file.
    """
    def __init__(self, kdu_expand_path='kdu_expand', num_threads=4,
                 max_reduction=MAX_REDUCTION_FACTOR):
        self._kdu_expand_path = kdu_expand_path
        self._num_threads = num_threads
        self._max_reduction = max_reduction

    def command(self, input_path, transformation, info_fn, output_path):
        """
        Returns the kdu_expand command line for an image file.

        info_fn is a function returning the ImageInformation of the image,
        and is only called if the region or size is not "full".
        output_path is the file to decode into, its extension determines
        the output file type (e.g. ".bmp").
        """
        return '%s -quiet -i %s%s%s -num_threads %d -o %s' % (
            self._kdu_expand_path,
            shlex.quote(input_path),
            self.region(transformation, info_fn) or '',
            self.reduce(transformation, info_fn) or '',
            self._num_threads,
            shlex.quote(output_path)
        )

    def region(self, transformation, info_fn):
        """
        Returns the -region option for the command line, or None for the
        full image. The option value is "{top,left},{height,width}" with each
        number a fraction of the image height or width.
        """
        if isinstance(transformation.region, FullRegion):
            return None
        image_info = info_fn()
        box = resolve_region(transformation.region, image_info)
        return ' -region "{%r,%r},{%r,%r}"' % (
            box.y / float(image_info.height),
            box.x / float(image_info.width),
            box.height / float(image_info.height),
            box.width / float(image_info.width)
        )

    def reduce(self, transformation, info_fn):
        """
        Returns the -reduce option for the command line, or None if the
        image must be decoded at full resolution.
        """
        factor = self.reduction_factor(transformation, info_fn)
        return (' -reduce %d' % factor) if factor else None

    def reduction_factor(self, transformation, info_fn):
        """
        Returns the number of resolution levels that can be discarded when
        decoding, or None. This is calculated against the dimensions of the
        requested region, which is what the size applies to.
        """
        if isinstance(transformation.size, FullSize):
            return None
        image_info = info_fn()
        if not isinstance(transformation.region, FullRegion):
            box = resolve_region(transformation.region, image_info)
            image_info = ImageInformation(
                max(1, int(box.width)), max(1, int(box.height))
            )
        return size_reduction_factor(
            transformation.size, image_info, self._max_reduction
        )
