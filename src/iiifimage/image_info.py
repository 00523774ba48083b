#
# QIS IIIF Image Core
#
# Document:      image_info.py
# Date started:  19 Oct 2026
# By:            Quru Ltd
# Purpose:       Intrinsic dimensions of a source image
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


class ImageInformation(namedtuple('ImageInformation', ['width', 'height'])):
    """
    Immutable record of a source image's width and height in pixels.
    """
    __slots__ = ()

    def __new__(cls, width, height):
        width = int(width)
        height = int(height)
        if width <= 0 or height <= 0:
            raise ValueError(
                'Image dimensions must be positive, got %dx%d' % (width, height)
            )
        return super(ImageInformation, cls).__new__(cls, width, height)

    def aspect(self):
        """
        Returns the width to height ratio as a float.
        """
        return float(self.width) / float(self.height)

    def to_dict(self):
        """
        Returns the dimensions in the form {'width': w, 'height': h}.
        """
        return {'width': self.width, 'height': self.height}
