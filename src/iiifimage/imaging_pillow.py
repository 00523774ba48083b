#
# QIS IIIF Image Core
#
# Document:      imaging_pillow.py
# Date started:  19 Oct 2026
# By:            Quru Ltd
# Purpose:       Reads image dimensions with the Python Pillow library
# Requires:      Pillow
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

import PIL
from PIL import Image

from .errors import ImageError
from .image_info import ImageInformation


class PillowProbe(object):
    """
    Reads image dimensions using Pillow. Pillow only reads the file header
    when an image is opened, so this does not decode the image.
    """
    def get_version_info(self):
        """
        Returns a string with the Pillow library version information.
        """
        return 'Pillow ' + PIL.__version__

    def get_image_dimensions(self, filepath):
        """
        Returns an ImageInformation for an image file.
        Raises an ImageError if the file cannot be read as an image.
        """
        try:
            with Image.open(filepath) as image:
                (width, height) = image.size
        except (IOError, ValueError) as e:
            raise ImageError('Cannot read image dimensions of %s: %s' % (filepath, str(e)))
        return ImageInformation(width, height)
