#
# QIS IIIF Image Core
#
# Document:      __init__.py
# Date started:  19 Oct 2026
# By:            Quru Ltd
# Purpose:       Package exports
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

from .__about__ import __version__
from .errors import (
    InvalidAttributeError, MissingFormatError, RenderError, SourceNotFoundError
)
from .image_info import ImageInformation
from .image_manager import ImageManager
