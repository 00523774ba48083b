#
# QIS IIIF Image Core
#
# Document:      errors.py
# Date started:  19 Oct 2026
# By:            Quru Ltd
# Purpose:       Internal errors and exceptions
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


class ParameterError(ValueError):
    """
    An error resulting from an invalid parameter value.
    """
    pass


class MissingFormatError(ParameterError):
    """
    Raised when an image is requested without any output format.
    This is checked before any other request parameter.
    """
    def __init__(self, message='You must provide a format'):
        ParameterError.__init__(self, message)


class InvalidAttributeError(ParameterError):
    """
    An error resulting from an invalid region, size, quality, rotation
    or format value. Adds the name of the request parameter as 'field'
    and the value that was rejected as 'raw_value'.
    """
    def __init__(self, message, field=None, raw_value=None):
        ParameterError.__init__(self, message)
        self.field = field
        self.raw_value = raw_value


class SourceNotFoundError(ValueError):
    """
    An error resulting from a request for a source image that cannot be found.
    """
    pass


class ImageError(ValueError):
    """
    An error resulting from an invalid or unsupported imaging operation.
    """
    pass


class RenderError(ImageError):
    """
    Raised when an external imaging command fails, times out, or returns no data.
    Adds optional 'command' and 'stderr' attributes.
    """
    def __init__(self, message, command=None, stderr=None):
        ImageError.__init__(self, message)
        self.command = command if command is not None else ''
        self.stderr = stderr if stderr is not None else ''


class SecurityError(Exception):
    """
    An error resulting from some unauthorised action.
    """
    pass


class StartupError(Exception):
    """
    An error that should prevent the image manager from starting.
    """
    pass
