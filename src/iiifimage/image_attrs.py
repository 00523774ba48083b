#
# QIS IIIF Image Core
#
# Document:      image_attrs.py
# Date started:  19 Oct 2026
# By:            Quru Ltd
# Purpose:       Decodes and validates IIIF image request parameters
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

import json
import re

from .errors import InvalidAttributeError, MissingFormatError
from .regions import decode_region, region_to_str
from .sizes import decode_size, size_to_str
from .transformation import Transformation
from .util import md5_hex

QUALITY_GREY = 'grey'
QUALITY_BITONAL = 'bitonal'

DEFAULT_OUTPUT_FORMATS = ('jpg', 'png')

_PASS_THROUGH_QUALITIES = ('default', 'color')
_QUALITIES = (QUALITY_GREY, QUALITY_BITONAL)
_NUMBER_RX = re.compile(r'[-+]?(\d+(\.\d*)?|\.\d+)([eE][-+]?\d+)?')


def decode_quality(quality):
    """
    Returns None for the qualities that leave the image unchanged,
    "grey" or "bitonal", or raises an InvalidAttributeError.
    """
    if quality is None or quality in _PASS_THROUGH_QUALITIES:
        return None
    if quality in _QUALITIES:
        return quality
    raise InvalidAttributeError('Unsupported quality: ' + str(quality), 'quality', quality)


def decode_rotation(rotation):
    """
    Returns None for no rotation, otherwise the rotation angle as a float,
    or raises an InvalidAttributeError.
    """
    if rotation is None or rotation == '0':
        return None
    if not _NUMBER_RX.fullmatch(str(rotation)):
        raise InvalidAttributeError('Unsupported rotation: ' + str(rotation), 'rotation', rotation)
    angle = float(rotation)
    return angle if angle != 0 else None


def validate_format(iformat, output_formats=DEFAULT_OUTPUT_FORMATS):
    """
    Raises an InvalidAttributeError if iformat is not one of output_formats.
    """
    if iformat not in output_formats:
        raise InvalidAttributeError('Unsupported format: ' + str(iformat), 'format', iformat)


def decode_options(args, output_formats=DEFAULT_OUTPUT_FORMATS):
    """
    Decodes a dictionary of IIIF image request parameters (keys region, size,
    quality, rotation, format, in any letter case) into a Transformation.

    The format is required, and its absence is reported before anything else
    with a MissingFormatError. The other parameters are then decoded in the
    order region, size, quality, rotation, with the first invalid value
    raising an InvalidAttributeError. Finally the format value is checked
    against output_formats.
    """
    options = dict((str(k).lower(), v) for (k, v) in args.items())
    if options.get('format') is None:
        raise MissingFormatError()
    region = decode_region(options.get('region'))
    size = decode_size(options.get('size'))
    quality = decode_quality(options.get('quality'))
    rotation = decode_rotation(options.get('rotation'))
    validate_format(options['format'], output_formats)
    return Transformation(region, size, quality, rotation, options['format'])


def get_cache_key(image_id, transformation):
    """
    Returns a string representing a hash of an image ID and the normalised
    request parameters. If 2 cache keys are the same, the rendered images
    are identical.

    Parameters that leave the image unchanged are omitted before hashing,
    so that e.g. "region=full" and no region at all give the same key.
    """
    key_parts = {
        'id': image_id,
        'region': region_to_str(transformation.region),
        'size': size_to_str(transformation.size),
        'quality': transformation.quality,
        'rotation': transformation.rotation,
        'format': transformation.format
    }
    key_parts = dict((k, v) for (k, v) in key_parts.items() if v is not None)
    return md5_hex(json.dumps(key_parts, sort_keys=True))
