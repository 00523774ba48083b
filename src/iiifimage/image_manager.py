#
# QIS IIIF Image Core
#
# Document:      image_manager.py
# Date started:  19 Oct 2026
# By:            Quru Ltd
# Purpose:       Renders IIIF image requests, backed by a cache
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

import threading

from .cache_manager import create_cache_manager
from .file_resolver import FileSystemFileResolver, HTTPFileResolver, SourceFile
from .image_attrs import decode_options, get_cache_key
from .imaging import ImagingEngine
from .log_manager import LogManager
from .permissions_manager import ACTION_INFO, ACTION_SHOW, PermissionsManager
from .settings import cache_expiry_secs, get_default_settings

_default_manager = None
_default_lock = threading.Lock()


class ImageManager(object):
    """
    Provides IIIF image rendering and image information functions.

    All collaborators default to those described by the settings, and can
    be supplied instead, e.g. a custom file resolver or a shared cache.
    A file resolver is any object with a find(image_id) function returning
    a local file path.
    """
    def __init__(self, settings, logger=None, file_resolver=None,
                 cache_manager=None, imaging_engine=None, permissions_manager=None):
        self._settings = settings
        self._logger = logger or LogManager.from_settings(settings)
        self._resolver = file_resolver or self._default_file_resolver(settings)
        self._cache = cache_manager or create_cache_manager(settings, self._logger)
        self._imaging = imaging_engine or ImagingEngine(settings, self._logger)
        self._permissions = permissions_manager or PermissionsManager()

    @staticmethod
    def _default_file_resolver(settings):
        if settings['HTTP_FILE_RESOLVER_BASE_URL']:
            return HTTPFileResolver(
                settings['HTTP_FILE_RESOLVER_BASE_URL'],
                settings['HTTP_CACHE_DIR'] or None,
                settings['HTTP_TIMEOUT_SECS']
            )
        return FileSystemFileResolver(
            settings['IMAGES_BASE_DIR'],
            settings['IMAGE_FILE_EXTENSIONS']
        )

    def expiry_secs(self):
        """
        Returns the number of seconds that rendered images are cached for.
        """
        return cache_expiry_secs(self._settings)

    def get_source_file(self, image_id):
        """
        Returns a SourceFile for an image identifier.
        Raises a SourceNotFoundError if the image file cannot be found.
        """
        return SourceFile(self._resolver.find(image_id), self._imaging)

    def get_source_file_for_path(self, filepath):
        """
        Returns a SourceFile for a local image file, for rendering a file
        directly without looking it up from an image identifier.
        """
        return SourceFile(filepath, self._imaging)

    def render(self, image_id, args, source_file=None, user=None):
        """
        Returns the encoded image data for an image identifier and a dictionary
        of IIIF request parameters: region, size, rotation, quality, format.

        The image is returned from cache where possible, otherwise the source
        file is found (unless source_file is given) and rendered, and the
        result cached.

        Raises a MissingFormatError if no format is given, an InvalidAttributeError
        for an invalid parameter value, a SecurityError if the user is not
        permitted to view the image, a SourceNotFoundError if the image file
        cannot be found, or a RenderError if the image could not be rendered.
        """
        transformation = decode_options(args, self._settings['OUTPUT_FORMATS'])
        self._permissions.ensure_permitted(ACTION_SHOW, image_id, user)
        cache_key = get_cache_key(image_id, transformation)

        def _render():
            self._logger.debug('Cache miss, rendering %s for %s' % (image_id, str(args)))
            src = source_file if source_file is not None else self.get_source_file(image_id)
            try:
                return src.extract(transformation)
            except Exception as e:
                self._logger.error('Failed to render %s: %s' % (image_id, str(e)))
                raise

        return self._cache.fetch(cache_key, self.expiry_secs(), _render)

    def info(self, image_id, source_file=None, user=None):
        """
        Returns the dimensions of an image as a dictionary {'width': w, 'height': h},
        read from the source file without rendering it.

        Raises a SecurityError if the user is not permitted to view the image
        information, a SourceNotFoundError if the image file cannot be found,
        or an ImageError if the dimensions cannot be read.
        """
        self._permissions.ensure_permitted(ACTION_INFO, image_id, user)
        src = source_file if source_file is not None else self.get_source_file(image_id)
        return src.info().to_dict()


def get_default_manager():
    """
    Returns a process-wide ImageManager using the default settings,
    creating it on first use.
    """
    global _default_manager
    with _default_lock:
        if _default_manager is None:
            _default_manager = ImageManager(get_default_settings())
        return _default_manager
