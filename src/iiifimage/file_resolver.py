#
# QIS IIIF Image Core
#
# Document:      file_resolver.py
# Date started:  19 Oct 2026
# By:            Quru Ltd
# Purpose:       Finds the source image file for an image identifier
# Requires:      requests
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

import os
import tempfile
import threading
import urllib.parse

import requests

from .errors import SecurityError, SourceNotFoundError
from .util import get_file_extension, md5_hex


class SourceFile(object):
    """
    A local source image file, with lazily read and remembered dimensions.
    """
    def __init__(self, path, imaging_engine):
        self._path = path
        self._engine = imaging_engine
        self._info = None
        self._info_lock = threading.Lock()

    def path(self):
        """
        Returns the local file path of the image.
        """
        return self._path

    def info(self):
        """
        Returns the ImageInformation of the image, reading the dimensions
        from the file on the first call only.
        """
        with self._info_lock:
            if self._info is None:
                self._info = self._engine.get_image_dimensions(self._path)
            return self._info

    def extract(self, transformation):
        """
        Returns the image data with a Transformation applied.
        """
        return self._engine.transform(self._path, transformation, self.info)


class FileSystemFileResolver(object):
    """
    Finds image files in a directory, where the image identifier is the
    file name (with or without its extension) relative to base_dir.
    """
    def __init__(self, base_dir, extensions):
        self._base_dir = os.path.abspath(base_dir)
        self._extensions = list(extensions)

    def find(self, image_id):
        """
        Returns the absolute path of the file for an image identifier.

        Raises a SourceNotFoundError if there is no such file, or a
        SecurityError if the identifier refers to a location outside of
        the base directory.
        """
        candidates = [self.get_abs_path(image_id + '.' + ext) for ext in self._extensions]
        if get_file_extension(image_id) in self._extensions:
            candidates.insert(0, self.get_abs_path(image_id))
        for path in candidates:
            if os.path.isfile(path):
                return path
        raise SourceNotFoundError('Image \'' + image_id + '\' does not exist')

    def get_abs_path(self, rel_path):
        """
        Combines rel_path with the base directory and returns the absolute path
        to a file. Existence of the path is not checked.

        Raises a SecurityError if the resulting path evaluates to a
        location outside of the base directory.
        """
        # Strip any leading path char from the path
        if rel_path[0:1] == '/' or rel_path[0:1] == '\\':
            rel_path = rel_path[1:]
        abs_path = os.path.abspath(os.path.join(self._base_dir, rel_path))
        if not abs_path.startswith(self._base_dir + os.path.sep):
            raise SecurityError('Requested path \'' + rel_path + '\' lies outside of the images directory')
        return abs_path


class HTTPFileResolver(object):
    """
    Finds image files on a web server. Each image is downloaded once into
    cache_dir and the local copy is used from then on.

    id_to_uri is a function that returns the URL of an image identifier,
    or a string template containing "{id}".
    """
    def __init__(self, id_to_uri, cache_dir=None, timeout_secs=30, session=None):
        if isinstance(id_to_uri, str):
            template = id_to_uri
            id_to_uri = lambda image_id: template.format(id=urllib.parse.quote(image_id))
        self._id_to_uri = id_to_uri
        self._cache_dir = cache_dir or os.path.join(tempfile.gettempdir(), 'iiif_http_cache')
        self._timeout = timeout_secs
        self._session = session or requests.Session()

    def find(self, image_id):
        """
        Returns the path of the local copy of the image for an identifier,
        downloading it first if required.

        Raises a SourceNotFoundError if the image cannot be downloaded.
        """
        uri = self._id_to_uri(image_id)
        ext = get_file_extension(urllib.parse.urlparse(uri).path)
        local_path = os.path.join(self._cache_dir, md5_hex(uri) + ('.' + ext if ext else ''))
        if not os.path.isfile(local_path):
            self._download(uri, local_path)
        return local_path

    def _download(self, uri, local_path):
        os.makedirs(self._cache_dir, exist_ok=True)
        try:
            r = self._session.get(uri, stream=True, timeout=self._timeout)
        except requests.RequestException as e:
            raise SourceNotFoundError('Error requesting ' + uri + ': ' + str(e))
        try:
            if r.status_code != 200:
                raise SourceNotFoundError('HTTP code %d returned from URL %s' % (r.status_code, uri))
            # Other threads must never see a partial file
            fd, temp_path = tempfile.mkstemp(dir=self._cache_dir)
            try:
                with os.fdopen(fd, 'wb') as f:
                    for chunk in r.iter_content(chunk_size=64 * 1024):
                        f.write(chunk)
                os.replace(temp_path, local_path)
            except (IOError, OSError, requests.RequestException) as e:
                try:
                    os.remove(temp_path)
                except OSError:
                    pass
                raise SourceNotFoundError('Error downloading ' + uri + ': ' + str(e))
        finally:
            r.close()
