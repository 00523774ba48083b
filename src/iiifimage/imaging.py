#
# QIS IIIF Image Core
#
# Document:      imaging.py
# Date started:  19 Oct 2026
# By:            Quru Ltd
# Purpose:       Front-end interface to the external imaging tools
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

import os
import shlex
import shutil
import subprocess
import tempfile

from .errors import ImageError, RenderError, StartupError
from .imaging_kakadu import KakaduCommandFactory
from .imaging_magick import ImageMagickCommandFactory
from .imaging_pillow import PillowProbe
from .transformation import reduced_dimensions
from .util import get_file_extension


class CommandRunner(object):
    """
    Runs external command lines and returns their standard output.
    This is the only place in which processes are started.
    """
    def __init__(self, logger, timeout_secs=None):
        self._logger = logger
        self._timeout = timeout_secs or None

    def execute(self, command, require_output=True):
        """
        Runs a command line (without a shell) and returns its standard output
        as bytes. The process is killed if it does not finish within the timeout.

        Raises a RenderError if the command cannot be started, times out,
        returns a non-zero exit code, or if require_output is True and the
        command returns no output.
        """
        self._logger.debug('Executing: ' + command)
        try:
            p = subprocess.Popen(
                shlex.split(command),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE
            )
        except OSError as e:
            raise RenderError('Failed to run command: ' + str(e), command)
        try:
            (stdout, stderr) = p.communicate(timeout=self._timeout)
        except subprocess.TimeoutExpired:
            p.kill()
            p.communicate()
            raise RenderError(
                'Command timed out after %s seconds' % str(self._timeout), command
            )
        errmsg = stderr.decode('utf8', 'replace').strip()
        if p.returncode != 0:
            raise RenderError(
                'Command failed with exit code %d: %s' % (p.returncode, errmsg),
                command, errmsg
            )
        if require_output and not stdout:
            raise RenderError('Command returned no data: ' + errmsg, command, errmsg)
        return stdout


class ImageMagickTransformer(object):
    """
    Renders a Transformation using a single ImageMagick command.
    """
    def __init__(self, factory, runner):
        self._factory = factory
        self._runner = runner

    def transform(self, input_path, transformation, info_fn):
        command = self._factory.command(input_path, transformation, info_fn)
        return self._runner.execute(command)


class KakaduTransformer(object):
    """
    Renders a Transformation by decoding the requested region of a JPEG 2000
    image with Kakadu into a temporary file, at a reduced resolution where
    possible, then completing the transformation with ImageMagick.
    """
    def __init__(self, factory, magick_transformer, runner, temp_dir=None):
        self._factory = factory
        self._magick = magick_transformer
        self._runner = runner
        self._temp_dir = temp_dir

    def transform(self, input_path, transformation, info_fn):
        fd, temp_path = tempfile.mkstemp('.bmp', dir=self._temp_dir)
        os.close(fd)
        try:
            command = self._factory.command(input_path, transformation, info_fn, temp_path)
            self._runner.execute(command, require_output=False)
            # Continue with the decoded region at the decoded resolution
            factor = self._factory.reduction_factor(transformation, info_fn)
            post_transformation = transformation.without_crop().reduce(factor)
            return self._magick.transform(
                temp_path,
                post_transformation,
                lambda: reduced_dimensions(info_fn(), factor)
            )
        finally:
            try:
                os.remove(temp_path)
            except OSError:
                pass


def backend_supported(back_end, settings):
    """
    Returns whether the command line tools for a back-end are installed.
    Possible back-ends: "imagemagick" or "kakadu".
    """
    if back_end.lower() == 'imagemagick':
        return shutil.which(settings['CONVERT_PATH']) is not None
    elif back_end.lower() == 'kakadu':
        return shutil.which(settings['KDU_EXPAND_PATH']) is not None
    return False


class ImagingEngine(object):
    """
    Selects and runs the imaging back-end for each source image.

    ImageMagick renders all images. When IMAGE_BACKEND is "kakadu", Kakadu
    is used for the file types in KAKADU_FILE_TYPES, and when IMAGE_BACKEND
    is "auto" the same applies only if kdu_expand can be found.
    """
    def __init__(self, settings, logger, runner=None):
        self._settings = settings
        self._logger = logger
        self._runner = runner or CommandRunner(logger, settings['COMMAND_TIMEOUT_SECS'])
        self._magick_factory = ImageMagickCommandFactory(
            settings['CONVERT_PATH'], settings['IDENTIFY_PATH']
        )
        self._magick = ImageMagickTransformer(self._magick_factory, self._runner)
        self._kakadu = KakaduTransformer(
            KakaduCommandFactory(
                settings['KDU_EXPAND_PATH'],
                settings['KAKADU_NUM_THREADS'],
                settings['KAKADU_MAX_REDUCTION']
            ),
            self._magick,
            self._runner,
            settings['TEMP_DIR'] or None
        )
        self._pillow = PillowProbe()

        back_end = settings['IMAGE_BACKEND'].lower()
        if back_end == 'imagemagick':
            self._kakadu_enabled = False
        elif back_end == 'kakadu':
            self._kakadu_enabled = True
        elif back_end == 'auto':
            self._kakadu_enabled = backend_supported('kakadu', settings)
        else:
            raise StartupError('Unsupported imaging back end: ' + settings['IMAGE_BACKEND'])

        probe = settings['PROBE_BACKEND'].lower()
        if probe not in ('imagemagick', 'pillow'):
            raise StartupError('Unsupported dimensions back end: ' + settings['PROBE_BACKEND'])
        self._probe = probe
        logger.info(
            'Imaging back end: ImageMagick' +
            (', Kakadu for ' + ', '.join(settings['KAKADU_FILE_TYPES'])
             if self._kakadu_enabled else '') +
            '. Reading dimensions with ' +
            ('ImageMagick' if probe == 'imagemagick' else self._pillow.get_version_info())
        )

    def get_transformer(self, filepath):
        """
        Returns the transformer to use for an image file.
        """
        if (self._kakadu_enabled and
                get_file_extension(filepath) in self._settings['KAKADU_FILE_TYPES']):
            return self._kakadu
        return self._magick

    def transform(self, filepath, transformation, info_fn):
        """
        Returns the image data for an image file with a Transformation applied.
        info_fn is a function returning the image dimensions, which is only
        called if they are required.
        Raises a RenderError if the image could not be generated.
        """
        return self.get_transformer(filepath).transform(filepath, transformation, info_fn)

    def get_image_dimensions(self, filepath):
        """
        Returns an ImageInformation for an image file, without rendering it.
        Raises an ImageError if the dimensions cannot be read.
        """
        if self._probe == 'pillow':
            return self._pillow.get_image_dimensions(filepath)
        output = self._runner.execute(self._magick_factory.identify_command(filepath))
        try:
            return ImageMagickCommandFactory.parse_identify_output(output)
        except ValueError as e:
            raise ImageError(str(e))
