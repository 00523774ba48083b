#
# QIS IIIF Image Core
#
# Document:      test_settings.py
# Date started:  19 Oct 2026
# By:            Quru Ltd
# Purpose:       Tests settings, logging and permissions
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

import logging
import logging.handlers
import os
import shutil
import tempfile
import unittest
from unittest import mock

from . import tests as main_tests

from iiifimage import settings as settings_module
from iiifimage.errors import SecurityError
from iiifimage.log_manager import LogManager
from iiifimage.permissions_manager import ACTION_INFO, ACTION_SHOW, PermissionsManager
from iiifimage.settings import cache_expiry_secs, get_default_settings, load_settings


class SettingsTests(main_tests.BaseTestCase):
    def test_unit_test_settings(self):
        settings = load_settings()
        self.assertTrue(settings['TESTING'])
        self.assertEqual(settings['IMAGE_BACKEND'], 'imagemagick')
        self.assertEqual(settings['OUTPUT_FORMATS'], ['jpg', 'png'])
        self.assertEqual(settings['_SETTINGS_IN_USE'], 'base_settings + ' + main_tests.TESTING_SETTINGS)

    def test_base_settings(self):
        with mock.patch.dict(os.environ):
            del os.environ['IIIF_SETTINGS']
            settings = load_settings()
        self.assertNotIn('TESTING', settings)
        self.assertEqual(settings['IMAGE_BACKEND'], 'auto')
        self.assertEqual(settings['_SETTINGS_IN_USE'], 'base_settings')

    def test_settings_file(self):
        temp_dir = tempfile.mkdtemp()
        try:
            path = os.path.join(temp_dir, 'local_settings.py')
            with open(path, 'w') as f:
                f.write('CACHE_DURATION_DAYS = 7\nOUTPUT_FORMATS = ["jpg", "png", "gif"]\n')
            with mock.patch.dict(os.environ, {'IIIF_SETTINGS': path}):
                settings = load_settings()
            self.assertEqual(settings['CACHE_DURATION_DAYS'], 7)
            self.assertEqual(settings['OUTPUT_FORMATS'], ['jpg', 'png', 'gif'])
            self.assertEqual(settings['_SETTINGS_IN_USE'], 'base_settings + local_settings.py')
        finally:
            shutil.rmtree(temp_dir)

    def test_overrides(self):
        settings = load_settings({'CACHE_BACKEND': 'none', 'DEBUG': True})
        self.assertEqual(settings['CACHE_BACKEND'], 'none')
        self.assertTrue(settings['DEBUG'])
        self.assertTrue(settings['_SETTINGS_IN_USE'].endswith(' + overrides'))
        # Not shared
        self.assertEqual(load_settings()['CACHE_BACKEND'], 'memory')

    def test_default_settings(self):
        with mock.patch.object(settings_module, '_default_settings', None):
            s1 = get_default_settings()
            s2 = get_default_settings()
            self.assertIs(s1, s2)

    def test_cache_expiry_secs(self):
        self.assertEqual(cache_expiry_secs({'CACHE_DURATION_DAYS': 1}), 86400)
        self.assertEqual(cache_expiry_secs({'CACHE_DURATION_DAYS': 0.5}), 43200)
        self.assertEqual(cache_expiry_secs({'CACHE_DURATION_DAYS': 0}), 0)


class LogManagerTests(main_tests.BaseTestCase):
    def test_stream_logging(self):
        lm = LogManager('iiifimage-test-stream', False)
        self.assertIsInstance(lm.logging_handler, logging.StreamHandler)
        self.assertEqual(lm.get_level(), logging.INFO)
        lm.set_debug_mode(True)
        self.assertEqual(lm.get_level(), logging.DEBUG)
        lm.close()

    def test_file_logging(self):
        temp_dir = tempfile.mkdtemp()
        try:
            path = os.path.join(temp_dir, 'iiif.log')
            lm = LogManager('iiifimage-test-file', False, path)
            lm.debug('Hidden message')
            lm.info('Informational message')
            lm.error('Error message')
            lm.set_enabled(False)
            lm.critical('Disabled message')
            lm.close()
            with open(path) as f:
                text = f.read()
            self.assertNotIn('Hidden message', text)
            self.assertIn('INFO     Informational message', text)
            self.assertIn('ERROR    Error message', text)
            self.assertNotIn('Disabled message', text)
        finally:
            shutil.rmtree(temp_dir)

    def test_socket_logging(self):
        lm = LogManager('iiifimage-test-socket', True, '/tmp/not-used.log', 'localhost', 9002)
        self.assertIsInstance(lm.logging_handler, logging.handlers.SocketHandler)
        lm.close()

    def test_handlers_replaced(self):
        LogManager('iiifimage-test-replace', False).close()
        lm = LogManager('iiifimage-test-replace', False)
        self.assertEqual(lm.logging_engine.handlers, [lm.logging_handler])
        self.assertFalse(lm.logging_engine.propagate)
        lm.close()

    def test_from_settings(self):
        settings = self.make_settings(DEBUG=True, LOGGING_SERVER='logs', LOGGING_SERVER_PORT=9002)
        lm = LogManager.from_settings(settings, 'iiifimage-test-settings')
        self.assertIsInstance(lm.logging_handler, logging.handlers.SocketHandler)
        self.assertEqual(lm.get_level(), logging.DEBUG)
        lm.close()


class PermissionsManagerTests(main_tests.BaseTestCase):
    def test_default_policy(self):
        pm = PermissionsManager()
        self.assertTrue(pm.is_permitted(ACTION_SHOW, 'world'))
        self.assertTrue(pm.is_permitted(ACTION_INFO, 'world', 'bob'))
        pm.ensure_permitted(ACTION_SHOW, 'world')

    def test_policy(self):
        pm = PermissionsManager(lambda action, image_id, user: user == 'admin' or action == ACTION_INFO)
        self.assertTrue(pm.is_permitted(ACTION_SHOW, 'world', 'admin'))
        self.assertTrue(pm.is_permitted(ACTION_INFO, 'world', None))
        self.assertFalse(pm.is_permitted(ACTION_SHOW, 'world', 'bob'))
        with self.assertRaises(SecurityError) as ctx:
            pm.ensure_permitted(ACTION_SHOW, 'world', 'bob')
        self.assertEqual(str(ctx.exception), "Permission denied to show image 'world'")


if __name__ == '__main__':
    unittest.main()
