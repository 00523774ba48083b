#
# QIS IIIF Image Core
#
# Document:      settings.py
# Date started:  19 Oct 2026
# By:            Quru Ltd
# Purpose:       Loads the configuration settings
# Requires:      Flask
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
import threading

import flask

_ENV_VAR = 'IIIF_SETTINGS'

_default_settings = None
_default_lock = threading.Lock()


def load_settings(overrides=None):
    """
    Returns a new flask.Config of settings. This is the sum of
    conf.base_settings, overridden by the file specified in the IIIF_SETTINGS
    environment variable (if set), overridden by the overrides dictionary.

    IIIF_SETTINGS may be the full path to a Python settings file,
    or the name of a Python file in the iiifimage.conf package.
    """
    app_src_path = os.path.split(__file__)[0]
    settings = flask.Config(app_src_path)

    configs_used = ['base_settings']
    settings.from_object('iiifimage.conf.base_settings')

    env_settings = os.environ.get(_ENV_VAR)
    if env_settings:
        if env_settings.endswith('.py'):
            # Full path to a Python settings file (the common case)
            settings.from_envvar(_ENV_VAR)
            configs_used.append(os.path.split(env_settings)[1])
        else:
            # Name of a Python file in the iiifimage.conf package
            settings.from_object('iiifimage.conf.' + env_settings)
            configs_used.append(env_settings)

    if overrides:
        settings.update(overrides)
        configs_used.append('overrides')

    settings['_SETTINGS_IN_USE'] = ' + '.join(configs_used)
    return settings


def get_default_settings():
    """
    Returns a process-wide settings object, loading it on first use.
    This is a convenience for callers that do not manage their own settings.
    """
    global _default_settings
    with _default_lock:
        if _default_settings is None:
            _default_settings = load_settings()
        return _default_settings


def cache_expiry_secs(settings):
    """
    Returns the cache expiry time in seconds from the CACHE_DURATION_DAYS setting.
    """
    return int(float(settings['CACHE_DURATION_DAYS']) * 24 * 60 * 60)
