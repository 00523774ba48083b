#
# QIS IIIF Image Core
#
# Document:      log_manager.py
# Date started:  19 Oct 2026
# By:            Quru Ltd
# Purpose:       Provides logging services
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

LOG_FORMAT = '%(asctime)s %(name)-12s %(levelname)-8s %(message)s'


class LogManager(object):
    """
    Manages logging for the application.

    Log records are sent to a logging server over a socket if a server host
    and port are given (so that multiple processes can share one log file),
    otherwise to a log file if a file name is given, otherwise to stderr.
    """
    def __init__(self, logger_name, debug_mode, log_filename=None,
                 server_host='', server_port=0):
        """
        Initialises a logging client.

        logger_name - a name for the logging client
        debug_mode - a boolean for whether to log additional information
        log_filename - optional file to log to when not using a logging server
        server_host - the name or IP address of the logging server
        server_port - the port number of the logging server
        """
        self.logging_handler = None
        self.logging_engine = logging.getLogger(logger_name)
        for handler in list(self.logging_engine.handlers):
            handler.close()
            self.logging_engine.removeHandler(handler)
        if server_host and server_port > 0:
            self.logging_handler = logging.handlers.SocketHandler(server_host, server_port)
        elif log_filename:
            self.logging_handler = logging.FileHandler(log_filename)
        else:
            self.logging_handler = logging.StreamHandler()
        if not isinstance(self.logging_handler, logging.handlers.SocketHandler):
            self.logging_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        self.logging_engine.addHandler(self.logging_handler)
        self.logging_engine.propagate = False
        self.set_debug_mode(debug_mode)
        self.set_enabled(True)

    @staticmethod
    def from_settings(settings, logger_name='iiifimage'):
        """
        Returns a LogManager configured from the DEBUG, LOG_FILENAME,
        LOGGING_SERVER and LOGGING_SERVER_PORT settings.
        """
        return LogManager(
            logger_name,
            settings['DEBUG'],
            settings['LOG_FILENAME'],
            settings['LOGGING_SERVER'],
            settings['LOGGING_SERVER_PORT']
        )

    def close(self):
        """
        Closes the log handler. A closed socket handler reconnects
        automatically if a log function is subsequently called.
        """
        if self.logging_handler:
            self.logging_handler.close()

    def set_enabled(self, enabled):
        self.logging_engine.disabled = not enabled

    def set_debug_mode(self, debug_mode):
        self.logging_engine.setLevel(logging.DEBUG if debug_mode else logging.INFO)

    def get_level(self):
        return self.logging_engine.getEffectiveLevel()

    def debug(self, msg):
        self.logging_engine.debug(msg)

    def info(self, msg):
        self.logging_engine.info(msg)

    def warning(self, msg):
        self.logging_engine.warning(msg)

    def error(self, msg):
        self.logging_engine.error(msg)

    def critical(self, msg):
        self.logging_engine.critical(msg)
