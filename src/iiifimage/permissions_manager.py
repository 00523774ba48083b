#
# QIS IIIF Image Core
#
# Document:      permissions_manager.py
# Date started:  19 Oct 2026
# By:            Quru Ltd
# Purpose:       Pluggable authorization for image requests
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

from .errors import SecurityError

ACTION_SHOW = 'show'
ACTION_INFO = 'info'


class PermissionsManager(object):
    """
    Decides whether a user may view an image or its information.

    By default everything is permitted. Supply a policy function, or
    override is_permitted(), to restrict access.
    """
    def __init__(self, policy_fn=None):
        """
        policy_fn - optional function (action, image_id, user) returning
                    a boolean, where action is "show" or "info"
        """
        self._policy = policy_fn

    def is_permitted(self, action, image_id, user=None):
        """
        Returns whether the user may perform the action on an image.
        """
        if self._policy is None:
            return True
        return bool(self._policy(action, image_id, user))

    def ensure_permitted(self, action, image_id, user=None):
        """
        Raises a SecurityError if the user may not perform the action on
        an image, otherwise returns with no value.
        """
        if not self.is_permitted(action, image_id, user):
            raise SecurityError(
                'Permission denied to %s image \'%s\'' % (action, image_id)
            )
