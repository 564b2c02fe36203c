from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty
from ..core.exceptions import AuthenticationError
from .session import AdminSession

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, *, admin_username: str, admin_password_hash: str):
        self._admin_username = admin_username
        self._admin_password_hash = admin_password_hash

    def login(self, username: str, password: str, *, now: Optional[datetime] = None) -> AdminSession:
        username = require_non_empty(username, "username")
        password = require_non_empty(password, "password")

        if username != self._admin_username or not check_password_hash(self._admin_password_hash, password):
            logger.info("Rejected admin login for %r", username)
            raise AuthenticationError("Invalid username or password")

        logger.info("Admin %r logged in", username)
        return AdminSession.start(username, now=now)
