"""
User management services for authentication and session management.
"""
import logging
from pathlib import Path
from typing import Optional, List
from flask import request, make_response, redirect, url_for
from .models import UserData, is_valid_user_id

logger = logging.getLogger(__name__)

SESSION_COOKIE = "uid"
SESSION_MAX_AGE = 60 * 60 * 24 * 365 * 3  # 3-year cookie


class UserService:
    """Service for user authentication and session management."""

    def __init__(self, user_data_dir: Path, admin_user_ids: List[str]):
        self.user_data_dir = user_data_dir
        self.admin_user_ids = admin_user_ids

    def get_current_user_id(self) -> Optional[str]:
        """Get the current user ID from cookies; a malformed id counts as logged out."""
        uid = request.cookies.get(SESSION_COOKIE, "").strip()
        if not is_valid_user_id(uid):
            return None
        return uid

    def is_admin_user(self, uid: Optional[str]) -> bool:
        """Check if the user is an admin based on configuration."""
        if not uid:
            return False
        return uid.strip() in self.admin_user_ids

    def user_exists(self, uid: str) -> bool:
        """Check whether a user record exists."""
        if not is_valid_user_id(uid):
            return False
        return UserData(uid, self.user_data_dir).exists()

    def get_user_data(self, uid: str) -> UserData:
        """Get user data object for the given user ID."""
        return UserData(uid, self.user_data_dir)

    def create_user_session(self, uid: str, password: str = None):
        """Create a user session by setting a cookie."""
        if not uid:
            return redirect(url_for("host.admin_dashboard"))

        if not is_valid_user_id(uid):
            logger.info(f"Rejected login with malformed user id {uid!r}")
            return redirect(url_for("host.admin_dashboard", error="invalid_user_id"))

        user_data = self.get_user_data(uid)
        if user_data.has_password() and not user_data.check_password(password):
            logger.info(f"Rejected login for {uid}: invalid password")
            return redirect(url_for("host.admin_dashboard", error="invalid_password"))

        if not user_data.exists():
            # First login creates the record so the user can be administered
            user_data.save(user_data.load())
            logger.info(f"Created user record for {uid}")

        resp = make_response(redirect(url_for("host.admin_dashboard")))
        resp.set_cookie(SESSION_COOKIE, uid, max_age=SESSION_MAX_AGE)
        return resp

    def end_user_session(self):
        """Clear the session cookie."""
        resp = make_response(redirect(url_for("host.admin_dashboard")))
        resp.delete_cookie(SESSION_COOKIE)
        return resp

    def require_auth_json(self) -> tuple[Optional[str], Optional[dict]]:
        """Require authentication for JSON endpoints, return error if not authenticated."""
        uid = self.get_current_user_id()
        if not uid:
            return None, {"error": "no-uid"}
        return uid, None

    def set_user_password(self, uid: str, password: str) -> bool:
        """Set password for a user."""
        try:
            user_data = self.get_user_data(uid)
            user_data.set_password(password)
            return True
        except ValueError:
            return False
