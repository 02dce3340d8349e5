"""
User management routes for authentication and profile editing.
"""
import logging

from flask import Blueprint, abort, jsonify, render_template_string, request

from app.host.errors import ErrorCollection
from app.host.lifecycle import LifecycleOrchestrator, current_scope
from app.host.platform import EDIT_USER
from .models import PROFILE_FIELDS, is_valid_user_id
from .services import UserService

logger = logging.getLogger(__name__)


PROFILE_TEMPLATE = """<!doctype html>
<html>
<head><title>Profile: {{ uid }}</title></head>
<body>
  <h1>Profile: {{ uid }}</h1>
  {% if updated %}<div class="updated"><p>Profile updated.</p></div>{% endif %}
  {% for entry in errors %}
    <div class="{{ 'error' if entry.blocking else 'notice' }}" data-code="{{ entry.code }}"><p>{{ entry.message }}</p></div>
  {% endfor %}
  <form method="post" action="{{ url_for('user_management.save_profile', uid=uid) }}">
    <table class="form-table">
      <tbody>
        <tr><th><label for="display_name">Display name</label></th>
            <td><input type="text" name="display_name" id="display_name" value="{{ profile.display_name }}"></td></tr>
        <tr><th><label for="email">Email</label></th>
            <td><input type="email" name="email" id="email" value="{{ profile.email }}"></td></tr>
      </tbody>
    </table>
    {% for section in sections %}{{ section }}{% endfor %}
    <button type="submit">Update Profile</button>
  </form>
</body>
</html>
"""


def create_user_routes(user_service: UserService, orchestrator: LifecycleOrchestrator) -> Blueprint:
    """Create user management routes."""
    bp = Blueprint('user_management', __name__)

    def _load_editable_user(uid: str):
        """Resolve the profile being edited, enforcing the actor's permission."""
        if not is_valid_user_id(uid):
            abort(404)
        scope = current_scope()
        if not scope.actor_id:
            abort(401)
        if not scope.host.current_actor_can(EDIT_USER, uid):
            abort(403)
        if uid != scope.actor_id and not user_service.user_exists(uid):
            abort(404)
        return scope, user_service.get_user_data(uid)

    def _render_profile(scope, uid, user_data, errors=None, updated=False, status=200):
        sections = orchestrator.render_profile(scope, uid)
        return render_template_string(
            PROFILE_TEMPLATE,
            uid=uid,
            profile=user_data.load_profile(),
            sections=sections,
            errors=errors.entries() if errors else [],
            updated=updated,
        ), status

    @bp.route("/set_user", methods=["POST"])
    def set_user():
        """Set user ID and create session."""
        uid = request.form.get("uid", "").strip()
        password = request.form.get("password", "").strip()
        return user_service.create_user_session(uid, password)

    @bp.route("/logout", methods=["POST"])
    def logout():
        """End the current session."""
        return user_service.end_user_session()

    @bp.route("/set_password", methods=["POST"])
    def set_password():
        """Set password for the current user."""
        uid, error = user_service.require_auth_json()
        if error:
            return jsonify(error), 400

        data = request.get_json(silent=True) or {}
        password = str(data.get("password", "")).strip()

        if not password:
            return jsonify({"error": "Password cannot be empty"}), 400

        if len(password) < 6:
            return jsonify({"error": "Password must be at least 6 characters long"}), 400

        if user_service.set_user_password(uid, password):
            return jsonify({"status": "ok"})
        return jsonify({"error": "Failed to set password"}), 500

    @bp.route("/users/<uid>/profile", methods=["GET"])
    def view_profile(uid):
        """Render a user's profile screen (own or, for admins, anyone's)."""
        scope, user_data = _load_editable_user(uid)
        return _render_profile(scope, uid, user_data)

    @bp.route("/users/<uid>/profile", methods=["POST"])
    def save_profile(uid):
        """Save a user's profile.

        Extensions see the submitted form first. A blocking error from any of
        them cancels the save of the host's own fields.
        """
        scope, user_data = _load_editable_user(uid)

        errors = ErrorCollection()
        orchestrator.save_profile(scope, uid, request.form, errors)

        if errors.has_blocking():
            logger.info(f"Profile update for {uid} rejected: {', '.join(errors.codes())}")
            return _render_profile(scope, uid, user_data, errors=errors, status=400)

        user_data.save_profile({name: request.form[name] for name in PROFILE_FIELDS if name in request.form})
        return _render_profile(scope, uid, user_data, errors=errors, updated=True)

    return bp
