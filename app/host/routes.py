"""
Host routes: request scope setup, halt handling and the admin dashboard.
"""
import logging

from flask import Blueprint, g, jsonify, render_template_string, request

from .errors import RequestHalted
from .lifecycle import current_scope
from .platform import HostEnvironment

logger = logging.getLogger(__name__)


DASHBOARD_TEMPLATE = """<!doctype html>
<html>
<head><title>Dashboard</title></head>
<body>
{% if not actor_id %}
  <h1>Log in</h1>
  {% if error == "invalid_password" %}<p class="error">Invalid password.</p>{% endif %}
  {% if error == "invalid_user_id" %}<p class="error">User IDs may only contain letters, digits, dots, dashes and underscores.</p>{% endif %}
  <form method="post" action="{{ url_for('user_management.set_user') }}">
    <input type="text" name="uid" placeholder="User ID">
    <input type="password" name="password" placeholder="Password (if set)">
    <button type="submit">Log in</button>
  </form>
{% else %}
  <div id="admin-notices">
  {% for notice in notices %}{{ notice }}{% endfor %}
  </div>
  <h1>Dashboard</h1>
  <p>Logged in as <strong>{{ actor_id }}</strong>
     (<a href="{{ url_for('user_management.view_profile', uid=actor_id) }}">profile</a>)</p>
  <ul class="content-types">
  {% for content_type in content_types %}
    <li>{{ content_type.label }}
      {% if content_type.can_create %}
        <a class="add-new" href="{{ url_for('content.new_content', type=content_type.name) }}">Add New</a>
      {% endif %}
    </li>
  {% endfor %}
  </ul>
  <form method="post" action="{{ url_for('user_management.logout') }}"><button type="submit">Log out</button></form>
{% endif %}
</body>
</html>
"""

HALTED_TEMPLATE = """<!doctype html>
<html>
<head><title>Error</title></head>
<body><div class="halted"><p>{{ message }}</p></div></body>
</html>
"""


def _wants_json() -> bool:
    return request.is_json or request.accept_mimetypes.best == "application/json"


def create_host_routes(environment: HostEnvironment) -> Blueprint:
    """Create host routes."""
    bp = Blueprint('host', __name__)

    @bp.before_app_request
    def open_request_scope():
        """Build the request scope and fire app init before any route runs."""
        actor_id = environment.user_service.get_current_user_id()
        g.request_scope = environment.open_scope(actor_id)

    @bp.app_errorhandler(RequestHalted)
    def handle_request_halted(exc: RequestHalted):
        if _wants_json():
            return jsonify({"error": "Request halted", "message": exc.message}), exc.status_code
        return render_template_string(HALTED_TEMPLATE, message=exc.message), exc.status_code

    @bp.route("/")
    @bp.route("/admin")
    def admin_dashboard():
        """Dashboard with admin notices and creation links."""
        scope = current_scope()
        actor_id = scope.actor_id

        notices = []
        content_types = []
        if actor_id:
            notices = environment.orchestrator.render_notices(scope)
            for name in environment.content_types.names():
                content_types.append({
                    "name": name,
                    "label": environment.content_types.get(name).label,
                    "can_create": scope.host.actor_can_for_type(name, "create_posts"),
                })

        return render_template_string(
            DASHBOARD_TEMPLATE,
            actor_id=actor_id,
            notices=notices,
            content_types=content_types,
            error=request.args.get("error"),
        )

    @bp.route("/capabilities", methods=["GET"])
    def get_capabilities():
        """Capabilities of every content type as resolved for this request."""
        scope = current_scope()
        if not scope.actor_id:
            return jsonify({"error": "Login required"}), 401

        return jsonify({
            "success": True,
            "capabilities": {
                name: scope.host.get_content_type_capabilities(name).to_dict()
                for name in environment.content_types.names()
            }
        })

    return bp
