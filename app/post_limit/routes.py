"""
Post limit routes.
"""
from flask import Blueprint, jsonify

from app.host.lifecycle import current_scope
from .enforcer import QuotaEnforcer


def create_post_limit_routes(enforcer: QuotaEnforcer) -> Blueprint:
    """Create Flask routes for post limit information."""
    bp = Blueprint('post_limit', __name__)

    @bp.route("/post_limit/status", methods=["GET"])
    def get_post_limit_status():
        """Get the current user's post limit and usage."""
        scope = current_scope()
        if not scope.actor_id:
            return jsonify({"error": "Login required"}), 401

        status = enforcer.snapshot(scope).to_dict()
        status["content_type"] = enforcer.content_type
        return jsonify({
            "success": True,
            "post_limit": status
        })

    return bp
