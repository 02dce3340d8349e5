"""
Content routes for authoring, viewing and trashing items.
"""
import logging

from flask import Blueprint, abort, jsonify, render_template_string, request
from pydantic import ValidationError

from app.host.capabilities import ContentTypeRegistry
from app.host.lifecycle import current_scope
from app.host.platform import EDIT_USER
from .models import ContentPayload
from .services import ContentRenderer, ContentService

logger = logging.getLogger(__name__)


EDITOR_TEMPLATE = """<!doctype html>
<html>
<head><title>Add New {{ label }}</title></head>
<body>
  <h1>Add New {{ label }}</h1>
  <form method="post" action="{{ url_for('content.create_content') }}">
    <input type="hidden" name="content_type" value="{{ content_type }}">
    <p><input type="text" name="title" placeholder="Title"></p>
    <p><textarea name="body" rows="12" cols="80"></textarea></p>
    <p>
      <select name="status">
        <option value="draft">Draft</option>
        {% if can_publish %}<option value="publish">Publish</option>{% endif %}
      </select>
      <button type="submit">Save</button>
    </p>
  </form>
</body>
</html>
"""

VIEW_TEMPLATE = """<!doctype html>
<html>
<head><title>{{ item.title }}</title></head>
<body>
  <article class="{{ item.content_type }} status-{{ item.status.value }}">
    <h1>{{ item.title }}</h1>
    <p class="byline">by {{ item.author_id }}, {{ item.created_at }}</p>
    <div class="body">{{ body_html | safe }}</div>
  </article>
</body>
</html>
"""


def _submitted_data() -> dict:
    """JSON body for API clients, form fields for the editor page."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def _validation_messages(error: ValidationError) -> list:
    return [f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in error.errors()]


def create_content_routes(
    content_service: ContentService,
    content_renderer: ContentRenderer,
    content_types: ContentTypeRegistry,
) -> Blueprint:
    """Create Flask routes for content items."""
    bp = Blueprint('content', __name__)

    def _require_actor() -> str:
        actor_id = current_scope().actor_id
        if not actor_id:
            abort(401)
        return actor_id

    def _parse_payload():
        try:
            payload = ContentPayload.model_validate(_submitted_data())
        except ValidationError as e:
            return None, (jsonify({"error": "Invalid content", "details": _validation_messages(e)}), 400)
        if payload.content_type not in content_types:
            return None, (jsonify({"error": "Unknown content type", "content_type": payload.content_type}), 400)
        return payload, None

    def _load_editable_item(item_id: str):
        item = content_service.get(item_id)
        if not item:
            abort(404)
        if not current_scope().host.current_actor_can(EDIT_USER, item.author_id):
            abort(403)
        return item

    @bp.route("/content", methods=["GET"])
    def list_content():
        """List the current user's items."""
        actor_id = _require_actor()
        items = content_service.list_for_author(actor_id, request.args.get("type"))
        return jsonify({
            "success": True,
            "items": [item.model_dump(mode="json") for item in items]
        })

    @bp.route("/content/new", methods=["GET"])
    def new_content():
        """Editor for a new item; only offered while the type may be created."""
        _require_actor()
        content_type = request.args.get("type", "post")
        if content_type not in content_types:
            abort(404)

        host = current_scope().host
        if not host.actor_can_for_type(content_type, "create_posts"):
            abort(403)

        return render_template_string(
            EDITOR_TEMPLATE,
            content_type=content_type,
            label=content_types.get(content_type).label.rstrip("s"),
            can_publish=host.actor_can_for_type(content_type, "publish_posts"),
        )

    @bp.route("/content", methods=["POST"])
    def create_content():
        """Create a new item through the content-saving pipeline."""
        _require_actor()
        payload, error = _parse_payload()
        if error:
            return error

        item = content_service.create(current_scope(), payload)
        return jsonify({"success": True, "item": item.model_dump(mode="json")}), 201

    @bp.route("/content/<item_id>", methods=["GET"])
    def view_content(item_id):
        """View an item with its markdown body rendered."""
        item = content_service.get(item_id)
        if not item:
            abort(404)
        if item.is_trashed and not current_scope().host.current_actor_can(EDIT_USER, item.author_id):
            abort(404)

        return render_template_string(
            VIEW_TEMPLATE,
            item=item,
            body_html=content_renderer.render_markdown(item.body),
        )

    @bp.route("/content/<item_id>", methods=["POST"])
    def update_content(item_id):
        """Update an existing item."""
        _require_actor()
        item = _load_editable_item(item_id)
        payload, error = _parse_payload()
        if error:
            return error

        item = content_service.update(current_scope(), item, payload)
        return jsonify({"success": True, "item": item.model_dump(mode="json")})

    @bp.route("/content/<item_id>/trash", methods=["POST"])
    def trash_content(item_id):
        """Move an item to the trash."""
        _require_actor()
        item = _load_editable_item(item_id)
        item = content_service.trash(current_scope(), item)
        return jsonify({"success": True, "item": item.model_dump(mode="json")})

    return bp
