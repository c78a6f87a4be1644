"""JSON endpoints for products and their variant editors."""
import logging
from flask import abort, request
from app.blueprints.api import api_bp
from app.services import editor_service, product_service

logger = logging.getLogger(__name__)


def _actor_id():
    return request.headers.get("X-Actor-Id", "anonymous")


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        abort(400)
    return data


def _product_or_404(product_id):
    product = product_service.get_product(product_id)
    if not product:
        abort(404)
    return product


def _editor_or_404(product_id):
    _product_or_404(product_id)
    editor = editor_service.get_editor(product_id)
    if editor is None:
        abort(404)
    return editor


@api_bp.route("/products", methods=["POST"])
def create_product():
    data = _json_body()
    name = (data.get("name") or "").strip()
    if not name:
        return {"error": "Product name is required."}, 400
    product = product_service.create_product(
        name, _actor_id(), description=data.get("description", "")
    )
    return product.to_dict(), 201


@api_bp.route("/products/<int:product_id>")
def product_detail(product_id):
    return _product_or_404(product_id).to_dict()


@api_bp.route("/products/<int:product_id>/editor", methods=["POST"])
def open_editor(product_id):
    """Open a fresh variant editor seeded from the saved variants."""
    editor = editor_service.open_editor(_product_or_404(product_id))
    return editor_service.serialize_state(editor), 201


@api_bp.route("/products/<int:product_id>/editor")
def editor_state(product_id):
    return editor_service.serialize_state(_editor_or_404(product_id))


@api_bp.route("/products/<int:product_id>/editor", methods=["DELETE"])
def discard_editor(product_id):
    _editor_or_404(product_id)
    editor_service.discard_editor(product_id)
    return "", 204


@api_bp.route("/products/<int:product_id>/editor/actions", methods=["POST"])
def editor_action(product_id):
    editor = _editor_or_404(product_id)
    data = _json_body()
    action = data.get("action")
    with editor.lock:
        try:
            result = editor_service.apply_action(editor, action, data)
        except ValueError as e:
            return {"error": str(e)}, 400
        return {"result": result, "state": editor_service.serialize_state(editor)}


@api_bp.route("/products/<int:product_id>/editor/save", methods=["POST"])
def save_editor(product_id):
    editor = _editor_or_404(product_id)
    with editor.lock:
        if editor.has_unsaved_edit:
            logger.info("Save of product %s blocked by an open option edit", product_id)
            return {
                "error": "Finish editing the open option before saving.",
                "editing_index": editor.editing_index,
            }, 409
        try:
            product = editor_service.save_editor(editor, _actor_id())
        except ValueError as e:
            return {"error": str(e)}, 400
        return {
            "product": product.to_dict(),
            "state": editor_service.serialize_state(editor),
        }
