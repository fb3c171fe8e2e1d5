"""Flask app exposing the sales read API.

Routes (under the configured prefix, default /api):
    GET /sales            page envelope
    GET /sales/<id>       one record
    GET /sales/stats      page-local stats for the same window as /sales
    GET /sales/export     CSV of the same window as /sales
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from flask import Blueprint, Flask, Response, current_app, jsonify, request

from ..api.export import default_export_filename, export_page_csv
from ..api.models import PageEnvelope
from ..api.sales_api import SessionFactory, get_sale, list_sales
from ..api.stats_api import summarize_page
from ..config.loader import get_listing_settings, get_server_settings, get_sqlite_path
from ..database.sqlite_client import get_session_factory
from ..errors import ParameterValidationError, RecordNotFoundError, StoreError
from ..query.builder import build_filter_spec
from ..utils.logging import get_logger

logger = get_logger(__name__)

sales_bp = Blueprint("sales", __name__)


def _settings() -> Dict[str, Any]:
    return current_app.extensions["salesdesk"]


def _current_page() -> PageEnvelope:
    settings = _settings()
    listing = settings["listing"]
    spec = build_filter_spec(
        request.args.to_dict(),
        default_limit=listing["default_limit"],
        max_limit=listing["max_limit"],
    )
    return list_sales(
        settings["session_factory"],
        spec,
        timeout_seconds=listing["read_timeout_seconds"],
    )


@sales_bp.route("/sales")
def get_sales():
    return jsonify(_current_page().to_json_dict())


@sales_bp.route("/sales/stats")
def get_sales_stats():
    envelope = _current_page()
    return jsonify(summarize_page(envelope.data).to_json_dict())


@sales_bp.route("/sales/export")
def export_sales():
    envelope = _current_page()
    filename = default_export_filename(datetime.now(timezone.utc).date())
    return Response(
        export_page_csv(envelope.data),
        mimetype="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@sales_bp.route("/sales/<int:sale_id>")
def get_sale_by_id(sale_id: int):
    session = _settings()["session_factory"]()
    try:
        record = get_sale(session, sale_id)
    finally:
        session.close()
    return jsonify(record.to_json_dict())


@sales_bp.errorhandler(ParameterValidationError)
def _handle_validation_error(error: ParameterValidationError):
    return jsonify({"error": error.message, "field": error.field}), 400


@sales_bp.errorhandler(RecordNotFoundError)
def _handle_not_found(error: RecordNotFoundError):
    return jsonify({"error": "Sale not found"}), 404


@sales_bp.errorhandler(StoreError)
def _handle_store_error(error: StoreError):
    logger.error(f"Store failure on {request.method} {request.full_path}: {error}", exc_info=error)
    return jsonify({"error": "Server error"}), 500


def create_app(
    config: Optional[Dict[str, Any]] = None,
    session_factory: Optional[SessionFactory] = None,
) -> Flask:
    """
    Build the Flask application.

    Args:
        config: Parsed salesdesk config (defaults apply to missing sections)
        session_factory: Session factory to read from. If None, one is built
            from ``storage.sqlite_path``.

    Returns:
        Configured Flask app
    """
    if session_factory is None:
        session_factory = get_session_factory(get_sqlite_path(config))

    server = get_server_settings(config)
    app = Flask(__name__)
    app.extensions["salesdesk"] = {
        "session_factory": session_factory,
        "listing": get_listing_settings(config),
        "server": server,
    }
    app.register_blueprint(sales_bp, url_prefix=server["url_prefix"] or None)
    return app
