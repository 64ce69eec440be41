from __future__ import annotations

import logging
from datetime import date
from typing import Mapping, Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_positive_int
from ..container import Container
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.enums import AccountStatus
from ..core.exceptions import InvalidNavigation, NotFoundError, ValidationError
from .aggregation import total_work_time
from .export import to_csv_bytes, to_xlsx_bytes
from .navigator import NavigatorViewState, Page
from .service import ReportWindow

logger = logging.getLogger(__name__)


def _parse_optional_date(value: Optional[str], field_name: str) -> Optional[date]:
    if not value:
        return None
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)") from None


def _window(args: Mapping) -> ReportWindow:
    window = ReportWindow(
        start=_parse_optional_date(args.get("start"), "start"),
        end=_parse_optional_date(args.get("end"), "end"),
    )
    if window.start and window.end and window.start > window.end:
        raise ValidationError("start must not be after end")
    return window


def _account_status(raw) -> AccountStatus:
    value = str(raw or "").strip().upper()
    try:
        return AccountStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown account status: {value or '-'}") from None


def _page_payload(page: Page) -> dict:
    return {
        "success": True,
        "items": [r.to_dict() for r in page.items],
        "total": page.total,
        "pageCount": page.page_count,
        "totalWorkTime": total_work_time(page.items),
        "state": page.state.to_query(),
    }


def register(app: Flask, container: Container) -> None:
    def _page_size() -> int:
        return int(app.config.get("DEFAULT_PAGE_SIZE", DEFAULT_PAGE_SIZE))

    def _error_response(e: Exception):
        if isinstance(e, ValidationError):
            return jsonify({"success": False, "message": str(e)}), 400
        if isinstance(e, NotFoundError):
            return jsonify({"success": False, "message": str(e)}), 404
        logger.exception("Admin request failed: %s %s", request.method, request.path)
        return jsonify({"success": False, "message": "Internal error"}), 500

    @app.route("/api/admin/activities", methods=["GET"], endpoint="api_admin_activities")
    def api_admin_activities():
        try:
            state = NavigatorViewState.from_query(request.args, default_page_size=_page_size())
            page = container.report_service.get_page(state, _window(request.args))
            return jsonify(_page_payload(page)), 200
        except Exception as e:
            return _error_response(e)

    @app.route("/api/admin/activities/drill-down", methods=["POST"], endpoint="api_admin_drill_down")
    def api_admin_drill_down():
        data = request.get_json(silent=True) or {}
        try:
            state = NavigatorViewState.from_query(data.get("state") or {}, default_page_size=_page_size())
            window = _window(data)
            group_key = str(data.get("groupKey") or "").strip()
            if not group_key:
                raise ValidationError("groupKey is required")

            record = next(
                (r for r in container.report_service.get_filtered(state, window) if r.group_key == group_key),
                None,
            )
            if record is None:
                raise InvalidNavigation(f"No row {group_key!r} in the current view")

            page = container.report_service.get_page(state.drill_down(record), window)
            return jsonify(_page_payload(page)), 200
        except Exception as e:
            return _error_response(e)

    @app.route("/api/admin/activities/drill-up", methods=["POST"], endpoint="api_admin_drill_up")
    def api_admin_drill_up():
        data = request.get_json(silent=True) or {}
        try:
            state = NavigatorViewState.from_query(data.get("state") or {}, default_page_size=_page_size())
            page = container.report_service.get_page(state.drill_up(), _window(data))
            return jsonify(_page_payload(page)), 200
        except Exception as e:
            return _error_response(e)

    def _export(fmt: str):
        state = NavigatorViewState.from_query(request.args, default_page_size=_page_size())
        headers, rows = container.report_service.export_rows(state, _window(request.args))
        filename = f"activities-{state.granularity.value}.{fmt}"
        if fmt == "csv":
            payload, mimetype = to_csv_bytes(headers, rows), "text/csv"
        else:
            payload = to_xlsx_bytes(headers, rows)
            mimetype = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        return app.response_class(
            payload,
            mimetype=mimetype,
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/admin/activities.csv", methods=["GET"], endpoint="api_admin_activities_csv")
    def api_admin_activities_csv():
        try:
            return _export("csv")
        except Exception as e:
            return _error_response(e)

    @app.route("/api/admin/activities.xlsx", methods=["GET"], endpoint="api_admin_activities_xlsx")
    def api_admin_activities_xlsx():
        try:
            return _export("xlsx")
        except Exception as e:
            return _error_response(e)

    @app.route("/api/admin/dashboard", methods=["GET"], endpoint="api_admin_dashboard")
    def api_admin_dashboard():
        try:
            summary = container.dashboard_service.summary()
            return jsonify({"success": True, **summary.to_dict()}), 200
        except Exception as e:
            return _error_response(e)

    @app.route("/api/admin/users/<int:user_id>/status", methods=["POST"], endpoint="api_admin_user_status")
    def api_admin_user_status(user_id: int):
        data = request.get_json(silent=True) or {}
        try:
            status = _account_status(data.get("status"))
            container.user_service.set_account_status(user_id, status)
            return jsonify({"success": True, "userId": user_id, "status": status.value}), 200
        except Exception as e:
            return _error_response(e)

    @app.route("/api/admin/users", methods=["GET"], endpoint="api_admin_users")
    def api_admin_users():
        try:
            status = _account_status(request.args["status"]) if request.args.get("status") else None
            users = container.user_service.list_users(status)
            return jsonify({"success": True, "users": [u.to_dict() for u in users]}), 200
        except Exception as e:
            return _error_response(e)

    @app.route("/api/admin/notifications", methods=["GET"], endpoint="api_admin_notifications")
    def api_admin_notifications():
        try:
            recipient = request.args.get("recipientId")
            recipient_id = require_positive_int(recipient, "recipientId") if recipient else None
            notifications = container.notification_service.list_unread(recipient_id)
            return jsonify(
                {
                    "success": True,
                    "notifications": [n.to_dict() for n in notifications],
                    "count": len(notifications),
                }
            ), 200
        except Exception as e:
            return _error_response(e)

    @app.route(
        "/api/admin/notifications/<int:notification_id>/read",
        methods=["POST"],
        endpoint="api_admin_notification_read",
    )
    def api_admin_notification_read(notification_id: int):
        try:
            container.notification_service.mark_read(notification_id)
            return jsonify({"success": True, "id": notification_id}), 200
        except Exception as e:
            return _error_response(e)

    @app.route("/api/admin/notifications", methods=["PATCH"], endpoint="api_admin_notifications_reset")
    def api_admin_notifications_reset():
        data = request.get_json(silent=True) or {}
        try:
            if data.get("action") != "reset_counter":
                raise ValidationError("Unsupported action")
            updated = container.notification_service.mark_all_read()
            return jsonify({"success": True, "updatedCount": updated}), 200
        except Exception as e:
            return _error_response(e)
