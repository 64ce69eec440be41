from __future__ import annotations

import io
import logging
from typing import Callable, Optional

import qrcode
from flask import Flask, current_app, jsonify, request, send_file, url_for

from ..common.validators import optional_float
from ..core.enums import PauseMode
from ..core.exceptions import PolicyRejection, UserNotFoundError, ValidationError
from ..container import Container
from ..events.model import Coordinates
from ..users.identity import resolve_acting_user
from .result import ActionResult

logger = logging.getLogger(__name__)

# Scan action -> the endpoint a scanning client posts to.
SCAN_ACTIONS = {
    "checkin": "api_checkin",
    "pause": "api_pause",
    "checkout": "api_checkout",
}
_LOCATED_FIELDS = ("userId", "latitude", "longitude", "accuracy")
_PAUSE_FIELDS = ("userId", "reason", "checkForBreak", "returnFromBreak")


def _coordinates(data: dict) -> Optional[Coordinates]:
    latitude = optional_float(data.get("latitude"), "latitude")
    longitude = optional_float(data.get("longitude"), "longitude")
    if latitude is None or longitude is None:
        return None
    return Coordinates(latitude=latitude, longitude=longitude, accuracy=optional_float(data.get("accuracy"), "accuracy"))


def _pause_mode(data: dict) -> PauseMode:
    if data.get("checkForBreak"):
        return PauseMode.QUERY_ONLY
    if data.get("returnFromBreak"):
        return PauseMode.EXPLICIT_RETURN
    return PauseMode.NORMAL


def register(app: Flask, container: Container) -> None:
    def _run(action: str, operation: Callable[[int, dict], ActionResult]):
        data = request.get_json(silent=True) or {}
        try:
            user_id = resolve_acting_user(container.users_repo, data.get("userId"))
            result = operation(user_id, data)
            return jsonify(result.to_dict()), 200
        except PolicyRejection as e:
            logger.info("%s rejected (%s): %s", action, e.code, e)
            return jsonify(ActionResult.rejected(e).to_dict()), 400
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except UserNotFoundError as e:
            return jsonify({"success": False, "message": str(e)}), 404
        except Exception:
            logger.exception("%s failed", action)
            return jsonify({"success": False, "message": "Internal error while recording attendance"}), 500

    @app.route("/api/checkin", methods=["POST"], endpoint="api_checkin")
    def api_checkin():
        return _run(
            "check-in",
            lambda user_id, data: container.attendance_service.request_check_in(user_id, _coordinates(data)),
        )

    @app.route("/api/pause", methods=["POST"], endpoint="api_pause")
    def api_pause():
        return _run(
            "pause",
            lambda user_id, data: container.attendance_service.request_pause(
                user_id, (data.get("reason") or None), _pause_mode(data)
            ),
        )

    @app.route("/api/checkout", methods=["POST"], endpoint="api_checkout")
    def api_checkout():
        return _run(
            "checkout",
            lambda user_id, data: container.attendance_service.request_check_out(user_id, _coordinates(data)),
        )

    @app.route("/scan/<action>", methods=["GET"], endpoint="scan_point")
    def scan_point(action: str):
        """Target of a scanned QR code: tells the client which request records ``action``."""

        if action not in SCAN_ACTIONS:
            return jsonify({"success": False, "message": f"Unknown scan action: {action}"}), 404
        return jsonify(
            {
                "success": True,
                "action": action,
                "method": "POST",
                "endpoint": url_for(SCAN_ACTIONS[action]),
                "fields": list(_PAUSE_FIELDS if action == "pause" else _LOCATED_FIELDS),
            }
        )

    @app.route("/qr/<action>.png", methods=["GET"], endpoint="scan_point_qr")
    def scan_point_qr(action: str):
        """QR code printed at a scan point; it encodes the ``/scan/<action>`` URL."""

        if action not in SCAN_ACTIONS:
            return jsonify({"success": False, "message": f"Unknown scan action: {action}"}), 404

        base_url = str(current_app.config.get("PUBLIC_BASE_URL", request.host_url)).rstrip("/")
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=10,
            border=2,
        )
        qr.add_data(base_url + url_for("scan_point", action=action))
        qr.make(fit=True)
        img = qr.make_image(fill_color="black", back_color="white")

        buf = io.BytesIO()
        img.save(buf, format="PNG")
        buf.seek(0)
        return send_file(buf, mimetype="image/png", download_name=f"qr-{action}.png")
