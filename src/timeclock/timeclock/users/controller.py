from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..container import Container
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/register", methods=["POST"], endpoint="api_register")
    def api_register():
        data = request.get_json(silent=True) or {}
        try:
            user = container.user_service.register(
                email=data.get("email"),
                name=data.get("name"),
                password=data.get("password"),
            )
            return jsonify({"success": True, "user": user.to_dict()}), 201
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            logger.exception("Registration failed")
            return jsonify({"success": False, "message": "Internal error during registration"}), 500
