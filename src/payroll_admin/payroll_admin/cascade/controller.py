from __future__ import annotations

from functools import wraps

from flask import Flask, jsonify, session

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DeleteFailed, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"error": "Vui lòng đăng nhập để tiếp tục!", "code": "UNAUTHENTICATED"}), 401
            return view(*args, **kwargs)

        return wrapper

    def _current_role() -> Role:
        try:
            return Role(session.get("role"))
        except ValueError:
            return Role.STAFF

    @app.route("/admin/records/<table>/<record_id>", methods=["DELETE"], endpoint="cascade_delete_record")
    @login_required
    def cascade_delete_record(table: str, record_id: str):
        try:
            result = container.cascade_service.delete_record(
                current_role=_current_role(),
                table=table,
                record_id=record_id,
            )
        except AuthorizationError as e:
            return jsonify({"error": str(e), "code": "FORBIDDEN"}), 403
        except ValidationError as e:
            return jsonify({"error": str(e), "code": "VALIDATION_ERROR"}), 400
        except DeleteFailed as e:
            return (
                jsonify(
                    {
                        "error": str(e),
                        "code": "DELETE_FAILED",
                        "cause": str(e.__cause__) if e.__cause__ else None,
                        "partial": e.result.to_dict() if e.result else None,
                    }
                ),
                500,
            )
        return jsonify(result.to_dict())

    @app.route("/admin/records/<table>/dependents", methods=["GET"], endpoint="cascade_dependents")
    @login_required
    def cascade_dependents(table: str):
        try:
            return jsonify(container.cascade_service.describe(table=table))
        except ValidationError as e:
            return jsonify({"error": str(e), "code": "VALIDATION_ERROR"}), 400
