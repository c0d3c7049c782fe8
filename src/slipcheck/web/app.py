"""Flask application exposing slip verification over HTTP."""

import logging
import mimetypes
from typing import Callable, Optional

from flask import Flask, g, jsonify, request

from slipcheck.config import AppConfig
from slipcheck.database.base import Database
from slipcheck.database.factories import create_database
from slipcheck.domain.entities import SlipSubmission
from slipcheck.domain.errors import (
    InfrastructureError,
    InputError,
    SlipRejectedError,
)
from slipcheck.domain.settings import SettingsService
from slipcheck.domain.verification import IdentityResolver, SlipGateway, SlipVerificationService
from slipcheck.gateway.slip2go import Slip2GoClient
from slipcheck.utils.amount_parser import parse_amount
from slipcheck.utils.promptpay import generate_payload
from slipcheck.web.auth import HTTPIdentityResolver, bearer_token

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 10 * 1024 * 1024
DEFAULT_MIME_TYPE = "image/jpeg"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
}


def error_response(error: str, message: str, status: int, code: Optional[str] = None):
    body = {"error": error, "message": message}
    if code:
        body["code"] = code
    return jsonify(body), status


def _mime_type(upload) -> str:
    if upload.mimetype and upload.mimetype != "application/octet-stream":
        return upload.mimetype
    guessed, _ = mimetypes.guess_type(upload.filename or "")
    return guessed or DEFAULT_MIME_TYPE


def create_app(
    config: Optional[AppConfig] = None,
    database_factory: Optional[Callable[[], Database]] = None,
    gateway: Optional[SlipGateway] = None,
    identity_resolver: Optional[IdentityResolver] = None,
) -> Flask:
    """Create the Flask application.

    Args:
        config: Process configuration (read from the environment if None)
        database_factory: Returns a Database for one request
        gateway: Slip verification client (Slip2Go if None)
        identity_resolver: Bearer token resolver (HTTP resolver if an auth
            URL is configured)
    """
    config = config or AppConfig.from_env()
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = MAX_UPLOAD_BYTES

    if database_factory is None:
        shared_db = create_database(config.database_url, config.database_path)
        database_factory = shared_db.fork

    if gateway is None:
        gateway = Slip2GoClient(
            api_key=config.slip2go_api_key,
            api_url=config.slip2go_api_url,
            receiver_names=config.receiver_names,
        )

    if identity_resolver is None and config.auth_url:
        identity_resolver = HTTPIdentityResolver(config.auth_url, api_key=config.auth_api_key)

    def get_db() -> Database:
        if "db" not in g:
            g.db = database_factory()
            g.db.connect()
        return g.db

    @app.teardown_appcontext
    def close_db(exc):
        db = g.pop("db", None)
        if db is not None:
            db.disconnect()

    @app.errorhandler(413)
    def upload_too_large(exc):
        return error_response(InputError.error, "Uploaded file is too large", 413)

    @app.after_request
    def add_cors_headers(response):
        response.headers.update(CORS_HEADERS)
        return response

    @app.route("/verify-slip", methods=["POST", "OPTIONS"])
    def verify_slip():
        """Verify an uploaded slip and record the donation."""
        if request.method == "OPTIONS":
            return "ok", 200

        upload = request.files.get("file")
        image_bytes = upload.read() if upload is not None else None
        mime_type = _mime_type(upload) if image_bytes else DEFAULT_MIME_TYPE

        try:
            amount = parse_amount(request.form.get("amount") or "0")
        except ValueError as e:
            return error_response(InputError.error, str(e), 400)

        submission = SlipSubmission(
            image_bytes=image_bytes,
            mime_type=mime_type,
            claimed_amount=amount,
            display_name=request.form.get("display_name") or None,
            message=request.form.get("message") or None,
            bearer_token=bearer_token(request.headers.get("Authorization")),
        )

        service = SlipVerificationService(get_db(), gateway, identity_resolver=identity_resolver)
        try:
            outcome = service.verify(submission)
        except InputError as e:
            return error_response(e.error, str(e), 400)
        except SlipRejectedError as e:
            return error_response(e.error, e.message, 400, code=e.code)
        except InfrastructureError as e:
            logger.error("Slip verification failed: %s", e)
            return error_response("server_error", str(e), 500)
        except Exception:
            logger.exception("Unexpected error while verifying slip")
            return error_response("server_error", "Internal server error, please try again", 500)

        result = outcome.result
        return jsonify(
            {
                "success": True,
                "code": result.code,
                "message": result.message,
                "data": result.raw_payload,
            }
        ), 200

    @app.route("/donation-settings", methods=["GET"])
    def donation_settings():
        """Public donation settings used to render the PromptPay QR code."""
        settings_service = SettingsService(get_db())
        try:
            policy = settings_service.get_donation_policy()
            enabled = settings_service.is_donation_enabled()
            amount = parse_amount(request.args["amount"]) if request.args.get("amount") else None
        except InfrastructureError as e:
            logger.error("Donation settings unavailable: %s", e)
            return error_response("server_error", str(e), 500)
        except ValueError as e:
            return error_response(InputError.error, str(e), 400)
        except Exception:
            logger.exception("Unexpected error while reading donation settings")
            return error_response("server_error", "Internal server error, please try again", 500)

        payload = None
        if policy.receiver_account_id:
            try:
                payload = generate_payload(policy.receiver_account_id, amount)
            except ValueError as e:
                logger.warning("Cannot build PromptPay payload: %s", e)

        return jsonify(
            {
                "enabled": enabled,
                "receiver_account_id": policy.receiver_account_id,
                "minimum_amount": float(policy.minimum_amount),
                "promptpay_payload": payload,
            }
        ), 200

    return app
