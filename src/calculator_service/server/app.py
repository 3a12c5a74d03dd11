"""Flask application exposing the calculator routes."""
from http import HTTPStatus

from flask import Blueprint, Flask, jsonify, request
from werkzeug.exceptions import HTTPException, NotFound

from calculator_service.common.calculator import Calculator, Operation
from calculator_service.common.errors import CalculatorError
from calculator_service.common.logger import logger
from calculator_service.common.operations import ErrorResponse, OperationResult


calculator_bp = Blueprint("calculator", __name__, url_prefix="/calculator")


@calculator_bp.route("/<name>", methods=["GET"])
def calculate(name: str):
    """
    Evaluate ``first <op> second`` for the operation named in the path.

    Query parameters ``first`` and ``second`` are both required.
    """
    try:
        operation = Operation(name)
    except ValueError:
        raise NotFound(f"Unknown operation '{name}'") from None

    operands = Calculator.parse_request(request.args)
    result: OperationResult = Calculator.evaluate(operation, operands)
    logger.debug(
        f"🧮 {operands.first} {operation.symbol} {operands.second} = {result.result}"
    )
    return jsonify(result.model_dump()), HTTPStatus.OK


def _error_response(payload: ErrorResponse, status: int):
    return jsonify(payload.model_dump(exclude_none=True)), status


def handle_calculator_error(exc: CalculatorError):
    logger.warning(f"⚠️ {request.path}: {exc.message}")
    return _error_response(
        ErrorResponse(error=exc.message, code=exc.code, parameter=exc.parameter),
        exc.status_code,
    )


def handle_http_error(exc: HTTPException):
    code = (exc.name or "error").lower().replace(" ", "_")
    response, status = _error_response(
        ErrorResponse(error=exc.description or exc.name, code=code), exc.code
    )
    # Keep headers such as Allow on 405
    for key, value in exc.get_headers():
        if key != "Content-Type":
            response.headers[key] = value
    return response, status


def handle_unexpected_error(exc: Exception):
    logger.exception(f"💥 Unexpected error while handling {request.path}: {exc}")
    return _error_response(
        ErrorResponse(error="Internal server error", code="internal_error"),
        HTTPStatus.INTERNAL_SERVER_ERROR,
    )


def health():
    """Liveness probe."""
    return jsonify({"status": "healthy"}), HTTPStatus.OK


def create_app() -> Flask:
    """
    Build the Flask application.

    Every error, including framework errors such as 404 and 405, is
    rendered as a JSON ErrorResponse.

    :return: Configured Flask application
    :rtype: Flask
    """
    app = Flask(__name__)
    app.register_blueprint(calculator_bp)
    app.add_url_rule("/health", "health", health, methods=["GET"])

    app.register_error_handler(CalculatorError, handle_calculator_error)
    app.register_error_handler(HTTPException, handle_http_error)
    app.register_error_handler(Exception, handle_unexpected_error)
    return app
