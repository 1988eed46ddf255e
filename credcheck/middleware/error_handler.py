"""Global error handlers for the API."""

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException
from credcheck.exceptions import CredCheckError
from credcheck.utils.logger import get_logger

logger = get_logger(__name__)


def register_error_handlers(app: Flask) -> None:
    """Render every error as ``{"error": message}``"""

    @app.errorhandler(CredCheckError)
    def handle_credcheck_error(e):
        """Handle errors raised by services"""
        logger.warning(f"{request.method} {request.path} -> {e.status_code}: {e.message}")
        return jsonify({'error': e.message}), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        """Handle routing and method errors"""
        return jsonify({'error': e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        """Handle anything else as a server error"""
        logger.exception(f"Unhandled error on {request.method} {request.path}: {str(e)}")
        return jsonify({'error': 'Internal server error'}), 500
