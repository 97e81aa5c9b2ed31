import logging

from flask import Flask, request, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from coordinates import validate_coordinates
from gee_client import EarthEngineBandSampler, initialize_session
from ndvi_calc import NdviEvaluator
from service_config import Settings
from service_errors import NdviServiceError, RemoteError, ServiceNotReady, ValidationError
from service_logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(settings=None, session=None, sampler=None):
    """Build the Flask app.

    The Earth Engine session is established here, once, unless a ``session``
    or a ready-made ``sampler`` is passed in.
    """
    settings = settings or Settings.from_env()
    if sampler is None:
        session = session or initialize_session(settings)
        sampler = EarthEngineBandSampler(session, settings)

    app = Flask(__name__)
    CORS(app, send_wildcard=True)
    app.config['NDVI_SETTINGS'] = settings
    app.config['NDVI_SAMPLER'] = sampler
    evaluator = NdviEvaluator(sampler)

    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        logger.info("Rejected request: %s", e)
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(ServiceNotReady)
    def handle_not_ready(e):
        logger.warning("Request refused, Earth Engine not ready: %s", e.details)
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(RemoteError)
    def handle_remote_error(e):
        logger.error("Failed to compute NDVI: %s", e.details)
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(NdviServiceError)
    def handle_service_error(e):
        logger.error("%s: %s", e.error, e.details)
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({'error': e.name, 'details': e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        logger.exception("Server error")
        return jsonify({'error': 'Server error', 'details': str(e)}), 500

    @app.route('/')
    def home():
        return 'Backend is running!'

    @app.route('/ready', methods=['GET'])
    def ready():
        current = getattr(sampler, 'session', None)
        if current is not None and not current.ready:
            return jsonify({'ready': False, 'details': current.error}), 503
        return jsonify({'ready': True})

    @app.route('/get-ndvi', methods=['POST'])
    def get_ndvi():
        body = request.get_json(silent=True)
        coordinate = validate_coordinates(body, allow_zero=settings.allow_zero_coordinates)
        result = evaluator.evaluate(coordinate)
        return jsonify(result.to_dict())

    return app


def main():
    settings = Settings.from_env()
    setup_logging(settings.log_level, settings.log_fmt)
    app = create_app(settings)
    logger.info("Server running on port %s", settings.port)
    app.run(host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
