import logging

from flask import jsonify

from rfid_api.store import StorageUnavailable, CorruptDocument, ValidationFailed
from .usuario_routes import usuario_bp
from .lectura_routes import lectura_bp
from .reporte_routes import reporte_bp
from .rfid_routes import rfid_bp

logger = logging.getLogger(__name__)


def register_routes(app):
    app.register_blueprint(usuario_bp, url_prefix="/api")
    app.register_blueprint(lectura_bp, url_prefix="/api")
    app.register_blueprint(reporte_bp, url_prefix="/api")
    app.register_blueprint(rfid_bp, url_prefix="/api")

    @app.errorhandler(ValidationFailed)
    def validation_failed(error):
        return jsonify({
            "success": False,
            "message": str(error),
            "missing": error.missing
        }), 400

    @app.errorhandler(StorageUnavailable)
    def storage_unavailable(error):
        logger.exception("Database unavailable: %s", error)
        return jsonify({"success": False, "message": "Error reading the database"}), 500

    @app.errorhandler(CorruptDocument)
    def corrupt_document(error):
        logger.exception("Database could not be parsed: %s", error)
        return jsonify({"success": False, "message": "Error processing the database"}), 500
