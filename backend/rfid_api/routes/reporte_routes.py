import os

from flask import Blueprint, request, jsonify, current_app, send_from_directory
from rfid_api.extensions import store
from rfid_api.models import Reporte
from rfid_api.services.upload_service import save_photo
from rfid_api.utils.validators import missing_fields

reporte_bp = Blueprint("reporte", __name__)


@reporte_bp.route("/reportes", methods=["GET"])
def list_reports():
    return jsonify({"success": True, "data": store.all(Reporte.COLLECTION)})


@reporte_bp.route("/reportes/<reporte_id>", methods=["GET"])
def get_report(reporte_id):
    reporte = store.find_by_id(Reporte.COLLECTION, reporte_id)
    if not reporte:
        return jsonify({"success": False, "message": "Report not found"}), 404
    return jsonify({"success": True, "data": reporte})


@reporte_bp.route("/reportes", methods=["POST"])
def create_report():
    """
    Create a report. Multipart requests carry a ``photo`` file plus
    ``placa``, ``cui`` and ``estado``; JSON bodies are stored as sent.
    """
    if request.is_json:
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or not data:
            return jsonify({"success": False, "message": "Report data is required"}), 400
        reporte = store.insert(Reporte.COLLECTION, data)
        return jsonify({"success": True, "data": reporte}), 201

    photo = request.files.get("photo")
    if missing_fields(request.form, Reporte.PHOTO_REQUIRED) or not photo or not photo.filename:
        return jsonify({"success": False, "message": "Missing data or photo"}), 400

    path = save_photo(photo, current_app.config["UPLOAD_FOLDER"])
    reporte = store.insert(
        Reporte.COLLECTION,
        Reporte.with_photo(
            request.form["placa"], request.form["cui"], request.form["estado"], path
        )
    )
    return jsonify({"success": True, "data": reporte}), 201


@reporte_bp.route("/uploads/<path:filename>", methods=["GET"])
def uploaded_photo(filename):
    folder = os.path.abspath(current_app.config["UPLOAD_FOLDER"])
    return send_from_directory(folder, filename)
