from flask import Blueprint, request, jsonify
from rfid_api.extensions import store
from rfid_api.models import Lectura
from rfid_api.services.lectura_service import register_read
from rfid_api.store import VehicleNotFound
from rfid_api.utils.validators import validate_request

lectura_bp = Blueprint("lectura", __name__)


@lectura_bp.route("/lecturas", methods=["GET"])
def list_reads():
    return jsonify({"success": True, "data": store.all(Lectura.COLLECTION)})


@lectura_bp.route("/lecturas/<lectura_id>", methods=["GET"])
def get_read(lectura_id):
    lectura = store.find_by_id(Lectura.COLLECTION, lectura_id)
    if not lectura:
        return jsonify({"success": False, "message": "Read not found"}), 404
    return jsonify({"success": True, "data": lectura})


# ================= CREATE READ + REPORT =================
@lectura_bp.route("/lecturas", methods=["POST"])
def create_read():
    data = validate_request(request.get_json(silent=True), Lectura.REQUIRED)

    try:
        lectura, reporte = register_read(store, Lectura.from_request(data))
    except VehicleNotFound:
        return jsonify({"success": False, "message": "Vehicle not found."}), 404

    return jsonify({
        "success": True,
        "message": "Read and report created successfully.",
        "lectura": lectura,
        "reporte": reporte
    }), 201
