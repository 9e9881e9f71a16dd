from flask import Blueprint, request, jsonify
from rfid_api.extensions import store
from rfid_api.models import VehiculoRfid
from rfid_api.store import RecordNotFound
from rfid_api.utils.validators import validate_request

rfid_bp = Blueprint("rfid", __name__)


@rfid_bp.route("/rfid", methods=["GET"])
def get_vehicle():
    placa = request.args.get("placa")
    if not placa:
        return jsonify({"success": False, "message": "The 'placa' parameter is required."}), 400

    vehiculo = store.find_by_field(VehiculoRfid.COLLECTION, "placa", placa)
    if not vehiculo:
        return jsonify({"success": False, "message": "Vehicle not found."}), 404

    return jsonify({"success": True, "data": vehiculo}), 200


@rfid_bp.route("/rfid/estado", methods=["PUT"])
def update_status():
    data = validate_request(request.get_json(silent=True), VehiculoRfid.STATUS_REQUIRED)

    try:
        vehiculo = store.update_by_field(
            VehiculoRfid.COLLECTION, "placa", data["placa"], {"estado": data["estado"]}
        )
    except RecordNotFound:
        return jsonify({"success": False, "message": "Vehicle not found."}), 404

    return jsonify({"success": True, "data": vehiculo})
