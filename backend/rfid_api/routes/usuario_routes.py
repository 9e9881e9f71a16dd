import logging

from flask import Blueprint, request, jsonify
from rfid_api.extensions import store
from rfid_api.models import Usuario
from rfid_api.services.auth_service import (
    hash_password, verify_password, generate_token,
    generate_reset_token, verify_reset_token
)
from rfid_api.services.mail_service import send_password_reset
from rfid_api.store import RecordNotFound
from rfid_api.utils.validators import validate_request, json_object

logger = logging.getLogger(__name__)

usuario_bp = Blueprint("usuario", __name__)


def _new_password(data):
    # both spellings are sent by existing clients
    return data.get("nuevaContraseña") or data.get("nuevaContrasena")


# ================= LIST / LOGIN CHECK =================
@usuario_bp.route("/usuarios", methods=["GET"])
def list_users():
    email = request.args.get("email")
    password = request.args.get("contraseña")

    usuarios = store.all(Usuario.COLLECTION)
    if email and password:
        usuarios = [
            u for u in usuarios
            if u.get("email") == email and verify_password(u.get(Usuario.PASSWORD_FIELD), password)
        ]

    return jsonify({"success": True, "data": [Usuario.public(u) for u in usuarios]})


@usuario_bp.route("/usuarios/<usuario_id>", methods=["GET"])
def get_user(usuario_id):
    usuario = store.find_by_id(Usuario.COLLECTION, usuario_id)
    if not usuario:
        return jsonify({"success": False, "message": "User not found"}), 404
    return jsonify({"success": True, "data": Usuario.public(usuario)})


# ================= REGISTER =================
@usuario_bp.route("/usuarios", methods=["POST"])
def create_user():
    data = validate_request(request.get_json(silent=True), Usuario.REQUIRED)
    perfil = {k: v for k, v in data.items() if k not in Usuario.REQUIRED}

    nuevo = None
    with store.transaction() as document:
        if not document.find(Usuario.COLLECTION, "email", data["email"]):
            usuario = Usuario(
                data["email"], hash_password(data["contraseña"]), data["nombre"], perfil
            )
            nuevo = store.add(document, Usuario.COLLECTION, usuario.to_dict())

    if nuevo is None:
        return jsonify({"success": False, "message": "Email is already registered."}), 400

    logger.info("Registered user %s", nuevo["id"])
    return jsonify({"success": True, "data": Usuario.public(nuevo)}), 201


@usuario_bp.route("/usuarios/login", methods=["POST"])
def login():
    data = validate_request(request.get_json(silent=True), ("email", "contraseña"))

    usuario = store.find_by_field(Usuario.COLLECTION, "email", data["email"])
    if not usuario or not verify_password(usuario.get(Usuario.PASSWORD_FIELD), data["contraseña"]):
        return jsonify({"success": False, "message": "Invalid credentials"}), 401

    return jsonify({
        "success": True,
        "token": generate_token(usuario),
        "data": Usuario.public(usuario)
    })


@usuario_bp.route("/check-email", methods=["GET"])
def check_email():
    email = request.args.get("email")
    if not email:
        return jsonify({"success": False, "message": "The 'email' parameter is required."}), 400

    return jsonify({"success": True, "exists": store.exists(Usuario.COLLECTION, "email", email)})


# ================= PASSWORD =================
@usuario_bp.route("/usuarios/cambiar-contrasena", methods=["PUT"])
def change_password():
    data = json_object(request.get_json(silent=True))
    email = data.get("email")
    nueva = _new_password(data)

    if not email or not nueva:
        return jsonify({"success": False, "message": "Email and new password are required."}), 400

    try:
        usuario = store.update_by_field(
            Usuario.COLLECTION, "email", email, {Usuario.PASSWORD_FIELD: hash_password(nueva)}
        )
    except RecordNotFound:
        return jsonify({"success": False, "message": "User not found."}), 404

    logger.info("Password changed for user %s", usuario["id"])
    return jsonify({"success": True, "data": Usuario.public(usuario)})


@usuario_bp.route("/request-password-reset", methods=["POST"])
def request_password_reset():
    data = validate_request(request.get_json(silent=True), ("email",))

    if not store.exists(Usuario.COLLECTION, "email", data["email"]):
        return jsonify({"success": False, "message": "User not found."}), 404

    token = generate_reset_token(data["email"])
    send_password_reset(data["email"], token, data.get("resetUrl"))

    return jsonify({"success": True, "message": "Password reset instructions sent."})


@usuario_bp.route("/reset-password", methods=["POST"])
def reset_password():
    data = json_object(request.get_json(silent=True))
    nueva = _new_password(data)
    if not data.get("token") or not nueva:
        return jsonify({"success": False, "message": "Token and new password are required."}), 400

    email = verify_reset_token(data["token"])
    if not email:
        return jsonify({"success": False, "message": "Invalid or expired token"}), 401

    try:
        store.update_by_field(
            Usuario.COLLECTION, "email", email, {Usuario.PASSWORD_FIELD: hash_password(nueva)}
        )
    except RecordNotFound:
        return jsonify({"success": False, "message": "User not found."}), 404

    return jsonify({"success": True, "message": "Password updated."})


# ================= EDIT / DELETE =================
@usuario_bp.route("/usuarios/<usuario_id>", methods=["PUT"])
def update_user(usuario_id):
    patch = request.get_json(silent=True)
    if not isinstance(patch, dict):
        return jsonify({"success": False, "message": "User data is required"}), 400

    patch = dict(patch)
    if patch.get(Usuario.PASSWORD_FIELD):
        patch[Usuario.PASSWORD_FIELD] = hash_password(patch[Usuario.PASSWORD_FIELD])

    try:
        usuario = store.update_by_id(Usuario.COLLECTION, usuario_id, patch)
    except RecordNotFound:
        return jsonify({"success": False, "message": "User not found"}), 404

    return jsonify({"success": True, "data": Usuario.public(usuario)})


@usuario_bp.route("/usuarios/<usuario_id>", methods=["DELETE"])
def delete_user(usuario_id):
    try:
        usuario = store.delete_by_id(Usuario.COLLECTION, usuario_id)
    except RecordNotFound:
        return jsonify({"success": False, "message": "User not found"}), 404

    return jsonify({"success": True, "data": Usuario.public(usuario)})
