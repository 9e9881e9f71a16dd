from rfid_api.store import USUARIOS, LECTURAS, REPORTES, RFID


# =====================================================
# USUARIO MODEL
# =====================================================

class Usuario:
    COLLECTION = USUARIOS
    REQUIRED = ("email", "contraseña", "nombre")
    PASSWORD_FIELD = "contraseña"

    def __init__(self, email, password_hash, nombre, perfil=None):
        self.email = email
        self.password_hash = password_hash
        self.nombre = nombre
        self.perfil = dict(perfil or {})

    def to_dict(self):
        return {
            **self.perfil,
            "email": self.email,
            "contraseña": self.password_hash,
            "nombre": self.nombre,
        }

    @staticmethod
    def public(usuario):
        """Copy of a stored user without its password hash."""
        if usuario is None:
            return None
        return {k: v for k, v in usuario.items() if k != Usuario.PASSWORD_FIELD}


# =====================================================
# LECTURA (RFID READ) MODEL
# =====================================================

class Lectura:
    COLLECTION = LECTURAS
    REQUIRED = ("placa", "ubicacion", "fecha", "hora")

    def __init__(self, placa, ubicacion, fecha, hora, snapshot=None):
        self.placa = placa
        self.ubicacion = ubicacion
        self.fecha = fecha
        self.hora = hora
        # vehicle/owner fields sent by the full-detail readers
        self.snapshot = {k: v for k, v in (snapshot or {}).items() if k != "id"}

    @classmethod
    def from_request(cls, data):
        data = dict(data)
        return cls(
            data.pop("placa"),
            data.pop("ubicacion"),
            data.pop("fecha"),
            data.pop("hora"),
            data
        )

    def to_dict(self):
        return {
            "placa": self.placa,
            "ubicacion": self.ubicacion,
            "fecha": self.fecha,
            "hora": self.hora,
            **self.snapshot,
        }


# =====================================================
# REPORTE MODEL
# =====================================================

class Reporte:
    COLLECTION = REPORTES
    PHOTO_REQUIRED = ("placa", "cui", "estado")
    UNKNOWN_DRIVER = "Desconocido"
    DETAIL = "RFID read for vehicle with plate {placa} registered at location {ubicacion}."

    @staticmethod
    def from_read(lectura, vehiculo):
        """Report generated automatically for a read of a registered vehicle."""
        return {
            "conductor": vehiculo.get("conductor") or Reporte.UNKNOWN_DRIVER,
            "placa": vehiculo["placa"],
            "tipo": vehiculo.get("tipo"),
            "uso": vehiculo.get("uso"),
            "ubicacion": lectura["ubicacion"],
            "fecha": lectura["fecha"],
            "hora": lectura["hora"],
            "detalle": Reporte.DETAIL.format(
                placa=vehiculo["placa"], ubicacion=lectura["ubicacion"]
            ),
            "lecturaId": lectura["id"],
        }

    @staticmethod
    def with_photo(placa, cui, estado, photo):
        return {
            "placa": placa,
            "cui": cui,
            "estado": estado,
            "photo": photo,
        }


# =====================================================
# RFID REGISTRY MODEL
# =====================================================

class VehiculoRfid:
    COLLECTION = RFID
    STATUS_REQUIRED = ("placa", "estado")
