import logging

from rfid_api.models import Lectura, Reporte
from rfid_api.store import RFID, VEHICULOS, VehicleNotFound

logger = logging.getLogger(__name__)


def find_vehicle(document, placa):
    """Registry entry for ``placa``; the old ``vehiculos`` list is a fallback."""
    vehiculo = document.find(RFID, "placa", placa)
    if vehiculo is None and VEHICULOS in document:
        vehiculo = document.find(VEHICULOS, "placa", placa)
    return vehiculo


def register_read(store, lectura):
    """
    Record an RFID read and the report generated from it.

    Both records are written by the same save. When the plate is not
    registered nothing is written and VehicleNotFound is raised.
    """
    with store.transaction() as document:
        vehiculo = find_vehicle(document, lectura.placa)
        if vehiculo is None:
            raise VehicleNotFound(lectura.placa)

        nueva_lectura = store.add(document, Lectura.COLLECTION, lectura.to_dict())
        nuevo_reporte = store.add(
            document, Reporte.COLLECTION, Reporte.from_read(nueva_lectura, vehiculo)
        )

    logger.info(
        "Read %s for %s at %s generated report %s",
        nueva_lectura["id"], lectura.placa, lectura.ubicacion, nuevo_reporte["id"]
    )
    return nueva_lectura, nuevo_reporte
