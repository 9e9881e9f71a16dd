import json

import pytest

from rfid_api import create_app
from rfid_api.store import RecordStore


SEED = {
    "usuarios": [],
    "lecturas": [],
    "reportes": [],
    "rfid": [
        {"placa": "P123", "estado": "active", "conductor": "Ana Lopez", "tipo": "Sedan", "uso": "Particular"},
        {"placa": "C456", "estado": "inactive"},
    ],
}


def write_db(path, document):
    path.write_text(json.dumps(document, indent=2), encoding="utf-8")


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "db.json"
    write_db(path, SEED)
    return path


@pytest.fixture
def store(db_path):
    return RecordStore(str(db_path))


@pytest.fixture
def app(db_path, tmp_path):
    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test-secret",
        "DB_PATH": str(db_path),
        "UPLOAD_FOLDER": str(tmp_path / "uploads"),
        "ID_POLICY": "uuid",
        "ID_POLICIES": {},
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()
