"""
JSON-file record store.

The whole database is one JSON object mapping collection names
(``usuarios``, ``lecturas``, ``reportes``, ``rfid``) to lists of records.
Every operation re-reads the file, works on the in-memory copy and, for
mutations, rewrites the whole file atomically.
"""
import json
import logging
import os
import tempfile
import threading
import uuid
from contextlib import contextmanager

logger = logging.getLogger(__name__)

USUARIOS = "usuarios"
LECTURAS = "lecturas"
REPORTES = "reportes"
RFID = "rfid"
VEHICULOS = "vehiculos"

COLLECTIONS = (USUARIOS, LECTURAS, REPORTES, RFID)

UUID_POLICY = "uuid"
COUNTER_POLICY = "counter"


# =====================================================
# ERRORS
# =====================================================

class StoreError(Exception):
    """Base class for every record store failure."""


class StorageUnavailable(StoreError):
    """The backing file could not be read or written."""


class CorruptDocument(StoreError):
    """The backing file is not a JSON object of collections."""


class RecordNotFound(StoreError):
    def __init__(self, collection, key, value):
        self.collection = collection
        self.key = key
        self.value = value
        super().__init__(f"No record in '{collection}' with {key}={value!r}")


class VehicleNotFound(StoreError):
    def __init__(self, placa):
        self.placa = placa
        super().__init__(f"No registered vehicle with plate {placa!r}")


class ValidationFailed(StoreError):
    def __init__(self, missing):
        self.missing = list(missing)
        super().__init__("Missing required fields: " + ", ".join(self.missing))


# =====================================================
# DOCUMENT
# =====================================================

def _same_id(stored, wanted):
    # ids from URLs arrive as strings, counter ids are stored as ints
    return stored == wanted or (stored is not None and str(stored) == str(wanted))


class Document(dict):
    """The loaded database. Missing collections default to an empty list."""

    def collection(self, name):
        records = self.setdefault(name, [])
        if not isinstance(records, list):
            raise CorruptDocument(f"Collection '{name}' is not a list")
        if not all(isinstance(record, dict) for record in records):
            raise CorruptDocument(f"Collection '{name}' holds entries that are not objects")
        return records

    def find(self, name, key, value):
        for record in self.collection(name):
            if key == "id":
                if _same_id(record.get("id"), value):
                    return record
            elif record.get(key) == value:
                return record
        return None

    def index_of(self, name, record_id):
        for index, record in enumerate(self.collection(name)):
            if _same_id(record.get("id"), record_id):
                return index
        return -1


# =====================================================
# STORE
# =====================================================

class RecordStore:
    """
    Read-modify-write access to the JSON database.

    Mirrors the PyMongo extension: construct it unbound at import time and
    call ``init_app(app)`` from the application factory, or pass ``path``
    directly.
    """

    def __init__(self, path=None, id_policies=None, default_policy=UUID_POLICY,
                 create_if_missing=True):
        self.path = path
        self.id_policies = dict(id_policies or {})
        self.default_policy = default_policy
        self.create_if_missing = create_if_missing
        self._lock = threading.RLock()

    def init_app(self, app):
        self.path = app.config["DB_PATH"]
        self.default_policy = app.config.get("ID_POLICY", UUID_POLICY)
        self.id_policies = dict(app.config.get("ID_POLICIES") or {})
        self.create_if_missing = app.config.get("DB_CREATE_IF_MISSING", True)
        app.extensions["record_store"] = self
        logger.info("Record store bound to %s", self.path)

    def policy_for(self, collection):
        policy = self.id_policies.get(collection, self.default_policy)
        if policy not in (UUID_POLICY, COUNTER_POLICY):
            raise ValueError(f"Unknown id policy {policy!r} for '{collection}'")
        return policy

    # ---------------- load / save ----------------

    def load(self):
        if not self.path:
            raise StorageUnavailable("Record store has no backing file configured")

        with self._lock:
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    raw = f.read()
            except FileNotFoundError:
                if self.create_if_missing:
                    logger.warning("Database %s not found, starting empty", self.path)
                    return Document({name: [] for name in COLLECTIONS})
                raise StorageUnavailable(f"Database file {self.path} does not exist")
            except OSError as e:
                raise StorageUnavailable(f"Cannot read {self.path}: {e}") from e

            try:
                data = json.loads(raw)
            except ValueError as e:
                raise CorruptDocument(f"{self.path} is not valid JSON: {e}") from e

            if not isinstance(data, dict):
                raise CorruptDocument(f"{self.path} must contain a JSON object")

            logger.debug("Loaded %s", self.path)
            return Document(data)

    def save(self, document):
        if not self.path:
            raise StorageUnavailable("Record store has no backing file configured")

        with self._lock:
            folder = os.path.dirname(os.path.abspath(self.path))
            temp_path = None
            try:
                os.makedirs(folder, exist_ok=True)
                fd, temp_path = tempfile.mkstemp(
                    prefix=".db-", suffix=".tmp", dir=folder
                )
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(document, f, indent=2, ensure_ascii=False)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(temp_path, self.path)
                temp_path = None
            except (OSError, TypeError, ValueError) as e:
                raise StorageUnavailable(f"Cannot write {self.path}: {e}") from e
            finally:
                if temp_path and os.path.exists(temp_path):
                    os.remove(temp_path)

            logger.debug("Saved %s", self.path)

    @contextmanager
    def transaction(self):
        """
        Yield the loaded document under the store lock and save it once
        when the block exits cleanly. An exception discards every change.
        """
        with self._lock:
            document = self.load()
            yield document
            self.save(document)

    # ---------------- identifiers ----------------

    def next_id(self, document, collection):
        if self.policy_for(collection) == COUNTER_POLICY:
            ids = [
                r["id"] for r in document.collection(collection)
                if isinstance(r.get("id"), int) and not isinstance(r.get("id"), bool)
            ]
            return max(ids, default=0) + 1
        return str(uuid.uuid4())

    def add(self, document, collection, partial):
        """Assign an id and append ``partial`` inside an open transaction."""
        record = dict(partial)
        record.pop("id", None)
        record = {"id": self.next_id(document, collection), **record}
        document.collection(collection).append(record)
        return record

    # ---------------- queries ----------------

    def all(self, collection):
        return list(self.load().collection(collection))

    def find_by_id(self, collection, record_id):
        return self.load().find(collection, "id", record_id)

    def find_by_field(self, collection, field, value):
        return self.load().find(collection, field, value)

    def filter_by_field(self, collection, field, value):
        return [r for r in self.load().collection(collection) if r.get(field) == value]

    def exists(self, collection, field, value):
        return self.find_by_field(collection, field, value) is not None

    # ---------------- mutations ----------------

    def insert(self, collection, partial):
        with self.transaction() as document:
            return self.add(document, collection, partial)

    def update_by_id(self, collection, record_id, patch):
        with self.transaction() as document:
            record = document.find(collection, "id", record_id)
            if record is None:
                raise RecordNotFound(collection, "id", record_id)
            return _merge(record, patch)

    def update_by_field(self, collection, field, value, patch):
        with self.transaction() as document:
            record = document.find(collection, field, value)
            if record is None:
                raise RecordNotFound(collection, field, value)
            return _merge(record, patch)

    def delete_by_id(self, collection, record_id):
        with self.transaction() as document:
            index = document.index_of(collection, record_id)
            if index == -1:
                raise RecordNotFound(collection, "id", record_id)
            return document.collection(collection).pop(index)


def _merge(record, patch):
    for key, value in patch.items():
        if key != "id":
            record[key] = value
    return record
