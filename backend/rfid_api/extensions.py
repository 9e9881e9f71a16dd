from rfid_api.store import RecordStore

store = RecordStore()
