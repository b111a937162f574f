from pymongo import MongoClient

_client = None
_db = None

def init_mongo(app):
    global _client, _db
    mongo_uri = app.config["MONGO_URI"]
    # MongoClient connects lazily, so this does not block app startup
    _client = MongoClient(mongo_uri)

    # Database name from the URI (e.g. /ledger), else the configured fallback
    _db = _client.get_default_database(default=app.config["MONGO_DBNAME"])

    print(f"[MongoDB] Using database: {_db.name}")

# Proxy so modules can import `db` before init_mongo has run
class _DBProxy:
    def __getattr__(self, name):
        if _db is None:
            raise RuntimeError("Database not initialized. Call init_mongo first.")
        return getattr(_db, name)

    def __getitem__(self, name):
        if _db is None:
            raise RuntimeError("Database not initialized. Call init_mongo first.")
        return _db[name]

    def __bool__(self):
        return _db is not None

db = _DBProxy()
