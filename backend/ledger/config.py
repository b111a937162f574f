import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env from the package directory or its parent
env_path = Path(__file__).parent / '.env'
if not env_path.exists():
    env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)


def _origins(value):
    return [o.strip() for o in value.split(",") if o.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    MONGO_URI = os.getenv('MONGO_URI', 'mongodb://localhost:27017/ledger')
    # Used when MONGO_URI carries no database name
    MONGO_DBNAME = os.getenv('MONGO_DBNAME', 'ledger')

    CORS_ORIGINS = _origins(os.getenv('CORS_ORIGINS', 'http://localhost:5173,http://localhost:8080'))

    LEDGER_DEFAULT_CURRENCY = os.getenv('LEDGER_DEFAULT_CURRENCY', 'USD')
    # Largest expense snapshot a single report will process
    LEDGER_MAX_EXPENSES = int(os.getenv('LEDGER_MAX_EXPENSES', '5000'))


class TestConfig(Config):
    TESTING = True
    MONGO_URI = 'mongodb://localhost:27017/ledger_test'
    MONGO_DBNAME = 'ledger_test'
    LEDGER_MAX_EXPENSES = 50
