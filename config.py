import os
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.abspath(os.path.dirname(__file__))
INSTANCE_DIR = os.path.join(BASE_DIR, "instance")

# Local database (SQLite for now, can switch to PostgreSQL via DATABASE_URL)
DEFAULT_DB = f"sqlite:///{os.path.join(INSTANCE_DIR, 'hris.db')}"

class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "hris-secret-key-change-this")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", DEFAULT_DB)
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    JWT_EXPIRY_HOURS = int(os.getenv("JWT_EXPIRY_HOURS", "24"))
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Change request listing
    CHANGE_REQUESTS_DEFAULT_LIMIT = 100
    CHANGE_REQUESTS_MAX_LIMIT = 500

class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret-key"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    LOG_LEVEL = "WARNING"
