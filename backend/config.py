import os
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///inkpress.db'
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY') or SECRET_KEY
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=int(os.environ.get('JWT_ACCESS_TOKEN_EXPIRES', 30)))
    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH', 20 * 1024 * 1024))  # 20MB max upload
    STORAGE_PATH = os.environ.get('STORAGE_PATH') or os.path.join(os.path.dirname(os.path.dirname(__file__)), 'storage')

    # Cache configuration
    CACHE_BACKEND = os.environ.get('CACHE_BACKEND', 'memory')  # 'memory' or 'database'
    CACHE_TTL = int(os.environ.get('CACHE_TTL', 3600))
    CACHE_MAX_SIZE = int(os.environ.get('CACHE_MAX_SIZE', 4096))

    # Friend link health check
    FRIEND_HEALTH_TIMEOUT = int(os.environ.get('FRIEND_HEALTH_TIMEOUT', 10))

    # Logging / CORS
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_DIR = os.environ.get('LOG_DIR', 'log')
    CORS_MAX_AGE = int(os.environ.get('CORS_MAX_AGE', 600))
