import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


def _env_list(name: str, default: str) -> list:
    return [item.strip() for item in os.getenv(name, default).split(',') if item.strip()]


class Config:
    # OpenAPI document info
    API_TITLE = os.getenv('API_TITLE', 'User Contract API')
    API_VERSION = os.getenv('API_VERSION', '1.0.0')
    API_DESCRIPTION = os.getenv(
        'API_DESCRIPTION',
        'Schema-driven user API: every request and response is validated '
        'against the schemas published at /doc',
    )

    # Documentation routes (outside the contract mechanism)
    DOC_PATH = os.getenv('DOC_PATH', '/doc')
    UI_PATH = os.getenv('UI_PATH', '/ui')
    SWAGGER_UI_CDN = os.getenv('SWAGGER_UI_CDN', 'https://unpkg.com/swagger-ui-dist@5')
    GREETING = os.getenv('GREETING', 'Hello Flask!')

    # Start with the two demo users
    SEED_USERS = _env_bool('SEED_USERS', 'true')

    # Comma-separated origins, "*" for any
    CORS_ORIGINS = _env_list('CORS_ORIGINS', '*')

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

    # Request logging (api.request)
    REQUEST_LOG_ENABLED = _env_bool('REQUEST_LOG_ENABLED', 'true')
    REQUEST_LOG_SAMPLE_RATE = os.getenv('REQUEST_LOG_SAMPLE_RATE', '1.0')
    REQUEST_LOG_ENDPOINTS = _env_list('REQUEST_LOG_ENDPOINTS', '')

    HOST = os.getenv('HOST', '127.0.0.1')
    PORT = int(os.getenv('PORT', '5000'))
    DEBUG = _env_bool('FLASK_DEBUG', 'false')
