"""
Flask Application Factory - Schema-validated User API

Every /users request runs through the contract dispatcher:
match -> validate input -> handler -> validate output -> serialize.
The same contracts render the OpenAPI document at /doc.
"""

import logging

from flask import Flask
from flask_cors import CORS

from config import Config

logger = logging.getLogger('app')


def create_app(store=None, config_overrides=None):
    """
    Build the app.

    Args:
        store: UserStore to serve; a fresh (optionally seeded) one when None
        config_overrides: dict applied on top of Config (tests)
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    CORS(app,
         resources={r"/*": {"origins": app.config['CORS_ORIGINS']}},
         methods=["GET", "POST", "OPTIONS"],
         allow_headers=["Content-Type", "X-Request-ID"],
         expose_headers=["X-Request-ID"],
         supports_credentials=False)

    # === API CONTRACT MIDDLEWARE ===
    from api.middleware import (
        setup_error_handlers,
        setup_request_id_middleware,
        setup_request_logging_middleware,
    )
    setup_request_id_middleware(app)
    setup_request_logging_middleware(app)
    setup_error_handlers(app)

    # Load contract schemas (registers contracts on import)
    from api.contracts import CONTRACTS, Dispatcher, mount_dispatcher
    from api.contracts import schemas  # noqa: F401
    from routes.users import users_router
    from services.user_store import UserStore, seed_users

    if store is None:
        store = UserStore(seed_users() if app.config['SEED_USERS'] else None)

    dispatcher = Dispatcher.from_routers(CONTRACTS, store, [users_router])
    mount_dispatcher(app, dispatcher)

    from routes.docs import create_docs_blueprint
    app.register_blueprint(
        create_docs_blueprint(CONTRACTS, app.config['DOC_PATH'], app.config['UI_PATH'])
    )

    logger.info(f"API contracts loaded: {len(CONTRACTS)} contract(s)")
    return app


def run_app():
    """Main entry point for local development - starts Flask's dev server."""
    logging.basicConfig(
        level=getattr(logging, Config.LOG_LEVEL, logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    app = create_app()
    logger.info(f"Serving on http://{Config.HOST}:{Config.PORT} (docs at {Config.DOC_PATH})")
    app.run(host=Config.HOST, port=Config.PORT, debug=Config.DEBUG)


if __name__ == '__main__':
    run_app()
