"""
Root pytest configuration for backend tests.

Provides:
- Shared fixtures (store, app, client)
- Common test data
"""

import sys
from pathlib import Path

# Add backend directory to Python path so imports like
# `from api.contracts import ...` and `from services.user_store import ...` work
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

import pytest


@pytest.fixture
def store():
    """Fresh store holding the two demo users."""
    from services.user_store import UserStore, seed_users

    return UserStore(seed_users())


@pytest.fixture
def app(store):
    """Create test Flask application."""
    from app import create_app

    app = create_app(store=store)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()
