"""
Pytest configuration and fixtures for backend tests.
"""

import itertools
import os

# Keep the application engine off the filesystem; tests use their own engine
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SEED_DEMO_DATA", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from objects_api.main import app
from objects_api.dependencies import get_requester, make_object_lookup
from objects_api.models import Base, StoredObject
from objects_api.resources import PAGES, POSTS
from objects_api.services.objects import (
    ObjectEventBus,
    ObjectsController,
    ResourceConfig,
    SqlObjectQuery,
    StoredObjectAdapter,
)
from objects_api.services.permissions import PermissionContext, RolePermissionGate
from shared.config.settings import Settings
from shared.infrastructure.db import get_db


_slug_counter = itertools.count(1)


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Requesters as upstream authentication would store them in request.state.user
REQUESTERS = {
    "admin": {"sub": "1", "roles": ["ADMIN"]},
    "editor": {"sub": "2", "roles": ["EDITOR"]},
    "author": {"sub": "3", "roles": ["AUTHOR"]},
    "other_author": {"sub": "4", "roles": ["AUTHOR"]},
    "viewer": {"sub": "5", "roles": ["VIEWER"]},
    "anonymous": {},
}


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    # Create all tables
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        # Drop all tables after test
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database session override.
    Requests are anonymous until ``login`` is used.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_requester] = lambda: REQUESTERS["anonymous"]

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def login(client):
    """Switch the requester of subsequent client calls."""
    def set_requester(name: str) -> dict:
        user = REQUESTERS[name]
        app.dependency_overrides[get_requester] = lambda: user
        return user

    return set_requester


@pytest.fixture
def make_object(db_session):
    """Insert a stored object directly, bypassing the API."""
    def factory(object_type: str = "page", **fields) -> StoredObject:
        number = next(_slug_counter)
        values = {
            "name": f"{object_type}-{number}",
            "title": f"{object_type.title()} {number}",
            "content": "",
            "status": "publish",
        }
        values.update(fields)
        obj = StoredObject(object_type=object_type, **values)
        db_session.add(obj)
        db_session.commit()
        db_session.refresh(obj)
        return obj

    return factory


@pytest.fixture
def make_controller(db_session):
    """Build a controller the way the router dependency does."""
    def factory(
        config: ResourceConfig = PAGES,
        requester: str = "admin",
        events: ObjectEventBus | None = None,
        app_settings: Settings | None = None,
    ) -> ObjectsController:
        context = PermissionContext(REQUESTERS[requester])
        gate = RolePermissionGate(context, make_object_lookup(db_session))
        adapter = StoredObjectAdapter(db_session, config.descriptor, author_id=context.user_id or None)
        return ObjectsController(
            config,
            adapter,
            SqlObjectQuery(db_session),
            gate,
            events=events,
            app_settings=app_settings or Settings(),
        )

    return factory


@pytest.fixture
def pages_config():
    return PAGES


@pytest.fixture
def posts_config():
    return POSTS
