import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from recipehub.main import app, limiter
from recipehub.db import Base, get_db
from recipehub.models import User, Recipe, RecipeIngredient, RecipeDietTag

# --- Test Database Setup ---

SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

# check_same_thread is needed because TestClient runs the app in another thread.
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool  # one shared connection so every session sees the same in-memory db
)


@event.listens_for(engine, "connect")
def _enable_sqlite_fks(dbapi_connection, connection_record):
    # Planner replace relies on FK enforcement to reject unknown recipes
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True, scope="session")
def _disable_rate_limit():
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    """Test client with DB override."""
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def db_session():
    """Direct database session for setup."""
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def user(db_session):
    u = User(id="00000000-0000-0000-0000-000000000001", email="cook@example.com", full_name="Test Cook")
    db_session.add(u)
    db_session.commit()
    db_session.refresh(u)
    return u


@pytest.fixture
def auth_headers(user):
    return {"X-User-Id": user.id}


@pytest.fixture
def make_recipe(db_session):
    """Factory inserting an approved recipe with ingredients and diet tags."""

    def _make(title="Test Recipe", servings=2, diet=(), ingredients=(), is_approved=True, **extra):
        recipe = Recipe(title=title, servings=servings, is_approved=is_approved, **extra)
        recipe.ingredients = [
            RecipeIngredient(position=i, name=name, quantity=qty, unit=unit)
            for i, (name, qty, unit) in enumerate(ingredients)
        ]
        recipe.diet_tags = [RecipeDietTag(tag=t) for t in diet]
        db_session.add(recipe)
        db_session.commit()
        db_session.refresh(recipe)
        return recipe

    return _make


import fakeredis
import fakeredis.aioredis
from recipehub.infra import redis_client


@pytest.fixture(autouse=True)
def mock_redis(monkeypatch):
    server = fakeredis.FakeServer()
    async_redis = fakeredis.aioredis.FakeRedis(server=server, decode_responses=True)

    # Force the client into the infra module
    redis_client._redis_async = async_redis

    yield async_redis

    redis_client._redis_async = None
