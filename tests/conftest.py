import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from learnhub import catalog
from learnhub.database import get_db
from learnhub.main import app
from learnhub.models import Base, User
from learnhub.schemas import CategoryCreate, CourseCreate
from learnhub.security import hash_password
from learnhub.users import provision_admin

ADMIN_USERNAME = "root-admin"
ADMIN_PASSWORD = "admin-pass-123"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


# ---------- repository-level factories ----------

@pytest.fixture
def make_user(db):
    def _make(username="student", is_admin=False, password="password1"):
        user = User(username=username, password=hash_password(password), is_admin=is_admin)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_category(db):
    def _make(name="Web Development"):
        return catalog.create_category(
            db,
            CategoryCreate(name=name, description="Everything about building for the web", image_url="https://img/web.png"),
        )

    return _make


@pytest.fixture
def make_course(db, make_user, make_category):
    state = {}

    def _make(title="Python for Beginners", category=None, instructor=None):
        if category is None:
            category = state.get("category") or make_category()
            state["category"] = category
        if instructor is None:
            instructor = state.get("instructor") or make_user("instructor", is_admin=True)
            state["instructor"] = instructor
        return catalog.create_course(
            db,
            CourseCreate(
                title=title,
                description="A thorough introduction for new programmers",
                image_url="https://img/course.png",
                category_id=category.id,
                duration="6 hours",
            ),
            instructor_id=instructor.id,
        )

    return _make


# ---------- HTTP clients ----------

@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def register(client, username="student", password="password1", **extra):
    response = client.post("/api/register", json={"username": username, "password": password, **extra})
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def user_client(client):
    register(client)
    return client


@pytest.fixture
def admin_client(client, session_factory):
    session = session_factory()
    try:
        provision_admin(session, ADMIN_USERNAME, password=ADMIN_PASSWORD)
    finally:
        session.close()

    admin = TestClient(app)
    response = admin.post("/api/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    assert response.status_code == 200, response.text
    return admin


@pytest.fixture
def course_payload():
    def _payload(category_id, title="Python for Beginners"):
        return {
            "title": title,
            "description": "A thorough introduction for new programmers",
            "imageUrl": "https://img/course.png",
            "categoryId": category_id,
            "duration": "6 hours",
            "price": 19.99,
            "learningObjectives": ["variables", "loops"],
        }

    return _payload


@pytest.fixture
def category_id(admin_client):
    response = admin_client.post(
        "/api/categories",
        json={"name": "Web Development", "description": "Everything about building for the web", "imageUrl": "https://img/web.png"},
    )
    assert response.status_code == 201, response.text
    return response.json()["id"]
