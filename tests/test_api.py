from fastapi.testclient import TestClient

from conftest import register
from learnhub import config
from learnhub.main import app
from learnhub.models import User


# --- auth ---

def test_register_never_creates_admin(client, session_factory):
    body = register(client, "mallory", isAdmin=True, is_admin=True)
    assert body["isAdmin"] is False
    assert "password" not in body

    session = session_factory()
    try:
        assert session.query(User).filter(User.username == "mallory").one().is_admin is False
    finally:
        session.close()


def test_register_logs_in(client):
    register(client, "newbie")
    response = client.get("/api/user")
    assert response.status_code == 200
    assert response.json()["username"] == "newbie"


def test_duplicate_username_is_400(client):
    register(client, "taken")
    response = client.post("/api/register", json={"username": "taken", "password": "password1"})
    assert response.status_code == 400
    assert response.json()["message"] == "Username already exists"


def test_register_validation_lists_fields(client):
    response = client.post("/api/register", json={"username": "ab", "password": "123"})
    assert response.status_code == 400
    fields = {e["field"] for e in response.json()["errors"]}
    assert fields == {"username", "password"}


def test_login_and_bad_credentials(client):
    register(client, "alice", password="wonderland")
    client.post("/api/logout")

    assert client.post("/api/login", json={"username": "alice", "password": "nope"}).status_code == 401
    assert client.post("/api/login", json={"username": "ghost", "password": "nope"}).status_code == 401

    response = client.post("/api/login", json={"username": "alice", "password": "wonderland"})
    assert response.status_code == 200
    assert response.json()["username"] == "alice"


def test_anonymous_user_endpoint_is_401(client):
    assert client.get("/api/user").status_code == 401
    assert client.post("/api/logout").status_code == 401


def test_logout_kills_server_side_session(user_client):
    cookie = user_client.cookies.get(config.SESSION_COOKIE_NAME)
    assert cookie

    response = user_client.post("/api/logout")
    assert response.status_code == 200
    assert response.json() == {"message": "Logged out successfully"}
    assert user_client.get("/api/user").status_code == 401

    # replaying the old cookie does not bring the session back
    replay = TestClient(app)
    response = replay.get("/api/user", headers={"Cookie": f"{config.SESSION_COOKIE_NAME}={cookie}"})
    assert response.status_code == 401


def test_profile_roundtrip(user_client):
    assert user_client.get("/api/profile").status_code == 404

    response = user_client.post("/api/profile", json={"fullName": "Stu Dent", "interest": "python"})
    assert response.status_code == 200
    body = response.json()
    assert body["hasCompletedProfile"] is True
    assert body["profile"]["fullName"] == "Stu Dent"

    user_client.post("/api/profile", json={"bio": "Likes snakes"})
    profile = user_client.get("/api/profile").json()
    assert profile["fullName"] == "Stu Dent"
    assert profile["bio"] == "Likes snakes"


# --- guards ---

def test_admin_guard_levels(client, admin_client):
    payload = {"name": "Security", "description": "Keeping systems safe", "imageUrl": "https://img/sec.png"}

    assert client.post("/api/categories", json=payload).status_code == 401
    register(client)
    assert client.post("/api/categories", json=payload).status_code == 403

    response = admin_client.post("/api/categories", json=payload)
    assert response.status_code == 201
    assert response.json()["slug"] == "security"


def test_guard_runs_before_body_validation(client):
    assert client.post("/api/categories", json={}).status_code == 401


# --- catalog ---

def test_course_crud_over_http(admin_client, client, category_id, course_payload):
    response = admin_client.post("/api/courses", json=course_payload(category_id))
    assert response.status_code == 201, response.text
    course = response.json()
    assert course["slug"] == "python-for-beginners"
    assert course["lessonCount"] == 0
    assert course["rating"] is None
    assert course["category"]["id"] == category_id
    assert course["instructor"]["username"] == "root-admin"
    assert course["learningObjectives"] == ["variables", "loops"]

    assert client.get(f"/api/courses/{course['id']}").status_code == 200
    assert client.get("/api/courses/slug/python-for-beginners").json()["id"] == course["id"]
    assert [c["id"] for c in client.get("/api/courses", params={"category": "web-development"}).json()] == [course["id"]]
    assert len(client.get("/api/categories/web-development/courses").json()) == 1

    duplicate = admin_client.post("/api/courses", json=course_payload(category_id, title="Python  for beginners"))
    assert duplicate.status_code == 409

    updated = admin_client.put(f"/api/courses/{course['id']}", json={"title": "Python From Scratch"})
    assert updated.json()["slug"] == "python-from-scratch"


def test_unknown_course_is_404(client):
    response = client.get("/api/courses/9999")
    assert response.status_code == 404
    assert response.json() == {"message": "Course not found"}
    assert client.get("/api/courses/9999/lessons").status_code == 404


def test_lessons_over_http_keep_count(admin_client, client, category_id, course_payload):
    course_id = admin_client.post("/api/courses", json=course_payload(category_id)).json()["id"]
    lesson = {"title": "Setup", "description": "Install the interpreter", "duration": "5 min"}

    ids = [admin_client.post(f"/api/courses/{course_id}/lessons", json=lesson).json()["id"] for _ in range(5)]
    assert client.get(f"/api/courses/{course_id}").json()["lessonCount"] == 5

    assert admin_client.delete(f"/api/courses/{course_id}/lessons/{ids[0]}").status_code == 200
    assert client.get(f"/api/courses/{course_id}").json()["lessonCount"] == 4
    assert [item["position"] for item in client.get(f"/api/courses/{course_id}/lessons").json()] == [2, 3, 4, 5]

    assert client.post(f"/api/courses/{course_id}/lessons", json=lesson).status_code == 401


def test_course_delete_needs_confirm(admin_client, user_client, category_id, course_payload):
    course_id = admin_client.post("/api/courses", json=course_payload(category_id)).json()["id"]
    user_client.post(f"/api/courses/{course_id}/enroll")

    response = admin_client.delete(f"/api/courses/{course_id}")
    assert response.status_code == 409
    assert response.json()["details"]["enrollments"] == 1

    assert admin_client.delete(f"/api/courses/{course_id}", params={"confirm": "true"}).status_code == 200
    assert user_client.get(f"/api/courses/{course_id}").status_code == 404
    assert user_client.get("/api/enrollments").json() == []


# --- enrollment and reviews ---

def test_enrollment_flow(admin_client, user_client, category_id, course_payload):
    course_id = admin_client.post("/api/courses", json=course_payload(category_id)).json()["id"]

    status = user_client.get(f"/api/courses/{course_id}/enrollment").json()
    assert status == {"enrolled": False, "enrollment": None}

    first = user_client.post(f"/api/courses/{course_id}/enroll")
    again = user_client.post(f"/api/courses/{course_id}/enroll")
    assert first.status_code == 201
    assert again.status_code == 200
    assert again.json()["id"] == first.json()["id"]

    done = user_client.put(f"/api/courses/{course_id}/progress", json={"progress": 100})
    assert done.json()["completed"] is True
    assert user_client.put(f"/api/courses/{course_id}/progress", json={"progress": 99}).json()["completed"] is False
    assert user_client.put(f"/api/courses/{course_id}/progress", json={"progress": 101}).status_code == 400

    mine = user_client.get("/api/enrollments").json()
    assert [e["course"]["id"] for e in mine] == [course_id]
    assert mine[0]["progress"] == 99


def test_review_requires_enrollment(admin_client, user_client, category_id, course_payload):
    course_id = admin_client.post("/api/courses", json=course_payload(category_id)).json()["id"]
    review = {"title": "Great", "content": "Clear explanations throughout", "rating": 5}

    assert user_client.post(f"/api/courses/{course_id}/reviews", json=review).status_code == 403

    user_client.post(f"/api/courses/{course_id}/enroll")
    response = user_client.post(f"/api/courses/{course_id}/reviews", json=review)
    assert response.status_code == 201
    assert response.json()["user"]["username"] == "student"

    course = user_client.get(f"/api/courses/{course_id}").json()
    assert course["rating"] == 5.0
    assert course["reviewCount"] == 1

    listed = user_client.get(f"/api/courses/{course_id}/reviews").json()
    assert [r["title"] for r in listed] == ["Great"]

    review_id = response.json()["id"]
    assert user_client.put(f"/api/reviews/{review_id}", json={"rating": 3}).json()["rating"] == 3
    assert user_client.get(f"/api/courses/{course_id}").json()["rating"] == 3.0
    assert user_client.delete(f"/api/reviews/{review_id}").status_code == 200
    assert user_client.get(f"/api/courses/{course_id}").json()["reviewCount"] == 0


def test_review_rating_range(admin_client, user_client, category_id, course_payload):
    course_id = admin_client.post("/api/courses", json=course_payload(category_id)).json()["id"]
    user_client.post(f"/api/courses/{course_id}/enroll")
    response = user_client.post(
        f"/api/courses/{course_id}/reviews",
        json={"title": "Meh", "content": "Not my favourite course", "rating": 6},
    )
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "rating"


# --- contact ---

def test_contact_submission_and_triage(client, admin_client):
    response = client.post(
        "/api/contact",
        json={
            "name": "Dana",
            "email": "dana@example.com",
            "telegramUsername": "@dana",
            "purpose": "share_course",
            "message": "I would like to share my course",
        },
    )
    assert response.status_code == 201
    submission = response.json()
    assert submission["isRead"] is False

    assert client.get("/api/contact").status_code == 401
    assert [s["id"] for s in admin_client.get("/api/contact").json()] == [submission["id"]]

    read = admin_client.put(f"/api/contact/{submission['id']}/read")
    assert read.json()["isRead"] is True
    assert admin_client.get(f"/api/contact/{submission['id']}").json()["isRead"] is True

    assert admin_client.delete(f"/api/contact/{submission['id']}").status_code == 200
    assert admin_client.get(f"/api/contact/{submission['id']}").status_code == 404


def test_contact_validation(client):
    response = client.post(
        "/api/contact",
        json={"name": "D", "email": "not-an-email", "purpose": "spam", "message": "short"},
    )
    assert response.status_code == 400
    fields = {e["field"] for e in response.json()["errors"]}
    assert fields == {"name", "email", "purpose", "message"}


# --- admin ---

def test_dashboard_stats(admin_client, user_client, category_id, course_payload):
    course_id = admin_client.post("/api/courses", json=course_payload(category_id)).json()["id"]
    user_client.post(f"/api/courses/{course_id}/enroll")

    assert user_client.get("/api/admin/dashboard/stats").status_code == 403
    stats = admin_client.get("/api/admin/dashboard/stats").json()
    assert stats["users"] == 2
    assert stats["courses"] == 1
    assert stats["categories"] == 1
    assert stats["enrollments"] == 1
    assert stats["completedEnrollments"] == 0
    assert stats["unreadContacts"] == 0

    assert admin_client.get("/api/admin/courses/count").json() == 1
    assert admin_client.get("/api/admin/widgets/count").status_code == 404


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok", "database": "ok"}
