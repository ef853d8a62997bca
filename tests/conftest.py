"""
Test fixtures for the SKYPATH backend.

Provides app, client, student and admin fixtures. Firestore is replaced by an
in-memory fake and S3 by a MagicMock, both injected through create_app().
"""

from __future__ import annotations

import io
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from fakes import FakeFirestore  # noqa: E402

TEST_SECRET = "test-secret-key-for-skypath-0123456789abcdef"
BUCKET = "test-bucket"


@pytest.fixture
def fake_db():
    return FakeFirestore()


@pytest.fixture
def s3():
    client = MagicMock()
    client.generate_presigned_url.return_value = "https://signed.example.com/video.mp4"
    return client


@pytest.fixture
def app(fake_db, s3):
    from skypath.app import create_app

    return create_app({
        "TESTING": True,
        "APP_ENV": "testing",
        "JWT_SECRET": TEST_SECRET,
        "S3_BUCKET_NAME": BUCKET,
        "S3_ENDPOINT_URL": None,
        "AWS_REGION": "ap-northeast-2",
    }, db=fake_db, s3=s3)


@pytest.fixture
def client(app):
    """Unauthenticated test client."""
    return app.test_client()


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def register(client, email="student@test.com", password="Studentpass1", name="학생", **extra):
    body = {"email": email, "password": password, "name": name}
    body.update(extra)
    return client.post("/api/auth/register", json=body)


def login(client, email, password):
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()["token"]


@pytest.fixture
def student(client):
    """Registered student (grade 10). Returns {'token', 'user'}."""
    resp = register(client, grade="10", school="서울고")
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


@pytest.fixture
def admin_token(app, client):
    from skypath.commands import create_or_promote_admin

    with app.app_context():
        create_or_promote_admin("admin@test.com", "Adminpass1")
    return login(client, "admin@test.com", "Adminpass1")


def set_role(fake_db, email, role):
    user_id = fake_db.docs("user_emails")[email]["userId"]
    fake_db.docs("users")[user_id]["role"] = role


def seed_video(fake_db, **fields):
    """Insert a video document directly and return its id."""
    videos = fake_db.store.setdefault("videos", {})
    video_id = fields.pop("id", f"video{len(videos) + 1}")
    doc = {
        "title": "기본 강의",
        "instructor": "김강사",
        "duration": "10:00",
        "provider": "EBS",
        "grade": "10",
        "subject": "수학",
        "description": "",
        "thumbnail": "",
        "videoUrl": f"https://{BUCKET}.s3.ap-northeast-2.amazonaws.com/videos/{video_id}.mp4",
        "videoKey": f"videos/{video_id}.mp4",
        "views": 0,
        "likes": 0,
        "uploadDate": "2025-01-01T00:00:00",
        "status": "active",
        "tags": [],
    }
    doc.update(fields)
    videos[video_id] = doc
    return video_id


def video_upload_form(**overrides):
    data = {
        "video": (io.BytesIO(b"\x00\x00\x00\x18ftypmp42fake-video-bytes"), "lecture.mp4"),
        "title": "미적분 기초",
        "instructor": "이강사",
        "duration": "12:30",
        "provider": "EBS",
        "grade": "11",
        "subject": "수학",
        "description": "극한과 미분",
    }
    data.update(overrides)
    return {k: v for k, v in data.items() if v is not None}
