import pytest
from rest_framework.test import APIClient
from home.models import Note
from Profile.models import UserProfile
from user.firebase import FirebaseUser


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    settings.MEDIA_ROOT = tmp_path / "media"
    settings.VERCEL_BLOB_TOKEN = None
    return settings.MEDIA_ROOT


@pytest.fixture
def alice():
    return FirebaseUser(uid="uid-alice", email="alice@example.com", display_name="Alice")


@pytest.fixture
def bob():
    return FirebaseUser(uid="uid-bob", email="bob@example.com", display_name="Bob")


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def client_as(api_client):
    def _login(identity):
        api_client.force_authenticate(user=identity)
        return api_client
    return _login


@pytest.fixture
def make_profile(db):
    def _make(identity, **fields):
        fields.setdefault("username", identity.default_username())
        return UserProfile.objects.create(firebase_uid=identity.uid, **fields)
    return _make


@pytest.fixture
def make_note(db):
    def _make(owner_uid="uid-alice", **fields):
        values = {
            "title": "Cell Biology",
            "filename": "1700000000000-cells.pdf",
            "uploader": "alice",
            "uploader_uid": owner_uid,
            "file_url": "/media/uploads/1700000000000-cells.pdf",
            "year": "2",
            "semester": "1",
            "subject": "Biology",
        }
        values.update(fields)
        return Note.objects.create(**values)
    return _make
