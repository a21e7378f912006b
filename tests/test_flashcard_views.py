from unittest.mock import patch
import pytest
from core.exceptions import ConfigError, GenerationFailed
from flashcards.generator import FLASHCARD_ERROR

pytestmark = pytest.mark.django_db

CARDS = [{"question": "What is ATP?", "answer": "The cell's energy currency."}]


def test_generate_from_pasted_content(client_as, alice):
    with patch("flashcards.views.generate_flashcards", return_value=CARDS) as generate:
        response = client_as(alice).post(
            "/api/flashcards/generate/", {"noteContent": "ATP stores energy."}, format="json"
        )
    assert response.status_code == 200
    assert response.json() == CARDS
    generate.assert_called_once_with("ATP stores energy.")


def test_generate_from_stored_note(client_as, alice, make_note):
    note = make_note(title="Energy")
    with patch("flashcards.views.generate_flashcards", return_value=CARDS) as generate:
        response = client_as(alice).post("/api/flashcards/generate/", {"noteId": note.pk}, format="json")
    assert response.status_code == 200
    assert '"Energy"' in generate.call_args.args[0]


@pytest.mark.parametrize("body", [{}, {"noteContent": ""}, {"noteContent": 42}, {"noteContent": None}])
def test_generate_requires_string_content(client_as, alice, body):
    with patch("flashcards.views.generate_flashcards") as generate:
        response = client_as(alice).post("/api/flashcards/generate/", body, format="json")
    assert response.status_code == 400
    assert response.json() == {"error": "noteContent is required and must be a string"}
    generate.assert_not_called()


def test_generate_for_missing_note(client_as, alice):
    response = client_as(alice).post("/api/flashcards/generate/", {"noteId": 9999}, format="json")
    assert response.status_code == 404


def test_generation_failure_is_a_generic_500(client_as, alice):
    with patch("flashcards.views.generate_flashcards", side_effect=GenerationFailed(FLASHCARD_ERROR)):
        response = client_as(alice).post("/api/flashcards/generate/", {"noteContent": "x"}, format="json")
    assert response.status_code == 500
    assert response.json() == {"error": FLASHCARD_ERROR}


def test_missing_api_key_is_a_500(client_as, alice, settings):
    settings.GOOGLE_API_KEY = None
    with patch("flashcards.generator.genai.Client") as client_cls:
        response = client_as(alice).post("/api/flashcards/generate/", {"noteContent": "x"}, format="json")
    assert response.status_code == 500
    assert "GOOGLE_API_KEY" in response.json()["error"]
    client_cls.assert_not_called()


def test_generate_requires_auth(api_client):
    response = api_client.post("/api/flashcards/generate/", {"noteContent": "x"}, format="json")
    assert response.status_code == 401


def test_ask_question(client_as, alice, make_note):
    note = make_note()
    with patch("flashcards.views.answer_question", return_value="Mitochondria.") as answer:
        response = client_as(alice).post(
            "/api/flashcards/ask/", {"noteId": note.pk, "question": "Powerhouse?"}, format="json"
        )
    assert response.json() == {"answer": "Mitochondria."}
    assert answer.call_args.args[1] == "Powerhouse?"


def test_ask_needs_question(client_as, alice, make_note):
    note = make_note()
    response = client_as(alice).post("/api/flashcards/ask/", {"noteId": note.pk}, format="json")
    assert response.status_code == 400
    assert "error" in response.json()


def test_ask_failure_is_a_500(client_as, alice, make_note):
    note = make_note()
    with patch("flashcards.views.answer_question", side_effect=ConfigError("GOOGLE_API_KEY environment variable is not set")):
        response = client_as(alice).post(
            "/api/flashcards/ask/", {"noteId": note.pk, "question": "Why?"}, format="json"
        )
    assert response.status_code == 500


def test_note_content_falls_back_to_placeholder(client_as, alice, make_note):
    note = make_note(title="Optics")
    response = client_as(alice).get(f"/api/flashcards/note/{note.pk}/content/")
    assert response.status_code == 200
    assert '"Optics"' in response.json()["content"]


def test_note_content_for_missing_note(client_as, alice):
    response = client_as(alice).get("/api/flashcards/note/404/content/")
    assert response.status_code == 404
    assert response.json() == {"error": "Note not found"}
