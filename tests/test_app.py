"""
Tests for the Flask routes, using the test client.
"""

import pytest

import app as app_module
from agents import LessonOrchestrator
from errors import INVALID_WORD_MESSAGE, TransportError
from state import LessonSession


@pytest.fixture
def client(monkeypatch):
    """Test client with a fresh state container."""
    session = LessonSession()
    monkeypatch.setattr(app_module, "lesson_session", session)
    monkeypatch.setattr(app_module, "orchestrator", LessonOrchestrator(session))
    app_module.app.config["TESTING"] = True
    return app_module.app.test_client()


class TestPages:
    """Test cases for the HTML page."""

    def test_health(self, client):
        assert client.get("/health").get_json() == {"ok": True}

    def test_idle_page(self, client):
        resp = client.get("/")
        html = resp.get_data(as_text=True)

        assert resp.status_code == 200
        assert 'name="word"' in html
        assert "Generar Lección" in html
        assert "Prompts de Imagen" not in html

    def test_generate_form_redirects_to_lesson(self, client):
        resp = client.post("/generate", data={"word": "猫"})

        assert resp.status_code == 302

        html = client.get("/").get_data(as_text=True)
        assert "<h3>Palabra a estudiar:</h3>" in html
        assert "Prompts de Imagen" in html

    def test_blank_word_shows_error(self, client, fake_service):
        calls = fake_service()

        client.post("/generate", data={"word": "   "})
        html = client.get("/").get_data(as_text=True)

        assert calls == []
        assert INVALID_WORD_MESSAGE in html

    def test_prompts_tab(self, client, fake_service):
        fake_service(text="Body\n--- PROMPTS ---\nPROMPT: <b>cat</b>")
        client.post("/generate", data={"word": "猫"})

        resp = client.get("/tab/prompts")
        html = client.get("/").get_data(as_text=True)

        assert resp.status_code == 302
        assert "&lt;b&gt;cat&lt;/b&gt;" in html
        assert "<p>Body</p>" not in html

    def test_unknown_tab(self, client):
        assert client.get("/tab/images").status_code == 404

    def test_model_markup_is_escaped(self, client, fake_service):
        fake_service(text="<script>alert(1)</script>\n--- PROMPTS ---\nPROMPT: X")
        client.post("/generate", data={"word": "猫"})

        html = client.get("/").get_data(as_text=True)

        assert "<script>alert(1)</script>" not in html
        assert "<p>&lt;script&gt;alert(1)&lt;/script&gt;</p>" in html

    def test_only_sources_with_uri_are_listed(self, client, fake_service):
        from schemas import GroundingSource

        fake_service(
            text="Body\n--- PROMPTS ---\nPROMPT: X",
            sources=[
                GroundingSource(uri="https://a.example", title="Fuente A"),
                GroundingSource(title="Sin enlace"),
                GroundingSource(uri="https://b.example"),
            ],
        )
        client.post("/generate", data={"word": "猫"})

        html = client.get("/").get_data(as_text=True)

        assert "Fuentes (Google Search):" in html
        assert 'href="https://a.example"' in html
        assert "Fuente A" in html
        assert "Sin enlace" not in html
        assert ">https://b.example</a>" in html

    def test_blank_word_keeps_previous_lesson(self, client, fake_service):
        fake_service(text="Lección previa\n--- PROMPTS ---\nPROMPT: X")
        client.post("/generate", data={"word": "猫"})

        client.post("/generate", data={"word": "  "})
        html = client.get("/").get_data(as_text=True)

        assert INVALID_WORD_MESSAGE in html
        assert "<p>Lección previa</p>" in html
        assert "Prompts de Imagen" in html

    def test_blank_word_from_idle_hides_tabs(self, client):
        client.post("/generate", data={"word": ""})
        html = client.get("/").get_data(as_text=True)

        assert INVALID_WORD_MESSAGE in html
        assert "Prompts de Imagen" not in html

    def test_script_source_is_not_linked(self, client, fake_service):
        from schemas import GroundingSource

        fake_service(
            text="Body\n--- PROMPTS ---\nPROMPT: X",
            sources=[GroundingSource(uri="javascript:alert(1)", title="Trampa")],
        )
        client.post("/generate", data={"word": "猫"})

        html = client.get("/").get_data(as_text=True)

        assert "javascript:" not in html
        assert "Trampa" not in html
        assert "Fuentes (Google Search):" not in html


class TestApi:
    """Test cases for the JSON API."""

    def test_lesson_success(self, client):
        resp = client.post("/api/lesson", json={"word": "猫"})
        data = resp.get_json()

        assert resp.status_code == 200
        assert data["state"] == "success"
        assert data["word"] == "猫"
        assert len(data["prompts"]) == 3
        assert data["lesson_html"].startswith("<h3>")
        assert data["sources"] == []

    def test_lesson_minimal_reply(self, client, fake_service):
        fake_service(text="Body\n--- PROMPTS ---\nPROMPT: X")

        data = client.post("/api/lesson", json={"word": "猫"}).get_json()

        assert data["lesson"] == "Body"
        assert data["prompts"] == ["X"]
        assert data["sources"] == []

    @pytest.mark.parametrize("body", [{"word": "  "}, {}, None, ["猫"], "猫", 5, {"word": 5}])
    def test_blank_word(self, client, fake_service, body):
        calls = fake_service()

        resp = client.post("/api/lesson", json=body)

        assert resp.status_code == 400
        assert resp.get_json()["error"] == INVALID_WORD_MESSAGE
        assert calls == []

    def test_missing_separator(self, client, fake_service):
        fake_service(text="Sin separador")

        resp = client.post("/api/lesson", json={"word": "猫"})

        assert resp.status_code == 422
        assert resp.get_json()["state"] == "error"
        assert resp.get_json()["lesson"] == ""

    def test_transport_error(self, client, fake_service):
        fake_service(error=TransportError("quota exceeded"))

        resp = client.post("/api/lesson", json={"word": "猫"})

        assert resp.status_code == 502
        assert resp.get_json()["error"] == "quota exceeded"

    def test_state(self, client):
        assert client.get("/api/state").get_json()["state"] == "idle"

        client.post("/api/lesson", json={"word": "猫"})

        data = client.get("/api/state").get_json()
        assert data["state"] == "success"
        assert data["active_tab"] == "lesson"
