"""Integration tests for the HTTP API.

Drives the public taker endpoints and the admin endpoints end to end through
the FastAPI test client.
"""

import pytest


@pytest.fixture
def created_survey(api_client, admin_headers, payload_factory):
    """Active survey created through the admin API."""
    response = api_client.post("/admin/surveys", json=payload_factory(), headers=admin_headers)
    assert response.status_code == 201
    return response.json()


def submit(api_client, survey, *values):
    answers = {q["id"]: value for q, value in zip(survey["questions"], values)}
    return api_client.post(f"/survey/{survey['slug']}/responses", json={"answers": answers})


class TestServiceEndpoints:
    """Tests for root and health endpoints."""

    def test_root(self, api_client):
        response = api_client.get("/")
        assert response.status_code == 200
        assert response.json()["service"] == "Survey Studio"

    def test_health(self, api_client):
        response = api_client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "database": "connected"}

    def test_request_id_echoed(self, api_client):
        response = api_client.get("/health", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"


class TestPublicSurvey:
    """Tests for the taker endpoints."""

    def test_get_active_survey(self, api_client, created_survey):
        response = api_client.get("/survey/team-feedback")

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Team Feedback"
        assert [q["order_index"] for q in body["questions"]] == [0, 1, 2]
        assert body["questions"][1]["choices"] == ["Red", "Blue", "Green"]

    def test_missing_survey_404(self, api_client):
        response = api_client.get("/survey/nope")
        assert response.status_code == 404

    def test_draft_survey_404(self, api_client, admin_headers, created_survey):
        api_client.patch(
            f"/admin/surveys/{created_survey['id']}/status",
            json={"status": "draft"},
            headers=admin_headers,
        )

        assert api_client.get("/survey/team-feedback").status_code == 404

    def test_submit_response(self, api_client, created_survey):
        response = submit(api_client, created_survey, "Ada", "Blue", "All good")

        assert response.status_code == 201
        body = response.json()
        assert body["survey_id"] == created_survey["id"]
        assert body["answer_count"] == 3
        assert body["response_id"]

    def test_submit_missing_required(self, api_client, created_survey):
        response = submit(api_client, created_survey, "Ada")

        assert response.status_code == 422
        body = response.json()
        assert body["missing_questions"] == ["Favorite color?"]
        assert "Favorite color?" in body["message"]

    def test_submit_to_closed_survey(self, api_client, admin_headers, created_survey):
        api_client.patch(
            f"/admin/surveys/{created_survey['id']}/status",
            json={"status": "closed"},
            headers=admin_headers,
        )

        response = submit(api_client, created_survey, "Ada", "Blue")
        assert response.status_code == 404

    def test_list_answer_for_text_question_rejected(self, api_client, created_survey):
        response = submit(api_client, created_survey, ["Ada", "Lovelace"], "Blue")
        assert response.status_code == 422


class TestAdminAuth:
    """Tests for admin sign-in and route protection."""

    def test_admin_routes_require_session(self, api_client):
        response = api_client.get("/admin/surveys")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_invalid_token_rejected(self, api_client):
        response = api_client.get(
            "/admin/surveys", headers={"Authorization": "Bearer not-a-token"}
        )
        assert response.status_code == 401

    def test_login_sets_cookie(self, api_client):
        response = api_client.post(
            "/admin/login",
            json={"email": "admin@example.com", "password": "correct-horse"},
        )

        assert response.status_code == 200
        assert response.json()["token_type"] == "bearer"
        assert "admin_session" in response.cookies

        # Cookie alone authenticates
        assert api_client.get("/admin/surveys").status_code == 200

    def test_login_wrong_password(self, api_client):
        response = api_client.post(
            "/admin/login",
            json={"email": "admin@example.com", "password": "wrong-horse"},
        )
        assert response.status_code == 401

    def test_login_malformed(self, api_client):
        response = api_client.post("/admin/login", json={"email": "nope", "password": "1"})

        assert response.status_code == 422
        assert set(response.json()["violations"]) == {"email", "password"}

    def test_logout(self, api_client, admin_headers):
        response = api_client.post("/admin/logout", headers=admin_headers)

        assert response.status_code == 200
        assert api_client.get("/admin/surveys", headers=admin_headers).status_code == 401


class TestAdminSurveys:
    """Tests for survey management endpoints."""

    def test_create_survey(self, created_survey):
        assert created_survey["slug"] == "team-feedback"
        assert created_survey["created_by"] == "admin@example.com"
        assert len(created_survey["questions"]) == 3

    def test_create_invalid_survey(self, api_client, admin_headers, payload_factory):
        payload = payload_factory(questions=[{
            "question_text": "Pick",
            "question_type": "multiple_choice",
            "options": ["Only"],
        }])

        response = api_client.post("/admin/surveys", json=payload, headers=admin_headers)

        assert response.status_code == 422
        assert response.json()["violations"] == {
            "questions.0.options": ["Multiple choice questions must have at least 2 options"],
        }

    def test_create_duplicate_slug(self, api_client, admin_headers, created_survey, payload_factory):
        response = api_client.post("/admin/surveys", json=payload_factory(), headers=admin_headers)
        assert response.status_code == 503

    def test_list_and_get(self, api_client, admin_headers, created_survey):
        listed = api_client.get("/admin/surveys", headers=admin_headers).json()
        assert [s["id"] for s in listed] == [created_survey["id"]]

        detail = api_client.get(f"/admin/surveys/{created_survey['id']}", headers=admin_headers)
        assert detail.status_code == 200
        assert detail.json()["questions"][0]["question_text"] == "What is your name?"

    def test_get_missing(self, api_client, admin_headers):
        response = api_client.get("/admin/surveys/missing", headers=admin_headers)
        assert response.status_code == 404

    def test_update_survey(self, api_client, admin_headers, created_survey, payload_factory):
        payload = payload_factory(title="Renamed", questions=[
            {"question_text": "New question", "question_type": "short_answer"},
        ])

        response = api_client.put(
            f"/admin/surveys/{created_survey['id']}", json=payload, headers=admin_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Renamed"
        assert [q["question_text"] for q in body["questions"]] == ["New question"]

    def test_invalid_status(self, api_client, admin_headers, created_survey):
        response = api_client.patch(
            f"/admin/surveys/{created_survey['id']}/status",
            json={"status": "archived"},
            headers=admin_headers,
        )
        assert response.status_code == 422

    def test_delete_survey(self, api_client, admin_headers, created_survey):
        submit(api_client, created_survey, "Ada", "Blue")

        response = api_client.delete(
            f"/admin/surveys/{created_survey['id']}", headers=admin_headers
        )

        assert response.status_code == 204
        assert api_client.get("/survey/team-feedback").status_code == 404
        assert api_client.get(
            f"/admin/surveys/{created_survey['id']}", headers=admin_headers
        ).status_code == 404


class TestResults:
    """Tests for responses, analytics and CSV export."""

    def test_list_responses(self, api_client, admin_headers, created_survey):
        submit(api_client, created_survey, "Ada", "Blue")

        response = api_client.get(
            f"/admin/surveys/{created_survey['id']}/responses", headers=admin_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert len(body) == 1
        displayed = {a["question_id"]: a["display_value"] for a in body[0]["answers"]}
        questions = created_survey["questions"]
        assert displayed == {questions[0]["id"]: "Ada", questions[1]["id"]: "Blue"}

    def test_analytics(self, api_client, admin_headers, created_survey):
        submit(api_client, created_survey, "Ada", "Blue")
        submit(api_client, created_survey, "Grace", "Blue")
        submit(api_client, created_survey, "Linus", "Red", "More coffee")

        response = api_client.get(
            f"/admin/surveys/{created_survey['id']}/analytics", headers=admin_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["total_responses"] == 3
        assert body["completion_rate"] == 100
        assert len(body["responses_by_day"]) == 7
        assert body["responses_by_day"][-1]["responses"] == 3

        name, color, extra = body["question_analytics"]
        assert {e["answer"]: e["count"] for e in color["chart_data"]} == {"Blue": 2, "Red": 1}
        assert sorted(name["text_answers"]) == ["Ada", "Grace", "Linus"]
        assert extra["text_answers"] == ["More coffee"]

    def test_export_csv(self, api_client, admin_headers, created_survey):
        submit(api_client, created_survey, 'He said "hi"', "Blue")

        response = api_client.get(
            f"/admin/surveys/{created_survey['id']}/export.csv", headers=admin_headers
        )

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert 'filename="team-feedback-responses.csv"' in response.headers["content-disposition"]
        assert response.text.splitlines() == [
            '"What is your name?","Favorite color?","Anything else?"',
            '"He said ""hi""","Blue",""',
        ]

    def test_export_csv_with_metadata(self, api_client, admin_headers, created_survey):
        submit(api_client, created_survey, "Ada", "Blue")

        response = api_client.get(
            f"/admin/surveys/{created_survey['id']}/export.csv",
            params={"include_metadata": "true"},
            headers=admin_headers,
        )

        header = response.text.splitlines()[0]
        assert header.startswith('"Response ID","Submitted At",')


class TestSurveyDefinitions:
    """Tests for listing and importing YAML survey definitions."""

    @pytest.fixture
    def definitions_dir(self, api_client, tmp_path):
        """Point the loader at a temporary directory with one definition."""
        from survey_studio.main import app
        from survey_studio.services.survey_loader import SurveyLoader, get_survey_loader

        (tmp_path / "onboarding.yaml").write_text(
            "title: Onboarding Check-in\n"
            "status: active\n"
            "questions:\n"
            "  - question_text: How was your first week?\n"
            "    question_type: likert_scale\n"
            "    required: true\n",
            encoding="utf-8",
        )
        (tmp_path / "broken.yaml").write_text(
            "title: Broken\n"
            "questions: []\n",
            encoding="utf-8",
        )

        loader = SurveyLoader(str(tmp_path))
        app.dependency_overrides[get_survey_loader] = lambda: loader
        yield tmp_path
        loader.clear_cache()

    def test_list_definitions(self, api_client, admin_headers, definitions_dir):
        response = api_client.get("/admin/definitions", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"definitions": ["broken", "onboarding"]}

    def test_definitions_require_session(self, api_client, definitions_dir):
        assert api_client.get("/admin/definitions").status_code == 401
        assert api_client.post("/admin/definitions/onboarding/import").status_code == 401

    def test_import_definition(self, api_client, admin_headers, definitions_dir):
        response = api_client.post("/admin/definitions/onboarding/import", headers=admin_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["slug"] == "onboarding-check-in"
        assert body["created_by"] == "admin@example.com"
        assert body["questions"][0]["question_type"] == "likert_scale"

        # Imported surveys are immediately answerable when active
        assert api_client.get("/survey/onboarding-check-in").status_code == 200

    def test_import_missing_definition(self, api_client, admin_headers, definitions_dir):
        response = api_client.post("/admin/definitions/nope/import", headers=admin_headers)
        assert response.status_code == 404

    def test_import_invalid_definition(self, api_client, admin_headers, definitions_dir):
        response = api_client.post("/admin/definitions/broken/import", headers=admin_headers)

        assert response.status_code == 422
        assert response.json()["violations"]["questions"] == ["At least one question is required"]
