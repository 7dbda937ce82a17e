"""Unit tests for survey loader service.

Tests YAML loading, caching, validation and import.
"""

import pytest
import tempfile
from pathlib import Path

from survey_studio.errors import NotFoundError, PersistenceError, ValidationError
from survey_studio.services.survey_loader import SurveyLoader

VALID_SURVEY_YAML = """
title: Onboarding Check-in
description: How was your first week?
status: active
questions:
  - question_text: How clear were your first tasks?
    question_type: likert_scale
    required: true
  - question_text: Which team did you join?
    question_type: multiple_choice
    required: true
    options:
      - Platform
      - Product
  - question_text: Anything we should change?
    question_type: long_answer
"""


class TestSurveyLoader:
    """Tests for SurveyLoader class."""

    @pytest.fixture
    def temp_surveys_dir(self):
        """Create temporary directory for test surveys."""
        with tempfile.TemporaryDirectory() as tmpdir:
            yield tmpdir

    @pytest.fixture
    def loader(self, temp_surveys_dir):
        path = Path(temp_surveys_dir) / "onboarding.yaml"
        path.write_text(VALID_SURVEY_YAML, encoding="utf-8")
        return SurveyLoader(temp_surveys_dir)

    def test_load_valid_definition(self, loader):
        """Test loading a valid survey definition."""
        definition = loader.load_definition("onboarding")

        assert definition.title == "Onboarding Check-in"
        assert definition.status.value == "active"
        assert len(definition.questions) == 3
        assert definition.questions[1].options == ["Platform", "Product"]

    def test_slug_generated_from_title(self, loader):
        assert loader.load_definition("onboarding").slug == "onboarding-check-in"

    def test_explicit_slug_kept(self, temp_surveys_dir):
        path = Path(temp_surveys_dir) / "custom.yaml"
        path.write_text(VALID_SURVEY_YAML + "slug: first-week\n", encoding="utf-8")

        definition = SurveyLoader(temp_surveys_dir).load_definition("custom")
        assert definition.slug == "first-week"

    def test_missing_file(self, loader):
        with pytest.raises(NotFoundError, match="nonexistent"):
            loader.load_definition("nonexistent")

    @pytest.mark.parametrize("name", ["../secrets", "a b", ""])
    def test_unsafe_names_rejected(self, loader, name):
        with pytest.raises(NotFoundError):
            loader.load_definition(name)

    def test_invalid_yaml(self, temp_surveys_dir):
        path = Path(temp_surveys_dir) / "broken.yaml"
        path.write_text("title: [unclosed\n", encoding="utf-8")

        with pytest.raises(ValidationError, match="Invalid YAML"):
            SurveyLoader(temp_surveys_dir).load_definition("broken")

    def test_non_mapping_yaml(self, temp_surveys_dir):
        path = Path(temp_surveys_dir) / "list.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")

        with pytest.raises(ValidationError, match="must be a mapping"):
            SurveyLoader(temp_surveys_dir).load_definition("list")

    def test_definition_failing_rules(self, temp_surveys_dir):
        """Test that definitions get the same checks as the editor."""
        path = Path(temp_surveys_dir) / "bad.yaml"
        path.write_text(
            "title: Bad\n"
            "questions:\n"
            "  - question_text: Pick\n"
            "    question_type: multiple_choice\n"
            "    options: [Only]\n",
            encoding="utf-8",
        )

        with pytest.raises(ValidationError) as exc_info:
            SurveyLoader(temp_surveys_dir).load_definition("bad")

        assert "questions.0.options" in exc_info.value.violations

    def test_definitions_are_cached(self, loader, temp_surveys_dir):
        first = loader.load_definition("onboarding")
        (Path(temp_surveys_dir) / "onboarding.yaml").unlink()

        assert loader.load_definition("onboarding") is first

        loader.clear_cache()
        with pytest.raises(NotFoundError):
            loader.load_definition("onboarding")

    def test_list_definitions(self, loader, temp_surveys_dir):
        (Path(temp_surveys_dir) / "another.yaml").write_text("title: x\n", encoding="utf-8")
        (Path(temp_surveys_dir) / "notes.txt").write_text("ignored", encoding="utf-8")

        assert loader.list_definitions() == ["another", "onboarding"]

    def test_list_definitions_missing_dir(self, temp_surveys_dir):
        loader = SurveyLoader(str(Path(temp_surveys_dir) / "missing"))
        assert loader.list_definitions() == []

    def test_import_definition(self, loader, admin_service):
        survey = loader.import_definition(admin_service, "onboarding", created_by="ops@example.com")

        assert survey.slug == "onboarding-check-in"
        assert survey.created_by == "ops@example.com"
        assert [q.order_index for q in survey.questions] == [0, 1, 2]

    def test_import_twice_rejected(self, loader, admin_service):
        loader.import_definition(admin_service, "onboarding")

        with pytest.raises(PersistenceError):
            loader.import_definition(admin_service, "onboarding")

    def test_bundled_definition_loads(self):
        surveys_dir = Path(__file__).resolve().parents[2] / "surveys"
        definition = SurveyLoader(str(surveys_dir)).load_definition("team_feedback")

        assert definition.slug == "team-feedback"
        assert definition.questions[0].question_type.value == "likert_scale"
