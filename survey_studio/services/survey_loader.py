"""Survey definition loader for YAML files.

Surveys can be authored as YAML files in the surveys directory and imported
through the admin service. Files are validated with the same rules as the
survey editor, and parsed definitions are cached.
"""

import re
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml

from survey_studio.config import get_settings
from survey_studio.errors import NotFoundError, ValidationError
from survey_studio.models.survey import Survey
from survey_studio.schemas.survey import SurveyWithQuestionsIn
from survey_studio.services.survey_admin import SurveyAdminService
from survey_studio.services.survey_validator import SurveyFormValidator, generate_slug
from survey_studio.logging_config import get_logger

logger = get_logger(__name__)

DEFINITION_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


class SurveyLoader:
    """Service for loading survey definitions from YAML files.

    A definition holds the same fields as the survey editor: title,
    description, slug, status and a list of questions. A missing slug is
    derived from the title.
    """

    def __init__(self, surveys_dir: Optional[str] = None):
        """Initialize survey loader.

        Args:
            surveys_dir: Path to surveys directory (defaults to settings.surveys_dir)
        """
        if surveys_dir is None:
            surveys_dir = get_settings().surveys_dir

        self.surveys_dir = Path(surveys_dir)

        if not self.surveys_dir.exists():
            logger.warning(f"Surveys directory not found: {self.surveys_dir}")

    @lru_cache(maxsize=128)
    def load_definition(self, name: str) -> SurveyWithQuestionsIn:
        """Load and validate a survey definition.

        Results are cached. Clear with clear_cache() after editing files.

        Args:
            name: Definition name (YAML filename without .yaml)

        Returns:
            Validated survey payload

        Raises:
            NotFoundError: If the file doesn't exist
            ValidationError: If the YAML is malformed or fails validation

        Example:
            >>> loader = SurveyLoader("./surveys")
            >>> loader.load_definition("team_feedback").slug
            'team-feedback'
        """
        if not DEFINITION_NAME_PATTERN.match(name):
            raise NotFoundError(f"Survey definition '{name}' not found")

        yaml_path = self.surveys_dir / f"{name}.yaml"

        if not yaml_path.exists():
            logger.error(f"Survey file not found: {yaml_path}")
            raise NotFoundError(f"Survey definition '{name}' not found at {yaml_path}")

        try:
            with open(yaml_path, 'r', encoding='utf-8') as f:
                raw_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"YAML parsing error for {name}: {e}")
            raise ValidationError(f"Invalid YAML in survey definition '{name}': {e}")

        if not isinstance(raw_data, dict):
            raise ValidationError(f"Survey definition '{name}' must be a mapping")

        if not raw_data.get("slug") and raw_data.get("title"):
            raw_data["slug"] = generate_slug(str(raw_data["title"]))

        definition = SurveyFormValidator.validate_survey(raw_data)
        logger.info(f"Loaded survey definition: {name} ({len(definition.questions)} questions)")
        return definition

    def list_definitions(self) -> list[str]:
        """List all available definition names, sorted."""
        if not self.surveys_dir.exists():
            return []

        names = [f.stem for f in self.surveys_dir.glob("*.yaml")]
        logger.debug(f"Found {len(names)} survey definitions: {names}")
        return sorted(names)

    def import_definition(
        self,
        admin: SurveyAdminService,
        name: str,
        created_by: Optional[str] = None,
    ) -> Survey:
        """Create a survey from a definition file.

        Raises:
            NotFoundError: If the file doesn't exist
            ValidationError: If the definition is invalid
            PersistenceError: If the survey can't be saved (e.g. slug taken)
        """
        definition = self.load_definition(name)
        return admin.create_survey(definition, created_by=created_by)

    def clear_cache(self):
        """Clear the definition cache."""
        self.load_definition.cache_clear()
        logger.info("Survey definition cache cleared")


_loader_instance: Optional[SurveyLoader] = None


def get_survey_loader() -> SurveyLoader:
    """Get global SurveyLoader instance.

    Creates singleton instance on first call.
    """
    global _loader_instance
    if _loader_instance is None:
        _loader_instance = SurveyLoader()
    return _loader_instance
