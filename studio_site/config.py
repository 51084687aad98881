"""Application configuration management."""
from pathlib import Path
from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def split_csv(value: Optional[str]) -> List[str]:
    """Split a comma-separated setting into stripped, non-empty entries.

    Args:
        value: Raw setting value (may be None or empty)

    Returns:
        Entries in their original order
    """
    if not value:
        return []
    return [part.strip() for part in str(value).split(",") if part.strip()]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # FitDegree API Configuration
    fitdegree_api_base: str = "https://api.fitdegree.com"
    fitdegree_api_key: str = ""  # Set via FITDEGREE_API_KEY env var
    fitdegree_auth_header: str = "Authorization"
    fitdegree_auth_scheme: str = "Bearer"  # Empty sends the raw key

    # Endpoint overrides (comma-separated path lists)
    fitdegree_endpoint_team_members: str = ""
    fitdegree_endpoint_classes: str = ""
    fitdegree_endpoint_schedule: str = ""
    fitdegree_endpoint_group_classes: str = ""
    fitdegree_endpoint_services: str = ""

    # Studio identifiers
    fitspot_id: str = "782"
    company_id: str = "726"

    # Builder Configuration
    publish_dir: str = "."
    schedule_card_limit: int = 6
    schedule_days_ahead: int = 14
    class_types_limit: int = 12
    training_limit: int = 6
    training_keyword: str = "teacher training"
    featured_classes_limit: int = 3
    generate_instructor_detail_pages: bool = False
    site_origin: str = ""
    site_name: str = "YOUnique Yoga Studio"
    instructors_api_url: str = ""

    # Instructor visibility denylists (comma-separated)
    hidden_instructor_ids: str = ""
    hidden_instructor_usernames: str = ""
    hidden_instructor_names: str = ""

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"
    gizmo_dirs: str = ""  # Extra pack directories, searched first

    # Transport Configuration
    default_timeout: int = 30

    # Model Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("fitdegree_api_base", "site_origin")
    @classmethod
    def _strip_trailing_slashes(cls, value: str) -> str:
        return value.strip().rstrip("/")

    @field_validator(
        "fitdegree_api_key",
        "fitdegree_auth_header",
        "fitdegree_auth_scheme",
        "fitspot_id",
        "company_id",
        "publish_dir",
        "instructors_api_url",
    )
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()

    @field_validator("training_keyword")
    @classmethod
    def _normalize_keyword(cls, value: str) -> str:
        return value.strip().lower()

    @property
    def publish_path(self) -> Path:
        """Get the resolved publish directory."""
        return Path(self.publish_dir or ".").expanduser().resolve()

    @property
    def endpoint_overrides(self) -> dict[str, List[str]]:
        """Per-resource endpoint override lists."""
        return {
            "instructors": split_csv(self.fitdegree_endpoint_team_members),
            "classes": split_csv(self.fitdegree_endpoint_classes),
            "schedule": split_csv(self.fitdegree_endpoint_schedule),
            "group_classes": split_csv(self.fitdegree_endpoint_group_classes),
            "services": split_csv(self.fitdegree_endpoint_services),
        }

    @property
    def extra_gizmo_dirs(self) -> List[Path]:
        """Extra pack directories from GIZMO_DIRS."""
        return [Path(p).expanduser() for p in split_csv(self.gizmo_dirs)]


# Global settings instance
settings = Settings()
