"""
Configuration for the query governance pipeline.
"""

from dataclasses import dataclass
from typing import Optional

from ..helpers.env_helper import EnvHelper
from .slug import FALLBACK_SLUG, MAX_SLUG_LENGTH


@dataclass
class GovernanceConfig:
    """Configuration for package generation."""

    default_environment: str = "production"
    default_dialect: Optional[str] = None
    policy_path: Optional[str] = None
    slug_max_length: int = MAX_SLUG_LENGTH
    fallback_slug: str = FALLBACK_SLUG

    @classmethod
    def from_env(cls, env_helper: Optional[EnvHelper] = None) -> "GovernanceConfig":
        """Build configuration from ``QUERY_DESIGNER_*`` environment variables."""
        env_helper = env_helper or EnvHelper()
        return cls(
            default_environment=env_helper.QUERY_DESIGNER_DEFAULT_ENVIRONMENT,
            default_dialect=env_helper.QUERY_DESIGNER_DEFAULT_DIALECT,
            policy_path=env_helper.QUERY_DESIGNER_POLICY_PATH,
        )
