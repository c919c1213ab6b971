import logging
import os

logger = logging.getLogger(__name__)


class EnvHelper:
    """Reads query designer settings from environment variables."""

    def __init__(self) -> None:
        self.QUERY_DESIGNER_OUTPUT_DIR = os.getenv("QUERY_DESIGNER_OUTPUT_DIR", "queries")
        self.QUERY_DESIGNER_DEFAULT_ENVIRONMENT = os.getenv(
            "QUERY_DESIGNER_DEFAULT_ENVIRONMENT", "production"
        )
        self.QUERY_DESIGNER_DEFAULT_DIALECT = os.getenv("QUERY_DESIGNER_DEFAULT_DIALECT") or None
        self.QUERY_DESIGNER_POLICY_PATH = os.getenv("QUERY_DESIGNER_POLICY_PATH") or None
        self.QUERY_DESIGNER_LOG_LEVEL = os.getenv("QUERY_DESIGNER_LOG_LEVEL", "INFO").upper()
        self.QUERY_DESIGNER_OVERWRITE = self.get_env_var_bool("QUERY_DESIGNER_OVERWRITE", "False")

    @staticmethod
    def get_env_var_bool(var_name: str, default: str = "True") -> bool:
        return os.getenv(var_name, default).lower() in ("true", "1", "yes")
