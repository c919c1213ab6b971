"""
Environment Policy Selector for execution guides.

This module maps a target environment to the severity, banner and
checklists embedded in the execution guide. Policy text is loaded from
``config/environment_policies.yaml`` once and shared read-only.
"""

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Optional, Union

import yaml

from .errors import GovernanceConfigError
from .models import Environment, EnvironmentPolicy, RiskTier, Severity

logger = logging.getLogger(__name__)

DEFAULT_POLICY_PATH = Path(__file__).parent / "config" / "environment_policies.yaml"

ENVIRONMENT_SEVERITY: dict[Environment, Severity] = {
    Environment.DEV: Severity.INFORMATIONAL,
    Environment.STAGING: Severity.CAUTION,
    Environment.PRODUCTION: Severity.CRITICAL,
}

_ENVIRONMENT_ALIASES: dict[str, Environment] = {
    "dev": Environment.DEV,
    "development": Environment.DEV,
    "local": Environment.DEV,
    "staging": Environment.STAGING,
    "stage": Environment.STAGING,
    "stg": Environment.STAGING,
    "production": Environment.PRODUCTION,
    "prod": Environment.PRODUCTION,
    "prd": Environment.PRODUCTION,
}


def parse_environment(value: Union[str, Environment, None]) -> Environment:
    """
    Normalize an environment value.

    Unknown or missing values fall back to production, the most
    conservative policy.
    """
    if isinstance(value, Environment):
        return value
    if not value:
        return Environment.PRODUCTION
    return _ENVIRONMENT_ALIASES.get(value.strip().lower(), Environment.PRODUCTION)


@dataclass(frozen=True)
class PolicyCatalog:
    """All environment policies and per-tier risk notes."""

    policies: dict[Environment, EnvironmentPolicy] = field(default_factory=dict)
    risk_notes: dict[RiskTier, str] = field(default_factory=dict)


def load_policy_catalog(path: Union[str, Path]) -> PolicyCatalog:
    """
    Load environment policies from a YAML file.

    Raises:
        GovernanceConfigError: If the file cannot be read or an
            environment is missing
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise GovernanceConfigError(f"Failed to load policy config {path}: {e}") from e

    environments = data.get("environments") or {}
    policies = {}
    for environment in Environment:
        entry = environments.get(environment.value)
        if not entry:
            raise GovernanceConfigError(
                f"Policy config {path} has no entry for environment '{environment.value}'"
            )
        policies[environment] = EnvironmentPolicy(
            environment=environment,
            severity=ENVIRONMENT_SEVERITY[environment],
            banner=str(entry.get("banner", "")).strip(),
            checklist=tuple(str(item) for item in entry.get("checklist") or []),
            post_execution=tuple(str(item) for item in entry.get("post_execution") or []),
        )

    notes = data.get("risk_notes") or {}
    risk_notes = {
        tier: str(notes[tier.value]).strip() for tier in RiskTier if tier.value in notes
    }

    logger.info(f"Loaded environment policies from {path}")
    return PolicyCatalog(policies=policies, risk_notes=risk_notes)


@lru_cache(maxsize=8)
def _cached_catalog(path: str) -> PolicyCatalog:
    return load_policy_catalog(path)


class EnvironmentPolicySelector:
    """Selects the checklist tier for a target environment."""

    def __init__(
        self,
        config_path: Optional[Union[str, Path]] = None,
        catalog: Optional[PolicyCatalog] = None,
    ):
        """
        Initialize the selector.

        Args:
            config_path: Path to a policy YAML file
            catalog: Optional pre-loaded catalog
        """
        if catalog is not None:
            self.catalog = catalog
        else:
            self.catalog = _cached_catalog(str(config_path or DEFAULT_POLICY_PATH))

    def select(self, environment: Union[str, Environment, None]) -> EnvironmentPolicy:
        """Return the policy for an environment, production when unknown."""
        return self.catalog.policies[parse_environment(environment)]

    def risk_note(self, tier: RiskTier) -> str:
        """Return the guide text describing a risk tier."""
        return self.catalog.risk_notes.get(tier, "")
