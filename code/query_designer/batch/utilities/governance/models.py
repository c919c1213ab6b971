"""
Data models for the query governance pipeline.

This module defines the immutable records that flow through the pipeline:
the resolved request, the classification of the statement text, the
environment policy, and the final execution package or policy violation.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class Environment(str, Enum):
    """Target environment the query will be run against."""

    DEV = "dev"
    STAGING = "staging"
    PRODUCTION = "production"


class StatementKind(str, Enum):
    """Kind of SQL statement detected from its leading keyword."""

    READ_ONLY = "read_only"
    MUTATING = "mutating"
    DDL = "ddl"
    TRANSACTION_CONTROL = "transaction_control"
    UNKNOWN = "unknown"


class RiskTier(str, Enum):
    """How much human gatekeeping a statement requires."""

    SAFE = "safe"
    WARN = "warn"
    BLOCK = "block"


class Severity(str, Enum):
    """Severity of the checklist and banner attached to a guide."""

    INFORMATIONAL = "informational"
    CAUTION = "caution"
    CRITICAL = "critical"


class DocumentKind(str, Enum):
    """The three documents of an execution package."""

    QUERY = "query"
    EXPLAIN = "explain"
    GUIDE = "guide"


@dataclass(frozen=True)
class MetadataBlock:
    """Values parsed from an embedded ``@query-metadata`` comment block."""

    purpose: Optional[str] = None
    database: Optional[str] = None
    environment: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[str] = None
    marker_found: bool = False
    malformed: bool = False

    @property
    def is_empty(self) -> bool:
        """Return True when no recognized key was captured."""
        return not any(
            (self.purpose, self.database, self.environment, self.created_by, self.created_at)
        )


@dataclass(frozen=True)
class RequestHints:
    """Optional values supplied explicitly by the caller."""

    purpose: Optional[str] = None
    environment: Optional[str] = None
    dialect: Optional[str] = None
    dialect_version: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class QueryRequest:
    """A fully resolved request. Immutable once constructed."""

    raw_text: str
    created_at: datetime
    environment: Environment = Environment.PRODUCTION
    purpose: Optional[str] = None
    dialect: Optional[str] = None
    dialect_version: Optional[str] = None
    created_by: Optional[str] = None

    @property
    def database_label(self) -> str:
        """Human readable dialect and version, e.g. ``MySQL 8.0``."""
        if not self.dialect:
            return "unspecified"
        if self.dialect_version:
            return f"{self.dialect} {self.dialect_version}"
        return self.dialect

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "raw_text": self.raw_text,
            "purpose": self.purpose,
            "environment": self.environment.value,
            "dialect": self.dialect,
            "dialect_version": self.dialect_version,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class Classification:
    """Keyword-level classification of a statement text."""

    statement_kind: StatementKind
    risk_tier: RiskTier
    triggers: tuple[str, ...] = ()
    primary_trigger: Optional[str] = None
    statement_count: int = 0

    @property
    def is_blocking(self) -> bool:
        return self.risk_tier is RiskTier.BLOCK

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "statement_kind": self.statement_kind.value,
            "risk_tier": self.risk_tier.value,
            "triggers": list(self.triggers),
            "primary_trigger": self.primary_trigger,
            "statement_count": self.statement_count,
        }


@dataclass(frozen=True)
class DialectProfile:
    """Static description of how one database dialect is diagnosed."""

    name: str
    display_name: str
    explain_template: str
    connection_command: str
    aliases: tuple[str, ...] = ()
    minimum_version: Optional[tuple[int, ...]] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "name": self.name,
            "display_name": self.display_name,
            "aliases": list(self.aliases),
            "explain_template": self.explain_template,
            "connection_command": self.connection_command,
            "minimum_version": (
                ".".join(str(part) for part in self.minimum_version)
                if self.minimum_version
                else None
            ),
        }


@dataclass(frozen=True)
class EnvironmentPolicy:
    """Checklist and banner selected for a target environment."""

    environment: Environment
    severity: Severity
    banner: str
    checklist: tuple[str, ...] = ()
    post_execution: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "environment": self.environment.value,
            "severity": self.severity.value,
            "banner": self.banner,
            "checklist": list(self.checklist),
            "post_execution": list(self.post_execution),
        }


@dataclass(frozen=True)
class RenderedDocument:
    """One rendered text artifact and the filename it should be stored under."""

    kind: DocumentKind
    filename: str
    content: str

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "filename": self.filename,
            "content": self.content,
        }


@dataclass(frozen=True)
class ExecutionPackage:
    """The three documents produced for a single request."""

    request: QueryRequest
    slug: str
    classification: Classification
    policy: EnvironmentPolicy
    query_document: RenderedDocument
    guide_document: RenderedDocument
    generated_at: datetime
    explain_document: Optional[RenderedDocument] = None
    notices: tuple[str, ...] = ()

    @property
    def documents(self) -> tuple[RenderedDocument, ...]:
        """All rendered documents, in query / explain / guide order."""
        if self.explain_document is None:
            return (self.query_document, self.guide_document)
        return (self.query_document, self.explain_document, self.guide_document)

    @property
    def has_diagnostic(self) -> bool:
        return self.explain_document is not None

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "slug": self.slug,
            "request": self.request.to_dict(),
            "classification": self.classification.to_dict(),
            "policy": self.policy.to_dict(),
            "documents": [document.to_dict() for document in self.documents],
            "generated_at": self.generated_at.isoformat(),
            "notices": list(self.notices),
        }


@dataclass(frozen=True)
class PolicyViolation:
    """Returned instead of a package when a statement kind is disallowed."""

    statement_kind: StatementKind
    trigger: str
    classification: Classification
    message: str = ""
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": "policy_violation",
            "statement_kind": self.statement_kind.value,
            "trigger": self.trigger,
            "message": self.message,
            "classification": self.classification.to_dict(),
            "details": self.details,
        }
