"""
Query governance module for the Query Designer.

This module turns read-intent SQL text into an execution package: the
original query, a dialect-specific explain query, and a risk-tiered
execution guide, without ever connecting to a database.
"""

from .artifact_assembler import ArtifactAssembler
from .config import GovernanceConfig
from .dialect_adapter import build_explain_query, list_dialects, resolve_dialect
from .environment_policy import EnvironmentPolicySelector, parse_environment
from .errors import (
    GovernanceConfigError,
    MalformedMetadataWarning,
    QueryDesignerError,
    UnsupportedDialectError,
)
from .metadata_extractor import extract_metadata, parse_database, statement_body
from .models import (
    Classification,
    DialectProfile,
    DocumentKind,
    Environment,
    EnvironmentPolicy,
    ExecutionPackage,
    MetadataBlock,
    PolicyViolation,
    QueryRequest,
    RenderedDocument,
    RequestHints,
    RiskTier,
    Severity,
    StatementKind,
)
from .pipeline import QueryPackagePipeline, build_execution_package
from .safety_classifier import SafetyClassifier, classify_statement
from .slug import slugify

__all__ = [
    # Pipeline
    "QueryPackagePipeline",
    "build_execution_package",
    "GovernanceConfig",
    # Components
    "ArtifactAssembler",
    "EnvironmentPolicySelector",
    "SafetyClassifier",
    "build_explain_query",
    "classify_statement",
    "extract_metadata",
    "list_dialects",
    "parse_database",
    "parse_environment",
    "resolve_dialect",
    "slugify",
    "statement_body",
    # Models
    "Classification",
    "DialectProfile",
    "DocumentKind",
    "Environment",
    "EnvironmentPolicy",
    "ExecutionPackage",
    "MetadataBlock",
    "PolicyViolation",
    "QueryRequest",
    "RenderedDocument",
    "RequestHints",
    "RiskTier",
    "Severity",
    "StatementKind",
    # Errors
    "QueryDesignerError",
    "UnsupportedDialectError",
    "GovernanceConfigError",
    "MalformedMetadataWarning",
]
