"""
Request Resolver for per-field value precedence.

Every request field is resolved independently in this order:
embedded metadata, explicit caller hint, prompt-collected value, default.
"""

from datetime import datetime
from typing import Any, Callable, Mapping, Optional

from .config import GovernanceConfig
from .environment_policy import parse_environment
from .metadata_extractor import parse_database
from .models import MetadataBlock, QueryRequest, RequestHints

_TIMESTAMP_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M", "%Y-%m-%d")


def resolve_field(*candidates: Any, default: Any = None) -> Any:
    """Return the first candidate that is neither None nor blank."""
    for candidate in candidates:
        if candidate is None:
            continue
        if isinstance(candidate, str) and not candidate.strip():
            continue
        return candidate.strip() if isinstance(candidate, str) else candidate
    return default


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a metadata timestamp; None when the format is not recognized."""
    if isinstance(value, datetime):
        return value
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    for fmt in _TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def resolve_request(
    raw_text: str,
    metadata: MetadataBlock,
    hints: Optional[RequestHints] = None,
    prompted: Optional[Mapping[str, Any]] = None,
    config: Optional[GovernanceConfig] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> tuple[QueryRequest, list[str]]:
    """
    Build an immutable QueryRequest from all value sources.

    Args:
        raw_text: The query text as supplied
        metadata: Block parsed from the query text
        hints: Values supplied explicitly by the caller
        prompted: Values collected interactively, keyed by field name
        config: Defaults used when no source has a value
        clock: Source of the creation timestamp when none is supplied

    Returns:
        The resolved request and a list of notices about ignored values
    """
    hints = hints or RequestHints()
    prompted = prompted or {}
    config = config or GovernanceConfig()
    notices: list[str] = []

    metadata_dialect, metadata_version = parse_database(metadata.database)

    created_at = parse_timestamp(metadata.created_at)
    if metadata.created_at and created_at is None:
        notices.append(
            f"Ignored unrecognized created_at value in metadata: {metadata.created_at!r}"
        )

    request = QueryRequest(
        raw_text=raw_text,
        purpose=resolve_field(metadata.purpose, hints.purpose, prompted.get("purpose")),
        environment=parse_environment(
            resolve_field(
                metadata.environment,
                hints.environment,
                prompted.get("environment"),
                default=config.default_environment,
            )
        ),
        dialect=resolve_field(
            metadata_dialect,
            hints.dialect,
            prompted.get("dialect"),
            default=config.default_dialect,
        ),
        dialect_version=resolve_field(
            metadata_version, hints.dialect_version, prompted.get("dialect_version")
        ),
        created_by=resolve_field(
            metadata.created_by, hints.created_by, prompted.get("created_by")
        ),
        created_at=resolve_field(
            created_at,
            hints.created_at,
            parse_timestamp(prompted.get("created_at")),
            default=None,
        )
        or clock(),
    )
    return request, notices
