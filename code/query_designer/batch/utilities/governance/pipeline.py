"""
Query package pipeline.

This module wires the governance components together:
1. Metadata extraction
2. Per-field request resolution
3. Safety classification (blocking statements stop here)
4. Slug generation
5. Explain query generation
6. Environment policy selection
7. Document assembly

The pipeline never connects to a database and keeps no state between
calls. Persisting the result is the caller's responsibility.
"""

import logging
import warnings
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Union

from .artifact_assembler import ArtifactAssembler
from .config import GovernanceConfig
from .dialect_adapter import build_explain_query, resolve_dialect
from .environment_policy import EnvironmentPolicySelector
from .errors import MalformedMetadataWarning, UnsupportedDialectError
from .metadata_extractor import METADATA_MARKER, extract_metadata, statement_body
from .models import ExecutionPackage, PolicyViolation, RequestHints
from .request_resolver import resolve_request
from .safety_classifier import SafetyClassifier
from .slug import slugify

logger = logging.getLogger(__name__)


class QueryPackagePipeline:
    """
    Turns read-intent SQL text into an execution package.

    Example:
        ```python
        pipeline = QueryPackagePipeline()
        result = pipeline.build(
            "SELECT * FROM users;",
            hints=RequestHints(purpose="Active users", dialect="PostgreSQL"),
        )
        if isinstance(result, PolicyViolation):
            print(result.message)
        ```
    """

    def __init__(
        self,
        config: Optional[GovernanceConfig] = None,
        classifier: Optional[SafetyClassifier] = None,
        policy_selector: Optional[EnvironmentPolicySelector] = None,
        assembler: Optional[ArtifactAssembler] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize the pipeline.

        Args:
            config: Optional governance configuration
            classifier: Optional safety classifier
            policy_selector: Optional environment policy selector
            assembler: Optional artifact assembler
            clock: Source of timestamps; inject a fixed clock for
                reproducible documents
        """
        self.config = config or GovernanceConfig()
        self.classifier = classifier or SafetyClassifier()
        self.policy_selector = policy_selector or EnvironmentPolicySelector(
            config_path=self.config.policy_path
        )
        self.assembler = assembler or ArtifactAssembler()
        self.clock = clock

        logger.info(
            f"QueryPackagePipeline initialized with default environment: "
            f"{self.config.default_environment}"
        )

    def build(
        self,
        raw_text: str,
        hints: Optional[RequestHints] = None,
        prompted: Optional[Mapping[str, Any]] = None,
        allow_missing_diagnostic: bool = False,
    ) -> Union[ExecutionPackage, PolicyViolation]:
        """
        Build the execution package for a query.

        Args:
            raw_text: Query text, optionally with a metadata block
            hints: Values supplied explicitly by the caller
            prompted: Values collected interactively from the operator
            allow_missing_diagnostic: Produce the query and guide documents
                when no explain query can be built for the dialect

        Returns:
            ExecutionPackage, or PolicyViolation when the text is blocked

        Raises:
            UnsupportedDialectError: If the dialect is unknown and
                allow_missing_diagnostic is False
        """
        notices: list[str] = []

        metadata = extract_metadata(raw_text)
        if metadata.malformed:
            message = (
                f"Found '{METADATA_MARKER}' marker but no 'key: value' lines; "
                f"metadata was ignored"
            )
            warnings.warn(message, MalformedMetadataWarning, stacklevel=2)
            notices.append(message)

        request, resolve_notices = resolve_request(
            raw_text,
            metadata,
            hints=hints,
            prompted=prompted,
            config=self.config,
            clock=self.clock,
        )
        notices.extend(resolve_notices)

        classification = self.classifier.classify(request.raw_text)
        if classification.is_blocking:
            logger.info(
                f"Blocked {classification.statement_kind.value} statement "
                f"(trigger: {classification.primary_trigger})"
            )
            return self.assembler.violation(classification)

        slug = slugify(
            request.purpose,
            max_length=self.config.slug_max_length,
            fallback=self.config.fallback_slug,
        )

        explain_query = None
        dialect_profile = None
        explain_missing_reason = ""
        try:
            dialect_profile = resolve_dialect(request.dialect)
            explain_query = build_explain_query(
                request.dialect,
                statement_body(request.raw_text),
                version=request.dialect_version,
            )
        except UnsupportedDialectError as e:
            if not allow_missing_diagnostic:
                raise
            explain_missing_reason = str(e)
            notices.append(f"Explain query not generated: {e}")

        policy = self.policy_selector.select(request.environment)

        return self.assembler.assemble(
            request=request,
            classification=classification,
            slug=slug,
            policy=policy,
            generated_at=self.clock(),
            explain_query=explain_query,
            dialect_profile=dialect_profile,
            risk_note=self.policy_selector.risk_note(classification.risk_tier),
            notices=notices,
            explain_missing_reason=explain_missing_reason,
        )


def build_execution_package(
    raw_text: str,
    hints: Optional[RequestHints] = None,
    **kwargs: Any,
) -> Union[ExecutionPackage, PolicyViolation]:
    """Build a package with a default-configured pipeline."""
    return QueryPackagePipeline().build(raw_text, hints=hints, **kwargs)
