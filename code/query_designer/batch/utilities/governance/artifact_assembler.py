"""
Artifact Assembler for execution packages.

This module renders the main query document, the explain document and the
execution guide from fixed templates. All decisions are made upstream;
rendering only substitutes values and looks up text by tier or severity.
"""

import logging
from datetime import datetime
from typing import Optional, Sequence, Union

from .models import (
    Classification,
    DialectProfile,
    DocumentKind,
    EnvironmentPolicy,
    ExecutionPackage,
    PolicyViolation,
    QueryRequest,
    RenderedDocument,
    RiskTier,
    Severity,
)

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"

QUERY_FILENAME = "{date}_{slug}.sql"
EXPLAIN_FILENAME = "{date}_{slug}.explain.sql"
GUIDE_FILENAME = "{date}_{slug}_execution-guide.md"

QUERY_TEMPLATE = """-- Query Purpose: {purpose}
-- Created: {created_at}
-- Environment: {environment}
-- Database: {database}
-- Query ID: {slug}
-- Classification: {statement_kind} (risk tier: {risk_tier})

{raw_text}
"""

EXPLAIN_TEMPLATE = """-- EXPLAIN Query for: {slug}
-- Run this BEFORE executing the main query

{explain_query}
"""

GUIDE_TEMPLATE = """# Execution Guide: {slug}

> **{severity_label}:** {banner}

## Summary

| Item | Value |
|------|-------|
| Purpose | {purpose} |
| Environment | {environment} |
| Database | {database} |
| Created | {created_at} |
| Created by | {created_by} |
| Statement kind | {statement_kind} |
| Risk tier | {risk_tier} |
| Detected keywords | {triggers} |
| Generated | {generated_at} |

## Files

- Main query: `{query_filename}`
- Explain query: {explain_reference}
- Execution guide: `{guide_filename}`

## Risk Assessment

{risk_note}
{confirmation}
## Pre-execution Checklist

{checklist}

## Execution Steps

{steps}

## Post-execution Checklist

{post_execution}
{notices}"""

SEVERITY_LABELS: dict[Severity, str] = {
    Severity.INFORMATIONAL: "Info",
    Severity.CAUTION: "Caution",
    Severity.CRITICAL: "CRITICAL",
}

CONFIRMATION_TEXT: dict[RiskTier, str] = {
    RiskTier.SAFE: "",
    RiskTier.WARN: (
        "\n**Operator confirmation required.** Before running the main query, "
        "confirm in writing that the statements above are intended and that a "
        "rollback plan exists.\n"
    ),
    RiskTier.BLOCK: "",
}

STEPS_WITH_EXPLAIN = """1. Connect to the {database} database for the `{environment}` environment.
2. Run the explain query and review the plan:
   ```
   {explain_command}
   ```
3. Confirm the plan uses indexes on filtered and joined columns and that the estimated cost is acceptable.
4. Run the main query:
   ```
   {query_command}
   ```"""

STEPS_WITHOUT_EXPLAIN = """1. Connect to the {database} database for the `{environment}` environment.
2. **Diagnostic step missing:** no explain query was generated ({explain_missing_reason}). Review the execution plan manually with your database client before continuing.
3. Run the main query:
   ```
   {query_command}
   ```"""

GENERIC_CONNECTION_COMMAND = "<run {filename} with your {database} client>"


def _bullets(items: Sequence[str], checkbox: bool = True) -> str:
    prefix = "- [ ] " if checkbox else "- "
    return "\n".join(f"{prefix}{item}" for item in items) if items else "- None"


class ArtifactAssembler:
    """
    Composes the documents of an execution package.

    The assembler is stateless; every call renders from the values it is
    given, so rendering the same inputs twice yields identical documents.
    """

    def assemble(
        self,
        request: QueryRequest,
        classification: Classification,
        slug: str,
        policy: EnvironmentPolicy,
        generated_at: datetime,
        explain_query: Optional[str] = None,
        dialect_profile: Optional[DialectProfile] = None,
        risk_note: str = "",
        notices: Sequence[str] = (),
        explain_missing_reason: str = "",
    ) -> Union[ExecutionPackage, PolicyViolation]:
        """
        Render the package documents.

        Args:
            request: The resolved request
            classification: Classification of the request text
            slug: Identifier slug shared by all documents
            policy: Environment policy to embed in the guide
            generated_at: Timestamp recorded in the guide
            explain_query: Diagnostic query, or None when it could not be built
            dialect_profile: Profile used for connection commands
            risk_note: Guide text describing the risk tier
            notices: Non-fatal messages to surface in the guide
            explain_missing_reason: Why the explain query is missing

        Returns:
            ExecutionPackage, or PolicyViolation for blocked classifications
        """
        if classification.is_blocking:
            return self.violation(classification)

        date = request.created_at.strftime(DATE_FORMAT)
        query_filename = QUERY_FILENAME.format(date=date, slug=slug)
        explain_filename = EXPLAIN_FILENAME.format(date=date, slug=slug)
        guide_filename = GUIDE_FILENAME.format(date=date, slug=slug)

        query_document = RenderedDocument(
            kind=DocumentKind.QUERY,
            filename=query_filename,
            content=self._render_query(request, classification, slug),
        )

        explain_document = None
        if explain_query is not None:
            explain_document = RenderedDocument(
                kind=DocumentKind.EXPLAIN,
                filename=explain_filename,
                content=EXPLAIN_TEMPLATE.format(slug=slug, explain_query=explain_query.rstrip()),
            )

        guide_document = RenderedDocument(
            kind=DocumentKind.GUIDE,
            filename=guide_filename,
            content=self._render_guide(
                request=request,
                classification=classification,
                slug=slug,
                policy=policy,
                generated_at=generated_at,
                query_filename=query_filename,
                explain_filename=explain_filename if explain_document else None,
                guide_filename=guide_filename,
                dialect_profile=dialect_profile,
                risk_note=risk_note,
                notices=notices,
                explain_missing_reason=explain_missing_reason,
            ),
        )

        logger.info(
            f"Assembled execution package '{slug}' "
            f"({classification.risk_tier.value}, {request.environment.value})"
        )
        return ExecutionPackage(
            request=request,
            slug=slug,
            classification=classification,
            policy=policy,
            query_document=query_document,
            explain_document=explain_document,
            guide_document=guide_document,
            generated_at=generated_at,
            notices=tuple(notices),
        )

    def violation(self, classification: Classification) -> PolicyViolation:
        """Build the violation returned instead of a blocked package."""
        trigger = classification.primary_trigger or "unknown"
        message = (
            f"{classification.statement_kind.value} statement blocked: '{trigger}' "
            f"is not allowed in this workflow. No execution package was produced; "
            f"an explicit operator override is required."
        )
        return PolicyViolation(
            statement_kind=classification.statement_kind,
            trigger=trigger,
            classification=classification,
            message=message,
            details={"triggers": list(classification.triggers)},
        )

    def _render_query(
        self,
        request: QueryRequest,
        classification: Classification,
        slug: str,
    ) -> str:
        return QUERY_TEMPLATE.format(
            purpose=request.purpose or "(not specified)",
            created_at=request.created_at.strftime(TIMESTAMP_FORMAT),
            environment=request.environment.value,
            database=request.database_label,
            slug=slug,
            statement_kind=classification.statement_kind.value,
            risk_tier=classification.risk_tier.value,
            raw_text=request.raw_text.strip(),
        )

    def _render_guide(
        self,
        request: QueryRequest,
        classification: Classification,
        slug: str,
        policy: EnvironmentPolicy,
        generated_at: datetime,
        query_filename: str,
        explain_filename: Optional[str],
        guide_filename: str,
        dialect_profile: Optional[DialectProfile],
        risk_note: str,
        notices: Sequence[str],
        explain_missing_reason: str,
    ) -> str:
        database = request.database_label
        command = (
            dialect_profile.connection_command
            if dialect_profile
            else GENERIC_CONNECTION_COMMAND.replace("{database}", database)
        )

        if explain_filename:
            explain_reference = f"`{explain_filename}`"
            steps = STEPS_WITH_EXPLAIN.format(
                database=database,
                environment=request.environment.value,
                explain_command=command.replace("{filename}", explain_filename),
                query_command=command.replace("{filename}", query_filename),
            )
        else:
            explain_reference = "not generated (diagnostic step missing)"
            steps = STEPS_WITHOUT_EXPLAIN.format(
                database=database,
                environment=request.environment.value,
                explain_missing_reason=explain_missing_reason or "unsupported dialect",
                query_command=command.replace("{filename}", query_filename),
            )

        notices_section = (
            "\n## Notices\n\n" + _bullets(notices, checkbox=False) + "\n" if notices else ""
        )

        return GUIDE_TEMPLATE.format(
            slug=slug,
            severity_label=SEVERITY_LABELS[policy.severity],
            banner=policy.banner,
            purpose=request.purpose or "(not specified)",
            environment=request.environment.value,
            database=database,
            created_at=request.created_at.strftime(TIMESTAMP_FORMAT),
            created_by=request.created_by or "(not specified)",
            statement_kind=classification.statement_kind.value,
            risk_tier=classification.risk_tier.value,
            triggers=", ".join(classification.triggers) or "(none)",
            generated_at=generated_at.strftime(TIMESTAMP_FORMAT),
            query_filename=query_filename,
            explain_reference=explain_reference,
            guide_filename=guide_filename,
            risk_note=risk_note,
            confirmation=CONFIRMATION_TEXT[classification.risk_tier],
            checklist=_bullets(policy.checklist),
            steps=steps,
            post_execution=_bullets(policy.post_execution),
            notices=notices_section,
        )
