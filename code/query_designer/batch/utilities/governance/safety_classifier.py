"""
Safety Classifier for keyword-level statement intent.

This module assigns a statement kind and risk tier to query text by
looking at the leading keyword of every statement. It is deliberately not
a SQL parser: syntactic validity is never checked, and the classification
errs towards more gatekeeping whenever the intent is unclear.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Sequence

from sqlparse import lexer
from sqlparse import tokens as T
from sqlparse.exceptions import SQLParseError

from .models import Classification, RiskTier, StatementKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassificationRule:
    """One entry of the rule table: leading keywords mapped to a kind."""

    kind: StatementKind
    risk_tier: RiskTier
    keywords: frozenset[str]


# Evaluated in priority order; the first rule listed is the most severe.
DEFAULT_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(
        kind=StatementKind.DDL,
        risk_tier=RiskTier.BLOCK,
        keywords=frozenset(
            {"CREATE", "ALTER", "DROP", "TRUNCATE", "RENAME", "GRANT", "REVOKE"}
        ),
    ),
    ClassificationRule(
        kind=StatementKind.TRANSACTION_CONTROL,
        risk_tier=RiskTier.WARN,
        keywords=frozenset(
            {"COMMIT", "ROLLBACK", "BEGIN", "START", "SAVEPOINT", "RELEASE"}
        ),
    ),
    ClassificationRule(
        kind=StatementKind.MUTATING,
        risk_tier=RiskTier.WARN,
        keywords=frozenset({"INSERT", "UPDATE", "DELETE", "MERGE", "REPLACE", "UPSERT"}),
    ),
    ClassificationRule(
        kind=StatementKind.READ_ONLY,
        risk_tier=RiskTier.SAFE,
        keywords=frozenset({"SELECT"}),
    ),
)

_LEADING_WORD = re.compile(r"^[\s(]*(?P<word>[A-Za-z_]+)")

# MySQL and MariaDB run the body of /*!NNNNN ... */ comments as ordinary SQL.
_EXECUTABLE_COMMENT = re.compile(r"^/\*M?!(?:\d{5,6})?(?P<body>[\s\S]*?)\*/$")


class SafetyClassifier:
    """
    Classifies query text into a statement kind and risk tier.

    Every statement in the text is classified by its leading keyword and
    the most severe kind wins, so a trailing DROP after a SELECT still
    blocks. Text whose leading token is not recognized is classified as
    ``unknown`` with a ``warn`` tier, never ``safe``.
    """

    def __init__(self, rules: Optional[Sequence[ClassificationRule]] = None):
        """
        Initialize the classifier.

        Args:
            rules: Optional rule table, most severe rule first
        """
        self.rules = tuple(rules) if rules is not None else DEFAULT_RULES
        self._keyword_index = {
            keyword: rule for rule in self.rules for keyword in rule.keywords
        }
        self._rank = {rule.kind: position for position, rule in enumerate(self.rules)}
        # UNKNOWN only outranks read-only statements.
        read_only_rank = self._rank.get(StatementKind.READ_ONLY, len(self.rules))
        self._rank[StatementKind.UNKNOWN] = read_only_rank - 0.5
        self._tiers = {rule.kind: rule.risk_tier for rule in self.rules}
        self._tiers[StatementKind.UNKNOWN] = RiskTier.WARN

    def classify(self, raw_text: str) -> Classification:
        """
        Classify query text.

        Args:
            raw_text: Query text, possibly with comments and several statements

        Returns:
            Classification with the most severe kind found
        """
        try:
            statements = self._split_statements(raw_text)
            matches = [self._classify_statement(statement) for statement in statements]
        except SQLParseError as e:
            logger.warning(f"Could not tokenize query text, classifying as unknown: {e}")
            return Classification(
                statement_kind=StatementKind.UNKNOWN,
                risk_tier=RiskTier.WARN,
                triggers=("UNPARSEABLE",),
                primary_trigger="UNPARSEABLE",
            )
        if not statements:
            return Classification(
                statement_kind=StatementKind.UNKNOWN,
                risk_tier=RiskTier.WARN,
            )

        triggers = tuple(keyword for keyword, _ in matches if keyword)

        primary_keyword, primary_kind = min(matches, key=lambda m: self._rank[m[1]])

        classification = Classification(
            statement_kind=primary_kind,
            risk_tier=self._tiers[primary_kind],
            triggers=triggers,
            primary_trigger=primary_keyword or None,
            statement_count=len(statements),
        )
        logger.debug(
            f"Classified {len(statements)} statement(s) as "
            f"{classification.statement_kind.value}/{classification.risk_tier.value}"
        )
        return classification

    def _split_statements(self, raw_text: str) -> list[str]:
        """
        Strip comments and split text into non-empty statements.

        Only the lexer token stream is used; sqlparse's grouping engine is
        never run. Every ``;`` outside a string literal or comment ends a
        statement, whatever the parenthesis depth.
        """
        statements = []
        current: list[str] = []
        for ttype, value in lexer.tokenize(_unwrap_executable_comments(raw_text)):
            if ttype in T.Comment:
                current.append(" ")
            elif ttype in T.Punctuation and value == ";":
                statements.append("".join(current).strip())
                current = []
            else:
                current.append(value)
        statements.append("".join(current).strip())
        return [statement for statement in statements if statement]

    def _classify_statement(self, statement: str) -> tuple[str, StatementKind]:
        """Return the deciding keyword and kind for a single statement."""
        match = _LEADING_WORD.match(statement)
        if not match:
            return "", StatementKind.UNKNOWN

        keyword = match.group("word").upper()
        if keyword == "WITH":
            return self._classify_cte(statement)

        rule = self._keyword_index.get(keyword)
        if rule is None:
            return keyword, StatementKind.UNKNOWN
        return keyword, rule.kind

    def _classify_cte(self, statement: str) -> tuple[str, StatementKind]:
        """Classify a WITH statement by the verb that follows its CTE list."""
        depth = 0
        for ttype, value in lexer.tokenize(statement):
            if ttype in T.Punctuation and value == "(":
                depth += 1
            elif ttype in T.Punctuation and value == ")":
                depth = max(depth - 1, 0)
            elif depth == 0 and ttype in T.Keyword and ttype not in T.Keyword.CTE:
                rule = self._keyword_index.get(value.upper())
                if rule is not None:
                    return value.upper(), rule.kind

        return "WITH", StatementKind.UNKNOWN


def _unwrap_executable_comments(raw_text: str) -> str:
    """Replace MySQL executable comments with the SQL they contain."""
    parts = []
    for ttype, value in lexer.tokenize(raw_text):
        match = _EXECUTABLE_COMMENT.match(value) if ttype in T.Comment else None
        parts.append(f" {match.group('body')} " if match else value)
    return "".join(parts)


_default_classifier = SafetyClassifier()


def classify_statement(raw_text: str) -> Classification:
    """Classify query text with the default rule table."""
    return _default_classifier.classify(raw_text)
