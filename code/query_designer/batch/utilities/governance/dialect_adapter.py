"""
Dialect Adapter for diagnostic (explain) queries.

Each supported dialect has exactly one transformation rule, kept in the
``DIALECT_PROFILES`` lookup table. Adding a dialect is a one-entry change.
Nothing here connects to or executes against a database.
"""

import logging
import re
from typing import Optional

from .errors import UnsupportedDialectError
from .models import DialectProfile

logger = logging.getLogger(__name__)


DIALECT_PROFILES: dict[str, DialectProfile] = {
    "postgresql": DialectProfile(
        name="postgresql",
        display_name="PostgreSQL",
        aliases=("postgres", "pg", "psql", "pgsql"),
        explain_template="EXPLAIN (ANALYZE, BUFFERS, FORMAT JSON)\n{query}",
        connection_command='psql -h <host> -U <user> -d <database> -f "{filename}"',
        minimum_version=(9, 0),
    ),
    "mysql": DialectProfile(
        name="mysql",
        display_name="MySQL",
        aliases=("mariadb",),
        explain_template="EXPLAIN FORMAT=JSON\n{query}",
        connection_command='mysql -h <host> -u <user> -p <database> < "{filename}"',
        minimum_version=(5, 6),
    ),
    "sqlite": DialectProfile(
        name="sqlite",
        display_name="SQLite",
        aliases=("sqlite3",),
        explain_template="EXPLAIN QUERY PLAN\n{query}",
        connection_command='sqlite3 <database-file> < "{filename}"',
    ),
    "sqlserver": DialectProfile(
        name="sqlserver",
        display_name="SQL Server",
        aliases=("sql server", "mssql", "tsql", "t-sql", "microsoft sql server"),
        explain_template="SET STATISTICS IO ON;\nSET STATISTICS TIME ON;\n{query}",
        connection_command='sqlcmd -S <server> -d <database> -i "{filename}"',
    ),
}

_ALIAS_INDEX: dict[str, str] = {
    key: profile.name
    for profile in DIALECT_PROFILES.values()
    for key in (profile.name, profile.display_name.lower(), *profile.aliases)
}

_VERSION = re.compile(r"^\s*v?(\d+(?:\.\d+)*)")


def resolve_dialect(dialect: Optional[str]) -> DialectProfile:
    """
    Look up the profile for a dialect name or alias.

    Raises:
        UnsupportedDialectError: If the dialect is missing or unknown
    """
    if not dialect or not dialect.strip():
        raise UnsupportedDialectError(dialect, "no dialect was supplied")

    key = " ".join(dialect.strip().lower().split())
    name = _ALIAS_INDEX.get(key)
    if name is None:
        raise UnsupportedDialectError(dialect)
    return DIALECT_PROFILES[name]


def parse_version(version: Optional[str]) -> Optional[tuple[int, ...]]:
    """Parse ``"8.0.32"`` into ``(8, 0, 32)``; None when not numeric."""
    if not version:
        return None
    match = _VERSION.match(version)
    if not match:
        return None
    return tuple(int(part) for part in match.group(1).split("."))


def build_explain_query(
    dialect: Optional[str],
    query: str,
    version: Optional[str] = None,
) -> str:
    """
    Wrap a query in the diagnostic syntax of the target dialect.

    Args:
        dialect: Dialect name or alias (e.g. "PostgreSQL", "mysql")
        query: The query text, inserted unmodified
        version: Optional dialect version, checked against the profile

    Returns:
        The diagnostic query text

    Raises:
        UnsupportedDialectError: For unknown dialects, or versions older
            than the profile's diagnostic syntax supports
    """
    profile = resolve_dialect(dialect)

    parsed = parse_version(version)
    if parsed is not None and profile.minimum_version is not None:
        if parsed < profile.minimum_version:
            minimum = ".".join(str(part) for part in profile.minimum_version)
            raise UnsupportedDialectError(
                dialect,
                f"version {version} predates the explain syntax "
                f"(requires {profile.display_name} {minimum} or later)",
            )

    logger.debug(f"Building explain query for dialect: {profile.name}")
    return profile.explain_template.format(query=query)


def list_dialects() -> list[DialectProfile]:
    """Return all supported dialect profiles."""
    return list(DIALECT_PROFILES.values())
