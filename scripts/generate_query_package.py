#!/usr/bin/env python3
"""
Query Package Generator

Reads a SQL file, classifies it, and writes the query, explain and
execution guide documents next to each other in the output directory.

Usage:
    python scripts/generate_query_package.py --file my_query.sql \\
        --purpose "Last month's sales ranking" --dialect "MySQL" \\
        --dialect-version 8.0 --environment production

    Options:
      --output-dir DIR          Where to write the documents (default: queries)
      --overwrite               Replace existing documents
      --allow-missing-explain   Still write the query and guide when the
                                dialect has no explain syntax

Exit codes:
    0  documents written
    1  unsupported dialect or existing files
    2  statement blocked by policy
"""

import argparse
import logging
import sys
from pathlib import Path

# Add code directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "code"))

from query_designer.batch.utilities.governance import (  # noqa: E402
    GovernanceConfig,
    PolicyViolation,
    QueryPackagePipeline,
    RequestHints,
    UnsupportedDialectError,
)
from query_designer.batch.utilities.helpers.document_writer import QueryDocumentWriter  # noqa: E402
from query_designer.batch.utilities.helpers.env_helper import EnvHelper  # noqa: E402


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a query execution package")
    parser.add_argument("--file", required=True, help="SQL file to package")
    parser.add_argument("--purpose", help="What the query is for")
    parser.add_argument("--environment", help="dev, staging or production")
    parser.add_argument("--dialect", help="PostgreSQL, MySQL, SQLite or SQL Server")
    parser.add_argument("--dialect-version", help="Database version, e.g. 8.0")
    parser.add_argument("--created-by", help="Author recorded in the guide")
    parser.add_argument("--output-dir", help="Directory for the generated documents")
    parser.add_argument("--overwrite", action="store_true", help="Replace existing documents")
    parser.add_argument(
        "--allow-missing-explain",
        action="store_true",
        help="Write the query and guide even when no explain query can be built",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    env_helper = EnvHelper()

    logging.basicConfig(
        level=env_helper.QUERY_DESIGNER_LOG_LEVEL,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    raw_text = Path(args.file).read_text(encoding="utf-8")
    hints = RequestHints(
        purpose=args.purpose,
        environment=args.environment,
        dialect=args.dialect,
        dialect_version=args.dialect_version,
        created_by=args.created_by,
    )

    pipeline = QueryPackagePipeline(config=GovernanceConfig.from_env(env_helper))
    try:
        result = pipeline.build(
            raw_text,
            hints=hints,
            allow_missing_diagnostic=args.allow_missing_explain,
        )
    except UnsupportedDialectError as e:
        print(f"❌ {e}")
        print("   Supply --dialect with one of: PostgreSQL, MySQL, SQLite, SQL Server")
        return 1

    if isinstance(result, PolicyViolation):
        print(f"⛔ {result.message}")
        return 2

    writer = QueryDocumentWriter(
        output_dir=args.output_dir or env_helper.QUERY_DESIGNER_OUTPUT_DIR,
        overwrite=args.overwrite or env_helper.QUERY_DESIGNER_OVERWRITE,
    )
    try:
        paths = writer.write(result)
    except FileExistsError as e:
        print(f"❌ {e}")
        print("   Re-run with --overwrite to replace them")
        return 1

    print(f"✅ {result.classification.statement_kind.value} query "
          f"({result.classification.risk_tier.value}) packaged as '{result.slug}':")
    for path in paths:
        print(f"   {path}")
    for notice in result.notices:
        print(f"⚠️  {notice}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
