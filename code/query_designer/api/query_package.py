"""
Query Package API Blueprint.

This module provides the Flask API endpoints that turn a SQL statement
into an execution package. The endpoints never connect to a database.
"""

import logging

from flask import Blueprint, jsonify, request

logger = logging.getLogger(__name__)

bp_query_package = Blueprint("query_package", __name__)

HINT_FIELDS = ("purpose", "environment", "dialect", "dialect_version", "created_by")

# Lazy initialization of the pipeline to avoid loading policy files at import
_pipeline = None


def get_query_package_pipeline():
    """Get or create the query package pipeline (lazy initialization)."""
    global _pipeline
    if _pipeline is None:
        from query_designer.batch.utilities.governance import (
            GovernanceConfig,
            QueryPackagePipeline,
        )
        _pipeline = QueryPackagePipeline(config=GovernanceConfig.from_env())
    return _pipeline


@bp_query_package.route("/query-package", methods=["POST"])
def create_query_package():
    """
    Build the execution package for a SQL statement.

    Request Body:
        {
            "sql": "SELECT * FROM users;",
            "purpose": "Active users created this month",
            "environment": "production",
            "dialect": "PostgreSQL",
            "dialect_version": "15",
            "created_by": "analyst@example.com",
            "allow_missing_explain": false
        }

    Response:
        200 with the package (slug, classification, policy, documents),
        422 with the policy violation when the statement is blocked,
        400 when the request is invalid or the dialect is unsupported.
    """
    from query_designer.batch.utilities.governance import (
        PolicyViolation,
        RequestHints,
        UnsupportedDialectError,
    )

    try:
        data = request.get_json(silent=True)
        if not data:
            return jsonify({"error": "Request body is required"}), 400
        if not isinstance(data, dict):
            return jsonify({"error": "Request body must be a JSON object"}), 400

        sql = data.get("sql")
        if not sql or not isinstance(sql, str):
            return jsonify({"error": "sql is required"}), 400

        invalid = [
            name for name in HINT_FIELDS
            if data.get(name) is not None and not isinstance(data.get(name), str)
        ]
        if invalid:
            return jsonify({
                "error": f"{', '.join(invalid)} must be a string",
                "fields": invalid,
            }), 400

        allow_missing_explain = data.get("allow_missing_explain", False)
        if not isinstance(allow_missing_explain, bool):
            return jsonify({"error": "allow_missing_explain must be a boolean"}), 400

        hints = RequestHints(
            purpose=data.get("purpose"),
            environment=data.get("environment"),
            dialect=data.get("dialect"),
            dialect_version=data.get("dialect_version"),
            created_by=data.get("created_by"),
        )

        logger.info(
            "Query package requested: %s (environment=%s, dialect=%s)",
            (hints.purpose or "")[:100],
            hints.environment,
            hints.dialect,
        )

        pipeline = get_query_package_pipeline()
        result = pipeline.build(
            sql,
            hints=hints,
            allow_missing_diagnostic=allow_missing_explain,
        )

        if isinstance(result, PolicyViolation):
            return jsonify(result.to_dict()), 422

        return jsonify(result.to_dict())

    except UnsupportedDialectError as e:
        return jsonify({
            "error": "unsupported_dialect",
            "message": str(e),
            "dialect": e.dialect,
        }), 400
    except Exception as e:
        logger.error("Query package request failed: %s", e)
        return jsonify({
            "error": str(e),
            "message": "Failed to build query package",
        }), 500


@bp_query_package.route("/query-package/dialects", methods=["GET"])
def get_dialects():
    """
    List the supported dialects and their explain syntax.

    Response:
        {
            "dialects": [
                {"name": "postgresql", "display_name": "PostgreSQL", ...},
                ...
            ]
        }
    """
    from query_designer.batch.utilities.governance import list_dialects

    return jsonify({"dialects": [profile.to_dict() for profile in list_dialects()]})


@bp_query_package.route("/query-package/health", methods=["GET"])
def health_check():
    """
    Health check endpoint for the query package service.

    Response:
        {"status": "healthy" | "unhealthy"}
    """
    try:
        get_query_package_pipeline()
        return jsonify({"status": "healthy"}), 200
    except Exception as e:
        logger.error("Health check failed: %s", e)
        return jsonify({
            "status": "unhealthy",
            "error": str(e),
        }), 503
