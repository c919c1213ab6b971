from datetime import datetime

import pytest
from flask import Flask

from query_designer.api import query_package as query_package_api
from query_designer.api.query_package import bp_query_package
from query_designer.batch.utilities.governance import (
    GovernanceConfig,
    QueryPackagePipeline,
)


# =============================================================================
# Query Designer - Pipeline Fixtures
# =============================================================================


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed timestamp so rendered documents are reproducible."""
    return datetime(2026, 1, 15, 20, 47, 48)


@pytest.fixture
def pipeline(fixed_now) -> QueryPackagePipeline:
    """Pipeline with a fixed clock and production as the default environment."""
    return QueryPackagePipeline(
        config=GovernanceConfig(default_environment="production"),
        clock=lambda: fixed_now,
    )


@pytest.fixture
def annotated_mysql_query() -> str:
    """MySQL ranking query carrying an embedded metadata block."""
    return """-- @query-metadata
-- purpose: User sales ranking last month
-- database: MySQL 8.0
-- environment: production
-- created_by: @query-designer
-- created_at: 2026-01-15 20:46:00

SELECT
    u.user_id,
    u.username,
    SUM(o.total_amount) AS total_sales_amount,
    COUNT(DISTINCT o.order_id) AS order_count
FROM
    users u
    INNER JOIN orders o ON u.user_id = o.user_id
WHERE
    o.order_date >= DATE_SUB(CURDATE(), INTERVAL 1 MONTH)
    AND o.status = 'completed'
GROUP BY
    u.user_id, u.username
ORDER BY
    total_sales_amount DESC;"""


@pytest.fixture
def cte_query() -> str:
    """Read-only query built from common table expressions."""
    return """WITH recent_users AS (
    SELECT user_id, username, email
    FROM users
    WHERE created_at >= DATE_SUB(CURDATE(), INTERVAL 1 MONTH)
      AND status = 'active'
),
user_order_count AS (
    SELECT u.user_id, COUNT(DISTINCT o.order_id) AS order_count
    FROM recent_users u
    INNER JOIN orders o ON u.user_id = o.user_id
    GROUP BY u.user_id
)
SELECT r.user_id, r.username, c.order_count
FROM recent_users r
INNER JOIN user_order_count c ON r.user_id = c.user_id
ORDER BY c.order_count DESC;"""


# =============================================================================
# Query Designer - API Fixtures
# =============================================================================


@pytest.fixture
def client(pipeline, monkeypatch):
    """Flask test client with the pipeline fixture injected."""
    monkeypatch.setattr(query_package_api, "_pipeline", pipeline)
    app = Flask(__name__)
    app.register_blueprint(bp_query_package, url_prefix="/api")
    app.config["TESTING"] = True
    return app.test_client()
