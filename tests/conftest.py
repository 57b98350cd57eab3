"""Shared fixtures: a profile pointing at sample_app and a SQLite schema."""

import pytest
from sqlalchemy import create_engine, text

from pytest_scaffold_mcp.config import FrameworkProfile, ScaffoldConfig
from pytest_scaffold_mcp.core.analyzer import StaticEnvironment
from pytest_scaffold_mcp.services import AnalysisService, GenerationService


SCHEMA = [
    """
    CREATE TABLE users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name VARCHAR(255) NOT NULL,
        email VARCHAR(191) NOT NULL UNIQUE,
        created_at DATETIME,
        updated_at DATETIME
    )
    """,
    """
    CREATE TABLE posts (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        title VARCHAR(120) NOT NULL,
        body TEXT,
        status VARCHAR(20) NOT NULL DEFAULT 'draft',
        created_at DATETIME,
        updated_at DATETIME,
        deleted_at DATETIME
    )
    """,
    "CREATE INDEX posts_status_index ON posts (status)",
    "CREATE TABLE alembic_version (version_num VARCHAR(32) NOT NULL)",
]


@pytest.fixture
def profile():
    return FrameworkProfile(
        model_base="sample_app.framework.Model",
        relation_base="sample_app.framework.Relation",
        controller_base="sample_app.framework.Controller",
        component_base="sample_app.framework.Component",
        resource_base="sample_app.framework.Resource",
        panel_base="sample_app.framework.PanelProvider",
        models_package="sample_app.models",
        controllers_package="sample_app.controllers",
        components_package="sample_app.components",
        resources_package="sample_app.admin",
        panels_package="sample_app.admin.panels",
        routes="sample_app.routes.ROUTES",
    )


@pytest.fixture
def database_url(tmp_path):
    url = f"sqlite:///{tmp_path / 'app.db'}"
    engine = create_engine(url)
    with engine.begin() as conn:
        for statement in SCHEMA:
            conn.execute(text(statement))
    engine.dispose()
    return url


@pytest.fixture
def engine(database_url):
    engine = create_engine(database_url)
    yield engine
    engine.dispose()


@pytest.fixture
def config(tmp_path, profile, database_url):
    return ScaffoldConfig(
        test_path=tmp_path / "generated",
        database_url=database_url,
        bootstrap=False,
        profile=profile,
    )


@pytest.fixture
def analysis_service(config):
    return AnalysisService(
        config=config,
        environment=StaticEnvironment({"components", "admin"}),
    )


@pytest.fixture
def generation_service(config, analysis_service):
    return GenerationService(config=config, analysis_service=analysis_service)


@pytest.fixture
def scaffold_env(monkeypatch, tmp_path, profile, database_url):
    """Point environment-based configuration at sample_app and a temp output root."""
    for name, value in vars(profile).items():
        monkeypatch.setenv(f"SCAFFOLD_{name.upper()}", value)
    monkeypatch.setenv("SCAFFOLD_TEST_PATH", str(tmp_path / "generated"))
    monkeypatch.setenv("SCAFFOLD_DATABASE_URL", database_url)
    monkeypatch.setenv("SCAFFOLD_BOOTSTRAP", "false")
    return tmp_path / "generated"
