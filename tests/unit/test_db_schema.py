"""Schema integrity tests for the migrations."""
from __future__ import annotations

from pathlib import Path

import pytest
import sqlalchemy as sa
from alembic import command
from alembic.config import Config


@pytest.fixture(scope="module")
def alembic_config(tmp_path_factory: pytest.TempPathFactory) -> Config:
    """Provide Alembic config bound to a temporary SQLite database."""

    project_root = Path(__file__).resolve().parents[2]
    db_path = tmp_path_factory.mktemp("db") / "schema.db"

    config = Config(str(project_root / "alembic.ini"))
    config.set_main_option("sqlalchemy.url", f"sqlite:///{db_path}")
    config.set_main_option("script_location", str(project_root / "migrations"))
    return config


@pytest.fixture(scope="module")
def migrated_engine(alembic_config: Config):
    command.upgrade(alembic_config, "head")
    engine = sa.create_engine(alembic_config.get_main_option("sqlalchemy.url"))
    try:
        yield engine
    finally:
        engine.dispose()


def test_tables_exist(migrated_engine: sa.Engine) -> None:
    tables = set(sa.inspect(migrated_engine).get_table_names())
    assert {"user_profiles", "retailers", "terminals", "sales", "audit_logs"}.issubset(tables)


def test_foreign_keys(migrated_engine: sa.Engine) -> None:
    inspector = sa.inspect(migrated_engine)
    fk_expectations = {
        "retailers": {"user_profile_id": "user_profiles", "agent_profile_id": "user_profiles"},
        "terminals": {"retailer_id": "retailers", "user_profile_id": "user_profiles"},
        "sales": {"terminal_id": "terminals"},
        "audit_logs": {"actor_id": "user_profiles"},
    }

    for table, expected in fk_expectations.items():
        fk_map = {
            tuple(fk["constrained_columns"]): fk["referred_table"]
            for fk in inspector.get_foreign_keys(table)
        }
        for column, target in expected.items():
            assert fk_map[(column,)] == target


def test_lookup_indexes(migrated_engine: sa.Engine) -> None:
    inspector = sa.inspect(migrated_engine)
    assert "ix_terminals_retailer_id" in {index["name"] for index in inspector.get_indexes("terminals")}
    assert {"ix_sales_terminal_id", "ix_sales_created_at"} <= {
        index["name"] for index in inspector.get_indexes("sales")
    }


def test_downgrade_drops_everything(alembic_config: Config, migrated_engine: sa.Engine) -> None:
    command.downgrade(alembic_config, "base")
    tables = set(sa.inspect(migrated_engine).get_table_names())
    assert tables <= {"alembic_version"}
    command.upgrade(alembic_config, "head")
