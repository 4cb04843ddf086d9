"""Alembic migration tests.

File named test_zzz_alembic.py to sort LAST in pytest collection order.
"""

import os
import subprocess
import tempfile
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture
def migration_env() -> dict[str, str]:
    fd, path = tempfile.mkstemp(prefix="ambassador_migrate_", suffix=".db")
    os.close(fd)
    env = dict(os.environ)
    env["AMB_DATABASE_URL"] = f"sqlite+aiosqlite:///{path}"
    return env


def test_alembic_upgrade_head(migration_env) -> None:
    """alembic upgrade head succeeds on an empty database."""
    result = subprocess.run(
        ["alembic", "upgrade", "head"],
        capture_output=True,
        text=True,
        cwd=ROOT,
        env=migration_env,
    )
    assert result.returncode == 0, f"alembic upgrade failed: {result.stderr}"

    current = subprocess.run(
        ["alembic", "current"],
        capture_output=True,
        text=True,
        cwd=ROOT,
        env=migration_env,
    )
    assert current.returncode == 0
    assert "001_ambassador_tables" in current.stdout
