import os
import subprocess
from pathlib import Path
from urllib.parse import urlparse

import docker
import pytest
from docker.errors import DockerException
from testcontainers.postgres import PostgresContainer


def _docker_available() -> bool:
    try:
        docker.from_env().ping()
    except DockerException:
        return False
    return True


pytestmark = pytest.mark.skipif(
    not _docker_available(), reason="Postgres testcontainer needs a Docker daemon"
)


def _alembic(*args, env):
    project_root = Path(__file__).parents[2]
    return subprocess.run(
        ["alembic", *args],
        cwd=project_root,
        env=env,
        capture_output=True,
        text=True,
    )


def test_migration_cycle():
    """Alembic migrations upgrade to head and downgrade to base without errors."""

    with PostgresContainer("postgres:16") as postgres:
        parsed_url = urlparse(postgres.get_connection_url())

        env = os.environ.copy()
        env["DB_USER"] = parsed_url.username
        env["DB_PASSWORD"] = parsed_url.password
        env["DB_HOST"] = parsed_url.hostname
        env["DB_PORT"] = str(parsed_url.port)
        env["DB_NAME"] = parsed_url.path.lstrip("/")
        env["ENVIRONMENT"] = "local"
        env["CACHE_PROVIDER"] = "none"

        upgrade_result = _alembic("upgrade", "head", env=env)
        assert upgrade_result.returncode == 0, f"Upgrade failed: {upgrade_result.stderr}"

        # Reapplying after a full downgrade catches missing drops
        downgrade_result = _alembic("downgrade", "base", env=env)
        assert (
            downgrade_result.returncode == 0
        ), f"Downgrade failed: {downgrade_result.stderr}"

        reupgrade_result = _alembic("upgrade", "head", env=env)
        assert (
            reupgrade_result.returncode == 0
        ), f"Re-upgrade failed: {reupgrade_result.stderr}"
