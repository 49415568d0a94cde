"""
prizeboard-admin commands against a throwaway sqlite file
"""
import pytest
from click.testing import CliRunner

from prizeboard.cli import cli
from prizeboard.core.config import Settings
from prizeboard.database import Database
from prizeboard.models.admin import AdminUser
from prizeboard.models.competition import Competition
from prizeboard.models.winner import Winner
from prizeboard.services.auth_service import AuthService
from prizeboard.utils.time_utils import utc_now


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'cli.db'}"


@pytest.fixture
def run(database_url):
    runner = CliRunner()

    def invoke(*args):
        return runner.invoke(cli, ["--database-url", database_url, *args])

    return invoke


def test_admin_lifecycle(run, database_url):
    assert run("init-db").exit_code == 0

    created = run("create-admin", "--username", "ops", "--password", "long-enough-pw")
    assert created.exit_code == 0, created.output
    assert "Admin created" in created.output

    duplicate = run("create-admin", "--username", "ops", "--password", "long-enough-pw")
    assert duplicate.exit_code == 1

    listing = run("list-admins")
    assert "ops" in listing.output

    assert run("reset-password", "ops", "--password", "another-long-pw").exit_code == 0
    database = Database(database_url)
    settings = Settings(DATABASE_URL=database_url)
    with database.session() as db:
        token, _ = AuthService(db, settings).login("ops", "another-long-pw", utc_now())
        assert token

    assert run("deactivate", "ops").exit_code == 0
    with database.session() as db:
        assert db.query(AdminUser).filter(AdminUser.username == "ops").one().is_active is False
    database.dispose()


def test_short_password_rejected(run):
    run("init-db")
    result = run("create-admin", "--username", "ops", "--password", "short")
    assert result.exit_code == 1


def test_unknown_admin(run):
    run("init-db")
    assert run("unlock", "ghost").exit_code == 1


def test_seed_demo(run, database_url):
    result = run("seed-demo", "--participants", "5")
    assert result.exit_code == 0, result.output

    database = Database(database_url)
    with database.session() as db:
        assert db.query(Competition).count() == 3
        # only the ended competition gets winners
        assert db.query(Winner).count() == 3
    database.dispose()
