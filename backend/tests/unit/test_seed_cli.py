from sqlalchemy import func, select

from userhub.models.user import User
from userhub.seeds.seed_data import USER_FIXTURES, seed_users
from userhub.services.users import UserService


def _active_count(session) -> int:
    stmt = select(func.count()).select_from(User).where(User.deleted_at.is_(None))
    return session.execute(stmt).scalar_one()


def test_seed_run_is_idempotent(app, session):
    runner = app.test_cli_runner()

    first = runner.invoke(args=["seed", "run"])
    assert first.exit_code == 0, first.output
    assert f"created={len(USER_FIXTURES):>2}" in first.output

    second = runner.invoke(args=["seed", "run"])
    assert second.exit_code == 0, second.output
    assert f"existing={len(USER_FIXTURES):>2}" in second.output

    assert _active_count(session) == len(USER_FIXTURES)


def test_seed_fresh_refused_in_production(app, session, monkeypatch):
    monkeypatch.setitem(app.config, "APP_ENV", "production")

    result = app.test_cli_runner().invoke(args=["seed", "fresh", "--yes"])

    assert result.exit_code != 0
    assert "restricted to non-production" in result.output


def test_seed_users_with_explicit_service(session):
    summary = seed_users(UserService())
    assert summary == {"users": {"created": len(USER_FIXTURES), "existing": 0}}
