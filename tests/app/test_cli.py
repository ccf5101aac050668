from __future__ import annotations

import io

import pytest

from internsync.app import LoginSummary
from internsync.config import MissingConfigurationError
from internsync.domain.mapping import map_profile
from internsync.domain.model import Collection
from internsync.domain.session import ResetResult, ResetStage
from internsync.ui import cli
from tests.support.records import profile_row


def test_login_prints_summary(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    captured: dict[str, object] = {}

    async def fake_login(email: str, password: str) -> LoginSummary:
        captured.update(email=email, password=password)
        return LoginSummary(
            authenticated=True,
            profile=map_profile(profile_row("u1", email, name="Ada")),
            counts={Collection.TASKS: 3, Collection.LOGS: 12},
            unread_notifications=2,
        )

    monkeypatch.setattr(cli, "run_login", fake_login)
    monkeypatch.setenv("INTERNSYNC_PASSWORD", "s3cret")

    cli.main(["login", "--email", "ada@example.com"])

    out = capsys.readouterr().out
    assert captured == {"email": "ada@example.com", "password": "s3cret"}
    assert "Signed in as Ada <ada@example.com> (STUDENT)" in out
    assert "tasks" in out
    assert "Unread notifications: 2" in out


def test_login_reads_custom_password_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    passwords: list[str] = []

    async def fake_login(email: str, password: str) -> LoginSummary:  # noqa: ARG001
        passwords.append(password)
        return LoginSummary(authenticated=True)

    monkeypatch.setattr(cli, "run_login", fake_login)
    monkeypatch.setenv("OTHER_PASSWORD", "from-other")

    cli.main(["login", "--email", "ada@example.com", "--password-env", "OTHER_PASSWORD"])

    assert passwords == ["from-other"]


def test_failed_login_exits_with_error(monkeypatch: pytest.MonkeyPatch) -> None:
    async def fake_login(email: str, password: str) -> LoginSummary:  # noqa: ARG001
        return LoginSummary(authenticated=False, message="Invalid login credentials")

    monkeypatch.setattr(cli, "run_login", fake_login)
    monkeypatch.setenv("INTERNSYNC_PASSWORD", "wrong")

    with pytest.raises(SystemExit) as exc:
        cli.main(["login", "--email", "ada@example.com"])

    assert exc.value.code == 1


def test_missing_password_without_terminal(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("INTERNSYNC_PASSWORD", raising=False)
    monkeypatch.setattr("sys.stdin", io.StringIO(""))

    with pytest.raises(SystemExit) as exc:
        cli.main(["login", "--email", "ada@example.com"])

    assert exc.value.code == 2


def test_configuration_error_exits_with_2(monkeypatch: pytest.MonkeyPatch) -> None:
    async def fake_login(email: str, password: str) -> LoginSummary:  # noqa: ARG001
        raise MissingConfigurationError(["SUPABASE_URL"])

    monkeypatch.setattr(cli, "run_login", fake_login)
    monkeypatch.setenv("INTERNSYNC_PASSWORD", "pw")

    with pytest.raises(SystemExit) as exc:
        cli.main(["login", "--email", "ada@example.com"])

    assert exc.value.code == 2


@pytest.mark.parametrize(("ok", "code"), [(True, None), (False, 1)])
def test_reset_password_prints_message(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    ok: bool,  # noqa: FBT001
    code: int | None,
) -> None:
    async def fake_reset(email: str) -> ResetResult:
        return ResetResult(ok=ok, message=f"reset for {email}", stage=ResetStage.REQUEST)

    monkeypatch.setattr(cli, "request_password_reset", fake_reset)

    if code is None:
        cli.main(["reset-password", "--email", "ada@example.com"])
    else:
        with pytest.raises(SystemExit) as exc:
            cli.main(["reset-password", "--email", "ada@example.com"])
        assert exc.value.code == code

    assert "reset for ada@example.com" in capsys.readouterr().out


def test_unknown_arguments_exit_via_argparse() -> None:
    with pytest.raises(SystemExit) as exc:
        cli.main(["sync"])

    assert exc.value.code == 2
