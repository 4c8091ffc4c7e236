from datetime import timedelta
from models.refresh_tokens import RefreshToken
from models.types import utcnow
from services.refresh_token_store import RefreshTokenStore
import commands.prune_tokens as prune_tokens
from conftest import TestingSessionLocal, create_user


def test_prune_command(session, monkeypatch, capsys):
    user = create_user(session)
    store = RefreshTokenStore(session, refresh_ttl=timedelta(days=30))
    _, stale = store.issue(user.id)
    stale.revoked_at = utcnow() - timedelta(days=40)
    _, fresh = store.issue(user.id)
    fresh.revoked_at = utcnow() - timedelta(days=10)
    session.commit()

    monkeypatch.setattr(prune_tokens, "SessionLocal", TestingSessionLocal)

    assert prune_tokens.main(["--days", "30"]) == 0

    output = capsys.readouterr().out
    assert "Deleted 1 revoked refresh tokens older than 30 days." in output
    assert session.query(RefreshToken).count() == 1


def test_prune_command_rejects_negative_days(capsys):
    assert prune_tokens.main(["--days", "-1"]) == 2
