import pytest

from campuseats.services.session_service import SIGNED_IN, SIGNED_OUT, AuthenticationError, SessionProvider


@pytest.mark.asyncio
async def test_sign_up_sign_in_sign_out(db):
    sessions = SessionProvider()
    events = []

    async def listener(event, user, token):
        events.append((event, user.email, token))

    sessions.on_auth_change(listener)
    user = await sessions.sign_up("Asha@Example.com", "secret1")
    assert user.email == "asha@example.com"
    assert user.password_hash != "secret1"

    token, signed_in = await sessions.sign_in("asha@example.com", "secret1")
    assert signed_in.id == user.id
    assert (await sessions.get_current_user(token)).id == user.id

    await sessions.sign_out(token)
    assert await sessions.get_current_user(token) is None
    assert events == [(SIGNED_IN, user.email, token), (SIGNED_OUT, user.email, token)]


@pytest.mark.asyncio
async def test_duplicate_email_rejected(db):
    sessions = SessionProvider()
    await sessions.sign_up("asha@example.com", "secret1")
    with pytest.raises(ValueError):
        await sessions.sign_up("ASHA@example.com", "other-secret")


@pytest.mark.asyncio
async def test_wrong_password(db):
    sessions = SessionProvider()
    await sessions.sign_up("asha@example.com", "secret1")
    with pytest.raises(AuthenticationError):
        await sessions.sign_in("asha@example.com", "wrong")
    with pytest.raises(AuthenticationError):
        await sessions.sign_in("nobody@example.com", "secret1")


@pytest.mark.asyncio
async def test_failing_listener_does_not_block_sign_in(db):
    sessions = SessionProvider()

    async def broken(event, user, token):
        raise RuntimeError("listener crashed")

    unsubscribe = sessions.on_auth_change(broken)
    await sessions.sign_up("asha@example.com", "secret1")
    token, _ = await sessions.sign_in("asha@example.com", "secret1")
    assert token

    unsubscribe()
    unsubscribe()
    assert await sessions.get_current_user(None) is None
