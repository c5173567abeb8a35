"""User Repository — first login creates, later logins refresh, created_at sticks."""

from calcshare.core.domain_types import CollectionName
from calcshare.core.records import CallerIdentity
from calcshare.services.user_repository import UserRepository


async def test_first_login_creates_profile(users, store):
    identity = CallerIdentity(user_id="u1", email="a@example.com", name="Ada", picture="p1")
    profile = await users.record_login(identity)

    assert profile.id == "u1"
    assert profile.email == "a@example.com"
    assert profile.created_at == profile.last_login
    assert store.snapshots[CollectionName.USERS]["u1"]["name"] == "Ada"


async def test_later_login_refreshes_attributes_keeps_created_at(users):
    first = await users.record_login(CallerIdentity(user_id="u1", name="Ada"))
    created_at = first.created_at

    second = await users.record_login(
        CallerIdentity(user_id="u1", name="Ada L.", email="new@example.com"),
    )

    assert second.created_at == created_at
    assert second.last_login >= created_at
    assert second.name == "Ada L."
    assert second.email == "new@example.com"
    assert len(users) == 1


async def test_get_unknown_user_returns_none(users):
    assert await users.get("nobody") is None


async def test_users_survive_reload(store):
    repo = UserRepository(store)
    await repo.record_login(CallerIdentity(user_id="u1", email="a@example.com"))

    reloaded = UserRepository(store)
    assert await reloaded.load() == 1
    assert (await reloaded.get("u1")).email == "a@example.com"


async def test_user_persistence_failure_is_logged(users, store, caplog):
    store.fail_saves = True
    with caplog.at_level("ERROR"):
        profile = await users.record_login(CallerIdentity(user_id="u1"))
    assert profile.id == "u1"
    assert "memory and disk diverge" in caplog.text
