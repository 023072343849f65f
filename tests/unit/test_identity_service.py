"""Unit tests for IdentityService (lifetrack/services/identity_service.py)"""
import json
import pytest

from lifetrack.models import Claim, ClientPrincipal, User
from lifetrack.services import IdentityService, StaticPrincipalProvider


def principal(**claims) -> ClientPrincipal:
    return ClientPrincipal(
        identity_provider="aad",
        claims=[Claim(type=t, value=v) for t, v in claims.items()],
    )


def identity_for(goals_service, p: ClientPrincipal) -> IdentityService:
    return IdentityService(StaticPrincipalProvider(p), goals_service)


@pytest.mark.asyncio
async def test_unauthenticated_returns_empty_profile(make_goals_service):
    service = make_goals_service()
    identity = identity_for(service, ClientPrincipal())

    user = await identity.get_current_user()

    assert user == User()
    assert service.initialized is False


@pytest.mark.asyncio
async def test_claims_merged_into_profile(make_goals_service, remote_store):
    service = make_goals_service()
    identity = identity_for(service, principal(
        oid="oid-123",
        preferred_username="ada@example.com",
        name="Ada Lovelace",
    ))

    user = await identity.get_current_user()

    assert user.object_id == "oid-123"
    assert user.email == "ada@example.com"
    assert user.username == "Ada Lovelace"
    assert service.namespace == "oid-123"

    saved = json.loads(remote_store.documents["user_oid-123.json"])
    assert saved["ObjectId"] == "oid-123"
    assert saved["Username"] == "Ada Lovelace"


@pytest.mark.asyncio
async def test_username_falls_back_to_email_local_part(make_goals_service):
    identity = identity_for(make_goals_service(), principal(
        oid="oid-123",
        preferred_username="grace.hopper@example.com",
    ))

    user = await identity.get_current_user()

    assert user.username == "grace.hopper"


@pytest.mark.asyncio
async def test_long_form_claim_types(make_goals_service):
    identity = identity_for(make_goals_service(), principal(**{
        "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/nameidentifier": "nid-9",
        "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/emailaddress": "ada@example.com",
        "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/name": "Ada",
    }))

    user = await identity.get_current_user()

    assert user.object_id == "nid-9"
    assert user.email == "ada@example.com"
    assert user.username == "Ada"


@pytest.mark.asyncio
async def test_custom_username_is_kept(make_goals_service, remote_store):
    await remote_store.put("user_oid-123.json", User(id=1, username="Countess", total_points=70))
    identity = identity_for(make_goals_service(), principal(oid="oid-123", name="Ada Lovelace"))

    user = await identity.get_current_user()

    assert user.username == "Countess"
    assert user.total_points == 70


@pytest.mark.asyncio
async def test_same_identity_does_not_reload(make_goals_service, remote_store):
    service = make_goals_service()
    identity = identity_for(service, principal(oid="oid-123", name="Ada"))

    await identity.get_current_user()
    await service.complete_goal(1, 1)
    reads = len(remote_store.reads)

    user = await identity.get_current_user()

    assert len(remote_store.reads) == reads
    assert user.total_points == 10


@pytest.mark.asyncio
async def test_identity_change_switches_namespace(make_goals_service):
    service = make_goals_service()

    await identity_for(service, principal(oid="first", name="First")).get_current_user()
    await service.complete_goal(1, 1)

    user = await identity_for(service, principal(oid="second", name="Second")).get_current_user()

    assert service.namespace == "second"
    assert user.username == "Second"
    assert user.total_points == 0


@pytest.mark.asyncio
async def test_resolve_namespace_anonymous_initializes_default(make_goals_service):
    service = make_goals_service()

    assert await identity_for(service, ClientPrincipal()).resolve_namespace() == ""
    assert service.initialized is True
    assert service.namespace == ""


@pytest.mark.asyncio
async def test_get_user_claims(make_goals_service):
    identity = identity_for(make_goals_service(), principal(oid="oid-1", name="Ada"))

    claims = await identity.get_user_claims()

    assert claims == {"oid": "oid-1", "name": "Ada"}


@pytest.mark.asyncio
async def test_principal_without_object_id_gets_empty_profile(make_goals_service, remote_store):
    service = make_goals_service()
    identity = identity_for(service, principal(preferred_username="eve@example.com", name="Eve"))

    user = await identity.get_current_user()

    assert user == User()
    assert remote_store.documents == {}


@pytest.mark.asyncio
async def test_resolve_namespace_without_object_id_uses_default(make_goals_service):
    service = make_goals_service()

    namespace = await identity_for(service, principal(name="Eve")).resolve_namespace()

    assert namespace == ""
    assert service.namespace == ""
    assert service.initialized is True
