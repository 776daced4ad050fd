"""Unit tests for request-to-actor resolution."""

from storefront.domain.model.value_objects import ActorKey, ActorKind
from storefront.domain.service.actor_resolver import (
    ActorResolver,
    RequestContext,
    is_session_id,
    mint_session_id,
)

SESSION = "anon_0123456789abcdef"


def _resolver() -> ActorResolver:
    return ActorResolver(mint=lambda: "anon_minted000001")


class TestSessionIds:

    def test_minted_ids_are_well_formed_and_unique(self):
        a, b = mint_session_id(), mint_session_id()
        assert is_session_id(a) and is_session_id(b)
        assert a != b

    def test_rejects_foreign_tokens(self):
        assert not is_session_id("session_123456789")
        assert not is_session_id("anon_short")
        assert not is_session_id("anon_<script>alert(1)</script>")
        assert not is_session_id(None)


class TestResolve:

    def test_account_wins(self):
        resolved = _resolver().resolve(RequestContext(account_id="42"))
        assert resolved.actor_key == ActorKey.account("42")
        assert resolved.issued_session is None
        assert resolved.pending_merge is None

    def test_account_with_session_flags_merge(self):
        resolved = _resolver().resolve(RequestContext(account_id="42", session_cookie=SESSION))
        assert resolved.actor_key.kind is ActorKind.ACCOUNT
        assert resolved.pending_merge == ActorKey.anonymous(SESSION)

    def test_cookie_reused(self):
        resolved = _resolver().resolve(RequestContext(session_cookie=SESSION))
        assert resolved.actor_key == ActorKey.anonymous(SESSION)
        assert resolved.issued_session is None

    def test_header_used_when_no_cookie(self):
        resolved = _resolver().resolve(RequestContext(session_header=SESSION))
        assert resolved.actor_key == ActorKey.anonymous(SESSION)

    def test_cookie_preferred_over_header(self):
        other = "anon_fedcba9876543210"
        resolved = _resolver().resolve(RequestContext(session_cookie=SESSION, session_header=other))
        assert resolved.actor_key.id == SESSION

    def test_missing_token_mints_one(self):
        resolved = _resolver().resolve(RequestContext())
        assert resolved.actor_key == ActorKey.anonymous("anon_minted000001")
        assert resolved.issued_session == "anon_minted000001"

    def test_malformed_token_replaced(self):
        resolved = _resolver().resolve(RequestContext(session_cookie="garbage"))
        assert resolved.issued_session == "anon_minted000001"

    def test_blank_account_falls_back_to_session(self):
        resolved = _resolver().resolve(RequestContext(account_id="  ", session_cookie=SESSION))
        assert resolved.actor_key == ActorKey.anonymous(SESSION)
