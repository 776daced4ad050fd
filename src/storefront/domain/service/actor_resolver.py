"""Domain service: ActorResolver.

Works out whose cart a request addresses. A signed-in account always wins;
otherwise the browser's anonymous session id is used, and a fresh one is
minted when the client sent none (or sent garbage). Minted ids are routing
metadata, not secrets: they only need to be unique.
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Callable
from dataclasses import dataclass

from storefront.domain.model.value_objects import ActorKey

SESSION_PREFIX = "anon_"
_SESSION_PATTERN = re.compile(r"^anon_[A-Za-z0-9_-]{8,64}$")


def mint_session_id() -> str:
    return f"{SESSION_PREFIX}{uuid.uuid4().hex}"


def is_session_id(value: str | None) -> bool:
    return bool(value) and _SESSION_PATTERN.match(value) is not None


@dataclass(frozen=True)
class RequestContext:
    """The identity-bearing parts of an inbound request.

    ``account_id`` has already been verified by the identity layer.
    """

    account_id: str | None = None
    session_cookie: str | None = None
    session_header: str | None = None


@dataclass(frozen=True)
class ResolvedActor:
    actor_key: ActorKey
    issued_session: str | None = None  # caller must persist this (cookie)
    pending_merge: ActorKey | None = None  # anonymous cart to reconcile at login


class ActorResolver:

    def __init__(self, mint: Callable[[], str] = mint_session_id) -> None:
        self._mint = mint

    def resolve(self, request: RequestContext) -> ResolvedActor:
        """Never raises: every request maps to some actor."""
        session_id = self._client_session(request)

        if request.account_id and request.account_id.strip():
            account = ActorKey.account(request.account_id.strip())
            pending = ActorKey.anonymous(session_id) if session_id else None
            return ResolvedActor(actor_key=account, pending_merge=pending)

        if session_id:
            return ResolvedActor(actor_key=ActorKey.anonymous(session_id))

        minted = self._mint()
        return ResolvedActor(actor_key=ActorKey.anonymous(minted), issued_session=minted)

    @staticmethod
    def _client_session(request: RequestContext) -> str | None:
        for candidate in (request.session_cookie, request.session_header):
            if is_session_id(candidate):
                return candidate
        return None
