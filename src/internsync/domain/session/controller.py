"""Session lifecycle: bootstrap, explicit login/registration/logout and teardown.

The controller owns the per-session objects. A :class:`MirrorStore` and everything
that writes to it is created when a session is established and closed when it ends,
so no state outlives the session that produced it.

Session-change events from the gateway are queued and handled by a single consumer
task in arrival order.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections import deque
from dataclasses import dataclass
from datetime import UTC, datetime
from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING

from internsync.domain.mapping import AVATAR_BASE_URL, map_record
from internsync.domain.mirror import MirrorStore, MutationApplier
from internsync.domain.model import DEFAULT_HOURS_REQUIRED, Collection, Role
from internsync.domain.ports import AuthError, GatewayError, SessionEvent
from internsync.domain.rules import DEFAULT_BADGES, DEFAULT_SKILLS, AchievementService
from internsync.domain.workspace import Workspace

from .contracts import (
    PROFILE_MISSING_MESSAGE,
    REGISTERED_MESSAGE,
    REGISTERED_PENDING_MESSAGE,
    Established,
    Rejected,
    SessionOutcome,
    SessionState,
)
from .identity import IdentityResolver

if TYPE_CHECKING:
    from collections.abc import Callable

    from internsync.domain.model import Entity, Identity, Profile, Session
    from internsync.domain.ports import RemoteGateway, Unsubscribe

    from .contracts import Registration


log = getLogger(__name__)

FALLBACK_CATALOGS: dict[Collection, tuple[Entity, ...]] = {
    Collection.BADGES: DEFAULT_BADGES,
    Collection.SKILLS: DEFAULT_SKILLS,
}

# Only tokens whose SIGNED_IN event may still be queued need remembering.
HANDLED_TOKEN_LIMIT = 16


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class ActiveSession:
    """Everything that exists only while a profile is signed in."""

    profile_id: str
    store: MirrorStore
    applier: MutationApplier
    achievements: AchievementService
    workspace: Workspace

    @property
    def profile(self) -> Profile | None:
        return self.store.profile(self.profile_id)


class SessionController:
    def __init__(
        self,
        gateway: RemoteGateway,
        *,
        hours_required: int = DEFAULT_HOURS_REQUIRED,
        avatar_base_url: str = AVATAR_BASE_URL,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._gateway = gateway
        self._resolver = IdentityResolver(
            gateway,
            hours_required=hours_required,
            avatar_base_url=avatar_base_url,
            sign_out=self._sign_out,
        )
        self._hours_required = hours_required
        self._avatar_base_url = avatar_base_url
        self._clock = clock

        self.state = SessionState.SIGNED_OUT
        self.active: ActiveSession | None = None
        self.login_error: str | None = None
        self._online = True
        # Bumped at every teardown so a resolution that finishes after sign-out is dropped.
        self._generation = 0
        self._handled_tokens: deque[str] = deque(maxlen=HANDLED_TOKEN_LIMIT)
        # SIGNED_OUT events still expected for sign-outs this controller issued.
        self._own_sign_outs = 0

        self._events: asyncio.Queue[tuple[SessionEvent, Session | None]] = asyncio.Queue()
        self._consumer: asyncio.Task[None] | None = None
        self._unsubscribe: Unsubscribe | None = None

    # -- lifecycle --------------------------------------------------------------------

    @property
    def is_authenticated(self) -> bool:
        return self.state is SessionState.ESTABLISHED

    @property
    def profile(self) -> Profile | None:
        return self.active.profile if self.active is not None else None

    async def start(self) -> SessionOutcome:
        """Subscribe to session changes and restore any existing session."""

        if self._unsubscribe is None:
            self._unsubscribe = self._gateway.on_session_change(self._enqueue)
        if self._consumer is None:
            self._consumer = asyncio.create_task(self._consume(), name="internsync-session-events")
        return await self.bootstrap()

    async def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._consumer is not None:
            self._consumer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._consumer
            self._consumer = None
        self._teardown()

    async def wait_idle(self) -> None:
        """Wait until every delivered session event has been handled."""

        # events scheduled with call_soon are queued on the next loop iteration
        await asyncio.sleep(0)
        await self._events.join()

    async def bootstrap(self) -> SessionOutcome:
        try:
            session = await self._gateway.get_session()
        except GatewayError as exc:
            log.error("Auth init error: %s", exc)
            return SessionOutcome(authenticated=False)
        if session is None:
            log.info("No stored session")
            return SessionOutcome(authenticated=False)
        self._handled_tokens.append(session.access_token)
        return await self._resolve_and_establish(session.identity)

    # -- explicit actions -------------------------------------------------------------

    async def login(self, email: str, password: str) -> SessionOutcome:
        self.login_error = None
        try:
            session = await self._gateway.sign_in_with_password(email, password)
        except AuthError as exc:
            return self._deny(str(exc))
        except GatewayError as exc:
            return self._deny(f"Unexpected login error: {exc}")
        self._handled_tokens.append(session.access_token)
        return await self._resolve_and_establish(session.identity)

    async def sign_up(self, registration: Registration, password: str) -> SessionOutcome:
        self.login_error = None
        try:
            result = await self._gateway.sign_up(registration.email, password)
        except AuthError as exc:
            return self._deny(str(exc))
        except GatewayError as exc:
            return self._deny(f"Unexpected registration error: {exc}")
        if result.session is not None:
            self._handled_tokens.append(result.session.access_token)

        generation = self._generation
        self.state = SessionState.RESOLVING
        resolution = await self._resolver.enroll(result.identity, registration)
        if isinstance(resolution, Rejected) and resolution.profile.is_pending_supervisor:
            self._reset_resolving(generation)
            return SessionOutcome(authenticated=False, message=REGISTERED_PENDING_MESSAGE)
        if not isinstance(resolution, Established):
            self._reset_resolving(generation)
            return self._deny(resolution.message)

        if registration.role is Role.SUPERVISOR:
            await self._resolver.sign_out()
            self._reset_resolving(generation)
            return SessionOutcome(authenticated=False, message=REGISTERED_PENDING_MESSAGE)
        if result.session is None:
            self._reset_resolving(generation)
            return SessionOutcome(authenticated=False, message=REGISTERED_MESSAGE)
        return await self._establish(resolution, generation)

    async def logout(self) -> None:
        """Clear local state first, then sign out remotely."""

        self._teardown()
        try:
            await self._sign_out()
        except GatewayError as exc:
            log.error("Sign out error: %s", exc)

    async def current_profile_or_sign_out(self) -> Profile | None:
        """Return the signed-in profile, forcing sign-out if it vanished from the mirror."""

        if self.active is None:
            return None
        profile = self.active.profile
        if profile is None:
            log.error(
                "Authenticated without a profile for %s; signing out", self.active.profile_id
            )
            await self.logout()
            self.login_error = PROFILE_MISSING_MESSAGE
        return profile

    def set_online(self, online: bool) -> None:  # noqa: FBT001
        self._online = online
        if self.active is not None:
            self.active.applier.online = online

    # -- establishment ----------------------------------------------------------------

    async def _resolve_and_establish(self, identity: Identity) -> SessionOutcome:
        generation = self._generation
        self.state = SessionState.RESOLVING
        resolution = await self._resolver.resolve(identity)
        if not isinstance(resolution, Established):
            self._reset_resolving(generation)
            return self._deny(resolution.message)
        return await self._establish(resolution, generation)

    async def _establish(self, resolution: Established, generation: int) -> SessionOutcome:
        if generation != self._generation:
            log.info("Session ended while resolving %s; discarding", resolution.profile.id)
            return SessionOutcome(authenticated=False)

        profile = resolution.profile
        store = MirrorStore()
        store.put(profile)
        # published only after hydration; no write lands between snapshot and replace
        try:
            await self.hydrate(store, profile)
        except BaseException:
            store.close()
            self._reset_resolving(generation)
            raise
        if generation != self._generation:
            log.info("Session ended while hydrating %s; discarding", profile.id)
            store.close()
            return SessionOutcome(authenticated=False)

        applier = MutationApplier(self._gateway, store)
        applier.online = self._online
        achievements = AchievementService(applier, clock=self._clock)
        achievements.attach()
        workspace = Workspace(
            applier,
            profile.id,
            hours_required=self._hours_required,
            avatar_base_url=self._avatar_base_url,
            clock=self._clock,
        )
        self.active = ActiveSession(
            profile_id=profile.id,
            store=store,
            applier=applier,
            achievements=achievements,
            workspace=workspace,
        )
        self.state = SessionState.ESTABLISHED
        self.login_error = None
        log.info("Session established for %s (%s)", profile.id, resolution.path)
        return SessionOutcome(authenticated=True, profile=self.profile or profile)

    async def hydrate(self, store: MirrorStore, profile: Profile) -> None:
        """Fetch every collection concurrently and replace the mirror's contents."""

        collections = list(Collection)
        results = await asyncio.gather(
            *(self._gateway.list_all(collection) for collection in collections),
            return_exceptions=True,
        )
        for collection, result in zip(collections, results, strict=True):
            if isinstance(result, GatewayError):
                log.error("Error fetching %s: %s", collection, result)
                if collection in FALLBACK_CATALOGS:
                    store.replace_collection(collection, FALLBACK_CATALOGS[collection])
                continue
            if isinstance(result, BaseException):
                raise result
            mapped = map(partial(map_record, collection), result)
            entities = [entity for entity in mapped if entity.id]
            if not entities and collection in FALLBACK_CATALOGS:
                entities = list(FALLBACK_CATALOGS[collection])
            store.replace_collection(collection, entities)

        if store.profile(profile.id) is None:
            store.put(profile)
        log.info("Hydrated mirror: %s", {str(key): value for key, value in store.counts().items()})

    # -- teardown ---------------------------------------------------------------------

    def _teardown(self) -> None:
        self._generation += 1
        if self.active is not None:
            self.active.store.close()
            self.active = None
        self.state = SessionState.SIGNED_OUT

    async def _sign_out(self) -> None:
        self._own_sign_outs += 1
        try:
            await self._gateway.sign_out()
        except GatewayError:
            self._own_sign_outs -= 1
            raise

    def _reset_resolving(self, generation: int) -> None:
        if generation == self._generation:
            self.state = SessionState.SIGNED_OUT

    def _deny(self, message: str) -> SessionOutcome:
        self.login_error = message
        return SessionOutcome(authenticated=False, message=message)

    # -- session-change events --------------------------------------------------------

    def _enqueue(self, event: SessionEvent, session: Session | None) -> None:
        self._events.put_nowait((event, session))

    async def _consume(self) -> None:
        while True:
            event, session = await self._events.get()
            try:
                await self._handle(event, session)
            finally:
                self._events.task_done()

    async def _handle(self, event: SessionEvent, session: Session | None) -> None:
        if event is SessionEvent.SIGNED_OUT:
            if self._own_sign_outs > 0:
                self._own_sign_outs -= 1
                log.debug("Sign-out already applied locally")
                return
            if self.state is not SessionState.SIGNED_OUT:
                log.info("Signed out remotely")
            self._teardown()
            return

        if session is None:
            return
        if session.access_token in self._handled_tokens:
            log.debug("Sign-in already handled by the initiating call")
            return
        if self.state is not SessionState.SIGNED_OUT:
            log.debug("Ignoring sign-in event while %s", self.state)
            return
        self._handled_tokens.append(session.access_token)
        await self._resolve_and_establish(session.identity)
