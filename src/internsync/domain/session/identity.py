"""Resolve an authenticated identity to its application profile.

Identities and profiles live in two systems that can drift apart: seeded demo
accounts, half-finished writes and manual edits all leave a profile whose id is not
the identity's auth id, or no profile at all. Resolution heals both cases:

1. look the profile up by auth id;
2. otherwise look it up by email and rewrite its id to the auth id;
3. otherwise create a fresh STUDENT/ACTIVE profile (a uniqueness conflict on email
   means another path created it concurrently, so the link step runs once more);

and then applies the status gate. Every failed or rejected resolution signs the
identity out before returning.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from internsync.domain.mapping import AVATAR_BASE_URL, avatar_url, map_profile, to_payload
from internsync.domain.model import (
    DEFAULT_HOURS_REQUIRED,
    Collection,
    Role,
    UserStatus,
)
from internsync.domain.ports import DbError, GatewayError

from .contracts import (
    PENDING_APPROVAL_MESSAGE,
    REGISTRATION_REJECTED_MESSAGE,
    Established,
    Failed,
    IdentityResolution,
    Rejected,
    ResolutionPath,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from internsync.domain.model import Identity, Profile
    from internsync.domain.ports import RemoteGateway

    from .contracts import Registration


log = getLogger(__name__)


def display_name_from_email(email: str) -> str:
    local_part = email.split("@", 1)[0]
    return local_part or "User"


class IdentityResolver:
    def __init__(
        self,
        gateway: RemoteGateway,
        *,
        hours_required: int = DEFAULT_HOURS_REQUIRED,
        avatar_base_url: str = AVATAR_BASE_URL,
        sign_out: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        self._gateway = gateway
        self._sign_out = sign_out or gateway.sign_out
        self._hours_required = hours_required
        self._avatar_base_url = avatar_base_url

    async def resolve(self, identity: Identity) -> IdentityResolution:
        try:
            record = await self._gateway.find(Collection.USERS, {"id": identity.auth_id})
        except GatewayError as exc:
            return await self._fail(f"Login error: {exc}", exc)
        if record is not None:
            log.info("Resolved profile %s directly", identity.auth_id)
            return await self._gate(map_profile(record), ResolutionPath.DIRECT)

        log.info("No profile for auth id %s; checking email", identity.auth_id)
        if identity.email:
            try:
                record = await self._gateway.find(Collection.USERS, {"email": identity.email})
            except GatewayError as exc:
                return await self._fail(f"Login error: {exc}", exc)
            if record is not None:
                return await self._link_or_fail(identity)

        return await self._create(identity)

    async def enroll(self, identity: Identity, registration: Registration) -> IdentityResolution:
        """Write the profile for a freshly registered identity.

        Supervisors start PENDING and are signed out straight away; everyone else
        starts ACTIVE. An existing row with the same email is linked instead.
        """

        status = UserStatus.PENDING if registration.role is Role.SUPERVISOR else UserStatus.ACTIVE
        payload: dict[str, object] = {
            "id": identity.auth_id,
            "email": registration.email,
            "name": registration.name,
            "role": registration.role,
            "status": status,
            "avatar": avatar_url(registration.name, base_url=self._avatar_base_url),
            "phone": registration.phone,
            "institution": registration.institution,
            "department": registration.department,
            "bio": registration.bio,
            "hobbies": registration.hobbies,
            "profile_skills": registration.profile_skills,
            "achievements": (),
            "future_goals": (),
        }
        if registration.role is Role.STUDENT:
            payload["total_hours_required"] = self._hours_required

        try:
            record = await self._gateway.insert(Collection.USERS, to_payload(payload))
            profile = map_profile(record)
            path = ResolutionPath.CREATED
        except DbError as exc:
            if not exc.is_unique_violation:
                return await self._fail(
                    f"Account created but profile setup failed: {exc}", exc
                )
            log.info("Profile for %s already exists; linking", registration.email)
            try:
                profile = await self._link(identity.auth_id, registration.email)
            except GatewayError as link_exc:
                return await self._fail(
                    f"Account already exists but could not be linked: {link_exc}", link_exc
                )
            path = ResolutionPath.LINKED
        except GatewayError as exc:
            return await self._fail(f"Account created but profile setup failed: {exc}", exc)

        return await self._gate(profile, path)

    # -- steps ------------------------------------------------------------------------

    async def _link(self, auth_id: str, email: str) -> Profile:
        record = await self._gateway.update_where(
            Collection.USERS, {"email": email}, {"id": auth_id}
        )
        profile = map_profile(record)
        if profile.id != auth_id:
            raise DbError(f"linked profile id {profile.id!r} does not match {auth_id!r}")
        return profile

    async def _link_or_fail(self, identity: Identity) -> IdentityResolution:
        log.info("Linking auth id %s to the profile for %s", identity.auth_id, identity.email)
        try:
            profile = await self._link(identity.auth_id, identity.email)
        except GatewayError as exc:
            return await self._fail(f"Login failed: Could not link profile. ({exc})", exc)
        return await self._gate(profile, ResolutionPath.LINKED)

    async def _create(self, identity: Identity) -> IdentityResolution:
        log.info("Creating a profile for auth id %s", identity.auth_id)
        name = display_name_from_email(identity.email)
        payload = to_payload(
            {
                "id": identity.auth_id,
                "email": identity.email,
                "name": name,
                "role": Role.STUDENT,
                "status": UserStatus.ACTIVE,
                "avatar": avatar_url(name, base_url=self._avatar_base_url),
                "total_hours_required": self._hours_required,
                "hobbies": (),
                "profile_skills": (),
                "achievements": (),
                "future_goals": (),
            }
        )
        try:
            record = await self._gateway.insert(Collection.USERS, payload)
        except DbError as exc:
            if exc.is_unique_violation and identity.email:
                log.info("Profile for %s was created concurrently; linking", identity.email)
                try:
                    profile = await self._link(identity.auth_id, identity.email)
                except GatewayError as link_exc:
                    return await self._fail(
                        f"Login failed: Profile creation failed. ({exc})", link_exc
                    )
                return await self._gate(profile, ResolutionPath.LINKED)
            return await self._fail(f"Login failed: Profile creation failed. ({exc})", exc)
        except GatewayError as exc:
            return await self._fail(f"Login failed: Profile creation failed. ({exc})", exc)
        return await self._gate(map_profile(record), ResolutionPath.CREATED)

    async def _gate(self, profile: Profile, path: ResolutionPath) -> IdentityResolution:
        if profile.is_pending_supervisor:
            log.info("Profile %s is a supervisor pending approval", profile.id)
            await self.sign_out()
            return Rejected(profile=profile, message=PENDING_APPROVAL_MESSAGE)
        if profile.status is UserStatus.REJECTED:
            log.info("Profile %s registration was rejected", profile.id)
            await self.sign_out()
            return Rejected(profile=profile, message=REGISTRATION_REJECTED_MESSAGE)
        return Established(profile=profile, path=path)

    async def _fail(self, message: str, exc: GatewayError) -> Failed:
        log.error("Identity resolution failed: %s", exc)
        await self.sign_out()
        return Failed(message=message)

    async def sign_out(self) -> None:
        try:
            await self._sign_out()
        except GatewayError as exc:
            log.warning("Sign-out after failed resolution did not complete: %s", exc)

