"""
Registration and completion workflow.

Two entry points (direct password registration, completion after federated
sign-in) converge on the same completion routine:

    claim username -> seed default profile -> write Account

The Account is written last because its presence is what marks a principal
as fully registered. Any failure before that leaves no Account, the next
session check routes the user back to completion, and the retry re-runs
steps that are idempotent for the same account (same-owner claim, full
overwrite seed).
"""
import logging
from typing import Optional

from portfoliohub.config import get_settings
from portfoliohub.core.exceptions import UsernameTakenError
from portfoliohub.core.session import SessionContext
from portfoliohub.database.databases import portfolio_db
from portfoliohub.models.account import Account
from portfoliohub.models.principal import Principal
from portfoliohub.schemas.auth import (
    AuthResponse,
    CompleteProfileRequest,
    NextStep,
    RegisterRequest,
    SessionStatus,
)
from portfoliohub.services.document_store import DocumentStore
from portfoliohub.services.identity_provider import IdentityProvider
from portfoliohub.services.profile_initializer import ProfileInitializer
from portfoliohub.services.username_registry import (
    UsernameRegistry,
    normalize,
    validate_format,
)

logger = logging.getLogger(__name__)


class RegistrationService:
    """Orchestrates identity, username registry, profile seeding and account creation."""

    def __init__(
        self,
        identity: IdentityProvider,
        store: DocumentStore,
        claim_mode: Optional[str] = None,
    ):
        self.identity = identity
        self.store = store
        self.registry = UsernameRegistry(store)
        self.initializer = ProfileInitializer(store)
        self.settings = get_settings()
        self.claim_mode = claim_mode or self.settings.username_claim_mode

    # ==================== Entry points ====================

    async def register(self, request: RegisterRequest) -> AuthResponse:
        """
        Direct registration with username, email and password.

        Raises:
            ValidationError: bad username format (nothing written) or username
                taken (principal already created, no Account)
            AuthenticationError: identity provider refused the principal
            StorageError: a workflow write failed
        """
        validate_format(request.username)

        principal = await self.identity.create_principal_with_password(
            request.email, request.password
        )

        # From here on a failure leaves an orphaned principal; login will
        # find no Account and route to completion.
        await self._complete(principal.id, principal.email, request.username, avatar_url="")

        return await self._auth_response(principal)

    async def sign_in_with_password(self, email: str, password: str) -> AuthResponse:
        """Password sign-in; the response says whether completion is still needed."""
        principal = await self.identity.authenticate_with_password(email, password)
        return await self._auth_response(principal)

    async def sign_in_with_federated(self, id_token: str) -> AuthResponse:
        """Federated sign-in; first-time principals come back with needs_completion."""
        principal = await self.identity.authenticate_with_federated_provider(id_token)
        return await self._auth_response(principal)

    async def complete(
        self, session: SessionContext, request: CompleteProfileRequest
    ) -> SessionStatus:
        """
        Finish registration for an authenticated principal without an Account.

        Email and account id come from the session, never from the request.
        Already-completed accounts are returned unchanged.
        """
        account = await self.get_account(session.account_id)
        if account is not None:
            return self._status(session.account_id, session.email, account)

        validate_format(request.username)
        account = await self._complete(
            session.account_id,
            session.email,
            request.username,
            avatar_url=session.photo_url or "",
        )
        return self._status(session.account_id, session.email, account)

    async def resolve_session(self, session: SessionContext) -> SessionStatus:
        """
        Look the Account up for this session. Must run on every session
        restore: a missing Account is the only signal that completion is pending.
        """
        account = await self.get_account(session.account_id)
        return self._status(session.account_id, session.email, account)

    async def sign_out(self, session: SessionContext) -> None:
        """Invalidate the session token."""
        await self.identity.sign_out(session.claims)

    # ==================== Completion ====================

    async def _complete(
        self,
        account_id: str,
        email: str,
        username: str,
        avatar_url: str,
    ) -> Account:
        key = normalize(username)

        if not await self.registry.is_available_for(key, account_id):
            logger.info("Rejected username %r for %s: unavailable", key, account_id)
            raise UsernameTakenError(key)

        if self.claim_mode == "overwrite":
            await self.registry.claim(key, account_id)
        else:
            await self.registry.claim_exclusive(key, account_id)

        await self.initializer.seed_default(account_id, avatar_url)

        account = Account(_id=account_id, username=key, email=email)
        await self.store.put(
            portfolio_db.Collections.ACCOUNTS,
            account_id,
            account.model_dump(exclude={"id"}),
        )
        logger.info("Registration completed for %s as %r", account_id, key)
        return account

    # ==================== Helpers ====================

    async def get_account(self, account_id: str) -> Optional[Account]:
        """Point read of the Account record."""
        doc = await self.store.get(portfolio_db.Collections.ACCOUNTS, account_id)
        return Account(**doc) if doc else None

    async def _auth_response(self, principal: Principal) -> AuthResponse:
        account = await self.get_account(principal.id)
        return AuthResponse(
            access_token=self.identity.issue_session_token(principal),
            token_type="bearer",
            expires_in=self.settings.jwt_access_token_expire_minutes * 60,
            session=self._status(principal.id, principal.email, account),
        )

    @staticmethod
    def _status(account_id: str, email: str, account: Optional[Account]) -> SessionStatus:
        if account is None:
            return SessionStatus(
                account_id=account_id,
                email=email,
                needs_completion=True,
                next_step=NextStep.COMPLETE_PROFILE,
            )
        return SessionStatus(
            account_id=account_id,
            email=email,
            needs_completion=False,
            next_step=NextStep.DASHBOARD,
            username=account.username,
        )
