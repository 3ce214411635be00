"""
Tests for the registration and completion workflow.

These tests cover:
- Direct password registration end to end
- Federated first sign-in routed to completion
- Case-insensitive username collisions
- Write ordering and recovery from partial failures
- Overwrite vs exclusive claims under a simulated race
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from portfoliohub.core.exceptions import (
    AuthenticationError,
    EmailAlreadyRegisteredError,
    StorageError,
    UsernameTakenError,
    ValidationError,
)
from portfoliohub.core.session import SessionContext
from portfoliohub.database.databases import portfolio_db
from portfoliohub.schemas.auth import (
    CompleteProfileRequest,
    NextStep,
    RegisterRequest,
)
from portfoliohub.services.profile_initializer import DEFAULT_FULL_NAME


def register_request(username: str, email: str, password: str = "SecurePassword123!"):
    return RegisterRequest(username=username, email=email, password=password)


def session_for(principal, token: str = "token") -> SessionContext:
    return SessionContext(
        account_id=principal.id,
        email=principal.email,
        token=token,
        display_name=principal.display_name,
        photo_url=principal.photo_url,
    )


class TestDirectRegistration:
    """Tests for register()."""

    async def test_register_creates_account_registry_entry_and_profile(
        self, registration, mock_portfolio_db
    ):
        response = await registration.register(
            register_request("new_user_1", "new@example.com")
        )
        account_id = response.session.account_id

        account = await mock_portfolio_db.accounts.find_one({"_id": account_id})
        assert account["username"] == "new_user_1"
        assert account["email"] == "new@example.com"

        entry = await mock_portfolio_db.usernames.find_one({"_id": "new_user_1"})
        assert entry["account_id"] == account_id

        profile = await mock_portfolio_db.portfolios.find_one({"_id": account_id})
        assert profile["full_name"] == DEFAULT_FULL_NAME
        assert profile["skills"] == []

        assert response.access_token
        assert response.session.needs_completion is False
        assert response.session.next_step == NextStep.DASHBOARD

    async def test_username_is_stored_normalized(self, registration, mock_portfolio_db):
        response = await registration.register(register_request("Alice", "alice@example.com"))

        account = await mock_portfolio_db.accounts.find_one({"_id": response.session.account_id})
        assert account["username"] == "alice"
        assert response.session.username == "alice"

    async def test_case_variant_of_taken_username_is_rejected(
        self, registration, mock_portfolio_db
    ):
        await registration.register(register_request("Alice", "alice@example.com"))

        with pytest.raises(UsernameTakenError) as exc:
            await registration.register(register_request("alice", "other@example.com"))

        assert exc.value.field == "username"
        assert await mock_portfolio_db.accounts.count_documents({}) == 1

    async def test_bad_format_writes_nothing(
        self, registration, mock_identity_db, mock_portfolio_db
    ):
        with pytest.raises(ValidationError):
            await registration.register(register_request("ab", "short@example.com"))

        assert await mock_identity_db.principals.count_documents({}) == 0
        assert await mock_portfolio_db.usernames.count_documents({}) == 0
        assert await mock_portfolio_db.accounts.count_documents({}) == 0
        assert await mock_portfolio_db.portfolios.count_documents({}) == 0

    @pytest.mark.parametrize("username", ["  padded ", "alice ", "\tbob"])
    async def test_whitespace_padded_username_writes_nothing(
        self, registration, mock_identity_db, mock_portfolio_db, username
    ):
        with pytest.raises(ValidationError) as exc:
            await registration.register(register_request(username, "padded@example.com"))

        assert exc.value.field == "username"
        assert await mock_identity_db.principals.count_documents({}) == 0
        assert await mock_portfolio_db.usernames.count_documents({}) == 0
        assert await mock_portfolio_db.accounts.count_documents({}) == 0
        assert await mock_portfolio_db.portfolios.count_documents({}) == 0

    async def test_duplicate_email_is_rejected(self, registration, mock_portfolio_db):
        await registration.register(register_request("first_user", "dup@example.com"))

        with pytest.raises(EmailAlreadyRegisteredError):
            await registration.register(register_request("second_user", "dup@example.com"))

        assert await mock_portfolio_db.usernames.find_one({"_id": "second_user"}) is None

    async def test_short_password_is_rejected_before_any_portfolio_write(
        self, registration, mock_portfolio_db
    ):
        with pytest.raises(AuthenticationError):
            await registration.register(register_request("valid_name", "a@example.com", "123"))

        assert await mock_portfolio_db.usernames.count_documents({}) == 0


class TestOrphanedCredential:
    """A principal whose registration failed after identity creation."""

    async def test_taken_username_leaves_principal_without_account(
        self, registration, identity, mock_portfolio_db
    ):
        await registration.register(register_request("taken", "owner@example.com"))

        with pytest.raises(UsernameTakenError):
            await registration.register(register_request("Taken", "late@example.com"))

        # The credential exists; signing in routes to completion
        response = await registration.sign_in_with_password("late@example.com", "SecurePassword123!")
        assert response.session.needs_completion is True
        assert response.session.next_step == NextStep.COMPLETE_PROFILE

        principal = await identity.authenticate_with_password(
            "late@example.com", "SecurePassword123!"
        )
        status = await registration.complete(
            session_for(principal), CompleteProfileRequest(username="late_user")
        )
        assert status.needs_completion is False
        assert status.username == "late_user"

    async def test_profile_write_failure_is_recoverable(
        self, registration, identity, store, mock_portfolio_db
    ):
        original_put = store.put

        async def failing_put(collection, key, value):
            if collection == portfolio_db.Collections.PORTFOLIOS:
                raise StorageError()
            return await original_put(collection, key, value)

        with patch.object(store, "put", side_effect=failing_put):
            with pytest.raises(StorageError) as exc:
                await registration.register(register_request("flaky", "flaky@example.com"))

        assert exc.value.message == "Failed to save profile. Please try again."
        # Claim landed, Account did not
        assert await mock_portfolio_db.usernames.find_one({"_id": "flaky"}) is not None
        assert await mock_portfolio_db.accounts.count_documents({}) == 0

        principal = await identity.authenticate_with_password(
            "flaky@example.com", "SecurePassword123!"
        )
        status = await registration.resolve_session(session_for(principal))
        assert status.needs_completion is True

        # Retry with the same username: same-owner claim is a no-op
        status = await registration.complete(
            session_for(principal), CompleteProfileRequest(username="flaky")
        )
        assert status.username == "flaky"
        assert await mock_portfolio_db.portfolios.find_one({"_id": principal.id}) is not None


class TestFederatedCompletion:
    """Federated sign-in followed by username completion."""

    async def test_first_federated_sign_in_needs_completion(
        self, registration, federated_claims
    ):
        with patch.object(
            registration.identity, "_verify_id_token", AsyncMock(return_value=federated_claims)
        ):
            response = await registration.sign_in_with_federated("id-token")

        assert response.session.needs_completion is True
        assert response.session.next_step == NextStep.COMPLETE_PROFILE
        assert response.session.username is None

    async def test_completion_uses_provider_avatar_and_session_email(
        self, registration, federated_claims, mock_portfolio_db
    ):
        with patch.object(
            registration.identity, "_verify_id_token", AsyncMock(return_value=federated_claims)
        ):
            response = await registration.sign_in_with_federated("id-token")
        principal = await registration.identity.get_principal(response.session.account_id)

        status = await registration.complete(
            session_for(principal), CompleteProfileRequest(username="Fed_User")
        )

        assert status.next_step == NextStep.DASHBOARD
        account = await mock_portfolio_db.accounts.find_one({"_id": principal.id})
        assert account["email"] == "federated@example.com"
        assert account["username"] == "fed_user"
        profile = await mock_portfolio_db.portfolios.find_one({"_id": principal.id})
        assert profile["profile_picture_url"] == federated_claims["picture"]

    async def test_completion_with_taken_username_keeps_session_usable(
        self, registration, federated_claims, mock_portfolio_db
    ):
        await registration.register(register_request("popular", "first@example.com"))

        with patch.object(
            registration.identity, "_verify_id_token", AsyncMock(return_value=federated_claims)
        ):
            response = await registration.sign_in_with_federated("id-token")
        principal = await registration.identity.get_principal(response.session.account_id)
        session = session_for(principal)

        with pytest.raises(UsernameTakenError):
            await registration.complete(session, CompleteProfileRequest(username="POPULAR"))

        status = await registration.complete(session, CompleteProfileRequest(username="unique_one"))
        assert status.username == "unique_one"

    async def test_completing_a_completed_account_changes_nothing(
        self, registration, identity, mock_portfolio_db
    ):
        await registration.register(register_request("done_user", "done@example.com"))
        principal = await identity.authenticate_with_password(
            "done@example.com", "SecurePassword123!"
        )

        status = await registration.complete(
            session_for(principal), CompleteProfileRequest(username="another_name")
        )

        assert status.username == "done_user"
        assert await mock_portfolio_db.usernames.find_one({"_id": "another_name"}) is None


class TestUsernameRace:
    """Two registrations that both saw the username as available."""

    async def test_overwrite_mode_lets_last_claim_win(
        self, overwrite_registration, mock_portfolio_db
    ):
        with patch.object(
            overwrite_registration.registry, "is_available_for", AsyncMock(return_value=True)
        ):
            first = await overwrite_registration.register(
                register_request("contested", "a@example.com")
            )
            second = await overwrite_registration.register(
                register_request("Contested", "b@example.com")
            )

        entry = await mock_portfolio_db.usernames.find_one({"_id": "contested"})
        assert entry["account_id"] == second.session.account_id

        # Both accounts believe they own the username
        accounts = await mock_portfolio_db.accounts.find({"username": "contested"}).to_list(None)
        assert {a["_id"] for a in accounts} == {
            first.session.account_id,
            second.session.account_id,
        }

    async def test_exclusive_mode_rejects_second_claim(self, registration, mock_portfolio_db):
        with patch.object(
            registration.registry, "is_available_for", AsyncMock(return_value=True)
        ):
            first = await registration.register(register_request("contested", "a@example.com"))
            with pytest.raises(UsernameTakenError):
                await registration.register(register_request("Contested", "b@example.com"))

        entry = await mock_portfolio_db.usernames.find_one({"_id": "contested"})
        assert entry["account_id"] == first.session.account_id
        assert await mock_portfolio_db.accounts.count_documents({"username": "contested"}) == 1


class TestSignOut:
    """Tests for sign_out()."""

    async def test_sign_out_revokes_session_token(self, registration, identity):
        response = await registration.register(register_request("leaver", "leaver@example.com"))
        claims = await identity.verify_session_token(response.access_token)
        principal = await identity.get_principal(claims["sub"])
        session = SessionContext(
            account_id=principal.id,
            email=principal.email,
            token=response.access_token,
            claims=claims,
        )

        await registration.sign_out(session)

        with pytest.raises(AuthenticationError):
            await identity.verify_session_token(response.access_token)


class TestReferenceScenarios:
    """Fixed-id scenarios checking the exact stored documents."""

    @staticmethod
    def fixed_ids(*ids):
        fake_uuid = MagicMock()
        fake_uuid.uuid4.side_effect = [MagicMock(hex=value) for value in ids]
        return patch("portfoliohub.services.identity_provider.uuid", fake_uuid)

    async def test_new_user_end_to_end(self, registration, mock_portfolio_db):
        with self.fixed_ids("acct-1"):
            await registration.register(register_request("new_user_1", "u@example.com"))

        account = await mock_portfolio_db.accounts.find_one({"_id": "acct-1"})
        assert (account["username"], account["email"]) == ("new_user_1", "u@example.com")

        entry = await mock_portfolio_db.usernames.find_one({"_id": "new_user_1"})
        assert entry["account_id"] == "acct-1"

        profile = await mock_portfolio_db.portfolios.find_one({"_id": "acct-1"})
        assert profile["full_name"] == "Your Name"
        assert profile["projects"] == []

        assert await mock_portfolio_db.accounts.count_documents({}) == 1
        assert await mock_portfolio_db.usernames.count_documents({}) == 1
        assert await mock_portfolio_db.portfolios.count_documents({}) == 1

    async def test_federated_principal_is_routed_to_completion_until_done(
        self, registration, federated_claims
    ):
        with self.fixed_ids("acct-2"), patch.object(
            registration.identity, "_verify_id_token", AsyncMock(return_value=federated_claims)
        ):
            first = await registration.sign_in_with_federated("id-token")
            second = await registration.sign_in_with_federated("id-token")

        assert first.session.account_id == "acct-2"
        principal = await registration.identity.get_principal("acct-2")
        session = session_for(principal)

        for response in (first, second):
            assert response.session.next_step == NextStep.COMPLETE_PROFILE
        for _ in range(3):
            status = await registration.resolve_session(session)
            assert status.next_step == NextStep.COMPLETE_PROFILE

        await registration.complete(session, CompleteProfileRequest(username="second_acct"))

        status = await registration.resolve_session(session)
        assert status.next_step == NextStep.DASHBOARD
        assert status.username == "second_acct"
