# users/tests/test_claims.py
import uuid
from types import SimpleNamespace

import pytest
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.tokens import AccessToken

from users.access_levels import AccessLevel
from users.claims import (AccessLevelRefreshToken, get_system_access_level,
                          get_user_id, principal_from_payload,
                          principal_from_request)

from .factories import UserFactory, issue_tokens


class TestClaimParsing:
    def test_user_id(self):
        user_id = uuid.uuid4()
        assert get_user_id({"user_id": str(user_id)}) == user_id

    @pytest.mark.parametrize("payload", [None, {}, {"user_id": None}, {"user_id": "nope"}, {"user_id": 42}])
    def test_user_id_missing_or_invalid(self, payload):
        assert get_user_id(payload) is None

    @pytest.mark.parametrize(
        "claim, expected",
        [("Admin", AccessLevel.ADMIN), ("member", AccessLevel.MEMBER), (20, AccessLevel.OWNER), ("0", AccessLevel.GUEST)],
    )
    def test_access_level(self, claim, expected):
        assert get_system_access_level({"access_level": claim}) is expected

    @pytest.mark.parametrize("payload", [None, {}, {"access_level": "root"}, {"access_level": 99}])
    def test_access_level_missing_or_invalid(self, payload):
        assert get_system_access_level(payload) is None

    def test_principal_without_level(self):
        principal = principal_from_payload({"user_id": str(uuid.uuid4())})
        assert principal.system_access_level is None
        assert not principal.is_admin

    def test_principal_requires_user_id(self):
        assert principal_from_payload({"access_level": "Admin"}) is None


@pytest.mark.django_db
class TestTokens:
    def test_issued_access_token_carries_claims(self):
        user = UserFactory(access_level=AccessLevel.OWNER)
        tokens = issue_tokens(user)

        payload = AccessToken(tokens["access"]).payload
        assert payload["user_id"] == str(user.id)
        assert payload["access_level"] == "Owner"

    def test_principal_from_token_request(self):
        user = UserFactory(access_level=AccessLevel.ADMIN)
        token = AccessToken(issue_tokens(user)["access"])

        principal = principal_from_request(SimpleNamespace(auth=token, user=user))
        assert principal.user_id == user.id
        assert principal.is_admin

    def test_principal_falls_back_to_user(self):
        user = UserFactory(access_level=AccessLevel.MEMBER)
        principal = principal_from_request(SimpleNamespace(auth=None, user=user))
        assert principal.system_access_level is AccessLevel.MEMBER

    def test_derived_access_token_reads_current_level(self):
        user = UserFactory(access_level=AccessLevel.ADMIN)
        refresh = AccessLevelRefreshToken.for_user(user)
        assert refresh["access_level"] == "Admin"

        user.access_level = AccessLevel.GUEST
        user.save()

        access = refresh.access_token
        assert access["access_level"] == "Guest"
        assert refresh["access_level"] == "Guest"

    def test_inactive_user_gets_no_access_token(self):
        user = UserFactory()
        refresh = AccessLevelRefreshToken.for_user(user)
        user.is_active = False
        user.save()

        with pytest.raises(AuthenticationFailed):
            refresh.access_token
