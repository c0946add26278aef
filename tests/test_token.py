"""
Unit tests for Token.
"""

import pytest

from simple_jwt.errors import TokenBlacklistError
from simple_jwt.token import Token


class TestToken:
    """Test cases for Token."""

    @pytest.fixture
    def token(self, manager, user_claims):
        return manager.issue(user_claims, {"typ": "JWT", "kid": "k1"})

    def test_reserved_claim_accessors(self, token):
        assert token.subject == "42"
        assert token.issuer == ""
        assert token.issued_at == 1000
        assert token.not_before == 1000
        assert token.expires_at == 4600
        assert token.jti == token.claims["jti"]

    def test_claims_and_headers_are_read_only(self, token):
        with pytest.raises(TypeError):
            token.claims["sub"] = "43"
        with pytest.raises(TypeError):
            token.headers["kid"] = "k2"

    def test_construction_copies_inputs(self, manager):
        claims = {"sub": "42", "profile": {"tenant": "t-1"}}
        token = Token(manager, {}, claims)

        claims["sub"] = "43"
        claims["profile"]["tenant"] = "t-2"

        assert token.subject == "42"
        assert token.claims["profile"] == {"tenant": "t-1"}

    def test_encode_has_three_segments(self, token):
        text = token.encode()

        assert text.count(".") == 2
        assert str(token) == text
        assert text.startswith(token.signing_input().decode("ascii") + ".")

    def test_signature_covers_signing_input(self, token, manager):
        head, body, signature = token.encode().split(".")

        assert manager.codec.decode(signature) == manager.signer.sign(f"{head}.{body}".encode("ascii"))

    def test_parsed_token_keeps_wire_text(self, token, manager):
        text = token.encode()
        parsed = manager.parse(text)

        assert parsed.encode() == text
        assert parsed.signing_input() == token.signing_input()
        assert parsed.manager is manager

    def test_refresh_delegates_to_manager(self, token, clock):
        clock.advance(30)
        refreshed = token.refresh()

        assert refreshed.issued_at == 1030
        assert refreshed.jti != token.jti

    def test_revoke(self, token, manager):
        token.revoke()

        assert manager.is_revoked(token.jti) is True
        with pytest.raises(TokenBlacklistError):
            manager.parse(token.encode())

    def test_repr(self, token):
        assert repr(token) == f"Token(jti={token.jti!r}, sub='42', exp=4600)"
