"""Tests for attestation verifiers."""

import pytest

from botcall.attestation import (
    AcceptAllVerifier,
    AttestationContext,
    AttestationDecision,
    AttestationResult,
    AttestationVerifier,
    CompositeVerifier,
    RequireTokenVerifier,
    create_verifier,
)


def context(token: str) -> AttestationContext:
    return AttestationContext(agent_id="orion", token=token, endpoint="10.0.0.1:9000")


class TestBuiltinVerifiers:

    @pytest.mark.parametrize("token", ["", "garbage", "eyJhbGciOi..."])
    def test_accept_all(self, token):
        assert AcceptAllVerifier().verify(context(token)).is_valid

    def test_require_token(self):
        verifier = RequireTokenVerifier()

        assert verifier.verify(context("tok")).is_valid
        result = verifier.verify(context("   "))
        assert not result.is_valid
        assert result.reason

    def test_base_class_must_be_overridden(self):
        with pytest.raises(NotImplementedError):
            AttestationVerifier().verify(context("tok"))


class TestCompositeVerifier:

    def test_first_rejection_wins(self):
        class Revoked(AttestationVerifier):
            def verify(self, context):
                return AttestationResult(decision=AttestationDecision.INVALID, reason="revoked")

        verifier = CompositeVerifier([AcceptAllVerifier()])
        verifier.add_verifier(Revoked())
        verifier.add_verifier(RequireTokenVerifier())

        result = verifier.verify(context(""))

        assert result.decision == AttestationDecision.INVALID
        assert result.reason == "revoked"

    def test_empty_chain_is_valid(self):
        assert CompositeVerifier().verify(context("")).is_valid


def test_create_verifier():
    assert isinstance(create_verifier("accept-all"), AcceptAllVerifier)
    assert isinstance(create_verifier("require-token"), RequireTokenVerifier)
    with pytest.raises(ValueError):
        create_verifier("x509")


def test_create_verifier_chain():
    verifier = create_verifier("accept-all, require-token")

    assert isinstance(verifier, CompositeVerifier)
    assert verifier.verify(context("tok")).is_valid
    assert verifier.verify(context("")).reason == "Attestation token is required"


@pytest.mark.parametrize("name", ["", " , ", "accept-all,x509"])
def test_create_verifier_rejects_bad_chain(name):
    with pytest.raises(ValueError):
        create_verifier(name)
