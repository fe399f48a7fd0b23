"""
Attestation Verification

Pluggable checks for the credential a bot presents when it registers.

The registry stores attestation tokens but does not interpret them itself.
Whether a token is trusted is decided by the AttestationVerifier the service
is constructed with. The default AcceptAllVerifier reports every token as
valid; picking it is a configuration choice, not a missing check.

Verifiers:
1. AcceptAllVerifier - every token is valid (reference behavior)
2. RequireTokenVerifier - rejects empty tokens
3. CompositeVerifier - runs several verifiers, first rejection wins

Configuration names one verifier ("require-token") or a comma-separated
chain ("require-token,accept-all") that is built as a CompositeVerifier.
"""

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class AttestationDecision(str, Enum):
    """Verification outcome."""
    VALID = "valid"
    INVALID = "invalid"


@dataclass
class AttestationContext:
    """
    What a verifier gets to look at.
    """
    agent_id: str
    token: str
    endpoint: str | None = None


@dataclass
class AttestationResult:
    """
    Result of a verification.
    """
    decision: AttestationDecision
    reason: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.decision == AttestationDecision.VALID


class AttestationVerifier:
    """
    Base class for verifiers.

    Override verify() to implement custom logic.
    """

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def verify(self, context: AttestationContext) -> AttestationResult:
        """
        Verify the token in the context.

        Returns:
            AttestationResult with decision
        """
        raise NotImplementedError


class AcceptAllVerifier(AttestationVerifier):
    """
    Treats every token, including an empty one, as valid.
    """

    def verify(self, context: AttestationContext) -> AttestationResult:
        return AttestationResult(
            decision=AttestationDecision.VALID,
            reason="unverified (accept-all)"
        )


class RequireTokenVerifier(AttestationVerifier):
    """
    Rejects registrations that present no attestation token.

    Does not inspect the token beyond checking it is non-blank.
    """

    def verify(self, context: AttestationContext) -> AttestationResult:
        if not context.token.strip():
            return AttestationResult(
                decision=AttestationDecision.INVALID,
                reason="Attestation token is required"
            )
        return AttestationResult(decision=AttestationDecision.VALID)


class CompositeVerifier(AttestationVerifier):
    """
    Runs verifiers in order. First INVALID wins.
    """

    def __init__(self, verifiers: list[AttestationVerifier] | None = None):
        self._verifiers: list[AttestationVerifier] = list(verifiers or [])

    def add_verifier(self, verifier: AttestationVerifier) -> None:
        """Append a verifier to the chain."""
        self._verifiers.append(verifier)
        logger.debug(f"Added attestation verifier: {verifier.name}")

    def verify(self, context: AttestationContext) -> AttestationResult:
        for verifier in self._verifiers:
            result = verifier.verify(context)
            if not result.is_valid:
                logger.warning(
                    f"Attestation INVALID by {verifier.name}: {result.reason} "
                    f"(agent={context.agent_id})"
                )
                return result
        return AttestationResult(decision=AttestationDecision.VALID)


VERIFIERS: dict[str, type[AttestationVerifier]] = {
    "accept-all": AcceptAllVerifier,
    "require-token": RequireTokenVerifier,
}


def create_verifier(name: str) -> AttestationVerifier:
    """
    Build a verifier from its configuration name.

    A comma-separated list of names builds a CompositeVerifier running
    them in the listed order.

    Raises:
        ValueError: If a name is not known or the list is empty
    """
    names = [part.strip() for part in name.split(",") if part.strip()]
    if not names:
        raise ValueError("No attestation verifier configured")

    verifiers = []
    for verifier_name in names:
        try:
            verifiers.append(VERIFIERS[verifier_name]())
        except KeyError:
            raise ValueError(
                f"Unknown attestation verifier: {verifier_name} "
                f"(expected one of {sorted(VERIFIERS)})"
            ) from None

    if len(verifiers) == 1:
        return verifiers[0]
    return CompositeVerifier(verifiers)
