# Attestation
# Pluggable verification of the credential bots present at registration

from botcall.attestation.verifier import (
    AttestationDecision,
    AttestationContext,
    AttestationResult,
    AttestationVerifier,
    AcceptAllVerifier,
    RequireTokenVerifier,
    CompositeVerifier,
    create_verifier,
)

__all__ = [
    "AttestationDecision",
    "AttestationContext",
    "AttestationResult",
    "AttestationVerifier",
    "AcceptAllVerifier",
    "RequireTokenVerifier",
    "CompositeVerifier",
    "create_verifier",
]
