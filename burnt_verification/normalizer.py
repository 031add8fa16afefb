"""
Claim Normalizer

Flattens provider-native proof payloads into the flat claims mapping of a
BurntAttributeCertificate.

Proofs are treated as generic trees of string-keyed values. Claims are
read from a fixed sequence of locations inside each proof; a later
location overwrites identically-named keys from an earlier one. A
location that cannot be read (bad JSON, unexpected type) is skipped
without affecting the others.
"""

import json
import time
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from burnt_verification.core.logging import get_logger, redact_sensitive_data
from burnt_verification.exceptions import NormalizationError
from burnt_verification.models import BurntAttributeCertificate

logger = get_logger(__name__)

# Bookkeeping keys that leak in when a parameters/context map is spread
RESERVED_CLAIM_KEYS = ("parameters", "context")

UNKNOWN_VERIFICATION_TYPE = "unknown"

Proof = Mapping[str, Any]


def _decode(value: Any, location: str) -> Optional[Dict[str, Any]]:
    """Decode a field that may be a mapping or a JSON-encoded mapping."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError as e:
            raise NormalizationError(f"{location} is not valid JSON: {e}") from e
    if not isinstance(value, Mapping):
        raise NormalizationError(
            f"{location} is not an object (got {type(value).__name__})"
        )
    return dict(value)


def _claim_data(proof: Proof) -> Mapping[str, Any]:
    claim_data = proof.get("claimData")
    return claim_data if isinstance(claim_data, Mapping) else {}


def _extracted_parameter_values(proof: Proof) -> Iterator[Any]:
    yield proof.get("extractedParameterValues")


def _claim_parameters(proof: Proof) -> Iterator[Any]:
    params = _decode(_claim_data(proof).get("parameters"), "claimData.parameters")
    if params is None:
        return
    # Parameter values are usually nested one level down
    yield params.get("paramValues")
    yield params


def _claim_context(proof: Proof) -> Iterator[Any]:
    context = _decode(_claim_data(proof).get("context"), "claimData.context")
    if context is None:
        return
    yield context.get("extractedParameters")
    # Metadata attached by the caller through add_context
    yield _decode(context.get("contextMessage"), "claimData.context.contextMessage")


def _param_values(proof: Proof) -> Iterator[Any]:
    yield proof.get("paramValues")


def _extracted_parameters(proof: Proof) -> Iterator[Any]:
    yield proof.get("extractedParameters")


# Order matters: later sources win on key collisions
CLAIM_SOURCES: Tuple[Tuple[str, Callable[[Proof], Iterator[Any]]], ...] = (
    ("extractedParameterValues", _extracted_parameter_values),
    ("claimData.parameters", _claim_parameters),
    ("claimData.context", _claim_context),
    ("paramValues", _param_values),
    ("extractedParameters", _extracted_parameters),
)


def extract_claims(proof: Any) -> Dict[str, Any]:
    """
    Extract the flat claims mapping from a single proof.

    Args:
        proof: Provider-native proof payload

    Returns:
        Flat claims dict without the reserved bookkeeping keys
    """
    claims: Dict[str, Any] = {}

    if not isinstance(proof, Mapping):
        logger.warning(
            "Proof is not an object, no claims extracted",
            proof_type=type(proof).__name__,
        )
        return claims

    for location, source in CLAIM_SOURCES:
        try:
            for layer in source(proof):
                if not layer:
                    continue
                if not isinstance(layer, Mapping):
                    raise NormalizationError(
                        f"{location} is not an object (got {type(layer).__name__})"
                    )
                claims.update(layer)
        except NormalizationError as e:
            logger.debug("Skipping claim source", source=location, error=e.message)

    for key in RESERVED_CLAIM_KEYS:
        claims.pop(key, None)

    logger.debug("Flattened proof claims", claims=redact_sensitive_data(claims))
    return claims


def _timestamp_s(proof: Proof) -> int:
    value = proof.get("timestampS")
    if value:
        try:
            return int(float(value))
        except (TypeError, ValueError):
            logger.debug("Ignoring unparseable proof timestamp", timestamp=value)
    return int(time.time())


def _verification_type_id(proof: Proof) -> str:
    return str(
        _claim_data(proof).get("provider")
        or proof.get("providerId")
        or UNKNOWN_VERIFICATION_TYPE
    )


def proof_to_certificate(session_id: str, proof: Any) -> BurntAttributeCertificate:
    """Map a single provider proof to a BurntAttributeCertificate."""
    metadata_source = proof if isinstance(proof, Mapping) else {}
    return BurntAttributeCertificate(
        verification_type_id=_verification_type_id(metadata_source),
        session_id=session_id,
        claims=extract_claims(proof),
        timestamp_s=_timestamp_s(metadata_source),
        created_at=int(time.time() * 1000),
        context=proof,
    )


def build_certificate(
    session_id: str, response: Union[Proof, Sequence[Proof]]
) -> BurntAttributeCertificate:
    """
    Build one certificate from a provider success response.

    The response may be a single proof or a list of proofs for the same
    session. Claims are merged across proofs in list order, later proofs
    winning; certificate metadata comes from the first proof.

    Raises:
        NormalizationError: If the response holds no proof
    """
    proofs: List[Any] = list(response) if isinstance(response, (list, tuple)) else [response]

    if not proofs or not proofs[0]:
        raise NormalizationError("No proof received from provider")

    merged: Dict[str, Any] = {}
    for proof in proofs:
        merged.update(extract_claims(proof))

    certificate = proof_to_certificate(session_id, proofs[0])
    certificate.claims = merged

    if len(proofs) > 1:
        certificate.context = proofs

    logger.info(
        "Built attribute certificate",
        session_id=session_id,
        verification_type_id=certificate.verification_type_id,
        proof_count=len(proofs),
        claim_keys=sorted(merged),
    )
    return certificate
