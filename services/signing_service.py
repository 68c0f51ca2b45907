"""
AWS Signature V4 signing for AWIS requests.

botocore does the canonical request and signing-key derivation. This module
only pins the timestamp so the signed date matches the x-amz-date header the
caller sends.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Mapping, Tuple, Union
from urllib.parse import quote

from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials

from .credentials_service import AwsCredentials

HEADER_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
SIGNING_TIMESTAMP_FORMAT = "%Y%m%dT%H%M%SZ"
ALGORITHM = "AWS4-HMAC-SHA256"


@dataclass(frozen=True)
class SignatureResult:
    """Output of the signer: payload hash and Authorization header value."""

    body_hash: str
    signature_header: str


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamps(current: datetime) -> Tuple[str, str]:
    """
    Format one instant for the x-amz-date header and for signing.

    Returns:
        (header_timestamp, signing_timestamp)
    """
    if current.tzinfo is not None:
        current = current.astimezone(timezone.utc)
    return (
        current.strftime(HEADER_TIMESTAMP_FORMAT),
        current.strftime(SIGNING_TIMESTAMP_FORMAT),
    )


def canonical_query_string(query: Mapping[str, object]) -> str:
    """Encode query parameters the same way SigV4 canonicalizes them."""
    pairs = sorted(
        (quote(str(name), safe="-_.~"), quote(str(value), safe="-_.~"))
        for name, value in query.items()
    )
    return "&".join(f"{name}={value}" for name, value in pairs)


def sign_request(
    signing_datetime: str,
    region: str,
    service: str,
    verb: str,
    path: str,
    query: Mapping[str, object],
    headers: Mapping[str, str],
    body: Union[str, bytes],
    credentials: AwsCredentials
) -> SignatureResult:
    """
    Sign a request with AWS Signature V4.

    Args:
        signing_datetime: Signing timestamp in YYYYMMDDTHHMMSSZ form
        region: AWS region of the credential scope
        service: Service name of the credential scope
        verb: HTTP method
        path: Request path
        query: Query parameters
        headers: Headers to sign; must contain "host"
        body: Request body
        credentials: Resolved credentials

    Returns:
        SignatureResult with the payload hash and Authorization header

    Raises:
        ValueError: If headers carry no host.
    """
    lowered: Dict[str, str] = {name.lower(): value for name, value in headers.items()}
    host = lowered.get("host")
    if not host:
        raise ValueError("Signed headers must include host")

    if isinstance(body, str):
        body = body.encode("utf-8")

    request = AWSRequest(
        method=verb.upper(),
        url=f"https://{host}{path}",
        params=dict(query),
        headers=dict(headers),
        data=body,
    )
    request.context["timestamp"] = signing_datetime

    auth = SigV4Auth(
        Credentials(
            credentials.access_key,
            credentials.secret_key,
            credentials.session_token,
        ),
        service,
        region,
    )

    body_hash = auth.payload(request)
    canonical_request = auth.canonical_request(request)
    string_to_sign = auth.string_to_sign(request, canonical_request)
    signature = auth.signature(string_to_sign, request)
    signed_headers = auth.signed_headers(auth.headers_to_sign(request))

    return SignatureResult(
        body_hash=body_hash,
        signature_header=(
            f"{ALGORITHM} Credential={auth.scope(request)}, "
            f"SignedHeaders={signed_headers}, Signature={signature}"
        ),
    )
