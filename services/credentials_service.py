"""
Credential locator backed by the boto3 provider chain.
"""
from dataclasses import dataclass
from typing import Optional

import boto3
from logger_config import get_logger
from utils.exceptions import CredentialsNotFoundError

logger = get_logger(__name__)


@dataclass(frozen=True)
class AwsCredentials:
    """Resolved credentials for a single signed request."""

    access_key: str
    secret_key: str
    session_token: Optional[str] = None
    region: str = "us-west-1"


def locate_credentials(
    key: Optional[str] = None,
    secret: Optional[str] = None,
    session_token: Optional[str] = None,
    region: Optional[str] = None,
    verbose: bool = False
) -> AwsCredentials:
    """
    Resolve credentials, falling back to the boto3 provider chain.

    Explicit values win. Anything left empty is looked up by botocore
    (environment, shared credentials/config files, container or instance
    metadata).

    Args:
        key: AWS Access Key ID
        secret: AWS Secret Access Key
        session_token: Temporary session token
        region: AWS region
        verbose: Log where the credentials came from

    Returns:
        AwsCredentials for the request

    Raises:
        CredentialsNotFoundError: If the chain yields no credentials.
    """
    session = boto3.Session(
        aws_access_key_id=key or None,
        aws_secret_access_key=secret or None,
        aws_session_token=session_token or None,
        region_name=region or None,
    )
    credentials = session.get_credentials()
    if credentials is None:
        raise CredentialsNotFoundError(
            'No AWS credentials found in arguments, environment, '
            'shared config files or instance metadata',
            region=region,
        )

    frozen = credentials.get_frozen_credentials()
    resolved_region = session.region_name or region or "us-west-1"

    if verbose:
        logger.info(
            f'Using credentials for access key {frozen.access_key[:4]}... '
            f'(source: {getattr(credentials, "method", "unknown")}, '
            f'region: {resolved_region})'
        )

    return AwsCredentials(
        access_key=frozen.access_key,
        secret_key=frozen.secret_key,
        session_token=frozen.token,
        region=resolved_region,
    )
