"""
Unit tests for Signature V4 signing.
"""
import hashlib
import hmac
import pytest
from datetime import datetime, timedelta, timezone
from dateutil.parser import isoparse
from services.credentials_service import AwsCredentials
from services.signing_service import (
    SignatureResult,
    canonical_query_string,
    format_timestamps,
    sign_request,
)

CREDENTIALS = AwsCredentials('AKIDEXAMPLE', 'SECRETEXAMPLE', None, 'us-west-1')
HOST = 'awis.us-west-1.amazonaws.com'
EMPTY_HASH = hashlib.sha256(b'').hexdigest()


def _hmac(key, msg):
    return hmac.new(key, msg.encode('utf-8'), hashlib.sha256).digest()


class TestFormatTimestamps:
    """Tests for format_timestamps."""

    def test_formats(self):
        """Test both formats for a fixed UTC instant."""
        current = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        header_ts, signing_ts = format_timestamps(current)
        assert header_ts == '2024-01-02T03:04:05Z'
        assert signing_ts == '20240102T030405Z'

    @pytest.mark.parametrize('current', [
        datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        datetime(1999, 12, 31, 23, 59, 59, tzinfo=timezone.utc),
        datetime(2024, 2, 29, 0, 0, 0, tzinfo=timezone(timedelta(hours=-8))),
        datetime(2030, 6, 15, 12, 30, 0, tzinfo=timezone(timedelta(hours=5, minutes=30))),
    ])
    def test_formats_represent_same_instant(self, current):
        """Test both formats parse back to the same epoch seconds."""
        header_ts, signing_ts = format_timestamps(current)
        assert isoparse(header_ts).timestamp() == isoparse(signing_ts).timestamp()
        assert isoparse(header_ts).timestamp() == int(current.timestamp())

    def test_non_utc_converted(self):
        """Test aware non-UTC datetimes are converted to UTC."""
        current = datetime(2024, 1, 1, 19, 0, 0, tzinfo=timezone(timedelta(hours=-8)))
        assert format_timestamps(current) == ('2024-01-02T03:00:00Z', '20240102T030000Z')


class TestCanonicalQueryString:
    """Tests for canonical_query_string."""

    def test_sorted_and_encoded(self):
        """Test parameters are sorted and percent-encoded."""
        query = {'Url': 'example.com/a b', 'Action': 'UrlInfo', 'ResponseGroup': 'Rank,Speed'}
        assert canonical_query_string(query) == (
            'Action=UrlInfo&ResponseGroup=Rank%2CSpeed&Url=example.com%2Fa%20b'
        )

    def test_unreserved_characters_kept(self):
        """Test unreserved characters are not encoded."""
        assert canonical_query_string({'Path': 'Top/Arts_-.~'}) == 'Path=Top%2FArts_-.~'

    def test_non_string_values(self):
        """Test numbers are stringified."""
        assert canonical_query_string({'Count': 20, 'Start': 0}) == 'Count=20&Start=0'


class TestSignRequest:
    """Tests for sign_request."""

    def _sign(self, query=None, headers=None, credentials=CREDENTIALS):
        return sign_request(
            '20240102T030405Z',
            'us-west-1',
            'awis',
            'GET',
            '/api',
            query or {'Action': 'UrlInfo', 'Url': 'example.com', 'ResponseGroup': 'Rank'},
            headers or {'host': HOST, 'x-amz-date': '2024-01-02T03:04:05Z'},
            '',
            credentials,
        )

    def test_returns_signature_result(self):
        """Test the result carries the empty-body hash and an auth header."""
        result = self._sign()
        assert isinstance(result, SignatureResult)
        assert result.body_hash == EMPTY_HASH
        assert result.signature_header.startswith(
            'AWS4-HMAC-SHA256 Credential=AKIDEXAMPLE/20240102/us-west-1/awis/aws4_request, '
            'SignedHeaders=host;x-amz-date, Signature='
        )

    def test_signature_matches_sigv4_derivation(self):
        """Test the signature against an independent SigV4 computation."""
        canonical_request = '\n'.join([
            'GET',
            '/api',
            'Action=UrlInfo&ResponseGroup=Rank&Url=example.com',
            f'host:{HOST}\nx-amz-date:2024-01-02T03:04:05Z\n',
            'host;x-amz-date',
            EMPTY_HASH,
        ])
        string_to_sign = '\n'.join([
            'AWS4-HMAC-SHA256',
            '20240102T030405Z',
            '20240102/us-west-1/awis/aws4_request',
            hashlib.sha256(canonical_request.encode('utf-8')).hexdigest(),
        ])
        key = _hmac(b'AWS4SECRETEXAMPLE', '20240102')
        for part in ('us-west-1', 'awis', 'aws4_request'):
            key = _hmac(key, part)
        expected = hmac.new(key, string_to_sign.encode('utf-8'), hashlib.sha256).hexdigest()

        result = self._sign()

        assert result.signature_header.endswith(f'Signature={expected}')

    def test_deterministic(self):
        """Test identical inputs produce identical signatures."""
        assert self._sign() == self._sign()

    def test_query_changes_signature(self):
        """Test the query is part of the signed request."""
        other = self._sign(query={'Action': 'UrlInfo', 'Url': 'example.org', 'ResponseGroup': 'Rank'})
        assert other.signature_header != self._sign().signature_header

    def test_caller_headers_signed(self):
        """Test extra headers are listed in SignedHeaders."""
        result = self._sign(headers={
            'host': HOST,
            'x-amz-date': '2024-01-02T03:04:05Z',
            'Accept': 'application/xml',
        })
        assert 'SignedHeaders=accept;host;x-amz-date,' in result.signature_header

    def test_session_token_does_not_change_header_format(self):
        """Test temporary credentials still produce a V4 header."""
        credentials = AwsCredentials('ASIAEXAMPLE', 'SECRETEXAMPLE', 'TOKEN', 'us-west-1')
        result = self._sign(credentials=credentials)
        assert 'Credential=ASIAEXAMPLE/20240102/us-west-1/awis/aws4_request' in result.signature_header

    def test_missing_host(self):
        """Test signing without a host header is rejected."""
        with pytest.raises(ValueError, match="host"):
            self._sign(headers={'x-amz-date': '2024-01-02T03:04:05Z'})
