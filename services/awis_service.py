"""
AWIS service: signed GET requests against the Alexa Web Information Service.
"""
import datetime as dt
from typing import Any, Dict, Iterable, Mapping, Optional, Union

import requests
from requests.structures import CaseInsensitiveDict
from dateutil.parser import parse
from config import Config, get_config
from logger_config import get_logger
from transforms import AwisResult, normalize_response, parse_xml
from utils.exceptions import AwisHTTPError, MissingCredentialsError, ValidationError
from .credentials_service import locate_credentials
from .signing_service import (
    SignatureResult,
    canonical_query_string,
    format_timestamps,
    sign_request,
    utcnow,
)

logger = get_logger(__name__)

# Headers the client always generates; caller values for these are dropped
GENERATED_HEADERS = {
    'host',
    'x-amz-date',
    'x-amz-content-sha256',
    'x-amz-security-token',
    'authorization',
}


def _without_generated(headers: Mapping[str, str]) -> Dict[str, str]:
    return {
        name: value for name, value in headers.items()
        if name.lower() not in GENERATED_HEADERS
    }


def build_canonical_headers(
    hostname: str,
    header_timestamp: str,
    headers: Optional[Mapping[str, str]] = None
) -> Dict[str, str]:
    """Headers fed to the signer: caller headers plus host and x-amz-date."""
    canonical = _without_generated(headers or {})
    canonical['host'] = hostname
    canonical['x-amz-date'] = header_timestamp
    return canonical


def assemble_headers(
    headers: Optional[Mapping[str, str]],
    header_timestamp: str,
    signature: SignatureResult,
    session_token: Optional[str] = None
) -> Dict[str, str]:
    """
    Headers sent on the wire.

    Generated signing headers override caller headers of the same name,
    compared case-insensitively.
    """
    final = _without_generated(headers or {})
    final['x-amz-date'] = header_timestamp
    final['x-amz-content-sha256'] = signature.body_hash
    if session_token:
        final['x-amz-security-token'] = session_token
    final['Authorization'] = signature.signature_header
    return final


def check_response(response: requests.Response) -> None:
    """
    Raise for HTTP error statuses.

    Raises:
        AwisHTTPError: If the status code is 400 or above.
    """
    if response.status_code < 400:
        return
    raise AwisHTTPError(response.status_code, url=getattr(response, 'url', None))


class AwisService:
    """Service for Alexa Web Information Service operations."""

    SERVICE_NAME = 'awis'
    ACTION_PATH = '/api'
    VERB = 'GET'

    DEFAULT_HEADERS = {
        'Accept': 'application/xml',
    }

    URL_INFO_RESPONSE_GROUPS = (
        'Related', 'Categories', 'Rank', 'RankByCountry', 'UsageStats',
        'AdultContent', 'Speed', 'Language', 'OwnedDomains', 'LinksInCount',
        'SiteData', 'TrafficData', 'ContentData',
    )
    CATEGORY_BROWSE_RESPONSE_GROUPS = (
        'Categories', 'RelatedCategories', 'LanguageCategories', 'LetterBars',
    )
    CATEGORY_SORT_ORDERS = ('Popularity', 'Title', 'AverageReview')

    MAX_TRAFFIC_RANGE = 31
    MAX_LINKS_COUNT = 20
    MAX_LISTINGS_COUNT = 20

    def __init__(
        self,
        config: Optional[Config] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> None:
        """
        Initialize AWIS service.

        Args:
            config: Resolved configuration (defaults to get_config())
            headers: Optional extra headers sent with every request
        """
        self.config: Config = config if config is not None else get_config()
        self.headers: Dict[str, str] = (
            headers if headers is not None else dict(self.DEFAULT_HEADERS)
        )

    def execute(
        self,
        query: Mapping[str, Any],
        key: Optional[str] = None,
        secret: Optional[str] = None,
        session_token: Optional[str] = None,
        region: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None
    ) -> AwisResult:
        """
        Send a signed AWIS request and normalize the XML response.

        Args:
            query: Action-specific query parameters
            key: AWS Access Key ID (defaults to config)
            secret: AWS Secret Access Key (defaults to config)
            session_token: Temporary session token (defaults to config)
            region: AWS region (defaults to config)
            headers: Extra request headers

        Returns:
            AwisResult with request id, response status and the payload tree

        Raises:
            MissingCredentialsError: If key or secret is empty.
            AwisHTTPError: If AWIS answers with status >= 400.
            MalformedResponseError: If the response lacks request metadata.
            requests.RequestException: If the transport fails.
        """
        key = self.config.access_key if key is None else key
        secret = self.config.secret_key if secret is None else secret
        if session_token is None:
            session_token = self.config.session_token
        region = region or self.config.region

        if not key or not secret:
            raise MissingCredentialsError()

        credentials = locate_credentials(
            key=key,
            secret=secret,
            session_token=session_token,
            region=region,
            verbose=self.config.verbose,
        )

        hostname = f'awis.{credentials.region}.amazonaws.com'
        # Both formats must come from the same instant
        header_timestamp, signing_timestamp = format_timestamps(utcnow())

        # Names compare case-insensitively, as requests sends them
        caller_headers = CaseInsensitiveDict(self.headers)
        caller_headers.update(headers or {})
        canonical_headers = build_canonical_headers(
            hostname, header_timestamp, caller_headers
        )

        signature = sign_request(
            signing_timestamp,
            credentials.region,
            self.SERVICE_NAME,
            self.VERB,
            self.ACTION_PATH,
            query,
            canonical_headers,
            '',
            credentials,
        )

        request_headers = assemble_headers(
            caller_headers, header_timestamp, signature, credentials.session_token
        )

        logger.debug(
            f'AWIS {query.get("Action", "request")} to {self.config.endpoint} '
            f'(signed for {hostname})'
        )

        try:
            response = requests.get(
                self.config.endpoint,
                headers=request_headers,
                params=canonical_query_string(query),
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            logger.error(f'AWIS request failed: {str(e)}')
            raise

        check_response(response)

        return normalize_response(parse_xml(response.content))

    def url_info(
        self,
        url: str,
        response_groups: Union[str, Iterable[str]] = ('Rank',),
        **kwargs
    ) -> AwisResult:
        """
        Get information about a site (Action=UrlInfo).

        Args:
            url: Site to look up
            response_groups: One or more of URL_INFO_RESPONSE_GROUPS
            **kwargs: Credential overrides passed to execute()
        """
        query = {
            'Action': 'UrlInfo',
            'Url': self._require('url', url),
            'ResponseGroup': self._response_groups(
                response_groups, self.URL_INFO_RESPONSE_GROUPS
            ),
        }
        return self.execute(query, **kwargs)

    def traffic_history(
        self,
        url: str,
        range_days: int = 31,
        start: Union[None, str, dt.date, dt.datetime] = None,
        **kwargs
    ) -> AwisResult:
        """
        Get daily traffic rank and reach history (Action=TrafficHistory).

        Args:
            url: Site to look up
            range_days: Number of days, 1-31
            start: First day; a date or any string dateutil can parse
            **kwargs: Credential overrides passed to execute()
        """
        self._check_range('range_days', range_days, 1, self.MAX_TRAFFIC_RANGE)
        query = {
            'Action': 'TrafficHistory',
            'Url': self._require('url', url),
            'ResponseGroup': 'History',
            'Range': str(range_days),
        }
        if start is not None:
            query['Start'] = self._format_start(start)
        return self.execute(query, **kwargs)

    def sites_linking_in(
        self,
        url: str,
        count: int = 20,
        start: int = 0,
        **kwargs
    ) -> AwisResult:
        """
        Get sites linking to a site (Action=SitesLinkingIn).

        Args:
            url: Site to look up
            count: Results per page, 1-20
            start: Zero-based offset of the first result
            **kwargs: Credential overrides passed to execute()
        """
        self._check_range('count', count, 1, self.MAX_LINKS_COUNT)
        self._check_range('start', start, 0)
        query = {
            'Action': 'SitesLinkingIn',
            'Url': self._require('url', url),
            'ResponseGroup': 'SitesLinkingIn',
            'Count': str(count),
            'Start': str(start),
        }
        return self.execute(query, **kwargs)

    def category_browse(
        self,
        path: str,
        response_groups: Union[str, Iterable[str]] = ('Categories',),
        descriptions: bool = True,
        **kwargs
    ) -> AwisResult:
        """Browse a category path, e.g. "Top/Arts" (Action=CategoryBrowse)."""
        query = {
            'Action': 'CategoryBrowse',
            'Path': self._require('path', path),
            'ResponseGroup': self._response_groups(
                response_groups, self.CATEGORY_BROWSE_RESPONSE_GROUPS
            ),
            'Descriptions': self._flag(descriptions),
        }
        return self.execute(query, **kwargs)

    def category_listings(
        self,
        path: str,
        sort_by: str = 'Popularity',
        recursive: bool = True,
        start: int = 1,
        count: int = 20,
        descriptions: bool = True,
        **kwargs
    ) -> AwisResult:
        """List the sites in a category (Action=CategoryListings)."""
        if sort_by not in self.CATEGORY_SORT_ORDERS:
            raise ValidationError(
                f'sort_by must be one of {self.CATEGORY_SORT_ORDERS}, got: {sort_by}',
                field='sort_by',
                value=sort_by,
            )
        self._check_range('start', start, 1)
        self._check_range('count', count, 1, self.MAX_LISTINGS_COUNT)
        query = {
            'Action': 'CategoryListings',
            'ResponseGroup': 'Listings',
            'Path': self._require('path', path),
            'SortBy': sort_by,
            'Recursive': self._flag(recursive),
            'Start': str(start),
            'Count': str(count),
            'Descriptions': self._flag(descriptions),
        }
        return self.execute(query, **kwargs)

    @staticmethod
    def _require(field: str, value: Optional[str]) -> str:
        if not value or not str(value).strip():
            raise ValidationError(f'{field} is required', field=field, value=value)
        return str(value).strip()

    @staticmethod
    def _response_groups(groups: Union[str, Iterable[str]], allowed) -> str:
        if isinstance(groups, str):
            groups = [group.strip() for group in groups.split(',')]
        groups = [group for group in groups if group]
        if not groups:
            raise ValidationError(
                'At least one response group is required', field='response_groups'
            )
        invalid = [group for group in groups if group not in allowed]
        if invalid:
            raise ValidationError(
                f'Unknown response group(s) {invalid}; expected one of {allowed}',
                field='response_groups',
                value=invalid,
            )
        return ','.join(groups)

    @staticmethod
    def _check_range(field: str, value: int, low: int, high: Optional[int] = None) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f'{field} must be an integer', field=field, value=value)
        if value < low or (high is not None and value > high):
            bounds = f'{low}-{high}' if high is not None else f'>= {low}'
            raise ValidationError(
                f'{field} must be {bounds}, got: {value}', field=field, value=value
            )

    @staticmethod
    def _format_start(start: Union[str, dt.date, dt.datetime]) -> str:
        if isinstance(start, (dt.date, dt.datetime)):
            return start.strftime('%Y%m%d')
        try:
            return parse(str(start)).strftime('%Y%m%d')
        except (ValueError, OverflowError) as e:
            raise ValidationError(
                f'start is not a valid date: {start}', field='start', value=start
            ) from e

    @staticmethod
    def _flag(value: bool) -> str:
        return 'True' if value else 'False'
