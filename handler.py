"""
Lambda handler functions for AWIS lookups.

Each handler reads its arguments from the event, calls the matching
AwisService action and returns the normalized result.
"""
from typing import Any, Dict

from config import get_config, is_truthy
from logger_config import get_logger
from services.awis_service import AwisService
from transforms import AwisResult
from utils.decorators import lambda_handler

logger = get_logger(__name__)


def _service() -> AwisService:
    return AwisService(get_config())


def _result(result: AwisResult) -> Dict[str, Any]:
    return {
        "request_id": result.request_id,
        "status_code": result.status_code,
        "data": result.data,
    }


@lambda_handler
def get_url_info(event, context):
    """GET UrlInfo for event["url"]"""
    response_groups = event.get('response_groups') or ('Rank',)
    return _result(_service().url_info(event.get('url'), response_groups))


@lambda_handler
def get_traffic_history(event, context):
    """GET TrafficHistory for event["url"]; "start" may be any date string."""
    return _result(_service().traffic_history(
        event.get('url'),
        range_days=int(event.get('range', False) or 31),
        start=event.get('start'),
    ))


@lambda_handler
def get_sites_linking_in(event, context):
    """GET SitesLinkingIn for event["url"]"""
    return _result(_service().sites_linking_in(
        event.get('url'),
        count=int(event.get('count', False) or 20),
        start=int(event.get('start', False) or 0),
    ))


@lambda_handler
def browse_category(event, context):
    """GET CategoryBrowse for event["path"]"""
    return _result(_service().category_browse(
        event.get('path'),
        response_groups=event.get('response_groups') or ('Categories',),
        descriptions=is_truthy(event.get('descriptions', True)),
    ))


@lambda_handler
def list_category(event, context):
    """GET CategoryListings for event["path"]"""
    logger.debug(f"Listing category {event.get('path')}")
    return _result(_service().category_listings(
        event.get('path'),
        sort_by=event.get('sort_by', 'Popularity'),
        recursive=is_truthy(event.get('recursive', True)),
        start=int(event.get('start', False) or 1),
        count=int(event.get('count', False) or 20),
        descriptions=is_truthy(event.get('descriptions', True)),
    ))
