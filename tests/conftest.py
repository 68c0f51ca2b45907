"""
Shared fixtures for AWIS client tests.
"""
import pytest
from unittest.mock import Mock

from config import Config

URL_INFO_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<aws:UrlInfoResponse xmlns:aws="http://alexa.amazonaws.com/doc/2005-10-05/">
  <aws:Response xmlns:aws="http://awis.amazonaws.com/doc/2005-07-11">
    <aws:OperationRequest>
      <aws:RequestId>abc-123</aws:RequestId>
    </aws:OperationRequest>
    <aws:UrlInfoResult>
      <aws:Alexa>
        <aws:TrafficData>
          <aws:DataUrl type="canonical">example.com/</aws:DataUrl>
          <aws:Rank>42</aws:Rank>
        </aws:TrafficData>
      </aws:Alexa>
    </aws:UrlInfoResult>
    <aws:ResponseStatus>
      <aws:StatusCode>Success</aws:StatusCode>
    </aws:ResponseStatus>
  </aws:Response>
</aws:UrlInfoResponse>
"""

NO_STATUS_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<aws:UrlInfoResponse xmlns:aws="http://alexa.amazonaws.com/doc/2005-10-05/">
  <aws:Response>
    <aws:OperationRequest>
      <aws:RequestId>abc-123</aws:RequestId>
    </aws:OperationRequest>
  </aws:Response>
</aws:UrlInfoResponse>
"""


@pytest.fixture
def config():
    """Config with static test credentials."""
    return Config(access_key='AKIDEXAMPLE', secret_key='SECRETEXAMPLE')


@pytest.fixture
def ok_response():
    """Mocked 200 response carrying a UrlInfo document."""
    response = Mock()
    response.status_code = 200
    response.content = URL_INFO_XML
    response.url = 'https://awis.amazonaws.com/api'
    return response
