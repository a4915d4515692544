from swarmcrawl.services.http_service import HttpService
from swarmcrawl.exceptions import FetchFailure, HttpFetchError
from unittest.mock import Mock
import requests


def test_fetch_success():
    mock_http_client = Mock()
    mock_http_client.return_value.status_code = 200
    mock_http_client.return_value.text = 'hello world'
    mock_http_client.return_value.url = 'http://example.com/'
    http = HttpService(user_agent='TestAgent', http_client=mock_http_client)
    response = http.fetch('http://example.com')
    assert response.status_code == 200
    assert response.text == 'hello world'
    assert response.final_url == 'http://example.com/'


def test_fetch_sends_user_agent_and_timeout():
    mock_http_client = Mock()
    mock_http_client.return_value.status_code = 200
    mock_http_client.return_value.text = ''
    http = HttpService(user_agent='TestAgent', http_client=mock_http_client, timeout=7)
    http.fetch('http://example.com')
    _, kwargs = mock_http_client.call_args
    assert kwargs['headers'] == {'User-Agent': 'TestAgent'}
    assert kwargs['timeout'] == 7


def test_fetch_wraps_requests_exception():
    mock_http_client = Mock()
    mock_http_client.side_effect = requests.exceptions.Timeout("timed out")
    http = HttpService(user_agent='TestAgent', http_client=mock_http_client)

    try:
        http.fetch('http://example.com')
        assert False, "expected HttpFetchError"
    except HttpFetchError as e:
        assert "http://example.com" in str(e)
        assert isinstance(e, FetchFailure)
        assert isinstance(e.original, requests.exceptions.Timeout)


def test_error_status_is_returned_not_raised():
    mock_http_client = Mock()
    mock_http_client.return_value.status_code = 500
    mock_http_client.return_value.text = 'boom'
    http = HttpService(user_agent='TestAgent', http_client=mock_http_client)
    assert http.fetch('http://example.com').status_code == 500


def test_fetch_content_type_from_headers():
    mock_http_client = Mock()
    mock_http_client.return_value.status_code = 200
    mock_http_client.return_value.text = '<html>test</html>'
    mock_http_client.return_value.headers = {'Content-Type': 'text/html; charset=utf-8'}
    http = HttpService(user_agent='TestAgent', http_client=mock_http_client)
    response = http.fetch('http://example.com')
    assert response.content_type == 'text/html; charset=utf-8'


def test_final_url_falls_back_to_requested_url():
    mock_http_client = Mock()
    mock_http_client.return_value.status_code = 200
    mock_http_client.return_value.text = ''
    mock_http_client.return_value.url = None
    http = HttpService(user_agent='TestAgent', http_client=mock_http_client)
    assert http.fetch('http://example.com/x').final_url == 'http://example.com/x'
