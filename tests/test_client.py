# tests/test_client.py

from unittest import mock

import pytest
import requests

from smartspend.client import ApiClient, client_for
from smartspend.exceptions import (
    ApiAuthenticationError,
    ApiConflictError,
    ApiError,
    ApiNetworkError,
    ApiNotFoundError,
    ApiValidationError,
    error_for_status,
)


def _response(status, json_body=None, text=""):
    response = mock.Mock(spec=requests.Response)
    response.status_code = status
    response.ok = status < 400
    if json_body is None:
        response.json.side_effect = ValueError("no json")
        response.content = text.encode()
        response.text = text
    else:
        response.json.return_value = json_body
        response.content = b"{}"
        response.text = "{}"
    return response


@pytest.fixture
def session():
    return mock.Mock(spec=requests.Session, headers={})


def test_bearer_token_and_base_url(session):
    session.request.return_value = _response(200, {"ok": True})
    client = ApiClient(token="abc", base_url="http://api.test/api/", session=session)

    assert client.get("/bills", params={"page": 1}) == {"ok": True}
    assert session.headers["Authorization"] == "Bearer abc"
    method, url = session.request.call_args.args
    assert (method, url) == ("GET", "http://api.test/api/bills")
    assert session.request.call_args.kwargs["params"] == {"page": 1}


def test_no_token_means_no_authorization_header(session):
    ApiClient(base_url="http://api.test", session=session)
    assert "Authorization" not in session.headers


def test_empty_and_plain_text_bodies(session):
    client = ApiClient(base_url="http://api.test", session=session)

    session.request.return_value = _response(204)
    assert client.delete("/goals/1") is None

    session.request.return_value = _response(200, text="Bank account removed")
    assert client.delete("/bank-accounts/1") == "Bank account removed"


@pytest.mark.parametrize("status, body, error_class, message", [
    (400, {"message": "Amount is required"}, ApiValidationError, "Amount is required"),
    (400, {"errors": [{"msg": "Invalid email"}]}, ApiValidationError, "Invalid email"),
    (401, {"msg": "Token is not valid"}, ApiAuthenticationError, "Token is not valid"),
    (404, {}, ApiNotFoundError, "Not found"),
    (409, {"error": "Account exists"}, ApiConflictError, "Account exists"),
    (500, None, ApiError, "Server error occurred"),
])
def test_error_statuses_map_to_exceptions(session, status, body, error_class, message):
    session.request.return_value = _response(status, body)
    client = ApiClient(base_url="http://api.test", session=session)

    with pytest.raises(error_class) as excinfo:
        client.post("/anything", {"x": 1})

    assert excinfo.value.status == status
    assert excinfo.value.message == message


def test_connection_failure_is_a_network_error(session):
    session.request.side_effect = requests.ConnectionError("refused")
    client = ApiClient(base_url="http://api.test", session=session)

    with pytest.raises(ApiNetworkError) as excinfo:
        client.get("/goals")

    assert excinfo.value.status is None
    assert excinfo.value.message == "Network error - unable to reach server"


def test_error_for_status_keeps_raw_detail():
    error = error_for_status(503)
    assert type(error) is ApiError
    assert error.detail is None
    assert error.is_server_error


def test_client_for_reads_token_from_session(rf, settings):
    request = rf.get("/")
    request.session = {"api_token": "tok"}
    client = client_for(request)
    assert client.session.headers["Authorization"] == "Bearer tok"
    assert client.base_url == settings.SMARTSPEND_API_URL
