from __future__ import annotations

import os
from unittest.mock import patch

import pytest
import requests

from member_portal.config import DirectoryCredentials
from member_portal.errors import ConfigError, NetworkError, RemoteResponseError
from member_portal.feed_client import DirectoryFeedClient

_CREDS = DirectoryCredentials(
    username="portal", password="s3cret", url="https://directory.example.org/api"
)


def _response(body: bytes, status: int = 200, encoding: str | None = "utf-8") -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp._content = body
    resp.encoding = encoding
    resp.url = _CREDS.url
    return resp


@pytest.fixture
def client() -> DirectoryFeedClient:
    return DirectoryFeedClient(timeout_seconds=5.0, credentials=lambda: _CREDS)


class TestDirectoryFeedClient:
    def test_posts_credentials_and_feed_id(self, client: DirectoryFeedClient) -> None:
        with patch.object(client._session, "post", return_value=_response(b'{"1": {}}')) as post:
            body = client.fetch(3)
        assert body == '{"1": {}}'
        post.assert_called_once_with(
            _CREDS.url,
            data={"username": "portal", "password": "s3cret", "id": "3"},
            timeout=5.0,
        )
        assert client.fetch_count == 1

    def test_decodes_utf8_body(self, client: DirectoryFeedClient) -> None:
        payload = '{"AMT": "Schriftführer"}'.encode()
        with patch.object(client._session, "post", return_value=_response(payload, encoding=None)):
            assert "Schriftführer" in client.fetch(1)

    def test_connection_error_becomes_network_error(self, client: DirectoryFeedClient) -> None:
        with patch.object(
            client._session, "post", side_effect=requests.ConnectionError("refused")
        ):
            with pytest.raises(NetworkError):
                client.fetch(1)
        assert client.fetch_count == 1

    def test_timeout_becomes_network_error(self, client: DirectoryFeedClient) -> None:
        with patch.object(client._session, "post", side_effect=requests.Timeout("slow")):
            with pytest.raises(NetworkError):
                client.fetch(1)

    def test_error_status_becomes_network_error(self, client: DirectoryFeedClient) -> None:
        with patch.object(client._session, "post", return_value=_response(b"down", status=503)):
            with pytest.raises(NetworkError):
                client.fetch(1)

    def test_undecodable_body(self, client: DirectoryFeedClient) -> None:
        with patch.object(client._session, "post", return_value=_response(b"\xff\xfe\xfa")):
            with pytest.raises(RemoteResponseError):
                client.fetch(1)

    def test_no_retries_configured(self, client: DirectoryFeedClient) -> None:
        adapter = client._session.get_adapter("https://directory.example.org/")
        assert adapter.max_retries.total == 0

    def test_missing_credentials_raise_before_any_request(self) -> None:
        env = {"PORTAL_DIRECTORY_USER": "", "PORTAL_DIRECTORY_PASSWORD": "", "PORTAL_DIRECTORY_URL": ""}
        client = DirectoryFeedClient()
        with patch.dict(os.environ, env):
            with patch.object(client._session, "post") as post:
                with pytest.raises(ConfigError) as exc_info:
                    client.fetch(1)
        post.assert_not_called()
        assert client.fetch_count == 0
        assert exc_info.value.missing == [
            "PORTAL_DIRECTORY_USER",
            "PORTAL_DIRECTORY_PASSWORD",
            "PORTAL_DIRECTORY_URL",
        ]
