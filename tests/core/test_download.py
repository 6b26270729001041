"""
Unit tests for download module.

Tests the registry client with mocked network requests.
"""

import json
import pytest
import requests
import responses
from responses import matchers

from buildj.core.config import LauncherConfig
from buildj.core.download import (
    RegistryClient,
    RegistryRecord,
    parse_content_length,
)
from buildj.core.exceptions import RegistryError
from tests.fixtures.registry import (
    ARCHIVE_VERSION_URL,
    QUERY_URL,
    QUERY_URL_WITHOUT_AUTH,
    tool_payload,
)

PACKAGE_URL = "https://example.com/apache-maven-3.5.2-bin.tar.gz"


@pytest.fixture
def client():
    return RegistryClient(LauncherConfig())


class TestRegistryRecord:
    """Test RegistryRecord.from_json."""

    def test_parse(self):
        record = RegistryRecord.from_json(tool_payload(integrity="sha256:hex-ab"))

        assert record.status == 200
        assert record.name == "apache-maven-3.5.2-bin.tar.gz"
        assert record.url == PACKAGE_URL
        assert record.integrity == "sha256:hex-ab"
        assert record.canonical_name == "maven"
        assert record.canonical_version == "3.5.2"

    def test_status_not_200(self):
        with pytest.raises(RegistryError, match="tool not exists"):
            RegistryRecord.from_json(tool_payload(status=404, message="tool not exists"))

    @pytest.mark.parametrize("field", ["name", "url", "integrity"])
    def test_missing_field(self, field):
        payload = tool_payload()
        del payload["data"][field]
        with pytest.raises(RegistryError):
            RegistryRecord.from_json(payload)

    def test_not_an_object(self):
        with pytest.raises(RegistryError):
            RegistryRecord.from_json(["status", 200])


class TestQueryTool:
    """Test RegistryClient.query_tool."""

    @responses.activate
    def test_authenticated_endpoint(self, client):
        responses.add(
            responses.GET,
            QUERY_URL,
            json=tool_payload(),
            match=[
                matchers.query_param_matcher(
                    {"__auth_token": "secret", "name": "maven", "ver": "3.5.2"}
                )
            ],
        )

        record = client.query_tool("maven", "3.5.2", auth_token="secret")

        assert record.canonical_version == "3.5.2"
        assert len(responses.calls) == 1

    @responses.activate
    def test_anonymous_endpoint(self, client):
        responses.add(
            responses.GET,
            QUERY_URL_WITHOUT_AUTH,
            json=tool_payload(),
            match=[matchers.query_param_matcher({"name": "maven", "ver": "3.5.2"})],
        )

        record = client.query_tool("maven", "3.5.2")

        assert record.name == "apache-maven-3.5.2-bin.tar.gz"

    @responses.activate
    def test_no_auth_mode_warns(self, caplog):
        responses.add(responses.GET, QUERY_URL_WITHOUT_AUTH, json=tool_payload())

        RegistryClient(LauncherConfig(no_auth=True)).query_tool("maven", "3.5.2")

        assert "Running in no auth mode!" in caplog.text

    @responses.activate
    def test_custom_endpoint(self):
        config = LauncherConfig()
        config.endpoints.query_url_without_auth = "https://registry.local/q.json"
        responses.add(responses.GET, "https://registry.local/q.json", json=tool_payload())

        RegistryClient(config).query_tool("maven", "3.5.2")

        assert responses.calls[0].request.url.startswith("https://registry.local/q.json")

    @responses.activate
    def test_registry_status_error(self, client):
        responses.add(
            responses.GET,
            QUERY_URL_WITHOUT_AUTH,
            json={"status": 500, "message": "internal error"},
        )

        with pytest.raises(RegistryError, match="internal error"):
            client.query_tool("maven", "3.5.2")

    @responses.activate
    def test_malformed_json(self, client):
        responses.add(responses.GET, QUERY_URL_WITHOUT_AUTH, body="<html>")

        with pytest.raises(RegistryError, match="Parse JSON"):
            client.query_tool("maven", "3.5.2")

    @responses.activate
    def test_http_error(self, client):
        responses.add(responses.GET, QUERY_URL_WITHOUT_AUTH, status=500)

        with pytest.raises(RegistryError):
            client.query_tool("maven", "3.5.2")

    @responses.activate
    def test_connection_error(self, client):
        responses.add(
            responses.GET,
            QUERY_URL_WITHOUT_AUTH,
            body=requests.exceptions.ConnectionError("refused"),
        )

        with pytest.raises(RegistryError, match="refused"):
            client.query_tool("maven", "3.5.2")

    @responses.activate
    def test_response_logged_at_debug(self, client, debug_logging):
        payload = tool_payload()
        responses.add(responses.GET, QUERY_URL_WITHOUT_AUTH, json=payload)

        client.query_tool("maven", "3.5.2")

        assert json.dumps(payload, indent=4) in debug_logging.text


class TestQueryArchiveVersion:
    """Test RegistryClient.query_archive_version."""

    @responses.activate
    def test_latest_version(self, client):
        responses.add(
            responses.GET,
            ARCHIVE_VERSION_URL,
            json={"status": 200, "data": "3.0"},
            match=[matchers.query_param_matcher({"gid": "me.hatter", "aid": "commons"})],
        )

        assert client.query_archive_version("me.hatter", "commons") == "3.0"

    @responses.activate
    def test_failure_status(self, client):
        responses.add(responses.GET, ARCHIVE_VERSION_URL, json={"status": 404})

        with pytest.raises(RegistryError):
            client.query_archive_version("me.hatter", "commons")


class TestDownload:
    """Test RegistryClient.download."""

    @responses.activate
    def test_download_with_progress(self, client, tmp_path):
        content = b"x" * 20000
        responses.add(
            responses.GET,
            PACKAGE_URL,
            body=content,
            headers={"Content-Length": "20000"},
        )
        destination = tmp_path / "apache-maven-3.5.2-bin.tar.gz"
        updates = []

        result = client.download(
            PACKAGE_URL, destination, lambda *update: updates.append(update)
        )

        assert result == destination
        assert destination.read_bytes() == content
        assert updates[-1] == ("Download", 20000, 20000)
        assert [done for _, done, _ in updates] == sorted(done for _, done, _ in updates)

    @responses.activate
    def test_missing_content_length(self, client, tmp_path):
        responses.add(
            responses.GET,
            PACKAGE_URL,
            body=b"data",
            auto_calculate_content_length=False,
        )
        updates = []

        client.download(
            PACKAGE_URL, tmp_path / "pkg.tar.gz", lambda *update: updates.append(update)
        )

        assert updates[-1] == ("Download", 4, None)

    @responses.activate
    def test_http_error_leaves_no_file(self, client, tmp_path):
        responses.add(responses.GET, PACKAGE_URL, status=404)
        destination = tmp_path / "pkg.tar.gz"

        with pytest.raises(RegistryError):
            client.download(PACKAGE_URL, destination)

        assert not destination.exists()

    def test_transfer_error_removes_partial_file(self, tmp_path):
        class BrokenResponse:
            headers = {"content-length": "100"}

            def raise_for_status(self):
                pass

            def iter_content(self, chunk_size):
                yield b"partial"
                raise requests.exceptions.ChunkedEncodingError("connection reset")

            def __enter__(self):
                return self

            def __exit__(self, *args):
                return False

        class Session:
            def get(self, url, **kwargs):
                return BrokenResponse()

        destination = tmp_path / "pkg.tar.gz"
        client = RegistryClient(LauncherConfig(), session=Session())

        with pytest.raises(RegistryError, match="connection reset"):
            client.download(PACKAGE_URL, destination)

        assert not destination.exists()


class TestContentLength:
    @pytest.mark.parametrize(
        "value,expected",
        [("1024", 1024), (" 7 ", 7), (None, None), ("abc", None), ("-5", None)],
    )
    def test_parse(self, value, expected):
        assert parse_content_length(value) == expected

