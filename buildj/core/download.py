"""
Tool registry client.

This module talks to the package metadata service and downloads packages:
- Tool detail queries (authenticated or anonymous endpoint)
- Archive version queries (used when creating a build.json)
- Streaming downloads with progress reporting driven by Content-Length

All transport and payload failures surface as RegistryError.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import requests
from requests.exceptions import RequestException

from buildj.core.config import LauncherConfig
from buildj.core.exceptions import RegistryError
from buildj.core.progress import ProgressCallback, format_size

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192
DOWNLOAD_LABEL = "Download"


@dataclass(frozen=True)
class RegistryRecord:
    """Tool package detail returned by the registry."""

    status: int
    name: str
    """Archive file name, e.g. apache-maven-3.5.2-bin.tar.gz"""

    url: str
    integrity: str
    canonical_name: str
    """Registry's canonical tool name ('n')"""

    canonical_version: str
    """Registry's canonical version ('v')"""

    message: Optional[str] = None

    @classmethod
    def from_json(cls, payload: Any) -> "RegistryRecord":
        """
        Build a record from a decoded registry response.

        Raises:
            RegistryError: If status is not 200 or required fields are missing
        """
        if not isinstance(payload, dict):
            raise RegistryError(f"Parse tool package detail failed: {payload!r}")

        if payload.get("status") != 200:
            raise RegistryError(
                f"Error in get tool package detail: {payload.get('message')}"
            )

        data = payload.get("data")
        if not isinstance(data, dict):
            raise RegistryError(f"Parse tool package detail failed: {payload!r}")

        integrity = data.get("integrity")
        url = data.get("url")
        name = data.get("name")
        if integrity is None or url is None or name is None:
            raise RegistryError(f"Parse tool package detail failed: {payload!r}")

        return cls(
            status=200,
            name=str(name),
            url=str(url),
            integrity=str(integrity),
            canonical_name=str(data.get("n", "")),
            canonical_version=str(data.get("v", "")),
            message=payload.get("message"),
        )


def parse_content_length(value: Optional[str]) -> Optional[int]:
    """
    Parse a Content-Length header value.

    Missing or malformed values yield None; they never fail the download.

    Example:
        >>> parse_content_length("1024")
        1024
        >>> parse_content_length("abc") is None
        True
    """
    if value is None:
        return None
    try:
        length = int(value.strip())
    except ValueError:
        logger.warning(f"Get content length for {value!r} failed, not a number")
        return None
    if length < 0:
        logger.warning(f"Get content length for {value!r} failed, negative")
        return None
    return length


class RegistryClient:
    """
    Client for the tool registry.

    Example:
        >>> client = RegistryClient(LauncherConfig.from_environment())
        >>> record = client.query_tool("maven", "3.5.2", auth_token=None)
        >>> client.download(record.url, Path("/tmp") / record.name)
    """

    def __init__(
        self,
        config: Optional[LauncherConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        self.config = config or LauncherConfig()
        self.session = session or requests.Session()

    def _get_json(self, url: str, params: Dict[str, str]) -> Any:
        try:
            response = self.session.get(url, params=params, timeout=self.config.timeout)
            response.raise_for_status()
        except RequestException as e:
            raise RegistryError(f"Get URL {url} failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise RegistryError(f"Parse JSON from {url} failed: {e}") from e

    def query_tool(
        self, name: str, version: str, auth_token: Optional[str] = None
    ) -> RegistryRecord:
        """
        Query the tool package detail for name/version.

        Args:
            name: Registry tool name (e.g. "maven", "jdk-linux")
            version: Requested version
            auth_token: Registry secret; selects the authenticated endpoint

        Returns:
            Parsed RegistryRecord

        Raises:
            RegistryError: On network failure, HTTP error, malformed JSON,
                registry status other than 200, or missing fields
        """
        params: Dict[str, str] = {}
        if auth_token:
            url = self.config.endpoints.query_url
            params["__auth_token"] = auth_token
        else:
            if self.config.no_auth:
                logger.warning("Running in no auth mode!")
            url = self.config.endpoints.query_url_without_auth
        params["name"] = name
        params["ver"] = version

        logger.debug(f"Get tool package detail: {name}:{version} from {url}")
        payload = self._get_json(url, params)
        logger.debug(
            f"Get tool {name}:{version}, result JSON: {json.dumps(payload, indent=4)}"
        )
        return RegistryRecord.from_json(payload)

    def query_archive_version(self, group_id: str, artifact_id: str) -> str:
        """
        Get the latest published version of a Maven archive.

        Raises:
            RegistryError: On transport failure or registry status other than 200
        """
        logger.debug(f"Start get archive info: {group_id}:{artifact_id}")
        payload = self._get_json(
            self.config.endpoints.archive_version_url,
            {"gid": group_id, "aid": artifact_id},
        )
        logger.debug(f"Get archive result: {payload}")
        if not isinstance(payload, dict) or payload.get("status") != 200:
            raise RegistryError(f"Get archive info version failed: {payload}")
        if payload.get("data") is None:
            raise RegistryError(f"Get archive info version failed: {payload}")
        return str(payload["data"])

    def download(
        self,
        url: str,
        destination: Path,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> Path:
        """
        Stream url into destination.

        Args:
            url: Package URL
            destination: File to write (parent directory must exist)
            progress_callback: Optional callback(label, bytes_downloaded, total_bytes);
                total_bytes is None when Content-Length is missing or malformed

        Returns:
            destination

        Raises:
            RegistryError: If the request or the transfer fails; the partial
                file is removed
        """
        destination = Path(destination)
        logger.debug(f"Start download URL: {url}")

        try:
            response = self.session.get(url, stream=True, timeout=self.config.timeout)
            response.raise_for_status()
        except RequestException as e:
            raise RegistryError(f"Download {url} failed: {e}") from e

        total = parse_content_length(response.headers.get("content-length"))
        logger.debug(f"Content-Length: {total if total is not None else -1}")

        downloaded = 0
        try:
            with response, open(destination, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if not chunk:
                        continue
                    f.write(chunk)
                    downloaded += len(chunk)

                    if progress_callback:
                        progress_callback(DOWNLOAD_LABEL, downloaded, total)
        except (RequestException, OSError) as e:
            logger.error(f"Error during download: {e}")
            destination.unlink(missing_ok=True)
            raise RegistryError(f"Download {url} failed: {e}") from e

        logger.debug(f"Download complete: {destination} ({format_size(downloaded)})")
        return destination
