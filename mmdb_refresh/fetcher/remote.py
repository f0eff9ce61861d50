"""Remote database fetcher.

Downloads the database archive over HTTP with ``If-Modified-Since``
revalidation and publishes the extracted database through the store.
"""

from mmdb_refresh.config import Settings
from mmdb_refresh.helpers.archive import extract_database
from mmdb_refresh.helpers.background_task import run_in_threadpool
from mmdb_refresh.helpers.time import file_timestamp, format_http_date, parse_http_date, utcnow
from mmdb_refresh.log import fetcher_logger
from mmdb_refresh.models.refresh import RefreshOutcome
from mmdb_refresh.storage import DatabaseStore

import httpx

LICENSE_KEY_PLACEHOLDER = "LICENSE_KEY"

logger = fetcher_logger("RemoteFetcher")


def build_url(template: str, license_key: str) -> str:
    return template.replace(LICENSE_KEY_PLACEHOLDER, license_key)


class RemoteFetcher:
    """Conditional HTTP download of the database archive.

    Attributes:
        store: Store receiving new databases and holding the last token.
    """

    def __init__(self, store: DatabaseStore, transport: httpx.AsyncBaseTransport | None = None):
        self.store = store
        self._transport = transport

    def _headers(self, settings: Settings) -> dict[str, str]:
        headers: dict[str, str] = {}
        last_modified = self.store.state.last_modified
        if last_modified:
            headers["If-Modified-Since"] = last_modified
        if settings.user_agent:
            headers["User-Agent"] = settings.user_agent
        return headers

    async def fetch(self, settings: Settings) -> RefreshOutcome:
        """Download and publish the database if the server has a newer one.

        A response with a status other than 200 or 304 is logged and reported
        as ``UNEXPECTED_STATUS``; it is not raised.

        Args:
            settings: Settings resolved for this run.

        Returns:
            The outcome of the run.

        Raises:
            httpx.HTTPError: On network failures.
            ArchiveEntryNotFoundError: If the archive holds no database.
            OSError: If the database cannot be written.
        """
        if not settings.remote_url:
            logger.warning("Config option [maxmind.db.remote.url] not specified")
            return RefreshOutcome.SKIPPED

        url = build_url(settings.remote_url, settings.license_key)
        async with httpx.AsyncClient(
            follow_redirects=True,
            timeout=settings.timeout,
            transport=self._transport,
        ) as client:
            response = await client.get(url, headers=self._headers(settings))

        # The template is logged instead of the URL to keep the key out of logs.
        logger.info(f"Download {settings.remote_url}")
        if response.status_code == httpx.codes.NOT_MODIFIED:
            logger.info(f"{settings.remote_url} not modified")
            return RefreshOutcome.NOT_MODIFIED

        if response.status_code != httpx.codes.OK:
            message = response.text or ""
            logger.warning(
                f"Can't download {settings.remote_url}. Response code {response.status_code}: {message}"
            )
            return RefreshOutcome.UNEXPECTED_STATUS

        payload = await run_in_threadpool(extract_database, response.content)
        # No Last-Modified is still a success, kept without a revalidation token rather than retried.
        modified_at = parse_http_date(response.headers.get("Last-Modified"))
        tag = format_http_date(modified_at) if modified_at else None
        await self.store.swap(payload, file_timestamp(modified_at or utcnow()), tag)
        return RefreshOutcome.UPDATED
