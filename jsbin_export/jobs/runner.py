"""Main job runner orchestrating the export pipeline."""
import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

import httpx

from jsbin_export.auth.session import SessionManager
from jsbin_export.config import Config
from jsbin_export.errors import exit_code_for
from jsbin_export.fetch.client import FetchClient
from jsbin_export.fetch.pacing import RequestPacer
from jsbin_export.jobs.metrics import Metrics
from jsbin_export.parse.models import ExportSnapshot, ListItem, utc_now_iso
from jsbin_export.parse.page import add_date_to_page
from jsbin_export.render import render_index
from jsbin_export.store.writer import ExportWriter

logger = logging.getLogger(__name__)


@dataclass
class ExportResult:
    """Outcome of one export run."""

    items: int = 0
    downloaded: int = 0
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def exit_code(self) -> int:
        return exit_code_for(self.error)


class ExportRunner:
    """Runs login, listing, index rendering and item downloads in order."""

    def __init__(
        self,
        config: Config,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.config = config
        self.transport = transport
        self.pacer = RequestPacer(config.delay, sleep=sleep)
        self.writer = ExportWriter(config.folder)
        self.metrics = Metrics()

    async def run(self) -> ExportResult:
        """Run the export; errors are logged here and returned, never raised."""
        result = ExportResult()
        logger.info("Started!")
        # The snapshot is stamped with the time the export started
        last_exported = utc_now_iso()
        try:
            async with FetchClient(
                self.config.base_url,
                timeout=self.config.timeout,
                transport=self.transport,
            ) as client:
                session = SessionManager(client)
                cookie = await session.authenticate(self.config.username, self.config.password)

                items = await client.fetch_list(cookie)
                result.items = len(items)
                logger.info(f"{len(items)} items found in {self.config.username}'s list")

                snapshot = ExportSnapshot(
                    username=self.config.username,
                    last_exported=last_exported,
                    items=items,
                )
                self.save_snapshot(snapshot)

                result.downloaded = await self.download_items(client, items, cookie)
        except Exception as e:
            logger.error(f"Error! {e}", exc_info=e)
            result.error = e
            result.downloaded = self.metrics.get_summary()["downloaded"]
            return result

        logger.info(f"List of {result.items} items generated")
        return result

    def save_snapshot(self, snapshot: ExportSnapshot) -> None:
        """Render the index, then recreate the folder and write data.json and index.html."""
        # Rendering first keeps the previous export when the template is broken
        index_html = render_index(snapshot, self.config.template)
        self.writer.reset()
        self.writer.write_snapshot(snapshot, index_html)

    async def download_items(
        self, client: FetchClient, items: list[ListItem], cookie: str
    ) -> int:
        """Download each item in list order, one at a time, after the fixed delay."""
        selected = items
        limit = self.config.limit
        if limit is not None and limit < len(items):
            selected = items[:limit]
            logger.warning(
                f"Limit {limit} reached: skipping {len(items) - limit} of {len(items)} items"
            )

        self.metrics = Metrics(len(selected))
        for item in selected:
            await self.pacer.wait()
            html = await client.fetch_item(item, cookie)
            await self.writer.write_item(item, add_date_to_page(html, item.last_updated))
            self.metrics.increment("downloaded")
            logger.info(item.label)

        self.metrics.report()
        return self.metrics.get_summary()["downloaded"]
