"""Browser lifecycle for a single report run.

Launches Chromium through Playwright, injects the bundle and bootstrap
routine, navigates to the login page and feeds console messages to a
Collector until the page signals completion.

Console callbacks only enqueue messages; a single consumer resolves and
applies them, so the report keeps arrival order even though resolving a
message's arguments is asynchronous.
"""

import asyncio
import logging
import sys
from collections.abc import Callable
from typing import Any

from playwright.async_api import ConsoleMessage, JSHandle, Page, async_playwright
from playwright.async_api import Error as PlaywrightError

from vreport.bootstrap import build_init_script, load_bundle
from vreport.classify import Collector, ConsoleEvent, Debug, OtherError
from vreport.config import USER_AGENT, Settings
from vreport.exceptions import BootstrapError, LaunchError

logger = logging.getLogger(__name__)


def _stderr(text: str) -> None:
    print(text, file=sys.stderr)


async def maybe_get_error(handle: JSHandle) -> str | None:
    """Return the ``message`` property of an Error handle, if it has one."""
    prop = await handle.get_property("message")
    value = await prop.json_value()
    return value if isinstance(value, str) else None


async def _json_value(handle: JSHandle) -> Any:
    try:
        return await handle.json_value()
    except PlaywrightError as e:
        # Unserializable values, or the page navigated away in between
        logger.debug("Could not resolve console argument: %s", e)
        return None


async def resolve_event(message: ConsoleMessage) -> ConsoleEvent:
    """Resolve a Playwright console message into a ConsoleEvent."""
    handles = message.args
    args = [await _json_value(handle) for handle in handles]

    cause = None
    if len(handles) > 3:
        try:
            cause = await maybe_get_error(handles[3])
        except PlaywrightError as e:
            logger.debug("Could not resolve error argument: %s", e)

    return ConsoleEvent(level=message.type, args=args, text=message.text, cause=cause)


class Runner:
    """Runs the mod in a headless browser and collects its diagnostics.

    Attributes:
        settings: Resolved run settings.
        collector: Receives every console event until completion.
    """

    def __init__(
        self,
        settings: Settings,
        echo: Callable[[str], None] = _stderr,
        collector: Collector | None = None,
    ) -> None:
        self.settings = settings
        self.echo = echo
        self.collector = collector if collector is not None else Collector()
        self._queue: asyncio.Queue[ConsoleMessage] = asyncio.Queue()

    def _on_page_error(self, error: PlaywrightError) -> None:
        self.echo(f"[Page Error] {error}")

    def _on_crash(self, page: Page) -> None:
        self.echo(f"[Error] Page crashed: {page.url}")

    async def consume(self) -> Collector:
        """Apply queued console messages until completion.

        Raises:
            BootstrapError: If the page signalled a fatal bootstrap error.
            PatternMismatchError: If a mod log line had an unknown format.
        """
        while not self.collector.done:
            message = await self._queue.get()
            event = await resolve_event(message)
            result = self.collector.apply(event)

            if isinstance(result, Debug):
                self.echo(result.text)
            elif isinstance(result, OtherError):
                self.echo(f"Got unexpected error {result.text}")

        if self.collector.fatal is not None:
            raise BootstrapError("Bootstrap routine failed", detail=self.collector.fatal)
        return self.collector

    async def attach(self, page: Page, script: str) -> None:
        """Subscribe to the page and install the init script."""
        page.on("console", self._queue.put_nowait)
        page.on("pageerror", self._on_page_error)
        page.on("crash", self._on_crash)

        await page.add_init_script(script=script)

    async def run(self) -> Collector:
        """Launch the browser, run the page to completion and close it.

        Raises:
            BundleError: If the bundle cannot be read.
            LaunchError: If the browser, page or navigation fails.
            BootstrapError: If the page signalled a fatal bootstrap error.
            PatternMismatchError: If a mod log line had an unknown format.
        """
        # Read the bundle before starting anything
        bundle = load_bundle(self.settings.bundle_path)
        script = build_init_script(bundle, self.settings.token)

        async with async_playwright() as pw:
            logger.info("Launching %s", self.settings.chromium_bin)
            try:
                browser = await pw.chromium.launch(
                    headless=self.settings.headless,
                    executable_path=str(self.settings.chromium_bin),
                )
            except PlaywrightError as e:
                raise LaunchError("Failed to launch browser", detail=str(e)) from e

            try:
                try:
                    context = await browser.new_context(
                        user_agent=USER_AGENT,
                        bypass_csp=True,
                    )
                    page = await context.new_page()
                    await self.attach(page, script)

                    logger.info("Navigating to %s", self.settings.login_url)
                    await page.goto(self.settings.login_url)
                except PlaywrightError as e:
                    raise LaunchError("Failed to open login page", detail=str(e)) from e

                return await self.consume()
            finally:
                await browser.close()
                logger.debug("Browser closed")


def run(settings: Settings, echo: Callable[[str], None] = _stderr) -> Collector:
    """Run a full report session and return the filled collector."""
    return asyncio.run(Runner(settings, echo=echo).run())
