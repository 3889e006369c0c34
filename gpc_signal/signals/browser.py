"""Playwright integration for privacy signal resolution.

Reads the native GPC/DNT values and cookies from a live page, keeps the
page's body class in sync with the resolved signal, and simulates the
signals on a browser context so pages can be checked with them turned on.
"""

import logging
from typing import Dict, Optional, Set, Tuple

from playwright.async_api import BrowserContext, Page, Request, Route

from .models import DNT_HEADER, GPC_HEADER, BodyClassList, SignalResolution, UserAgentEnvironment
from .resolver import GlobalPrivacyControl

logger = logging.getLogger(__name__)


# Only undefined navigator values are reported as null. A present null becomes
# false / "null" so it resolves like a signal that is present and off.
READ_ENVIRONMENT_SCRIPT = """
() => {
    const gpc = navigator.globalPrivacyControl;
    const dnt = navigator.doNotTrack;
    return {
        globalPrivacyControl: typeof gpc === 'undefined' ? null : Boolean(gpc),
        doNotTrack: typeof dnt === 'undefined' ? null : String(dnt),
        cookie: document.cookie || ''
    };
}
"""

READ_BODY_CLASS_SCRIPT = "() => document.body ? document.body.className : null"

APPLY_SIGNAL_CLASS_SCRIPT = """
([desired, opposite]) => {
    if (!document.body) {
        return null;
    }
    document.body.classList.remove(opposite);
    document.body.classList.add(desired);
    return document.body.className;
}
"""


async def read_page_environment(page: Page) -> UserAgentEnvironment:
    """Read the user agent signals visible to scripts on the page.

    Args:
        page: Playwright page object

    Returns:
        Environment with the page's signals; empty if evaluation failed
    """
    try:
        data = await page.evaluate(READ_ENVIRONMENT_SCRIPT)
    except Exception as e:
        logger.warning(f"Error reading privacy signals from page: {e}")
        return UserAgentEnvironment()

    return UserAgentEnvironment.from_navigator(data)


async def read_page_body_classes(page: Page) -> Optional[BodyClassList]:
    """Read the body's class list, or None if the page has no readable body."""
    try:
        class_name = await page.evaluate(READ_BODY_CLASS_SCRIPT)
    except Exception as e:
        logger.warning(f"Error reading body classes from page: {e}")
        return None

    if class_name is None:
        return None
    return BodyClassList.from_class_name(class_name)


async def apply_page_signal_class(page: Page, desired: str, opposite: str) -> Optional[BodyClassList]:
    """Swap the signal class on the page body, leaving every other class alone."""
    class_name = await page.evaluate(APPLY_SIGNAL_CLASS_SCRIPT, [desired, opposite])
    if class_name is None:
        return None
    return BodyClassList.from_class_name(class_name)


async def sync_page_body_class(
    page: Page,
    resolver: GlobalPrivacyControl
) -> Tuple[SignalResolution, Optional[str]]:
    """Resolve the page's signal and apply the signal class to its body.

    The resolver's environment and body classes are replaced by the ones
    read from the page; its configuration is kept. Nothing is written when
    the body classes cannot be read.

    Args:
        page: Playwright page object
        resolver: Configured resolver

    Returns:
        Resolution for the page and the class added to its body, or None
        when the body was left unchanged
    """
    resolver.environment = await read_page_environment(page)
    resolution = resolver.resolve()

    body_classes = await read_page_body_classes(page)
    if body_classes is None:
        logger.warning(f"Skipping body class sync for {page.url}: body classes unavailable")
        return resolution, None

    resolver.body_classes = body_classes
    before = body_classes.class_name
    desired = resolver.refresh_body_class()

    if desired is None or body_classes.class_name == before:
        return resolution, None

    opposite = resolver.signal_class_name(not resolution.signal)
    page_classes = await apply_page_signal_class(page, desired, opposite)
    if page_classes is not None:
        resolver.body_classes = page_classes
    logger.debug(f"Applied body class {desired} to {page.url}")

    return resolution, desired


class PrivacySignalSimulator:
    """Simulates GPC and DNT user agent settings on browser contexts.

    Injects the request headers into every request and defines the
    matching ``navigator`` properties before page scripts run.
    """

    def __init__(self, gpc: bool = True, dnt: bool = False):
        """Initialize simulator.

        Args:
            gpc: Send ``Sec-GPC: 1`` and set ``navigator.globalPrivacyControl``
            dnt: Send ``DNT: 1`` and set ``navigator.doNotTrack``
        """
        self.gpc = gpc
        self.dnt = dnt
        self.injected_contexts: Set[int] = set()

    @property
    def headers(self) -> Dict[str, str]:
        headers = {}
        if self.gpc:
            headers[GPC_HEADER] = "1"
        if self.dnt:
            headers[DNT_HEADER] = "1"
        return headers

    @property
    def init_script(self) -> Optional[str]:
        properties = []
        if self.gpc:
            properties.append(("globalPrivacyControl", "true"))
        if self.dnt:
            properties.append(("doNotTrack", "'1'"))
        if not properties:
            return None

        return "\n".join(
            f"Object.defineProperty(Navigator.prototype, '{name}', "
            f"{{get: () => {value}, configurable: true}});"
            for name, value in properties
        )

    async def enable_for_context(self, context: BrowserContext) -> None:
        """Enable signal simulation for a browser context.

        Args:
            context: Playwright browser context
        """
        context_id = id(context)
        if context_id in self.injected_contexts:
            logger.debug("Privacy signals already simulated for this context")
            return

        headers = self.headers
        if not headers:
            logger.debug("No privacy signals to simulate")
            return

        async def inject_headers(route: Route, request: Request) -> None:
            merged = dict(request.headers)
            merged.update(headers)
            await route.continue_(headers=merged)

        await context.route("**/*", inject_headers)

        script = self.init_script
        if script:
            await context.add_init_script(script)

        self.injected_contexts.add(context_id)
        logger.info(f"Privacy signal simulation enabled with headers: {headers}")

    async def disable_for_context(self, context: BrowserContext) -> None:
        """Stop injecting headers for a browser context.

        Init scripts cannot be removed from a context, so pages opened
        afterwards still see the simulated ``navigator`` values.
        """
        context_id = id(context)
        if context_id not in self.injected_contexts:
            return

        await context.unroute("**/*")
        self.injected_contexts.discard(context_id)
        logger.info("Privacy signal simulation disabled for context")
