"""Page snapshots captured during verification replay."""

import inspect
from collections.abc import Callable
from typing import Any, Optional

import structlog

from ..recording.capabilities import InstancePool

logger = structlog.get_logger()

LOCAL_STORAGE_SCRIPT = """() => {
  const items = {};
  for (let i = 0; i < localStorage.length; i++) {
    const key = localStorage.key(i);
    if (key) items[key] = localStorage.getItem(key) || '';
  }
  return items;
}"""


async def _capture(field_name: str, read: Callable[[], Any]) -> Any:
    """Read one snapshot field; a failure leaves just that field empty."""
    try:
        value = read()
        if inspect.isawaitable(value):
            value = await value
        return value
    except Exception as e:
        logger.debug("Snapshot field unavailable", field=field_name, error=str(e))
        return None


async def capture_page_data(pool: InstancePool, instance_id: str) -> Optional[dict]:
    """Capture url, title, viewport, cookies, markup, accessibility tree and
    local storage of the instance's current page.

    Returns None when the instance or its page cannot be reached.
    """
    try:
        instance = pool.get_instance(instance_id)
    except Exception as e:
        logger.debug("Snapshot instance unavailable", instance_id=instance_id, error=str(e))
        return None
    if instance is None:
        return None

    page = getattr(instance, "page", None)
    if page is None:
        return None

    return {
        "url": await _capture("url", lambda: page.url),
        "title": await _capture("title", lambda: page.title()),
        "viewport": await _capture("viewport", lambda: page.viewport_size),
        "cookies": await _capture("cookies", lambda: page.context.cookies()),
        "html": await _capture("html", lambda: page.content()),
        "accessibility": await _capture("accessibility", lambda: page.accessibility.snapshot()),
        "localStorage": await _capture("localStorage", lambda: page.evaluate(LOCAL_STORAGE_SCRIPT)),
    }
