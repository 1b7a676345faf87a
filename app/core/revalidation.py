# app/core/revalidation.py
import logging
from typing import Callable

logger = logging.getLogger(__name__)

RevalidateListener = Callable[[str], None]

_listeners: list[RevalidateListener] = []


def on_revalidate(listener: RevalidateListener) -> RevalidateListener:
    """
    Register a listener that is told which page path became stale.

    Can be used as a decorator:

        @on_revalidate
        def purge_cdn(path: str) -> None:
            ...
    """
    _listeners.append(listener)
    return listener


def remove_listener(listener: RevalidateListener) -> None:
    if listener in _listeners:
        _listeners.remove(listener)


def product_path(slug: str) -> str:
    return f"/product/{slug}"


def revalidate_path(path: str) -> None:
    """
    Fire-and-forget: notify every listener that `path` must be re-rendered.

    Listener failures are logged and never reach the caller.
    """
    logger.debug("Revalidating %s", path)
    for listener in list(_listeners):
        try:
            listener(path)
        except Exception:
            logger.exception("Revalidation listener failed for %s", path)
