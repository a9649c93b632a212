"""
Named parallel fetch for independent datastore lookups
"""

import asyncio
import logging
from typing import Any, Awaitable, Dict

logger = logging.getLogger(__name__)

async def fetch_all(**fetches: Awaitable[Any]) -> Dict[str, Any]:
    """
    Run named lookups concurrently and return their results by name.

    All lookups are started before any is awaited. If one fails, the
    lookups still running are cancelled and the first failure is re-raised,
    so a partial result is never returned.

    Example:
        results = await fetch_all(
            bookinstance=instances.get_instance(instance_id),
            books=books.list_titles()
        )
    """
    tasks = {name: asyncio.ensure_future(fetch) for name, fetch in fetches.items()}
    try:
        await asyncio.gather(*tasks.values())
    except BaseException:
        pending = [task for task in tasks.values() if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        failed = [name for name, task in tasks.items() if task.done() and not task.cancelled() and task.exception()]
        logger.warning(f"Parallel fetch aborted, failed lookups: {failed}")
        raise
    return {name: task.result() for name, task in tasks.items()}
