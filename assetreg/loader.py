# assetreg/loader.py
"""
Loader boundary.

The registry hands batches of requests to a Loader and awaits one result
per request. How bytes are fetched and decoded is the loader's business.

ResourceLoader is a small reference implementation: it dispatches each
request to an async handler registered for the request type, keeps the
content hash -> URL table, and shares in-flight fetches between
concurrent batches asking for the same URL.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, Hashable, List, Optional, Sequence, Type

logger = logging.getLogger(__name__)


class LoadError(RuntimeError):
    """A batch of requests could not be loaded."""


class Loader(ABC):
    """
    Base class for batched resource loaders.

    Subclasses implement request(); the hash table is shared behaviour.
    """

    def __init__(self):
        self._hashes: Dict[str, str] = {}

    def register_hash(self, content_hash: str, url: str):
        """Record where content with this hash lives (last write wins)."""
        self._hashes[content_hash] = url

    def get_url_for_hash(self, content_hash: str) -> Optional[str]:
        """Resolve a content hash to its registered URL."""
        return self._hashes.get(content_hash)

    @abstractmethod
    async def request(self, requests: Sequence[Any], options: Optional[Dict[str, Any]] = None) -> List[Any]:
        """
        Load a batch of requests.

        Args:
            requests: Request values, as built by the request builders
            options: Loader-specific options

        Returns:
            One resource per request, in request order
        """
        pass


# Handler signature: async (request, options) -> resource
RequestHandler = Callable[[Any, Dict[str, Any]], Awaitable[Any]]


class ResourceLoader(Loader):
    """
    Loader dispatching requests to per-type async handlers.

    Usage:
        loader = ResourceLoader()
        loader.register_handler(ModelRequest, fetch_model)
        resources = await loader.request([ModelRequest("tree.model")])
    """

    def __init__(self):
        super().__init__()
        self._handlers: Dict[Type, RequestHandler] = {}
        self._in_flight: Dict[Hashable, asyncio.Task] = {}

    def register_handler(self, request_type: Type, handler: RequestHandler):
        """Register the handler for a request type."""
        if request_type in self._handlers:
            logger.warning(f"Overwriting handler for {request_type.__name__}")
        self._handlers[request_type] = handler

    def get_handler(self, request: Any) -> Optional[RequestHandler]:
        """Find the handler for a request, most specific type first."""
        for cls in type(request).__mro__:
            handler = self._handlers.get(cls)
            if handler is not None:
                return handler
        return None

    @property
    def in_flight(self) -> int:
        """Number of fetches currently running."""
        return len(self._in_flight)

    async def request(self, requests: Sequence[Any], options: Optional[Dict[str, Any]] = None) -> List[Any]:
        options = options or {}

        handlers = []
        for request in requests:
            handler = self.get_handler(request)
            if handler is None:
                raise LoadError(f"No handler for request type: {type(request).__name__}")
            handlers.append(handler)

        tasks = [
            self._fetch(request, handler, options)
            for request, handler in zip(requests, handlers)
        ]
        return list(await asyncio.gather(*tasks))

    def _fetch(self, request: Any, handler: RequestHandler, options: Dict[str, Any]) -> Awaitable[Any]:
        key = self._request_key(request)
        if key is None:
            return handler(request, options)

        task = self._in_flight.get(key)
        if task is not None:
            logger.debug(f"Joining in-flight fetch: {key}")
            # Shield so one cancelled batch does not cancel the shared fetch
            return asyncio.shield(task)

        task = asyncio.ensure_future(handler(request, options))
        self._in_flight[key] = task
        task.add_done_callback(lambda _: self._in_flight.pop(key, None))
        return task

    def _request_key(self, request: Any) -> Optional[Hashable]:
        """
        Identity of a request for in-flight sharing.

        Requests that write into a caller-owned container are never shared.
        """
        if getattr(request, "texture", None) is not None:
            return None
        url = getattr(request, "url", None)
        if url is None:
            return None
        return (type(request).__name__, url)
