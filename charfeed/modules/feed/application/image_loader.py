"""Per-row image loader.

Each display slot owns at most one outstanding image fetch. A binding token,
drawn from a monotonically increasing counter and never reused, is captured
when the fetch starts and compared when it completes; results for a token
that is no longer current are dropped.
"""

import asyncio
import itertools
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import NewType

from loguru import logger

from charfeed.modules.characters.domain.exceptions import ImageFetchError
from charfeed.modules.characters.domain.ports import ImageFetcher

BindingToken = NewType("BindingToken", int)

# (slot, image bytes or None for the placeholder)
ImageApplied = Callable[[Hashable, bytes | None], None]


@dataclass
class _SlotBinding:
    token: BindingToken
    url: str | None
    task: asyncio.Task[None] | None = None
    image: bytes | None = None


class ImageLoader:
    """Binds image URLs to display slots with stale-result suppression."""

    def __init__(self, fetcher: ImageFetcher, on_image: ImageApplied | None = None):
        self.fetcher = fetcher
        self._on_image = on_image
        self._bindings: dict[Hashable, _SlotBinding] = {}
        self._tokens = itertools.count(1)

    def bind(self, slot: Hashable, url: str | None) -> BindingToken:
        """Assign ``url`` to ``slot``; the slot shows the placeholder until it loads."""
        self._cancel(slot)
        token = BindingToken(next(self._tokens))
        binding = _SlotBinding(token=token, url=url or None)
        self._bindings[slot] = binding
        self._apply(slot, None)

        if binding.url:
            binding.task = asyncio.get_running_loop().create_task(
                self._load(slot, token, binding.url)
            )
        return token

    def unbind(self, slot: Hashable) -> None:
        """Release ``slot``: cancel its fetch and reset it to the placeholder."""
        had_binding = slot in self._bindings
        self._cancel(slot)
        self._bindings.pop(slot, None)
        if had_binding:
            self._apply(slot, None)

    def current_token(self, slot: Hashable) -> BindingToken | None:
        binding = self._bindings.get(slot)
        return binding.token if binding else None

    def image_for(self, slot: Hashable) -> bytes | None:
        binding = self._bindings.get(slot)
        return binding.image if binding else None

    def is_loading(self, slot: Hashable) -> bool:
        binding = self._bindings.get(slot)
        return bool(binding and binding.task and not binding.task.done())

    async def wait_idle(self) -> None:
        tasks = [b.task for b in self._bindings.values() if b.task is not None]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def close(self) -> None:
        for slot in list(self._bindings):
            self._cancel(slot)
        self._bindings.clear()

    async def _load(self, slot: Hashable, token: BindingToken, url: str) -> None:
        try:
            data = await self.fetcher.fetch(url)
        except ImageFetchError as exc:
            logger.debug(f"Image for slot {slot!r} left as placeholder: {exc.message}")
            return

        binding = self._bindings.get(slot)
        if binding is None or binding.token != token:
            logger.debug(f"Dropping stale image for slot {slot!r} (token {token})")
            return
        binding.image = data
        binding.task = None
        self._apply(slot, data)

    def _cancel(self, slot: Hashable) -> None:
        binding = self._bindings.get(slot)
        if binding is None or binding.task is None:
            return
        task, binding.task = binding.task, None
        if not task.done():
            task.cancel()

    def _apply(self, slot: Hashable, image: bytes | None) -> None:
        binding = self._bindings.get(slot)
        if binding is not None:
            binding.image = image
        if self._on_image is None:
            return
        try:
            self._on_image(slot, image)
        except Exception as e:
            logger.error(f"Error applying image to slot {slot!r}: {e}")
