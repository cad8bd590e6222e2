from collections.abc import Iterable, Iterator
from typing import Self

from lookout.exception import ProviderNotFoundError
from lookout.queues.base import QueueProvider
from lookout.utils.logging_config import get_logger

log = get_logger(__name__)


class QueueProviderCollection:
    """The queue backends of a deployment, and which queues each one holds.

    A queue resolves to the provider registered for it by name, and otherwise
    to the default provider, if there is one.
    """

    def __init__(self, default_provider: QueueProvider | None = None) -> None:
        self.default_provider = default_provider
        self._providers: list[QueueProvider] = []
        self._provider_by_queue: dict[str, QueueProvider] = {}

        if default_provider is not None:
            self._providers.append(default_provider)

    def add(self, provider: QueueProvider, queues: Iterable[str]) -> Self:
        """Register a provider for the named queues.

        @param provider: The queue backend
        @param queues: The queue names it holds
        """

        if provider not in self._providers:
            self._providers.append(provider)

        for queue in queues:
            self._provider_by_queue[queue] = provider
        return self

    def get_provider(self, queue: str) -> QueueProvider:
        """Get the provider holding a queue.

        @raises ProviderNotFoundError: If no provider claims the queue and there is no default
        """

        if queue in self._provider_by_queue:
            return self._provider_by_queue[queue]

        if self.default_provider is not None:
            return self.default_provider

        log.error(f"No queue provider registered for queue {queue}")
        raise ProviderNotFoundError(queue)

    def owns(self, provider: QueueProvider, queue: str) -> bool:
        """Whether a queue listed by a provider resolves back to that provider.

        A queue that resolves to no provider at all belongs to whichever
        provider lists it.
        """

        owner = self._provider_by_queue.get(queue, self.default_provider)
        return owner is None or owner is provider

    def __iter__(self) -> Iterator[QueueProvider]:
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)
