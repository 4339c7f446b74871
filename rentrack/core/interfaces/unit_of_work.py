"""Abstract unit of work spanning ledger and registry writes."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager


class IUnitOfWork(ABC):
    """
    Groups store calls into one all-or-nothing transaction.

    Usage:
        async with uow.transaction():
            await ledger.insert_events(events)
            await inventory.update_status(...)
    """

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[None]:
        """Commit on clean exit, roll back when the block raises."""
        pass
