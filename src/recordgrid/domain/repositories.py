from abc import ABC, abstractmethod
from concurrent.futures import Future
from typing import Hashable

from .models import MutationPayload, MutationResult, RecordSet


class IPersistenceGateway(ABC):
    """The external collaborator that performs create/update/delete."""

    @abstractmethod
    def submit(self, payload: MutationPayload) -> "Future[MutationResult]":
        """Hand *payload* over; the future resolves once the store has answered"""
        pass

    @abstractmethod
    def fetch(self) -> RecordSet:
        """Return the current records after a successful mutation"""
        pass


class INavigator(ABC):
    @abstractmethod
    def open_record(self, identifier: Hashable) -> None:
        """Show the detail view for *identifier*"""
        pass
