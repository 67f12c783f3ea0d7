from __future__ import annotations

from typing import Callable, Protocol, TypeVar

from django.db import transaction

T = TypeVar("T")


class UnitOfWorkProtocol(Protocol):
    def run_in_transaction(self, fn: Callable[[], T]) -> T:
        ...


class DjangoUnitOfWork:
    """All-or-nothing execution backed by ``transaction.atomic``.

    Any exception raised by ``fn`` rolls back every write it made and is
    re-raised unchanged.
    """

    def __init__(self, using: str = "default"):
        self.using = using

    def run_in_transaction(self, fn: Callable[[], T]) -> T:
        with transaction.atomic(using=self.using):
            return fn()
