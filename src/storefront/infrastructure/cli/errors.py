"""Turns domain errors into click errors with one exit code per kind."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import click

from storefront.domain.exceptions import (
    ConcurrencyError,
    DomainException,
    EntityNotFoundError,
    Forbidden,
    InsufficientStockError,
    InvalidTransitionError,
    Unauthenticated,
    ValidationError,
)

EXIT_CODES: dict[type[DomainException], int] = {
    Unauthenticated: 3,
    Forbidden: 4,
    EntityNotFoundError: 5,
    ValidationError: 6,
    InsufficientStockError: 7,
    InvalidTransitionError: 8,
    ConcurrencyError: 9,
}


class DomainClickException(click.ClickException):

    def __init__(self, exc: DomainException) -> None:
        super().__init__(str(exc))
        self.exit_code = exit_code_for(exc)


def exit_code_for(exc: DomainException) -> int:
    for kind in type(exc).__mro__:
        if kind in EXIT_CODES:
            return EXIT_CODES[kind]
    return 1


@contextmanager
def domain_errors() -> Iterator[None]:
    try:
        yield
    except DomainException as exc:
        raise DomainClickException(exc) from exc
