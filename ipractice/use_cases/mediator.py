"""Dispatch of commands and queries to their handlers."""

import inspect
import logging
from collections.abc import Callable, Mapping
from typing import Any

from ipractice.core.errors import DomainError
from ipractice.core.fault_injection import FaultInjector, NoFaultInjector
from ipractice.unit_of_work import SqlAlchemyUnitOfWork

logger = logging.getLogger(__name__)


class NoHandlerForMessage(LookupError):
    """Raised when no handler is registered for a message type."""

    def __init__(self, message: object) -> None:
        super().__init__(f"No handler found for {type(message).__name__}")


class Mediator:
    """Route a command or query to its handler.

    Every message gets a fresh unit of work, so handlers share no session
    state across requests. Handlers declare the dependencies they need by
    parameter name (``uow``, ``fault_injector``) and receive only those.

    Args:
        uow_factory: Builds the unit of work handed to each handler.
        handlers: Mapping of message type to handler callable.
        fault_injector: Failure-injection hook for handlers that accept one.
    """

    def __init__(
        self,
        uow_factory: Callable[[], SqlAlchemyUnitOfWork],
        handlers: Mapping[type, Callable[..., Any]],
        fault_injector: FaultInjector | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._handlers = dict(handlers)
        self._fault_injector = fault_injector or NoFaultInjector()

    def send(self, message: object) -> Any:
        handler = self._handlers.get(type(message))
        if handler is None:
            logger.error('No handler found for %s', type(message).__name__)
            raise NoHandlerForMessage(message)

        dependencies = {'uow': self._uow_factory(), 'fault_injector': self._fault_injector}
        params = inspect.signature(handler).parameters
        kwargs = {name: dependency for name, dependency in dependencies.items() if name in params}

        logger.debug('Handling %s with %s', message, handler.__name__)
        try:
            return handler(message, **kwargs)
        except DomainError as exc:
            logger.info('%s rejected: %s', type(message).__name__, exc)
            raise
        except Exception:
            logger.exception('Unexpected error handling %s with %s', type(message).__name__, handler.__name__)
            raise
