"""
Verb Base

A verb is one invocable command (build, ...). Invoking it returns a
VerbOutcome that is settled exactly once; progress and errors are reported
separately to observers registered with ``on(event, callback)``.

Observer events:
    status: {"sub": <status name>, ...payload}
    error:  {"sub": <error code>, "error": <exception>, "quit": bool}
"""

from collections import defaultdict
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from vitae.contexts.building.logger import _log_debug

STATUS_EVENT = "status"
ERROR_EVENT = "error"


@dataclass
class VerbOutcome:
    """
    Settled result of a verb invocation.

    Attributes:
        success: True when resolved, False when rejected
        result: Verb-specific result (may accompany a rejection)
        error: Rejection reason
    """

    success: Optional[bool] = None
    result: Optional[Any] = None
    error: Optional[Exception] = None

    @property
    def settled(self) -> bool:
        return self.success is not None

    def _settle(self, success: bool, result: Any, error: Optional[Exception]) -> "VerbOutcome":
        if self.settled:
            raise RuntimeError("Verb outcome has already been settled")
        self.success, self.result, self.error = success, result, error
        return self

    def resolve(self, result: Any = None) -> "VerbOutcome":
        return self._settle(True, result, None)

    def reject(self, error: Exception, result: Any = None) -> "VerbOutcome":
        return self._settle(False, result, error)


class Verb:
    """Base class for invocable commands with observer callbacks."""

    def __init__(self, name: str):
        self.name = name
        self.error_code: Optional[str] = None
        self._observers: Dict[str, List[Callable[[Dict[str, Any]], None]]] = defaultdict(list)

    def on(self, event: str, callback: Callable[[Dict[str, Any]], None]) -> "Verb":
        """Register an observer for "status" or "error" events."""
        self._observers[event].append(callback)
        return self

    def _emit(self, event: str, payload: Dict[str, Any]) -> None:
        for callback in self._observers.get(event, []):
            callback(payload)

    def stat(self, sub: str, **payload) -> None:
        """Report a status change to observers."""
        self._emit(STATUS_EVENT, {"sub": sub, "verb": self.name, **payload})

    def err(self, error: Exception, quit: bool = False) -> None:
        """Report an error to observers."""
        self.error_code = getattr(error, "code", "error")
        _log_debug(f"{self.name}: {self.error_code} (quit={quit})")
        self._emit(ERROR_EVENT, {"sub": self.error_code, "error": error, "quit": quit})

    def has_error(self) -> bool:
        return self.error_code is not None

    def invoke(self, *args, **kwargs) -> VerbOutcome:
        raise NotImplementedError

    def submit(self, executor: Executor, *args, **kwargs) -> Future:
        """Run invoke() on an executor; the future yields the VerbOutcome."""
        return executor.submit(self.invoke, *args, **kwargs)
