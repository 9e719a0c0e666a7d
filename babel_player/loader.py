from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
import logging
from typing import Any, Callable, Generic, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Idle:
    pass


@dataclass(frozen=True, slots=True)
class Loading:
    label: str


@dataclass(frozen=True, slots=True)
class Succeeded:
    label: str
    value: Any


@dataclass(frozen=True, slots=True)
class Failed:
    label: str
    error: BaseException


LoadState = Union[Idle, Loading, Succeeded, Failed]


class BackgroundLoader(Generic[T]):
    """
    Runs one long load at a time off the interactive thread.

    Only the owner mutates `state`: the worker completes a future, and the
    owner calls poll() once per refresh cycle to pick the outcome up.
    There is no cancellation; a started load runs to completion or failure.
    """

    def __init__(self, name: str, executor: ThreadPoolExecutor | None = None):
        self.name = name
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"load-{name}")
        self._future: Future[T] | None = None
        self.state: LoadState = Idle()

    @property
    def loading(self) -> bool:
        return isinstance(self.state, Loading)

    def start(self, fn: Callable[..., T], *args: Any, label: str | None = None) -> bool:
        if self.loading:
            logger.debug("%s: load already in flight, ignoring %s", self.name, label)
            return False
        label = label or getattr(fn, "__name__", self.name)
        self._future = self._executor.submit(fn, *args)
        self.state = Loading(label=label)
        return True

    def poll(self) -> LoadState:
        st = self.state
        if isinstance(st, Loading) and self._future is not None and self._future.done():
            future, self._future = self._future, None
            error = future.exception()
            if error is None:
                self.state = Succeeded(label=st.label, value=future.result())
            else:
                self.state = Failed(label=st.label, error=error)
        return self.state

    def take(self) -> T | None:
        """Consume a finished load; failures are logged and yield None."""
        st = self.poll()
        if isinstance(st, Succeeded):
            self.state = Idle()
            return st.value
        if isinstance(st, Failed):
            self.state = Idle()
            logger.warning("Failed to load %s (%s): %s", self.name, st.label, st.error)
        return None

    def wait(self, timeout: float | None = None) -> LoadState:
        if self._future is not None:
            wait([self._future], timeout=timeout)
        return self.poll()

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False)
