"""
Pytest configuration and fixtures for sockbuf tests.
"""
from typing import Any, Callable, Dict, List, Optional

import pytest


class FakeTransport:
    """In-memory transport handle that records calls and fires signals on demand."""

    def __init__(self, uri: str, options: Dict[str, Any], *, auto_open: bool = True) -> None:
        self.uri = uri
        self.options = options
        self.id = f"fake-{id(self):x}"
        self.connected = False
        self.auto_open = auto_open
        self.listeners: Dict[str, List[Callable[..., Any]]] = {}
        self.calls: List[tuple] = []
        self.emitted: List[tuple] = []

    def open(self) -> None:
        if self.auto_open:
            self.go_online()

    def go_online(self) -> None:
        self.connected = True
        self.fire("connect")

    def drop(self, reason: str = "transport close") -> None:
        self.connected = False
        self.fire("disconnect", reason)

    def fire(self, name: str, *args: Any) -> None:
        for listener in list(self.listeners.get(name, ())):
            listener(*args)

    def on(self, name: str, handler: Callable[..., Any]) -> None:
        self.calls.append(("on", name))
        self.listeners.setdefault(name, []).append(handler)

    def once(self, name: str, handler: Callable[..., Any]) -> None:
        self.calls.append(("once", name))

        def fire_once(*args: Any) -> Any:
            self.listeners[name].remove(fire_once)
            return handler(*args)

        fire_once.listener = handler
        self.listeners.setdefault(name, []).append(fire_once)

    def off(self, name: str, handler: Optional[Callable[..., Any]] = None) -> None:
        self.calls.append(("off", name))
        if handler is None:
            self.listeners.pop(name, None)
            return
        listeners = self.listeners.get(name, [])
        for index, listener in enumerate(listeners):
            if listener is handler or getattr(listener, "listener", None) is handler:
                del listeners[index]
                break
        if not listeners:
            self.listeners.pop(name, None)

    def emit(self, name: str, data: Any = None) -> None:
        self.emitted.append((name, data))

    def disconnect(self) -> None:
        if self.connected:
            self.drop("io client disconnect")


class FakeFactory:
    def __init__(self, *, auto_open: bool = True) -> None:
        self.auto_open = auto_open
        self.created: List[FakeTransport] = []

    def __call__(self, uri: str, options: Dict[str, Any]) -> FakeTransport:
        handle = FakeTransport(uri, options, auto_open=self.auto_open)
        self.created.append(handle)
        return handle

    @property
    def last(self) -> FakeTransport:
        return self.created[-1]


@pytest.fixture
def fake_factory() -> FakeFactory:
    return FakeFactory()


@pytest.fixture
def offline_factory() -> FakeFactory:
    """Factory whose handles stay offline until ``go_online()`` is called."""
    return FakeFactory(auto_open=False)
