"""Shared fixtures: an application context that never touches the network or the client."""
from concurrent.futures import Executor, Future

import httpx
import pytest

from nexus_crusher.config import Settings
from nexus_crusher.context import build_context
from nexus_crusher.services.data_dragon_client import DataDragonClient
from nexus_crusher.services.session_observer import SessionObserver


class StaticObserver(SessionObserver):
    """Observer with a settable session and liveness flag."""

    def __init__(self):
        super().__init__()
        self.session = None
        self.active = False

    def push(self, snapshot):
        self.session = snapshot
        self.active = True
        self._publish(snapshot)

    def current_session(self):
        return self.session

    def is_session_active(self):
        return self.active


class InlineExecutor(Executor):
    """Runs submitted work immediately on the calling thread."""

    def submit(self, fn, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


@pytest.fixture
def offline_context(tmp_path):
    """Context wired like production, but Data Dragon always fails (bundled data is used)."""
    settings = Settings(
        _env_file=None,
        cache_dir=tmp_path / "cache",
        auto_connect=False,
        show_intros=False,
        liveness_poll_interval=60.0,
    )
    context = build_context(settings, observer=StaticObserver(), executor=InlineExecutor())
    context.stats_store.client = DataDragonClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(503))
    )
    yield context
    context.close()


@pytest.fixture
def anyio_backend():
    """Run anyio-marked tests on asyncio (the project does not depend on trio)."""
    return "asyncio"
