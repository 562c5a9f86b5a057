"""
Pytest configuration and shared fixtures.
"""

import asyncio

import pytest
from types import SimpleNamespace

from evalworker.config import WorkerSettings
from evalworker.logger import StructuredLogger, reset_logger

WORKER_ENV_VARS = [
    "ZEEBE_ADDRESS",
    "ZEEBE_CLIENT_ID",
    "ZEEBE_CLIENT_SECRET",
    "ZEEBE_AUTHORIZATION_SERVER_URL",
    "ZEEBE_TOKEN_AUDIENCE",
    "CAMUNDA_CLUSTER_ID",
    "CAMUNDA_CLUSTER_REGION",
    "EVAL_TASK_TYPE",
    "EVAL_SCORING",
    "EVAL_FIXED_SCORE",
    "EVAL_RANDOM_SEED",
    "EVAL_JOB_TIMEOUT_MS",
    "EVAL_MAX_JOBS_TO_ACTIVATE",
    "EVAL_MAX_RUNNING_JOBS",
    "LOG_LEVEL",
    "LOG_DIR",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's shell and .env out of the tests."""
    for name in WORKER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_logger()
    yield
    reset_logger()


@pytest.fixture
def quiet_logger(tmp_path) -> StructuredLogger:
    """Logger writing only to a temporary directory."""
    return StructuredLogger(name="evalworker-test", log_dir=tmp_path, enable_console=False)


@pytest.fixture
def settings() -> WorkerSettings:
    return WorkerSettings()


@pytest.fixture
def make_job():
    """Factory for stand-ins of pyzeebe.Job carrying the fields the handler reads."""
    def _make(key: int = 2251799813685249, task_type: str = "automated-evaluation"):
        return SimpleNamespace(key=key, type=task_type, variables={})
    return _make


class FakeWorker:
    """Records task registrations the way ZeebeWorker.task is called."""

    def __init__(self, channel=None):
        self.channel = channel
        self.registrations = []
        self.stopped = False

    def task(self, task_type, **options):
        def decorator(fn):
            self.registrations.append({"task_type": task_type, "options": options, "handler": fn})
            return fn
        return decorator

    async def work(self):
        return None

    async def stop(self):
        self.stopped = True


@pytest.fixture
def fake_worker() -> FakeWorker:
    return FakeWorker()


@pytest.fixture
def fake_worker_class():
    return FakeWorker


class BlockingFakeWorker(FakeWorker):
    """FakeWorker whose work() runs until stop() is awaited."""

    instances = []

    def __init__(self, channel=None):
        super().__init__(channel)
        self.working = False
        self._stop_requested = None
        BlockingFakeWorker.instances.append(self)

    async def work(self):
        self._stop_requested = asyncio.Event()
        self.working = True
        await self._stop_requested.wait()
        self.working = False

    async def stop(self):
        self.stopped = True
        if self._stop_requested is not None:
            self._stop_requested.set()


@pytest.fixture
def blocking_worker_class():
    BlockingFakeWorker.instances = []
    return BlockingFakeWorker
