"""Shared test fixtures for the Velocity test suite.

Nothing from ``velocity`` is imported at module level: ``velocity.config``
reads the environment on import, and ``pytest_configure`` must run first.
"""

from __future__ import annotations

import os

import pytest


def pytest_configure(config):
    """Neutralise credentials BEFORE collection starts.

    A placeholder key keeps every test offline even on a machine with a
    real key set.
    """
    os.environ["ANTHROPIC_API_KEY"] = "dummy_key"
    os.environ["METRICS_ENABLED"] = "false"
    os.environ.pop("MEDIA_API_BASE_URL", None)
    os.environ.pop("MEDIA_API_KEY", None)


class ScriptedBackend:
    """``ChatBackend`` that replays canned responses and records requests.

    A script entry that is an exception instance is raised instead of
    returned.  When the script runs out, the last entry repeats.
    """

    def __init__(self, *script):
        self.script = list(script)
        self.requests = []

    async def complete(self, request):
        self.requests.append(request)
        index = min(len(self.requests) - 1, len(self.script) - 1)
        step = self.script[index]
        if isinstance(step, Exception):
            raise step
        return step


@pytest.fixture
def scripted_backend():
    """Factory fixture: ``scripted_backend(resp1, resp2, ...)``."""
    return ScriptedBackend


@pytest.fixture
def crm_data():
    from velocity.data.crm import CrmDataSource

    return CrmDataSource()


@pytest.fixture
def offline_generator():
    """Generator without a drafting model: always renders templates."""
    from velocity.services.artifact_generator import ArtifactGenerator

    return ArtifactGenerator(llm=None)


@pytest.fixture
def offline_media():
    from velocity.services.media_client import MediaClient

    return MediaClient(base_url=None, api_key=None)
