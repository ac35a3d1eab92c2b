"""
Shared fixtures.

The environment is set before any application module is imported so the
engine binds to an in-memory SQLite database and no real API key is used.
"""
import os

os.environ['DATABASE_URL'] = 'sqlite://'
os.environ['BOOKMARK_BACKEND'] = 'memory'
os.environ['ANTHROPIC_API_KEY'] = ''
os.environ['MIRACLE_WEB_SEARCH'] = 'true'

import pytest
from pydantic import TypeAdapter


class FakeModelClient:
    """Stands in for ModelClient; replies are queued per call kind.

    A queued Exception instance is raised instead of returned.
    """

    def __init__(self):
        self.json_responses = []
        self.text_responses = []
        self.research_responses = []
        self.calls = []

    @staticmethod
    def _next(queue):
        value = queue.pop(0)
        if isinstance(value, Exception):
            raise value
        return value

    def generate_json(self, prompt, system, schema, max_tokens=None, temperature=0.0):
        self.calls.append(('json', prompt, system))
        return TypeAdapter(schema).validate_python(self._next(self.json_responses))

    def generate_text(self, prompt, system, max_tokens=None, temperature=None):
        self.calls.append(('text', prompt, system))
        return self._next(self.text_responses)

    def research(self, prompt, system, max_searches=None, max_tokens=None):
        self.calls.append(('research', prompt, system))
        return self._next(self.research_responses)


@pytest.fixture
def fake_client():
    return FakeModelClient()


@pytest.fixture
def bookmark_backing():
    return {}


@pytest.fixture
def app(fake_client, bookmark_backing):
    from app import create_app
    from config import Config
    from utils.bookmark_store import make_storage_factory

    class TestConfig(Config):
        TESTING = True
        BOOKMARK_BACKEND = 'memory'
        MIRACLE_WEB_SEARCH = True

    return create_app(
        TestConfig,
        model_client=fake_client,
        bookmark_storage_factory=make_storage_factory('memory', backing=bookmark_backing),
    )


@pytest.fixture
def client(app):
    return app.test_client()
