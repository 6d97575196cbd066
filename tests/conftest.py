import json

import pytest

from concordia.resolvers import ReferenceResolver


class FakeFetcher:
    """Serves fixed bodies per URL and records every fetch."""

    def __init__(self, bodies=None):
        self.bodies = dict(bodies or {})
        self.calls = []

    def __call__(self, url):
        self.calls.append(url)
        body = self.bodies[url]
        if isinstance(body, Exception):
            raise body
        if isinstance(body, (dict, list)):
            return json.dumps(body).encode("utf-8")
        if isinstance(body, str):
            return body.encode("utf-8")
        return body


@pytest.fixture
def fake_fetcher():
    return FakeFetcher()


@pytest.fixture
def fake_resolver(fake_fetcher):
    return ReferenceResolver(fetcher=fake_fetcher)


@pytest.fixture
def write_schema(tmp_path):
    """Write a schema value under tmp_path and return its file:// URL."""

    def _write(filename, value):
        path = tmp_path / filename
        if isinstance(value, (dict, list)):
            path.write_text(json.dumps(value), encoding="utf-8")
        else:
            path.write_text(value, encoding="utf-8")
        return path.as_uri()

    return _write


@pytest.fixture
def xy_object():
    return {
        "type": "object",
        "fields": [
            {"type": "number", "name": "x"},
            {"type": "number", "name": "y"},
        ],
    }
