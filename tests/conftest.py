import json
import textwrap
from typing import Dict, List, Optional

import httpx
import pytest

SAMPLE_KEYS_YAML = textwrap.dedent("""
    keys:
      - key: greeting
        translation: Hello!
        tags:
          - onboarding
          - home
      - key: plural_ex
        translations:
          singular: "{count} message"
          plural: "{count} messages"
      - key: note
        translation: |
          This note spans
          several lines.
""")


class FakeLokaliseApi:
    """
    In-memory stand-in for the Lokalise endpoints the tool calls.

    Every request is recorded in ``requests`` so tests can assert on what was
    sent, and ``post_statuses`` lets a test fail specific POSTs (by order).
    """

    def __init__(self, projects: Optional[List[Dict]] = None, existing_keys: Optional[List[str]] = None):
        self.projects = projects if projects is not None else [
            {"project_id": "123.abc", "name": "My App", "base_language_iso": "en"}
        ]
        self.existing_keys = list(existing_keys or [])
        self.requests: List[httpx.Request] = []
        self.post_statuses: List[int] = []
        self.auth_status: Optional[int] = None

    @property
    def posted_bodies(self) -> List[Dict]:
        return [json.loads(r.content) for r in self.requests if r.method == "POST"]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.auth_status is not None:
            return httpx.Response(self.auth_status, json={"error": {"message": "Invalid token"}})

        path = request.url.path
        if request.method == "GET" and path.endswith("/projects"):
            return httpx.Response(200, json={"projects": self.projects})
        if request.method == "GET" and path.endswith("/keys"):
            page = int(request.url.params.get("page", "1"))
            keys = self.existing_keys if page == 1 else []
            names = [{"key_name": {p: name for p in ("ios", "android", "web", "other")}} for name in keys]
            return httpx.Response(200, json={"keys": names})
        if request.method == "POST" and path.endswith("/keys"):
            post_index = len(self.posted_bodies) - 1
            if post_index < len(self.post_statuses) and self.post_statuses[post_index] != 200:
                status = self.post_statuses[post_index]
                return httpx.Response(status, json={"error": {"code": status, "message": "Nope"}})
            body = json.loads(request.content)
            return httpx.Response(200, json={"project_id": "123.abc", "keys": body["keys"], "errors": []})
        return httpx.Response(404, json={"error": {"message": "Not found"}})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def fake_api():
    return FakeLokaliseApi()


@pytest.fixture
def sample_key_file(tmp_path):
    path = tmp_path / "keys.yaml"
    path.write_text(SAMPLE_KEYS_YAML, encoding="utf-8")
    return str(path)


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """
    Run every test from an empty directory with a config file that keeps
    logs out of the console and inside the temp directory.
    """
    config_path = tmp_path / "test_config.yaml"
    config_path.write_text(textwrap.dedent(f"""
        logging:
          log_level: DEBUG
          log_file_path: {tmp_path / 'logs' / 'test.log'}
          log_to_console: false
    """), encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LOKALISE_KEYS_CONFIG_FILE", str(config_path))
    monkeypatch.delenv("LOKALISE_API_TOKEN", raising=False)
    monkeypatch.delenv("LOKALISE_BATCH_SIZE", raising=False)
    yield


@pytest.fixture
def sample_keys_yaml():
    return SAMPLE_KEYS_YAML
