"""Network doubles shared by the ingestion tests."""

import json

import requests


class FakeResponse:
    def __init__(self, body, status_code=200):
        self.status_code = status_code
        if isinstance(body, (dict, list)):
            self.text = json.dumps(body)
        elif isinstance(body, bytes):
            self.text = body.decode("utf-8")
        else:
            self.text = body
        self.content = self.text.encode("utf-8")

    def json(self):
        return json.loads(self.text)

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    """Maps URL -> FakeResponse or an exception instance to raise."""

    def __init__(self, routes):
        self.routes = dict(routes)
        self.calls = []
        self.closed = False

    def get(self, url, timeout=None):
        self.calls.append(url)
        result = self.routes[url]
        if isinstance(result, Exception):
            raise result
        return result

    def close(self):
        self.closed = True
