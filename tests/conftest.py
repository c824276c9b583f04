import logging

import httpx
import pytest

from torexit import config as config_module
from torexit.config import DetectorConfig
from torexit.detector import TorDetector
from torexit.logging_config import reset_error_stats

FEED = (
    "ExitNode 0011BD2485AD45D984EC4159C88FC066E5E3300E\n"
    "Published 2023-01-01 00:00:00\n"
    "LastStatus 2023-01-01 01:00:00\n"
    "ExitAddress 1.2.3.4 2023-01-01 00:00:00\n"
    "ExitNode 0091174DE56EEBCB0B7E5D0B3D6C5DC5BD4BB0F2\n"
    "Published 2023-01-01 00:00:00\n"
    "ExitAddress 5.6.7.8 2023-01-01 00:00:00\n"
)


@pytest.fixture(autouse=True)
def clean_state():
    config_module.set_config(DetectorConfig())
    reset_error_stats()
    yield
    config_module.set_config(None)
    logging.getLogger("torexit").handlers.clear()
    logging.getLogger("torexit").propagate = True


class FeedServer:
    """Records requests made through an httpx.MockTransport."""

    def __init__(self, body=FEED, status_code=200, error=None):
        self.body = body
        self.status_code = status_code
        self.error = error
        self.requests = []

    def handler(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error(f"{self.error.__name__} for testing", request=request)
        return httpx.Response(self.status_code, text=self.body)

    @property
    def transport(self):
        return httpx.MockTransport(self.handler)


@pytest.fixture
def feed_server():
    return FeedServer()


@pytest.fixture
def list_file(tmp_path):
    def _write(content, name="exit_list.txt"):
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return str(path)
    return _write


@pytest.fixture
def detector(feed_server):
    return TorDetector(config=DetectorConfig(), transport=feed_server.transport)
