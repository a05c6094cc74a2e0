import pytest
import requests

from web2dl.crawler import CrawlContext
from web2dl.fetcher import DownloadOutcome, FetchError, file_name_from_url


class FakeFetcher:
    """Serves pages from a dict; unknown URLs fail like a 404"""

    def __init__(self, pages):
        self.pages = pages
        self.calls = []

    def fetch(self, url):
        self.calls.append(url)
        if url not in self.pages:
            raise FetchError(url, "404 Client Error")
        return self.pages[url]


class FakeDownloader:
    """Writes a small placeholder file and records every call"""

    def __init__(self, payload=b"data"):
        self.payload = payload
        self.calls = []

    def download(self, file_url, dest_dir, stats):
        self.calls.append((file_url, str(dest_dir)))
        target = dest_dir / file_name_from_url(file_url)
        if target.exists():
            return DownloadOutcome.DUPLICATE
        target.write_bytes(self.payload)
        stats.add_file(len(self.payload))
        return DownloadOutcome.SAVED


class FakeResponse:
    def __init__(self, status=200, text="", chunks=(), fail_after=None):
        self.status_code = status
        self.text = text
        self.chunks = list(chunks)
        self.fail_after = fail_after

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def iter_content(self, chunk_size=1):
        for i, chunk in enumerate(self.chunks):
            if self.fail_after is not None and i >= self.fail_after:
                raise requests.ConnectionError("connection reset")
            yield chunk

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeSession:
    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        response = self.responses.get(url)
        if isinstance(response, Exception):
            raise response
        if response is None:
            return FakeResponse(status=404)
        return response


@pytest.fixture
def make_context():
    def _make(pages, extensions=("mp3",)):
        return CrawlContext(
            fetcher=FakeFetcher(pages),
            downloader=FakeDownloader(),
            extensions=frozenset(extensions),
        )
    return _make
