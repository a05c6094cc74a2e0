import pytest
from yt_dlp.utils import DownloadError

from web2dl.crawler import CrawlContext
from web2dl.extractor import (
    ROUTE_CRAWL,
    ROUTE_EXTRACTOR,
    ExtractorError,
    MediaExtractor,
    build_ydl_options,
    count_output_files,
    is_platform_url,
    route,
)


def make_ydl_class(info=None, error=None, retcode=0, on_download=None):
    """Build a stand-in for yt_dlp.YoutubeDL recording the options it gets"""

    class FakeYDL:
        instances = []

        def __init__(self, opts):
            self.opts = opts
            self.urls = None
            FakeYDL.instances.append(self)

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def extract_info(self, url, download=True):
            if error:
                raise error
            return info

        def download(self, urls):
            self.urls = urls
            if error:
                raise error
            if on_download:
                on_download(self.opts)
            return retcode

    return FakeYDL


class FakeExtractor:
    def __init__(self, supported=False, files=(0, 0), error=None):
        self.supported = supported
        self.files = files
        self.error = error
        self.probed = []
        self.downloaded = []

    def supports(self, url):
        self.probed.append(url)
        return self.supported

    def download(self, url, dest_dir, fmt):
        self.downloaded.append((url, dest_dir, fmt))
        if self.error:
            raise self.error
        return self.files


class RecordingFetcher:
    def __init__(self):
        self.calls = []

    def fetch(self, url):
        self.calls.append(url)
        return ""


@pytest.fixture
def context():
    return CrawlContext(fetcher=RecordingFetcher(), downloader=None, extensions=frozenset({"mp3"}))


@pytest.mark.parametrize("url, expected", [
    ("https://www.youtube.com/watch?v=abc", True),
    ("https://youtu.be/dQw4w9WgXcQ", True),
    ("https://music.YouTube.com/playlist?list=PL1", True),
    ("https://www.youtube-nocookie.com/embed/abc", True),
    ("https://example.com/youtube.com/", False),
    ("https://notyoutube.com/", False),
    ("https://[broken/watch", False),
])
def test_is_platform_url(url, expected):
    assert is_platform_url(url) is expected


def test_platform_url_skips_probe(context, tmp_path):
    extractor = FakeExtractor(files=(3, 300))

    chosen = route("https://youtu.be/x", tmp_path, "mp3", context, extractor)

    assert chosen == ROUTE_EXTRACTOR
    assert extractor.probed == []
    assert extractor.downloaded == [("https://youtu.be/x", tmp_path, "mp3")]
    assert (context.stats.files, context.stats.bytes) == (3, 300)
    assert context.fetcher.calls == []


def test_probe_success_uses_extractor(context, tmp_path):
    extractor = FakeExtractor(supported=True, files=(1, 10))

    chosen = route("https://vimeo.com/123", tmp_path, "mp4", context, extractor)

    assert chosen == ROUTE_EXTRACTOR
    assert extractor.probed == ["https://vimeo.com/123"]
    assert context.fetcher.calls == []


def test_probe_failure_falls_through_to_crawl(context, tmp_path):
    extractor = FakeExtractor(supported=False)

    chosen = route("http://example.test/", tmp_path, "mp3", context, extractor)

    assert chosen == ROUTE_CRAWL
    assert extractor.downloaded == []
    assert context.fetcher.calls == ["http://example.test/"]


def test_probe_disabled_crawls_directly(context, tmp_path):
    extractor = FakeExtractor(supported=True)

    chosen = route("http://example.test/", tmp_path, "all", context, extractor, probe=False)

    assert chosen == ROUTE_CRAWL
    assert extractor.probed == []


def test_extractor_error_propagates_from_route(context, tmp_path):
    extractor = FakeExtractor(error=ExtractorError("https://youtu.be/x", "boom"))

    with pytest.raises(ExtractorError):
        route("https://youtu.be/x", tmp_path, "all", context, extractor)
    assert context.stats.files == 0


def test_supports_true_when_info_resolves():
    ydl_class = make_ydl_class(info={"id": "abc", "title": "t"})

    assert MediaExtractor(ydl_class).supports("https://vimeo.com/1") is True
    opts = ydl_class.instances[0].opts
    assert opts["simulate"] is True and opts["quiet"] is True


@pytest.mark.parametrize("error", [DownloadError("Unsupported URL"), OSError("network down")])
def test_supports_false_on_any_probe_failure(error):
    extractor = MediaExtractor(make_ydl_class(error=error))

    assert extractor.supports("http://example.test/") is False


def test_supports_false_when_nothing_resolved():
    assert MediaExtractor(make_ydl_class(info=None)).supports("http://example.test/") is False


def test_download_counts_media_files(tmp_path):
    def write_outputs(opts):
        (tmp_path / "1Song.mp3").write_bytes(b"12345")
        (tmp_path / "2Song.mp3").write_bytes(b"123")
        (tmp_path / "2Song.webp").write_bytes(b"thumbnail")

    ydl_class = make_ydl_class(on_download=write_outputs)

    count, size = MediaExtractor(ydl_class).download("https://youtu.be/x", tmp_path, "mp3")

    assert (count, size) == (2, 8)
    assert ydl_class.instances[0].urls == ["https://youtu.be/x"]


def test_download_wraps_ytdlp_errors(tmp_path):
    extractor = MediaExtractor(make_ydl_class(error=DownloadError("ERROR: no video")))

    with pytest.raises(ExtractorError) as exc_info:
        extractor.download("https://youtu.be/x", tmp_path, "all")
    assert exc_info.value.url == "https://youtu.be/x"


def test_download_nonzero_retcode_is_an_error(tmp_path):
    extractor = MediaExtractor(make_ydl_class(retcode=1))

    with pytest.raises(ExtractorError):
        extractor.download("https://youtu.be/x", tmp_path, "all")


def test_build_ydl_options_per_format(tmp_path):
    mp3 = build_ydl_options("mp3", tmp_path)
    mp4 = build_ydl_options("mp4", tmp_path)
    everything = build_ydl_options("all", tmp_path)

    assert mp3["postprocessors"][0] == {
        "key": "FFmpegExtractAudio", "preferredcodec": "mp3", "preferredquality": "0",
    }
    assert "merge_output_format" not in mp3
    assert mp4["format"] == "bestvideo[ext=mp4]+bestaudio[ext=m4a]/best[ext=mp4]"
    assert everything["format"] == "bestvideo+bestaudio/best"
    for opts in (mp3, mp4, everything):
        assert opts["noplaylist"] is False
        assert opts["outtmpl"]["default"] == str(tmp_path / "%(playlist_index|)s%(title)s.%(ext)s")
    assert mp4["merge_output_format"] == everything["merge_output_format"] == "mp4"


def test_count_output_files_recurses(tmp_path):
    (tmp_path / "list").mkdir()
    (tmp_path / "list" / "a.M4A").write_bytes(b"12")
    (tmp_path / "b.mp4").write_bytes(b"1")
    (tmp_path / "c.part").write_bytes(b"123")

    assert count_output_files(tmp_path) == (2, 3)


def test_malformed_start_url_falls_through_to_crawl(context, tmp_path):
    extractor = FakeExtractor(supported=False)

    chosen = route("http://[broken/", tmp_path, "all", context, extractor)

    assert chosen == ROUTE_CRAWL
    assert extractor.downloaded == []
