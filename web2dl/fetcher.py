import enum
import os

import requests

from .config import CRAWL_CONFIG, FETCH_CONFIG


class FetchError(Exception):
    """Page could not be fetched (network error, timeout, non-2xx status)"""

    def __init__(self, url, reason):
        super().__init__(f"{reason} - {url}")
        self.url = url
        self.reason = reason


class DownloadOutcome(enum.Enum):
    SAVED = "saved"
    DUPLICATE = "duplicate"
    FAILED = "failed"


def sanitize_filename(name):
    """Replace every char illegal in file names (\\ / : * ? " < > |) with '#'
    Idempotent: sanitize_filename(sanitize_filename(x)) == sanitize_filename(x)
    """
    substitute = CRAWL_CONFIG["substitute_char"]
    return "".join(substitute if ch in CRAWL_CONFIG["forbidden_chars"] else ch for ch in name)


def file_name_from_url(url):
    """Last URL path segment with query string and fragment stripped, sanitized
    Example: https://a.com/audio/ep%201.mp3?dl=1#t=10 → ep%201.mp3
    Example: https://a.com/audio/ → "" (no file name)
    """
    path = url.split("#", 1)[0].split("?", 1)[0]
    return sanitize_filename(path.rsplit("/", 1)[-1])


def create_session(user_agent=None):
    """Create the requests session shared by page fetches and file downloads"""
    session = requests.Session()
    session.headers.update({"User-Agent": user_agent or FETCH_CONFIG["user_agent"]})
    return session


class PageFetcher:
    """HTML transport: GET a page and return its decoded body"""

    def __init__(self, session, timeout=None):
        self.session = session
        self.timeout = timeout or FETCH_CONFIG["timeout"]

    def fetch(self, url):
        try:
            response = self.session.get(url, timeout=self.timeout, allow_redirects=True)
            response.raise_for_status()
        except requests.Timeout:
            raise FetchError(url, f"Timeout ({self.timeout}s)")
        except requests.RequestException as e:
            raise FetchError(url, str(e)[:80])
        return response.text


class FileDownloader:
    """Byte-level download primitive with a name-based duplicate check"""

    def __init__(self, session, timeout=None, chunk_size=None):
        self.session = session
        self.timeout = timeout or FETCH_CONFIG["timeout"]
        self.chunk_size = chunk_size or FETCH_CONFIG["chunk_size"]

    def download(self, file_url, dest_dir, stats):
        """Download file_url into dest_dir, update stats on success
        :param file_url: Absolute URL of the file
        :param dest_dir: Destination directory (created if missing)
        :param stats: RunStats to update
        :return: DownloadOutcome
        """
        filename = file_name_from_url(file_url)
        if not filename:
            print(f"⚠️  Cannot derive a file name, skipping: {file_url}")
            return DownloadOutcome.FAILED
        dest_file = os.path.join(dest_dir, filename)
        if os.path.exists(dest_file):
            print(f"⚠️  Already exists, skipping: {filename}")
            return DownloadOutcome.DUPLICATE

        print(f"📥 Downloading: {filename} (from: {file_url})")
        try:
            os.makedirs(dest_dir, exist_ok=True)
            with self.session.get(file_url, timeout=self.timeout, stream=True) as response:
                response.raise_for_status()
                with open(dest_file, "wb") as f:
                    for chunk in response.iter_content(chunk_size=self.chunk_size):
                        if chunk:
                            f.write(chunk)
        except (requests.RequestException, OSError) as e:
            print(f"⚠️  Download failed: {str(e)[:80]} - {file_url}")
            if os.path.exists(dest_file):
                os.remove(dest_file)
            return DownloadOutcome.FAILED

        stats.add_file(os.path.getsize(dest_file))
        print(f"✅ Saved: {dest_file}")
        return DownloadOutcome.SAVED
