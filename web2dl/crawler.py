import enum
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlsplit

from bs4 import BeautifulSoup

from .config import CRAWL_CONFIG
from .fetcher import FetchError, sanitize_filename
from .stats import RunStats

BASE_URL_RE = re.compile(r"^https?://[^/?#]+", re.IGNORECASE)
SCHEME_RE = re.compile(r"^(https?):", re.IGNORECASE)


class LinkKind(enum.Enum):
    DOWNLOAD = "download"
    SUBPATH = "subpath"
    IGNORE = "ignore"


@dataclass
class CrawlContext:
    """State of one crawl run, passed by reference into every recursive call"""
    fetcher: object
    downloader: object
    extensions: frozenset
    stats: RunStats = field(default_factory=RunStats)
    visited: set = field(default_factory=set)


def get_base_url(url):
    """scheme://host of a URL, used to resolve root-relative links
    Example: https://company.com:8080/docs/a.html → https://company.com:8080
    """
    match = BASE_URL_RE.match(url)
    return match.group(0) if match else ""


def get_scheme(url):
    match = SCHEME_RE.match(url)
    return match.group(1) if match else (urlsplit(url).scheme or "http")


def extract_links(html):
    """Return the set of every href attribute value in the page"""
    if not html:
        return set()
    soup = BeautifulSoup(html, "lxml")
    links = set()
    for tag in soup.find_all(href=True):
        href = tag.get("href", "").strip()
        if href:
            links.add(href)
    return links


def is_skipped_link(link):
    """Anchors, mailto: and javascript: targets are never followed"""
    return link.lower().startswith(CRAWL_CONFIG["skip_prefixes"])


def resolve_link(link, page_url, base_url=None):
    """Turn a raw href into an absolute URL
    Example (page https://a.com/x/page.html):
        https://b.com/f.pdf → https://b.com/f.pdf
        //cdn.a.com/f.mp3   → https://cdn.a.com/f.mp3
        /audio/             → https://a.com/audio/
        ep1.mp3             → https://a.com/x/ep1.mp3
    """
    if base_url is None:
        base_url = get_base_url(page_url)
    if link.startswith("http"):
        return link
    if link.startswith("//"):
        return f"{get_scheme(page_url)}:{link}"
    if link.startswith("/"):
        return f"{base_url}{link}"
    return page_url[:page_url.rfind("/") + 1] + link


def is_downloadable(url, extensions):
    ext = os.path.splitext(urlsplit(url).path)[1]
    return ext[1:].lower() in extensions


def is_same_site(url, base_url):
    if not base_url or not url.lower().startswith(base_url.lower()):
        return False
    rest = url[len(base_url):]
    return not rest or rest[0] in "/?#"


def looks_like_file(url):
    """True when the final path segment ends in a short extension (.ab - .abcde)
    Heuristic only: an extensionless file reads as a folder, a folder such as
    'v1.2' reads as a file.
    """
    segment = urlsplit(url).path.rsplit("/", 1)[-1]
    return bool(CRAWL_CONFIG["filename_pattern"].search(segment))


def subfolder_name(url):
    """Sanitized last non-empty path segment, used as the mirrored folder name"""
    segment = urlsplit(url).path.rstrip("/").rsplit("/", 1)[-1]
    return sanitize_filename(segment)


def classify(url, base_url, extensions):
    if is_downloadable(url, extensions):
        return LinkKind.DOWNLOAD
    if is_same_site(url, base_url) and not looks_like_file(url):
        return LinkKind.SUBPATH
    return LinkKind.IGNORE


def crawl(url, dest_dir, context):
    """Crawl url depth-first, downloading allowed files into dest_dir and
    recursing into same-site subpaths as nested folders
    Termination: every URL (exact string) is fetched at most once per run
    """
    if url in context.visited:
        print(f"⚠️  Already visited: {url} - skipping")
        return
    context.visited.add(url)

    print(f"🔍 Crawling: {url}")
    dest_dir = Path(dest_dir)
    try:
        dest_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        print(f"⚠️  Cannot create folder {dest_dir}: {str(e)[:80]}")
        return

    try:
        html = context.fetcher.fetch(url)
    except FetchError as e:
        print(f"⚠️  Failed to fetch: {e}")
        return

    base_url = get_base_url(url)
    for link in sorted(extract_links(html)):
        if is_skipped_link(link):
            continue
        try:
            full_url = resolve_link(link, url, base_url)
            kind = classify(full_url, base_url, context.extensions)
            is_folder_guess = kind is LinkKind.SUBPATH and not urlsplit(full_url).path.endswith("/")
            name = subfolder_name(full_url) if kind is LinkKind.SUBPATH else ""
        except ValueError as e:
            print(f"⚠️  Malformed link ({str(e)[:80]}), skipping: {link}")
            continue
        if kind is LinkKind.DOWNLOAD:
            context.downloader.download(full_url, dest_dir, context.stats)
        elif kind is LinkKind.SUBPATH:
            if not name or name in (".", ".."):
                continue
            if is_folder_guess and full_url not in context.visited:
                print(f"ℹ️  No file extension, treating as folder: {full_url}")
            try:
                crawl(full_url, dest_dir / name, context)
            except RecursionError:
                print(f"⚠️  Maximum crawl depth reached, skipping: {full_url}")
