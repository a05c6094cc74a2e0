from pathlib import Path
from urllib.parse import urlsplit

from .config import EXTRACTOR_CONFIG
from .crawler import crawl

ROUTE_EXTRACTOR = "extractor"
ROUTE_CRAWL = "crawl"

_METADATA_PP = {"key": "FFmpegMetadata", "add_metadata": True}
_THUMBNAIL_PP = {"key": "EmbedThumbnail"}


class ExtractorError(Exception):
    """yt-dlp could not resolve or download a URL it was selected for"""

    def __init__(self, url, reason):
        super().__init__(f"{reason} - {url}")
        self.url = url
        self.reason = reason


def build_ydl_options(fmt, dest_dir):
    """yt-dlp options for a --format value
    mp3: best audio extracted to mp3 (quality 0)
    mp4: best mp4 video + m4a audio merged into mp4, else best single mp4
    all: best video + best audio merged into mp4, else best single stream
    """
    opts = {
        "outtmpl": {"default": str(Path(dest_dir) / EXTRACTOR_CONFIG["output_template"])},
        "noplaylist": False,
        "no_warnings": True,
        "writethumbnail": True,
    }
    if fmt == "mp3":
        opts["format"] = "bestaudio/best"
        opts["postprocessors"] = [
            {"key": "FFmpegExtractAudio", "preferredcodec": "mp3", "preferredquality": "0"},
            _METADATA_PP,
            _THUMBNAIL_PP,
        ]
    elif fmt == "mp4":
        opts["format"] = "bestvideo[ext=mp4]+bestaudio[ext=m4a]/best[ext=mp4]"
        opts["merge_output_format"] = "mp4"
        opts["postprocessors"] = [_METADATA_PP, _THUMBNAIL_PP]
    else:
        opts["format"] = "bestvideo+bestaudio/best"
        opts["merge_output_format"] = "mp4"
        opts["postprocessors"] = [_METADATA_PP, _THUMBNAIL_PP]
    return opts


def count_output_files(dest_dir):
    """Count (files, bytes) of extractor output types under dest_dir"""
    count = size = 0
    for path in Path(dest_dir).rglob("*"):
        if path.is_file() and path.suffix.lower() in EXTRACTOR_CONFIG["counted_exts"]:
            count += 1
            size += path.stat().st_size
    return count, size


def is_platform_url(url):
    try:
        host = urlsplit(url).hostname or ""
    except ValueError:
        return False
    return bool(EXTRACTOR_CONFIG["platform_pattern"].search(host))


class MediaExtractor:
    """Thin wrapper over yt_dlp.YoutubeDL"""

    def __init__(self, ydl_class=None):
        if ydl_class is None:
            import yt_dlp
            ydl_class = yt_dlp.YoutubeDL
        self.ydl_class = ydl_class

    def supports(self, url):
        """Dry run: True if yt-dlp can resolve url without downloading anything"""
        from yt_dlp.utils import YoutubeDLError

        opts = {
            "quiet": True,
            "no_warnings": True,
            "simulate": True,
            "skip_download": True,
            "extract_flat": "in_playlist",
        }
        try:
            with self.ydl_class(opts) as ydl:
                info = ydl.extract_info(url, download=False)
        except YoutubeDLError:
            return False
        except Exception as e:
            print(f"⚠️  yt-dlp probe failed: {str(e)[:80]} - {url}")
            return False
        return bool(info)

    def download(self, url, dest_dir, fmt):
        """Download url (video or whole playlist) into dest_dir
        :return: (files, bytes) of matching media now in dest_dir
        """
        from yt_dlp.utils import YoutubeDLError

        Path(dest_dir).mkdir(parents=True, exist_ok=True)
        print(f"📥 Using yt-dlp for: {url}")
        print(f"   └─ Format: {fmt} → Destination: {dest_dir}")
        try:
            with self.ydl_class(build_ydl_options(fmt, dest_dir)) as ydl:
                retcode = ydl.download([url])
        except YoutubeDLError as e:
            raise ExtractorError(url, str(e)[:200]) from e
        if retcode:
            raise ExtractorError(url, f"yt-dlp exited with code {retcode}")
        count, size = count_output_files(dest_dir)
        print(f"✅ yt-dlp downloaded {count} file(s) to {dest_dir}")
        return count, size


def route(start_url, dest_root, fmt, context, extractor, probe=True):
    """Send start_url to yt-dlp or to the recursive site crawl
    Order: platform host match (cheap) → yt-dlp dry run (network) → crawl
    :return: ROUTE_EXTRACTOR / ROUTE_CRAWL
    """
    use_extractor = is_platform_url(start_url)
    if not use_extractor and probe and extractor.supports(start_url):
        print("⚠️  URL appears to be supported by yt-dlp (non-platform host). Using yt-dlp.")
        use_extractor = True

    if use_extractor:
        count, size = extractor.download(start_url, dest_root, fmt)
        context.stats.add_files(count, size)
        return ROUTE_EXTRACTOR

    print("🔍 Using recursive web crawl mode.")
    crawl(start_url, dest_root, context)
    return ROUTE_CRAWL
