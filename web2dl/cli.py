import argparse
import importlib.util
import os
import re
import shutil
import sys
import time

from .config import DEFAULT_FOLDER, DEFAULT_FORMAT, FETCH_CONFIG, FORMATS, extensions_for_format
from .crawler import CrawlContext
from .extractor import ExtractorError, MediaExtractor, route
from .fetcher import FileDownloader, PageFetcher, create_session
from .stats import RunStats, print_report

# Required tools: (name, how to detect it)
DEPENDENCIES = [
    ("yt-dlp", lambda: importlib.util.find_spec("yt_dlp") is not None),
    ("ffmpeg", lambda: shutil.which("ffmpeg") is not None),
]
INSTALL_HINTS = [
    "  macOS:   brew install ffmpeg && pip install yt-dlp",
    "  Ubuntu:  sudo apt install ffmpeg && pip install yt-dlp",
    "  Windows: winget install Gyan.FFmpeg && pip install yt-dlp",
]


def validate_url(url):
    """Validate URL legality, must start with http/https"""
    if not re.match(r'^https?://', url, re.IGNORECASE):
        raise argparse.ArgumentTypeError(f"Invalid URL: {url} | Must start with http/https")
    return url


def validate_timeout(timeout):
    """Validate per-request timeout is a positive number"""
    try:
        value = float(timeout)
        if value <= 0:
            raise ValueError("Timeout must be positive")
        return value
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid timeout: {timeout} | Must be a positive number of seconds")


def missing_dependencies():
    return [name for name, is_present in DEPENDENCIES if not is_present()]


def check_dependencies():
    """Exit 1 listing every missing dependency with install hints"""
    missing = missing_dependencies()
    if not missing:
        return
    print(f"❌ Missing required dependencies: {', '.join(missing)}", file=sys.stderr)
    print("\nInstall them with:", file=sys.stderr)
    for hint in INSTALL_HINTS:
        print(hint, file=sys.stderr)
    sys.exit(1)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="web2dl",
        description="📥 Website Media Downloader | Recursive Crawl with Mirrored Folders | yt-dlp for Video Platforms",
        formatter_class=argparse.RawTextHelpFormatter,
        epilog="===== Core Rules =====\n"
               "1. YouTube URLs (and any URL yt-dlp can resolve) are downloaded with yt-dlp\n"
               "2. Other URLs are crawled recursively on the same host, sub-paths become sub-folders\n"
               "3. Links without a short file extension are treated as folders (heuristic)\n"
               "4. Existing files with the same name are never overwritten\n"
               "===== Usage Examples =====\n"
               "  1. All MP3s from a site: web2dl --url https://example.com/audio --path /tmp/dl --format mp3\n"
               "  2. YouTube video as MP4: web2dl --url https://youtu.be/dQw4w9WgXcQ --path /tmp/dl --format mp4\n"
               "  3. Playlist as MP3:      web2dl --url 'https://youtube.com/playlist?list=PLxxx' --path /tmp/dl --format mp3\n"
               "  4. Everything supported: web2dl --url https://example.com/files --path /tmp/dl --folder MySeries"
    )
    parser.add_argument("--url", type=validate_url, help="Starting URL to crawl, or a YouTube URL/playlist")
    parser.add_argument("--path", help="Output directory to save files")
    parser.add_argument("--folder", default=DEFAULT_FOLDER,
                        help=f"Top-level folder name inside --path (default: {DEFAULT_FOLDER})")
    parser.add_argument("--format", choices=FORMATS, default=None,
                        help=f"File format: {' | '.join(FORMATS)} (default: {DEFAULT_FORMAT}, prompted if omitted)")
    parser.add_argument("--timeout", type=validate_timeout, default=FETCH_CONFIG["timeout"],
                        help=f"Per-request timeout in seconds (default: {FETCH_CONFIG['timeout']})")
    parser.add_argument("--no-probe", action="store_true",
                        help="Skip the yt-dlp dry run for non-YouTube URLs and crawl directly")
    return parser


def prompt_missing(args):
    """Ask on stdin for whatever was not given on the command line"""
    if not args.url:
        args.url = input("Enter URL to crawl/download: ").strip()
    if not args.path:
        args.path = input("Enter output directory path: ").strip()
    if not args.format:
        answer = input(f"Select format [{'/'.join(FORMATS)}] (default: {DEFAULT_FORMAT}): ").strip().lower()
        args.format = answer if answer in FORMATS else DEFAULT_FORMAT
    return args


def main(argv=None):
    """Main function: Check deps → Parse CLI args → Prompt → Route → Report"""
    check_dependencies()
    args = prompt_missing(build_parser().parse_args(argv))

    if not args.url:
        print("❌ No URL provided. Use --url <URL> or enter it when prompted.", file=sys.stderr)
        sys.exit(1)
    try:
        validate_url(args.url)
    except argparse.ArgumentTypeError as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)
    if not args.path:
        print("❌ No output path provided. Use --path <DIR> or enter it when prompted.", file=sys.stderr)
        sys.exit(1)

    full_dest = os.path.join(args.path, args.folder)
    try:
        os.makedirs(full_dest, exist_ok=True)
    except OSError as e:
        print(f"❌ Cannot create output directory: {full_dest} ({str(e)[:80]})", file=sys.stderr)
        sys.exit(1)

    start_time = time.time()
    print("\n🚀 Starting downloader")
    print(f"   ├─ URL    : {args.url}")
    print(f"   ├─ Output : {os.path.abspath(full_dest)}")
    print(f"   └─ Format : {args.format}")
    print("-" * 80)

    session = create_session()
    context = CrawlContext(
        fetcher=PageFetcher(session, timeout=args.timeout),
        downloader=FileDownloader(session, timeout=args.timeout),
        extensions=extensions_for_format(args.format),
        stats=RunStats(),
    )
    exit_code = 0
    try:
        route(args.url, full_dest, args.format, context, MediaExtractor(), probe=not args.no_probe)
    except ExtractorError as e:
        print(f"\n❌ yt-dlp failed: {e}", file=sys.stderr)
        exit_code = 1
    except KeyboardInterrupt:
        print("\n🔴 Interrupted by user")
        exit_code = 130
    finally:
        session.close()

    print("-" * 80)
    print_report(context.stats, start_time, time.time())
    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
