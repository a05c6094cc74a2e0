import re

# ===================== Configurable Params (Adjust as needed) =====================
FETCH_CONFIG = {
    "timeout": 30,  # Per-request timeout (s), pages and files alike
    "chunk_size": 64 * 1024,  # Streamed download chunk size (bytes)
    "user_agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/128.0.0.0 Safari/537.36"
}
CRAWL_CONFIG = {
    # Raw href targets that are never fetched or recursed into
    "skip_prefixes": ("#", "mailto:", "javascript:"),
    # A final path segment ending like this "looks like a file", not a folder
    "filename_pattern": re.compile(r"\.[a-zA-Z0-9]{2,5}$"),
    "forbidden_chars": '\\/:*?"<>|',
    "substitute_char": "#"
}
# Download extension allow-list per --format
FORMAT_EXTENSIONS = {
    "mp3": ("mp3",),
    "mp4": ("mp4",),
    "all": ("mp3", "mp4", "pdf", "wav", "zip", "m4a", "ogg")
}
EXTRACTOR_CONFIG = {
    # Hosts always handed to yt-dlp without probing
    "platform_pattern": re.compile(r"(^|\.)(youtube\.com|youtu\.be|youtube-nocookie\.com)$", re.IGNORECASE),
    # Playlist index prefix keeps playlist items from colliding
    "output_template": "%(playlist_index|)s%(title)s.%(ext)s",
    # Output files counted into the statistics after an extractor run
    "counted_exts": (".mp3", ".mp4", ".m4a")
}
DEFAULT_FOLDER = "downloads"
DEFAULT_FORMAT = "all"
FORMATS = tuple(FORMAT_EXTENSIONS)
# ==================================================================================


def extensions_for_format(fmt):
    """Return the extension allow-list (lowercase, no dot) for a --format value"""
    try:
        return frozenset(FORMAT_EXTENSIONS[fmt])
    except KeyError:
        raise ValueError(f"Unknown format: {fmt} | Must be one of {', '.join(FORMATS)}")
