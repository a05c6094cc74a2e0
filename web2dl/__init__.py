# meta data, align with setup.py

from .version import __version__

__author__ = "Liming Xie"
__author_email__ = "liming.xie@gmail.com"

__description__ = "A CLI tool to mirror media/document files from websites, or fetch them from video platforms via yt-dlp"
__url__ = "https://github.com/floatinghotpot/web2dl"
__license__ = "MIT"
