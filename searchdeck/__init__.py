"""searchdeck

Multi-provider answer, image and media-discovery client layer behind a
single call contract for a chat/search front end.
"""

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("searchdeck")
except PackageNotFoundError:
    __version__ = "0.1.0"
__author__ = "searchdeck"
