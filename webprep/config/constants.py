"""Constants for webprep."""

from pathlib import Path

from webprep import __version__

# Application constants
APP_NAME = "webprep"
APP_VERSION = __version__

# Default paths
DEFAULT_LOG_DIR = ".logs"
DEFAULT_CONFIG_FILE = "webprep.yaml"
DEFAULT_MANIFEST_FILENAME = "data.json"
DEFAULT_OUTPUT_SUFFIX = "-converted"
DEFAULT_INDEX_FILENAME = "index.csv"

# Config file locations (in order of priority)
CONFIG_LOCATIONS = [
    Path.cwd() / DEFAULT_CONFIG_FILE,
    Path.home() / ".config" / APP_NAME / "config.yaml",
]

# Directories (and paged documents) whose name starts with this marker hold
# animation frames and collapse into a single animated output.
DEFAULT_ANIMATION_PREFIX = "gif"

# Extension families
VECTOR_EXTENSIONS = {".ai"}
PAGED_EXTENSIONS = {".pdf"}
LAYERED_EXTENSIONS = {".psd", ".tif"}  # rendered to a raster extension
RASTER_EXTENSIONS = {".jpg", ".jpeg", ".png"}

IMAGE_EXTENSIONS = RASTER_EXTENSIONS | VECTOR_EXTENSIONS | PAGED_EXTENSIONS | LAYERED_EXTENSIONS
VIDEO_EXTENSIONS = {".mov", ".mpeg4"}
TEXT_EXTENSIONS = {".txt", ".md", ".markdown", ".html", ".csv", ".xlsx"}

# Responsive sizes
DEFAULT_MAX_IMAGE_WIDTH = 1600
DEFAULT_MAX_IMAGE_HEIGHT = 1200
DEFAULT_BASE_SIZE = 200  # fixed "0x" rendition
DEFAULT_VECTOR_FORMATS = ["ai"]
DEFAULT_RASTER_EXTENSION = ".jpg"

# Rendering engine defaults
DEFAULT_IDENTIFY_COMMAND = ["magick", "identify"]
DEFAULT_CONVERT_COMMAND = ["convert"]
DEFAULT_THUMBNAIL_COMMAND = ["qlmanage", "-t", "-s", "1600x800"]
DEFAULT_PAGE_DENSITY = 150
DEFAULT_ANIMATION_DELAY = 10
DEFAULT_ANIMATION_LOOP = 0
DEFAULT_ANIMATION_WIDTH = 600

# Concurrency defaults (one unit at a time protects the rendering engine)
DEFAULT_FILE_WORKERS = 1
