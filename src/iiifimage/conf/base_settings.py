#
# QIS IIIF Image Core
#
# Default settings
#
# Do not edit this file. Instead, create your own settings file and set
# the IIIF_SETTINGS environment variable to its full path. Any values in
# your file override the values here.
#

# Whether to log additional information
DEBUG = False

# The image formats that may be requested
OUTPUT_FORMATS = ["jpg", "png"]

# Where to cache rendered images: "memory", "memcached", or "none"
CACHE_BACKEND = "memory"
# How long to keep rendered images in the cache
CACHE_DURATION_DAYS = 3
# Memcached servers when CACHE_BACKEND is "memcached"
MEMCACHED_SERVERS = ["localhost:11211"]

# The directory containing the source images, when finding images on disk
IMAGES_BASE_DIR = "images"
# The file extensions to try when finding an image file from its identifier
IMAGE_FILE_EXTENSIONS = ["jp2", "tiff", "tif", "png", "jpg"]

# When not empty, find images on a web server instead of on disk.
# The value is a URL template in which "{id}" is replaced by the image identifier.
HTTP_FILE_RESOLVER_BASE_URL = ""
# Where to keep downloaded copies of images from the web server,
# defaults to a directory in the operating system's temp directory
HTTP_CACHE_DIR = ""
# Seconds to wait for a response from the web server
HTTP_TIMEOUT_SECS = 30

# The directory in which to create temp files, defaults to the operating system's
TEMP_DIR = ""

# The imaging back end: "imagemagick", "kakadu", or "auto" to use Kakadu
# for JPEG 2000 files only if it is installed
IMAGE_BACKEND = "auto"
# The source file types to decode with Kakadu
KAKADU_FILE_TYPES = ["jp2"]
# Number of decoding threads for Kakadu
KAKADU_NUM_THREADS = 4
# The highest resolution reduction to request from Kakadu
KAKADU_MAX_REDUCTION = 5
# How to read image dimensions: "imagemagick" or "pillow"
PROBE_BACKEND = "imagemagick"

# The imaging commands
CONVERT_PATH = "convert"
IDENTIFY_PATH = "identify"
KDU_EXPAND_PATH = "kdu_expand"
# Seconds to allow an imaging command to run before it is killed, or 0 for no limit
COMMAND_TIMEOUT_SECS = 60

# Logging server host and port, set these to log from multiple processes
# into one file via a socket server
LOGGING_SERVER = ""
LOGGING_SERVER_PORT = 0
# Log file name when not using a logging server, or empty to log to stderr
LOG_FILENAME = ""
