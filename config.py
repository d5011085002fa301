import os
from dotenv import load_dotenv

from utils.errors import ConfigurationError

# Base directory for the Python source files
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# Load environment variables from .env file
# Look for .env in the same directory (project root)
ENV_FILE = os.path.join(BASE_DIR, '.env')
ENV_EXAMPLE_FILE = ENV_FILE + '.example'
load_dotenv(ENV_FILE)

# File paths
CACHE_DIR = os.getenv('CACHE_DIR', os.path.join(BASE_DIR, 'cache'))
OUTPUT_DIR = os.path.join(CACHE_DIR, 'output')
CACHE_FILE = os.path.join(CACHE_DIR, 'cached_data.json')
LOGS_DIR = os.path.join(BASE_DIR, 'logs')

# Mastodon instance configuration
APP_INSTANCE = os.getenv('APP_INSTANCE')
APP_ACCESS_TOKEN = os.getenv('APP_ACCESS_TOKEN')
REQUIRED_ENV_KEYS = ('APP_INSTANCE', 'APP_ACCESS_TOKEN')
REQUESTS_PER_SECOND = int(os.getenv('REQUESTS_PER_SECOND', 3))
REQUEST_TIMEOUT = int(os.getenv('REQUEST_TIMEOUT', 30))

# Statuses per page, the maximum the accounts/:id/statuses endpoint accepts
PAGE_SIZE = 40
DEFAULT_MINIMUM_THREAD_SIZE = 3
OUTPUT_EXTENSION = 'html'

# Timezone used for the fetched_at stamp written to the cache
TIMEZONE = os.getenv('TIMEZONE', 'UTC')

# Debug mode
DEBUG_MODE = os.getenv('DEBUG_MODE', 'False').lower() == 'true'


def require_credentials():
    """
    Returns (instance, access_token) from the environment.
    Read at call time so the client is always built from explicit values.
    """
    missing = [key for key in REQUIRED_ENV_KEYS if not os.getenv(key)]
    if missing:
        raise ConfigurationError(
            f'Environment key(s) {", ".join(missing)} not set. '
            f'Please make sure all the variables are set in the "{ENV_FILE}" file '
            f'(you can create it by copy/pasting "{ENV_EXAMPLE_FILE}").\n'
            f'List of variables: {", ".join(REQUIRED_ENV_KEYS)}'
        )
    return os.getenv('APP_INSTANCE'), os.getenv('APP_ACCESS_TOKEN')


def ensure_directories(cache_dir=None, output_dir=None):
    """
    Initializes the cache and output directories.
    """
    for directory in (cache_dir or CACHE_DIR, output_dir or OUTPUT_DIR):
        try:
            os.makedirs(directory, exist_ok=True)
        except OSError as e:
            raise ConfigurationError(f'Directory "{directory}" could not be created') from e
