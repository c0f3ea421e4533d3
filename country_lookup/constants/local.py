"""Module for defining and managing constants that require a local function to be executed first."""
from country_lookup.utils import get_app_dir

APP_DIR_LOCAL = get_app_dir()

# Local (machine-specific): logs and the country database
ERROR_LOG_PATH = APP_DIR_LOCAL / 'error.log'
DEFAULT_STORE_DIR_PATH = APP_DIR_LOCAL / 'Country Database'
