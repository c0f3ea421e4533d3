"""HTTP session for use throughout the project."""
import requests

from country_lookup.constants.standalone import TITLE

HEADERS = {
    'User-Agent': f'{TITLE.replace(" ", "-")}/1.0 (+python-requests)',
}

# Global session object
session = requests.Session()
session.headers.update(HEADERS)
