"""Module for defining constants that require imports from third-party libraries."""
from tzlocal import get_localzone

LOCAL_TZ = get_localzone()
