"""
Destination path composition.
"""

import os
from typing import List, Optional

from .exceptions import LocationError


def compose(root: Optional[str], filename: str) -> str:
    """Place a filename under a root location, without prefixing it twice."""
    if root and not filename.startswith(root):
        return root + os.sep + filename
    return filename


def add_root(storage_root: Optional[str], location: str) -> str:
    """Turn a configured location name into an absolute root location."""
    if not storage_root:
        return location

    location = location.strip(os.sep)
    if not location:
        return storage_root
    return storage_root.rstrip(os.sep) + os.sep + location


def remove_root(storage_root: Optional[str], path: str) -> str:
    """Strip the storage root from a root location, leaving the location name."""
    if storage_root and path.startswith(storage_root):
        return path[len(storage_root):].lstrip(os.sep)
    return path


def select_root(
    storage_root: Optional[str], locations: List[str], location: Optional[str] = None
) -> str:
    """
    Pick the root location a share is saved under.

    A named location must be one of ``locations``. Without a name the only
    configured location is used; with none or several configured the caller
    has to choose.

    Raises:
        LocationError: If no single location can be selected
    """
    if location is not None:
        if location not in locations:
            raise LocationError(
                f"Unknown save location: {location}", {"locations": locations}
            )
        return add_root(storage_root, location)

    if len(locations) == 1:
        # Only one location, just use it
        return add_root(storage_root, locations[0])

    if not locations:
        raise LocationError("No save locations configured")

    raise LocationError("Choose a save location", {"locations": locations})
