"""
Utilities for looking up the identity of the invoking user.
"""
import os
import pwd

def current_uid() -> str:
    """
    Returns the numeric user id of the current user as a string.

    :raises OSError: If the current user has no passwd entry.
    """
    uid = os.getuid()
    try:
        pwd.getpwuid(uid)
    except KeyError as e:
        raise OSError(f"unable to get current user: {e}") from e
    return str(uid)
