import os
import pytest

pwd = pytest.importorskip("pwd")

from dgcompose.UTILS import user_identity
from dgcompose.UTILS.user_identity import current_uid

def test_current_uid():
    assert current_uid() == str(os.getuid())

def test_current_uid_unknown_user(monkeypatch):
    def missing(uid):
        raise KeyError(f"getpwuid(): uid not found: {uid}")

    monkeypatch.setattr(user_identity.pwd, "getpwuid", missing)
    with pytest.raises(OSError, match="unable to get current user"):
        current_uid()
