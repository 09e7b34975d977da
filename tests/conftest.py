import pytest

from vmprovider.core.config import FEATURES_VAR
from vmprovider.core.notifications import ChangeNotifier
from vmprovider.storage.database import DatabaseHelper


@pytest.fixture(autouse=True)
def _clean_features(monkeypatch):
    monkeypatch.delenv(FEATURES_VAR, raising=False)


@pytest.fixture
def db_helper(tmp_path):
    helper = DatabaseHelper(tmp_path / "voicemail.db")
    yield helper
    helper.close()


@pytest.fixture
def notifier():
    return ChangeNotifier()
