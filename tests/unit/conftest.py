"""Fixtures specific to unit tests."""

import pytest

from jamendo.common.config import JamendoConfig


@pytest.fixture
def no_retry_config(jamendo_config: JamendoConfig) -> JamendoConfig:
    """Provide a configuration with the retry flag turned off."""
    return jamendo_config.model_copy(update={"retry": False})


@pytest.fixture
def track_245() -> dict:
    """Track #245 - J.E.T. Apostrophe A.I.M.E by Both."""
    return {
        "id": "245",
        "name": "J.E.T. Apostrophe A.I.M.E",
        "artist_id": "5",
        "artist_name": "Both",
        "album_id": "33",
        "album_name": "Simple Exercice",
    }
