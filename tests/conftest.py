import json

import pytest

from scrobble_analytics.config import Settings
from scrobble_analytics.pipeline import ScrobblePipeline


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATA_DIR=tmp_path / "data",
        OUTPUT_DIR=tmp_path / "out",
        LASTFM_API_KEY="test-key",
        _env_file=None,
    )


@pytest.fixture
def pipeline(settings):
    return ScrobblePipeline(settings)


@pytest.fixture
def write_input(tmp_path):
    """Write a JSON (or raw text) input file and return its path"""
    def _write(content, name="input.json"):
        path = tmp_path / name
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_text(json.dumps(content), encoding="utf-8")
        return path
    return _write
