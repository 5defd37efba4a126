"""Shared test fixtures."""

from pathlib import Path

import pytest

from recut.models import Annotation, VideoAnalysis

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_manifest_path() -> Path:
    return FIXTURES_DIR / "sample_manifest.json"


@pytest.fixture
def silence_analysis() -> VideoAnalysis:
    return VideoAnalysis(
        duration=60.0,
        annotations=[
            Annotation(id="s1", type="silence", start_time=10.0, end_time=12.0),
            Annotation(id="s2", type="silence", start_time=30.0, end_time=33.0),
            Annotation(id="t1", type="talking", start_time=0.0, end_time=10.0),
        ],
    )
