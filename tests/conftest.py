from __future__ import annotations
import os
from io import BytesIO

# force the offline provider before config is imported anywhere
os.environ["REVIEW_PROVIDER"] = "stub"
os.environ.pop("SCORING_WEIGHTS_FILE", None)

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from services.features import PhotoFeatures, PhotoRole
from services.selection import ScoredPhoto


@pytest.fixture(scope="session")
def client():
    from app import app
    return TestClient(app)


@pytest.fixture
def make_image():
    """Returns a factory producing encoded image bytes of a given size/colour."""
    def _make(width=64, height=48, color=(200, 120, 80), fmt="PNG") -> bytes:
        buf = BytesIO()
        Image.new("RGB", (width, height), color).save(buf, format=fmt)
        return buf.getvalue()
    return _make


@pytest.fixture
def features():
    """A clean, mid-range vector: no penalties fire for any role."""
    return PhotoFeatures(
        quality=80,
        aesthetics=60,
        smile_prob=35,
        gaze_deg=10,
        red_flag=False,
        pet_flag=False,
        filter_strength=0.0,
        num_faces=1,
        posture_score=0.0,
    )


@pytest.fixture
def photo():
    def _photo(index, score, role=PhotoRole.GENERIC):
        return ScoredPhoto(index=index, raw_features=None, role=role, score=score)
    return _photo
