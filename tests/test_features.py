# tests/test_features.py
# Defaulting, coercion and role resolution in the feature normalizer.
from services.features import (
    FeatureRange, FeatureRanges, PhotoFeatures, PhotoRole, normalize_features, resolve_role,
)


def test_empty_payload_gets_every_default():
    f = normalize_features({})
    assert f == PhotoFeatures(
        quality=0.0, aesthetics=0.0, smile_prob=60.0, gaze_deg=90.0,
        red_flag=False, pet_flag=False, filter_strength=0.0, num_faces=1, posture_score=0.0,
    )


def test_none_and_garbage_payloads_never_raise():
    assert normalize_features(None).num_faces == 1
    assert normalize_features("not a dict").gaze_deg == 90.0


def test_defaults_follow_configured_ranges():
    ranges = FeatureRanges(gaze_deg=FeatureRange(0, 60), smile_neutral=0.5)
    f = normalize_features({"quality": 70}, ranges)
    assert f.gaze_deg == 60
    assert f.smile_prob == 0.5
    assert f.quality == 70


def test_camel_and_snake_case_keys_are_accepted():
    camel = normalize_features({"smileProb": 20, "gazeDeg": 5, "numFaces": 3, "petFlag": True})
    snake = normalize_features({"smile_prob": 20, "gaze_deg": 5, "num_faces": 3, "pet_flag": True})
    assert camel == snake
    assert camel.pet_flag is True and camel.num_faces == 3


def test_values_are_coerced_or_defaulted():
    f = normalize_features({
        "quality": "85",
        "aesthetics": "n/a",
        "redFlag": "yes",
        "petFlag": "nope",
        "numFaces": -2,
        "filterStrength": float("nan"),
        "gazeDeg": None,
    })
    assert f.quality == 85.0
    assert f.aesthetics == 0.0
    assert f.red_flag is True
    assert f.pet_flag is False
    assert f.num_faces == 0
    assert f.filter_strength == 0.0
    assert f.gaze_deg == 90.0


def test_complete_vector_is_returned_unchanged(features):
    assert normalize_features(features) == features
    assert normalize_features(features.as_payload()) == features
    assert normalize_features(normalize_features(features)) == features


def test_resolve_role():
    assert resolve_role("primary_headshot") is PhotoRole.PRIMARY_HEADSHOT
    assert resolve_role("Full-Body") is PhotoRole.FULL_BODY
    assert resolve_role(" group social ") is PhotoRole.GROUP_SOCIAL
    assert resolve_role(PhotoRole.PET) is PhotoRole.PET
    assert resolve_role("selfie") is PhotoRole.GENERIC
    assert resolve_role(None) is PhotoRole.GENERIC
    assert resolve_role(3) is PhotoRole.GENERIC


def test_feature_range_saturates():
    r = FeatureRange(40, 100)
    assert r.normalize(40) == 0.0
    assert r.normalize(70) == 0.5
    assert r.normalize(150) == 1.0
    assert r.normalize(-10) == 0.0
    assert FeatureRange(5, 5).normalize(5) == 0.0
