# tests/test_scorer.py
# Composite score arithmetic, penalties and clamping.
import itertools
from dataclasses import replace

import pytest

from services.features import PhotoFeatures, PhotoRole
from services.scorer import display_score, gaze_score, score_breakdown, score_composite
from services.weights import DEFAULT_CONFIG, ScoringConfig


def test_clean_generic_photo(features):
    # .25*.8 + .25*.6 + .15*.5 + .10*1.0 = .525, plus the .2 offset
    assert score_composite(features, PhotoRole.GENERIC) == pytest.approx(0.725)


def test_score_is_deterministic(features):
    runs = {score_composite(features, PhotoRole.PRIMARY_HEADSHOT) for _ in range(20)}
    assert len(runs) == 1


def test_gaze_ladder_is_stepped():
    assert gaze_score(0) == 1.0
    assert gaze_score(15) == 1.0
    assert gaze_score(15.1) == 0.6
    assert gaze_score(45) == 0.6
    assert gaze_score(46) == 0.3


def test_group_role_is_exempt_from_group_penalty(features):
    crowd = replace(features, num_faces=5)
    assert score_breakdown(crowd, PhotoRole.GROUP_SOCIAL)["penalty"]["group"] == 0
    generic_w = DEFAULT_CONFIG.weights_for(PhotoRole.GENERIC)
    assert score_breakdown(crowd, PhotoRole.GENERIC)["penalty"]["group"] == generic_w.group_penalty


def test_group_exemption_is_exactly_the_group_penalty(features):
    # same weights for both roles so only the exemption differs
    w = DEFAULT_CONFIG.weights_for(PhotoRole.GENERIC)
    cfg = ScoringConfig(role_weights={PhotoRole.GENERIC: w, PhotoRole.GROUP_SOCIAL: w})
    crowd = replace(features, num_faces=5)
    diff = score_composite(crowd, PhotoRole.GROUP_SOCIAL, cfg) - score_composite(crowd, PhotoRole.GENERIC, cfg)
    assert diff == pytest.approx(w.group_penalty)


def test_two_faces_is_not_a_group(features):
    pair = replace(features, num_faces=2)
    assert score_breakdown(pair, PhotoRole.GENERIC)["penalty"]["group"] == 0


def test_gaze_penalty_depends_on_role(features):
    side = replace(features, gaze_deg=40)
    assert score_breakdown(side, PhotoRole.PRIMARY_HEADSHOT)["penalty"]["gaze"] == DEFAULT_CONFIG.strict_gaze_penalty
    assert score_breakdown(side, PhotoRole.HOBBY_ACTIVITY)["penalty"]["gaze"] == 0

    away = replace(features, gaze_deg=60)
    assert score_breakdown(away, PhotoRole.PET)["penalty"]["gaze"] == DEFAULT_CONFIG.relaxed_gaze_penalty


def test_disengaged_needs_both_conditions(features):
    frown = replace(features, smile_prob=-10)
    p = score_breakdown(frown, PhotoRole.GENERIC)["penalty"]
    assert p["not_smiling"] == DEFAULT_CONFIG.smile_penalty
    assert p["disengaged"] == 0

    frown_away = replace(frown, gaze_deg=40)
    p = score_breakdown(frown_away, PhotoRole.GENERIC)["penalty"]
    assert p["not_smiling"] == DEFAULT_CONFIG.smile_penalty
    assert p["gaze"] == DEFAULT_CONFIG.strict_gaze_penalty
    assert p["disengaged"] == DEFAULT_CONFIG.disengaged_penalty

    # looking away but smiling: no compounding
    away = replace(features, gaze_deg=40)
    assert score_breakdown(away, PhotoRole.GENERIC)["penalty"]["disengaged"] == 0


@pytest.mark.parametrize("role", [PhotoRole.HOBBY_ACTIVITY, PhotoRole.PET])
def test_relaxed_roles_disengage_only_past_45_degrees(features, role):
    frown = replace(features, smile_prob=-10, gaze_deg=40)
    p = score_breakdown(frown, role)["penalty"]
    assert p["not_smiling"] == DEFAULT_CONFIG.smile_penalty
    assert p["gaze"] == 0
    assert p["disengaged"] == 0

    p = score_breakdown(replace(frown, gaze_deg=50), role)["penalty"]
    assert p["gaze"] == DEFAULT_CONFIG.relaxed_gaze_penalty
    assert p["disengaged"] == DEFAULT_CONFIG.disengaged_penalty


def test_red_flag_and_filter_lower_the_score(features):
    base = score_composite(features, PhotoRole.GENERIC)
    assert score_composite(replace(features, red_flag=True), PhotoRole.GENERIC) < base
    assert score_composite(replace(features, filter_strength=1.0), PhotoRole.GENERIC) < base


def test_pet_flag_helps_pet_photos(features):
    with_pet = replace(features, pet_flag=True)
    assert score_composite(with_pet, PhotoRole.PET) > score_composite(features, PhotoRole.PET)


def test_unknown_role_uses_generic_weights(features):
    cfg = ScoringConfig(role_weights={PhotoRole.GENERIC: DEFAULT_CONFIG.weights_for(PhotoRole.GENERIC)})
    assert score_composite(features, PhotoRole.FULL_BODY, cfg) == score_composite(features, PhotoRole.GENERIC, cfg)


@pytest.mark.parametrize("role", list(PhotoRole))
def test_score_is_always_clamped(role):
    extremes = itertools.product(
        (-1e6, 0, 1e6),        # quality / aesthetics / smile
        (0, 90, 1e4),          # gaze
        (False, True),         # red flag
        (-5.0, 0.0, 5.0),      # filter strength
        (0, 10),               # faces
        (-100.0, 100.0),       # posture
    )
    for v, gaze, red, filt, faces, posture in extremes:
        f = PhotoFeatures(
            quality=v, aesthetics=v, smile_prob=v, gaze_deg=gaze, red_flag=red,
            pet_flag=not red, filter_strength=filt, num_faces=faces, posture_score=posture,
        )
        s = score_composite(f, role)
        assert 0.2 <= s <= 1.0


def test_display_score_rounds_half_up():
    assert display_score(0.2) == 20
    assert display_score(1.0) == 100
    assert display_score(0.6449) == 64
    assert display_score(0.6451) == 65
