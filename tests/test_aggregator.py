from services.aggregator import aggregate_profile_score
from services.features import PhotoRole as R


def test_null_scores_are_skipped():
    # (1.2*80 + 1.1*60) / 2.3 = 70.43
    assert aggregate_profile_score([80, None, 60], [R.PRIMARY_HEADSHOT, R.GENERIC, R.FULL_BODY]) == 70


def test_nothing_scored_is_zero():
    assert aggregate_profile_score([], []) == 0
    assert aggregate_profile_score([None, None], ["pet", "generic"]) == 0


def test_completeness_and_diversity_bonuses():
    roles = [R.PRIMARY_HEADSHOT, R.FULL_BODY, R.HOBBY_ACTIVITY, R.PET]
    assert aggregate_profile_score([70, 70, 70, 70], roles) == 80
    # four photos, one role: completeness only
    assert aggregate_profile_score([70] * 4, [R.GENERIC] * 4) == 75
    # three roles, three photos: diversity only
    assert aggregate_profile_score([70] * 3, roles[:3]) == 75


def test_failed_photos_do_not_count_towards_bonuses():
    roles = [R.PRIMARY_HEADSHOT, R.FULL_BODY, R.HOBBY_ACTIVITY, R.PET]
    assert aggregate_profile_score([70, 70, None, None], roles) == 70


def test_capped_at_100():
    roles = [R.PRIMARY_HEADSHOT, R.FULL_BODY, R.HOBBY_ACTIVITY, R.PET]
    assert aggregate_profile_score([100] * 4, roles) == 100


def test_unknown_and_missing_roles_weigh_like_generic():
    # (1.2*50 + 0.8*100) / 2.0 = 70
    assert aggregate_profile_score([50, 100], ["primary_headshot", "selfie"]) == 70
    assert aggregate_profile_score([50, 100], ["primary_headshot"]) == 70
