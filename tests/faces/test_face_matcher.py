import json

import pytest

from hris_attendance.faces.matcher import FaceCandidate, euclidean_distance, match_best_employee, similarity_score


def test_similarity_score_scale():
    assert similarity_score(0.0) == 100
    assert similarity_score(0.24) == 60
    assert similarity_score(0.3) == 50
    assert similarity_score(0.6) == 0
    assert similarity_score(1.5) == 0


def test_similarity_score_rounds_halves_up():
    # 0.225 / 0.6 leaves exactly 62.5
    assert similarity_score(0.225) == 63
    assert similarity_score(0.075) == 88


def test_euclidean_distance():
    assert euclidean_distance([0, 0], [3, 4]) == pytest.approx(5.0)
    with pytest.raises(ValueError):
        euclidean_distance([0, 0], [0, 0, 0])


def test_identical_descriptor_scores_100_and_wins():
    live = [0.1, 0.2, 0.3, 0.4]
    candidates = [
        FaceCandidate("near", [0.12, 0.2, 0.3, 0.4]),
        FaceCandidate("same", json.dumps(live)),
    ]
    found = match_best_employee(live, candidates)
    assert found.employee == "same"
    assert found.score == 100
    assert found.distance == 0


def test_below_min_score_is_no_match():
    found = match_best_employee([0.0, 0.0], [FaceCandidate("far", [0.3, 0.0])])
    assert found is None
    assert match_best_employee([0.0, 0.0], [FaceCandidate("far", [0.3, 0.0])], min_score=50).employee == "far"


def test_ties_keep_first_candidate():
    found = match_best_employee([0.0, 0.0], [FaceCandidate("a", [0.1, 0.0]), FaceCandidate("b", [0.0, 0.1])])
    assert found.employee == "a"


def test_bad_and_mismatched_candidates_are_skipped():
    candidates = [
        FaceCandidate("garbage", "{not json"),
        FaceCandidate("short", [0.0]),
        FaceCandidate("ok", {"0": 0.0, "1": 0.05}),
    ]
    found = match_best_employee([0.0, 0.0], candidates)
    assert found.employee == "ok"
    assert found.score == 92
