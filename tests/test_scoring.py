"""Unit tests for popularity, trending and recommendation scoring."""

import math
from datetime import datetime, timedelta

import pytest

from fileservice.scoring import (
    file_category,
    is_within_window,
    popularity_score,
    recommendation_score,
    score_file,
    top_content_types,
    top_tags,
    trending_score,
)

NOW = datetime(2024, 6, 1, 12, 0, 0)


class TestPopularityScore:
    def test_fresh_file_gets_full_recency_bonus(self):
        assert popularity_score(0, 0, None, NOW, NOW) == pytest.approx(40.0)

    def test_weights_downloads_and_views(self):
        score = popularity_score(9, 99, NOW, NOW, NOW)
        assert score == pytest.approx(40 * 1 + 20 * 2 + 40)

    def test_recency_decays_two_points_per_day(self):
        score = popularity_score(0, 0, NOW - timedelta(days=5), NOW - timedelta(days=30), NOW)
        assert score == pytest.approx(30.0)

    def test_recency_bonus_never_negative(self):
        score = popularity_score(0, 0, NOW - timedelta(days=365), NOW - timedelta(days=400), NOW)
        assert score == 0.0

    def test_falls_back_to_creation_date_when_never_accessed(self):
        score = popularity_score(0, 0, None, NOW - timedelta(days=10), NOW)
        assert score == pytest.approx(20.0)

    def test_negative_counters_count_as_zero(self):
        assert popularity_score(-5, -3, NOW, NOW, NOW) == popularity_score(0, 0, NOW, NOW, NOW)

    def test_monotone_in_downloads(self):
        scores = [popularity_score(d, 3, NOW, NOW, NOW) for d in range(0, 50)]
        assert scores == sorted(scores)

    def test_busy_recent_file_outranks_stale_file(self):
        busy = popularity_score(100, 50, NOW, NOW - timedelta(days=2), NOW)
        stale = popularity_score(1, 1, NOW - timedelta(days=30), NOW - timedelta(days=60), NOW)
        assert busy > stale
        assert busy == pytest.approx(40 * math.log10(101) + 20 * math.log10(51) + 40)

    def test_score_file_uses_record_fields(self, make_record):
        record = make_record(download_count=9, view_count=0, last_accessed_date=NOW)
        assert score_file(record, NOW) == pytest.approx(80.0)


class TestTrendingScore:
    def test_never_accessed_is_not_trending(self, make_record):
        record = make_record(popularity_score=50.0)
        assert trending_score(record, NOW, 24) == 0.0
        assert not is_within_window(record, NOW, 24)

    def test_access_outside_window_scores_zero(self, make_record):
        record = make_record(popularity_score=50.0, last_accessed_date=NOW - timedelta(hours=48))
        assert trending_score(record, NOW, 24) == 0.0

    def test_access_now_doubles_popularity(self, make_record):
        record = make_record(popularity_score=50.0, last_accessed_date=NOW)
        assert trending_score(record, NOW, 24) == pytest.approx(100.0)

    def test_halfway_through_window(self, make_record):
        record = make_record(popularity_score=50.0, last_accessed_date=NOW - timedelta(hours=12))
        assert trending_score(record, NOW, 24) == pytest.approx(50.0)

    def test_window_boundary_is_inside_but_scores_zero(self, make_record):
        record = make_record(popularity_score=50.0, last_accessed_date=NOW - timedelta(hours=24))
        assert is_within_window(record, NOW, 24)
        assert trending_score(record, NOW, 24) == 0.0

    def test_future_access_is_clamped(self, make_record):
        record = make_record(popularity_score=50.0, last_accessed_date=NOW + timedelta(hours=3))
        assert trending_score(record, NOW, 24) == pytest.approx(100.0)

    def test_non_positive_window_scores_zero(self, make_record):
        record = make_record(popularity_score=50.0, last_accessed_date=NOW)
        assert trending_score(record, NOW, 0) == 0.0
        assert trending_score(record, NOW, -5) == 0.0


class TestRecommendationScore:
    def test_bonuses_for_content_type_and_tags(self, make_record):
        record = make_record(content_type="image/png", tags=["a", "b", "c"], popularity_score=10.0)
        score = recommendation_score(record, ["image/png"], ["a", "c", "z"])
        assert score == pytest.approx(10.0 + 10 + 2 * 5)

    def test_no_overlap_is_plain_popularity(self, make_record):
        record = make_record(tags=["x"], popularity_score=7.5)
        assert recommendation_score(record, [], []) == pytest.approx(7.5)

    def test_top_content_types_and_tags(self, make_record):
        records = [
            make_record(content_type="image/png", tags=["travel", "beach"]),
            make_record(content_type="image/png", tags=["travel"]),
            make_record(content_type="application/pdf", tags=["work"]),
            make_record(content_type="video/mp4", tags=["travel"], is_archived=True),
        ]
        assert top_content_types(records) == ["image/png", "application/pdf"]
        assert top_tags(records)[0] == "travel"
        assert "work" in top_tags(records)

    def test_ties_keep_first_occurrence(self, make_record):
        records = [
            make_record(content_type="a/1"),
            make_record(content_type="b/2"),
            make_record(content_type="c/3"),
            make_record(content_type="d/4"),
        ]
        assert top_content_types(records) == ["a/1", "b/2", "c/3"]


class TestFileCategory:
    @pytest.mark.parametrize("content_type,category", [
        ("image/jpeg", "Images"),
        ("video/mp4", "Videos"),
        ("audio/mpeg", "Audio"),
        ("application/pdf", "Documents"),
        ("application/msword", "Documents"),
        ("application/vnd.openxmlformats-officedocument.spreadsheetml.sheet", "Spreadsheets"),
        ("application/vnd.openxmlformats-officedocument.presentationml.presentation", "Presentations"),
        ("text/plain", "Text Files"),
        ("application/zip", "Archives"),
        ("application/json", "Data Files"),
        ("application/octet-stream", "Other"),
    ])
    def test_categories(self, content_type, category):
        assert file_category(content_type) == category
