"""
Tests des entites de notation.
"""

import pytest

from ratings_wrapper.core.entities import (
    ColorIndicator,
    ConsolidatedRating,
    RatingScale,
    RatingSource,
    SourceValue,
    color_for,
)


class TestColorFor:
    """Tests pour color_for()."""

    @pytest.mark.parametrize(
        "rating, expected",
        [
            (9.0, ColorIndicator.EXCELLENT),
            (8.99, ColorIndicator.GREAT),
            (8.0, ColorIndicator.GREAT),
            (7.0, ColorIndicator.GOOD),
            (6.5, ColorIndicator.OKAY),
            (5.0, ColorIndicator.MEDIOCRE),
            (4.99, ColorIndicator.POOR),
            (0.0, ColorIndicator.POOR),
            (10.0, ColorIndicator.EXCELLENT),
        ],
    )
    def test_thresholds(self, rating: float, expected: ColorIndicator) -> None:
        assert color_for(rating) is expected


class TestSourceValue:
    """Tests pour SourceValue."""

    def test_hundred_scale_is_divided(self) -> None:
        """Une note sur 100 est ramenee sur 10."""
        value = SourceValue.from_raw(RatingSource.OMDB_RT, 83, RatingScale.HUNDRED)
        assert value.value == 8.3
        assert value.scale is RatingScale.HUNDRED

    def test_ten_scale_is_kept(self) -> None:
        value = SourceValue.from_raw(RatingSource.TMDB, 7.4, RatingScale.TEN, vote_count=12)
        assert value.value == 7.4
        assert value.vote_count == 12

    @pytest.mark.parametrize("raw", [-0.1, 10.5])
    def test_out_of_range_rejected(self, raw: float) -> None:
        with pytest.raises(ValueError, match="hors bornes"):
            SourceValue.from_raw(RatingSource.TMDB, raw, RatingScale.TEN)

    def test_to_dict(self) -> None:
        data = SourceValue.from_raw(
            RatingSource.OMDB_MC, 68, RatingScale.HUNDRED, origin="omdb"
        ).to_dict()
        assert data["source"] == "metacritic"
        assert data["value"] == 6.8
        assert data["scale"] == 100
        assert data["origin"] == "omdb"


class TestConsolidatedRating:
    """Tests pour ConsolidatedRating."""

    def _rating(self) -> ConsolidatedRating:
        values = (
            SourceValue(RatingSource.LOCAL_MIRROR, 8.5),
            SourceValue(RatingSource.TMDB, 8.0),
        )
        return ConsolidatedRating("tt0111161", values, 8.3, 2, ColorIndicator.GREAT, ttl=86400)

    def test_requires_at_least_one_source(self) -> None:
        with pytest.raises(ValueError):
            ConsolidatedRating("tt1", (), 0.0, 0, ColorIndicator.POOR)

    def test_value_for(self) -> None:
        rating = self._rating()
        assert rating.value_for(RatingSource.TMDB).value == 8.0
        assert rating.value_for(RatingSource.MAL) is None

    def test_to_dict(self) -> None:
        data = self._rating().to_dict()
        assert data["consolidated_rating"] == 8.3
        assert data["color_indicator"] == "great"
        assert [s["source"] for s in data["sources"]] == ["imdb", "tmdb"]
