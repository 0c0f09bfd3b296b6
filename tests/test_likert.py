import numpy as np
import pandas as pd
import pytest

from fuzzy_delphi.errors import InvalidInput, InvalidParameter
from fuzzy_delphi.likert import LIKERT_SCALES, FuzzyTriangularNumber, classify_rating, map_to_fuzzy

EXPECTED = {
    5: {1: (0, 0, 0.2), 2: (0, 0.2, 0.4), 3: (0.2, 0.4, 0.6), 4: (0.4, 0.6, 0.8), 5: (0.6, 0.8, 1.0)},
    7: {
        1: (0, 0, 0.2),
        2: (0, 0.2, 0.4),
        3: (0, 0.4, 0.6),
        4: (0.2, 0.6, 0.8),
        5: (0.4, 0.8, 1.0),
        6: (0.6, 1.0, 1.0),
        7: (0.8, 1.0, 1.0),
    },
}


@pytest.mark.parametrize("scale", [5, 7])
def test_scale_mapping_exact(scale):
    ratings = pd.DataFrame({"Q": list(EXPECTED[scale])})
    fuzzy = map_to_fuzzy(ratings, scale)
    for i, r in enumerate(EXPECTED[scale]):
        assert tuple(fuzzy.iloc[i]) == EXPECTED[scale][r]


def test_lookup_triples_are_ordered():
    for table in LIKERT_SCALES.values():
        for tfn in table.values():
            assert tfn.is_ordered()
            assert 0 <= tfn.m1 and tfn.m3 <= 1


def test_centroid():
    assert np.isclose(FuzzyTriangularNumber(0.2, 0.4, 0.6).centroid(), 0.4)


@pytest.mark.parametrize("scale", [0, 3, 6, 10, True, "5", [5], None])
def test_invalid_scale(scale):
    with pytest.raises(InvalidParameter):
        map_to_fuzzy(pd.DataFrame({"A": [1, 2]}), scale)


def test_item_identity_and_order():
    ratings = pd.DataFrame({"Zeta": [1, 2], "Alpha": [3, 4]}, index=["e1", "e2"])
    fuzzy = map_to_fuzzy(ratings, 5)
    assert fuzzy.shape == (2, 6)
    assert list(fuzzy.columns.get_level_values("item").unique()) == ["Zeta", "Alpha"]
    assert list(fuzzy.index) == ["e1", "e2"]
    assert tuple(fuzzy.loc["e2", "Alpha"]) == (0.4, 0.6, 0.8)


def test_missing_and_out_of_domain_become_missing(caplog):
    ratings = pd.DataFrame({"A": [1, np.nan, 6, 0]})
    with caplog.at_level("WARNING", logger="fuzzy_delphi"):
        fuzzy = map_to_fuzzy(ratings, 5)
    assert tuple(fuzzy.iloc[0]) == (0, 0, 0.2)
    assert fuzzy.iloc[1:].isna().all().all()
    assert "out-of-scale" in caplog.text


def test_out_of_domain_can_be_rejected():
    with pytest.raises(InvalidInput):
        map_to_fuzzy(pd.DataFrame({"A": [1, 6]}), 5, out_of_domain="raise")
    # missing stays missing under the strict policy
    fuzzy = map_to_fuzzy(pd.DataFrame({"A": [1, None]}), 5, out_of_domain="raise")
    assert fuzzy.iloc[1].isna().all()


def test_unknown_policy():
    with pytest.raises(InvalidParameter):
        map_to_fuzzy(pd.DataFrame({"A": [1]}), 5, out_of_domain="ignore")


def test_classify_rating():
    table = LIKERT_SCALES[7]
    assert classify_rating(7, table) == ("valid", 7)
    assert classify_rating(7.0, table) == ("valid", 7)
    assert classify_rating("5.0", table) == ("valid", 5)
    assert classify_rating(np.nan, table) == ("missing", None)
    assert classify_rating(None, table) == ("missing", None)
    assert classify_rating(8, table) == ("out_of_domain", None)
    assert classify_rating(4.5, table) == ("out_of_domain", None)
    assert classify_rating("x", table) == ("out_of_domain", None)
    assert classify_rating(True, table) == ("out_of_domain", None)
    assert classify_rating(np.bool_(True), table) == ("out_of_domain", None)


def test_map_mixed_object_column():
    ratings = pd.DataFrame({"A": ["5.0", True, 3, "high"]}, dtype=object)
    fuzzy = map_to_fuzzy(ratings, 5)
    assert tuple(fuzzy.iloc[0]) == (0.6, 0.8, 1.0)
    assert fuzzy.iloc[1].isna().all()
    assert tuple(fuzzy.iloc[2]) == (0.2, 0.4, 0.6)
    assert fuzzy.iloc[3].isna().all()


def test_map_numpy_matrix():
    fuzzy = map_to_fuzzy(np.array([[5, 4], [4, 5]]), 5)
    assert list(fuzzy.columns.get_level_values("item").unique()) == ["Item1", "Item2"]
    assert tuple(fuzzy.loc[0, "Item1"]) == (0.6, 0.8, 1.0)
    assert tuple(fuzzy.loc[0, "Item2"]) == (0.4, 0.6, 0.8)


@pytest.mark.parametrize("ratings", [[[5, 4], [4, 5]], np.array([5, 4]), {"A": [5]}])
def test_map_rejects_non_tables(ratings):
    with pytest.raises(InvalidInput):
        map_to_fuzzy(ratings, 5)
