import random
from collections import Counter

import pytest

from mirador.models import PropertyRecord, StatusWeights
from mirador.portfolio import InvalidConfiguration, redistribute, status_counts, target_counts

WEIGHTS = StatusWeights(off_market=0.4, for_sale=0.3, trending=0.2, flagged=0.1)


def _items(n):
    return [
        PropertyRecord(id=f"p{i:03d}", address=f"{i} Main St", price=1000 * i, status="for-sale",
                       title=f"Property {i}", sqft=100 + i)
        for i in range(n)
    ]


def test_output_has_same_length():
    for n in (0, 1, 3, 7, 100):
        assert len(redistribute(_items(n), WEIGHTS)) == n


def test_empty_input_returns_empty_list():
    assert redistribute([], WEIGHTS) == []


def test_exact_proportions_for_100_items():
    result = redistribute(_items(100), WEIGHTS)
    counts = Counter(item.status for item in result)
    assert counts == {"off-market": 40, "for-sale": 30, "trending": 20, "flagged": 10}


def test_ids_and_order_are_preserved():
    items = _items(37)
    random.Random(7).shuffle(items)
    result = redistribute(items, WEIGHTS)
    assert [item.id for item in result] == [item.id for item in items]


def test_assignment_does_not_depend_on_input_order():
    items = _items(50)
    shuffled = list(items)
    random.Random(3).shuffle(shuffled)

    first = {item.id: item.status for item in redistribute(items, WEIGHTS)}
    second = {item.id: item.status for item in redistribute(shuffled, WEIGHTS)}
    assert first == second


def test_rerunning_on_output_is_stable():
    once = redistribute(_items(23), WEIGHTS)
    twice = redistribute(once, WEIGHTS)
    assert [item.status for item in once] == [item.status for item in twice]


def test_only_status_changes_and_input_is_not_mutated():
    items = _items(10)
    result = redistribute(items, StatusWeights(flagged=1))
    assert all(item.status == "for-sale" for item in items)
    for before, after in zip(items, result):
        assert after.status == "flagged"
        assert after.model_dump(exclude={"status"}) == before.model_dump(exclude={"status"})


def test_extra_fields_pass_through():
    item = PropertyRecord(id="a", address="x", price=1, status="flagged", lat=1.5, keyFeatures=["dock"])
    result = redistribute([item], StatusWeights(off_market=1))
    assert result[0].to_dict()["lat"] == 1.5
    assert result[0].to_dict()["keyFeatures"] == ["dock"]
    assert result[0].status == "off-market"


def test_remainder_goes_to_statuses_in_fixed_order():
    equal = StatusWeights(off_market=1, for_sale=1, trending=1, flagged=1)
    assert target_counts(3, equal) == [1, 1, 1, 0]
    assert target_counts(7, equal) == [2, 2, 2, 1]


def test_weights_do_not_need_to_sum_to_one():
    scaled = StatusWeights(off_market=4, for_sale=3, trending=2, flagged=1)
    assert target_counts(100, scaled) == [40, 30, 20, 10]


def test_proportions_within_rounding_bound():
    weights = StatusWeights(off_market=0.33, for_sale=0.33, trending=0.2, flagged=0.14)
    n = 61
    counts = target_counts(n, weights)
    assert sum(counts) == n
    for count, weight in zip(counts, weights.ordered()):
        assert abs(count - weight / sum(weights.ordered()) * n) <= 3


def test_assignment_follows_sorted_ids():
    items = [PropertyRecord(id=i, status="for-sale") for i in ("c", "a", "d", "b")]
    equal = StatusWeights(off_market=1, for_sale=1, trending=1, flagged=1)
    result = {item.id: item.status for item in redistribute(items, equal)}
    assert result == {"a": "off-market", "b": "for-sale", "c": "trending", "d": "flagged"}


def test_zero_weights_raise_invalid_configuration():
    with pytest.raises(InvalidConfiguration):
        redistribute(_items(5), StatusWeights())


def test_invalid_configuration_is_a_value_error():
    with pytest.raises(ValueError):
        target_counts(0, StatusWeights())


def test_weights_from_mapping():
    weights = StatusWeights.from_mapping({"off-market": 2, "flagged": 1})
    assert weights.ordered() == [2, 0, 0, 1]


def test_status_counts_includes_every_status():
    result = redistribute(_items(4), StatusWeights(trending=1))
    assert status_counts(result) == {"off-market": 0, "for-sale": 0, "trending": 4, "flagged": 0}
