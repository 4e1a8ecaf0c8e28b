import pytest

from hotelwatch.liteapi.models import MinRateOffer, MinRatesResponse
from hotelwatch.logic import signals


def offers(*prices):
    return MinRatesResponse.model_validate({"data": [{"price": p} for p in prices]}).data


def test_extract_min_price_picks_lowest():
    assert signals.extract_min_price(offers(120, 95)) == 95
    assert signals.extract_min_price(offers(95.5, 120, 95.25)) == 95.25


def test_extract_min_price_ignores_non_numeric_and_missing():
    data = MinRatesResponse.model_validate(
        {"data": [{"price": "12"}, {"price": None}, {"hotelId": "H1"}, {"price": True}, {"price": 140}]}
    ).data
    assert signals.extract_min_price(data) == 140


def test_extract_min_price_no_valid_price_is_none_not_zero():
    assert signals.extract_min_price([]) is None
    assert signals.extract_min_price(offers("n/a", None)) is None


def test_zero_price_does_not_poison_minimum():
    assert signals.extract_min_price(offers(0, 80, 0)) == 80
    assert signals.extract_min_price(offers(0)) is None
    assert signals.extract_min_price([MinRateOffer(price=-5), MinRateOffer(price=60)]) == 60


def test_extract_min_price_is_true_minimum():
    prices = [310.0, 99.99, 150.0, 99.98, 420.5]
    result = signals.extract_min_price(offers(*prices))
    assert result in prices
    assert all(result <= p for p in prices)


@pytest.mark.parametrize(
    ("min_price", "target", "expected"),
    [
        (95.0, 100.0, True),
        (100.0, 100.0, True),
        (100.01, 100.0, False),
        (80.0, 50.0, False),
        (None, 100.0, False),
        (0.0, 100.0, False),
        (-1.0, 100.0, False),
    ],
)
def test_should_alert(min_price, target, expected):
    assert signals.should_alert(min_price, target) is expected


def test_integer_price_beyond_float_range_is_ignored():
    assert signals.extract_min_price(offers(10**400, 80)) == 80
    assert signals.extract_min_price(offers(10**400)) is None
