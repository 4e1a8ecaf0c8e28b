import pytest
import respx
from fastapi.testclient import TestClient
from httpx import Response

from hotelwatch.api import main as api
from hotelwatch.errors import NoPriceDataError, PriceSourceStatusError
from hotelwatch.liteapi.hotel_details import PLACEHOLDER_HOTEL_NAME

from conftest import API_BASE, load_fixture


class StubPrices:
    def __init__(self, outcome):
        self.outcome = outcome
        self.calls = []

    async def get_min_price(self, hotel_id, check_in, check_out):
        self.calls.append((hotel_id, check_in, check_out))
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


class StubHotels:
    async def lookup_or_placeholder(self, hotel_id):
        return PLACEHOLDER_HOTEL_NAME


@pytest.fixture()
def client(seeded_engine, settings):
    api.app.dependency_overrides[api.get_engine] = lambda: seeded_engine
    api.app.dependency_overrides[api.get_settings] = lambda: settings
    yield TestClient(api.app)
    api.app.dependency_overrides.clear()


def use_prices(outcome):
    stub = StubPrices(outcome)
    api.app.dependency_overrides[api.get_price_client] = lambda: stub
    api.app.dependency_overrides[api.get_hotel_client] = lambda: StubHotels()
    return stub


def test_healthcheck(client):
    response = client.get("/v1/healthcheck")
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "available"


def test_hotel_price(client):
    stub = use_prices(95.0)

    response = client.get("/v1/hotels/H1", headers={"X-API-KEY": "k"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["price"] == 95.0
    assert data["hotel_name"] == PLACEHOLDER_HOTEL_NAME
    assert data["currency"] == "USD"
    assert stub.calls[0][1:] == (data["check_in"], data["check_out"])


def test_hotel_price_without_data_is_404(client):
    use_prices(NoPriceDataError("H3"))
    assert client.get("/v1/hotels/H3", headers={"X-API-KEY": "k"}).status_code == 404


def test_hotel_price_upstream_failure_is_502(client):
    use_prices(PriceSourceStatusError("H1", 500))
    assert client.get("/v1/hotels/H1", headers={"X-API-KEY": "k"}).status_code == 502


def test_hotel_price_requires_api_key(client):
    response = client.get("/v1/hotels/H1")
    assert response.status_code == 401


def test_create_and_list_users(client):
    response = client.post("/v1/users", json={"name": "Linus", "email": "linus@example.com"})
    assert response.status_code == 201
    assert response.json()["data"]["user"]["email"] == "linus@example.com"

    duplicate = client.post("/v1/users", json={"name": "Linus", "email": "linus@example.com"})
    assert duplicate.status_code == 409

    listing = client.get("/v1/users", params={"limit": 2, "offset": 0}).json()["data"]
    assert listing["total"] == 3
    assert len(listing["users"]) == 2

    assert client.get("/v1/users", params={"limit": 101}).status_code == 422


def test_create_favorite(client):
    response = client.post("/v1/favorites/2", json={"hotel_id": "H7", "target_price": 88.5})

    assert response.status_code == 201
    favorite = response.json()["data"]["favorite"]
    assert favorite["hotel_id"] == "H7"
    assert favorite["target_price"] == 88.5
    hotel_ids = [f["hotel_id"] for f in client.get("/v1/favorites/2").json()["data"]["favorites"]]
    assert hotel_ids == ["H7", "H3"]


@pytest.mark.parametrize("payload", [{"hotel_id": "", "target_price": 10}, {"hotel_id": "H1", "target_price": 0}, {}])
def test_create_favorite_validation(client, payload):
    assert client.post("/v1/favorites/1", json=payload).status_code == 422


def test_create_favorite_unknown_user(client):
    response = client.post("/v1/favorites/42", json={"hotel_id": "H1", "target_price": 10})
    assert response.status_code == 404


def test_create_favorite_twice_is_409(client):
    response = client.post("/v1/favorites/1", json={"hotel_id": "H1", "target_price": 70})

    assert response.status_code == 409
    assert response.json()["detail"] == "hotel already in favorites"
    hotel_ids = [f["hotel_id"] for f in client.get("/v1/favorites/1").json()["data"]["favorites"]]
    assert hotel_ids.count("H1") == 1


def test_list_hotels_forwards_caller_key(client):
    with respx.mock(base_url=API_BASE, assert_all_called=True) as router:
        route = router.get("/data/hotels").mock(
            return_value=Response(200, text=load_fixture("liteapi/hotels_lisbon.json"))
        )

        response = client.get(
            "/v1/hotels",
            params={"countryCode": "PT", "cityName": "Lisbon", "limit": 10},
            headers={"X-API-KEY": "caller-key"},
        )

    assert response.status_code == 200
    request = route.calls.last.request
    assert request.headers["X-API-Key"] == "caller-key"
    assert request.url.params["countryCode"] == "PT"
    assert request.url.params["cityName"] == "Lisbon"
    assert request.url.params["offset"] == "0"
    assert request.url.params["limit"] == "10"

    data = response.json()["data"]
    assert data["total"] == 2
    assert (data["offset"], data["limit"]) == (0, 10)
    first, second = data["hotels"]
    assert first["hotel_id"] == "lp1897"
    assert first["name"] == "Harbourview Grand"
    assert first["country_code"] == "PT"
    assert first["stars"] == 4.0
    assert second["address"] is None
    assert second["stars"] is None


def test_list_hotels_upstream_failure_is_502(client):
    with respx.mock(base_url=API_BASE) as router:
        router.get("/data/hotels").mock(return_value=Response(500))

        response = client.get(
            "/v1/hotels",
            params={"countryCode": "PT", "cityName": "Lisbon"},
            headers={"X-API-KEY": "k"},
        )

    assert response.status_code == 502


@pytest.mark.parametrize(
    "params",
    [
        {"cityName": "Lisbon"},
        {"countryCode": "PT"},
        {"countryCode": "PT", "cityName": "Lisbon", "limit": 101},
        {"countryCode": "PT", "cityName": "Lisbon", "limit": 0},
        {"countryCode": "PT", "cityName": "Lisbon", "offset": -1},
    ],
)
def test_list_hotels_validation(client, params):
    assert client.get("/v1/hotels", params=params, headers={"X-API-KEY": "k"}).status_code == 422


def test_list_hotels_requires_api_key(client):
    response = client.get("/v1/hotels", params={"countryCode": "PT", "cityName": "Lisbon"})
    assert response.status_code == 401
