import asyncio
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from feeapi.core.coins import get_coin, UnknownCoin
from feeapi.main import app
from feeapi.routes.fees import get_fee_service
from feeapi.services.cryptoapi import CryptoAPIError
from feeapi.services.fee_store import FeeStoreError, InMemoryFeeEstimateStore
from feeapi.services.fees import FeeEstimateService

client = TestClient(app)


class FakeProvider:
    def __init__(self):
        self.calls: list[str] = []

    async def fetch_fee(self, code: str):
        self.calls.append(code)
        try:
            get_coin(code)
        except UnknownCoin as exc:
            raise CryptoAPIError(str(exc)) from exc
        return {"unit": code, "fast": "0.00021", "standard": "0.00012", "slow": "0.00005"}


class BrokenStore(InMemoryFeeEstimateStore):
    async def find_one(self, code: str):
        raise FeeStoreError("connection refused")


@pytest.fixture
def store():
    return InMemoryFeeEstimateStore()


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture(autouse=True)
def service(store, provider):
    svc = FeeEstimateService(store, provider, ttl=timedelta(minutes=5))
    app.dependency_overrides[get_fee_service] = lambda: svc
    yield svc
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    r = client.get('/auth/token/fee')
    token = r.json()['access_token']
    return {'Authorization': f'Bearer {token}'}


def test_fee_estimate_ok(auth_headers):
    r = client.get('/fee-estimate/BTC', headers=auth_headers)
    assert r.status_code == 200
    assert r.headers['content-type'].startswith('application/json')
    body = r.json()
    assert body['code'] == 'BTC'
    assert body['fee_data']['standard'] == '0.00012'
    assert 'timestamp' in body


@pytest.mark.parametrize('code', ['BTC1', 'btc', 'BT', 'BTCBTCB'])
def test_invalid_coin_code(auth_headers, store, provider, code):
    r = client.get(f'/fee-estimate/{code}', headers=auth_headers)
    assert r.status_code == 422
    assert r.json()['detail']['error']['code'] == 'invalid_coin_code'
    assert provider.calls == []
    assert store.records == {}


def test_denies_access_without_token():
    r = client.get('/fee-estimate/BTC')
    assert r.status_code == 401
    assert r.headers['content-type'].startswith('application/json')
    assert r.json()['message'] == 'Unauthorized. No auth token'


def test_missing_token_checked_before_coin_code():
    r = client.get('/fee-estimate/BTC1')
    assert r.status_code == 401
    assert r.json()['message'] == 'Unauthorized. No auth token'


def test_denies_access_with_bad_token(provider):
    r = client.get('/fee-estimate/BTC', headers={'Authorization': 'Bearer not-a-jwt'})
    assert r.status_code == 401
    assert r.json()['message'] == 'Unauthorized. No auth token'
    assert provider.calls == []


def test_fetches_and_caches_in_store(auth_headers, service):
    r = client.get('/fee-estimate/BTC', headers=auth_headers)
    assert r.status_code == 200
    assert r.json()['code'] == 'BTC'

    records = asyncio.run(service.find_all())
    assert len(records) == 1

    btc = asyncio.run(service.find_one('BTC'))
    assert btc.code == 'BTC'


def test_uses_cached_data_on_subsequent_requests(auth_headers, provider):
    first = client.get('/fee-estimate/LTC', headers=auth_headers)
    assert first.status_code == 200
    assert first.json()['code'] == 'LTC'
    timestamp = first.json()['timestamp']

    second = client.get('/fee-estimate/LTC', headers=auth_headers)
    assert second.status_code == 200
    assert second.json()['timestamp'] == timestamp
    assert provider.calls == ['LTC']


def test_valid_but_unknown_coin_is_500(auth_headers, store):
    r = client.get('/fee-estimate/BTCBTC', headers=auth_headers)
    assert r.status_code == 500
    assert r.json()['detail']['error']['code'] == 'upstream_error'
    assert store.records == {}


def test_store_failure_is_500_with_own_code(auth_headers, provider):
    svc = FeeEstimateService(BrokenStore(), provider, ttl=timedelta(minutes=5))
    app.dependency_overrides[get_fee_service] = lambda: svc

    r = client.get('/fee-estimate/BTC', headers=auth_headers)
    assert r.status_code == 500
    assert r.json()['detail']['error']['code'] == 'store_error'
    assert provider.calls == []


def test_unexpected_provider_failure_is_json_500(auth_headers, store):
    class ExplodingProvider:
        async def fetch_fee(self, code):
            raise RuntimeError("provider client bug")

    svc = FeeEstimateService(store, ExplodingProvider(), ttl=timedelta(minutes=5))
    app.dependency_overrides[get_fee_service] = lambda: svc

    r = client.get('/fee-estimate/BTC', headers=auth_headers)
    assert r.status_code == 500
    assert r.headers['content-type'].startswith('application/json')
    assert r.json()['detail']['error']['code'] == 'internal_error'
    assert store.records == {}
