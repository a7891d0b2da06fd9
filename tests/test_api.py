"""
가격 API 테스트

setup_pricing 으로 구성한 FastAPI 앱을 TestClient 로 호출합니다.
"""

import pytest
from unittest.mock import AsyncMock, patch
from fastapi import FastAPI
from fastapi.testclient import TestClient

from mp_pricing import setup_pricing, get_pricing
from mp_pricing.config import MPPricingConfig, EngineConfig
from mp_pricing.core.errors import ErrorCodes


AS_OF = "2026-05-01T12:00:00"


def make_app(catalog, api_key=None, **engine) -> FastAPI:
    app = FastAPI()
    config = MPPricingConfig(
        catalog_backend="file",
        api_key=api_key,
        engine=EngineConfig(retry_backoff=0, lookup_timeout=1.0, max_batch_size=5, **engine),
    )
    setup_pricing(app, config=config, catalog=catalog)
    return app


@pytest.fixture
def client(sample_catalog) -> TestClient:
    return TestClient(make_app(sample_catalog))


class TestSetup:
    """앱 구성"""

    def test_app_state(self, sample_catalog):
        app = make_app(sample_catalog, enabled_campaigns=["jul"])
        pricing = get_pricing(app)

        assert pricing is not None
        assert pricing.catalog is sample_catalog
        assert pricing.db is None
        assert pricing.service.max_batch_size == 5
        assert pricing.service.enabled_campaigns == frozenset({"jul"})
        assert app.state.pricing_service is pricing.service

    def test_health(self, client):
        response = client.get("/pricing/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "0.1.0"


class TestQuoteEndpoint:
    """POST /pricing/quote"""

    def test_quote(self, client):
        response = client.post("/pricing/quote", json={
            "product": "box-advertising",
            "quantity": 5,
            "duration_days": 90,
            "promo_code": "SOMMER",
            "as_of": AS_OF,
        })

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["base_amount"] == 10000
        assert [d["rule_id"] for d in data["discounts"]] == ["qty-5", "dur-90", "promo-sommer"]
        assert data["final_amount"] == 6500

    def test_campaigns_come_from_server_config(self, sample_catalog):
        """요청 본문의 campaigns 는 무시되고 서버 설정만 적용"""
        payload = {
            "product": "box-advertising",
            "quantity": 1,
            "duration_days": 30,
            "promo_code": "JUL",
            "as_of": AS_OF,
            "campaigns": ["jul"],
        }

        response = TestClient(make_app(sample_catalog)).post("/pricing/quote", json=payload)
        assert response.status_code == 200
        assert response.json()["discounts"] == []
        assert response.json()["final_amount"] == 10000

        enabled = TestClient(make_app(sample_catalog, enabled_campaigns=["jul"]))
        response = enabled.post("/pricing/quote", json=payload)
        assert response.json()["final_amount"] == 9000

        batch = TestClient(make_app(sample_catalog)).post("/pricing/quote/batch", json={
            "items": [{"product": "box-advertising", "quantity": 1, "duration_days": 30, "promo_code": "JUL"}],
            "as_of": AS_OF,
            "campaigns": ["jul"],
        })
        assert batch.json()["results"][0]["final_amount"] == 10000

    def test_rate_not_found(self, client):
        response = client.post("/pricing/quote", json={
            "product": "service",
            "quantity": 1,
            "duration_days": 30,
            "as_of": AS_OF,
        })

        assert response.status_code == 404
        detail = response.json()["detail"]
        assert detail["success"] is False
        assert detail["error"] == ErrorCodes.RATE_NOT_FOUND

    @pytest.mark.parametrize("payload", [
        {"product": "box-advertising", "quantity": 0, "duration_days": 30},
        {"product": "box-advertising", "quantity": 1, "duration_days": -1},
        {"product": "stable-cleaning", "quantity": 1, "duration_days": 30},
        {"product": "box-advertising", "quantity": 1, "duration_days": 30, "promo_code": ["SOMMER", "JUL"]},
    ])
    def test_invalid_request(self, client, payload):
        response = client.post("/pricing/quote", json=payload)

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == ErrorCodes.INVALID_REQUEST

    def test_upstream_unavailable(self, sample_catalog):
        client = TestClient(make_app(sample_catalog))

        with patch.object(
            sample_catalog,
            "fetch_active_rate",
            new_callable=AsyncMock,
            side_effect=ConnectionError("refused"),
        ):
            response = client.post("/pricing/quote", json={
                "product": "box-advertising",
                "quantity": 1,
                "duration_days": 30,
                "as_of": AS_OF,
            })

        assert response.status_code == 503
        assert response.json()["detail"]["error"] == ErrorCodes.UPSTREAM_UNAVAILABLE

    def test_internal_error(self, sample_catalog):
        app = make_app(sample_catalog)
        client = TestClient(app)

        with patch.object(
            get_pricing(app).service,
            "compute_price",
            new_callable=AsyncMock,
            side_effect=RuntimeError("unexpected"),
        ):
            response = client.post("/pricing/quote", json={
                "product": "box-advertising",
                "quantity": 1,
                "duration_days": 30,
            })

        assert response.status_code == 500
        assert response.json()["detail"]["error"] == ErrorCodes.INTERNAL_ERROR


class TestPreviewEndpoint:
    """GET /pricing/preview"""

    def test_preview(self, client):
        response = client.get("/pricing/preview", params={
            "product": "box-advertising",
            "quantity": 5,
            "days": 30,
        })

        assert response.status_code == 200
        assert response.json()["final_amount"] == 9000

    def test_preview_with_code(self, client):
        response = client.get("/pricing/preview", params={
            "product": "sponsored-placement",
            "quantity": 1,
            "days": 7,
            "code": "SOMMER",
        })

        assert response.status_code == 200
        data = response.json()
        assert data["base_amount"] == 3500
        assert data["final_amount"] == 1500


class TestBatchEndpoint:
    """POST /pricing/quote/batch"""

    def test_batch(self, client):
        response = client.post("/pricing/quote/batch", json={
            "as_of": AS_OF,
            "items": [
                {"product": "box-advertising", "quantity": 5, "duration_days": 30},
                {"product": "service", "quantity": 1, "duration_days": 30},
                {"product": "box-advertising", "quantity": 1, "duration_days": 90, "promo_code": "SOMMER"},
            ],
        })

        assert response.status_code == 200
        results = response.json()["results"]
        assert len(results) == 3
        assert results[0]["final_amount"] == 9000
        assert results[1]["success"] is False
        assert results[1]["error"] == ErrorCodes.RATE_NOT_FOUND
        assert results[1]["index"] == 1
        assert results[2]["final_amount"] == 7500

    def test_batch_too_large(self, client):
        items = [{"product": "box-advertising", "quantity": 1, "duration_days": 1}] * 6
        response = client.post("/pricing/quote/batch", json={"items": items})

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == ErrorCodes.INVALID_REQUEST


class TestPromoCodeEndpoint:
    """POST /pricing/promo-codes/check"""

    def test_valid(self, client):
        response = client.post("/pricing/promo-codes/check", json={
            "code": "SOMMER",
            "product": "box-advertising",
            "as_of": AS_OF,
        })

        assert response.status_code == 200
        assert response.json() == {
            "code": "SOMMER",
            "valid": True,
            "reason": None,
            "rule_id": "promo-sommer",
        }

    def test_expired(self, client):
        response = client.post("/pricing/promo-codes/check", json={
            "code": "VINTER",
            "product": "box-advertising",
            "as_of": AS_OF,
        })

        assert response.status_code == 200
        assert response.json()["reason"] == "expired"


class TestApiKey:
    """API 키 검증"""

    def test_missing_key(self, sample_catalog):
        client = TestClient(make_app(sample_catalog, api_key="secret"))

        response = client.get("/pricing/preview", params={"product": "box-advertising"})
        assert response.status_code == 401
        detail = response.json()["detail"]
        assert detail["success"] is False
        assert detail["error"] == ErrorCodes.UNAUTHORIZED
        assert "X-Pricing-API-Key" in detail["message"]

    def test_wrong_key(self, sample_catalog):
        client = TestClient(make_app(sample_catalog, api_key="secret"))

        response = client.get(
            "/pricing/preview",
            params={"product": "box-advertising"},
            headers={"X-Pricing-API-Key": "wrong"},
        )
        assert response.status_code == 401
        assert response.json()["detail"] == {
            "success": False,
            "error": ErrorCodes.UNAUTHORIZED,
            "message": "Invalid API key",
        }

    def test_valid_key(self, sample_catalog):
        client = TestClient(make_app(sample_catalog, api_key="secret"))

        response = client.get(
            "/pricing/preview",
            params={"product": "box-advertising"},
            headers={"X-Pricing-API-Key": "secret"},
        )
        assert response.status_code == 200

    def test_health_needs_no_key(self, sample_catalog):
        client = TestClient(make_app(sample_catalog, api_key="secret"))

        assert client.get("/pricing/health").status_code == 200
