# Overview: Pytest coverage for tenant isolation behavior.

"""
Multi-Tenant Isolation Tests

Two tenants with their own users and data. Verifies that:
1. The repository refuses to run without a tenant id
2. Rows of another tenant read as "not found", never as an error
3. Cross-tenant reads, updates and deletes over HTTP answer 404 and change nothing
4. Aggregates only ever see the caller's tenant
5. Clients cannot choose a tenant through the payload
"""

import pytest

from mizan.extensions import db
from mizan.models import Product, Revenue
from mizan.services import products_service, revenues_service
from mizan.services.repository import TenantRepository
from mizan.services.tenant_service import TenantAccessError, require_tenant_id, scoped_query


def _revenue_patch(**overrides):
    patch = {
        "transaction_type": "sale",
        "product_service": "Coffee beans",
        "quantity": 2,
        "unit_price_cents": 1500,
        "currency": "USD",
        "payment_method": "cash",
    }
    patch.update(overrides)
    return patch


def _product_patch(**overrides):
    patch = {
        "name": "Sugar 1kg",
        "unit": "bag",
        "quantity": 10,
        "min_stock_level": 2,
        "purchase_price_cents": 800,
        "sale_price_cents": 1000,
    }
    patch.update(overrides)
    return patch


class TestTenantHelpers:
    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_tenant_id_raises(self, value):
        with pytest.raises(TenantAccessError):
            require_tenant_id(value)

    def test_repository_requires_tenant(self, db_session):
        with pytest.raises(TenantAccessError):
            TenantRepository(Product, None)

    def test_scoped_query_filters(self, db_session, tenant_a, tenant_b):
        products_service.create_product(patch=_product_patch(name="A item"), tenant_id=tenant_a.id)
        products_service.create_product(patch=_product_patch(name="B item"), tenant_id=tenant_b.id)

        names = [p.name for p in scoped_query(Product, tenant_a.id).all()]
        assert names == ["A item"]

    def test_add_ignores_foreign_tenant_id(self, db_session, tenant_a, tenant_b):
        repo = TenantRepository(Product, tenant_a.id)
        product = repo.add(tenant_id=tenant_b.id, **_product_patch())
        assert product.tenant_id == tenant_a.id


class TestRepositoryIsolation:
    def test_get_update_delete_across_tenants(self, db_session, ctx_a, ctx_b):
        created = revenues_service.create_revenue(patch=_revenue_patch(), ctx=ctx_a)

        assert revenues_service.get_revenue(revenue_id=created["id"], tenant_id=ctx_b.tenant_id) is None
        assert revenues_service.update_revenue(
            revenue_id=created["id"], patch={"quantity": 9}, tenant_id=ctx_b.tenant_id
        ) is None
        assert revenues_service.delete_revenue(revenue_id=created["id"], tenant_id=ctx_b.tenant_id) is False

        row = db.session.get(Revenue, created["id"])
        assert row.quantity == 2
        assert row.tenant_id == ctx_a.tenant_id

    def test_lists_only_own_rows(self, db_session, ctx_a, ctx_b):
        revenues_service.create_revenue(patch=_revenue_patch(), ctx=ctx_a)
        revenues_service.create_revenue(patch=_revenue_patch(), ctx=ctx_a)
        revenues_service.create_revenue(patch=_revenue_patch(), ctx=ctx_b)

        assert revenues_service.list_revenues(ctx_a.tenant_id)["count"] == 2
        assert revenues_service.list_revenues(ctx_b.tenant_id)["count"] == 1


class TestHttpIsolation:
    def test_cross_tenant_revenue_is_404(self, client, ctx_a, users_b, auth_headers):
        created = revenues_service.create_revenue(patch=_revenue_patch(), ctx=ctx_a)
        headers = auth_headers("owner_b")

        assert client.get(f"/api/revenues/{created['id']}", headers=headers).status_code == 404
        assert client.put(
            f"/api/revenues/{created['id']}", json={"quantity": 5}, headers=headers
        ).status_code == 404
        assert client.delete(f"/api/revenues/{created['id']}", headers=headers).status_code == 404

        own = client.get(f"/api/revenues/{created['id']}", headers=auth_headers("owner_a"))
        assert own.status_code == 200
        assert own.get_json()["quantity"] == 2

    def test_cross_tenant_product_is_404(self, client, tenant_a, users_a, users_b, auth_headers):
        created = products_service.create_product(patch=_product_patch(), tenant_id=tenant_a.id)
        headers = auth_headers("owner_b")

        assert client.get(f"/api/products/{created['id']}", headers=headers).status_code == 404
        assert client.delete(f"/api/products/{created['id']}", headers=headers).status_code == 404
        assert products_service.get_product(product_id=created["id"], tenant_id=tenant_a.id) is not None

    def test_cross_tenant_user_is_404(self, client, users_a, users_b, auth_headers):
        target = users_a["viewer"]["id"]
        headers = auth_headers("owner_b")

        assert client.get(f"/api/users/{target}", headers=headers).status_code == 404
        assert client.delete(f"/api/users/{target}", headers=headers).status_code == 404

    def test_tenant_id_in_payload_rejected(self, client, tenant_b, users_a, auth_headers):
        resp = client.post(
            "/api/products",
            json={"name": "Tea", "unit": "box", "purchase_price": "1.00", "sale_price": "2.00", "tenant_id": tenant_b.id},
            headers=auth_headers("owner_a"),
        )
        assert resp.status_code == 400
        assert resp.get_json()["errors"][0]["field"] == "tenant_id"

    def test_dashboard_sees_only_own_tenant(self, client, ctx_a, ctx_b, auth_headers):
        revenues_service.create_revenue(patch=_revenue_patch(unit_price_cents=10000), ctx=ctx_b)

        stats = client.get("/api/dashboard/stats", headers=auth_headers("owner_a")).get_json()
        assert stats["total_revenue"] == "0.00"
        assert stats["product_count"] == 0

    def test_current_tenant_is_session_tenant(self, client, tenant_a, users_a, auth_headers):
        body = client.get("/api/tenants/current", headers=auth_headers("owner_a")).get_json()
        assert body["id"] == tenant_a.id
        assert body["subscription_active"] is True
