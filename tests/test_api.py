"""
REST API: авторизация, права, коды ошибок и основной сценарий заказа.
"""

from decimal import Decimal


# ============================================================================
# AUTH
# ============================================================================

class TestAuth:

    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    async def test_first_user_is_super_admin_then_waiters(self, client, register_user):
        first, _ = await register_user("Boss", "+998911111111")
        second, _ = await register_user("Vali", "+998922222222")

        assert first["user"]["role"] == "SUPER_ADMIN"
        assert second["user"]["role"] == "WAITER"
        assert "password_hash" not in second["user"]

    async def test_duplicate_phone(self, client, register_user):
        await register_user("Boss", "+998911111111")

        response = await client.post(
            "/user/register",
            json={"name": "Other", "phone": "+998911111111", "password": "secret"},
        )

        assert response.status_code == 409
        assert response.json()["error"] == "conflict"

    async def test_login_and_me(self, client, register_user):
        await register_user("Boss", "+998911111111", password="qwerty")

        login = await client.post("/user/login", json={"phone": "+998911111111", "password": "qwerty"})
        assert login.status_code == 200

        me = await client.get(
            "/user/me", headers={"Authorization": f"Bearer {login.json()['access_token']}"}
        )
        assert me.status_code == 200
        assert me.json()["name"] == "Boss"

    async def test_wrong_password(self, client, register_user):
        await register_user("Boss", "+998911111111")

        response = await client.post("/user/login", json={"phone": "+998911111111", "password": "nope"})

        assert response.status_code == 401
        assert response.json() == {"detail": "Invalid phone or password", "error": "unauthenticated"}

    async def test_refresh_token(self, client, register_user):
        tokens, _ = await register_user("Boss", "+998911111111")

        response = await client.post("/user/refresh-token", json={"refresh_token": tokens["refresh_token"]})
        assert response.status_code == 200
        assert response.json()["user"]["id"] == tokens["user"]["id"]

        # access-токен в роли refresh не принимается
        response = await client.post("/user/refresh-token", json={"refresh_token": tokens["access_token"]})
        assert response.status_code == 401

    async def test_missing_token(self, client):
        response = await client.get("/order")

        assert response.status_code == 401
        assert response.json()["error"] == "unauthenticated"

    async def test_set_role(self, client, admin_headers, register_user):
        waiter, waiter_headers = await register_user("Vali", "+998922222222")
        user_id = waiter["user"]["id"]

        denied = await client.patch(f"/user/{user_id}/role", json={"role": "ADMIN"}, headers=waiter_headers)
        assert denied.status_code == 403
        assert denied.json()["error"] == "forbidden"

        allowed = await client.patch(f"/user/{user_id}/role", json={"role": "CASHER"}, headers=admin_headers)
        assert allowed.status_code == 200
        assert allowed.json()["role"] == "CASHER"

        # новая роль действует сразу, старым токеном
        response = await client.post(
            "/order",
            json={"table": "1", "restaurant_id": 1, "order_items": [{"product_id": 1, "quantity": 1}]},
            headers=waiter_headers,
        )
        assert response.status_code == 403


# ============================================================================
# СПРАВОЧНИКИ
# ============================================================================

class TestCatalog:

    async def test_waiter_cannot_create_region(self, client, waiter_headers):
        response = await client.post("/region", json={"name": "Buxoro"}, headers=waiter_headers)

        assert response.status_code == 403

    async def test_duplicate_region(self, client, admin_headers):
        await client.post("/region", json={"name": "Buxoro"}, headers=admin_headers)
        response = await client.post("/region", json={"name": "Buxoro"}, headers=admin_headers)

        assert response.status_code == 409
        assert response.json()["error"] == "conflict"

    async def test_restaurant_phone_format(self, client, admin_headers):
        response = await client.post(
            "/restaurant",
            json={"name": "X", "phone": "12345", "tip": 5},
            headers=admin_headers,
        )

        assert response.status_code == 422

    async def test_restaurant_unknown_region(self, client, admin_headers):
        response = await client.post(
            "/restaurant",
            json={"name": "X", "phone": "+998901234567", "region_id": 999},
            headers=admin_headers,
        )

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    async def test_list_is_paginated(self, client, admin_headers):
        for name in ("A", "B", "C"):
            await client.post("/region", json={"name": name}, headers=admin_headers)

        response = await client.get("/region", params={"page": 2, "limit": 2}, headers=admin_headers)
        body = response.json()

        assert response.status_code == 200
        assert body["meta"] == {"total": 3, "page": 2, "limit": 2, "last_page": 2}
        assert len(body["data"]) == 1

    async def test_brand_name_conflict(self, client, admin_headers):
        await client.post("/brand", json={"name": "Evos"}, headers=admin_headers)
        response = await client.post("/brand", json={"name": "Evos"}, headers=admin_headers)

        assert response.status_code == 409
        assert response.json()["detail"] == "Bu nom bilan brand mavjud"

    async def test_restaurant_in_use_cannot_be_deleted(self, client, admin_headers, menu):
        response = await client.delete(f"/restaurant/{menu.restaurant_id}", headers=admin_headers)

        assert response.status_code == 409


# ============================================================================
# ЗАКАЗ -> ДОЛГ -> ОПЛАТА
# ============================================================================

class TestOrderFlow:

    async def create_order(self, client, headers, menu, items=None):
        return await client.post(
            "/order",
            json={
                "table": "5",
                "restaurant_id": menu.restaurant_id,
                "order_items": items or [
                    {"product_id": menu.osh_id, "quantity": 2},
                    {"product_id": menu.choy_id, "quantity": 1},
                ],
            },
            headers=headers,
        )

    async def test_waiter_creates_order(self, client, waiter_headers, menu):
        response = await self.create_order(client, waiter_headers, menu)
        order = response.json()

        assert response.status_code == 201
        assert Decimal(order["total"]) == Decimal("25000")
        assert order["status"] == "PENDING"
        assert order["waiter"]["name"] == "Vali"
        assert len(order["order_items"]) == 2

        me = (await client.get("/user/me", headers=waiter_headers)).json()
        assert Decimal(me["balance"]) == Decimal("2500")

        ledger = (await client.get("/withdraw", params={"order_id": order["id"]}, headers=waiter_headers)).json()
        assert ledger["meta"]["total"] == 4

    async def test_unknown_product(self, client, waiter_headers, menu):
        response = await self.create_order(
            client, waiter_headers, menu, items=[{"product_id": 999, "quantity": 1}]
        )

        assert response.status_code == 404
        assert response.json() == {"detail": "Product with 999 id not found", "error": "not_found"}

    async def test_empty_order_is_rejected(self, client, waiter_headers, menu):
        response = await self.create_order(client, waiter_headers, menu, items=[])

        assert response.status_code == 422

    async def test_non_positive_quantity_is_rejected(self, client, waiter_headers, menu):
        response = await self.create_order(
            client, waiter_headers, menu, items=[{"product_id": menu.osh_id, "quantity": 0}]
        )

        assert response.status_code == 422

    async def test_casher_cannot_create_order(self, client, admin_headers, register_user, menu):
        casher, casher_headers = await register_user("Kassir", "+998933333333")
        await client.patch(
            f"/user/{casher['user']['id']}/role", json={"role": "CASHER"}, headers=admin_headers
        )

        response = await self.create_order(client, casher_headers, menu)

        assert response.status_code == 403

    async def test_debt_then_payment(self, client, admin_headers, waiter_headers, menu):
        order = (await self.create_order(client, waiter_headers, menu)).json()

        too_much = await client.post(
            "/debt",
            json={"username": "Sardor", "amount": "30000", "restaurant_id": menu.restaurant_id, "order_id": order["id"]},
            headers=waiter_headers,
        )
        assert too_much.status_code == 400
        assert too_much.json()["error"] == "validation"

        debt = await client.post(
            "/debt",
            json={"username": "Sardor", "amount": "20000", "restaurant_id": menu.restaurant_id, "order_id": order["id"]},
            headers=waiter_headers,
        )
        assert debt.status_code == 201
        assert debt.json()["order"]["status"] == "DEBT"

        payment = await client.post(
            "/withdraw",
            json={"type": "INCOME", "amount": "22500", "restaurant_id": menu.restaurant_id, "order_id": order["id"]},
            headers=admin_headers,
        )
        assert payment.status_code == 201

        paid = (await client.get(f"/order/{order['id']}", headers=admin_headers)).json()
        restaurant = (await client.get(f"/restaurant/{menu.restaurant_id}", headers=admin_headers)).json()

        assert paid["status"] == "PAID"
        assert Decimal(restaurant["balance"]) == Decimal("22500")

    async def test_update_and_delete_order(self, client, waiter_headers, menu):
        order = (await self.create_order(client, waiter_headers, menu)).json()

        updated = await client.patch(f"/order/{order['id']}", json={"table": "9"}, headers=waiter_headers)
        assert updated.status_code == 200
        assert updated.json()["table"] == "9"
        assert Decimal(updated.json()["total"]) == Decimal("25000")

        deleted = await client.delete(f"/order/{order['id']}", headers=waiter_headers)
        assert deleted.status_code == 200

        missing = await client.get(f"/order/{order['id']}", headers=waiter_headers)
        assert missing.status_code == 404

    async def test_dashboard(self, client, admin_headers, waiter_headers, menu):
        await self.create_order(client, waiter_headers, menu)

        stats = (await client.get("/dashboard/stats", headers=admin_headers)).json()

        assert stats["total_users"] == 2
        assert stats["total_restaurants"] == 1
        assert stats["total_products"] == 2
        assert stats["total_orders"] == 1
        assert stats["pending_orders"] == 1
        assert Decimal(stats["total_revenue"]) == Decimal("25000")

    async def test_product_used_in_order_cannot_be_deleted(self, client, admin_headers, waiter_headers, menu):
        order = (await self.create_order(
            client, waiter_headers, menu, items=[{"product_id": menu.osh_id, "quantity": 2}]
        )).json()

        in_use = await client.delete(f"/product/{menu.osh_id}", headers=admin_headers)
        assert in_use.status_code == 409
        assert in_use.json()["error"] == "conflict"

        unused = await client.delete(f"/product/{menu.choy_id}", headers=admin_headers)
        assert unused.status_code == 200

        kept = (await client.get(f"/order/{order['id']}", headers=admin_headers)).json()
        assert kept["order_items"][0]["product"]["name"] == "Osh"

        # заказ по-прежнему можно закрыть
        payment = await client.post(
            "/withdraw",
            json={"type": "INCOME", "amount": "18000", "restaurant_id": menu.restaurant_id, "order_id": order["id"]},
            headers=admin_headers,
        )
        assert payment.status_code == 201


# ============================================================================
# PATCH И NULL
# ============================================================================

class TestPartialUpdate:

    async def test_null_on_required_order_field(self, client, waiter_headers, menu):
        order = (await client.post(
            "/order",
            json={
                "table": "1",
                "restaurant_id": menu.restaurant_id,
                "order_items": [{"product_id": menu.osh_id, "quantity": 1}],
            },
            headers=waiter_headers,
        )).json()

        response = await client.patch(f"/order/{order['id']}", json={"status": None}, headers=waiter_headers)

        assert response.status_code == 422
        unchanged = (await client.get(f"/order/{order['id']}", headers=waiter_headers)).json()
        assert unchanged["status"] == "PENDING"

    async def test_null_on_product_price(self, client, admin_headers, menu):
        response = await client.patch(f"/product/{menu.osh_id}", json={"price": None}, headers=admin_headers)

        assert response.status_code == 422
        product = (await client.get(f"/product/{menu.osh_id}", headers=admin_headers)).json()
        assert Decimal(product["price"]) == Decimal("10000")

    async def test_null_clears_nullable_field(self, client, admin_headers, menu):
        response = await client.patch(
            f"/restaurant/{menu.restaurant_id}", json={"region_id": None}, headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["region_id"] is None
