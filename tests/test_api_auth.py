from datetime import timedelta

from marine_ops.api.deps import jwt_handler


async def test_login_returns_token_and_user(client, users):
    response = await client.post("/api/v1/auth/login",
                                 json={"email": "Accountant@MarineOps.ae",
                                       "password": users["accountant"].password})

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["role"] == "accountant"
    assert body["user"]["last_login"] is not None
    assert jwt_handler.verify_token(body["access_token"])["sub"] == str(users["accountant"].id)


async def test_login_rejects_bad_credentials(client, users):
    wrong_password = await client.post("/api/v1/auth/login",
                                       json={"email": "admin@marineops.ae", "password": "nope-nope"})
    unknown = await client.post("/api/v1/auth/login",
                                json={"email": "ghost@marineops.ae", "password": users["admin"].password})

    for response in (wrong_password, unknown):
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"


async def test_profile_lists_resolved_permissions(client, users, storekeeper_headers):
    response = await client.get("/api/v1/auth/profile", headers=storekeeper_headers)

    assert response.status_code == 200
    permissions = response.json()["permissions"]
    assert permissions["scrap.equipment"] == {
        "view": True, "create": True, "edit": True, "delete": False, "hide_totals": True,
    }
    assert permissions["finance.expenses"]["view"] is False


async def test_requests_without_valid_token_are_rejected(client, users):
    missing = await client.get("/api/v1/auth/profile")
    garbage = await client.get("/api/v1/auth/profile", headers={"Authorization": "Bearer not-a-jwt"})
    expired_token = jwt_handler.create_access_token(
        {"sub": users["admin"].id}, expires_delta=timedelta(minutes=-5)
    )
    expired = await client.get("/api/v1/auth/profile",
                               headers={"Authorization": f"Bearer {expired_token}"})

    assert missing.status_code in (401, 403)
    assert garbage.status_code == 401
    assert expired.status_code == 401


async def test_user_management_is_admin_only(client, users, admin_headers, accountant_headers):
    denied = await client.get("/api/v1/auth/users", headers=accountant_headers)
    assert denied.status_code == 403

    listing = await client.get("/api/v1/auth/users", headers=admin_headers)
    assert listing.status_code == 200
    assert len(listing.json()) == 4

    created = await client.post("/api/v1/auth/users", headers=admin_headers, json={
        "email": "yard@marineops.ae", "full_name": "Yard Clerk", "password": "long-enough-pw",
    })
    assert created.status_code == 201
    assert created.json()["role"] == "storekeeper"

    duplicate = await client.post("/api/v1/auth/users", headers=admin_headers, json={
        "email": "YARD@marineops.ae", "full_name": "Again", "password": "long-enough-pw",
    })
    assert duplicate.status_code == 409


async def test_disabled_account_cannot_log_in_or_use_token(client, users, admin_headers,
                                                          auth_headers):
    hr = users["hr"]
    response = await client.put(f"/api/v1/auth/users/{hr.id}", headers=admin_headers,
                                json={"is_active": False})
    assert response.status_code == 200
    assert response.json()["is_active"] is False

    login = await client.post("/api/v1/auth/login", json={"email": hr.email, "password": hr.password})
    assert login.status_code == 403

    profile = await client.get("/api/v1/auth/profile", headers=auth_headers(hr))
    assert profile.status_code == 403
