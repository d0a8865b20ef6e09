import json


async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "marine-ops-api"}


async def test_vessel_crud(client, admin_headers):
    created = await client.post("/api/v1/marine/vessels", headers=admin_headers, json={
        "name": "Sea Falcon", "vessel_type": "tug", "purchase_price": 150000,
    })
    assert created.status_code == 201
    vessel = created.json()
    assert vessel["status"] == "active"

    updated = await client.put(f"/api/v1/marine/vessels/{vessel['id']}", headers=admin_headers,
                               json={"status": "under_overhaul"})
    assert updated.status_code == 200
    assert updated.json()["status"] == "under_overhaul"
    assert updated.json()["name"] == "Sea Falcon"

    listing = await client.get("/api/v1/marine/vessels", headers=admin_headers,
                               params={"status": "under_overhaul"})
    assert [v["id"] for v in listing.json()] == [vessel["id"]]

    deleted = await client.delete(f"/api/v1/marine/vessels/{vessel['id']}", headers=admin_headers)
    assert deleted.status_code == 204

    missing = await client.get(f"/api/v1/marine/vessels/{vessel['id']}", headers=admin_headers)
    assert missing.status_code == 404
    assert missing.json() == {"detail": f"Vessel {vessel['id']} not found"}


async def test_request_body_validation(client, admin_headers):
    response = await client.post("/api/v1/marine/vessels", headers=admin_headers,
                                 json={"name": "", "purchase_price": -1})

    assert response.status_code == 422


async def test_view_only_role_cannot_write(client, storekeeper_headers):
    response = await client.post("/api/v1/marine/vessels", headers=storekeeper_headers,
                                 json={"name": "Sea Falcon"})

    assert response.status_code == 403
    assert response.json()["detail"] == "Not allowed to create marine.vessels"


async def test_duplicate_company_is_a_conflict(client, admin_headers):
    body = {"name": "Gulf Marine", "type": "marine"}

    first = await client.post("/api/v1/companies", headers=admin_headers, json=body)
    second = await client.post("/api/v1/companies", headers=admin_headers, json=body)

    assert first.status_code == 201
    assert second.status_code == 409
    assert "already exists" in second.json()["detail"]


async def test_dashboard_hides_totals_from_storekeepers(client, admin_headers,
                                                        storekeeper_headers, accountant_headers):
    await client.post("/api/v1/marine/vessels", headers=admin_headers,
                      json={"name": "Sea Falcon", "purchase_price": 150000})

    hidden = (await client.get("/api/v1/dashboard", headers=storekeeper_headers)).json()
    shown = (await client.get("/api/v1/dashboard", headers=accountant_headers)).json()

    assert hidden["financials"]["net_profit"] is None
    assert hidden["counts"]["vessels"] == 1
    assert shown["financials"]["vessel_purchases"] == 150000.0


async def test_sync_endpoints_need_sync_permission(client, admin_headers, accountant_headers):
    denied = await client.post("/api/v1/admin/sync/tonnage", headers=accountant_headers)
    assert denied.status_code == 403

    expenses = await client.post("/api/v1/admin/sync/expenses", headers=admin_headers)
    tonnage = await client.post("/api/v1/admin/sync/tonnage", headers=admin_headers)

    assert expenses.json() == {"expenses_created": 0, "total_amount": 0.0, "projects_updated": 0}
    assert tonnage.json()["lands_updated"] == 0


async def test_invoice_payment_over_http(client, admin_headers, accountant_headers):
    created = await client.post("/api/v1/finance/invoices", headers=accountant_headers, json={
        "client_name": "Port Authority",
        "date": "2024-05-01",
        "apply_tax": True,
        "items": [{"description": "Towing", "quantity": 2, "unit_price": 1500}],
    })
    assert created.status_code == 201
    invoice = created.json()
    assert invoice["invoice_number"] == "INV-2024-001"
    assert invoice["total"] == 3150.0

    paid = await client.post(f"/api/v1/finance/invoices/{invoice['id']}/pay",
                             headers=accountant_headers,
                             json={"payment_date": "2024-05-15", "payment_method": "transfer"})
    assert paid.status_code == 200
    assert paid.json()["status"] == "paid"

    again = await client.post(f"/api/v1/finance/invoices/{invoice['id']}/pay",
                              headers=accountant_headers, json={})
    assert again.status_code == 409

    denied = await client.delete(f"/api/v1/finance/invoices/{invoice['id']}",
                                 headers=accountant_headers)
    assert denied.status_code == 403

    report = await client.get("/api/v1/finance/reports/monthly", headers=admin_headers,
                              params={"year": 2024})
    assert report.json()["totals"]["income"] == 3150.0


async def test_expense_import_upload(client, accountant_headers):
    content = b"Date,Description,Amount\n2024-02-01,Bunker fuel,900\n2024-02-02,Rope,0\n"

    response = await client.post(
        "/api/v1/finance/import",
        headers=accountant_headers,
        data={"mapping": json.dumps({"Description": "category"}), "default_status": "pending"},
        files={"file": ("ledger.csv", content, "text/csv")},
    )

    assert response.status_code == 200
    assert response.json() == {"success": 1, "failed": 0, "skipped": 1, "errors": []}

    expenses = (await client.get("/api/v1/finance/expenses", headers=accountant_headers)).json()
    [expense] = expenses["expenses"]
    assert expense["category"] == "Bunker fuel"
    assert expense["status"] == "pending"


async def test_import_rejects_bad_mapping(client, accountant_headers):
    response = await client.post(
        "/api/v1/finance/import",
        headers=accountant_headers,
        data={"mapping": "not json"},
        files={"file": ("ledger.csv", b"Date,Amount\n2024-02-01,10\n", "text/csv")},
    )

    assert response.status_code == 422
    assert response.json()["detail"] == "mapping must be a JSON object"


async def test_cross_origin_writes_are_blocked(client, admin_headers):
    response = await client.post("/api/v1/marine/vessels",
                                 headers={**admin_headers, "Origin": "https://evil.example"},
                                 json={"name": "Sea Falcon"})

    assert response.status_code == 403
    assert response.json()["detail"] == "CSRF validation failed"


async def test_quotation_to_paid_invoice_over_http(client, accountant_headers):
    account = await client.post("/api/v1/finance/bank-accounts", headers=accountant_headers,
                                json={"account_name": "ENBD Operating", "opening_balance": 5000})
    assert account.status_code == 201
    account_id = account.json()["id"]

    quotation = await client.post("/api/v1/finance/quotations", headers=accountant_headers, json={
        "client_name": "Port Authority",
        "date": "2024-05-01",
        "status": "sent",
        "items": [{"item_type": "service", "description": "Towing", "quantity": 2, "unit_price": 1500}],
    })
    assert quotation.status_code == 201
    quotation_id = quotation.json()["id"]
    assert quotation.json()["quotation_number"] == "QUO-2024-001"

    approved = await client.post(f"/api/v1/finance/quotations/{quotation_id}/approve",
                                 headers=accountant_headers)
    assert approved.json()["status"] == "approved"

    converted = await client.post(f"/api/v1/finance/quotations/{quotation_id}/convert",
                                  headers=accountant_headers, json={"invoice_date": "2024-05-03"})
    assert converted.status_code == 201
    invoice = converted.json()
    assert invoice["status"] == "draft"
    assert invoice["total"] == 3000.0

    paid = await client.post(f"/api/v1/finance/invoices/{invoice['id']}/pay", headers=accountant_headers,
                             json={"payment_date": "2024-05-15", "bank_account_id": account_id})
    assert paid.json()["payment_bank_account_id"] == account_id

    balance = await client.get(f"/api/v1/finance/bank-accounts/{account_id}", headers=accountant_headers)
    assert balance.json()["calculated_balance"] == 8000.0
    assert balance.json()["reconciliation"] == "pending"


async def test_bank_accounts_hidden_from_storekeepers(client, storekeeper_headers):
    response = await client.get("/api/v1/finance/bank-accounts/balances", headers=storekeeper_headers)

    assert response.status_code == 403
