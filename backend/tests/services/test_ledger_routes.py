"""Ledger Routes — HTTP surface over the ledger service.

Tests cover:
    - Caller and height taken from X-Caller / X-Height headers
    - Successful mint returns the fee transfer
    - Rejections map to 400 (403 for NOT_AUTHORIZED) with numeric ledger_code
    - Shape-only request validation: out-of-range values reach the engine
    - Read endpoints, 404 for missing credit records, journal listing
"""

from tests.core.ledger_fixtures import ADMIN, USER, USER2, OWNER, SPENDER, VERIFIER

MINT_BODY = {
    "amount": 1000,
    "recipient": USER,
    "offset_amount": 1000,
    "location": "ForestA",
    "project_type": "forest",
    "verifier": VERIFIER,
}


def _headers(caller=ADMIN, height=0) -> dict:
    return {"X-Caller": caller, "X-Height": str(height)}


async def _mint(client, recipient=USER, amount=1000, height=0):
    body = {**MINT_BODY, "recipient": recipient, "amount": amount}
    return await client.post("/api/v1/ledger/mint", json=body, headers=_headers(height=height))


# ─── operations ──────────────────────────────────────────────────

async def test_mint_returns_fee_transfer(client):
    res = await _mint(client, height=12)
    assert res.status_code == 200
    data = res.json()
    assert data["ok"] is True
    assert data["fee_transfer"] == {"amount": 1000, "sender": ADMIN, "recipient": ADMIN}

    credit = (await client.get("/api/v1/ledger/credits/1000")).json()
    assert credit["height"] == 12
    assert credit["project_type"] == "forest"
    assert credit["status"] is True


async def test_mint_by_non_admin_is_403(client):
    res = await client.post("/api/v1/ledger/mint", json=MINT_BODY, headers=_headers(USER))
    assert res.status_code == 403
    error = res.json()["error"]
    assert error["code"] == "NOT_AUTHORIZED"
    assert error["ledger_code"] == 100
    assert error["context"]["caller"] == USER


async def test_transfer_insufficient_balance(client):
    await _mint(client)
    res = await client.post(
        "/api/v1/ledger/transfer",
        json={"amount": 1500, "sender": USER, "recipient": USER2},
        headers=_headers(USER),
    )
    assert res.status_code == 400
    assert res.json()["error"]["ledger_code"] == 104


async def test_zero_amount_reaches_engine(client):
    res = await client.post(
        "/api/v1/ledger/approve",
        json={"spender": SPENDER, "amount": 0},
        headers=_headers(OWNER),
    )
    assert res.status_code == 400
    assert res.json()["error"]["ledger_code"] == 101


async def test_approve_then_transfer_from(client):
    await _mint(client, recipient=OWNER)
    await client.post(
        "/api/v1/ledger/approve",
        json={"spender": SPENDER, "amount": 600},
        headers=_headers(OWNER),
    )
    res = await client.post(
        "/api/v1/ledger/transfer-from",
        json={"owner": OWNER, "recipient": USER2, "amount": 500},
        headers=_headers(SPENDER),
    )
    assert res.status_code == 200
    allowance = (await client.get(f"/api/v1/ledger/allowances/{OWNER}/{SPENDER}")).json()
    assert allowance["allowance"] == 100
    balance = (await client.get(f"/api/v1/ledger/balances/{USER2}")).json()
    assert balance["balance"] == 500


async def test_burn_writes_retirement(client):
    await _mint(client)
    res = await client.post(
        "/api/v1/ledger/burn",
        json={"amount": 500, "reason": "Offset emissions"},
        headers=_headers(USER, 3),
    )
    assert res.status_code == 200
    assert res.json()["fee_transfer"] is None
    retirement = (await client.get("/api/v1/ledger/retirements/500")).json()
    assert retirement["retiree"] == USER
    assert retirement["reason"] == "Offset emissions"


async def test_height_regression_is_409(client):
    await client.post("/api/v1/ledger/admin/mint/pause", headers=_headers(height=10))
    res = await client.post("/api/v1/ledger/admin/mint/unpause", headers=_headers(height=9))
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "HEIGHT_REGRESSION"


async def test_missing_caller_header_is_400(client):
    res = await client.post("/api/v1/ledger/admin/mint/pause")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_malformed_body_is_400(client):
    res = await client.post(
        "/api/v1/ledger/transfer", json={"amount": "lots"}, headers=_headers(USER),
    )
    assert res.status_code == 400


# ─── admin ───────────────────────────────────────────────────────

async def test_admin_issuer_lifecycle(client):
    res = await client.post(
        "/api/v1/ledger/admin/issuers/add", json={"principal": OWNER}, headers=_headers(),
    )
    assert res.status_code == 200
    assert (await client.get(f"/api/v1/ledger/issuers/{OWNER}")).json()["is_issuer"] is True

    res = await client.post(
        "/api/v1/ledger/admin/issuers/add", json={"principal": OWNER}, headers=_headers(),
    )
    assert res.json()["error"]["ledger_code"] == 111

    await client.post(
        "/api/v1/ledger/admin/issuers/remove", json={"principal": OWNER}, headers=_headers(),
    )
    params = (await client.get("/api/v1/ledger/params")).json()
    assert params["issuer_count"] == 0


async def test_admin_setters(client):
    await client.post("/api/v1/ledger/admin/issuance-fee", json={"fee": 2500}, headers=_headers())
    await client.post("/api/v1/ledger/admin/grace-period", json={"period": 288}, headers=_headers())
    await client.post(
        "/api/v1/ledger/admin/token-uri", json={"uri": "ipfs://credits"}, headers=_headers(),
    )
    await client.post("/api/v1/ledger/admin/burn/pause", headers=_headers())

    params = (await client.get("/api/v1/ledger/params")).json()
    assert params["issuance_fee"] == 2500
    assert params["grace_period"] == 288
    assert params["token_uri"] == "ipfs://credits"
    assert params["burn_paused"] is True
    assert (await client.get("/api/v1/ledger/token")).json()["token_uri"] == "ipfs://credits"


async def test_grace_period_above_limit(client):
    res = await client.post(
        "/api/v1/ledger/admin/grace-period", json={"period": 1441}, headers=_headers(),
    )
    assert res.status_code == 400
    assert res.json()["error"]["ledger_code"] == 123


# ─── reads ───────────────────────────────────────────────────────

async def test_token_info(client):
    data = (await client.get("/api/v1/ledger/token")).json()
    assert data["name"] == "Carbon Credit"
    assert data["symbol"] == "CCREDIT"
    assert data["decimals"] == 6
    assert data["total_supply"] == 0


async def test_missing_credit_is_404(client):
    res = await client.get("/api/v1/ledger/credits/42")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"
    assert (await client.get("/api/v1/ledger/retirements/42")).status_code == 404


async def test_invariants_endpoint(client):
    await _mint(client)
    data = (await client.get("/api/v1/ledger/invariants")).json()
    assert data == {"consistent": True, "violations": []}


async def test_operations_journal(client):
    await _mint(client, height=1)
    await client.post("/api/v1/ledger/admin/mint/pause", headers=_headers(USER, 2))
    data = (await client.get("/api/v1/ledger/operations")).json()
    ops = data["operations"]
    assert [op["operation"] for op in ops] == ["pause_mint", "mint"]
    assert ops[0]["ok"] is False
    assert ops[0]["error_code"] == 100
    assert ops[1]["arguments"]["amount"] == 1000
