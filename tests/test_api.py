"""HTTP surface: expenses, wallets, dashboard, converter and export routes."""

from __future__ import annotations

import csv
import io
import logging
from datetime import date
from urllib.parse import unquote

import pytest


# Expenses -----------------------------------------------------------
def test_root(client) -> None:
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["message"] == "Expense Tracker API"
    assert "X-Request-ID" in resp.headers


def test_create_expense_defaults_currency_and_date(client) -> None:
    resp = client.post(
        "/expenses/",
        json={"amount": 20500, "category": "Travel", "wallet": "Cash (Riel)"},
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["currency"] == "KHR"
    assert body["date"] == date.today().isoformat()
    assert body["description"] == ""

    listed = client.get("/expenses/").json()
    assert listed[0]["id"] == body["id"]
    assert len(listed) == 6


def test_create_expense_unknown_wallet(client) -> None:
    resp = client.post(
        "/expenses/", json={"amount": 1, "category": "Travel", "wallet": "Piggy bank"}
    )
    assert resp.status_code == 400
    assert "Piggy bank" in resp.json()["detail"]


@pytest.mark.parametrize(
    "payload",
    [
        {"category": "Travel", "wallet": "Cash (Dollar)"},
        {"amount": 0, "category": "Travel", "wallet": "Cash (Dollar)"},
        {"amount": 5, "category": "  ", "wallet": "Cash (Dollar)"},
        {"amount": 5, "category": "Travel", "wallet": "Cash (Dollar)", "currency": "EUR"},
    ],
)
def test_create_expense_validation(client, payload) -> None:
    resp = client.post("/expenses/", json=payload)
    assert resp.status_code == 422
    assert resp.json()["error"] == "validation_error"
    assert len(client.get("/expenses/").json()) == 5


def test_list_expenses_filters(client) -> None:
    assert [e["id"] for e in client.get("/expenses/", params={"search": "shoes"}).json()] == ["3"]
    by_wallet = client.get("/expenses/", params={"wallet": "Cash (Riel)"}).json()
    assert [e["id"] for e in by_wallet] == ["2"]
    by_cat = client.get("/expenses/", params={"category": "Bills & Utilities"}).json()
    assert [e["id"] for e in by_cat] == ["5"]


def test_patch_and_delete_expense(client) -> None:
    resp = client.patch("/expenses/1", json={"amount": 50, "description": 'Lunch "deluxe"'})
    assert resp.status_code == 200
    assert resp.json()["amount"] == 50
    assert resp.json()["currency"] == "USD"

    assert client.patch("/expenses/1", json={}).status_code == 422
    assert client.patch("/expenses/missing", json={"amount": 1}).status_code == 404

    assert client.delete("/expenses/1").status_code == 204
    resp = client.get("/expenses/1")
    assert resp.status_code == 404
    assert resp.json()["error"] == "not_found"


# Wallets ------------------------------------------------------------
def test_wallet_stats(client) -> None:
    body = client.get("/wallets/2").json()
    assert body["name"] == "Cash (Dollar)"
    assert body["spent"] == pytest.approx(45.5)
    assert body["current_balance"] == pytest.approx(454.5)
    assert body["transaction_count"] == 1
    assert body["current_formatted"] == "$454.50"
    assert body["can_delete"] is False
    assert "associated transactions" in body["delete_blocked_reason"]


def test_delete_referenced_wallet_is_refused(client) -> None:
    resp = client.delete("/wallets/2")
    assert resp.status_code == 409
    assert resp.json()["error"] == "conflict"
    assert len(client.get("/wallets/").json()) == 5


def test_delete_unreferenced_wallet(client) -> None:
    created = client.post("/wallets/", json={"name": "Spare", "balance": 20, "currency": "USD"})
    assert created.status_code == 201
    wid = created.json()["id"]
    assert created.json()["can_delete"] is True
    assert len(client.get("/wallets/").json()) == 6

    assert client.delete(f"/wallets/{wid}").status_code == 204
    assert len(client.get("/wallets/").json()) == 5
    assert client.delete(f"/wallets/{wid}").status_code == 404


def test_duplicate_wallet_name(client) -> None:
    resp = client.post("/wallets/", json={"name": "Cash (Dollar)", "balance": 1})
    assert resp.status_code == 409


def test_rename_wallet_keeps_expenses_attached(client) -> None:
    resp = client.put(
        "/wallets/2", json={"name": "Pocket", "balance": 500, "currency": "USD"}
    )
    assert resp.status_code == 200
    assert resp.json()["transaction_count"] == 1
    assert client.get("/expenses/1").json()["wallet"] == "Pocket"


def test_balance_adjustment(client) -> None:
    resp = client.post(
        "/wallets/2/adjust", json={"amount": 100, "kind": "add", "reason": "Salary"}
    )
    assert resp.status_code == 201
    assert resp.json()["balance_after"] == 600
    assert client.get("/wallets/2").json()["current_balance"] == pytest.approx(554.5)
    history = client.get("/wallets/2/adjustments").json()
    assert [h["reason"] for h in history] == ["Salary"]

    assert client.post("/wallets/2/adjust", json={"amount": -5}).status_code == 422
    assert client.post("/wallets/nope/adjust", json={"amount": 5}).status_code == 404


# Dashboard ----------------------------------------------------------
def test_dashboard_summary(client) -> None:
    body = client.get("/dashboard/summary").json()
    assert body["count"] == 5
    assert body["total_in_base"] == pytest.approx(430.49)
    assert body["total_formatted"] == "$430.49"
    assert body["by_currency"]["KHR"] == pytest.approx(594500)
    assert body["by_category"][0]["category"] == "Bills & Utilities"
    assert sum(c["percent"] for c in body["by_category"]) == pytest.approx(100, abs=0.05)
    cards = {c["currency"]: c for c in body["currency_cards"]}
    assert cards["KHR"]["counterpart_formatted"] == "$145.00"


def test_dashboard_categories_and_portfolio(client) -> None:
    cats = client.get("/dashboard/categories").json()
    assert [c["category"] for c in cats][:2] == ["Bills & Utilities", "Transportation"]

    portfolio = client.get("/dashboard/portfolio").json()
    assert portfolio["total_in_base"] == pytest.approx(8869.51)
    assert portfolio["total_formatted"] == "$8,869.51"
    assert len(portfolio["wallets"]) == 5


def test_empty_dashboard(empty_client) -> None:
    body = empty_client.get("/dashboard/summary").json()
    assert body["count"] == 0
    assert body["by_category"] == []
    assert body["total_formatted"] == "$0.00"


# Currencies ---------------------------------------------------------
def test_reference_data(client) -> None:
    codes = [c["code"] for c in client.get("/currencies/").json()]
    assert sorted(codes) == ["KHR", "USD"]
    cats = client.get("/categories/").json()
    assert len(cats) == 8
    assert cats[0]["name"] == "Food & Dining"


def test_convert_endpoint(client) -> None:
    body = client.get(
        "/currencies/convert", params={"amount": 100, "from": "usd", "to": "KHR"}
    ).json()
    assert body["converted"] == pytest.approx(410000)
    assert body["rate"] == pytest.approx(4100)
    assert body["converted_formatted"] == "៛410,000"
    assert body["amount_formatted"] == "$100.00"


def test_convert_unknown_currency(client, lenient_client) -> None:
    params = {"amount": 10, "from": "EUR", "to": "USD"}
    resp = client.get("/currencies/convert", params=params)
    assert resp.status_code == 400
    assert "EUR" in resp.json()["detail"]

    lenient = lenient_client.get("/currencies/convert", params=params)
    assert lenient.status_code == 200
    assert lenient.json()["converted"] == 10
    assert lenient.json()["amount_formatted"] == "10"


def test_format_endpoint(client) -> None:
    body = client.get("/currencies/format", params={"amount": 1234.5, "currency": "USD"}).json()
    assert body["formatted"] == "$1,234.50"
    assert client.get("/currencies/format", params={"amount": "nan", "currency": "USD"}).status_code == 422


# Export -------------------------------------------------------------
def test_export_all(client) -> None:
    resp = client.get("/export/csv")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    expected = f"all_expenses_{date.today().isoformat()}.csv"
    assert expected in resp.headers["content-disposition"]
    assert resp.headers["x-record-count"] == "5"
    rows = list(csv.reader(io.StringIO(resp.text)))
    assert rows[0] == ["Date", "Category", "Description", "Wallet", "Amount", "Currency"]
    assert len(rows) == 6


def test_export_filtered(client) -> None:
    resp = client.get(
        "/export/csv/filtered", params={"category": "Shopping", "search": "shoes"}
    )
    assert resp.status_code == 200
    assert "expenses_shopping_filtered_" in resp.headers["content-disposition"]
    rows = list(csv.reader(io.StringIO(resp.text)))
    assert len(rows) == 2
    assert rows[1][2] == "New shoes"


def test_export_failure_is_logged_and_reported(client, monkeypatch) -> None:
    from expense_tracker.routers import export

    def boom(*args, **kwargs):
        raise OSError("disk gone")

    monkeypatch.setattr(export, "export_csv", boom)
    resp = client.get("/export/csv")
    assert resp.status_code == 500
    assert resp.json()["detail"] == "failed to export expenses"


def test_export_summary(client) -> None:
    body = client.get("/export/summary").json()
    assert body["count"] == 5
    assert body["earliest"] == "2024-01-11"
    assert body["latest"] == "2024-01-15"
    assert body["filtered"] is False

    filtered = client.get("/export/summary", params={"wallet": "Cash (Riel)"}).json()
    assert filtered["count"] == 1
    assert filtered["filtered"] is True
    assert filtered["total_in_base"] == pytest.approx(120)


def test_unknown_route(client) -> None:
    resp = client.get("/nowhere")
    assert resp.status_code == 404
    assert resp.json()["error"] == "not_found"


# Amount limits ------------------------------------------------------
def _raw_post(client, url: str, body: str):
    # httpx refuses to serialise Infinity, so send the JSON text directly
    return client.post(url, content=body.encode(), headers={"content-type": "application/json"})


def test_non_finite_expense_amount_is_rejected(client) -> None:
    resp = _raw_post(
        client,
        "/expenses/",
        '{"amount": Infinity, "category": "Travel", "wallet": "Cash (Dollar)"}',
    )
    assert resp.status_code == 422
    assert resp.json()["detail"][0]["input"] == "inf"

    patched = client.patch(
        "/expenses/1",
        content=b'{"amount": NaN}',
        headers={"content-type": "application/json"},
    )
    assert patched.status_code == 422
    assert len(client.get("/expenses/").json()) == 5


def test_huge_amounts_cannot_overflow_totals(client) -> None:
    for _ in range(2):
        resp = client.post(
            "/expenses/",
            json={"amount": 1e308, "category": "Travel", "wallet": "Cash (Dollar)"},
        )
        assert resp.status_code == 422

    assert client.post(
        "/wallets/", json={"name": "Vault", "balance": 1e308, "currency": "USD"}
    ).status_code == 422
    assert client.post("/wallets/2/adjust", json={"amount": 1e308}).status_code == 422
    assert _raw_post(client, "/wallets/2/adjust", '{"amount": Infinity}').status_code == 422

    assert client.get("/wallets/").status_code == 200
    assert client.get("/dashboard/summary").status_code == 200
    assert client.get("/dashboard/portfolio").status_code == 200


def test_largest_accepted_amount_keeps_dashboard_serving(client) -> None:
    for _ in range(3):
        resp = client.post(
            "/expenses/",
            json={"amount": 1e15, "category": "Travel", "wallet": "Cash (Dollar)"},
        )
        assert resp.status_code == 201

    wallet = client.get("/wallets/2").json()
    assert wallet["spent"] == pytest.approx(3e15 + 45.5)
    assert client.get("/dashboard/portfolio").status_code == 200


def test_convert_rejects_out_of_range_amount(client) -> None:
    resp = client.get("/currencies/convert", params={"amount": 1e308, "from": "USD", "to": "KHR"})
    assert resp.status_code == 422


# Export names outside ASCII ----------------------------------------
def _wallet_with_expense(client, name: str, currency: str = "KHR") -> None:
    assert client.post(
        "/wallets/", json={"name": name, "balance": 100000, "currency": currency}
    ).status_code == 201
    assert client.post(
        "/expenses/", json={"amount": 4100, "category": "Food & Dining", "wallet": name}
    ).status_code == 201


def test_export_filtered_by_khmer_wallet(client) -> None:
    _wallet_with_expense(client, "កាបូប")

    resp = client.get("/export/csv/filtered", params={"wallet": "កាបូប"})
    assert resp.status_code == 200
    header = resp.headers["content-disposition"]
    header.encode("ascii")
    expected = f"expenses_កាបូប_{date.today().isoformat()}.csv"
    assert unquote(header.split("filename*=UTF-8''", 1)[1]) == expected
    rows = list(csv.reader(io.StringIO(resp.text)))
    assert len(rows) == 2
    assert rows[1][3] == "កាបូប"


def test_export_filtered_by_quoted_wallet_name(client) -> None:
    _wallet_with_expense(client, 'Mom\'s "jar"', currency="USD")

    resp = client.get("/export/csv/filtered", params={"wallet": 'Mom\'s "jar"'})
    assert resp.status_code == 200
    header = resp.headers["content-disposition"]
    fallback = header.split('filename="', 1)[1].split('"', 1)[0]
    assert fallback == f"expenses_mom's__jar__{date.today().isoformat()}.csv"
    assert "filename*=UTF-8''" in header


# Request logging ----------------------------------------------------
def test_requests_are_logged_with_status(client, caplog) -> None:
    caplog.set_level(logging.INFO, logger="expense_tracker.request")
    client.get("/expenses/1")
    client.get("/expenses/missing")

    messages = [r.getMessage() for r in caplog.records if r.name == "expense_tracker.request"]
    assert any(m.startswith("GET /expenses/1 -> 200") for m in messages)
    assert any(m.startswith("GET /expenses/missing -> 404") for m in messages)
