from datetime import date
from decimal import Decimal

from app.core.auth import create_access_token, get_current_user_id
from app.models.account import ChartCategory, ChartSubcategory
from app.models.base import CounterpartyKind, Currency
from app.models.debt import DebtStatus
from app.main import app

TEST_USER_ID = "507f1f77bcf86cd799439011"

BULK_URL = "/api/v1/accounting/bulk-payments"


def bulk_body(counterparty_id, items, **overrides):
    body = {
        "counterparty_id": counterparty_id,
        "debt_currency": "USD",
        "payment_currency": "USD",
        "payment_date": "2024-03-15",
        "items": items,
    }
    body.update(overrides)
    return body


def test_root_and_health(client):
    assert client.get("/").status_code == 200
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_bulk_payment_reports_successes_and_item_errors(client, books):
    books.configure_chart()
    books.exchange_rates.add(date(2024, 3, 1), "1000")
    operator = books.counterparties.add("Andes Tours", CounterpartyKind.OPERATOR)
    paid = books.debts.add(total_amount=Decimal("1000"), currency=Currency.USD)
    nearly = books.debts.add(total_amount=Decimal("1000"), paid_amount=Decimal("800"), currency=Currency.USD)

    response = client.post(BULK_URL, json=bulk_body(operator.id, [
        {"debt_id": paid.id, "related_entity_id": "op-1", "amount": 1000},
        {"debt_id": nearly.id, "related_entity_id": "op-2", "amount": 300},
    ]))

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["message"] == "1 payment(s) processed successfully"
    assert data["results"] == [
        {"debt_id": paid.id, "related_entity_id": "op-1", "amount": 1000.0, "status": "success"}
    ]
    assert data["errors"] == [f"Amount exceeds pending balance for: {nearly.id}"]
    assert data["summary"] == {
        "counterparty": "Andes Tours",
        "total_debt_amount": 1300.0,
        "debt_currency": "USD",
        "total_payment_amount": 1300.0,
        "payment_currency": "USD",
        "exchange_rate": None,
        "payments_count": 1,
    }
    assert books.debts.debts[paid.id].status == DebtStatus.PAID
    assert books.payments.records[0].created_by == TEST_USER_ID


def test_bulk_payment_converts_batch_total_once(client, books):
    operator = books.counterparties.add("Pampa Viajes", CounterpartyKind.OPERATOR)
    debt = books.debts.add(total_amount=Decimal("300000"), currency=Currency.ARS)

    response = client.post(BULK_URL, json=bulk_body(
        operator.id,
        [{"debt_id": debt.id, "amount": 100000}, {"debt_id": debt.id, "amount": 50000}],
        debt_currency="ARS",
        payment_currency="USD",
        exchange_rate=1000,
    ))

    assert response.status_code == 200
    summary = response.json()["summary"]
    assert summary["total_debt_amount"] == 150000.0
    assert summary["total_payment_amount"] == 150.0
    assert summary["exchange_rate"] == 1000.0


def test_bulk_payment_cross_currency_without_rate_is_400(client, books):
    operator = books.counterparties.add("Andes Tours", CounterpartyKind.OPERATOR)
    debt = books.debts.add(total_amount=Decimal("100"), currency=Currency.ARS)

    response = client.post(BULK_URL, json=bulk_body(
        operator.id, [{"debt_id": debt.id, "amount": 10}], debt_currency="ARS"
    ))

    assert response.status_code == 400
    assert books.debts.updates == []


def test_bulk_payment_empty_items_is_400(client, books):
    operator = books.counterparties.add("Andes Tours", CounterpartyKind.OPERATOR)

    response = client.post(BULK_URL, json=bulk_body(operator.id, []))

    assert response.status_code == 400


def test_bulk_payment_malformed_body_is_400(client):
    response = client.post(BULK_URL, json={"counterparty_id": "x", "debt_currency": "EUR"})

    assert response.status_code == 400


def test_bulk_payment_unknown_counterparty_is_404(client, books):
    debt = books.debts.add(total_amount=Decimal("100"), currency=Currency.USD)

    response = client.post(BULK_URL, json=bulk_body(
        "65f0c0ffee0000000000dead", [{"debt_id": debt.id, "amount": 10}]
    ))

    assert response.status_code == 404
    assert response.json()["detail"] == "Counterparty not found: 65f0c0ffee0000000000dead"


def test_unexpected_failure_is_500(client, books):
    operator = books.counterparties.add("Andes Tours", CounterpartyKind.OPERATOR)

    async def broken(counterparty_id):
        raise RuntimeError("boom")

    books.counterparties.get = broken
    response = client.post(BULK_URL, json=bulk_body(operator.id, [{"debt_id": "d1", "amount": 10}]))

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}


def test_monthly_position(client, books):
    assets = books.accounts.add_chart("1.1.01", ChartCategory.ACTIVO, ChartSubcategory.CORRIENTE)
    liabilities = books.accounts.add_chart("2.1.01", ChartCategory.PASIVO, ChartSubcategory.CORRIENTE)
    equity = books.accounts.add_chart("3.1.01", ChartCategory.PATRIMONIO_NETO)
    books.accounts.add_account(assets, Currency.ARS, "500000")
    books.accounts.add_account(liabilities, Currency.ARS, "300000")
    books.accounts.add_account(equity, Currency.ARS, "200000")

    response = client.get("/api/v1/accounting/monthly-position", params={"year": 2024, "month": 3})

    assert response.status_code == 200
    data = response.json()
    assert data["activo"]["total"] == {"ars": 500000.0, "usd": 0.0}
    assert data["pasivo"]["total"]["ars"] == 300000.0
    assert data["patrimonio_neto"] == {"total": 200000.0}
    assert data["verificacion"] == {"balanceado": True, "diferencia": 0.0}
    assert data["periodo"] == {"year": 2024, "month": 3, "scope_id": None}


def test_monthly_position_invalid_month_is_400(client):
    response = client.get("/api/v1/accounting/monthly-position", params={"year": 2024, "month": 13})

    assert response.status_code == 400


def test_year_past_four_digits_is_400(client):
    for path in ("monthly-position", "partner-distribution"):
        response = client.get(f"/api/v1/accounting/{path}", params={"year": 10000, "month": 1})

        assert response.status_code == 400


def test_partner_distribution(client, books):
    books.partners.add("Ana", "50")
    books.partners.add("Bruno", "40")

    response = client.get("/api/v1/accounting/partner-distribution", params={"year": 2024, "month": 3})

    assert response.status_code == 200
    data = response.json()
    assert [d["name"] for d in data["distributions"]] == ["Ana", "Bruno"]
    assert data["total_percentage"] == 90.0
    assert "10" in data["warning"]


def test_exchange_rate_lookup(client, books):
    books.exchange_rates.add(date(2024, 5, 1), "900")
    books.exchange_rates.add(date(2024, 5, 20), "990")

    response = client.get("/api/v1/exchange-rates", params={"on": "2024-05-10"})

    assert response.status_code == 200
    data = response.json()
    assert data["rate"] == 900.0
    assert data["rate_date"] == "2024-05-01"
    assert data["from_currency"] == "USD"


def test_exchange_rate_missing_is_404(client):
    response = client.get("/api/v1/exchange-rates")

    assert response.status_code == 404


def test_accounting_requires_bearer_token(client):
    app.dependency_overrides.pop(get_current_user_id, None)

    response = client.get("/api/v1/accounting/monthly-position", params={"year": 2024, "month": 3})

    assert response.status_code in (401, 403)


def test_valid_token_is_accepted(client, books):
    app.dependency_overrides.pop(get_current_user_id, None)
    token = create_access_token("user-42")

    response = client.get(
        "/api/v1/accounting/monthly-position",
        params={"year": 2024, "month": 3},
        headers={"Authorization": f"Bearer {token}"},
    )

    assert response.status_code == 200


def test_invalid_token_is_401(client):
    app.dependency_overrides.pop(get_current_user_id, None)

    response = client.get(
        "/api/v1/accounting/monthly-position",
        params={"year": 2024, "month": 3},
        headers={"Authorization": "Bearer not-a-jwt"},
    )

    assert response.status_code == 401

