from datetime import date

from utils.personal import DEFAULT_MONTHLY_BUDGET, summarize_month
from models import PersonalExpense


def add_expense(client, headers, title, amount, category="Alimentação", expense_date=None):
    payload = {"title": title, "amount": amount, "category": category}
    if expense_date:
        payload["date"] = expense_date
    return client.post("/personal-expenses", headers=headers, json=payload)


def test_create_personal_expense_defaults_to_today(client, auth_headers):
    response = add_expense(client, auth_headers, "Lunch", 2500)
    assert response.status_code == 200
    data = response.json()
    assert data["date"] == date.today().isoformat()
    assert data["category"] == "Alimentação"


def test_personal_expense_validation(client, auth_headers):
    assert add_expense(client, auth_headers, "  ", 2500).status_code == 400
    assert add_expense(client, auth_headers, "Lunch", 0).status_code == 400
    assert add_expense(client, auth_headers, "Lunch", 100, category="Crypto").status_code == 422


def test_list_only_requested_month(client, auth_headers):
    add_expense(client, auth_headers, "January bus", 500, "Transporte", "2025-01-05")
    add_expense(client, auth_headers, "January cinema", 3000, "Lazer", "2025-01-31")
    add_expense(client, auth_headers, "February rent", 150000, "Moradia", "2025-02-01")

    response = client.get("/personal-expenses", headers=auth_headers, params={"year": 2025, "month": 1})
    assert response.status_code == 200
    assert [e["title"] for e in response.json()] == ["January cinema", "January bus"]


def test_invalid_month(client, auth_headers):
    response = client.get("/personal-expenses", headers=auth_headers, params={"year": 2025, "month": 13})
    assert response.status_code == 400


def test_summary_uses_default_budget(client, auth_headers):
    add_expense(client, auth_headers, "Market", 60000, "Alimentação", "2025-03-02")
    add_expense(client, auth_headers, "Uber", 15000, "Transporte", "2025-03-03")
    add_expense(client, auth_headers, "Snacks", 5000, "Alimentação", "2025-03-04")

    response = client.get("/personal-expenses/summary", headers=auth_headers, params={"year": 2025, "month": 3})
    assert response.status_code == 200
    data = response.json()
    assert data["total_spent"] == 80000
    assert data["budget"] == DEFAULT_MONTHLY_BUDGET
    assert data["remaining"] == DEFAULT_MONTHLY_BUDGET - 80000
    assert [(c["name"], c["total"]) for c in data["categories"]] == [("Alimentação", 65000), ("Transporte", 15000)]
    assert data["categories"][0]["icon"] == "🍔"


def test_set_budget_changes_summary(client, auth_headers):
    response = client.put("/budgets/2025/4", headers=auth_headers, json={"amount": 100000})
    assert response.status_code == 200
    assert response.json() == {"year": 2025, "month": 4, "amount": 100000}

    # Upsert
    client.put("/budgets/2025/4", headers=auth_headers, json={"amount": 200000})
    assert client.get("/budgets/2025/4", headers=auth_headers).json()["amount"] == 200000

    add_expense(client, auth_headers, "Course", 50000, "Educação", "2025-04-10")
    data = client.get("/personal-expenses/summary", headers=auth_headers, params={"year": 2025, "month": 4}).json()
    assert data["budget"] == 200000
    assert data["percentage_used"] == 25.0
    assert data["remaining"] == 150000


def test_budget_must_be_positive(client, auth_headers):
    assert client.put("/budgets/2025/4", headers=auth_headers, json={"amount": 0}).status_code == 400


def test_delete_personal_expense(client, auth_headers):
    expense_id = add_expense(client, auth_headers, "Pharmacy", 4000, "Saúde").json()["id"]

    assert client.delete(f"/personal-expenses/{expense_id}", headers=auth_headers).status_code == 200
    assert client.delete(f"/personal-expenses/{expense_id}", headers=auth_headers).status_code == 404


def test_summarize_month_over_budget():
    expenses = [
        PersonalExpense(title="Rent", amount=250000, category="Moradia", date="2025-05-01"),
        PersonalExpense(title="Trip", amount=100000, category="Lazer", date="2025-05-20"),
    ]
    summary = summarize_month(expenses, 300000)
    assert summary["remaining"] == -50000
    assert summary["percentage_used"] == 116.7


def test_summarize_month_zero_budget():
    summary = summarize_month([], 0)
    assert summary["percentage_used"] == 0.0
    assert summary["categories"] == []


def test_budget_month_zero_rejected(client, auth_headers):
    response = client.put("/budgets/2025/0", headers=auth_headers, json={"amount": 12345})
    assert response.status_code == 400
    assert client.get("/budgets/2025/0", headers=auth_headers).status_code == 400


def test_list_month_or_year_zero_rejected(client, auth_headers):
    assert client.get("/personal-expenses", headers=auth_headers, params={"year": 2025, "month": 0}).status_code == 400
    assert client.get("/personal-expenses", headers=auth_headers, params={"year": 0, "month": 1}).status_code == 400


def test_summary_year_out_of_range(client, auth_headers):
    response = client.get("/personal-expenses/summary", headers=auth_headers, params={"year": 10000, "month": 1})
    assert response.status_code == 400
    assert "Year must be between" in response.json()["detail"]
    assert client.put("/budgets/10000/1", headers=auth_headers, json={"amount": 100}).status_code == 400
