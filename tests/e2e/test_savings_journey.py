"""
E2E test walking one account through a month of use over the HTTP API.

Steps:
- parent configures the account and opens it two weeks after the start date
- a backdated birthday deposit and a same-day withdrawal are recorded
- the app is opened again after more Saturdays and Sundays have passed
- the goal calculator is consulted, then a mistaken entry is deleted
"""

import pytest
from fastapi.testclient import TestClient


def _assert_ledger_consistent(data: dict, initial_balance: float) -> None:
    # Display values are rounded to cents, so allow for accumulated rounding
    tolerance = 0.005 * (len(data["transactions"]) + 1)
    running = initial_balance
    for row in data["transactions"]:
        running += row["amount"]
        assert abs(row["balance"] - running) <= tolerance
    assert abs(data["current_balance"] - running) <= tolerance
    dates = [row["date"] for row in data["transactions"]]
    assert dates == sorted(dates)


@pytest.mark.e2e
def test_month_of_savings(client: TestClient, clock):
    """
    Configure, deposit, withdraw, let time pass and check a goal.
    Expected: ledger stays chronological and balanced at every step
    """
    response = client.post(
        "/v1/settings/initial",
        json={"account_holder": "Ava", "initial_balance": 20, "start_date": "2024-01-01"},
    )
    assert response.status_code == 200

    opened = client.get("/v1/account").json()
    assert opened["account_holder"] == "Ava"
    assert len(opened["transactions"]) == 4
    _assert_ledger_consistent(opened, 20)

    client.post(
        "/v1/transactions",
        json={"type": "Deposit", "name": "Birthday money", "amount": 25, "date": "2024-01-04"},
    )
    client.post("/v1/transactions", json={"type": "Withdrawal", "name": "Comic book", "amount": 3.5})

    after_edits = client.get("/v1/account").json()
    interest = [row["amount"] for row in after_edits["transactions"] if row["kind"] == "interest"]
    assert interest[0] == 0.5  # 1% of 20 + 25 + 5
    _assert_ledger_consistent(after_edits, 20)

    clock.advance(days=14)
    two_weeks_later = client.get("/v1/account").json()
    assert two_weeks_later["as_of"] == "2024-01-29"
    assert [row["date"] for row in two_weeks_later["transactions"][-4:]] == [
        "2024-01-20",
        "2024-01-21",
        "2024-01-27",
        "2024-01-28",
    ]
    _assert_ledger_consistent(two_weeks_later, 20)

    goal = client.post(
        "/v1/goals/projection",
        json={"goal_amount": 150, "goal_date": "2024-03-31"},
    ).json()
    assert goal["current_balance"] == two_weeks_later["current_balance"]
    assert goal["outcome"] in ("will_reach", "needs_extra")
    if goal["outcome"] == "needs_extra":
        assert goal["weekly_extra_needed"] > 0
        assert goal["future_balance_with_extra"] >= 150

    comic = next(row for row in two_weeks_later["transactions"] if row["type"] == "Comic book")
    response = client.delete(f"/v1/transactions/{comic['manual_index']}")
    assert response.status_code == 200

    final = client.get("/v1/account").json()
    assert all(row["type"] != "Comic book" for row in final["transactions"])
    assert final["current_balance"] > two_weeks_later["current_balance"] + 3.5
    _assert_ledger_consistent(final, 20)
