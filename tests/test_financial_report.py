def _report(client, **params):
    resp = client.get("/api/reports/financial", params=params)
    assert resp.status_code == 200
    return resp.json()["report"]


def test_empty_report(client):
    report = _report(client, start_date="2024-01-01", end_date="2024-01-31")
    assert report == {
        "total_income": 0,
        "total_expenses": 0,
        "net_income": 0,
        "expense_by_category": [],
        "period": {"start_date": "2024-01-01", "end_date": "2024-01-31"},
    }


def test_mixed_transactions(client, make_category, make_transaction):
    food = make_category(name="Food")
    transport = make_category(name="Transportation")
    make_transaction(5000, type="income", date="2024-01-05")
    make_transaction(3000, type="income", date="2024-01-20")
    make_transaction(2000, category_id=food["id"], date="2024-01-10")
    make_transaction(1500, category_id=transport["id"], date="2024-01-12")

    report = _report(client, start_date="2024-01-01", end_date="2024-01-31")
    assert report["total_income"] == 8000
    assert report["total_expenses"] == 3500
    assert report["net_income"] == 4500
    assert report["expense_by_category"] == [
        {"category_id": food["id"], "category_name": "Food", "total_amount": 2000},
        {"category_id": transport["id"], "category_name": "Transportation", "total_amount": 1500},
    ]


def test_uncategorized_bucket_comes_last(client, make_category, make_transaction):
    food = make_category(name="Food")
    make_transaction(1000, date="2024-01-10")
    make_transaction(700, category_id=food["id"], date="2024-01-11")
    make_transaction(300, category_id=food["id"], date="2024-01-12")

    report = _report(client)
    assert report["expense_by_category"] == [
        {"category_id": food["id"], "category_name": "Food", "total_amount": 1000},
        {"category_id": None, "category_name": None, "total_amount": 1000},
    ]


def test_date_range_is_inclusive(client, make_transaction):
    make_transaction(100, date="2023-12-31")
    make_transaction(200, date="2024-01-01")
    make_transaction(400, date="2024-01-31")
    make_transaction(800, date="2024-02-01")

    report = _report(client, start_date="2024-01-01", end_date="2024-01-31")
    assert report["total_expenses"] == 600


def test_open_bounds_are_echoed_as_absent(client, make_transaction):
    make_transaction(1000, type="income", date="2024-01-01")
    make_transaction(1500, type="income", date="2024-06-01")

    report = _report(client, start_date="2024-03-01")
    assert report["total_income"] == 1500
    assert report["period"] == {"start_date": "2024-03-01"}

    report = _report(client, end_date="2024-03-01")
    assert report["total_income"] == 1000
    assert report["period"] == {"end_date": "2024-03-01"}

    report = _report(client)
    assert report["total_income"] == 2500
    assert report["period"] == {}


def test_net_income_can_be_negative(client, make_transaction):
    make_transaction(1000, type="income")
    make_transaction(4000)
    assert _report(client)["net_income"] == -3000


def test_invalid_date_is_rejected(client):
    resp = client.get("/api/reports/financial", params={"start_date": "yesterday"})
    assert resp.status_code == 422
