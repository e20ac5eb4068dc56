from models import Share


def dinner_payload(payer_id, participant_ids, **overrides):
    payload = {
        "title": "Dinner",
        "amount": 9000,  # R$ 90,00
        "date": "2025-01-10",
        "payer_id": payer_id,
        "split_type": "equal",
        "participant_ids": participant_ids
    }
    payload.update(overrides)
    return payload


def test_create_expense_equal_split(client, auth_headers, trip_group):
    group_id, (a, b, c) = trip_group

    response = client.post(f"/groups/{group_id}/expenses", headers=auth_headers, json=dinner_payload(a, [a, b, c]))
    assert response.status_code == 200
    data = response.json()
    assert data["amount"] == 9000
    assert data["split_type"] == "equal"

    details = client.get(f"/expenses/{data['id']}", headers=auth_headers).json()
    shares = {s["participant_id"]: s["amount_owed"] for s in details["shares"]}
    assert shares == {a: 3000, b: 3000, c: 3000}
    assert details["payer_name"] == "Ana"


def test_equal_split_remainder_sums_to_total(client, auth_headers, trip_group):
    group_id, (a, b, c) = trip_group

    expense_id = client.post(
        f"/groups/{group_id}/expenses", headers=auth_headers,
        json=dinner_payload(a, [a, b, c], amount=10000)
    ).json()["id"]

    details = client.get(f"/expenses/{expense_id}", headers=auth_headers).json()
    amounts = [s["amount_owed"] for s in details["shares"]]
    assert sum(amounts) == 10000
    assert sorted(amounts) == [3333, 3333, 3334]


def test_create_expense_manual_split(client, auth_headers, trip_group):
    group_id, (a, b, c) = trip_group

    response = client.post(f"/groups/{group_id}/expenses", headers=auth_headers, json={
        "title": "Taxi",
        "amount": 5000,
        "date": "2025-01-11",
        "payer_id": b,
        "split_type": "manual",
        "participant_ids": [a, b, c],
        "manual_values": {str(a): 2000, str(b): 2000, str(c): 1000}
    })
    assert response.status_code == 200

    details = client.get(f"/expenses/{response.json()['id']}", headers=auth_headers).json()
    shares = {s["participant_id"]: s["amount_owed"] for s in details["shares"]}
    assert shares == {a: 2000, b: 2000, c: 1000}


def test_manual_split_mismatch_is_rejected(client, auth_headers, db_session, trip_group):
    group_id, (a, b, c) = trip_group

    response = client.post(f"/groups/{group_id}/expenses", headers=auth_headers, json={
        "title": "Taxi",
        "amount": 5000,
        "payer_id": b,
        "split_type": "manual",
        "participant_ids": [a, b, c],
        "manual_values": {str(a): 2000, str(b): 2000, str(c): 500}
    })
    assert response.status_code == 400
    body = response.json()
    assert body["discrepancy"] == 500
    assert body["discrepancy_display"] == "5.00"

    # Nothing was written
    assert client.get(f"/groups/{group_id}/expenses", headers=auth_headers).json() == []
    assert db_session.query(Share).count() == 0


def test_payer_must_belong_to_group(client, auth_headers, trip_group):
    group_id, (a, b, c) = trip_group
    other_group_id = client.post("/groups", headers=auth_headers, json={"name": "Other"}).json()["id"]
    outsider = client.post(
        f"/groups/{other_group_id}/participants", headers=auth_headers, json={"name": "Outsider"}
    ).json()["id"]

    response = client.post(f"/groups/{group_id}/expenses", headers=auth_headers, json=dinner_payload(outsider, [a, b]))
    assert response.status_code == 400

    response = client.post(f"/groups/{group_id}/expenses", headers=auth_headers, json=dinner_payload(a, [a, outsider]))
    assert response.status_code == 400


def test_expense_requires_participants_and_title(client, auth_headers, trip_group):
    group_id, (a, b, c) = trip_group

    response = client.post(f"/groups/{group_id}/expenses", headers=auth_headers, json=dinner_payload(a, []))
    assert response.status_code == 400

    response = client.post(f"/groups/{group_id}/expenses", headers=auth_headers, json=dinner_payload(a, [a], title=" "))
    assert response.status_code == 400

    response = client.post(f"/groups/{group_id}/expenses", headers=auth_headers, json=dinner_payload(a, [a], amount=0))
    assert response.status_code == 400


def test_invalid_split_type(client, auth_headers, trip_group):
    group_id, (a, b, c) = trip_group

    response = client.post(
        f"/groups/{group_id}/expenses", headers=auth_headers,
        json=dinner_payload(a, [a, b], split_type="percent")
    )
    assert response.status_code == 422


def test_list_expenses_newest_first(client, auth_headers, trip_group):
    group_id, (a, b, c) = trip_group
    client.post(f"/groups/{group_id}/expenses", headers=auth_headers, json=dinner_payload(a, [a, b], title="Old", date="2025-01-01"))
    client.post(f"/groups/{group_id}/expenses", headers=auth_headers, json=dinner_payload(b, [a, b], title="New", date="2025-02-01T18:30:00.000Z"))

    expenses = client.get(f"/groups/{group_id}/expenses", headers=auth_headers).json()
    assert [e["title"] for e in expenses] == ["New", "Old"]
    assert expenses[0]["date"] == "2025-02-01"
    assert expenses[0]["payer_name"] == "B"


def test_update_expense_replaces_shares(client, auth_headers, db_session, trip_group):
    group_id, (a, b, c) = trip_group
    expense_id = client.post(
        f"/groups/{group_id}/expenses", headers=auth_headers, json=dinner_payload(a, [a, b, c])
    ).json()["id"]

    response = client.put(f"/expenses/{expense_id}", headers=auth_headers, json={
        "title": "Dinner (fixed)",
        "amount": 6000,
        "date": "2025-01-10",
        "payer_id": c,
        "split_type": "manual",
        "participant_ids": [a, b],
        "manual_values": {str(a): 4000, str(b): 2000}
    })
    assert response.status_code == 200
    assert response.json()["title"] == "Dinner (fixed)"
    assert response.json()["payer_id"] == c

    details = client.get(f"/expenses/{expense_id}", headers=auth_headers).json()
    shares = {s["participant_id"]: s["amount_owed"] for s in details["shares"]}
    assert shares == {a: 4000, b: 2000}
    assert db_session.query(Share).filter(Share.expense_id == expense_id).count() == 2


def test_rejected_update_keeps_previous_shares(client, auth_headers, trip_group):
    group_id, (a, b, c) = trip_group
    expense_id = client.post(
        f"/groups/{group_id}/expenses", headers=auth_headers, json=dinner_payload(a, [a, b, c])
    ).json()["id"]

    response = client.put(f"/expenses/{expense_id}", headers=auth_headers, json=dinner_payload(
        a, [a, b], split_type="manual", manual_values={str(a): 1000, str(b): 1000}
    ))
    assert response.status_code == 400

    details = client.get(f"/expenses/{expense_id}", headers=auth_headers).json()
    assert len(details["shares"]) == 3
    assert details["amount"] == 9000


def test_delete_expense(client, auth_headers, db_session, trip_group):
    group_id, (a, b, c) = trip_group
    expense_id = client.post(
        f"/groups/{group_id}/expenses", headers=auth_headers, json=dinner_payload(a, [a, b, c])
    ).json()["id"]

    response = client.delete(f"/expenses/{expense_id}", headers=auth_headers)
    assert response.status_code == 200

    assert client.get(f"/expenses/{expense_id}", headers=auth_headers).status_code == 404
    assert db_session.query(Share).filter(Share.expense_id == expense_id).count() == 0
