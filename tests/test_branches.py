def test_create_branch_and_list(client, manager_headers):
    response = client.post(
        "/branches",
        json={"name": "Harbour", "address": "3 Dock Street", "preOrderDepositPercentage": 40},
        headers=manager_headers,
    )
    assert response.status_code == 200
    assert response.json()["payload"]["preOrderDepositPercentage"] == 40

    names = [b["name"] for b in client.get("/branches", headers=manager_headers).json()["payload"]]
    assert "Harbour" in names
    assert "Central" in names


def test_table_capacity_defaults_to_table_type(client, manager_headers, branch):
    table_type = client.post(
        "/table-types", json={"name": "Booth", "capacity": 5, "deposit": 70000}, headers=manager_headers
    ).json()["payload"]

    response = client.post(
        "/tables",
        json={"name": "B1", "branchId": branch.id, "tableTypeId": table_type["id"], "floorName": "Upstairs"},
        headers=manager_headers,
    )

    assert response.status_code == 200
    table = response.json()["payload"]
    assert table["capacity"] == 5
    assert table["deposit"] == 70000
    assert table["tableType"] == "Booth"


def test_create_table_with_unknown_type(client, manager_headers, branch):
    response = client.post(
        "/tables", json={"name": "X1", "branchId": branch.id, "tableTypeId": 999}, headers=manager_headers
    )
    assert response.status_code == 404
    assert response.json()["message"] == "Table type not found"


def test_list_tables_by_branch(client, waiter_headers, tables, other_branch):
    response = client.get(f"/tables?branchId={tables[0].branch_id}", headers=waiter_headers)
    assert [t["name"] for t in response.json()["payload"]] == ["T1", "T2", "T3"]

    response = client.get(f"/tables?branchId={other_branch.id}", headers=waiter_headers)
    assert response.json()["payload"] == []


def test_waiter_cannot_create_branch(client, waiter_headers):
    response = client.post("/branches", json={"name": "Nope"}, headers=waiter_headers)
    assert response.status_code == 403
