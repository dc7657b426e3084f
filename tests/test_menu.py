import pytest

from app.constants import RecordStatus

CATEGORIES = "/api/menu/categories"


@pytest.fixture
def create_category(client, manager_headers):
    def _create(name, **fields):
        response = client.post(CATEGORIES, json={"name": name, **fields}, headers=manager_headers)
        assert response.status_code == 200, response.json()
        return response.json()["payload"]

    return _create


def test_category_tree(client, create_category, waiter_headers):
    drinks = create_category("Drinks", code=" drk ")
    coffee = create_category("Coffee", parentId=drinks["id"])
    create_category("Tea", parentId=drinks["id"], sequence=0)
    espresso = create_category("Espresso", parentId=coffee["id"])
    create_category("Mains")

    assert drinks["code"] == "DRK"
    assert drinks["sequence"] == 1
    assert espresso["level"] == 2
    assert espresso["fullPath"] == "Drinks / Coffee / Espresso"
    assert espresso["parentName"] == "Coffee"

    tree = client.get(f"{CATEGORIES}/hierarchy", headers=waiter_headers).json()["payload"]
    assert [node["name"] for node in tree] == ["Drinks", "Mains"]
    assert [child["name"] for child in tree[0]["children"]] == ["Tea", "Coffee"]
    assert tree[0]["childrenCount"] == 2
    assert tree[0]["children"][1]["children"][0]["name"] == "Espresso"


def test_duplicate_code_conflicts(client, create_category, manager_headers):
    create_category("Drinks", code="DRK")

    response = client.post(CATEGORIES, json={"name": "Beverages", "code": "drk"}, headers=manager_headers)

    assert response.status_code == 409


def test_parent_cannot_create_a_cycle(client, create_category, manager_headers):
    drinks = create_category("Drinks")
    coffee = create_category("Coffee", parentId=drinks["id"])
    espresso = create_category("Espresso", parentId=coffee["id"])

    own_parent = client.put(f"{CATEGORIES}/{drinks['id']}", json={"parentId": drinks["id"]}, headers=manager_headers)
    assert own_parent.status_code == 400

    under_grandchild = client.put(
        f"{CATEGORIES}/{drinks['id']}", json={"parentId": espresso["id"]}, headers=manager_headers
    )
    assert under_grandchild.status_code == 400
    assert under_grandchild.json()["message"] == "A category cannot be moved under one of its descendants"

    missing = client.put(f"{CATEGORIES}/{coffee['id']}", json={"parentId": 999}, headers=manager_headers)
    assert missing.status_code == 404

    to_root = client.put(f"{CATEGORIES}/{espresso['id']}", json={"parentId": None}, headers=manager_headers)
    assert to_root.json()["payload"]["isRoot"] is True


def test_delete_refuses_categories_in_use(client, create_category, manager_headers):
    drinks = create_category("Drinks")
    coffee = create_category("Coffee", parentId=drinks["id"])
    client.post("/api/menu/products", json={"name": "Latte", "price": 45000, "categoryId": coffee["id"]}, headers=manager_headers)

    assert client.delete(f"{CATEGORIES}/{drinks['id']}", headers=manager_headers).status_code == 400

    response = client.delete(f"{CATEGORIES}/{coffee['id']}", headers=manager_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Cannot delete a category that has products"
    assert client.get(f"{CATEGORIES}/{coffee['id']}/product-count", headers=manager_headers).json()["payload"] == 1

    empty = create_category("Seasonal")
    assert client.delete(f"{CATEGORIES}/{empty['id']}", headers=manager_headers).status_code == 200
    assert client.get(f"{CATEGORIES}/{empty['id']}", headers=manager_headers).status_code == 404


def test_archive_and_search(client, create_category, manager_headers):
    create_category("Coffee")
    tea = create_category("Tea")
    create_category("Cocktails")

    archived = client.put(f"{CATEGORIES}/{tea['id']}/archive", headers=manager_headers).json()["payload"]
    assert archived["status"] == RecordStatus.INACTIVE.value

    def search(**params):
        payload = client.get(f"{CATEGORIES}/search", params=params, headers=manager_headers).json()["payload"]
        return [c["name"] for c in payload["data"]]

    assert search() == ["Coffee", "Cocktails"]
    assert search(archived=True) == ["Tea"]
    assert search(includeAllStatuses=True, sort="name", direction="desc") == ["Tea", "Coffee", "Cocktails"]
    assert search(search="co") == ["Coffee", "Cocktails"]

    client.put(f"{CATEGORIES}/{tea['id']}/unarchive", headers=manager_headers)
    assert search(sort="name") == ["Cocktails", "Coffee", "Tea"]


def test_sequence_update_reorders_siblings(client, create_category, manager_headers):
    first = create_category("Starters")
    create_category("Mains")

    client.put(f"{CATEGORIES}/{first['id']}/sequence", params={"sequence": 9}, headers=manager_headers)

    tree = client.get(f"{CATEGORIES}/hierarchy", headers=manager_headers).json()["payload"]
    assert [node["name"] for node in tree] == ["Mains", "Starters"]


def test_attribute_values(client, manager_headers):
    created = client.post(
        "/api/menu/attributes",
        json={"name": "Size", "values": [{"name": "Small"}, {"name": "Large"}]},
        headers=manager_headers,
    ).json()["payload"]
    assert created["valuesCount"] == 2
    assert [v["sequence"] for v in created["values"]] == [1, 2]

    duplicate = client.post(
        f"/api/menu/attributes/{created['id']}/values", json={"name": "small"}, headers=manager_headers
    )
    assert duplicate.status_code == 409

    same_name = client.post("/api/menu/attributes", json={"name": "size"}, headers=manager_headers)
    assert same_name.status_code == 409

    # Values without a colour code cannot live on a COLOR attribute
    switch = client.put(f"/api/menu/attributes/{created['id']}", json={"displayType": "COLOR"}, headers=manager_headers)
    assert switch.status_code == 400

    small_id = created["values"][0]["id"]
    assert client.delete(f"/api/menu/attribute-values/{small_id}", headers=manager_headers).status_code == 200
    values = client.get(f"/api/menu/attributes/{created['id']}/values", headers=manager_headers).json()["payload"]
    assert [v["name"] for v in values] == ["Large"]

    # A deleted value frees its name
    readded = client.post(
        f"/api/menu/attributes/{created['id']}/values", json={"name": "Small"}, headers=manager_headers
    )
    assert readded.status_code == 200


def test_color_attribute_needs_color_codes(client, manager_headers):
    missing = client.post(
        "/api/menu/attributes",
        json={"name": "Cup colour", "displayType": "COLOR", "values": [{"name": "Red"}]},
        headers=manager_headers,
    )
    assert missing.status_code == 400

    bad_format = client.post(
        "/api/menu/attributes",
        json={"name": "Cup colour", "displayType": "COLOR", "values": [{"name": "Red", "colorCode": "red"}]},
        headers=manager_headers,
    )
    assert bad_format.status_code == 422

    created = client.post(
        "/api/menu/attributes",
        json={"name": "Cup colour", "displayType": "COLOR", "values": [{"name": "Red", "colorCode": "#ff0000"}]},
        headers=manager_headers,
    ).json()["payload"]
    assert created["values"][0]["colorCode"] == "#FF0000"

    cleared = client.put(
        f"/api/menu/attribute-values/{created['values'][0]['id']}", json={"colorCode": None}, headers=manager_headers
    )
    assert cleared.status_code == 400


def test_duplicate_values_in_one_request(client, manager_headers):
    response = client.post(
        "/api/menu/attributes",
        json={"name": "Milk", "values": [{"name": "Oat"}, {"name": "oat"}]},
        headers=manager_headers,
    )

    assert response.status_code == 409


def test_attribute_delete_is_permanent(client, manager_headers):
    created = client.post("/api/menu/attributes", json={"name": "Sugar"}, headers=manager_headers).json()["payload"]

    assert client.delete(f"/api/menu/attributes/{created['id']}", headers=manager_headers).status_code == 200
    assert client.get(f"/api/menu/attributes/{created['id']}", headers=manager_headers).status_code == 404
    assert client.post("/api/menu/attributes", json={"name": "Sugar"}, headers=manager_headers).status_code == 200
