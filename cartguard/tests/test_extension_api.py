# tests/test_extension_api.py
import pytest
from fastapi.testclient import TestClient

from cartguard.main import app
from cartguard.routes.extension import get_clock, get_randint
from cartguard.tests.factories import NOW, cart, const, line_item, old_line_item, order


@pytest.fixture
def client():
    app.dependency_overrides[get_randint] = lambda: const(5)
    app.dependency_overrides[get_clock] = lambda: (lambda: NOW)
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"ok": True}

def test_cart_update_returns_actions(client):
    r = client.post("/service", json={"action": "Update",
                                      "resource": {"typeId": "cart", "obj": cart(line_item(id="a", sku="A"))}})
    assert r.status_code == 200
    actions = r.json()["actions"]
    assert [a["action"] for a in actions] == ["setDirectDiscounts", "setLineItemCustomType"]
    assert actions[0]["discounts"][0] == {
        "value": {"type": "relative", "permyriad": 500},
        "target": {"type": "lineItems", "predicate": 'sku = "A"'},
    }
    assert actions[1] == {
        "action": "setLineItemCustomType",
        "lineItemId": "a",
        "type": {"key": "external-lineitem-info"},
        "fields": {"availabilityFlag": "high-on-stock", "availableQuantity": 5},
    }

def test_cart_without_new_items_still_annotated(client):
    r = client.post("/service", json={"action": "Create",
                                      "resource": {"typeId": "cart", "obj": cart(old_line_item(id="a"))}})
    assert r.status_code == 200
    assert [a["action"] for a in r.json()["actions"]] == ["setLineItemCustomType"]

def test_fraudulent_order_rejected(client):
    r = client.post("/service", json={"action": "Create", "resource": {"typeId": "order", "obj": order(11, 50001)}})
    assert r.status_code == 400
    assert r.json() == {"errors": [{"code": "InvalidOperation",
                                    "message": "Fraud scoring failed: Order exceeds risk threshold"}]}

def test_order_pass_returns_empty_actions(client):
    r = client.post("/service", json={"action": "Create", "resource": {"typeId": "order", "obj": order(10, 50001)}})
    assert r.status_code == 200
    assert r.json() == {"actions": []}

def test_payment_is_accepted(client):
    r = client.post("/service", json={"action": "Create", "resource": {"typeId": "payment", "obj": {"id": "p"}}})
    assert r.status_code == 200
    assert r.json() == {"actions": []}

def test_delete_action_is_server_error(client):
    r = client.post("/service", json={"action": "Delete", "resource": {"typeId": "cart", "obj": cart()}})
    assert r.status_code == 500
    assert r.json()["errors"][0]["code"] == "General"

def test_missing_resource_is_bad_request(client):
    r = client.post("/service", json={"action": "Create"})
    assert r.status_code == 400
    assert r.json() == {"errors": [{"code": "InvalidInput", "message": "Bad request - Missing body parameters."}]}

def test_non_json_body_is_bad_request(client):
    r = client.post("/service", content=b"not json", headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert r.json()["errors"][0]["code"] == "InvalidInput"
