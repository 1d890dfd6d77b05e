# tests/test_dispatcher.py
import pytest

from cartguard.errors import BadRequest, BusinessRuleRejection, InternalFault, UnrecognizedAction
from cartguard.schemas import Resource, SetDirectDiscounts
from cartguard.services import dispatcher
from cartguard.services.dispatcher import ExtensionAction, ResourceType, dispatch
from cartguard.tests.factories import cart, const, line_item, order


def _res(type_id, obj):
    return Resource(type_id=type_id, obj=obj)


@pytest.mark.parametrize("action", ["Create", "Update"])
def test_cart_create_and_update_run_the_same_engine(action, now, config):
    actions = dispatch(action, _res("cart", cart(line_item())), now, const(5), config)
    assert isinstance(actions[0], SetDirectDiscounts)
    assert len(actions) == 2

def test_order_create_rejection_becomes_business_rule_error(now, config):
    with pytest.raises(BusinessRuleRejection) as exc:
        dispatch("Create", _res("order", order(11, 50001)), now, const(1), config)
    assert exc.value.status_code == 400

def test_order_update_is_a_noop(now, config):
    assert dispatch("Update", _res("order", order(11, 50001)), now, const(1), config) == []

def test_order_create_pass(now, config):
    assert dispatch("Create", _res("order", order(11, 50001, "USD")), now, const(1), config) == []

@pytest.mark.parametrize("action", ["Create", "Update", "Delete"])
@pytest.mark.parametrize("type_id", ["payment", "customer", "widget", None])
def test_other_resource_types_accept_without_actions(action, type_id, now, config):
    assert dispatch(action, _res(type_id, {"id": "x"}), now, const(1), config) == []

@pytest.mark.parametrize("type_id", ["cart", "order"])
def test_unknown_action_is_unrecognized(type_id, now, config):
    with pytest.raises(UnrecognizedAction) as exc:
        dispatch("Delete", _res(type_id, {}), now, const(1), config)
    assert exc.value.status_code == 500

@pytest.mark.parametrize("action,resource", [(None, _res("cart", {})), ("Create", None), ("", None)])
def test_missing_body_parameters_never_reach_an_engine(action, resource, now, config, monkeypatch):
    def boom(*args):
        raise AssertionError("engine invoked")
    monkeypatch.setitem(dispatcher.HANDLERS, (ResourceType.CART, ExtensionAction.CREATE), boom)
    with pytest.raises(BadRequest):
        dispatch(action, resource, now, const(1), config)

def test_missing_cart_snapshot_is_bad_request(now, config):
    with pytest.raises(BadRequest):
        dispatch("Create", _res("cart", None), now, const(1), config)

def test_unexpected_engine_failure_is_internal_fault(now, config, monkeypatch):
    def boom(*args):
        raise KeyError("lineItems")
    monkeypatch.setitem(dispatcher.HANDLERS, (ResourceType.CART, ExtensionAction.UPDATE), boom)
    with pytest.raises(InternalFault) as exc:
        dispatch("Update", _res("cart", cart()), now, const(1), config)
    assert exc.value.status_code == 500
    assert "lineItems" in exc.value.message

def test_every_implemented_type_handles_every_action():
    for rtype in dispatcher.IMPLEMENTED:
        for act in ExtensionAction:
            assert (rtype, act) in dispatcher.HANDLERS
