"""Shared BDD fixtures and step definitions for the Procurement domain."""

from procurement.exceptions import ProcurementError
from procurement.messaging.message import is_open
from procurement.order.drafts import AddDraftItem, OpenDraft
from procurement.order.order import Order
from procurement.order.status import TransitionOrder
from procurement.order.submission import SubmitOrder
from protean import current_domain
from pytest_bdd import given, parsers, then, when


def _order(context):
    return current_domain.repository_for(Order).get(context["order_id"])


def _attempt(context, command):
    """Process a command, recording a business rejection instead of raising it."""
    try:
        current_domain.process(command, asynchronous=False)
    except ProcurementError as exc:
        context["error"] = exc


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.parse('the supplier "{supplier_id}" sells "{product_id}" at {price:f} with {stock:d} in stock'))
def _(catalog, supplier_id, product_id, price, stock):
    catalog.stock(product_id, supplier_id, price=price, stock_quantity=stock)


@given(
    parsers.parse('the store "{store_id}" has a draft with supplier "{supplier_id}"'),
    target_fixture="context",
)
def _(store_id, supplier_id):
    order = current_domain.process(OpenDraft(store_id=store_id, supplier_id=supplier_id), asynchronous=False)
    return {"order_id": str(order.id), "error": None}


# ---------------------------------------------------------------------------
# Given / When steps
# ---------------------------------------------------------------------------
@given(parsers.parse('the store adds {quantity:d} of "{product_id}"'))
@when(parsers.parse('the store adds {quantity:d} of "{product_id}"'))
def _(context, quantity, product_id):
    current_domain.process(
        AddDraftItem(order_id=context["order_id"], product_id=product_id, quantity=quantity),
        asynchronous=False,
    )


@when(parsers.parse('the store tries to add {quantity:d} of "{product_id}"'))
def _(context, quantity, product_id):
    _attempt(context, AddDraftItem(order_id=context["order_id"], product_id=product_id, quantity=quantity))


@given(parsers.parse('the store submits with "{payment_method}" and "{delivery_option}"'))
@when(parsers.parse('the store submits with "{payment_method}" and "{delivery_option}"'))
def _(context, payment_method, delivery_option):
    current_domain.process(
        SubmitOrder(
            order_id=context["order_id"],
            payment_method=payment_method,
            delivery_option=delivery_option,
        ),
        asynchronous=False,
    )


@when(parsers.parse('the store tries to submit with "{payment_method}" and "{delivery_option}"'))
def _(context, payment_method, delivery_option):
    _attempt(
        context,
        SubmitOrder(
            order_id=context["order_id"],
            payment_method=payment_method,
            delivery_option=delivery_option,
        ),
    )


@when(parsers.parse('the supplier marks the order "{status}"'))
def _(context, status):
    order = _order(context)
    current_domain.process(
        TransitionOrder(
            order_id=context["order_id"],
            target_status=status,
            actor_id=str(order.supplier_id),
            actor_role="supplier",
        ),
        asynchronous=False,
    )


@when(parsers.parse('the supplier tries to mark the order "{status}"'))
def _(context, status):
    order = _order(context)
    _attempt(
        context,
        TransitionOrder(
            order_id=context["order_id"],
            target_status=status,
            actor_id=str(order.supplier_id),
            actor_role="supplier",
        ),
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.parse('the order status is "{status}"'))
def _(context, status):
    assert _order(context).status == status


@then(parsers.parse("the delivery fee is {fee:f}"))
def _(context, fee):
    assert _order(context).delivery_fee == fee


@then(parsers.parse("the grand total is {total:f}"))
def _(context, total):
    assert _order(context).grand_total == total


@then(parsers.parse("the order has {lines:d} line with {units:d} units"))
def _(context, lines, units):
    order = _order(context)
    assert len(order.items) == lines
    assert order.total_quantity() == units


@then(parsers.parse('the request is rejected as "{code}"'))
def _(context, code):
    assert context["error"] is not None
    assert context["error"].code == code


@then("messaging is open")
def _(context):
    assert is_open(_order(context))
