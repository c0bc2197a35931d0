import pytest


@pytest.fixture()
def reconciler(database):
    from identity.customer.reconciliation import IdentityReconciler

    return IdentityReconciler(database)


@pytest.fixture()
def placement(database, dispatcher, reconciler):
    from ordering.order.placement import PlaceOrderHandler

    return PlaceOrderHandler(database, dispatcher=dispatcher, reconciler=reconciler)


@pytest.fixture()
def place(placement):
    """Place an order from ``(product_id, quantity)`` pairs or CartLine objects."""
    from ordering.order.placement import CartLine, PlaceOrder

    def _place(lines, user_id=None, address_id=None, notes=None, handler=None):
        cart_lines = tuple(line if isinstance(line, CartLine) else CartLine(*line) for line in lines)
        command = PlaceOrder(cart_lines=cart_lines, user_id=user_id, address_id=address_id, notes=notes)
        return (handler or placement).place_order(command)

    return _place
