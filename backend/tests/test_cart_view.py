"""Tests for the cart view and the action dispatcher."""

from unittest.mock import MagicMock

import pytest

from app.services.cart_actions import CartActionDispatcher
from app.services.cart_service import CartStore
from app.services.cart_view import EMPTY_CART_MESSAGE, CartIntent, CartView

APPLES = {"id": 1, "name": "Apples", "price": "45 kr / kg", "image": "apples.jpg"}
CARROTS = {"id": 2, "name": "Carrots", "price": "10 kr", "image": "carrots.jpg"}


@pytest.fixture
def store(storage):
    cart = CartStore(storage)
    cart.load()
    return cart


@pytest.fixture
def dispatcher(store):
    return CartActionDispatcher(store)


@pytest.fixture
def view(store, dispatcher):
    return CartView(store, currency="kr", delivery_fee=49, on_intent=dispatcher.dispatch)


class TestRender:
    def test_empty_cart_shows_placeholder(self, view):
        cart = view.render()
        assert cart.is_empty is True
        assert cart.items == []
        assert cart.empty_message == EMPTY_CART_MESSAGE
        assert cart.subtotal_text == "0 kr"
        assert cart.badge_text == "0"

    def test_rows_in_insertion_order(self, view, store):
        store.add(CARROTS, 3)
        store.add(APPLES, 2)

        cart = view.render()

        assert [row.name for row in cart.items] == ["Carrots", "Apples"]
        apples = cart.items[1]
        assert apples.display_price == "45 kr / kg"
        assert apples.quantity == 2
        assert apples.line_total == 90
        assert apples.line_total_text == "90 kr"
        assert cart.subtotal == 120
        assert cart.subtotal_text == "120 kr"
        assert cart.total_quantity == 5
        assert cart.empty_message is None

    def test_badge_text(self, view, store):
        store.add(APPLES, 2)
        store.add(CARROTS, 1)
        assert view.badge_text() == "3"

    def test_summary_adds_delivery_fee(self, view, store):
        store.add(APPLES, 2)
        summary = view.render_summary()
        assert summary.subtotal == 90
        assert summary.delivery_fee_text == "49 kr"
        assert summary.total == 139
        assert summary.total_text == "139 kr"


class TestSubscription:
    def test_attach_rerenders_on_every_change(self, view, store):
        renders = []
        view.on_render = renders.append

        view.attach()
        store.add(APPLES)
        store.add(APPLES)

        assert len(renders) == 3
        assert renders[-1].items[0].quantity == 2
        assert view.last_render is renders[-1]

    def test_detach_stops_rendering(self, view, store):
        on_render = MagicMock()
        view.on_render = on_render
        view.attach()
        view.detach()

        store.add(APPLES)

        on_render.assert_called_once()


class TestIntents:
    def test_remove_clicked_dispatches_into_store(self, view, store):
        store.add(APPLES, 3)
        view.remove_clicked("1")
        assert store.is_empty()

    def test_quantity_changed_dispatches_into_store(self, view, store):
        store.add(APPLES)
        view.quantity_changed(1, 4)
        assert store.get_item(1).quantity == 4

    def test_quantity_changed_to_zero_removes(self, view, store):
        store.add(APPLES)
        view.quantity_changed(1, 0)
        assert store.get_item(1) is None

    def test_clear_clicked(self, view, store):
        store.add(APPLES)
        store.add(CARROTS)
        view.clear_clicked()
        assert store.is_empty()

    def test_intents_without_handler_are_ignored(self, store):
        store.add(APPLES)
        CartView(store).remove_clicked(1)
        assert store.get_item(1) is not None

    def test_view_emits_intent_objects(self, store):
        on_intent = MagicMock()
        CartView(store, on_intent=on_intent).quantity_changed("2", 5)
        on_intent.assert_called_once_with(CartIntent(action="set_quantity", product_id="2", quantity=5))


class TestDispatcher:
    def test_add_product(self, dispatcher, store):
        assert dispatcher.add_product(APPLES, 2) is True
        assert dispatcher.add_product(APPLES) is True
        assert store.get_item(1).quantity == 3

    def test_unknown_action(self, dispatcher, store):
        assert dispatcher.dispatch(CartIntent(action="explode")) is False
        assert store.is_empty()
