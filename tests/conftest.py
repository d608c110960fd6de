from decimal import Decimal

import pytest
from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.core.cache import cache
from rest_framework.test import APIClient

from modules.carts.models import Cart, CartItem
from modules.carts.repositories.django_repository import CartDjangoRepository
from modules.delivery.repositories.django_repository import DeliveryDjangoRepository
from modules.orders.dtos import CheckoutDTO
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import CheckoutService, TransitionExecutor
from modules.personalization.repositories.django_repository import (
    PersonalizationDjangoRepository,
)
from modules.personalization.services import PersonalizationCopier
from modules.workflow.repositories.django_repository import WorkflowDjangoRepository
from modules.workflow.seeds import seed_order_process
from modules.workflow.services import WorkflowDefinitionStore

User = get_user_model()


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Workflow and users
# ---------------------------------------------------------------------------


@pytest.fixture()
def order_process():
    """The seeded ``ORD`` process (CRE -> PROC -> READY -> DONE)."""
    return seed_order_process()


@pytest.fixture()
def make_user():
    def _make(username, role_setting=None, **extra):
        user = User.objects.create_user(username=username, password="testpass123", **extra)
        if role_setting:
            group, _ = Group.objects.get_or_create(name=getattr(settings, role_setting))
            user.groups.add(group)
        return user

    return _make


def _client_for(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def customer_client(make_user):
    return _client_for(make_user("cliente"))


@pytest.fixture()
def operator_user(make_user):
    return make_user("operador", "ROLE_OPERATOR", first_name="Olga", last_name="Ruiz")


@pytest.fixture()
def operator_client(operator_user):
    return _client_for(operator_user)


@pytest.fixture()
def courier_user(make_user):
    return make_user("repartidor", "ROLE_COURIER")


@pytest.fixture()
def courier_client(courier_user):
    return _client_for(courier_user)


@pytest.fixture()
def supervisor_client(make_user):
    return _client_for(make_user("supervisor", "ROLE_SUPERVISOR"))


# ---------------------------------------------------------------------------
# Carts and checkout
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_cart():
    """Open cart for ``user_id`` with ``(product_id, quantity, unit_price)`` lines."""

    def _make(user_id, lines):
        cart = Cart.objects.create(user_id=user_id)
        for product_id, quantity, unit_price in lines:
            CartItem.objects.create(
                cart=cart,
                product_id=product_id,
                quantity=quantity,
                unit_price=Decimal(unit_price),
            )
        return cart

    return _make


@pytest.fixture()
def workflow_store():
    return WorkflowDefinitionStore(WorkflowDjangoRepository())


@pytest.fixture()
def checkout_service(workflow_store):
    return CheckoutService(
        cart_repository=CartDjangoRepository(),
        order_repository=OrderDjangoRepository(),
        delivery_repository=DeliveryDjangoRepository(),
        workflow_store=workflow_store,
        personalization_copier=PersonalizationCopier(PersonalizationDjangoRepository()),
    )


@pytest.fixture()
def executor(workflow_store):
    return TransitionExecutor(
        order_repository=OrderDjangoRepository(),
        delivery_repository=DeliveryDjangoRepository(),
        workflow_store=workflow_store,
    )


@pytest.fixture()
def placed_order(order_process, make_cart, checkout_service):
    """A single CRE order for user 7 (2 x 50.00)."""
    make_cart(7, [(11, 2, "50.00")])
    result = checkout_service.checkout(CheckoutDTO(user_id=7, payment_method="efectivo"))
    return Order.objects.get(id=result.orders[0].order_id)
