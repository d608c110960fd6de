from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.orders"
    label = "orders"

    def ready(self) -> None:
        from modules.orders.events import (
            OrderCreated,
            OrderStateChanged,
            PaymentRecorded,
        )
        from modules.orders.handlers import (
            order_created_handler,
            order_state_changed_handler,
            payment_recorded_handler,
        )
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(OrderCreated, order_created_handler)
        event_bus.subscribe(OrderStateChanged, order_state_changed_handler)
        event_bus.subscribe(PaymentRecorded, payment_recorded_handler)
