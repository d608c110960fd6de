from django.apps import AppConfig


class DeliveryConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.delivery"
    label = "delivery"

    def ready(self) -> None:
        from modules.delivery.events import DeliveryStatusChanged
        from modules.delivery.handlers import delivery_status_changed_handler
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(DeliveryStatusChanged, delivery_status_changed_handler)
