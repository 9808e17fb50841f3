from django.apps import AppConfig


class OrdersConfig(AppConfig):
    name = "modules.orders"
    label = "orders"
    verbose_name = "Orders"

    def ready(self) -> None:
        from modules.orders import events, handlers
        from shared.infrastructure.bus import event_bus

        # Relayed outbox events reach these handlers through the bus.
        for event_class, handler in (
            (events.OrderCreated, handlers.order_created_handler),
            (events.OrderCancelled, handlers.order_cancelled_handler),
            (events.OrderStatusChanged, handlers.order_status_changed_handler),
        ):
            event_bus.subscribe(event_class, handler)
