from django.apps import AppConfig


class ActivityConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.activity"
    label = "activity"

    def ready(self) -> None:
        from shared.application.message_bus import message_bus

        from .handlers import EVENT_HANDLERS

        for event_type, handlers in EVENT_HANDLERS.items():
            for handler in handlers:
                message_bus.register_event_handler(event_type, handler)
