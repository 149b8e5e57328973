from django.apps import AppConfig


class BookingsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.bookings"
    label = "bookings"

    def ready(self) -> None:
        from shared.application.message_bus import message_bus

        from .application.command_handlers import get_command_handlers

        for command_type, handler in get_command_handlers().items():
            message_bus.register_command_handler(command_type, handler)
