from loguru import logger


class Connections:
    """Keeps track of signal handlers so they can be dropped as a unit."""

    def __init__(self):
        self._handlers = []

    def __len__(self):
        return len(self._handlers)

    def connect(self, obj, signal: str, callback, *args) -> int:
        handler_id = obj.connect(signal, callback, *args)
        self._handlers.append((obj, signal, handler_id))
        return handler_id

    def disconnect_all(self) -> None:
        while self._handlers:
            obj, signal, handler_id = self._handlers.pop()
            if obj.handler_is_connected(handler_id):
                obj.disconnect(handler_id)
            else:
                logger.debug(f"Handler for '{signal}' was already disconnected")
