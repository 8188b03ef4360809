"""User-facing notifications raised by view-model operations."""

from typing import Protocol

from logistx.utils.logger import get_logger

logger = get_logger("logistx.notify")


class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class LogNotifier:
    """Default notifier: writes each notification to the structured log."""

    def success(self, message: str) -> None:
        logger.info("notify.success", message=message)

    def error(self, message: str) -> None:
        logger.warning("notify.error", message=message)


class CollectingNotifier(LogNotifier):
    """Keeps (level, message) pairs in memory in addition to logging them."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def success(self, message: str) -> None:
        super().success(message)
        self.messages.append(("success", message))

    def error(self, message: str) -> None:
        super().error(message)
        self.messages.append(("error", message))

    @property
    def errors(self) -> list[str]:
        return [m for level, m in self.messages if level == "error"]

    @property
    def successes(self) -> list[str]:
        return [m for level, m in self.messages if level == "success"]

    def clear(self) -> None:
        self.messages.clear()
