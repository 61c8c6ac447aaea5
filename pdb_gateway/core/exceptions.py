from typing import Any, Dict, Optional


class PdbError(Exception):
    """
    Базовый класс ошибок.
    Все, что не распознано классификатором как сетевой сбой, пробрасывается наружу (Fail Fast).
    """
    pass

class ConfigurationError(PdbError):
    """Некорректные server_urls / timeout в конфигурации."""
    pass

class RequestExecutionError(PdbError):
    """
    Запрос не выполнен ни на одном из server_urls.
    Executor поднимает эту ошибку после исчерпания списка.
    """
    pass

class NotFoundError(RequestExecutionError):
    """Аутентичный 404 (тело ответа - JSON). Ресурса действительно нет."""
    pass

class InventorySearchError(PdbError):
    """Поиск по inventory упал на конкретном сервере."""
    pass

class _CommandContextError(PdbError):
    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        # context: {"command": ..., "for_whom": ...}
        self.context = context or {}
        super().__init__(message)

    @property
    def command(self) -> Any:
        return self.context.get("command")

    @property
    def for_whom(self) -> Any:
        return self.context.get("for_whom")

class CommandSubmissionError(_CommandContextError):
    """Сервер не принял команду (replace facts, store report, ...)."""
    pass

class SoftWriteFailError(_CommandContextError):
    """
    Запись отклонена в режиме soft_write_failure.
    Executor переходит к следующему серверу.
    """
    pass
