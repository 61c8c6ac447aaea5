import logging
from typing import Any

from pdb_gateway.models.server import ServerUrl

SERVER_URL_FAIL_MSG = "Failing over to the next PuppetDB server_url in the 'server_urls' list"


def with_failover_hint(message: str, multi_endpoint: bool) -> str:
    """Подсказка про failover добавляется только если серверов больше одного."""
    if multi_endpoint:
        return f"{message} {SERVER_URL_FAIL_MSG}"
    return message


# --- Форматирование (чистые функции, без логгера) ---

def format_timeout(server_url: ServerUrl, route: str, timeout: float) -> str:
    return (
        f"Request to {server_url.host} on {server_url.port} at route {route} timed out "
        f"after {timeout:g} seconds."
    )

def format_connection_error(server_url: ServerUrl, route: str, message: str) -> str:
    return (
        f"Error connecting to {server_url.host} on {server_url.port} at route {route}, "
        f"error message received was '{message}'."
    )

def format_not_found(server_url: ServerUrl, route: str, message: str) -> str:
    return (
        f"HTTP 404 (probably normal) when connecting to {server_url.host} on {server_url.port} "
        f"at route {route}, error message received was '{message}'."
    )

def format_inventory_search(server_url: ServerUrl, message: str) -> str:
    return (
        f"Could not perform inventory search from PuppetDB at {server_url.host}:{server_url.port}: "
        f"'{message}'"
    )

def format_command_failure(server_url: ServerUrl, command: Any, for_whom: Any, message: str) -> str:
    return (
        f"Failed to submit '{command}' command for '{for_whom}' to PuppetDB "
        f"at {server_url.host}:{server_url.port}: '{message}'."
    )

def format_soft_write_failure(server_url: ServerUrl, command: Any, for_whom: Any, message: str) -> str:
    return (
        f"Failed to submit '{command}' command for '{for_whom}' to PuppetDB "
        f"at {server_url.host}:{server_url.port}: '{message}'"
    )


class AttemptLogger:
    """
    Операторские сообщения по исходу попытки.
    Выбирает уровень (debug / warning / error) и решает, нужна ли подсказка про failover.
    """

    def __init__(self, logger: logging.Logger, multi_endpoint: bool):
        self.logger = logger
        self.multi_endpoint = multi_endpoint

    def _warn(self, message: str) -> None:
        self.logger.warning(with_failover_hint(message, self.multi_endpoint))

    def timed_out(self, server_url: ServerUrl, route: str, timeout: float) -> None:
        self._warn(format_timeout(server_url, route, timeout))

    def connection_failed(self, server_url: ServerUrl, route: str, message: str) -> None:
        self._warn(format_connection_error(server_url, route, message))

    def server_error(self, server_url: ServerUrl, route: str, message: str) -> None:
        self._warn(format_connection_error(server_url, route, message))

    def other_404(self, server_url: ServerUrl, route: str, message: str) -> None:
        self._warn(format_connection_error(server_url, route, message))

    def not_found(self, server_url: ServerUrl, route: str, message: str) -> None:
        # Ожидаемое поведение приложения: debug и без подсказки про failover
        self.logger.debug(format_not_found(server_url, route, message))

    def inventory_search_failed(self, server_url: ServerUrl, message: str) -> None:
        self._warn(format_inventory_search(server_url, message))

    def command_submission_failed(
        self, server_url: ServerUrl, command: Any, for_whom: Any, message: str, soft_write_failure: bool
    ) -> None:
        text = format_command_failure(server_url, command, for_whom, message)
        if soft_write_failure:
            # Читается как финальная ошибка, хотя цикл по серверам продолжается
            self.logger.error(text)
        else:
            self._warn(text)

    def soft_write_failed(self, server_url: ServerUrl, command: Any, for_whom: Any, message: str) -> None:
        self._warn(format_soft_write_failure(server_url, command, for_whom, message))
