import logging
import concurrent.futures
from typing import Any, Callable, Optional, Protocol, TypeVar, Union

import httpx

from pdb_gateway.core.exceptions import NotFoundError, RequestExecutionError
from pdb_gateway.execution.attempt_log import AttemptLogger
from pdb_gateway.execution.classifier import check_http_response, classify_exception
from pdb_gateway.models.common import AttemptOutcome, OutcomeKind, RequestMode, ResponseError
from pdb_gateway.models.server import PdbConfig, ServerUrl
from pdb_gateway.transport.paths import join_route

T = TypeVar("T")

# action(connection, route) -> response; построение тела запроса - на стороне вызывающего кода
Action = Callable[[Any, str], httpx.Response]


class ConnectionProvider(Protocol):
    def get_connection(self, host: str, port: int) -> Any:
        ...


def _run_with_timeout(func: Callable[[], T], timeout: float) -> T:
    """
    Бюджет времени на одну попытку (получение соединения + action).
    По истечении поднимает TimeoutError; зависший поток добьет таймаут самого httpx-клиента.
    """
    pool = concurrent.futures.ThreadPoolExecutor(max_workers=1, thread_name_prefix="pdb-attempt")
    try:
        future = pool.submit(func)
        return future.result(timeout=timeout)
    finally:
        pool.shutdown(wait=False)


class FailoverExecutor:
    """
    Выполняет одну логическую операцию по списку server_urls.
    Строго последовательно, один проход: первый принятый ответ возвращается,
    recoverable-сбои логируются и ведут к следующему серверу,
    неизвестные ошибки пробрасываются сразу (Fail Fast).
    """

    def __init__(self, config: PdbConfig, connection_provider: ConnectionProvider, logger: Optional[logging.Logger] = None):
        self.config = config
        self.connection_provider = connection_provider
        self.logger = logger or logging.getLogger(__name__)

    def execute(
        self,
        path_suffix: str,
        mode: Union[RequestMode, str],
        action: Action,
    ) -> httpx.Response:
        mode = RequestMode(mode)
        log = AttemptLogger(self.logger, self.config.server_url_config)
        response_error: Optional[ResponseError] = None

        for server_url in self.config.server_urls:
            outcome = self._attempt(server_url, path_suffix, mode, action, log)
            if outcome.is_success:
                return outcome.response
            # Попытка, упавшая исключением, не затирает классификацию предыдущего ответа
            if outcome.response_error is not None:
                response_error = outcome.response_error

        raise self._request_error(response_error, path_suffix)

    def _attempt(
        self,
        server_url: ServerUrl,
        path_suffix: str,
        mode: RequestMode,
        action: Action,
        log: AttemptLogger,
    ) -> AttemptOutcome:
        route = join_route(server_url.base_route, path_suffix)
        self.logger.debug(f"Sending {mode.value} to {server_url.host}:{server_url.port} at route {route}")

        def call() -> httpx.Response:
            connection = self.connection_provider.get_connection(server_url.host, server_url.port)
            return action(connection, route)

        try:
            response = _run_with_timeout(call, self.config.server_url_timeout)
        except Exception as e:
            # Неизвестная ошибка выйдет отсюда наружу и прервет весь цикл
            error = classify_exception(
                e,
                server_url,
                route,
                log,
                timeout=self.config.server_url_timeout,
                soft_write_failure=self.config.soft_write_failure,
            )
            return AttemptOutcome(kind=OutcomeKind.RECOVERABLE, server_url=str(server_url), route=route, error=error)

        response_error = check_http_response(response, server_url, route, log)
        kind = OutcomeKind.SUCCESS if response_error is None else OutcomeKind.RECOVERABLE
        return AttemptOutcome(
            kind=kind,
            server_url=str(server_url),
            route=route,
            response=response,
            response_error=response_error,
        )

    def _request_error(self, response_error: Optional[ResponseError], path_suffix: str) -> RequestExecutionError:
        config = self.config
        not_found = response_error == ResponseError.NOTFOUND

        if config.server_url_config:
            server_url_strings = ", ".join(str(u) for u in config.server_urls)
            if not_found:
                return NotFoundError(
                    f"Failed to find '{path_suffix}' on any of the following 'server_urls': {server_url_strings}"
                )
            return RequestExecutionError(
                f"Failed to execute '{path_suffix}' on any of the following 'server_urls': {server_url_strings}"
            )

        uri = config.server_urls[0]
        if not_found:
            return NotFoundError(f"Failed to find '{path_suffix}' on server: '{uri.host}' and port: '{uri.port}'")
        return RequestExecutionError(f"Failed to execute '{path_suffix}' on server: '{uri.host}' and port: '{uri.port}'")
