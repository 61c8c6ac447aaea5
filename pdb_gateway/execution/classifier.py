import ssl
import concurrent.futures
from typing import Optional

import httpx

from pdb_gateway.core.exceptions import (
    PdbError,
    InventorySearchError,
    CommandSubmissionError,
    SoftWriteFailError,
)
from pdb_gateway.execution.attempt_log import AttemptLogger
from pdb_gateway.models.common import ResponseError
from pdb_gateway.models.server import ServerUrl

CERT_MISMATCH_PATTERN = "did not match server certificate; expected one of"

TIMEOUT_ERRORS = (TimeoutError, concurrent.futures.TimeoutError, httpx.TimeoutException)

# Сокет, TLS, протокол, I/O. OSError покрывает socket.error и ConnectionError.
TRANSPORT_ERRORS = (httpx.TransportError, ssl.SSLError, OSError)


def is_certificate_mismatch(e: BaseException) -> bool:
    """
    Единственное место, где распознается несовпадение сертификата.
    Привязка к тексту сообщения хрупкая; заменить на код ошибки, если транспорт его отдаст.
    """
    return CERT_MISMATCH_PATTERN in str(e)


def _is_raised_not_found(e: BaseException) -> bool:
    # raise_for_status() на 404 - для нас это сетевой сбой, а не аутентичный not found
    return isinstance(e, httpx.HTTPStatusError) and e.response.status_code == 404


def check_http_response(
    response: httpx.Response,
    server_url: ServerUrl,
    route: str,
    log: AttemptLogger,
) -> Optional[ResponseError]:
    """
    Классификатор ответа. None означает, что ответ принят (итог решает вызывающий код).
    """
    status = response.status_code
    message = response.reason_phrase

    # 1. Сбой сервера -> следующий server_url
    if status >= 500:
        log.server_error(server_url, route, message)
        return ResponseError.SERVER_ERROR

    # 2. 404: JSON-тело означает аутентичный "not found",
    # пустое / HTML тело - сервер стартует или неправильно настроен
    if status == 404:
        body = response.text
        if body and body[0] == "{":
            log.not_found(server_url, route, message)
            return ResponseError.NOTFOUND
        log.other_404(server_url, route, message)
        return ResponseError.OTHER_404

    return None


def classify_exception(
    e: BaseException,
    server_url: ServerUrl,
    route: str,
    log: AttemptLogger,
    timeout: float,
    soft_write_failure: bool,
) -> BaseException:
    """
    Классификатор исключений попытки.
    Возвращает исключение, если оно recoverable (уже залогировано).
    Все остальное пробрасывается без изменений (Fail Fast).
    """
    # 1. Таймаут попытки
    if isinstance(e, TIMEOUT_ERRORS):
        log.timed_out(server_url, route, timeout)
        return e

    # 2. Транспорт (ConnectError, SSL, ProtocolError, ...) и 404, поднятый как исключение
    if isinstance(e, TRANSPORT_ERRORS) or _is_raised_not_found(e):
        log.connection_failed(server_url, route, str(e))
        return e

    # 3. Доменные ошибки
    if isinstance(e, InventorySearchError):
        log.inventory_search_failed(server_url, str(e))
        return e

    if isinstance(e, CommandSubmissionError):
        log.command_submission_failed(server_url, e.command, e.for_whom, str(e), soft_write_failure)
        return e

    if isinstance(e, SoftWriteFailError):
        log.soft_write_failed(server_url, e.command, e.for_whom, str(e))
        return e

    # 4. Прочие ошибки фреймворка: recoverable только при несовпадении сертификата
    if isinstance(e, PdbError) and is_certificate_mismatch(e):
        log.connection_failed(server_url, route, str(e))
        return e

    raise e
