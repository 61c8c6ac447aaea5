import logging
import socket
import ssl

import httpx
import pytest

from helpers import make_response
from pdb_gateway.core.exceptions import (
    CommandSubmissionError,
    InventorySearchError,
    NotFoundError,
    PdbError,
    SoftWriteFailError,
)
from pdb_gateway.execution.attempt_log import SERVER_URL_FAIL_MSG, AttemptLogger
from pdb_gateway.execution.classifier import (
    check_http_response,
    classify_exception,
    is_certificate_mismatch,
)
from pdb_gateway.models.common import ResponseError
from pdb_gateway.models.server import ServerUrl

SERVER = ServerUrl.parse("https://pdb1.example.com:8081")
ROUTE = "/pdb/query/v4"
LOGGER_NAME = "tests.classifier"


@pytest.fixture
def log(caplog):
    caplog.set_level(logging.DEBUG, logger=LOGGER_NAME)
    return AttemptLogger(logging.getLogger(LOGGER_NAME), multi_endpoint=True)


def classify(e, log, soft_write_failure=False):
    return classify_exception(e, SERVER, ROUTE, log, timeout=10, soft_write_failure=soft_write_failure)


# --- Ответы ---

def test_success_response_is_not_classified(log, caplog):
    assert check_http_response(make_response(200, "[]"), SERVER, ROUTE, log) is None
    assert check_http_response(make_response(400, "bad query"), SERVER, ROUTE, log) is None
    assert caplog.records == []


def test_server_error(log, caplog):
    result = check_http_response(make_response(503), SERVER, ROUTE, log)

    assert result == ResponseError.SERVER_ERROR
    [record] = caplog.records
    assert record.levelno == logging.WARNING
    assert "'Service Unavailable'" in record.getMessage()
    assert ROUTE in record.getMessage()
    assert SERVER_URL_FAIL_MSG in record.getMessage()


def test_json_404_is_authentic_not_found(log, caplog):
    result = check_http_response(make_response(404, '{"error": "No such node"}'), SERVER, ROUTE, log)

    assert result == ResponseError.NOTFOUND
    [record] = caplog.records
    assert record.levelno == logging.DEBUG
    assert SERVER_URL_FAIL_MSG not in record.getMessage()


@pytest.mark.parametrize("body", ["", "<html>Not Found</html>", "Not Found"])
def test_non_json_404_is_other_404(log, caplog, body):
    result = check_http_response(make_response(404, body), SERVER, ROUTE, log)

    assert result == ResponseError.OTHER_404
    [record] = caplog.records
    assert record.levelno == logging.WARNING
    assert SERVER_URL_FAIL_MSG in record.getMessage()


# --- Исключения ---

@pytest.mark.parametrize(
    "error",
    [
        TimeoutError(),
        httpx.ReadTimeout("read timed out"),
        httpx.ConnectTimeout("connect timed out"),
    ],
)
def test_timeouts_are_recoverable(log, caplog, error):
    assert classify(error, log) is error
    [record] = caplog.records
    assert record.levelno == logging.WARNING
    assert "timed out after 10 seconds" in record.getMessage()


@pytest.mark.parametrize(
    "error",
    [
        httpx.ConnectError("Connection refused"),
        httpx.RemoteProtocolError("Server disconnected"),
        ssl.SSLError("certificate verify failed"),
        socket.gaierror("Name or service not known"),
        ConnectionResetError("reset by peer"),
        OSError("I/O error"),
    ],
)
def test_transport_errors_are_recoverable(log, caplog, error):
    assert classify(error, log) is error
    [record] = caplog.records
    assert record.levelno == logging.WARNING
    assert record.getMessage().startswith("Error connecting to pdb1.example.com on 8081")


def test_raised_404_is_transport_failure(log, caplog):
    response = make_response(404)
    error = httpx.HTTPStatusError("Not Found", request=response.request, response=response)

    assert classify(error, log) is error
    assert caplog.records[0].levelno == logging.WARNING


def test_raised_500_is_not_swallowed(log):
    response = make_response(500)
    error = httpx.HTTPStatusError("Server Error", request=response.request, response=response)

    with pytest.raises(httpx.HTTPStatusError):
        classify(error, log)


def test_inventory_search_failure(log, caplog):
    error = InventorySearchError("bad inventory query")
    assert classify(error, log) is error
    assert "'bad inventory query'" in caplog.records[0].getMessage()


def test_command_submission_failure_warns_by_default(log, caplog):
    error = CommandSubmissionError("rejected", {"command": "replace facts", "for_whom": "node1"})

    assert classify(error, log) is error
    [record] = caplog.records
    assert record.levelno == logging.WARNING
    assert "'replace facts' command for 'node1'" in record.getMessage()


def test_command_submission_failure_with_soft_write_failure(log, caplog):
    error = CommandSubmissionError("rejected", {"command": "replace facts", "for_whom": "node1"})

    # Остается recoverable, но логируется как ошибка и без подсказки
    assert classify(error, log, soft_write_failure=True) is error
    [record] = caplog.records
    assert record.levelno == logging.ERROR
    assert SERVER_URL_FAIL_MSG not in record.getMessage()


def test_soft_write_fail(log, caplog):
    error = SoftWriteFailError("read-only", {"command": "store report", "for_whom": "node1"})

    assert classify(error, log, soft_write_failure=True) is error
    [record] = caplog.records
    assert record.levelno == logging.WARNING
    assert SERVER_URL_FAIL_MSG in record.getMessage()


def test_certificate_mismatch_is_recoverable(log, caplog):
    error = PdbError(
        "Server hostname 'pdb1' did not match server certificate; expected one of pdb1.example.com, DNS:puppet"
    )

    assert is_certificate_mismatch(error)
    assert classify(error, log) is error
    assert caplog.records[0].levelno == logging.WARNING


@pytest.mark.parametrize(
    "error",
    [PdbError("unexpected"), NotFoundError("nested not found"), ValueError("bug"), KeyError("x")],
)
def test_everything_else_is_reraised_unchanged(log, caplog, error):
    with pytest.raises(type(error)) as exc_info:
        classify(error, log)

    assert exc_info.value is error
    assert caplog.records == []
