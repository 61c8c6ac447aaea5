import ssl
import logging
import threading
from typing import Any, Dict, Optional, Tuple, Union

import httpx

from pdb_gateway.config.headers import get_headers
from pdb_gateway.models.server import url_host

logger = logging.getLogger(__name__)

class HttpClientFactory:
    """
    Провайдер соединений для Executor: get_connection(host, port) -> httpx.Client.
    Кэширует один клиент на (host, port); keep-alive и пул сокетов - на стороне httpx.
    """

    def __init__(self, settings: Any, timeout: Optional[float] = None, transport: Optional[httpx.BaseTransport] = None):
        self.settings = settings
        self.timeout = timeout if timeout is not None else settings.SERVER_URL_TIMEOUT
        # transport подменяется в тестах (httpx.MockTransport)
        self._transport = transport
        self._clients: Dict[Tuple[str, int], httpx.Client] = {}
        self._lock = threading.Lock()

    def _build_verify(self) -> Union[bool, ssl.SSLContext]:
        """CA из настроек или системное хранилище; клиентский сертификат - если задан."""
        ca_file = getattr(self.settings, "SSL_CA_FILE", None)
        cert_file = getattr(self.settings, "SSL_CERT_FILE", None)
        key_file = getattr(self.settings, "SSL_KEY_FILE", None)

        if not ca_file and not cert_file:
            return True

        context = ssl.create_default_context(cafile=str(ca_file) if ca_file else None)
        if cert_file:
            context.load_cert_chain(str(cert_file), str(key_file) if key_file else None)
        return context

    def _create_client(self, host: str, port: int) -> httpx.Client:
        kwargs: Dict[str, Any] = dict(
            base_url=f"https://{url_host(host)}:{port}",
            headers=get_headers(getattr(self.settings, "USER_AGENT", None)),
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=False,
        )
        if self._transport is not None:
            kwargs["transport"] = self._transport
        else:
            kwargs["verify"] = self._build_verify()

        try:
            return httpx.Client(**kwargs)
        except Exception as e:
            logger.error(f"HTTP Client Init Failed. Server: {host}:{port}. Error class: {e.__class__.__name__}")
            raise

    def get_connection(self, host: str, port: int) -> httpx.Client:
        key = (host, port)
        with self._lock:
            client = self._clients.get(key)
            if client is None or client.is_closed:
                logger.debug(f"Opening HTTP client for {host}:{port}")
                client = self._create_client(host, port)
                self._clients[key] = client
            return client

    def close(self) -> None:
        with self._lock:
            for client in self._clients.values():
                client.close()
            self._clients.clear()

    def __enter__(self) -> "HttpClientFactory":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
