from typing import Iterable, Tuple, Union
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, ValidationError

from pdb_gateway.core.exceptions import ConfigurationError

DEFAULT_PORTS = {"https": 443, "http": 80}


def url_host(host: str) -> str:
    """IPv6-литерал в URL пишется в квадратных скобках (urlsplit их снимает)."""
    if ":" in host and not host.startswith("["):
        return f"[{host}]"
    return host


class ServerUrl(BaseModel):
    """Один front-end PuppetDB из списка server_urls (неизменяемый)."""
    scheme: str = "https"
    host: str
    port: int
    base_route: str = "/"

    model_config = ConfigDict(frozen=True)

    @classmethod
    def parse(cls, url: str) -> "ServerUrl":
        parsed = urlsplit(url.strip())
        if not parsed.hostname:
            raise ConfigurationError(f"Invalid server_url '{url}': host is missing")
        try:
            port = parsed.port or DEFAULT_PORTS.get(parsed.scheme, 443)
        except ValueError as e:
            raise ConfigurationError(f"Invalid server_url '{url}': {e}") from e

        # Хвостовой слэш отрезаем, join_route сам поставит разделитель
        base_route = parsed.path.rstrip("/") or "/"
        return cls(scheme=parsed.scheme, host=parsed.hostname, port=port, base_route=base_route)

    def __str__(self) -> str:
        path = "" if self.base_route == "/" else self.base_route
        return f"{self.scheme}://{url_host(self.host)}:{self.port}{path}"


def _convert_and_validate_url(url: str) -> ServerUrl:
    parsed = urlsplit(url.strip())
    if parsed.scheme != "https":
        raise ConfigurationError(
            f"PuppetDB 'server_urls' must be https, found '{url}'"
        )
    if parsed.query or parsed.fragment:
        raise ConfigurationError(
            f"PuppetDB 'server_urls' cannot contain URL parameters or fragments, found '{url}'"
        )
    return ServerUrl.parse(url)


class PdbConfig(BaseModel):
    """
    Неизменяемая конфигурация Executor.
    Собирается один раз (Settings или YAML) и передается по ссылке.
    """
    server_urls: Tuple[ServerUrl, ...]
    server_url_timeout: float = 30.0
    soft_write_failure: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def server_url_config(self) -> bool:
        """True, если серверов больше одного (включает подсказку про failover в логах)."""
        return len(self.server_urls) > 1

    @classmethod
    def from_values(
        cls,
        server_urls: Union[str, Iterable[str]],
        server_url_timeout: float = 30.0,
        soft_write_failure: Union[bool, str] = False,
    ) -> "PdbConfig":
        if isinstance(server_urls, str):
            server_urls = server_urls.split(",")
        urls = [u.strip() for u in server_urls if u and u.strip()]
        if not urls:
            raise ConfigurationError("PuppetDB 'server_urls' must contain at least one URL")

        try:
            timeout = float(server_url_timeout)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"PuppetDB 'server_url_timeout' must be a number, found '{server_url_timeout}'"
            ) from e
        if timeout <= 0:
            raise ConfigurationError(
                f"PuppetDB 'server_url_timeout' must be positive, found '{server_url_timeout}'"
            )

        server_url_list = tuple(_convert_and_validate_url(u) for u in urls)
        # soft_write_failure валидирует pydantic: "false" / "no" / "0" -> False
        try:
            return cls(
                server_urls=server_url_list,
                server_url_timeout=timeout,
                soft_write_failure=soft_write_failure,
            )
        except ValidationError as e:
            raise ConfigurationError(
                f"PuppetDB 'soft_write_failure' must be a boolean, found '{soft_write_failure}'"
            ) from e
