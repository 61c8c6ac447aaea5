from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class RequestMode(str, Enum):
    """Тип логической операции, которую вызывающий код отправляет в PuppetDB"""
    QUERY = "query"       # Чтение (/pdb/query/...)
    COMMAND = "command"   # Запись (/pdb/cmd/...)


class ResponseError(str, Enum):
    """Результат проверки HTTP-ответа (None означает, что ответ принят)"""
    SERVER_ERROR = "server_error"   # 5xx
    NOTFOUND = "notfound"           # 404 с JSON-телом (ресурса действительно нет)
    OTHER_404 = "other_404"         # 404 без JSON (сервер стартует / мисконфиг)


class OutcomeKind(str, Enum):
    """Fatal-исход не моделируется: такое исключение просто пробрасывается из Executor"""
    SUCCESS = "success"
    RECOVERABLE = "recoverable"


class AttemptOutcome(BaseModel):
    """Итог одной попытки на одном server_url"""
    kind: OutcomeKind
    server_url: str
    route: str
    response: Optional[Any] = None
    response_error: Optional[ResponseError] = None
    error: Optional[BaseException] = None

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    @property
    def is_success(self) -> bool:
        return self.kind == OutcomeKind.SUCCESS
