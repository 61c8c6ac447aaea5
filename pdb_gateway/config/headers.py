from typing import Dict, Optional

# Базовые заголовки.
# ВАЖНО: Мы НЕ указываем "Accept-Encoding".
# httpx сам добавит "gzip, deflate, br" и автоматически распакует ответ.
BASE_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
    "Connection": "keep-alive",
}

DEFAULT_USER_AGENT = "pdb-gateway/0.1.0"


def get_headers(user_agent: Optional[str] = None) -> Dict[str, str]:
    """Заголовки для всех запросов к PuppetDB"""
    headers = BASE_HEADERS.copy()
    headers["User-Agent"] = user_agent or DEFAULT_USER_AGENT
    return headers
