from typing import Optional

import httpx


# Helper для создания response, как его вернул бы httpx.Client
def make_response(status_code: int, text: str = "", reason: Optional[str] = None) -> httpx.Response:
    req = httpx.Request("GET", "https://example.com")
    response = httpx.Response(status_code, text=text, request=req)
    if reason is not None:
        response.extensions["reason_phrase"] = reason.encode("ascii")
    return response
