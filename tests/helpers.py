import json
from typing import List

import httpx


class RecordingSleep:
    """Подменяет time.sleep: запоминает паузы, не ждёт."""

    def __init__(self):
        self.calls: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def json_response(status_code: int, payload) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(payload).encode("utf-8"))


def ok(data) -> httpx.Response:
    return json_response(200, {"code": 200, "status": "OK", "data": data})
