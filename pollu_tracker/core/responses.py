from fastapi.responses import JSONResponse


class JSONUTF8Response(JSONResponse):
    media_type = "application/json; charset=utf-8"


def message_response(status_code: int, message: str, headers: dict | None = None) -> JSONUTF8Response:
    return JSONUTF8Response(status_code=status_code, content={"message": message}, headers=headers)
