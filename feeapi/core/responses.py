from fastapi import HTTPException
from fastapi.responses import JSONResponse

def err(message: str, code: str = "bad_request", http_status: int = 400):
    raise HTTPException(
        status_code=http_status,
        detail={ "status": "error", "data": None, "error": {"code": code, "message": message} },
    )

def message(text: str, http_status: int) -> JSONResponse:
    return JSONResponse(content={"message": text}, status_code=http_status)
