import json
from datetime import date, datetime
from typing import Any, Optional

from fastapi import Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class EnvelopeJSONEncoder(json.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, BaseModel):
            return obj.model_dump(mode="json")
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        return str(obj)


def build_response(
    status_code: int,
    status: str = None,
    message: str = None,
    data: Any = None,
    error: Optional[str] = None,
    headers: Optional[dict] = None,
) -> Response:
    if status_code == 204:
        return Response(status_code=204, headers=headers)

    response = {}

    if status is not None:
        response["status"] = status

    if message is not None:
        response["message"] = message

    if data is not None:
        if isinstance(data, BaseModel):
            response["data"] = data.model_dump(mode="json")
        elif isinstance(data, list) and all(isinstance(item, BaseModel) for item in data):
            response["data"] = [item.model_dump(mode="json") for item in data]
        else:
            response["data"] = json.loads(json.dumps(data, cls=EnvelopeJSONEncoder))

    if error is not None:
        response["error"] = error

    return JSONResponse(
        content=response,
        status_code=status_code,
        media_type="application/json",
        headers=headers,
    )
