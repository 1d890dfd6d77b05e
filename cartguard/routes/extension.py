# cartguard/routes/extension.py
import random
from datetime import datetime, timezone
from typing import Callable

from fastapi import APIRouter, Depends, Request

from ..config import settings
from ..errors import Unauthorized
from ..rules.ruleset import RandInt
from ..schemas import ErrorResponse, ExtensionInput, SuccessResponse, dump_actions
from ..services.dispatcher import dispatch
from ..utils.security import verify_authorization_header

router = APIRouter(tags=["extension"])

# overridden in tests through app.dependency_overrides
def get_randint() -> RandInt:
    return random.randint

def get_clock() -> Callable[[], datetime]:
    return lambda: datetime.now(timezone.utc)

def require_authorization(request: Request) -> None:
    if not verify_authorization_header(request.headers.get("Authorization"), settings.EXTENSION_AUTH_HEADER):
        raise Unauthorized("Invalid or missing Authorization header")

@router.post(
    "/service",
    response_model=SuccessResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    dependencies=[Depends(require_authorization)],
)
def service(payload: ExtensionInput,
            randint: RandInt = Depends(get_randint),
            clock: Callable[[], datetime] = Depends(get_clock)):
    actions = dispatch(payload.action, payload.resource, now=clock(), randint=randint)
    return {"actions": dump_actions(actions)}
