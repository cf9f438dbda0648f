"""
api/routes/sessions.py -- Password login.

Routes:
  POST /login -- exchange e-mail + password for a bearer session token

Security:
  SessionService.authenticate() runs bcrypt even for unknown e-mails and
  returns one message for both failure causes. Do NOT inline a store lookup
  here -- that re-introduces account enumeration.
  Cache-Control: no-store on every login response, success or failure.
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.models import ErrorDetail, ErrorResponse, LoginRequest, LoginResponse
from auth.errors import Unauthorized
from auth.sessions import SessionService

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate with e-mail and password; return a 24h bearer token."""
    sessions: SessionService = request.app.state.sessions
    try:
        token = sessions.authenticate(body.email, body.password)
    except Unauthorized as exc:
        resp = JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=ErrorDetail(code=exc.code, message=exc.message)).model_dump(),
        )
        resp.headers["Cache-Control"] = "no-store"
        return resp

    resp = JSONResponse(status_code=200, content=LoginResponse(token=token).model_dump())
    resp.headers["Cache-Control"] = "no-store"
    return resp
