#/auth/router.py

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse, RedirectResponse
from ..deps import get_action_context
from ..schemas import CreateAccountIn, EmailIn, VerifyOTPIn
from ..services import ActionContext, identity
from ..utils.response import success, error

router = APIRouter()

@router.post("/register")
def register(payload: CreateAccountIn, ctx: ActionContext = Depends(get_action_context)):
    result = identity.create_account(ctx, payload)
    return success(data=result, message="OTP sent to email", code=200)

@router.post("/login")
def login(payload: EmailIn, ctx: ActionContext = Depends(get_action_context)):
    result = identity.sign_in(ctx, payload)
    if result["accountId"] is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=error(result["error"], 404, {"code": "USER_NOT_FOUND", "accountId": None}),
        )

    return success(data=result, message="OTP sent to email", code=200)

@router.post("/verify-otp")
def verify(payload: VerifyOTPIn, response: Response, ctx: ActionContext = Depends(get_action_context)):
    result = identity.verify_secret(ctx, payload)
    ctx.session.apply(response)
    return success(data=result, message="Logged in", code=200)

@router.post("/logout")
def logout(ctx: ActionContext = Depends(get_action_context)):
    redirect_to = identity.sign_out(ctx)
    response = RedirectResponse(url=redirect_to, status_code=status.HTTP_303_SEE_OTHER)
    return ctx.session.apply(response)
