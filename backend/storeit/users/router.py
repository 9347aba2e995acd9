from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from ..deps import get_action_context
from ..services import ActionContext, identity
from ..utils.response import success, error

router = APIRouter()

@router.get("/me")
def me(ctx: ActionContext = Depends(get_action_context)):
    user = identity.get_current_user(ctx)
    if not user:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content=error(
                message="Not authenticated",
                code=401,
                err={"code": "NOT_AUTHENTICATED"}
            ),
        )

    return success(
        message="User fetched successfully",
        data={
            "id": user["$id"],
            "fullName": user["fullName"],
            "email": user["email"],
            "avatar": user["avatar"],
            "accountId": user["accountId"]
        }
    )
