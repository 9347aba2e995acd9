# storeit/services/identity.py
import logging
import uuid
from typing import Optional

from .. import config
from ..errors import OtpDispatchError, SessionCreationError, handle_error
from ..platform import Query, create_admin_client, create_session_client
from ..schemas import CreateAccountIn, EmailIn, VerifyOTPIn
from .context import ActionContext

logger = logging.getLogger(__name__)


def get_user_by_email(ctx: ActionContext, email: str) -> Optional[dict]:
    try:
        databases = create_admin_client(ctx.db).databases
        result = databases.list_documents(
            config.USERS_COLLECTION_ID,
            [Query.equal("email", [email])],
        )
        return result["documents"][0] if result["total"] > 0 else None
    except Exception as error:
        handle_error(error, "Failed to get user by email")


def send_email_otp(ctx: ActionContext, params: EmailIn) -> str:
    """Mint an email OTP and return the account id it is bound to."""
    try:
        account = create_admin_client(ctx.db).account
        token = account.create_email_token(uuid.uuid4().hex, params.email)

        if not token or not token.get("userId"):
            raise OtpDispatchError("Email token creation failed")

        return token["userId"]
    except Exception as error:
        handle_error(error, "Failed to send email OTP")


def create_account(ctx: ActionContext, params: CreateAccountIn) -> dict:
    """Create the user on first call; later calls for the same email return the same accountId."""
    try:
        existing_user = get_user_by_email(ctx, params.email)

        if existing_user:
            return {"accountId": existing_user["accountId"]}

        account_id = send_email_otp(ctx, EmailIn(email=params.email))

        databases = create_admin_client(ctx.db).databases
        databases.create_document(
            config.USERS_COLLECTION_ID,
            uuid.uuid4().hex,
            {
                "fullName": params.fullName,
                "email": params.email,
                "avatar": config.AVATAR_PLACEHOLDER_URL,
                "accountId": account_id,
            },
        )
        logger.info("Created user for account %s", account_id)

        return {"accountId": account_id}
    except Exception as error:
        handle_error(error, "Failed to create account")


def verify_secret(ctx: ActionContext, params: VerifyOTPIn) -> dict:
    """Exchange an OTP for a session and store the secret on ``ctx.session``."""
    try:
        account = create_admin_client(ctx.db).account
        session = account.create_session(params.accountId, params.password)

        if not session or not session.get("secret"):
            raise SessionCreationError("Failed to create session")

        ctx.session.set_secret(session["secret"])

        return {"sessionId": session["$id"]}
    except Exception as error:
        handle_error(error, "Failed to verify OTP")


def get_current_user(ctx: ActionContext) -> Optional[dict]:
    # no cookie at all is "signed out", not an error
    if not ctx.session.secret:
        return None

    try:
        client = create_session_client(ctx.db, ctx.session)
        result = client.account.get()

        user = client.databases.list_documents(
            config.USERS_COLLECTION_ID,
            [Query.equal("accountId", [result["$id"]])],
        )

        if user["total"] <= 0:
            return None

        return user["documents"][0]
    except Exception as error:
        handle_error(error, "Failed to get current user")


def sign_out(ctx: ActionContext) -> str:
    """End the current session. Always clears the cookie and returns the sign-in path."""
    try:
        client = create_session_client(ctx.db, ctx.session)
        client.account.delete_session()
    except Exception as error:
        logger.error("Failed to sign out user: %s", error, exc_info=error)
    finally:
        ctx.session.clear()

    return config.SIGN_IN_PATH


def sign_in(ctx: ActionContext, params: EmailIn) -> dict:
    try:
        existing_user = get_user_by_email(ctx, params.email)

        # TODO: throttle repeated OTP requests per email
        if existing_user:
            send_email_otp(ctx, params)
            return {"accountId": existing_user["accountId"]}

        return {"accountId": None, "error": "User not found"}
    except Exception as error:
        handle_error(error, "Failed to sign in user")
