"""Authentication endpoints: sign-up, sign-in, sign-out, slide-session, delete."""

from __future__ import annotations

from flask import Blueprint

from lumir_auth.api.deps import auth_service, json_body, json_response, session_tokens
from lumir_auth.api.policy import api_route
from lumir_auth.schemas import (
    SignInSchema,
    SignUpResponseSchema,
    SignUpSchema,
    TokenPairSchema,
    UserSchema,
)
from lumir_auth.services.auth import SignInIn, SignUpIn

bp = Blueprint("auth", __name__)

signup_schema = SignUpSchema()
signin_schema = SignInSchema()
signup_response_schema = SignUpResponseSchema()
token_schema = TokenPairSchema()
user_schema = UserSchema()


@api_route(bp, "/signup", methods=["POST"], public=True)
def signup():
    """Create an account and return its public projection."""

    payload = signup_schema.load(json_body())
    user = auth_service().sign_up(SignUpIn(**payload))
    return json_response(signup_response_schema.dump(user), status=201)


@api_route(bp, "/signin", methods=["POST"], public=True)
def signin():
    """Validate credentials and issue an access/refresh pair."""

    payload = signin_schema.load(json_body())
    pair = auth_service().sign_in(SignInIn(**payload))
    return json_response(token_schema.dump(pair))


@api_route(bp, "/signout", methods=["POST"], allow_expired=True)
def signout():
    """Revoke the presented access token and the caller's refresh token."""

    auth_service().sign_out(session_tokens())
    return json_response({"message": "Signed out"})


@api_route(bp, "/slide-session", methods=["POST"], allow_expired=True)
def slide_session():
    """Exchange the presented pair for a fresh one."""

    pair = auth_service().slide_session(session_tokens())
    return json_response(token_schema.dump(pair))


@api_route(bp, "/delete", methods=["DELETE"])
def delete_account():
    """Sign out and delete the caller's account."""

    user = auth_service().delete_account(session_tokens())
    return json_response(user_schema.dump(user))
