"""User directory endpoints: profile, lookup by id, admin listing."""

from __future__ import annotations

from flask import Blueprint, request

from lumir_auth.api.deps import current_user_id, json_body, json_response, user_service
from lumir_auth.api.policy import api_route
from lumir_auth.models.user import UserRole
from lumir_auth.schemas import (
    PageQuerySchema,
    UserIdQuerySchema,
    UserPageSchema,
    UserSchema,
    UserUpdateSchema,
)
from lumir_auth.services.users import PageIn, UserUpdateIn

bp = Blueprint("users", __name__)

user_schema = UserSchema()
user_update_schema = UserUpdateSchema()
user_id_query_schema = UserIdQuerySchema()
page_query_schema = PageQuerySchema()
user_page_schema = UserPageSchema()


@api_route(bp, "/profile", methods=["GET"])
def get_profile():
    """Return the caller's profile."""

    user = user_service().get_profile(current_user_id())
    return json_response(user_schema.dump(user))


@api_route(bp, "/profile", methods=["PUT", "PATCH"])
def update_profile():
    """Merge the supplied fields into the caller's profile."""

    payload = user_update_schema.load(json_body())
    user = user_service().update_profile(current_user_id(), UserUpdateIn(**payload))
    return json_response(user_schema.dump(user))


@api_route(bp, "", methods=["GET"])
def get_by_id():
    """Return the profile matching ``?id=``."""

    query = user_id_query_schema.load(request.args)
    user = user_service().get_by_id(query["id"])
    return json_response(user_schema.dump(user))


@api_route(bp, "/users", methods=["GET"], roles=[UserRole.ADMIN])
def list_users():
    """Return one page of users (administrators only)."""

    query = page_query_schema.load(request.args)
    page = user_service().list_users(PageIn(page=query["page"], size=query["size"]))
    return json_response(user_page_schema.dump(page))
