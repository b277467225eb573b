"""Transactional mail endpoints. Delivery happens in the background."""

from __future__ import annotations

from flask import Blueprint

from lumir_auth.api.deps import json_body, json_response, mail_service
from lumir_auth.api.policy import api_route
from lumir_auth.schemas import SendMailSchema

bp = Blueprint("mail", __name__)

send_mail_schema = SendMailSchema()


@api_route(bp, "/confirmation", methods=["POST"], public=True)
def send_confirmation():
    payload = send_mail_schema.load(json_body())
    mail_service().send_confirmation(**payload)
    return json_response({"message": "Mail queued"})


@api_route(bp, "/welcome", methods=["POST"], public=True)
def send_welcome():
    payload = send_mail_schema.load(json_body())
    mail_service().send_welcome(**payload)
    return json_response({"message": "Mail queued"})


@api_route(bp, "/goodbye", methods=["POST"], public=True)
def send_goodbye():
    payload = send_mail_schema.load(json_body())
    mail_service().send_goodbye(**payload)
    return json_response({"message": "Mail queued"})


@api_route(bp, "/reset-password", methods=["POST"], public=True)
def send_reset_password():
    payload = send_mail_schema.load(json_body())
    mail_service().send_reset_password(**payload)
    return json_response({"message": "Mail queued"})
