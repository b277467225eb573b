from lumir_auth.services.users.dto import PageIn, UserUpdateIn
from lumir_auth.services.users.service import UserService

__all__ = ["PageIn", "UserService", "UserUpdateIn"]
