from .user import UserController

__all__ = ["UserController"]
