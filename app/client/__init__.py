from .gateway import BlogGateway, GatewayError
from .state import BlogState, User, UserRole

__all__ = [
    "BlogGateway",
    "GatewayError",
    "BlogState",
    "User",
    "UserRole",
]
