"""lib.reviews 数据模型."""

from .review import Review
from .user import User

__all__ = ["Review", "User"]
