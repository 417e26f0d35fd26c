# tastehub/models/__init__.py
from .food import FoodItem
from .purchase import Purchase
from .user import User
from .chat import ChatMessage, Conversation
from .processed_request import ProcessedRequest

# Export all models
__all__ = [
    "FoodItem",
    "Purchase",
    "User",
    "ChatMessage",
    "Conversation",
    "ProcessedRequest",
]
