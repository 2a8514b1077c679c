from .user import User
from .issue import Issue
from .conversation import Conversation
