from .user import UserRegister, UserLogin, UserCreate, UserUpdate, UserOut, UserBasic
from .tokens import LoginResponse
from .issue import IssueAssign, IssuePatch, IssueOut
from .conversation import ConversationOut, ConversationThreadOut
