# models/__init__.py
from .invite import Invite, InviteCreate, InviteStatus, InviteCompletion, InviteCompletionResult
from .profile import Profile, Role, InstructorEntry
