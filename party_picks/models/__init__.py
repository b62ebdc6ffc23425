from party_picks import db  # noqa: F401 - imported for model imports

from .party import Party
from .party_member import PartyMember
from .prediction import Prediction
from .profile import Profile
from .result import Result
from . import policies  # noqa: F401 - registers the storage write guards

__all__ = [
    "Party",
    "PartyMember",
    "Prediction",
    "Profile",
    "Result",
]
