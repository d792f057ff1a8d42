from wiseoldman.client import WiseOldManClient
from wiseoldman.models import (
    AddParticipantsResult,
    Competition,
    CreatedCompetition,
    Participation,
    Player,
    Progress,
)

__all__ = [
    "AddParticipantsResult",
    "Competition",
    "CreatedCompetition",
    "Participation",
    "Player",
    "Progress",
    "WiseOldManClient",
]
