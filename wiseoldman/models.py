from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """WOM sends ISO-8601 with a trailing Z"""
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@dataclass
class SkillData:
    metric: str
    experience: int
    rank: int
    level: int
    ehp: float = 0.0


@dataclass
class BossData:
    metric: str
    kills: int
    rank: int
    ehb: float = 0.0


@dataclass
class Player:
    id: int
    username: str
    display_name: str
    type: str = "regular"
    build: str = "main"
    combat_level: int = 3
    exp: int = 0
    ehp: float = 0.0
    ehb: float = 0.0
    updated_at: Optional[datetime] = None
    skills: dict[str, SkillData] = field(default_factory=dict)
    bosses: dict[str, BossData] = field(default_factory=dict)

    @staticmethod
    def from_json(data: dict[str, Any]) -> "Player":
        snapshot = (data.get("latestSnapshot") or {}).get("data") or {}
        skills = {
            name: SkillData(
                metric=s.get("metric", name),
                experience=s.get("experience", 0),
                rank=s.get("rank", -1),
                level=s.get("level", 1),
                ehp=s.get("ehp", 0.0),
            )
            for name, s in (snapshot.get("skills") or {}).items()
        }
        bosses = {
            name: BossData(
                metric=b.get("metric", name),
                kills=b.get("kills", -1),
                rank=b.get("rank", -1),
                ehb=b.get("ehb", 0.0),
            )
            for name, b in (snapshot.get("bosses") or {}).items()
        }
        return Player(
            id=data["id"],
            username=data["username"],
            display_name=data.get("displayName") or data["username"],
            type=data.get("type", "regular"),
            build=data.get("build", "main"),
            combat_level=data.get("combatLevel", 3),
            exp=data.get("exp", 0),
            ehp=data.get("ehp", 0.0),
            ehb=data.get("ehb", 0.0),
            updated_at=parse_timestamp(data.get("updatedAt")),
            skills=skills,
            bosses=bosses,
        )

    def get_skill(self, name: str) -> Optional[SkillData]:
        return self.skills.get(name)

    def get_boss(self, name: str) -> Optional[BossData]:
        return self.bosses.get(name)


@dataclass
class Progress:
    start: int = 0
    end: int = 0
    gained: int = 0


@dataclass
class Participation:
    player: Player
    progress: Progress

    @property
    def gained(self) -> int:
        return self.progress.gained

    @staticmethod
    def from_json(data: dict[str, Any]) -> "Participation":
        # progress is omitted for competitions that haven't started yet
        progress = data.get("progress") or {}
        return Participation(
            player=Player.from_json(data["player"]),
            progress=Progress(
                start=progress.get("start", 0),
                end=progress.get("end", 0),
                gained=progress.get("gained", 0),
            ),
        )


@dataclass
class Competition:
    id: int
    title: str
    metric: str
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
    participations: list[Participation] = field(default_factory=list)

    @staticmethod
    def from_json(data: dict[str, Any]) -> "Competition":
        return Competition(
            id=data["id"],
            title=data.get("title", ""),
            metric=data.get("metric", ""),
            starts_at=parse_timestamp(data.get("startsAt")),
            ends_at=parse_timestamp(data.get("endsAt")),
            participations=[
                Participation.from_json(p) for p in data.get("participations") or []
            ],
        )


@dataclass
class CreatedCompetition:
    competition: Competition
    verification_code: str


@dataclass
class AddParticipantsResult:
    count: int
    message: str
