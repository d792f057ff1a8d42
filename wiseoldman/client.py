import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

import aiohttp

from config import CONFIG
from utils.exceptions import ExternalServiceError, NotFoundError, VoidlingError
from wiseoldman.models import (
    AddParticipantsResult,
    Competition,
    CreatedCompetition,
    Player,
)


def to_wom_timestamp(when: datetime) -> str:
    """Format as UTC so WOM and the bot never disagree about offsets"""
    return when.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.000Z")


class WiseOldManClient:
    """Thin async client for the parts of the Wise Old Man v2 API we use"""

    def __init__(
        self,
        base_url: str = CONFIG.WOM_BASE_URL,
        timeout: float = CONFIG.WOM_TIMEOUT,
        user_agent: str = CONFIG.WOM_USER_AGENT,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.headers = {"Content-Type": "application/json", "User-Agent": user_agent}

    async def request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        not_found: VoidlingError = VoidlingError.PLAYER_NOT_FOUND,
    ) -> Any:
        """Send a request, `not_found` names what a 404 from this endpoint means"""
        url = self.base_url + path
        try:
            async with aiohttp.ClientSession(
                headers=self.headers, timeout=self.timeout
            ) as session:
                async with session.request(method, url, json=json) as response:
                    if response.status == 404:
                        raise NotFoundError(not_found, url)
                    if response.status not in (200, 201):
                        body = await response.text()
                        logging.info(f"failed to {method} {url}: {response.status}")
                        raise ExternalServiceError(
                            f"unexpected status {response.status}: {body}",
                            status=response.status,
                        )
                    return await response.json()
        except asyncio.TimeoutError as e:
            raise ExternalServiceError(f"{method} {url} timed out") from e
        except aiohttp.ClientError as e:
            raise ExternalServiceError(f"{method} {url} failed: {e}") from e

    async def get_player(self, username: str) -> Player:
        return Player.from_json(await self.request("GET", f"/players/{username}"))

    async def update_player(self, username: str) -> Player:
        """Ask WOM to pull fresh hiscores for the player"""
        return Player.from_json(await self.request("POST", f"/players/{username}"))

    async def create_competition(
        self, title: str, metric: str, starts_at: datetime, ends_at: datetime
    ) -> CreatedCompetition:
        data = await self.request(
            "POST",
            "/competitions",
            json={
                "title": title,
                "metric": metric,
                "startsAt": to_wom_timestamp(starts_at),
                "endsAt": to_wom_timestamp(ends_at),
            },
        )
        return CreatedCompetition(
            competition=Competition.from_json(data["competition"]),
            verification_code=data["verificationCode"],
        )

    async def add_participants(
        self, competition_id: int, usernames: list[str], verification_code: str
    ) -> AddParticipantsResult:
        data = await self.request(
            "POST",
            f"/competitions/{competition_id}/participants",
            json={"verificationCode": verification_code, "participants": usernames},
            not_found=VoidlingError.COMPETITION_NOT_FOUND,
        )
        return AddParticipantsResult(
            count=data.get("count", 0), message=data.get("message", "")
        )

    async def get_competition(self, competition_id: int) -> Competition:
        data = await self.request(
            "GET",
            f"/competitions/{competition_id}",
            not_found=VoidlingError.COMPETITION_NOT_FOUND,
        )
        return Competition.from_json(data)
