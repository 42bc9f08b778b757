"""
kelasguru.engine.gamification — Per-Student Gamification Aggregation
=====================================================================

Combines a student's raw gamification record with the badge catalog and
the badge award table into the payload the student dashboard renders.

Pipeline:
  raw record ─┐
  catalog  ───┼─ (concurrent) → level normalise → badge join → payload
  awards   ───┘

The raw record is the primary fetch: its failure fails the call.  Badge
sources are enrichment: their failure only leaves ``badges`` empty.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from kelasguru.client.accessors import (
    get_badge_awards,
    get_badge_catalog,
    get_raw_gamification,
)
from kelasguru.client.transport import ApiResult
from kelasguru.constants import level_for_xp, parse_int, same_id
from kelasguru.engine.cache import BadgeCache

if TYPE_CHECKING:
    from kelasguru.client.transport import ApiTransport

logger = logging.getLogger(__name__)

__all__ = ["EarnedBadge", "GamificationAggregator", "join_badges"]


# ---------------------------------------------------------------------------
# EarnedBadge: one award merged with its catalog entry
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class EarnedBadge:
    award_id: Any
    name: Any
    description: Any
    icon_url: Any
    xp_reward: Any
    awarded_at: Any

    def to_dict(self) -> dict[str, Any]:
        """Dashboard wire names."""
        return {
            "id": self.award_id,
            "nama_badge": self.name,
            "deskripsi": self.description,
            "icon_url": self.icon_url,
            "xp_reward": self.xp_reward,
            "tanggal_perolehan": self.awarded_at,
        }


def join_badges(
    student_id: Any,
    catalog: Iterable[Mapping[str, Any]],
    awards: Iterable[Mapping[str, Any]],
) -> list[EarnedBadge]:
    """Badges earned by *student_id*, in award order.

    Awards for other students are ignored; awards whose ``badge_id`` is
    not in *catalog* are dropped.
    """
    by_id = {str(b.get("id")): b for b in catalog}
    earned: list[EarnedBadge] = []
    for award in awards:
        if not same_id(award.get("siswa_id"), student_id):
            continue
        badge = by_id.get(str(award.get("badge_id")))
        if badge is None:
            logger.debug(
                "Award %s references unknown badge %s — skipped",
                award.get("id"), award.get("badge_id"),
            )
            continue
        earned.append(
            EarnedBadge(
                award_id=award.get("id"),
                name=badge.get("nama_badge"),
                description=badge.get("deskripsi"),
                icon_url=badge.get("icon_url"),
                xp_reward=badge.get("xp_reward"),
                awarded_at=award.get("tanggal_perolehan"),
            )
        )
    return earned


# ---------------------------------------------------------------------------
# GamificationAggregator
# ---------------------------------------------------------------------------
class GamificationAggregator:
    """Owns the badge catalog cache and assembles per-student payloads.

    Parameters
    ----------
    student_api : ApiTransport for ``getSiswaGamification``
    teacher_api : ApiTransport for the badge catalog and award table
    badge_cache : BadgeCache, a fresh 60 s cache when omitted
    """

    def __init__(
        self,
        student_api: ApiTransport,
        teacher_api: ApiTransport,
        badge_cache: BadgeCache | None = None,
    ) -> None:
        self.student_api = student_api
        self.teacher_api = teacher_api
        self.badge_cache = badge_cache or BadgeCache()
        # Badge fetches abandoned by an early return keep running; hold
        # references until they finish.
        self._pending: set[asyncio.Task] = set()

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def get_student_gamification(self, student_id: Any) -> ApiResult:
        """XP, normalised level and earned badges for one student."""
        gamification_task = self._spawn(get_raw_gamification(self.student_api, student_id))
        catalog_task = self._spawn(
            self.badge_cache.resolve(lambda: get_badge_catalog(self.teacher_api))
        )
        awards_task = self._spawn(get_badge_awards(self.teacher_api))

        result = await gamification_task
        if not result.success:
            return result

        data = result.data
        if not isinstance(data, dict):
            logger.warning("Gamification record for %s has no data object", student_id)
            return ApiResult.fail("Gamification data missing")

        # The server's level may lag behind its xp; the thresholds here win.
        if "xp" in data:
            data["level"] = level_for_xp(parse_int(data["xp"]))

        data["badges"] = []

        catalog_result, awards_result = await asyncio.gather(catalog_task, awards_task)
        if catalog_result.success and awards_result.success:
            badges = join_badges(
                student_id,
                catalog_result.rows(),
                awards_result.rows(),
            )
            data["badges"] = [b.to_dict() for b in badges]
        else:
            logger.info(
                "Badge enrichment skipped for %s (catalog=%s, awards=%s)",
                student_id, catalog_result.success, awards_result.success,
            )

        return result

