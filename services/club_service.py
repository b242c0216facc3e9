"""
services/club_service.py
-------------------------
Business logic for the running-club directory.
"""

from typing import Optional

from telegram.helpers import escape_markdown

from models.club import Club
from repositories.club_repo import ClubRepository
from repositories.errors import NotFoundError, PersistenceError, RepositoryError, ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)


class ClubService:
    """Lists, shows, adds and removes running clubs."""

    def __init__(self, repo: Optional[ClubRepository] = None):
        self.repo = repo or ClubRepository()

    def find(self, club_id: int) -> Optional[Club]:
        """Return the club with this id, or None if it does not exist."""
        try:
            return self.repo.get_by_id(club_id)
        except NotFoundError:
            return None

    def add(self, club: Club) -> bool:
        """Store a new club with its address. False on invalid data or store failure."""
        try:
            self.repo.add(club)
            return True
        except ValidationError as e:
            logger.warning(f"Invalid club '{club.title}': {e}")
        except PersistenceError as e:
            logger.error(f"Store rejected club '{club.title}': {e}")
        return False

    def delete(self, club_id: int) -> bool:
        try:
            return self.repo.delete(club_id)
        except RepositoryError as e:
            logger.error(f"Could not delete club #{club_id}: {e}")
            return False

    def count(self) -> int:
        return self.repo.count()

    def states(self) -> list[str]:
        return self.repo.get_all_states()

    def clubs_in_state(self, state: str) -> list[Club]:
        """Clubs in a state; the state code is normalised to upper case."""
        return self.repo.get_by_state(state.strip().upper())

    # ── Bot renderers ─────────────────────────────────────

    def list_text(self, state: Optional[str] = None) -> str:
        """Formatted list of all clubs, or of the clubs in one state."""
        clubs = self.clubs_in_state(state) if state else self.repo.get_all()
        where = f" in {state.strip().upper()}" if state else ""
        if not clubs:
            return f"📭 No running clubs{where}."
        lines = [f"🏃 Running clubs{where} ({len(clubs)}):\n"]
        lines.extend(f"  {c}" for c in clubs)
        return "\n".join(lines)

    def detail_text(self, club_id: int) -> str:
        club = self.find(club_id)
        if club is None:
            return f"⚠️ Club #{club_id} not found."
        lines = [
            f"🏃 *{escape_markdown(club.title)}* (#{club.id})",
            f"  🏷️ Category: {club.club_category.value}",
            f"  📍 {escape_markdown(str(club.address))}",
        ]
        if club.description:
            lines.append(f"  📝 {escape_markdown(club.description)}")
        if club.image:
            lines.append(f"  🖼️ {escape_markdown(club.image)}")
        return "\n".join(lines)

    def states_text(self) -> str:
        states = self.states()
        if not states:
            return "📭 No states yet."
        return "🗺️ States with clubs: " + ", ".join(states)
