"""
services/review_service.py
---------------------------
Business logic for writing reviews from the bot.
"""

from typing import Optional

from models.pokemon import Review
from repositories.errors import PersistenceError, ValidationError
from repositories.review_repo import ReviewRepository
from repositories.reviewer_repo import ReviewerRepository
from utils.logger import get_logger

logger = get_logger(__name__)


class ReviewService:
    """Creates reviews on behalf of Telegram users."""

    def __init__(
        self,
        repo: Optional[ReviewRepository] = None,
        reviewer_repo: Optional[ReviewerRepository] = None,
    ):
        self.repo = repo or ReviewRepository()
        self.reviewer_repo = reviewer_repo or ReviewerRepository()

    def add_review(
        self,
        telegram_id: int,
        first_name: str,
        last_name: Optional[str],
        pokemon_id: int,
        rating: int,
        title: str,
        text: str = "",
    ) -> dict:
        """
        Store a review written by a Telegram user.

        Returns:
            Dict with 'success' and 'message' keys.
        """
        try:
            reviewer = self.reviewer_repo.ensure_reviewer(telegram_id, first_name, last_name)
            review = self.repo.add(
                Review(title=title, text=text, rating=rating, reviewer=reviewer, pokemon_id=pokemon_id)
            )
        except ValidationError as e:
            logger.warning(f"Rejected review from {telegram_id}: {e}")
            return {"success": False, "message": f"⚠️ {e}"}
        except PersistenceError as e:
            logger.error(f"Could not store review from {telegram_id}: {e}")
            return {"success": False, "message": f"❌ Could not save the review. Does Pokémon #{pokemon_id} exist?"}

        return {
            "success": True,
            "message": (
                f"📝 Review saved:\n"
                f"  🐾 Pokémon: #{review.pokemon_id}\n"
                f"  ⭐ Rating: {review.rating}/5\n"
                f"  🔖 Review: #{review.id}"
            ),
        }
