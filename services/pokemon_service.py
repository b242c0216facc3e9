"""
services/pokemon_service.py
----------------------------
Business logic for the Pokémon review catalogue.

This is the boolean / optional boundary: repository errors are logged by
kind here and collapsed into False or None for callers that only need to
know whether an operation worked.
"""

from typing import Optional

from telegram.helpers import escape_markdown

from models.pokemon import Pokemon
from repositories.errors import (
    NotFoundError,
    PersistenceError,
    RepositoryError,
    ValidationError,
)
from repositories.pokemon_repo import PokemonRepository
from utils.logger import get_logger

logger = get_logger(__name__)


class PokemonService:
    """
    Handles all business logic related to Pokémon.

    Responsibilities:
        - Look Pokémon up by id or name.
        - Create Pokémon, refusing duplicate names.
        - Render listings, details and ratings for the bot.
    """

    def __init__(self, repo: Optional[PokemonRepository] = None):
        self.repo = repo or PokemonRepository()

    # ── Boundary operations ───────────────────────────────

    def find(self, pokemon_id: int) -> Optional[Pokemon]:
        """Return the Pokémon with this id, or None if it does not exist."""
        try:
            return self.repo.get_by_id(pokemon_id)
        except NotFoundError:
            return None

    def find_by_name(self, name: str) -> Optional[Pokemon]:
        """
        Return the Pokémon with this name, or None if it does not exist.

        Raises:
            AmbiguousMatchError: If several Pokémon share the name.
        """
        try:
            return self.repo.get_by_name(name)
        except NotFoundError:
            return None

    def add(self, pokemon: Pokemon) -> bool:
        """
        Store a new Pokémon.

        Returns:
            True if stored; False on a duplicate name, invalid data or a
            store failure (each logged with its cause).
        """
        try:
            if self.repo.name_exists(pokemon.name):
                logger.warning(f"Refusing duplicate Pokémon name '{pokemon.name}'")
                return False
            self.repo.add(pokemon)
            return True
        except ValidationError as e:
            logger.warning(f"Invalid Pokémon '{pokemon.name}': {e}")
        except PersistenceError as e:
            logger.error(f"Store rejected Pokémon '{pokemon.name}': {e}")
        return False

    def delete(self, pokemon_id: int) -> bool:
        """Delete a Pokémon; False when it does not exist or the store fails."""
        try:
            return self.repo.delete(pokemon_id)
        except RepositoryError as e:
            logger.error(f"Could not delete Pokémon #{pokemon_id}: {e}")
            return False

    def count(self) -> int:
        return self.repo.count()

    def rating(self, pokemon_id: int) -> float:
        return self.repo.get_rating(pokemon_id)

    # ── Bot renderers ─────────────────────────────────────

    def list_text(self) -> str:
        """Formatted list of every Pokémon."""
        pokemon = self.repo.get_all()
        if not pokemon:
            return "📭 No Pokémon registered yet."
        lines = [f"📚 Pokémon ({len(pokemon)}):\n"]
        lines.extend(f"  #{p.id} {escape_markdown(p.name)}" for p in pokemon)
        return "\n".join(lines)

    def detail_text(self, key: str) -> str:
        """
        Formatted details of one Pokémon.

        Args:
            key: A numeric id or a name.
        """
        pokemon = self.find(int(key)) if key.isdecimal() else self.find_by_name(key)
        if pokemon is None:
            return f"⚠️ Pokémon '{escape_markdown(key)}' not found."

        lines = [
            f"🐾 *{escape_markdown(pokemon.name)}* (#{pokemon.id})",
            f"  🎂 Born: {pokemon.birth_date}",
        ]
        if pokemon.categories:
            lines.append("  🏷️ Categories: " + escape_markdown(", ".join(c.name for c in pokemon.categories)))
        if pokemon.owners:
            lines.append("  🧢 Owners: " + escape_markdown(", ".join(o.full_name for o in pokemon.owners)))
        if pokemon.reviews:
            lines.append(f"  ⭐ Rating: {pokemon.average_rating():.2f} ({len(pokemon.reviews)} reviews)")
            lines.extend(f"    {escape_markdown(str(r))}" for r in pokemon.reviews)
        else:
            lines.append("  ⭐ No reviews yet.")
        return "\n".join(lines)

    def rating_text(self, pokemon_id: int) -> str:
        """Formatted average rating of one Pokémon."""
        if not self.repo.exists(pokemon_id):
            return f"⚠️ Pokémon #{pokemon_id} not found."
        value = self.repo.get_rating(pokemon_id)
        if value == 0:
            return f"⭐ Pokémon #{pokemon_id} has no reviews yet."
        return f"⭐ Pokémon #{pokemon_id} is rated {value:.2f} / 5."
