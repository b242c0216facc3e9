"""
services/export_service.py
---------------------------
Generates CSV and Excel exports of the club directory and Pokémon ratings.
"""

import io

import pandas as pd

from repositories.club_repo import ClubRepository
from repositories.pokemon_repo import PokemonRepository
from utils.logger import get_logger

logger = get_logger(__name__)

_CLUB_COLUMNS = ["ID", "Title", "Category", "Street", "City", "State", "Description"]
_RATING_COLUMNS = ["ID", "Name", "Birth date", "Average rating"]


class ExportService:
    """Generates downloadable reports in CSV and Excel formats."""

    def __init__(
        self,
        club_repo: ClubRepository | None = None,
        pokemon_repo: PokemonRepository | None = None,
    ):
        self.club_repo = club_repo or ClubRepository()
        self.pokemon_repo = pokemon_repo or PokemonRepository()

    def export_clubs_csv(self) -> io.BytesIO:
        """
        Export the whole club directory as a CSV file.

        Returns:
            A BytesIO buffer containing the CSV data.
        """
        clubs = self.club_repo.get_all()
        data = [
            {
                "ID": c.id,
                "Title": c.title,
                "Category": c.club_category.value,
                "Street": c.address.street,
                "City": c.address.city,
                "State": c.address.state,
                "Description": c.description or "",
            }
            for c in clubs
        ]

        df = pd.DataFrame(data, columns=_CLUB_COLUMNS)
        buffer = io.BytesIO()
        df.to_csv(buffer, index=False, encoding="utf-8-sig")
        buffer.seek(0)
        logger.info(f"Exported {len(data)} clubs as CSV")
        return buffer

    def export_ratings_excel(self) -> io.BytesIO:
        """
        Export every Pokémon with its average rating as an Excel (.xlsx) file.
        A second sheet ranks them from best to worst rated.

        Returns:
            A BytesIO buffer containing the Excel data.
        """
        data = [
            {
                "ID": p.id,
                "Name": p.name,
                "Birth date": p.birth_date.isoformat(),
                "Average rating": round(self.pokemon_repo.get_rating(p.id), 2),
            }
            for p in self.pokemon_repo.get_all()
        ]

        df = pd.DataFrame(data, columns=_RATING_COLUMNS)

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Pokemon", index=False)

            if data:
                ranking = df[df["Average rating"] > 0].sort_values("Average rating", ascending=False)
                ranking[["Name", "Average rating"]].to_excel(writer, sheet_name="Ranking", index=False)

        buffer.seek(0)
        logger.info(f"Exported {len(data)} Pokémon ratings as Excel")
        return buffer
