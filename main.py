"""
main.py
-------
Entry point for the PokeClub Telegram bot.

Responsibilities:
    - Initialize the database connection pool and schema.
    - Configure and start the Telegram bot with all handlers.
"""

from telegram import BotCommand
from telegram.ext import Application, CommandHandler

from config import TELEGRAM_BOT_TOKEN
from db.connection import init_pool, close_pool
from db.init_db import create_tables
from handlers.start_handler import start_command, help_command, myid_command
from handlers.pokemon_handler import (
    pokemon_command,
    rating_command,
    add_pokemon_command,
    delete_pokemon_command,
    review_command,
)
from handlers.club_handler import (
    clubs_command,
    club_command,
    states_command,
    add_club_command,
    delete_club_command,
)
from handlers.ping_handler import ping_command
from handlers.export_handler import export_clubs_command, export_ratings_command
from utils.logger import get_logger

logger = get_logger(__name__)

COMMANDS = {
    "start": (start_command, "🚀 Start the bot"),
    "help": (help_command, "📖 Show help"),
    "myid": (myid_command, "🆔 Your Telegram ID"),
    "pokemon": (pokemon_command, "🐾 List or show Pokémon"),
    "rating": (rating_command, "⭐ Average rating of a Pokémon"),
    "add_pokemon": (add_pokemon_command, "➕ Add a Pokémon"),
    "delete_pokemon": (delete_pokemon_command, "🗑️ Delete a Pokémon"),
    "review": (review_command, "📝 Review a Pokémon"),
    "clubs": (clubs_command, "🏃 List running clubs"),
    "club": (club_command, "📍 Show a running club"),
    "states": (states_command, "🗺️ States with clubs"),
    "add_club": (add_club_command, "➕ Add a running club"),
    "delete_club": (delete_club_command, "❌ Delete a running club"),
    "ping": (ping_command, "📡 Connectivity check"),
    "export_clubs": (export_clubs_command, "📄 Export clubs (CSV)"),
    "export_ratings": (export_ratings_command, "📊 Export ratings (Excel)"),
}


async def set_bot_commands(application: Application) -> None:
    """Register bot commands menu in Telegram on startup."""
    await application.bot.set_my_commands(
        [BotCommand(name, description) for name, (_, description) in COMMANDS.items()]
    )
    logger.info("Bot commands menu registered successfully.")


def main() -> None:
    """Initialize and run the bot."""

    # ── 1. Database setup ─────────────────────────────────
    logger.info("Initializing database...")
    init_pool()
    create_tables()

    # ── 2. Build the Telegram application ─────────────────
    logger.info("Starting Telegram bot...")
    app = Application.builder().token(TELEGRAM_BOT_TOKEN).post_init(set_bot_commands).build()

    # ── 3. Register command handlers ──────────────────────
    for name, (callback, _) in COMMANDS.items():
        app.add_handler(CommandHandler(name, callback))

    # ── 4. Start polling ──────────────────────────────────
    logger.info("🚀 PokeClub is running! Press Ctrl+C to stop.")
    try:
        app.run_polling(drop_pending_updates=True, allowed_updates=["message"])
    finally:
        # ── 5. Cleanup on shutdown ────────────────────────
        close_pool()
        logger.info("PokeClub stopped.")


if __name__ == "__main__":
    main()
