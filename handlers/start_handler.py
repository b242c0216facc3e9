"""
handlers/start_handler.py
--------------------------
Handles /start, /help and /myid commands.
"""

from telegram import Update
from telegram.ext import ContextTypes

from security.auth import authorized_only
from security.rate_limiter import rate_limited
from utils.logger import get_logger

logger = get_logger(__name__)

HELP_TEXT = """
🤖 *Welcome to PokeClub!*
Pokémon reviews and a running-club directory in one bot.

*🐾 Pokémon:*
/pokemon - list all Pokémon
/pokemon <id|name> - show one Pokémon
/rating <id> - average rating
/add\\_pokemon <name> <YYYY-MM-DD> [category]
/delete\\_pokemon <id>
/review <id> <1-5> <title> | <text>

*🏃 Running clubs:*
/clubs [state] - list clubs, optionally in one state
/club <id> - show one club
/states - states that have clubs
/add\\_club <title> | <street> | <city> | <state> [| <category>]
/delete\\_club <id>

*🔧 Other:*
/ping - check connectivity
/export\\_clubs - club directory as CSV
/export\\_ratings - Pokémon ratings as Excel
/myid - show your Telegram ID
"""


@authorized_only
@rate_limited
async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command - greet the user and point at /help."""
    user = update.effective_user
    logger.info(f"User {user.id} ({user.first_name}) started the bot.")

    await update.message.reply_text(
        f"Hello {user.first_name}! 👋\n"
        f"Browse Pokémon reviews and running clubs from here.\n\n"
        f"Send /help to see every command.",
    )


@authorized_only
@rate_limited
async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.message.reply_text(HELP_TEXT, parse_mode="Markdown")


@authorized_only
async def myid_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /myid command - show user's Telegram ID for whitelisting."""
    user = update.effective_user
    await update.message.reply_text(
        f"🆔 Your ID: `{user.id}`\n"
        f"Add it to `ALLOWED_USER_IDS` in `.env` to lock the bot down.",
        parse_mode="Markdown",
    )
