"""
handlers/club_handler.py
-------------------------
Handles running-club directory commands.
Delegates all logic to ClubService.
"""

import asyncio

from telegram import Update
from telegram.ext import ContextTypes

from models.club import Address, Club, ClubCategory
from repositories.errors import RepositoryError
from security.auth import authorized_only
from security.rate_limiter import rate_limited
from services.club_service import ClubService
from utils.logger import get_logger

logger = get_logger(__name__)
club_service = ClubService()

_ADD_USAGE = (
    "⚠️ Usage: /add_club <title> | <street> | <city> | <state> [| <category>]\n"
    "Example: /add_club Running Club 1 | 123 Main St | Charlotte | NC | City\n"
    "Categories: " + ", ".join(c.value for c in ClubCategory)
)


@authorized_only
@rate_limited
async def clubs_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /clubs [state] - list all clubs or those in one state."""
    state = context.args[0] if context.args else None
    try:
        msg = await asyncio.to_thread(club_service.list_text, state)
    except RepositoryError as e:
        logger.error(f"/clubs failed: {e}")
        msg = "❌ Could not load clubs right now."
    await update.message.reply_text(msg)


@authorized_only
@rate_limited
async def club_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /club <id> - show one club."""
    if not context.args or not context.args[0].isdecimal():
        await update.message.reply_text("⚠️ Usage: /club <id>\nExample: /club 1")
        return
    try:
        msg = await asyncio.to_thread(club_service.detail_text, int(context.args[0]))
    except RepositoryError as e:
        logger.error(f"/club failed: {e}")
        msg = "❌ Could not load the club right now."
    await update.message.reply_text(msg, parse_mode="Markdown")


@authorized_only
@rate_limited
async def states_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /states - every state that has a club."""
    try:
        msg = await asyncio.to_thread(club_service.states_text)
    except RepositoryError as e:
        logger.error(f"/states failed: {e}")
        msg = "❌ Could not load states right now."
    await update.message.reply_text(msg)


@authorized_only
@rate_limited
async def add_club_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /add_club <title> | <street> | <city> | <state> [| <category>]."""
    parts = [p.strip() for p in " ".join(context.args or []).split("|")]
    if len(parts) < 4 or not all(parts[:4]):
        await update.message.reply_text(_ADD_USAGE)
        return

    try:
        category = ClubCategory.parse(parts[4]) if len(parts) > 4 and parts[4] else ClubCategory.CITY
    except ValueError:
        await update.message.reply_text(_ADD_USAGE)
        return

    club = Club(
        title=parts[0],
        description="",
        club_category=category,
        address=Address(street=parts[1], city=parts[2], state=parts[3].upper()),
    )
    if await asyncio.to_thread(club_service.add, club):
        await update.message.reply_text(f"✅ Added {club.title} as #{club.id}.")
    else:
        await update.message.reply_text(f"❌ Could not add {club.title}.")


@authorized_only
@rate_limited
async def delete_club_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /delete_club <id> - remove a club and its address."""
    if not context.args or not context.args[0].isdecimal():
        await update.message.reply_text("⚠️ Usage: /delete_club <id>\nExample: /delete_club 3")
        return

    club_id = int(context.args[0])
    if await asyncio.to_thread(club_service.delete, club_id):
        await update.message.reply_text(f"🗑️ Deleted club #{club_id}.")
    else:
        await update.message.reply_text(f"⚠️ Club #{club_id} not found.")
