"""
handlers/pokemon_handler.py
----------------------------
Handles Pokémon catalogue commands.
Delegates all logic to PokemonService and ReviewService.
"""

import asyncio
from datetime import date

from telegram import Update
from telegram.ext import ContextTypes
from telegram.helpers import escape_markdown

from models.pokemon import Category, Pokemon
from repositories.errors import AmbiguousMatchError, RepositoryError
from security.auth import authorized_only
from security.rate_limiter import rate_limited
from services.pokemon_service import PokemonService
from services.review_service import ReviewService
from utils.logger import get_logger

logger = get_logger(__name__)
pokemon_service = PokemonService()
review_service = ReviewService()


@authorized_only
@rate_limited
async def pokemon_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /pokemon [id|name].
    Without arguments lists every Pokémon; otherwise shows one.
    """
    try:
        if not context.args:
            msg = await asyncio.to_thread(pokemon_service.list_text)
        else:
            key = " ".join(context.args)
            msg = await asyncio.to_thread(pokemon_service.detail_text, key)
    except AmbiguousMatchError as e:
        msg = f"⚠️ {e.count} Pokémon are called '{escape_markdown(str(e.key))}'. Use the id instead."
    except RepositoryError as e:
        logger.error(f"/pokemon failed: {e}")
        msg = "❌ Could not load Pokémon right now."
    await update.message.reply_text(msg, parse_mode="Markdown")


@authorized_only
@rate_limited
async def rating_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /rating <id> - average review rating of a Pokémon."""
    if not context.args or not context.args[0].isdecimal():
        await update.message.reply_text("⚠️ Usage: /rating <id>\nExample: /rating 1")
        return

    try:
        msg = await asyncio.to_thread(pokemon_service.rating_text, int(context.args[0]))
    except RepositoryError as e:
        logger.error(f"/rating failed: {e}")
        msg = "❌ Could not load the rating right now."
    await update.message.reply_text(msg)


@authorized_only
@rate_limited
async def add_pokemon_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /add_pokemon <name> <YYYY-MM-DD> [category].
    Example: /add_pokemon Pikachu 1996-02-27 Electric
    """
    if not context.args or len(context.args) < 2:
        await update.message.reply_text(
            "⚠️ Usage: /add_pokemon <name> <YYYY-MM-DD> [category]\n"
            "Example: /add_pokemon Pikachu 1996-02-27 Electric"
        )
        return

    try:
        birth_date = date.fromisoformat(context.args[1])
    except ValueError:
        await update.message.reply_text("⚠️ The birth date must look like 1996-02-27.")
        return

    pokemon = Pokemon(
        name=context.args[0],
        birth_date=birth_date,
        categories=[Category(name=c) for c in context.args[2:3]],
    )
    if await asyncio.to_thread(pokemon_service.add, pokemon):
        await update.message.reply_text(f"✅ Added {pokemon.name} as #{pokemon.id}.")
    else:
        await update.message.reply_text(
            f"❌ Could not add {pokemon.name}. It may already exist."
        )


@authorized_only
@rate_limited
async def delete_pokemon_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /delete_pokemon <id> - remove a Pokémon and its reviews."""
    if not context.args or not context.args[0].isdecimal():
        await update.message.reply_text("⚠️ Usage: /delete_pokemon <id>\nExample: /delete_pokemon 5")
        return

    pokemon_id = int(context.args[0])
    if await asyncio.to_thread(pokemon_service.delete, pokemon_id):
        await update.message.reply_text(f"🗑️ Deleted Pokémon #{pokemon_id}.")
    else:
        await update.message.reply_text(f"⚠️ Pokémon #{pokemon_id} not found.")


@authorized_only
@rate_limited
async def review_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /review <pokemon_id> <rating> <title> | <text>.
    Example: /review 1 5 Best ever | Pikachu is the best because it is electric
    """
    args = context.args or []
    if len(args) < 3 or not args[0].isdecimal() or not args[1].isdecimal():
        await update.message.reply_text(
            "⚠️ Usage: /review <id> <1-5> <title> | <text>\n"
            "Example: /review 1 5 Best ever | Pikachu is electric"
        )
        return

    title, _, text = " ".join(args[2:]).partition("|")
    user = update.effective_user
    result = await asyncio.to_thread(
        review_service.add_review,
        user.id,
        user.first_name,
        user.last_name,
        int(args[0]),
        int(args[1]),
        title.strip(),
        text.strip(),
    )
    await update.message.reply_text(result["message"])
