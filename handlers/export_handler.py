"""
handlers/export_handler.py
---------------------------
Handles data export commands (CSV, Excel).
Delegates to ExportService.
"""

import asyncio
from datetime import date

from telegram import Update
from telegram.ext import ContextTypes

from security.auth import authorized_only
from security.rate_limiter import rate_limited
from services.export_service import ExportService
from utils.logger import get_logger

logger = get_logger(__name__)
export_service = ExportService()


@authorized_only
@rate_limited
async def export_clubs_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /export_clubs command - send the club directory as CSV."""
    await update.message.reply_text("📄 Preparing CSV file...")

    try:
        buffer = await asyncio.to_thread(export_service.export_clubs_csv)
        await update.message.reply_document(
            document=buffer,
            filename=f"clubs_{date.today().isoformat()}.csv",
            caption="🏃 Running-club directory - CSV",
        )
    except Exception as e:
        logger.error(f"CSV export failed: {e}")
        await update.message.reply_text("❌ Export failed. Try again later.")


@authorized_only
@rate_limited
async def export_ratings_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /export_ratings command - send Pokémon ratings as Excel."""
    await update.message.reply_text("📊 Preparing Excel file...")

    try:
        buffer = await asyncio.to_thread(export_service.export_ratings_excel)
        await update.message.reply_document(
            document=buffer,
            filename=f"pokemon_ratings_{date.today().isoformat()}.xlsx",
            caption="⭐ Pokémon ratings - Excel",
        )
    except Exception as e:
        logger.error(f"Excel export failed: {e}")
        await update.message.reply_text("❌ Export failed. Try again later.")
