"""
handlers/ping_handler.py
-------------------------
Handles the /ping connectivity check.
"""

import asyncio

from telegram import Update
from telegram.ext import ContextTypes

from security.auth import authorized_only
from security.rate_limiter import rate_limited
from services.network_service import NetworkService

network_service = NetworkService()


@authorized_only
@rate_limited
async def ping_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    status = await asyncio.to_thread(network_service.send_ping)
    icon = "🟢" if status.startswith("Success") else "🔴"
    await update.message.reply_text(f"{icon} {status}")
