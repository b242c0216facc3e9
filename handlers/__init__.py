"""
handlers/ - Presentation Layer
================================
Telegram bot handlers. Each handler receives updates from Telegram,
hands the blocking service call to a worker thread, and sends the
response back to the user. No business logic lives here.
"""
