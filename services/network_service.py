"""
services/network_service.py
----------------------------
Connectivity check behind the /ping command.

The probe itself is a DNS lookup of PING_HOST; NetworkService only turns its
boolean outcome into a status message and keeps a short history of
recent pings.
"""

import socket
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from config import PING_HOST
from utils.logger import get_logger

logger = get_logger(__name__)

PING_SENT = "Success: Ping sent!"
PING_NOT_SENT = "Failed: Ping not sent!"
RECENT_PINGS = 10


@dataclass(frozen=True)
class PingOptions:
    dont_fragment: bool = True
    ttl: int = 1


@dataclass(frozen=True)
class PingRecord:
    sent_at: datetime
    sent: bool
    options: PingOptions = field(default_factory=PingOptions)


class DnsProbe:
    """Resolves a host name; a successful resolution counts as a sent probe."""

    def __init__(self, host: str = PING_HOST):
        self.host = host

    def send_probe(self) -> bool:
        try:
            socket.getaddrinfo(self.host, None)
            return True
        except OSError as e:
            logger.warning(f"DNS probe for {self.host} failed: {e}")
            return False


class NetworkService:
    """Sends probes through an injected DnsProbe and reports the outcome."""

    def __init__(self, dns: Optional[DnsProbe] = None):
        self.dns = dns or DnsProbe()
        self._recent: deque[PingRecord] = deque(maxlen=RECENT_PINGS)

    def send_ping(self) -> str:
        """Send one probe and return a human-readable status."""
        sent = self.dns.send_probe()
        self._recent.append(PingRecord(datetime.now(timezone.utc), sent, self.get_ping_options()))
        logger.info(f"Ping {'sent' if sent else 'not sent'} via {type(self.dns).__name__}")
        return PING_SENT if sent else PING_NOT_SENT

    def last_ping_date(self) -> Optional[datetime]:
        """UTC time of the most recent send_ping call, None before the first one."""
        return self._recent[-1].sent_at if self._recent else None

    def most_recent_pings(self) -> list[PingRecord]:
        """The last RECENT_PINGS pings, oldest first."""
        return list(self._recent)

    @staticmethod
    def get_ping_options() -> PingOptions:
        return PingOptions(dont_fragment=True, ttl=1)
