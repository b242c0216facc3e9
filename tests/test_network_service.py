"""Tests for the /ping helper."""

import socket
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

from services.network_service import (
    PING_NOT_SENT,
    RECENT_PINGS,
    DnsProbe,
    NetworkService,
    PingOptions,
)


def test_send_ping_reports_success():
    dns = MagicMock()
    dns.send_probe.return_value = True

    result = NetworkService(dns).send_ping()

    assert result == "Success: Ping sent!"
    assert result.count("Success") == 1
    dns.send_probe.assert_called_once_with()


def test_send_ping_reports_failure():
    dns = MagicMock()
    dns.send_probe.return_value = False

    assert NetworkService(dns).send_ping() == PING_NOT_SENT


def test_last_ping_date_is_recorded():
    dns = MagicMock()
    dns.send_probe.return_value = True
    service = NetworkService(dns)

    assert service.last_ping_date() is None
    service.send_ping()

    last = service.last_ping_date()
    assert datetime(2010, 1, 1, tzinfo=timezone.utc) < last
    assert datetime.now(timezone.utc) - last < timedelta(minutes=1)


def test_ping_options_defaults():
    options = NetworkService.get_ping_options()

    assert options == PingOptions(dont_fragment=True, ttl=1)


def test_dns_probe_success(monkeypatch):
    monkeypatch.setattr(socket, "getaddrinfo", lambda host, port: [("addr",)])

    assert DnsProbe("example.com").send_probe() is True


def test_dns_probe_failure(monkeypatch):
    def fail(host, port):
        raise socket.gaierror("Name or service not known")

    monkeypatch.setattr(socket, "getaddrinfo", fail)

    service = NetworkService(DnsProbe("no-such-host.invalid"))
    assert service.send_ping() == PING_NOT_SENT


def test_most_recent_pings_keeps_a_bounded_history():
    dns = MagicMock()
    dns.send_probe.side_effect = [False] + [True] * RECENT_PINGS
    service = NetworkService(dns)

    assert service.most_recent_pings() == []
    for _ in range(RECENT_PINGS + 1):
        service.send_ping()

    recent = service.most_recent_pings()
    assert len(recent) == RECENT_PINGS
    assert all(p.sent for p in recent)
    assert all(p.options == PingOptions(dont_fragment=True, ttl=1) for p in recent)
    assert recent[-1].sent_at == service.last_ping_date()
