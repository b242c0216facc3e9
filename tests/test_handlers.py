"""Tests for the Telegram command handlers and their security decorators."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

import config
from handlers import club_handler, ping_handler, pokemon_handler
from models.club import ClubCategory
from repositories.errors import AmbiguousMatchError, NotFoundError, PersistenceError
from security import rate_limiter
from services.pokemon_service import PokemonService


def ctx(*args):
    return SimpleNamespace(args=list(args))


def reply_of(update) -> str:
    return update.message.reply_text.await_args.args[0]


# ── Pokémon ───────────────────────────────────────────────


@pytest.mark.asyncio
async def test_pokemon_lists_without_args(monkeypatch, make_update):
    service = MagicMock()
    service.list_text.return_value = "📚 Pokémon (1)"
    monkeypatch.setattr(pokemon_handler, "pokemon_service", service)
    update = make_update()

    await pokemon_handler.pokemon_command(update, ctx())

    assert reply_of(update) == "📚 Pokémon (1)"


@pytest.mark.asyncio
async def test_pokemon_reports_ambiguous_name(monkeypatch, make_update):
    service = MagicMock()
    service.detail_text.side_effect = AmbiguousMatchError("Pokemon", "Pikachu", 2)
    monkeypatch.setattr(pokemon_handler, "pokemon_service", service)
    update = make_update()

    await pokemon_handler.pokemon_command(update, ctx("Pikachu"))

    assert "Use the id" in reply_of(update)


@pytest.mark.asyncio
async def test_pokemon_reports_store_failure(monkeypatch, make_update):
    service = MagicMock()
    service.list_text.side_effect = PersistenceError("db down")
    monkeypatch.setattr(pokemon_handler, "pokemon_service", service)
    update = make_update()

    await pokemon_handler.pokemon_command(update, ctx())

    assert "Could not load" in reply_of(update)


@pytest.mark.asyncio
async def test_pokemon_with_underscore_in_name_is_escaped(monkeypatch, make_update):
    repo = MagicMock()
    repo.get_by_name.side_effect = NotFoundError("Pokemon", "Mr_Mime")
    monkeypatch.setattr(pokemon_handler, "pokemon_service", PokemonService(repo=repo))
    update = make_update()

    await pokemon_handler.pokemon_command(update, ctx("Mr_Mime"))

    assert reply_of(update) == "⚠️ Pokémon 'Mr\\_Mime' not found."
    assert update.message.reply_text.await_args.kwargs["parse_mode"] == "Markdown"


@pytest.mark.asyncio
async def test_ambiguous_name_is_escaped(monkeypatch, make_update):
    service = MagicMock()
    service.detail_text.side_effect = AmbiguousMatchError("Pokemon", "Mr_Mime", 2)
    monkeypatch.setattr(pokemon_handler, "pokemon_service", service)
    update = make_update()

    await pokemon_handler.pokemon_command(update, ctx("Mr_Mime"))

    assert "'Mr\\_Mime'" in reply_of(update)


@pytest.mark.asyncio
@pytest.mark.parametrize("arg", ["abc", "²", "½"])
async def test_rating_requires_numeric_id(make_update, arg):
    update = make_update()

    await pokemon_handler.rating_command(update, ctx(arg))

    assert "Usage" in reply_of(update)


@pytest.mark.asyncio
async def test_club_rejects_superscript_id(make_update):
    update = make_update()

    await club_handler.club_command(update, ctx("²"))

    assert "Usage" in reply_of(update)


@pytest.mark.asyncio
async def test_add_pokemon_builds_model(monkeypatch, make_update):
    service = MagicMock()

    def fake_add(pokemon):
        pokemon.id = 12
        return True

    service.add.side_effect = fake_add
    monkeypatch.setattr(pokemon_handler, "pokemon_service", service)
    update = make_update()

    await pokemon_handler.add_pokemon_command(update, ctx("Pikachu", "1996-02-27", "Electric"))

    pokemon = service.add.call_args.args[0]
    assert pokemon.name == "Pikachu"
    assert pokemon.birth_date.isoformat() == "1996-02-27"
    assert [c.name for c in pokemon.categories] == ["Electric"]
    assert "#12" in reply_of(update)


@pytest.mark.asyncio
async def test_add_pokemon_rejects_bad_date(make_update):
    update = make_update()

    await pokemon_handler.add_pokemon_command(update, ctx("Pikachu", "27/02/1996"))

    assert "birth date" in reply_of(update)


@pytest.mark.asyncio
async def test_review_splits_title_and_text(monkeypatch, make_update):
    service = MagicMock()
    service.add_review.return_value = {"success": True, "message": "📝 Review saved"}
    monkeypatch.setattr(pokemon_handler, "review_service", service)
    update = make_update()

    await pokemon_handler.review_command(update, ctx("1", "5", "Best", "ever", "|", "It", "is", "electric"))

    service.add_review.assert_called_once_with(42, "Ash", "Ketchum", 1, 5, "Best ever", "It is electric")
    assert reply_of(update) == "📝 Review saved"


# ── Clubs ─────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_clubs_by_state(monkeypatch, make_update):
    service = MagicMock()
    service.list_text.return_value = "🏃 Running clubs in NC (1)"
    monkeypatch.setattr(club_handler, "club_service", service)
    update = make_update()

    await club_handler.clubs_command(update, ctx("NC"))

    service.list_text.assert_called_once_with("NC")
    assert "NC" in reply_of(update)


@pytest.mark.asyncio
async def test_add_club_parses_pipe_separated_fields(monkeypatch, make_update):
    service = MagicMock()
    service.add.return_value = True
    monkeypatch.setattr(club_handler, "club_service", service)
    update = make_update()

    await club_handler.add_club_command(
        update, ctx("Running", "Club", "1", "|", "123", "Main", "St", "|", "Charlotte", "|", "nc", "|", "trail")
    )

    club = service.add.call_args.args[0]
    assert club.title == "Running Club 1"
    assert club.address.street == "123 Main St"
    assert club.address.state == "NC"
    assert club.club_category is ClubCategory.TRAIL


@pytest.mark.asyncio
async def test_add_club_with_missing_fields_shows_usage(make_update):
    update = make_update()

    await club_handler.add_club_command(update, ctx("Running", "Club", "|", "Main"))

    assert "Usage" in reply_of(update)


@pytest.mark.asyncio
async def test_delete_club_not_found(monkeypatch, make_update):
    service = MagicMock()
    service.delete.return_value = False
    monkeypatch.setattr(club_handler, "club_service", service)
    update = make_update()

    await club_handler.delete_club_command(update, ctx("9"))

    assert "not found" in reply_of(update)


# ── Ping ──────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_ping(monkeypatch, make_update):
    service = MagicMock()
    service.send_ping.return_value = "Success: Ping sent!"
    monkeypatch.setattr(ping_handler, "network_service", service)
    update = make_update()

    await ping_handler.ping_command(update, ctx())

    assert reply_of(update) == "🟢 Success: Ping sent!"


# ── Security ──────────────────────────────────────────────


@pytest.mark.asyncio
async def test_unlisted_user_is_refused(monkeypatch, make_update):
    monkeypatch.setattr(config, "ALLOWED_USER_IDS", [1])
    service = MagicMock()
    monkeypatch.setattr(ping_handler, "network_service", service)
    update = make_update(user_id=42)

    await ping_handler.ping_command(update, ctx())

    service.send_ping.assert_not_called()
    assert "private" in reply_of(update)


@pytest.mark.asyncio
async def test_rate_limit_blocks_extra_commands(monkeypatch, make_update):
    monkeypatch.setattr(config, "RATE_LIMIT_MESSAGES", 2)
    service = MagicMock()
    service.send_ping.return_value = "Success: Ping sent!"
    monkeypatch.setattr(ping_handler, "network_service", service)
    update = make_update()

    for _ in range(3):
        await ping_handler.ping_command(update, ctx())

    assert service.send_ping.call_count == 2
    assert "Too many" in reply_of(update)


def test_rate_limit_window_slides(monkeypatch):
    monkeypatch.setattr(config, "RATE_LIMIT_MESSAGES", 1)
    monkeypatch.setattr(config, "RATE_LIMIT_WINDOW_SECONDS", 60)

    assert rate_limiter.allow(7, now=1000.0) is True
    assert rate_limiter.allow(7, now=1030.0) is False
    assert rate_limiter.allow(7, now=1061.0) is True
