"""Tests for match plugin."""

import pytest

from .. import LAN, ONLINE, create_plugin
from ...interfaces import CommandError
from ....authority import Authority, get_authority


@pytest.fixture
def match():
    plugin = create_plugin()
    plugin.configure({})
    return plugin


class TestMatchState:
    def test_no_match_initially(self, match):
        assert match.describe() == "No match"
        assert get_authority(match) is Authority.NONE

    def test_hosting_lan(self, match):
        match.host()
        assert match.local_session().playlist is LAN
        assert get_authority(match) is Authority.HOST

    def test_joining_lan(self, match):
        match.join()
        assert match.in_online_game()
        assert get_authority(match) is Authority.CLIENT

    def test_hosting_online_playlist(self, match):
        match.host(ONLINE)
        assert get_authority(match) is Authority.NONE

    def test_replay_keeps_playlist(self, match):
        match.join()
        match.watch_replay()
        assert match.in_replay()
        assert match.replay_session().playlist is LAN

    def test_leave(self, match):
        match.host()
        match.leave()
        assert match.local_session() is None
        assert get_authority(match) is Authority.NONE

    def test_switching_drops_previous_session(self, match):
        match.host()
        match.join()
        assert match.local_session() is None


class TestPlayers:
    def test_players_from_config(self):
        plugin = create_plugin()
        plugin.configure({"match": {"players": {"12345": "Alice"}}})
        assert plugin.player_name(12345) == "Alice"
        assert plugin.player_name(1) is None

    def test_add_player(self, match):
        match.add_player(7, "Bob")
        assert match.player_name(7) == "Bob"


class TestMatchCommand:
    def test_status(self, match):
        assert match.commands()["match"]([]) == "No match"

    def test_host_online(self, match):
        result = match.commands()["match"](["host", "online"])
        assert result == "hosting match (playlist: online)"

    def test_join(self, match):
        assert match.commands()["match"](["join"]) == "joined match (playlist: lan)"

    def test_replay(self, match):
        command = match.commands()["match"]
        command(["host"])
        assert command(["replay"]) == "watching replay (playlist: lan)"

    def test_bad_playlist(self, match):
        with pytest.raises(CommandError):
            match.commands()["match"](["host", "ranked"])

    def test_bad_action(self, match):
        with pytest.raises(CommandError):
            match.commands()["match"](["dance"])
