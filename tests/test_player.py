import asyncio

import pytest

from audio_cache.errors import PlaybackError
from audio_cache.services import player as playback
from audio_cache.services.player import FfplayPlayer, ReleaseMode, build_command


class TestBuildCommand:
    def test_play_once(self):
        cmd = build_command("ffplay", "/tmp/a.mp3", 1.0, ReleaseMode.RELEASE)
        assert cmd[0] == "ffplay"
        assert cmd[-1] == "/tmp/a.mp3"
        assert "-autoexit" in cmd
        assert "-loop" not in cmd
        assert cmd[cmd.index("-volume") + 1] == "100"

    def test_loop(self):
        cmd = build_command("ffplay", "/tmp/a.mp3", 0.5, ReleaseMode.LOOP)
        assert cmd[cmd.index("-loop") + 1] == "0"
        assert cmd[cmd.index("-volume") + 1] == "50"

    @pytest.mark.parametrize("volume,expected", [(-1.0, "0"), (2.0, "100"), (0.333, "33")])
    def test_volume_clamped(self, volume, expected):
        cmd = build_command("ffplay", "a.mp3", volume, ReleaseMode.RELEASE)
        assert cmd[cmd.index("-volume") + 1] == expected

    def test_log_toggle_changes_loglevel(self):
        playback.set_log_enabled(False)
        try:
            cmd = build_command("ffplay", "a.mp3", 1.0, ReleaseMode.RELEASE)
            assert cmd[cmd.index("-loglevel") + 1] == "quiet"
        finally:
            playback.set_log_enabled(True)
        cmd = build_command("ffplay", "a.mp3", 1.0, ReleaseMode.RELEASE)
        assert cmd[cmd.index("-loglevel") + 1] == "error"


class TestFfplayPlayer:
    def test_release_mode(self):
        player = FfplayPlayer("ffplay")
        assert player.release_mode == ReleaseMode.RELEASE
        player.set_release_mode(ReleaseMode.LOOP)
        assert player.release_mode == ReleaseMode.LOOP

    async def test_missing_binary(self):
        player = FfplayPlayer("definitely-not-an-ffplay-binary")
        with pytest.raises(PlaybackError):
            await player.play("/tmp/a.mp3")
        assert not player.is_playing

    async def test_stop_and_wait_when_idle(self):
        player = FfplayPlayer("ffplay")
        await player.stop()
        assert await player.wait() == 0


class TestFfplayRestart:
    async def test_sequential_plays_leave_one_process(self, ffplay_stub):
        player = FfplayPlayer(ffplay_stub.path)
        await player.play("/tmp/a.mp3")
        await player.play("/tmp/b.mp3")
        assert len(ffplay_stub.spawned) == 2
        assert ffplay_stub.live() == [ffplay_stub.spawned[-1]]
        assert player.is_playing

    async def test_overlapping_plays_leave_one_process(self, ffplay_stub):
        player = FfplayPlayer(ffplay_stub.path)
        await asyncio.gather(player.play("/tmp/a.mp3"), player.play("/tmp/b.mp3"))
        assert len(ffplay_stub.spawned) == 2
        assert len(ffplay_stub.live()) == 1

    async def test_stop_terminates_process(self, ffplay_stub):
        player = FfplayPlayer(ffplay_stub.path)
        await player.play("/tmp/a.mp3")
        await player.stop()
        assert ffplay_stub.live() == []
        assert not player.is_playing
