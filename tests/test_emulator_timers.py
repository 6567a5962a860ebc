"""
Timer and Entropy Unit Tests
============================

Tests for the delay/sound timer pair and the random byte source.
"""

import random

import pytest

from chip8_emu.emulator import EntropySource, Timers


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def timers():
    """Create zeroed timers."""
    return Timers()


# =============================================================================
# Timer Tests
# =============================================================================

class TestTimers:
    """Test delay and sound countdowns."""

    def test_initially_zero(self, timers):
        """Both timers start at zero."""
        assert timers.delay == 0
        assert timers.sound == 0
        assert not timers.sound_active

    def test_tick_decrements_both(self, timers):
        """tick() lowers both timers by one."""
        timers.delay = 5
        timers.sound = 3
        timers.tick()
        assert timers.delay == 4
        assert timers.sound == 2

    def test_floor_at_zero(self, timers):
        """Timers stop at zero."""
        timers.delay = 1
        for _ in range(3):
            timers.tick()
        assert timers.delay == 0

    def test_independent(self, timers):
        """A zero timer does not hold the other back."""
        timers.sound = 2
        timers.tick()
        assert timers.delay == 0
        assert timers.sound == 1

    def test_values_masked(self, timers):
        """Timer values are 8-bit."""
        timers.delay = 0x1FF
        assert timers.delay == 0xFF

    def test_sound_active_until_zero(self, timers):
        """The tone sounds while the sound timer is non-zero."""
        timers.sound = 1
        assert timers.sound_active
        timers.tick()
        assert not timers.sound_active

    def test_reset(self, timers):
        """reset() zeroes both timers."""
        timers.delay = 9
        timers.sound = 9
        timers.reset()
        assert (timers.delay, timers.sound) == (0, 0)


# =============================================================================
# Entropy Tests
# =============================================================================

class TestEntropySource:
    """Test the random byte source."""

    def test_bytes_in_range(self):
        """Generated values are bytes."""
        source = EntropySource()
        for _ in range(200):
            assert 0 <= source.next_byte() <= 255

    def test_same_seed_same_sequence(self):
        """Two sources with the same seed agree."""
        a = EntropySource(seed=99)
        b = EntropySource(seed=99)
        assert [a.next_byte() for _ in range(20)] == [b.next_byte() for _ in range(20)]

    def test_reseed_restarts_sequence(self):
        """Reseeding with the original seed replays the sequence."""
        source = EntropySource(seed=5)
        first = [source.next_byte() for _ in range(10)]
        source.reseed(5)
        assert [source.next_byte() for _ in range(10)] == first

    def test_injected_generator(self):
        """An injected generator is used as is."""
        rng = random.Random(3)
        expected = random.Random(3).randint(0, 255)
        assert EntropySource(rng=rng).next_byte() == expected
