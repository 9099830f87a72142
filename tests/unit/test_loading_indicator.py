"""Tests for the deferred loading indicator."""

import asyncio

import pytest

from straqa.services.loading_indicator import DeferredLoadingIndicator


class TestDeferredLoadingIndicator:
    """Tests for DeferredLoadingIndicator."""

    def test_appears_after_delay(self, clock):
        """The spinner shows only once the delay has passed."""
        indicator = DeferredLoadingIndicator(delay=1.0, scheduler=clock)

        indicator.start()
        clock.advance(0.9)
        assert indicator.visible is False

        clock.advance(0.2)
        assert indicator.visible is True
        assert indicator.pending is False

    def test_cancel_before_delay(self, clock):
        """Cancelling early means the spinner never shows."""
        indicator = DeferredLoadingIndicator(delay=1.0, scheduler=clock)

        indicator.start()
        clock.advance(0.5)
        indicator.cancel()
        clock.advance(10)

        assert indicator.visible is False
        assert clock.pending() == []

    def test_cancel_hides_visible_spinner(self, clock):
        """Cancelling after the spinner appeared hides it again."""
        changes = []
        indicator = DeferredLoadingIndicator(delay=1.0, scheduler=clock, on_change=changes.append)

        indicator.start()
        clock.advance(2)
        indicator.cancel()

        assert indicator.visible is False
        assert changes == [True, False]

    def test_restart_replaces_timer(self, clock):
        """Starting twice leaves a single armed timer."""
        indicator = DeferredLoadingIndicator(delay=1.0, scheduler=clock)

        indicator.start()
        indicator.start()

        assert len(clock.pending()) == 1

    def test_context_manager_cancels_on_error(self, clock):
        """Leaving the block through an exception still clears the timer."""
        indicator = DeferredLoadingIndicator(delay=1.0, scheduler=clock)

        async def _run():
            async with indicator:
                clock.advance(1.5)
                assert indicator.visible is True
                raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            asyncio.run(_run())

        assert indicator.visible is False
        assert clock.pending() == []

    def test_default_scheduler_uses_event_loop(self):
        """Without a scheduler the running loop's timer is used."""
        indicator = DeferredLoadingIndicator(delay=0.01)

        async def _run():
            async with indicator:
                await asyncio.sleep(0.05)
                return indicator.visible

        assert asyncio.run(_run()) is True
        assert indicator.visible is False
