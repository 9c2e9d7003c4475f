"""End-to-end scenarios across navigator, channel, emitter and renderer."""

import numpy as np
import pytest

from conftest import wait
from glyphdeck.app.deck import Deck
from glyphdeck.config import DeckSettings, FieldSettings, NavigatorSettings
from glyphdeck.model.sections import Side


@pytest.fixture()
def deck(three_sections, surface, clock):
    settings = DeckSettings(
        navigator=NavigatorSettings(lock_ms=80, wheel_reset_ms=40),
        glyphs=FieldSettings(frame_interval_ms=5),
    )
    d = Deck(three_sections, surface=surface, settings=settings, clock=clock, rng=np.random.default_rng(0))
    # Stand-in for the page: a requested scroll lands on the section at once
    d.navigator.scroll_handler = lambda section: d.navigator.update_visibility({section.id: 1.0})
    yield d
    d.close()


@pytest.fixture()
def events(deck):
    collected = []
    deck.channel.subscribe(collected.append)
    return collected


@pytest.fixture()
def running(deck, events):
    deck.start()
    wait(10)
    events.clear()
    return deck


class TestStartup:
    def test_first_section_published_once(self, deck, events):
        deck.start()
        wait(10)
        assert [(c.id, c.side) for c in events] == [("A", Side.LEFT)]

    def test_initial_soft_ripple_plus_one_per_change(self, deck):
        deck.start()
        wait(10)
        strengths = [r.strength for r in deck.emitter.ripples]
        assert strengths == [pytest.approx(0.4), pytest.approx(0.65)]


class TestWheelScenario:
    def test_burst_moves_to_b_and_ripples_from_the_left(self, running, events):
        running.navigator.handle_wheel(50)
        running.navigator.handle_wheel(40)

        assert running.navigator.active_index == 1
        assert [(c.id, c.side) for c in events] == [("B", Side.RIGHT)]

        ripple = running.emitter.ripples[-1]
        assert ripple.x == pytest.approx(0.18 * 1000)
        assert ripple.x < 1000 / 2
        assert running.renderer.tint == running.settings.glyphs.default_tint

    def test_second_burst_while_locked_is_dropped(self, running, events):
        running.navigator.handle_wheel(90)
        ripple_count = len(running.emitter.ripples)

        running.navigator.handle_wheel(90)

        assert running.navigator.active_index == 1
        assert [c.id for c in events] == ["B"]
        assert len(running.emitter.ripples) == ripple_count

    def test_burst_after_lock_release_moves_on(self, running, events):
        running.navigator.handle_wheel(90)
        wait(running.settings.navigator.lock_ms + 60)
        running.navigator.handle_wheel(90)
        assert [c.id for c in events] == ["B", "C"]


class TestTouchScenario:
    def test_drag_moves_forward_once(self, running, events):
        running.navigator.handle_touch_start([500.0])
        running.navigator.handle_touch_move(420.0)
        running.navigator.handle_touch_move(380.0)

        assert running.navigator.active_index == 1
        assert [c.id for c in events] == ["B"]


class TestRendering:
    def test_next_frame_sees_new_ripple(self, running, surface, clock):
        running.navigator.handle_wheel(90)
        clock.advance(0.5)
        count = len(surface.frames)
        wait(30)
        assert len(surface.frames) > count
        assert len(running.emitter.active(clock.now)) == 3

    def test_ripples_expire(self, running, clock):
        clock.advance(3.0)
        assert running.emitter.active(clock.now) == ()


class TestTeardown:
    def test_close_releases_everything(self, running, surface):
        running.navigator.handle_wheel(90)
        running.close()
        count = len(surface.frames)

        wait(running.settings.navigator.lock_ms + 40)

        assert running.closed
        assert not running.renderer.running
        assert not running.navigator.observing
        assert not running.navigator.locked
        assert running.channel.subscriber_count() == 0
        assert running.emitter.ripples == ()
        assert len(surface.frames) == count

    def test_close_is_idempotent(self, running):
        running.close()
        running.close()
        assert running.closed

    def test_context_manager(self, three_sections, surface, clock):
        with Deck(three_sections, surface=surface, clock=clock) as deck:
            assert deck.started
            assert deck.renderer.running
        assert deck.closed
        assert not deck.renderer.running

    def test_no_sections_still_renders(self, surface, clock):
        with Deck([], surface=surface, clock=clock) as deck:
            wait(40)
            assert deck.renderer.running
            assert not deck.navigator.observing
            assert surface.frames
