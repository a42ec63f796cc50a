"""
Unit tests for the action dispatcher and session context transitions.

Run: pytest tests/unit/test_action_dispatcher.py -v
"""

import random

import pytest

from joyo.core.cards import build_catalog
from joyo.core.errors import CameraUnavailable
from joyo.core.modes import Screen, SessionMode
from joyo.delivery.scheduler import EventScheduler
from joyo.delivery.state_store import MemoryBlobStore, ProgressRepository
from joyo.engine.context import SessionContext, start_session
from joyo.engine.dispatcher import (
    ACTION_TABLE,
    Action,
    ActionDispatcher,
    Command,
    Control,
    enable_gesture_mode,
    resolve,
)
from joyo.gesture.classifier import PoseLabel
from joyo.study.progress import ProgressRecord, ProgressTracker


@pytest.fixture
def dispatcher(ctx):
    return ActionDispatcher(ctx)


class TestTable:
    def test_home_both_up_starts_new(self):
        assert resolve(Screen.HOME, None, PoseLabel.BOTH_UP) == Command(
            Action.START_SESSION, SessionMode.NEW
        )

    @pytest.mark.parametrize(
        "label,position",
        [
            (PoseLabel.LEFT_UP, 0),
            (PoseLabel.RIGHT_UP, 1),
            (PoseLabel.LEFT_SIDE, 2),
            (PoseLabel.RIGHT_SIDE, 3),
        ],
    )
    def test_option_poses(self, label, position):
        assert resolve(Screen.QUIZ, False, label) == Command(Action.SELECT_OPTION, position)

    def test_options_ignored_once_answered(self):
        assert resolve(Screen.QUIZ, True, PoseLabel.LEFT_UP) is None

    def test_advance_only_when_answered(self):
        assert resolve(Screen.QUIZ, True, PoseLabel.BOTH_UP) == Command(Action.ADVANCE)
        assert resolve(Screen.QUIZ, False, PoseLabel.BOTH_UP) is None

    @pytest.mark.parametrize("answered", [False, True])
    def test_cross_arms_goes_home_from_quiz(self, answered):
        assert resolve(Screen.QUIZ, answered, PoseLabel.CROSS_ARMS) == Command(Action.GO_HOME)

    def test_stats_cross_arms(self):
        assert resolve(Screen.STATS, None, PoseLabel.CROSS_ARMS) == Command(Action.GO_HOME)

    def test_answered_ignored_outside_quiz(self):
        assert resolve(Screen.HOME, True, PoseLabel.BOTH_UP) is not None

    def test_none_label_never_mapped(self):
        for screen in Screen:
            assert resolve(screen, None, PoseLabel.NONE) is None

    def test_table_size(self):
        assert len(ACTION_TABLE) == 9


class TestGestureDispatch:
    def test_home_both_up_enters_quiz(self, ctx, dispatcher):
        command = dispatcher.on_gesture(PoseLabel.BOTH_UP)
        assert command.action is Action.START_SESSION
        assert ctx.screen is Screen.QUIZ
        assert ctx.session_mode is SessionMode.NEW
        assert ctx.session.state.index == 0
        assert not ctx.session.answered

    def test_right_up_selects_second_option(self, ctx, dispatcher, monkeypatch):
        dispatcher.on_gesture(PoseLabel.BOTH_UP)
        session = ctx.session
        expected = session.options[1].id
        calls = []
        original = session.select_option

        def spy(option_id):
            calls.append(option_id)
            return original(option_id)

        monkeypatch.setattr(session, "select_option", spy)
        dispatcher.on_gesture(PoseLabel.RIGHT_UP)
        assert calls == [expected]
        assert session.answered

    def test_second_option_pose_after_answer_is_noop(self, ctx, dispatcher):
        dispatcher.on_gesture(PoseLabel.BOTH_UP)
        dispatcher.on_gesture(PoseLabel.LEFT_UP)
        record = ctx.tracker.record
        assert dispatcher.on_gesture(PoseLabel.RIGHT_UP) is None
        assert ctx.tracker.record is record

    def test_unmapped_gesture_changes_nothing(self, ctx, dispatcher):
        assert dispatcher.on_gesture(PoseLabel.LEFT_SIDE) is None
        assert ctx.screen is Screen.HOME
        assert ctx.session is None

    def test_both_up_advances(self, ctx, dispatcher):
        dispatcher.on_gesture(PoseLabel.BOTH_UP)
        dispatcher.on_gesture(PoseLabel.LEFT_UP)
        dispatcher.on_gesture(PoseLabel.BOTH_UP)
        assert ctx.session.state.index == 1
        assert not ctx.session.answered

    def test_cross_arms_returns_home_and_cancels_flip(self, ctx, dispatcher, clock, scheduler):
        dispatcher.on_gesture(PoseLabel.BOTH_UP)
        dispatcher.on_gesture(PoseLabel.LEFT_UP)
        session = ctx.session
        dispatcher.on_gesture(PoseLabel.CROSS_ARMS)
        assert ctx.screen is Screen.HOME
        assert ctx.session is None
        clock.advance(1000)
        scheduler.run_due()
        assert not session.state.flipped


class TestNotices:
    def test_review_without_mistakes(self, ctx, dispatcher):
        dispatcher.on_pointer(Control.START_REVIEW)
        assert ctx.screen is Screen.HOME
        assert ctx.notice == "No mistakes to review! Great job."
        assert ctx.session is None

    def test_everything_mastered(self, ctx, dispatcher, catalog):
        ctx.tracker.record = ProgressRecord(mastered_ids={c.id for c in catalog})
        dispatcher.on_gesture(PoseLabel.BOTH_UP)
        assert ctx.screen is Screen.HOME
        assert ctx.notice == "You have mastered all Kanji in the database!"

    def test_failed_start_keeps_running_session(self, ctx, dispatcher):
        dispatcher.on_gesture(PoseLabel.BOTH_UP)
        session = ctx.session
        start_session(ctx, SessionMode.REVIEW)
        assert ctx.session is session
        assert ctx.screen is Screen.QUIZ
        assert ctx.notice is not None

    def test_catalog_too_small(self, tracker):
        tiny = build_catalog([{"id": "a", "char": "亜"}, {"id": "b", "char": "哀"}])
        ctx = SessionContext(catalog=tiny, tracker=tracker)
        ActionDispatcher(ctx).on_gesture(PoseLabel.BOTH_UP)
        assert ctx.screen is Screen.HOME
        assert ctx.notice == "The card catalog is too small for multiple choice."

    def test_reset_progress(self, ctx, dispatcher):
        ctx.tracker.record_answer("k01", False)
        dispatcher.on_pointer(Control.RESET)
        assert ctx.tracker.record.mistake_ids == set()
        assert ctx.notice == "Progress has been reset."


class TestPointerEquivalence:
    def _play(self, ctx, inputs, dispatch):
        for item in inputs:
            dispatch(item)
        session = ctx.session
        return (
            ctx.screen,
            session.state.index if session else None,
            session.state.selected_option_id if session else None,
            ctx.tracker.record.mastered_ids,
            ctx.tracker.record.mistake_ids,
        )

    def test_same_results(self, catalog):
        def fresh():
            return SessionContext(
                catalog=catalog,
                tracker=ProgressTracker(ProgressRepository(MemoryBlobStore())),
                scheduler=EventScheduler(clock=lambda: 0.0),
                rng=random.Random(7),
            )

        gestures = [PoseLabel.BOTH_UP, PoseLabel.RIGHT_SIDE, PoseLabel.BOTH_UP, PoseLabel.LEFT_UP]
        controls = [Control.START_LEARNING, Control.OPTION_4, Control.NEXT, Control.OPTION_1]

        g_ctx, p_ctx = fresh(), fresh()
        by_gesture = self._play(g_ctx, gestures, ActionDispatcher(g_ctx).on_gesture)
        by_pointer = self._play(p_ctx, controls, ActionDispatcher(p_ctx).on_pointer)
        assert by_gesture == by_pointer

    def test_pointer_only_controls(self, ctx, dispatcher):
        dispatcher.on_pointer(Control.VIEW_STATS)
        assert ctx.screen is Screen.STATS
        dispatcher.on_gesture(PoseLabel.CROSS_ARMS)
        assert ctx.screen is Screen.HOME

    def test_bound_controls_are_screen_scoped(self, ctx, dispatcher):
        dispatcher.on_pointer(Control.NEXT)
        assert ctx.screen is Screen.QUIZ
        dispatcher.on_pointer(Control.OPTION_1)
        dispatcher.on_pointer(Control.START_LEARNING)
        assert ctx.session.state.index == 1

    def test_flip_control(self, ctx, dispatcher):
        dispatcher.on_pointer(Control.START_LEARNING)
        dispatcher.on_pointer(Control.FLIP)
        assert ctx.session.state.flipped
        assert not ctx.session.answered


class TestEnableGestureMode:
    def test_failure_posts_notice(self, ctx):
        class Failing:
            def enable(self):
                raise CameraUnavailable("denied")

        assert enable_gesture_mode(Failing(), ctx) is False
        assert ctx.notice == CameraUnavailable.notice

    def test_success(self, ctx):
        class Working:
            def enable(self):
                pass

        assert enable_gesture_mode(Working(), ctx) is True
        assert ctx.notice is None
