"""
RecognitionStateMachine 테스트

대기 시간(delay) 후 기록, 중복 제목 무시, 제안/화면 이동 명령을 검증합니다.
"""
import pytest

from config.recognition_config import RecognitionSettings
from core.novel import Novel
from core.numeric_extractor import RecognitionData
from core.recognition_state import (
    CurrentlyReading,
    ReadingState,
    RecognitionStateMachine,
    TitleObservation,
    PublishNotReading,
    PublishReadingNow,
    PublishSuggestions,
    CommitProgress,
    WaitForConfirmation,
    NavigateToReadingView,
)

step = RecognitionStateMachine.step

NOVEL = Novel(id="mol", title="Mother of Learning")
OTHER = Novel(id="twi", title="The Wandering Inn")


def observe(title, novel=None, chapter=12.0):
    return TitleObservation(
        title=title,
        data=RecognitionData(chapter=chapter, reading=True),
        novel=novel,
        novel_name=novel.title if novel else "Unknown Novel",
        source="Royal Road",
        suggestion_keyword="Unknown",
    )


def kinds(commands):
    return [type(c) for c in commands]


@pytest.fixture
def settings():
    return RecognitionSettings(delay=120)


class TestDelayedCommit:

    def test_delay_scenario(self, settings):
        obs = observe("Chapter 12 - Mother of Learning - Royal Road", NOVEL)

        state, commands = step(CurrentlyReading(), obs, settings, now=0)
        assert state.state is ReadingState.PENDING
        assert state.confirm_deadline == 120
        assert kinds(commands) == [PublishReadingNow, NavigateToReadingView]

        state, commands = step(state, obs, settings, now=60)
        assert state.state is ReadingState.PENDING
        assert kinds(commands) == [WaitForConfirmation]
        assert commands[0].seconds_left == 60

        state, commands = step(state, obs, settings, now=130)
        assert state.state is ReadingState.CONFIRMED
        assert state.confirm_deadline == 120
        assert kinds(commands) == [CommitProgress, PublishReadingNow]
        assert commands[0].novel.id == "mol"
        assert commands[0].exact_num is False

        state, commands = step(state, obs, settings, now=133)
        assert commands == []

    def test_new_chapter_of_same_novel_commits_without_waiting(self, settings):
        state, _ = step(CurrentlyReading(), observe("A - Ch 1 - x", NOVEL), settings, now=0)
        state, _ = step(state, observe("A - Ch 1 - x", NOVEL), settings, now=130)
        assert state.state is ReadingState.CONFIRMED

        state, commands = step(state, observe("A - Ch 2 - x", NOVEL, 2.0), settings, now=200)
        assert state.state is ReadingState.CONFIRMED
        assert state.confirm_deadline == 120
        assert kinds(commands) == [CommitProgress, PublishReadingNow, NavigateToReadingView]
        assert commands[0].data.chapter == 2.0

    def test_commit_tick_refreshes_display_without_navigation(self, settings):
        obs = observe("A - Ch 1 - x", NOVEL)
        state, _ = step(CurrentlyReading(), obs, settings, now=0)
        state, commands = step(state, obs, settings, now=120)
        assert kinds(commands) == [CommitProgress, PublishReadingNow]
        assert commands[1].novel.id == "mol"

    def test_candidate_change_resets_deadline(self, settings):
        state, _ = step(CurrentlyReading(), observe("A - Ch 1 - x", NOVEL), settings, now=0)
        state, commands = step(state, observe("B - Ch 1 - x", OTHER), settings, now=100)
        assert state.candidate.id == "twi"
        assert state.confirm_deadline == 220
        assert CommitProgress not in kinds(commands)

    def test_zero_delay_commits_next_tick(self):
        settings = RecognitionSettings(delay=0)
        obs = observe("A - Ch 1 - x", NOVEL)
        state, commands = step(CurrentlyReading(), obs, settings, now=0)
        assert CommitProgress not in kinds(commands)
        state, commands = step(state, obs, settings, now=3)
        assert kinds(commands) == [CommitProgress, PublishReadingNow]


class TestNotReading:

    def test_none_on_clear_state_is_noop(self, settings):
        state, commands = step(CurrentlyReading(), TitleObservation.nothing(), settings, now=0)
        assert commands == []
        assert state.is_clear

    def test_title_loss_clears_once(self, settings):
        state, _ = step(CurrentlyReading(), observe("A - Ch 1 - x", NOVEL), settings, now=0)
        state, commands = step(state, TitleObservation.nothing(), settings, now=3)
        assert kinds(commands) == [PublishNotReading]
        assert state.state is ReadingState.IDLE
        assert state.is_clear

        state, commands = step(state, TitleObservation.nothing(), settings, now=6)
        assert commands == []

    def test_unmatched_title_loss_also_clears(self, settings):
        state, _ = step(CurrentlyReading(), observe("Unknown Novel - Ch 1 - x"), settings, now=0)
        state, commands = step(state, TitleObservation.nothing(), settings, now=3)
        assert kinds(commands) == [PublishNotReading]


class TestNoMatch:

    def test_suggestions_then_display(self, settings):
        state, commands = step(CurrentlyReading(), observe("Unknown Novel - Ch 1 - x"), settings, now=0)
        assert kinds(commands) == [PublishSuggestions, PublishReadingNow, NavigateToReadingView]
        assert commands[0].keyword == "Unknown"
        assert state.confirm_deadline is None
        assert state.state is ReadingState.IDLE

    def test_repeated_unmatched_title_is_noop(self, settings):
        obs = observe("Unknown Novel - Ch 1 - x")
        state, _ = step(CurrentlyReading(), obs, settings, now=0)
        state, commands = step(state, obs, settings, now=3)
        assert commands == []

    def test_navigation_respects_settings(self):
        settings = RecognitionSettings(when_not_novel_go_to_reading=False, when_novel_go_to_reading=False)
        _, commands = step(CurrentlyReading(), observe("Unknown - Ch 1 - x"), settings, now=0)
        assert NavigateToReadingView not in kinds(commands)
        _, commands = step(CurrentlyReading(), observe("A - Ch 1 - x", NOVEL), settings, now=0)
        assert NavigateToReadingView not in kinds(commands)

    def test_match_lost_drops_candidate(self, settings):
        state, _ = step(CurrentlyReading(), observe("A - Ch 1 - x", NOVEL), settings, now=0)
        state, commands = step(state, observe("A - Ch 1 - x"), settings, now=3)
        assert state.candidate is None
        assert state.confirm_deadline is None
        assert PublishSuggestions in kinds(commands)
