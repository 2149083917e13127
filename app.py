from __future__ import annotations

import datetime as dt
import logging
from typing import Callable

from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Input, ProgressBar, Static
from rich.markup import escape

import config
from keyboard import render_keyboard
from metrics import CharState, classify_chars, round_half_up
from passages import Passage, load_passage
from session import (
    SessionState,
    apply_input,
    new_session,
    next_expected_char,
    progress_percent,
    reset,
)


logger = logging.getLogger(__name__)

Clock = Callable[[], dt.datetime]

CHAR_MARKUP = {
    CharState.CORRECT: "[#7fd17f on #2f4f2f]{}[/]",
    CharState.INCORRECT: "[bold #ff8080 on #4f2f2f]{}[/]",
    CharState.CURRENT: "[bold black on #e0a030]{}[/]",
    CharState.PENDING: "[#a0a0a0]{}[/]",
}


def utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def format_elapsed(seconds: float) -> str:
    return f"Time: {round_half_up(seconds)}s"


def render_passage(typed_text: str, target_text: str) -> str:
    rendered = []
    for ch, state in zip(target_text, classify_chars(typed_text, target_text)):
        rendered.append(CHAR_MARKUP[state].format(escape(ch)))
    return "".join(rendered)


class SessionScreen(Screen):
    BINDINGS = [
        ("ctrl+r", "reset", "Reset"),
        ("ctrl+n", "new_passage", "New passage"),
        ("escape", "app.quit", "Quit"),
    ]

    def __init__(
        self,
        passage: Passage | None = None,
        settings: config.Settings | None = None,
        clock: Clock = utc_now,
    ) -> None:
        super().__init__()
        self.settings = settings or config.Settings()
        self.clock = clock
        self.passage = passage
        self.state = new_session(passage.text if passage else "")

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="session"):
            yield Static(self.settings.focus_letters, id="focus-letters")
            yield Static("Focus on these keys", id="focus-caption")
            with Horizontal(id="metrics"):
                yield Static("WPM: 0", id="wpm")
                yield Static("Accuracy: 100%", id="accuracy")
                yield Static("Errors: 0", id="errors")
                yield Static("Time: 0s", id="time")
            with Horizontal(id="progress-row"):
                yield Static("Progress 0%", id="progress-label")
                yield ProgressBar(total=100, show_eta=False, show_percentage=False, id="progress")
            yield Static("", id="lesson-title")
            yield Static("", id="lesson-text")
            yield Static("", id="keyboard")
            yield Input(placeholder="Start typing here...", id="typing-input")
            with Horizontal(id="session-buttons"):
                yield Button("Reset", id="reset", variant="primary")
                yield Button("New Passage", id="new-passage")
            yield Static("", id="completion")
        yield Footer()

    def on_mount(self) -> None:
        if self.passage is None:
            self._load_passage()
        else:
            self._render_state()
        self.query_one("#typing-input", Input).focus()

    def _load_passage(self) -> None:
        self.passage = load_passage(self.settings.passage_source)
        self.state = new_session(self.passage.text)
        self._clear_input()
        self._render_state()

    def on_input_changed(self, event: Input.Changed) -> None:
        self.state = apply_input(self.state, event.value, self.clock())
        self._render_state()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "reset":
            self.action_reset()
        elif event.button.id == "new-passage":
            self.action_new_passage()

    def action_reset(self) -> None:
        self.state = reset(self.state)
        self._clear_input()
        self._render_state()
        self.query_one("#typing-input", Input).focus()

    def action_new_passage(self) -> None:
        self._load_passage()
        self.query_one("#typing-input", Input).focus()

    def _clear_input(self) -> None:
        typing_input = self.query_one("#typing-input", Input)
        with typing_input.prevent(Input.Changed):
            typing_input.value = ""

    def _render_state(self) -> None:
        state: SessionState = self.state
        metrics = state.metrics

        self.query_one("#wpm", Static).update(f"WPM: {metrics.wpm}")
        self.query_one("#accuracy", Static).update(f"Accuracy: {metrics.accuracy}%")
        self.query_one("#errors", Static).update(f"Errors: {metrics.error_count}")
        self.query_one("#time", Static).update(format_elapsed(metrics.elapsed_seconds))

        progress = progress_percent(state)
        self.query_one("#progress-label", Static).update(f"Progress {progress}%")
        self.query_one("#progress", ProgressBar).update(progress=progress)

        title = self.passage.title if self.passage else ""
        self.query_one("#lesson-title", Static).update(f"Lesson: {escape(title)}")
        self.query_one("#lesson-text", Static).update(
            render_passage(state.user_input, state.target_text)
        )
        self.query_one("#keyboard", Static).update(
            render_keyboard(next_expected_char(state), self.settings.focus_letters)
        )

        self.query_one("#typing-input", Input).disabled = state.is_complete
        self.query_one("#reset", Button).label = "Try Again" if state.is_complete else "Reset"
        completion = ""
        if state.is_complete:
            completion = (
                "Great job! You completed the text with "
                f"[b]{metrics.wpm} WPM[/b] and [b]{metrics.accuracy}% accuracy[/b]!"
            )
        self.query_one("#completion", Static).update(completion)


class TypingTutorApp(App):
    CSS = """
    #session {
        padding: 1 2;
    }

    #focus-letters {
        content-align: center middle;
        text-style: bold;
        color: $primary;
    }

    #focus-caption {
        content-align: center middle;
        color: $text-muted;
        margin-bottom: 1;
    }

    #metrics, #progress-row, #session-buttons {
        height: auto;
        margin: 1 0;
    }

    #metrics Static {
        width: 1fr;
        content-align: center middle;
        text-style: bold;
    }

    #progress-label {
        width: 16;
    }

    #lesson-text {
        height: 8;
        border: solid $primary;
        padding: 1;
        overflow: auto;
    }

    #keyboard {
        margin: 1 0;
    }

    #typing-input {
        border: solid $secondary;
    }

    #completion {
        content-align: center middle;
        color: $success;
    }
    """

    TITLE = config.APP_NAME
    SUB_TITLE = "Effortless Typing Mastery"

    def __init__(
        self,
        settings: config.Settings | None = None,
        passage: Passage | None = None,
        clock: Clock = utc_now,
    ) -> None:
        super().__init__()
        self.settings = settings or config.Settings()
        self.passage = passage
        self.clock = clock

    def on_mount(self) -> None:
        self.push_screen(SessionScreen(self.passage, self.settings, self.clock))


def main() -> None:
    settings = config.load_settings()
    settings.log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=settings.log_file,
        level=settings.log_level,
        format=config.LOG_FORMAT,
    )
    passage = load_passage(settings.passage_source)
    logger.info("Starting %s with %s passage", config.APP_NAME, passage.source)
    TypingTutorApp(settings, passage).run()


if __name__ == "__main__":
    main()
