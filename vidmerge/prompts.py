"""Input providers: where answers to interactive questions come from.

Stages ask through an ``InputProvider`` and keep their validation logic to
themselves, so the same stage runs against a terminal, a manifest, or a
test script.
"""

from collections import deque
from typing import Any, Mapping, Protocol, Sequence

from rich.console import Console
from rich.prompt import Prompt

from vidmerge.manifest import RunConfig

CUT = "cut"
CUT_START = "cut_start"
CUT_END = "cut_end"
ON_EXISTING = "on_existing"

_TRUTHY = {"y", "yes", "true", "1"}
_AFFIRMATIVE = {"y", "yes"}


class InputExhaustedError(RuntimeError):
    """Raised when a scripted provider has no answer for a question."""


class InputProvider(Protocol):
    def confirm(self, key: str, question: str, default: bool = False) -> bool: ...

    def ask(self, key: str, question: str) -> str: ...

    def choose(self, key: str, question: str, choices: Sequence[str]) -> str: ...


class ConsoleInput:
    """Reads answers from the terminal with rich prompts.

    A confirmation is affirmative only for ``y``/``yes``; any other reply,
    or end of input, counts as no. End of input on ``ask``/``choose`` has no
    sensible answer and raises InputExhaustedError.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def confirm(self, key: str, question: str, default: bool = False) -> bool:
        hint = "(Y/n)" if default else "(y/N)"
        try:
            reply = Prompt.ask(
                f"{question} {hint}",
                default="y" if default else "n",
                show_default=False,
                console=self.console,
            )
        except EOFError:
            return default
        return reply.strip().lower() in _AFFIRMATIVE

    def ask(self, key: str, question: str) -> str:
        try:
            return Prompt.ask(question, console=self.console).strip()
        except EOFError:
            raise InputExhaustedError(f"End of input while asking for {key!r}") from None

    def choose(self, key: str, question: str, choices: Sequence[str]) -> str:
        try:
            reply = Prompt.ask(
                question,
                choices=list(choices),
                case_sensitive=False,
                console=self.console,
            )
        except EOFError:
            raise InputExhaustedError(f"End of input while asking for {key!r}") from None
        return reply.strip()


class ScriptedInput:
    """Answers questions from a prepared mapping of ``key -> answer(s)``.

    A key may map to one answer or a sequence of answers consumed in order,
    which is how retry loops are scripted. Unanswered questions go to
    ``fallback`` if given, else raise InputExhaustedError.
    """

    def __init__(
        self,
        answers: Mapping[str, Any] | None = None,
        fallback: InputProvider | None = None,
    ) -> None:
        self._answers: dict[str, deque] = {}
        for key, value in (answers or {}).items():
            if value is None:
                continue
            if isinstance(value, (list, tuple)):
                self._answers[key] = deque(value)
            else:
                self._answers[key] = deque([value])
        self.fallback = fallback
        self.asked: list[str] = []

    @classmethod
    def from_config(cls, config: RunConfig, fallback: InputProvider | None = None) -> "ScriptedInput":
        answers = {
            CUT: config.cut.enabled,
            CUT_START: config.cut.start,
            CUT_END: config.cut.end,
            ON_EXISTING: config.on_existing.value if config.on_existing else None,
        }
        return cls(answers, fallback=fallback)

    def _next(self, key: str) -> Any:
        self.asked.append(key)
        queue = self._answers.get(key)
        if queue:
            return queue.popleft()
        raise InputExhaustedError(f"No answer available for {key!r}")

    def confirm(self, key: str, question: str, default: bool = False) -> bool:
        try:
            value = self._next(key)
        except InputExhaustedError:
            if self.fallback is None:
                raise
            return self.fallback.confirm(key, question, default)
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in _TRUTHY

    def ask(self, key: str, question: str) -> str:
        try:
            return str(self._next(key)).strip()
        except InputExhaustedError:
            if self.fallback is None:
                raise
            return self.fallback.ask(key, question)

    def choose(self, key: str, question: str, choices: Sequence[str]) -> str:
        try:
            return str(self._next(key)).strip()
        except InputExhaustedError:
            if self.fallback is None:
                raise
            return self.fallback.choose(key, question, choices)
