"""Interactive confirmation for destructive steps."""

import signal
import threading
from typing import Callable

__all__ = ["Confirm", "is_affirmative", "console_confirm", "scripted_confirm"]

Confirm = Callable[[str], bool]

_YES = {"y", "yes"}


def is_affirmative(answer: str) -> bool:
    return (answer or "").strip().lower() in _YES


def console_confirm(prompt: str) -> bool:
    """Ask on the terminal. End of input or Ctrl-C counts as "no".

    While the prompt is open, SIGINT raises ``KeyboardInterrupt`` again, so an
    event loop's own handler cannot leave ``input()`` blocked.
    """
    on_main = threading.current_thread() is threading.main_thread()
    previous = signal.signal(signal.SIGINT, signal.default_int_handler) if on_main else None
    try:
        answer = input(f"{prompt} (y/N): ")
    except (EOFError, KeyboardInterrupt):
        print()
        return False
    finally:
        if previous is not None:
            signal.signal(signal.SIGINT, previous)
    return is_affirmative(answer)


def scripted_confirm(answer: str) -> Confirm:
    """Return a confirm callable that always gives ``answer``."""

    def _confirm(prompt: str) -> bool:
        return is_affirmative(answer)

    return _confirm
