# src/task_assistant/parsing/args.py

from __future__ import annotations

_QUOTES = ('"', "'")
_SEPARATORS = (" ", "\t")


def split_command_args(text: str) -> list[str]:
    """
    Split a command line into arguments, honoring single and double quotes.

    - runs of spaces/tabs outside quotes separate arguments;
    - a quote opens a span that only the same quote character closes;
    - quote characters are dropped, quoted content is kept literally;
    - an unterminated quote runs to the end of the input.
    """
    args: list[str] = []
    current: list[str] = []
    quote: str | None = None

    for ch in text or "":
        if quote is None and ch in _QUOTES:
            quote = ch
            continue

        if quote is not None and ch == quote:
            quote = None
            continue

        if quote is None and ch in _SEPARATORS:
            if current:
                args.append("".join(current))
                current = []
            continue

        current.append(ch)

    if current:
        args.append("".join(current))

    return args
