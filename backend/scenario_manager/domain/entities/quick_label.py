"""Domain entity for quick labels — speaker shortcuts inserted while editing."""

from dataclasses import dataclass

LABEL_SEPARATOR = "："


@dataclass
class QuickLabel:
    """A global, user-editable label such as a speaker name.

    Labels are shown in ascending ``order``.
    """

    label: str
    order: int = 0
    id: str | None = None


def insert_quick_label(text: str, label: str, start: int, end: int | None = None) -> tuple[str, int]:
    """Replace ``text[start:end]`` with ``"<label>："``.

    Returns the new text and the cursor position right after the insertion.
    Out-of-range positions are clamped to the text.
    """
    end = start if end is None else end
    start = max(0, min(start, len(text)))
    end = max(start, min(end, len(text)))
    inserted = f"{label}{LABEL_SEPARATOR}"
    return text[:start] + inserted + text[end:], start + len(inserted)
