"""Strategies for telling whether a submitted login form is still pending.

Pinterest gives no event for a rejected submission: the page does not
navigate and the only visible change is an inline error tooltip that nudges
the clicked control by a few pixels. The default detector watches for exactly
that. It is a best-effort heuristic, not a guarantee.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol


class SubmissionState(Enum):
    PENDING = "pending"
    REJECTED = "rejected"
    PROGRESSED = "progressed"


@dataclass(frozen=True)
class SubmissionSnapshot:
    """What the page looked like at one poll.

    ``boxes`` holds one bounding box per clicked element, in click order;
    ``None`` where the element had no box (hidden or detached).
    """

    identifier_present: bool
    boxes: tuple[Optional[dict], ...] = ()


class RejectionDetector(Protocol):
    def classify(self, before: SubmissionSnapshot, after: SubmissionSnapshot) -> SubmissionState:
        ...


class BoundingBoxRejectionDetector:
    """Flags a rejection when any clicked element moved from its baseline position."""

    def classify(self, before: SubmissionSnapshot, after: SubmissionSnapshot) -> SubmissionState:
        if not after.identifier_present:
            return SubmissionState.PROGRESSED
        if after.boxes != before.boxes:
            return SubmissionState.REJECTED
        return SubmissionState.PENDING
