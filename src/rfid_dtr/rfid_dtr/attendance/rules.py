from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import is_before_noon
from ..core.enums import AttendanceAction, DaySession
from .model import TimeRecord


@dataclass(frozen=True)
class ActionRule:
    """One row of the guard table: window check, target slot and messages."""

    action: AttendanceAction
    slot: str
    session: DaySession
    window: Optional[Callable[[datetime], bool]]
    window_message: Optional[str]
    duplicate_message: str
    success_message: str

    def window_allows(self, now: datetime) -> bool:
        return self.window is None or self.window(now)

    def already_recorded(self, record: TimeRecord) -> bool:
        return record.slot(self.slot).is_set

    def rejection_for_duplicate(self, user_name: str) -> str:
        return self.duplicate_message.format(name=user_name)

    def success_for(self, user_name: str, clock: str) -> str:
        return self.success_message.format(name=user_name, time=clock)


ACTION_RULES: dict[AttendanceAction, ActionRule] = {
    AttendanceAction.TIME_IN_AM: ActionRule(
        action=AttendanceAction.TIME_IN_AM,
        slot="time_in_am",
        session=DaySession.AM,
        window=is_before_noon,
        window_message="Time In AM is only allowed before 12:00 PM.",
        duplicate_message="{name}, you have already timed in for AM today.",
        success_message="Welcome {name}! Time In AM recorded at {time}",
    ),
    # Allowed at any hour, including without a prior Time In AM.
    AttendanceAction.TIME_OUT_AM: ActionRule(
        action=AttendanceAction.TIME_OUT_AM,
        slot="time_out_am",
        session=DaySession.AM,
        window=None,
        window_message=None,
        duplicate_message="{name}, you have already timed out for AM today.",
        success_message="{name}, Time Out AM recorded at {time}",
    ),
    AttendanceAction.TIME_IN_PM: ActionRule(
        action=AttendanceAction.TIME_IN_PM,
        slot="time_in_pm",
        session=DaySession.PM,
        window=lambda now: not is_before_noon(now),
        window_message="Time In PM is only allowed from 12:00 PM onwards.",
        duplicate_message="{name}, you have already timed in for PM today.",
        success_message="Welcome {name}! Time In PM recorded at {time}",
    ),
    AttendanceAction.TIME_OUT_PM: ActionRule(
        action=AttendanceAction.TIME_OUT_PM,
        slot="time_out_pm",
        session=DaySession.PM,
        window=None,
        window_message=None,
        duplicate_message="{name}, you have already timed out for PM today.",
        success_message="Goodbye {name}! Time Out PM recorded at {time}. See you tomorrow!",
    ),
}


def rule_for(action: AttendanceAction) -> ActionRule:
    return ACTION_RULES[action]


def suggest_action(record: TimeRecord, now: datetime) -> Optional[AttendanceAction]:
    """Legacy auto-determination: next unset slot of the current half-day.

    Only used when the caller opts in; never proposes an already recorded slot.
    """

    if is_before_noon(now):
        order = (AttendanceAction.TIME_IN_AM, AttendanceAction.TIME_OUT_AM)
    else:
        order = (AttendanceAction.TIME_IN_PM, AttendanceAction.TIME_OUT_PM)

    for action in order:
        if not rule_for(action).already_recorded(record):
            return action
    return None
