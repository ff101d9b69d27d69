"""Settings dialog flow for adding a savings goal or a spending alert.

    CLOSED --open--> SELECTING_KIND --pick--> EDITING_GOAL | EDITING_ALERT
    EDITING_* --back--> SELECTING_KIND
    any --close / successful submit--> CLOSED (drafts reset)

States are immutable; every transition returns a new ``WizardState``.
Transitions that are not in the table return the state unchanged.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Tuple

from finpulse.functional import Either, Left
from finpulse.services import PersonalizationService


class WizardStep(Enum):
    CLOSED = "closed"
    SELECTING_KIND = "select"
    EDITING_GOAL = "goal"
    EDITING_ALERT = "alert"


class WidgetKind(Enum):
    GOAL = "goal"
    ALERT = "alert"


@dataclass(frozen=True)
class GoalDraft:
    name: str = ""
    target: str = ""
    current: str = ""


@dataclass(frozen=True)
class AlertDraft:
    category: str = ""
    limit: str = ""


@dataclass(frozen=True)
class WizardState:
    step: WizardStep = WizardStep.CLOSED
    goal: GoalDraft = field(default_factory=GoalDraft)
    alert: AlertDraft = field(default_factory=AlertDraft)

    @property
    def is_open(self) -> bool:
        return self.step is not WizardStep.CLOSED


def open_settings(state: WizardState) -> WizardState:
    if state.step is not WizardStep.CLOSED:
        return state
    return replace(state, step=WizardStep.SELECTING_KIND)


def pick_kind(state: WizardState, kind: WidgetKind) -> WizardState:
    if state.step is not WizardStep.SELECTING_KIND:
        return state
    step = WizardStep.EDITING_GOAL if kind is WidgetKind.GOAL else WizardStep.EDITING_ALERT
    return replace(state, step=step)


def go_back(state: WizardState) -> WizardState:
    if state.step not in (WizardStep.EDITING_GOAL, WizardStep.EDITING_ALERT):
        return state
    return replace(state, step=WizardStep.SELECTING_KIND)


def close(state: WizardState) -> WizardState:
    return WizardState()


def edit_goal_draft(state: WizardState, **changes) -> WizardState:
    if state.step is not WizardStep.EDITING_GOAL:
        return state
    return replace(state, goal=replace(state.goal, **changes))


def edit_alert_draft(state: WizardState, **changes) -> WizardState:
    if state.step is not WizardStep.EDITING_ALERT:
        return state
    return replace(state, alert=replace(state.alert, **changes))


def submit(state: WizardState, service: PersonalizationService) -> Tuple[WizardState, Either]:
    """Create the drafted goal or alert.

    On success the dialog closes and drafts reset. On rejection the state is
    returned as-is so the user can fix the form.
    """
    if state.step is WizardStep.EDITING_GOAL:
        result = service.create_goal(state.goal.name, state.goal.target, state.goal.current)
    elif state.step is WizardStep.EDITING_ALERT:
        result = service.upsert_alert(state.alert.category, state.alert.limit)
    else:
        return state, Left({
            "error": "nothing_to_submit",
            "message": f"Nothing to submit in step {state.step.value}",
        })

    if result.is_right():
        return close(state), result
    return state, result
