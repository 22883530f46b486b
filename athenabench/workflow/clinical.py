"""Chart-level stages after a patient search: clinical documentation and scheduling."""

from __future__ import annotations

import re
from datetime import date, timedelta

from athenabench.selenium.locators import by_label, by_role, by_test_id, by_text, css, pattern
from athenabench.workflow.athena import PATIENT_MENU_TRIGGER, patient_name_pattern
from athenabench.workflow.steps import Completion, Interaction, UiStep

SUCCESS_TEXT = (by_text(pattern(r"success")), by_test_id("success"), css(".success"))

CHIEF_COMPLAINT = (
    by_label(pattern(r"chief complaint")),
    by_label(pattern(r"reason")),
    by_test_id("chief-complaint"),
    css("textarea"),
)


def follow_up_date(days: int = 30) -> str:
    return (date.today() + timedelta(days=days)).isoformat()


def clinical_steps(search_term: str) -> list[UiStep]:
    """Chart, recent activity, encounter, note, order, medications, follow-up and close."""
    name = patient_name_pattern(search_term)

    return [
        UiStep(
            "chartLoadDuration",
            (
                Interaction(
                    (by_role("link", name), by_test_id("patient"), css("a", text=name)),
                    label="Patient result link",
                ),
            ),
            Completion(
                target=(
                    by_test_id("patient-chart"),
                    by_test_id("chart"),
                    by_role("heading", name),
                    css(".patient-header"),
                    css(".chart-header"),
                ),
                timeout_s=30,
                label="Patient chart",
            ),
        ),
        UiStep(
            "recentActivityLoadDuration",
            (Interaction((by_role("tab", pattern(r"recent activity")),), label="Recent Activity tab"),),
            Completion(target=(by_role("listitem"),), timeout_s=15, label="Recent activity list"),
        ),
        UiStep(
            "encounterLoadDuration",
            (
                Interaction(
                    (
                        by_role("tab", pattern(r"encounter")),
                        by_role("tab", pattern(r"note")),
                        by_role("link", pattern(r"encounter")),
                        by_test_id("encounter"),
                    ),
                    label="Encounter tab",
                ),
                Interaction(
                    (
                        by_role("button", pattern(r"new.*encounter")),
                        by_role("button", pattern(r"create.*encounter")),
                        by_role("button", pattern(r"add.*encounter")),
                        by_test_id("new-encounter"),
                    ),
                    label="New encounter button",
                    timeout_s=20,
                ),
            ),
            Completion(target=CHIEF_COMPLAINT, timeout_s=20, label="Encounter form"),
        ),
        UiStep(
            "noteSaveDuration",
            (
                Interaction(
                    (by_role("button", pattern(r"copy.*forward")), by_role("button", pattern(r"template")), by_test_id("copy-forward")),
                    label="Copy forward button",
                    optional=True,
                    timeout_s=2,
                ),
                Interaction(CHIEF_COMPLAINT, action="fill", value="Routine follow-up visit", label="Chief complaint field"),
                Interaction(
                    (by_role("button", pattern(r"save")), by_test_id("save"), css("button[type='submit']")),
                    label="Save button",
                ),
            ),
            Completion(target=(by_text(pattern(r"saved")),) + SUCCESS_TEXT, timeout_s=15, label="Save confirmation"),
        ),
        UiStep(
            "orderPlacementDuration",
            (
                Interaction(
                    (by_role("tab", pattern(r"order")), by_role("link", pattern(r"order")), by_test_id("order")),
                    label="Orders tab",
                ),
                Interaction(
                    (
                        by_role("button", pattern(r"add.*order")),
                        by_role("button", pattern(r"new.*order")),
                        by_role("button", pattern(r"create.*order")),
                        by_test_id("add-order"),
                    ),
                    label="Add order button",
                    timeout_s=15,
                ),
                Interaction(
                    (
                        by_role("option", pattern(r"basic.*metabolic")),
                        by_role("option", pattern(r"cbc")),
                        by_role("option", pattern(r"lab")),
                        by_test_id("lab"),
                    ),
                    label="Lab order option",
                    timeout_s=5,
                ),
                Interaction(
                    (
                        by_role("button", pattern(r"order")),
                        by_role("button", pattern(r"submit")),
                        by_role("button", pattern(r"place")),
                        css("button[type='submit']"),
                    ),
                    label="Place order button",
                ),
            ),
            Completion(
                target=(by_text(pattern(r"order.*placed")), by_text(pattern(r"order.*submitted"))) + SUCCESS_TEXT,
                timeout_s=15,
                label="Order confirmation",
            ),
        ),
        UiStep(
            "medsReviewDuration",
            (Interaction((by_role("tab", pattern(r"medications")),), label="Medications tab"),),
            Completion(target=(by_role("list"),), timeout_s=10, label="Medication list"),
        ),
        UiStep(
            "scheduleDuration",
            (
                Interaction(
                    (
                        by_role("link", pattern(r"schedule.*appointment")),
                        by_role("button", pattern(r"schedule")),
                        by_test_id("schedule"),
                    ),
                    label="Schedule link",
                ),
                Interaction(
                    (
                        by_label(pattern(r"appointment.*date")),
                        by_label(pattern(r"date")),
                        css("input[type='date']"),
                        by_test_id("date"),
                    ),
                    action="fill",
                    value=follow_up_date,
                    label="Appointment date field",
                    timeout_s=15,
                ),
                Interaction(
                    (
                        by_role("button", pattern(r"book")),
                        by_role("button", pattern(r"schedule")),
                        by_role("button", pattern(r"save")),
                        css("button[type='submit']"),
                    ),
                    label="Book button",
                ),
            ),
            Completion(
                target=(by_text(pattern(r"appointment.*scheduled")), by_text(pattern(r"appointment.*booked"))) + SUCCESS_TEXT,
                timeout_s=15,
                label="Booking confirmation",
            ),
        ),
        UiStep(
            "closeDuration",
            (
                Interaction((by_role("button", pattern(r"close encounter")),), label="Close Encounter button"),
                Interaction((by_role("button", "Yes"),), label="Confirmation button"),
                Interaction((by_role("link", pattern(r"dashboard")),), label="Dashboard link"),
            ),
            Completion(target=(by_role("heading", "Dashboard"),), timeout_s=15, label="Dashboard heading"),
        ),
    ]


def scheduling_steps() -> list[UiStep]:
    """Patient menu, Quickview, Scheduling and Schedule Appointment, each followed by a fixed delay."""
    return [
        UiStep(
            "patientMenuDuration",
            (Interaction(PATIENT_MENU_TRIGGER, label="Patient menu trigger", timeout_s=15),),
            Completion(kind="delay", seconds=1),
            settle_s=5,
        ),
        UiStep(
            "quickviewDuration",
            (Interaction((by_text(pattern(re.escape("Quickview"))),), label="Quickview option", timeout_s=5),),
            Completion(kind="delay", seconds=2),
        ),
        UiStep(
            "schedulingAccessDuration",
            (Interaction((by_text("Scheduling"),), label="Scheduling option", timeout_s=5),),
            Completion(kind="delay", seconds=2),
        ),
        UiStep(
            "appointmentSchedulingDuration",
            (Interaction((by_text(pattern(re.escape("Schedule Appointment"))),), label="Schedule Appointment option", timeout_s=5),),
            Completion(kind="delay", seconds=3),
        ),
    ]
