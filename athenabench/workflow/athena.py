"""athenahealth stages: SSO or direct login, practice/department selection and patient search."""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Optional, Tuple

from athenabench.config import BenchmarkConfig
from athenabench.exceptions import ElementNotFoundError
from athenabench.selenium.frames import LOCATION_SCRIPT, find_in_frames, frame_urls
from athenabench.selenium.locators import (
    by_label,
    by_placeholder,
    by_role,
    by_test_id,
    by_text,
    css,
    first_visible,
    pattern,
)
from athenabench.workflow.runner import StepContext
from athenabench.workflow.steps import Completion, Interaction, UiStep

logger = logging.getLogger(__name__)

GO_BUTTON = (
    by_role("button", "Go"),
    css("button", text=pattern(r"^go$")),
    css("input[type='submit'][value*='Go']"),
    by_role("button", pattern(r"\bgo\b")),
    by_test_id("go"),
)

USERNAME_FIELD = (
    css("input[name='username']"),
    css("input#username"),
    css("input[type='email']"),
    by_label(pattern(r"user ?name|e-?mail")),
)
PASSWORD_FIELD = (css("input[type='password']"),)
SIGN_IN_BUTTON = (
    by_role("button", pattern(r"sign ?in|log ?in")),
    css("input[type='submit'][value*='Sign']"),
)

SEARCH_FIELD = (
    css("#search input"),
    css("div#search input"),
    css(".searchbox input"),
    css("#searchinput"),
    by_placeholder("find patient or clinical"),
    by_placeholder(pattern(r"find patient or clinical")),
)
SEARCH_BUTTON = (
    by_role("button", pattern(r"search")),
    css("button[type='submit']"),
    by_test_id("search"),
    css("input[type='submit']"),
)
ANY_INPUT = (
    css("input[type='text']"),
    css("input[type='search']"),
    css("input[placeholder]"),
)
RESULTS_LIST = (
    css("#searchresults"),
    css(".searchresults"),
    css("table.patientsearchresults"),
)
PATIENT_MENU_TRIGGER = (css(".drop-down-popup-trigger"),)
DASHBOARD_HEADING = (by_role("heading", "Dashboard"),)

AUTOCOMPLETE_CONTAINERS = (
    css(".autocomplete"),
    css(".dropdown"),
    css("[role='listbox']"),
    css("ul"),
)


def name_parts(term: str) -> list[str]:
    """Split a "last, first" search term into its non-empty parts."""
    return [part.strip() for part in term.split(",") if part.strip()]


def patient_name_pattern(term: str) -> re.Pattern[str]:
    parts = [re.escape(p) for p in name_parts(term)] or [re.escape(term)]
    return pattern(".*".join(parts))


def patient_options(term: str) -> Tuple:
    """Autocomplete entries for ``term``, in both name orders and inside the usual list containers."""
    parts = [re.escape(p) for p in name_parts(term)] or [re.escape(term)]
    options: list = [by_text(pattern(".*".join(parts)))]
    if len(parts) > 1:
        options.append(by_text(pattern(".*".join(reversed(parts)))))
    first = by_text(pattern(parts[0]))
    options.extend(first.within(container) for container in AUTOCOMPLETE_CONTAINERS)
    return tuple(options)


def sso_login(ctx: StepContext) -> None:
    """Open the SSO entry page and pass the first Go control.

    When no Go control shows up the operator is given ``manual_login_wait_s``
    to finish by hand. That time is recorded as the login duration and the step
    is marked manual, which keeps it out of the login bound.
    """
    cfg = ctx.config
    ctx.trigger()
    ctx.driver.get(cfg.base_url)
    ctx.wait_for("networkidle", cfg.waits.navigation_timeout_s)
    logger.info("SSO page loaded, looking for Go button...")

    if cfg.credentials.provided:
        _prefill_credentials(ctx)

    go = ctx.find(GO_BUTTON)
    if go is None:
        logger.warning(
            "Go button not found; waiting %.0f s for manual completion or a different flow.",
            cfg.waits.manual_login_wait_s,
        )
        ctx.complete_manually(cfg.waits.manual_login_wait_s)
        return

    logger.info("Found first Go button (%s in %s), clicking...", go.locator, go.frame_label)
    ctx.act(go, "click")
    ctx.wait_for("networkidle", cfg.waits.navigation_timeout_s)


def _prefill_credentials(ctx: StepContext) -> None:
    timeout = ctx.config.waits.frame_lookup_timeout_s
    user = ctx.find(USERNAME_FIELD, timeout_s=timeout)
    if user is None:
        logger.info("No username field on the SSO page; skipping credential pre-fill.")
        return
    ctx.act(user, "fill", ctx.config.credentials.username)

    password = ctx.find(PASSWORD_FIELD, timeout_s=timeout, search_frames=False)
    if password is None:
        logger.warning("Username field found without a password field; leaving the form as is.")
        return
    ctx.act(password, "fill", ctx.config.credentials.password)

    submit = ctx.find(SIGN_IN_BUTTON, timeout_s=timeout, search_frames=False)
    if submit is not None:
        ctx.act(submit, "click")
        ctx.wait_for("networkidle", ctx.config.waits.navigation_timeout_s)


def practice_selection(ctx: StepContext) -> None:
    """Open the SSO page, pick the configured practice and confirm with Go."""
    cfg = ctx.config
    ctx.trigger()
    ctx.driver.get(cfg.base_url)
    ctx.wait_for("domcontentloaded", cfg.waits.navigation_timeout_s)

    practice = ctx.require((css("div", text=pattern(re.escape(cfg.practice_name))),), f"Practice {cfg.practice_name!r}")
    ctx.act(practice, "click")
    go = ctx.require(GO_BUTTON, "Practice Go button")
    ctx.act(go, "click")


def department_selection(ctx: StepContext) -> None:
    go = ctx.find(GO_BUTTON)
    if go is None:
        ctx.skip("Second Go button not found - may have completed with first click")

    logger.info("Found second Go button (department selection), clicking...")
    ctx.trigger()
    ctx.act(go, "click")
    ctx.wait_for("domcontentloaded")


@dataclass(frozen=True)
class PatientSearch:
    """Type a patient search and wait until results are observable.

    The clock starts when the search is submitted: the autocomplete entry is
    clicked, the search button is clicked or Enter is pressed.
    """

    term: str
    results_url_fragment: Optional[str] = "findpatient.esp"
    results_indicators: Tuple = RESULTS_LIST
    use_autocomplete: bool = True

    def __call__(self, ctx: StepContext) -> None:
        waits = ctx.config.waits
        ctx.pause(waits.settle_s)
        ctx.pause(waits.search_field_settle_s)
        logger.info("Current URL after login: %s", ctx.driver.current_url)
        logger.info("Found %d documents on the page", len(frame_urls(ctx.driver)))

        field = ctx.find(SEARCH_FIELD)
        if field is not None:
            logger.info("Found search field in %s", field.frame_label)
            self._submit(ctx, field)
        else:
            logger.info("Search field not found in any frame. Looking for any input field...")
            fallback = ctx.find(ANY_INPUT, timeout_s=waits.frame_lookup_timeout_s)
            if fallback is None:
                raise ElementNotFoundError("No suitable search fields found in any frame.")
            logger.info("Found input field in %s, using for search...", fallback.frame_label)
            ctx.act(fallback, "fill", self.term)
            ctx.trigger()
            ctx.act(fallback, "press_enter")

        logger.info("Search submitted, waiting for results...")
        self._await_results(ctx)

    def _submit(self, ctx: StepContext, field) -> None:
        waits = ctx.config.waits
        logger.info("Typing %r letter by letter...", self.term)
        ctx.act(field, "type", self.term)

        if self.use_autocomplete:
            ctx.pause(waits.dropdown_wait_s)
            option = ctx.find(patient_options(self.term), timeout_s=waits.frame_lookup_timeout_s, search_frames=False)
            if option is not None:
                logger.info("Found patient in dropdown, clicking...")
                ctx.trigger()
                ctx.act(option, "click")
                return

            logger.info("No dropdown found, trying search submission...")
            button = ctx.find(SEARCH_BUTTON, timeout_s=waits.frame_lookup_timeout_s, search_frames=False)
            if button is not None:
                logger.info("Found search button, clicking...")
                ctx.trigger()
                ctx.act(button, "click")
                return

        logger.info("Pressing Enter to search...")
        ctx.trigger()
        ctx.act(field, "press_enter")

    def _await_results(self, ctx: StepContext) -> None:
        waits = ctx.config.waits
        attempts = max(1, math.ceil(waits.results_timeout_s / waits.results_poll_s))
        for _ in range(attempts):
            ctx.pause(waits.results_poll_s)
            where = find_in_frames(ctx.driver, self._results_location)
            if where:
                logger.info("Search results loaded: %s", where)
                return
        logger.error("Search results page did not load within %.0f s", waits.results_timeout_s)
        raise ElementNotFoundError("Search results page not found.")

    def _results_location(self, driver) -> Optional[str]:
        if self.results_url_fragment:
            url = driver.execute_script(LOCATION_SCRIPT) or ""
            if self.results_url_fragment in url:
                return url
        for indicator in self.results_indicators:
            if first_visible(driver, indicator) is not None:
                return str(indicator)
        return None


def direct_login_steps(cfg: BenchmarkConfig) -> list[UiStep]:
    """Username/password login, Workflow Dashboard and a placeholder search, for sandboxes without SSO."""
    creds = cfg.credentials
    return [
        UiStep(
            "loginDuration",
            (
                Interaction((by_label(pattern(r"^user ?name")),) + USERNAME_FIELD, action="fill", value=creds.username, label="Username field"),
                Interaction((by_label(pattern(r"^password")),) + PASSWORD_FIELD, action="fill", value=creds.password, label="Password field"),
                Interaction((by_role("button", "Log In"),) + SIGN_IN_BUTTON, label="Log In button"),
            ),
            Completion(target=DASHBOARD_HEADING, timeout_s=30, label="Dashboard heading"),
            navigate=True,
            critical=True,
        ),
        UiStep(
            "dashboardLoadDuration",
            (Interaction((by_role("link", pattern(r"workflow dashboard")),), label="Workflow Dashboard link"),),
            Completion(target=(by_role("heading", pattern(r"workflow dashboard")),), timeout_s=20, label="Workflow Dashboard heading"),
        ),
        UiStep(
            "searchDuration",
            (
                Interaction(
                    (by_placeholder(pattern(r"search for patient")),) + SEARCH_FIELD,
                    action="fill",
                    value=cfg.search_term,
                    label="Patient search field",
                ),
                Interaction((by_role("button", "Search"),) + SEARCH_BUTTON, label="Search button"),
            ),
            Completion(target=(by_role("list"),) + RESULTS_LIST, timeout_s=15, label="Search results"),
            critical=True,
        ),
    ]


__all__ = [
    "DASHBOARD_HEADING",
    "GO_BUTTON",
    "PATIENT_MENU_TRIGGER",
    "PatientSearch",
    "department_selection",
    "direct_login_steps",
    "name_parts",
    "patient_name_pattern",
    "patient_options",
    "practice_selection",
    "sso_login",
]