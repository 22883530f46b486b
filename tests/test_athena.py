from __future__ import annotations

import pytest

from athenabench.config import DEFAULT_PRACTICE, Credentials
from athenabench.exceptions import CriticalStepError
from athenabench.metrics import StepStatus
from athenabench.selenium.locators import by_role, by_text, css, pattern
from athenabench.workflow.athena import (
    PATIENT_MENU_TRIGGER,
    PatientSearch,
    department_selection,
    name_parts,
    patient_options,
    practice_selection,
    sso_login,
)
from athenabench.workflow.runner import WorkflowRunner, WorkflowStep
from fakes import SANDBOX_URL, FakeDocument, FakeElement

BUTTON = by_role("button")
SEARCH_INPUT = css("#search input")
RESULTS_URL = "https://sandbox.example.test/ax/findpatient.esp?SEARCH=1xtest"


def _runner(driver, clock, cfg):
    return WorkflowRunner(driver, cfg, clock=clock, sleep=clock.sleep)


def _search_page(driver):
    """Top document with a navigation frame holding the search box and an empty main frame."""
    nav = driver.root.add_frame(FakeDocument("https://sandbox.example.test/ax/nav"))
    main = driver.root.add_frame(FakeDocument("https://sandbox.example.test/ax/blank"))
    return nav, main


def _show_results(main):
    def _load():
        main.url = RESULTS_URL

    return _load


def test_name_parts_and_autocomplete_candidates():
    assert name_parts("1xtest, amber") == ["1xtest", "amber"]
    assert name_parts("903430") == ["903430"]

    options = patient_options("1xtest, amber")
    assert options[0].text.search("1XTEST, AMBER")
    assert options[1].text.search("Amber 1xtest")


def test_login_is_timed_from_navigation_to_go_click(driver, clock, make_config):
    go = driver.root.add(BUTTON, FakeElement("Go", on_click=clock.advance(1.2)))

    report = _runner(driver, clock, make_config()).run([WorkflowStep("initialLoginDuration", sso_login)])

    assert driver.visited == [SANDBOX_URL]
    assert go.clicks == 1
    assert report.metrics["initialLoginDuration"] == 1200


def test_login_without_go_button_waits_for_manual_completion(driver, clock, make_config):
    report = _runner(driver, clock, make_config()).run([WorkflowStep("initialLoginDuration", sso_login)])

    assert report.metrics["initialLoginDuration"] == 30_000
    assert report.step("initialLoginDuration").status is StepStatus.SUCCEEDED
    assert report.step("initialLoginDuration").manual


def test_login_prefills_credentials_when_provided(driver, clock, make_config):
    user = driver.root.add(css("input[name='username']"), FakeElement())
    password = driver.root.add(css("input[type='password']"), FakeElement())
    sign_in = driver.root.add(BUTTON, FakeElement("Sign In"))
    driver.root.add(BUTTON, FakeElement("Go"))

    cfg = make_config(credentials=Credentials("dr.smith", "s3cret"))
    _runner(driver, clock, cfg).run([WorkflowStep("initialLoginDuration", sso_login)])

    assert user.typed == "dr.smith"
    assert password.typed == "s3cret"
    assert sign_in.clicks == 1


def test_missing_department_go_records_zero(driver, clock, make_config):
    def _consume():
        driver.root.remove(BUTTON, go)

    go = driver.root.add(BUTTON, FakeElement("Go", on_click=_consume))
    steps = [
        WorkflowStep("initialLoginDuration", sso_login),
        WorkflowStep("departmentSelectionDuration", department_selection),
    ]

    report = _runner(driver, clock, make_config()).run(steps)

    dept = report.step("departmentSelectionDuration")
    assert dept.status is StepStatus.SKIPPED
    assert dept.reason == "Second Go button not found - may have completed with first click"
    assert report.metrics["departmentSelectionDuration"] == 0


def test_department_go_is_clicked_when_present(driver, clock, make_config):
    go = driver.root.add(BUTTON, FakeElement("Go", on_click=clock.advance(0.8)))

    report = _runner(driver, clock, make_config()).run([WorkflowStep("departmentSelectionDuration", department_selection)])

    assert go.clicks == 1
    assert report.metrics["departmentSelectionDuration"] == 800


def test_practice_selection_clicks_practice_then_go(driver, clock, make_config):
    practice = driver.root.add(css("div"), FakeElement(DEFAULT_PRACTICE, on_click=clock.advance(0.3)))
    driver.root.add(css("div"), FakeElement("Practice OR - Other"))
    go = driver.root.add(BUTTON, FakeElement("Go", on_click=clock.advance(2)))

    report = _runner(driver, clock, make_config(variant="scheduling")).run(
        [WorkflowStep("practiceSelectionDuration", practice_selection)]
    )

    assert practice.clicks == 1 and go.clicks == 1
    assert report.metrics["practiceSelectionDuration"] == 2300


def test_practice_selection_skips_when_practice_is_missing(driver, clock, make_config):
    report = _runner(driver, clock, make_config()).run([WorkflowStep("practiceSelectionDuration", practice_selection)])
    result = report.step("practiceSelectionDuration")
    assert result.status is StepStatus.SKIPPED
    assert DEFAULT_PRACTICE in result.reason


def test_search_with_enter_waits_for_results_frame(driver, clock, make_config):
    nav, main = _search_page(driver)
    field = nav.add(SEARCH_INPUT, FakeElement(on_enter=_show_results(main)))

    report = _runner(driver, clock, make_config()).run(
        [WorkflowStep("searchDuration", PatientSearch("1xtest, amber"), critical=True)]
    )

    assert field.typed == "1xtest, amber"
    assert field.cleared == 1
    assert report.metrics["searchDuration"] == 500
    assert driver.stack == [driver.root]


def test_search_prefers_autocomplete_entry(driver, clock, make_config):
    nav, main = _search_page(driver)
    nav.add(SEARCH_INPUT, FakeElement())
    option = nav.add(by_text(pattern("1xtest")), FakeElement("1XTEST, AMBER  F 05/14/1984", on_click=_show_results(main)))

    report = _runner(driver, clock, make_config()).run([WorkflowStep("searchDuration", PatientSearch("1xtest, amber"))])

    assert option.clicks == 1
    assert report.step("searchDuration").status is StepStatus.SUCCEEDED


def test_search_button_is_used_without_autocomplete_entry(driver, clock, make_config):
    nav, main = _search_page(driver)
    nav.add(SEARCH_INPUT, FakeElement())
    button = nav.add(BUTTON, FakeElement("Search", on_click=_show_results(main)))

    _runner(driver, clock, make_config()).run([WorkflowStep("searchDuration", PatientSearch("1xtest, amber"))])
    assert button.clicks == 1


def test_search_falls_back_to_any_text_input(driver, clock, make_config):
    _, main = _search_page(driver)
    fallback = main.add(css("input[type='text']"), FakeElement(on_enter=_show_results(main)))

    report = _runner(driver, clock, make_config()).run([WorkflowStep("searchDuration", PatientSearch("1xtest, amber"))])

    assert fallback.typed == "1xtest, amber"
    assert report.metrics["searchDuration"] == 500


def test_search_without_any_field_aborts(driver, clock, make_config):
    _search_page(driver)
    with pytest.raises(CriticalStepError, match="No suitable search fields found in any frame."):
        _runner(driver, clock, make_config()).run(
            [WorkflowStep("searchDuration", PatientSearch("1xtest, amber"), critical=True)]
        )


def test_search_without_results_aborts_after_bounded_wait(driver, clock, make_config):
    nav, _ = _search_page(driver)
    nav.add(SEARCH_INPUT, FakeElement())

    with pytest.raises(CriticalStepError, match="Search results page not found.") as excinfo:
        _runner(driver, clock, make_config()).run(
            [WorkflowStep("searchDuration", PatientSearch("1xtest, amber"), critical=True)]
        )

    assert excinfo.value.step == "searchDuration"
    assert clock.sleeps.count(0.5) == 4


def test_search_by_patient_id_waits_for_patient_menu(driver, clock, make_config):
    nav, main = _search_page(driver)

    def _open_chart():
        main.add(PATIENT_MENU_TRIGGER[0], FakeElement())

    field = nav.add(SEARCH_INPUT, FakeElement(on_enter=_open_chart))
    search = PatientSearch(
        "903430",
        results_url_fragment=None,
        results_indicators=PATIENT_MENU_TRIGGER,
        use_autocomplete=False,
    )

    report = _runner(driver, clock, make_config()).run([WorkflowStep("patientSearchDuration", search)])

    assert field.typed == "903430"
    assert report.metrics["patientSearchDuration"] == 500
