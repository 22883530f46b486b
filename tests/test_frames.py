from __future__ import annotations

from athenabench.selenium.frames import find_in_frames, frame_urls, resolve, sweep
from athenabench.selenium.locators import by_role, css
from fakes import FakeDocument, FakeDriver, FakeElement, FakeFrameElement

SEARCH = css("#search input")
ANY_TEXT = css("input[type='text']")


def _nested_page() -> FakeDriver:
    root = FakeDocument("https://x.test/top")
    nav = root.add_frame(FakeDocument("https://x.test/nav"))
    nav.add_frame(FakeDocument("https://x.test/nav/inner"))
    root.add_frame(FakeDocument("https://x.test/main"))
    return FakeDriver(root)


def test_frame_urls_are_listed_depth_first():
    driver = _nested_page()
    assert frame_urls(driver) == [
        "https://x.test/top",
        "https://x.test/nav",
        "https://x.test/nav/inner",
        "https://x.test/main",
    ]
    assert driver.stack == [driver.root]


def test_resolve_enters_nested_frame_holding_the_element():
    driver = _nested_page()
    inner = driver.root.frames[0].frames[0]
    field = inner.add(SEARCH, FakeElement())

    hit = resolve(driver, [SEARCH], timeout_s=0, poll_s=0.001)

    assert hit is not None
    assert hit.element is field
    assert hit.frame_path == (0, 0)
    assert hit.frame_label == "frame 0/0"
    assert driver.document is inner


def test_top_document_is_searched_before_frames():
    driver = _nested_page()
    driver.root.frames[1].add(SEARCH, FakeElement())
    top = driver.root.add(SEARCH, FakeElement())

    hit = resolve(driver, [SEARCH], timeout_s=0, poll_s=0.001)
    assert hit.element is top
    assert hit.frame_label == "top document"


def test_all_candidates_are_tried_in_a_frame_before_moving_on():
    driver = _nested_page()
    nav = driver.root.frames[0]
    main = driver.root.frames[1]
    fallback = nav.add(ANY_TEXT, FakeElement())
    main.add(SEARCH, FakeElement())

    hit = resolve(driver, [SEARCH, ANY_TEXT], timeout_s=0, poll_s=0.001)
    assert hit.element is fallback
    assert hit.locator == ANY_TEXT
    assert hit.frame_path == (0,)


def test_hidden_matches_are_ignored():
    driver = _nested_page()
    driver.root.add(SEARCH, FakeElement(displayed=False))
    shown = driver.root.frames[1].add(SEARCH, FakeElement())

    assert resolve(driver, [SEARCH], timeout_s=0, poll_s=0.001).element is shown


def test_unresolved_lookup_returns_none_at_top_document():
    driver = _nested_page()
    driver.switch_to.frame(FakeFrameElement(driver.root.frames[0]))

    assert resolve(driver, [by_role("button", "Go")], timeout_s=0, poll_s=0.001) is None
    assert driver.stack == [driver.root]


def test_sweep_without_frames_only_checks_current_document():
    driver = _nested_page()
    driver.root.frames[0].add(SEARCH, FakeElement())

    assert sweep(driver, [SEARCH], search_frames=False) is None
    assert sweep(driver, [SEARCH]).frame_path == (0,)


def test_current_frame_lookup_is_not_labelled_as_top_document():
    driver = _nested_page()
    inner = driver.root.frames[0].frames[0]
    inner.add(SEARCH, FakeElement())
    driver.switch_to.frame(FakeFrameElement(driver.root.frames[0]))
    driver.switch_to.frame(FakeFrameElement(inner))

    hit = sweep(driver, [SEARCH], search_frames=False)
    assert hit.frame_path is None
    assert hit.frame_label == "current frame"
    assert driver.document is inner


def test_find_in_frames_returns_first_lookup_value_and_resets():
    driver = _nested_page()

    def lookup(d):
        url = d.execute_script("return window.location.href;")
        return url if url.endswith("/main") else None

    assert find_in_frames(driver, lookup) == "https://x.test/main"
    assert driver.stack == [driver.root]
    assert find_in_frames(driver, lambda d: None) is None
