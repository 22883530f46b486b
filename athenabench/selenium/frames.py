"""Depth-first traversal of nested frame documents and cross-frame element resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Sequence, Tuple, TypeVar

from selenium import webdriver
from selenium.common.exceptions import NoSuchFrameException, TimeoutException, WebDriverException
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support.ui import WebDriverWait

from athenabench.selenium.locators import first_visible

logger = logging.getLogger(__name__)

FRAME_SELECTOR = "frame, iframe"
LOCATION_SCRIPT = "return window.location.href;"

FramePath = Tuple[int, ...]
T = TypeVar("T")


@dataclass
class Resolution:
    element: WebElement
    locator: object
    frame_path: Optional[FramePath]  # None when only the current document was searched

    @property
    def frame_label(self) -> str:
        if self.frame_path is None:
            return "current frame"
        if not self.frame_path:
            return "top document"
        return "frame " + "/".join(str(i) for i in self.frame_path)


def walk_frames(driver: webdriver.Remote, path: FramePath = ()) -> Iterator[FramePath]:
    """Yield each document depth-first with the driver switched into it.

    The top-level document comes first (empty path). Callers that stop iterating
    early stay in the yielded frame; exhausting the walk returns the driver to
    the document it started in.
    """
    yield path
    try:
        frames = driver.find_elements(By.CSS_SELECTOR, FRAME_SELECTOR)
    except WebDriverException:
        return
    for index, frame in enumerate(frames):
        try:
            driver.switch_to.frame(frame)
        except (NoSuchFrameException, WebDriverException) as exc:
            logger.debug("Skipping frame %s: %s", path + (index,), exc)
            continue
        yield from walk_frames(driver, path + (index,))
        driver.switch_to.parent_frame()


def sweep(driver: webdriver.Remote, locators: Sequence, *, search_frames: bool = True) -> Optional[Resolution]:
    """One pass over every document, applying the whole candidate list per frame."""
    if not search_frames:
        return _match_in_document(driver, locators, None)

    driver.switch_to.default_content()
    for path in walk_frames(driver):
        hit = _match_in_document(driver, locators, path)
        if hit is not None:
            return hit
    return None


def resolve(
    driver: webdriver.Remote,
    locators: Sequence,
    *,
    timeout_s: float,
    poll_s: float = 0.25,
    search_frames: bool = True,
) -> Optional[Resolution]:
    """Repeat sweeps until a candidate is visible or ``timeout_s`` elapses.

    On success the driver is left inside the frame holding the element; on
    failure it is returned to the top-level document (or left in the current
    one when ``search_frames`` is false) and ``None`` is returned.
    """
    try:
        hit = WebDriverWait(driver, timeout_s, poll_frequency=poll_s, ignored_exceptions=(WebDriverException,)).until(
            lambda d: sweep(d, locators, search_frames=search_frames) or False
        )
    except TimeoutException:
        if search_frames:
            driver.switch_to.default_content()
        return None
    logger.debug("Resolved %s in %s", hit.locator, hit.frame_label)
    return hit


def frame_urls(driver: webdriver.Remote) -> list[str]:
    """Current location of every document, top-level first."""
    urls: list[str] = []
    driver.switch_to.default_content()
    for _ in walk_frames(driver):
        try:
            urls.append(driver.execute_script(LOCATION_SCRIPT) or "")
        except WebDriverException:
            urls.append("")
    return urls


def find_in_frames(driver: webdriver.Remote, lookup: Callable[[webdriver.Remote], Optional[T]]) -> Optional[T]:
    """Return the first non-empty ``lookup`` result across documents, restoring the top document."""
    driver.switch_to.default_content()
    try:
        for _ in walk_frames(driver):
            value = lookup(driver)
            if value:
                return value
        return None
    finally:
        driver.switch_to.default_content()


def _match_in_document(driver: webdriver.Remote, locators: Sequence, path: Optional[FramePath]) -> Optional[Resolution]:
    for locator in locators:
        element = first_visible(driver, locator)
        if element is not None:
            return Resolution(element=element, locator=locator, frame_path=path)
    return None
