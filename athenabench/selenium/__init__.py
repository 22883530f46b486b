"""Selenium driver setup, locators, frame traversal and waits."""

from .driver import cleanup_temp_profile, create_driver
from .frames import Resolution, frame_urls, resolve, sweep, walk_frames
from .locators import Locator, by_label, by_placeholder, by_role, by_test_id, by_text, css, pattern, xpath
from .waits import wait_dom_ready, wait_for_load_state

__all__ = [
    "Locator",
    "Resolution",
    "by_label",
    "by_placeholder",
    "by_role",
    "by_test_id",
    "by_text",
    "cleanup_temp_profile",
    "create_driver",
    "css",
    "frame_urls",
    "pattern",
    "resolve",
    "sweep",
    "wait_dom_ready",
    "wait_for_load_state",
    "walk_frames",
    "xpath",
]
