"""Interactions performed on a resolved element."""

from __future__ import annotations

import time
from typing import Callable

from selenium import webdriver
from selenium.common.exceptions import WebDriverException
from selenium.webdriver.common.keys import Keys
from selenium.webdriver.remote.webelement import WebElement

ACTIONS = ("click", "fill", "type", "press_enter")


def click(driver: webdriver.Remote, element: WebElement) -> None:
    """Click, falling back to a script click when the element is covered or off-screen."""
    try:
        element.click()
    except WebDriverException:
        driver.execute_script("arguments[0].click();", element)


def fill(element: WebElement, value: str) -> None:
    element.clear()
    element.send_keys(value)


def type_slowly(
    element: WebElement,
    value: str,
    *,
    delay_s: float = 0.15,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Send one character at a time so autocomplete handlers fire."""
    for char in value:
        element.send_keys(char)
        if delay_s:
            sleep(delay_s)


def press_enter(element: WebElement) -> None:
    element.send_keys(Keys.ENTER)


def perform(
    driver: webdriver.Remote,
    element: WebElement,
    action: str,
    value: str | None = None,
    *,
    type_delay_s: float = 0.15,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    if action == "click":
        click(driver, element)
    elif action == "fill":
        fill(element, value or "")
    elif action == "type":
        element.clear()
        type_slowly(element, value or "", delay_s=type_delay_s, sleep=sleep)
    elif action == "press_enter":
        press_enter(element)
    else:
        raise ValueError(f"Unknown action {action!r}; expected one of {', '.join(ACTIONS)}.")
