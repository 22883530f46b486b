"""Candidate locators: one element-resolution strategy each, tried in priority order."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Pattern, Tuple, Union

from selenium.common.exceptions import WebDriverException
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webelement import WebElement

TextMatch = Union[str, Pattern[str]]

ROLE_SELECTORS = {
    "button": "button, input[type='button'], input[type='submit'], [role='button']",
    "link": "a[href], [role='link']",
    "tab": "[role='tab']",
    "option": "option, [role='option']",
    "listitem": "li, [role='listitem']",
    "list": "ul, ol, [role='list']",
    "heading": "h1, h2, h3, h4, h5, h6, [role='heading']",
    "textbox": "input:not([type]), input[type='text'], input[type='search'], textarea, [role='textbox']",
}

TEXT_NODES_XPATH = ".//*[not(self::script or self::style)][text()[normalize-space()]]"


@dataclass(frozen=True)
class Locator:
    by: str
    value: str
    text: Optional[TextMatch] = None
    attribute: Optional[str] = None  # match ``text`` against this attribute instead of the accessible name
    follow_label: bool = False
    description: str = ""

    def find(self, context) -> List[WebElement]:
        """Return the elements in ``context`` (driver or element) matching this strategy."""
        found = context.find_elements(self.by, self.value)
        if self.text is not None:
            found = [el for el in found if _matches(self._subject(el), self.text)]
        if self.follow_label:
            found = [target for el in found for target in _label_targets(context, el)]
        return found

    def within(self, *parents: "Locator") -> "ScopedLocator":
        return ScopedLocator(parents=tuple(parents), child=self)

    def _subject(self, element: WebElement) -> str:
        if self.attribute:
            return element.get_attribute(self.attribute) or ""
        return accessible_name(element)

    def __str__(self) -> str:
        return self.description or f"{self.by}={self.value}"


@dataclass(frozen=True)
class ScopedLocator:
    """A locator evaluated inside the elements matched by any of ``parents``."""

    parents: Tuple[Locator, ...]
    child: Locator

    def find(self, context) -> List[WebElement]:
        found: list[WebElement] = []
        for parent in self.parents:
            for scope in parent.find(context):
                found.extend(self.child.find(scope))
        return found

    def __str__(self) -> str:
        return f"{' | '.join(str(p) for p in self.parents)} >> {self.child}"


def accessible_name(element: WebElement) -> str:
    name = (element.text or "").strip()
    if name:
        return name
    for attr in ("value", "aria-label", "title"):
        value = element.get_attribute(attr)
        if value:
            return value.strip()
    return ""


def _matches(subject: str, text: TextMatch) -> bool:
    if isinstance(text, str):
        return subject.strip() == text
    return bool(text.search(subject))


def _label_targets(context, label: WebElement) -> List[WebElement]:
    target_id = label.get_attribute("for")
    if target_id:
        return context.find_elements(By.ID, target_id)
    return label.find_elements(By.CSS_SELECTOR, "input, textarea, select")


def first_visible(context, locator) -> Optional[WebElement]:
    """Single non-waiting lookup: the first displayed element matched by ``locator``."""
    try:
        for element in locator.find(context):
            if element.is_displayed():
                return element
    except WebDriverException:
        return None
    return None


def css(selector: str, *, text: Optional[TextMatch] = None) -> Locator:
    return Locator(By.CSS_SELECTOR, selector, text=text)


def xpath(expression: str) -> Locator:
    return Locator(By.XPATH, expression)


def by_role(role: str, name: Optional[TextMatch] = None) -> Locator:
    selector = ROLE_SELECTORS.get(role, f"[role='{role}']")
    return Locator(By.CSS_SELECTOR, selector, text=name, description=f"role={role} name={_describe(name)}")


def by_text(text: TextMatch) -> Locator:
    if isinstance(text, str):
        literal = _xpath_literal(text)
        return Locator(By.XPATH, f".//*[normalize-space(text())={literal}]", description=f"text={text!r}")
    return Locator(By.XPATH, TEXT_NODES_XPATH, text=text, description=f"text={_describe(text)}")


def by_placeholder(placeholder: TextMatch) -> Locator:
    if isinstance(placeholder, str):
        return Locator(By.CSS_SELECTOR, f"[placeholder={_css_string(placeholder)}]", description=f"placeholder={placeholder!r}")
    return Locator(
        By.CSS_SELECTOR,
        "[placeholder]",
        text=placeholder,
        attribute="placeholder",
        description=f"placeholder={_describe(placeholder)}",
    )


def by_label(label: TextMatch) -> Locator:
    return Locator(By.TAG_NAME, "label", text=label, follow_label=True, description=f"label={_describe(label)}")


def by_test_id(fragment: str) -> Locator:
    return Locator(By.CSS_SELECTOR, f"[data-testid*={_css_string(fragment)}]")


def pattern(expression: str) -> Pattern[str]:
    """Case-insensitive regex, the way most fallback names are matched."""
    return re.compile(expression, re.IGNORECASE)


def _describe(text: Optional[TextMatch]) -> str:
    if text is None:
        return "*"
    if isinstance(text, str):
        return repr(text)
    return f"/{text.pattern}/"


def _css_string(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _xpath_literal(value: str) -> str:
    if "'" not in value:
        return f"'{value}'"
    if '"' not in value:
        return f'"{value}"'
    parts = value.split("'")
    return "concat(" + ", \"'\", ".join(f"'{p}'" for p in parts) + ")"


__all__ = [
    "Locator",
    "ScopedLocator",
    "accessible_name",
    "by_label",
    "by_placeholder",
    "by_role",
    "by_test_id",
    "by_text",
    "css",
    "first_visible",
    "pattern",
    "xpath",
]
