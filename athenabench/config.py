"""Configuration models and constants shared across the benchmark."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from athenabench.exceptions import MissingEnvironmentError

BASE_URL_ENV = "ATHENA_SANDBOX_URL"
VARIANTS = ("search", "clinical", "scheduling", "direct")

DEFAULT_SEARCH_TERM = "1xtest, amber"
DEFAULT_PATIENT_ID = "903430"
DEFAULT_PRACTICE = "Practice WA - CHAS - 11411WA"


@dataclass
class DriverConfig:
    # Common
    browser: str = "chrome"  # "chrome" | "firefox"
    headless: bool = True
    page_load_timeout_s: int = 60
    implicit_wait_s: int = 0
    script_timeout_s: int = 60
    window_w: int = 1440
    window_h: int = 900

    # Chrome advanced
    ch_page_load_strategy: str = "normal"  # normal | eager | none
    ch_accept_insecure_certs: bool = False
    ch_http_proxy: Optional[str] = None  # host:port
    chrome_binary_override: Optional[str] = None

    # Firefox advanced
    ff_binary_override: Optional[str] = None


@dataclass
class Credentials:
    username: str = ""
    password: str = ""

    @property
    def provided(self) -> bool:
        return bool(self.username and self.password)


@dataclass
class WaitConfig:
    """Bounded waits, all in seconds."""

    navigation_timeout_s: float = 20.0
    load_state_timeout_s: float = 15.0
    locate_timeout_s: float = 10.0
    frame_lookup_timeout_s: float = 2.0
    element_timeout_s: float = 15.0
    poll_interval_s: float = 0.25
    network_idle_window_s: float = 0.5
    settle_s: float = 3.0
    search_field_settle_s: float = 5.0
    type_delay_s: float = 0.15
    dropdown_wait_s: float = 2.0
    results_timeout_s: float = 30.0
    results_poll_s: float = 0.5
    manual_login_wait_s: float = 30.0
    hold_open_s: float = 0.0


@dataclass
class Thresholds:
    """Upper bounds in milliseconds. ``None`` disables a check."""

    per_step: Dict[str, int] = field(default_factory=dict)
    login_ms: Optional[int] = None
    total_ms: Optional[int] = None


@dataclass
class BenchmarkConfig:
    base_url: str
    variant: str = "search"
    credentials: Credentials = field(default_factory=Credentials)
    search_term: str = DEFAULT_SEARCH_TERM
    patient_id: str = DEFAULT_PATIENT_ID
    practice_name: str = DEFAULT_PRACTICE
    results_url_fragment: str = "findpatient.esp"
    waits: WaitConfig = field(default_factory=WaitConfig)
    thresholds: Optional[Thresholds] = None  # None -> variant defaults

    def validate(self) -> None:
        if not self.base_url:
            raise MissingEnvironmentError(BASE_URL_ENV)
        if self.variant not in VARIANTS:
            raise ValueError(f"Unknown workflow variant {self.variant!r}; expected one of {', '.join(VARIANTS)}.")
        if self.variant == "direct" and not self.credentials.provided:
            raise MissingEnvironmentError("SSO_USERNAME" if not self.credentials.username else "SSO_PASSWORD")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "BenchmarkConfig":
        """Build a config from environment variables, failing fast on a missing base URL."""
        env = os.environ if environ is None else environ
        base_url = (env.get(BASE_URL_ENV) or "").strip()
        if not base_url:
            raise MissingEnvironmentError(BASE_URL_ENV)

        cfg = cls(
            base_url=base_url,
            variant=(env.get("ATHENA_VARIANT") or "search").strip().lower(),
            credentials=Credentials(
                username=env.get("SSO_USERNAME") or env.get("ATHENA_SANDBOX_USER", ""),
                password=env.get("SSO_PASSWORD") or env.get("ATHENA_SANDBOX_PASS", ""),
            ),
            search_term=env.get("ATHENA_PATIENT_SEARCH") or DEFAULT_SEARCH_TERM,
        )
        cfg.validate()
        return cfg


def driver_config_from_env(environ: Mapping[str, str] | None = None) -> DriverConfig:
    env = os.environ if environ is None else environ
    headless = (env.get("ATHENA_HEADLESS") or "1").strip().lower() not in ("0", "false", "no", "off")
    return DriverConfig(browser=(env.get("ATHENA_BROWSER") or "chrome").strip().lower(), headless=headless)
