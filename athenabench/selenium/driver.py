"""WebDriver start-up and teardown for benchmark runs."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Callable
from uuid import uuid4

from selenium import webdriver
from selenium.webdriver.chrome.service import Service as ChromeService
from selenium.webdriver.common.proxy import Proxy, ProxyType
from selenium.webdriver.firefox.options import Options as FirefoxOptions
from selenium.webdriver.firefox.service import Service as FirefoxService
from webdriver_manager.chrome import ChromeDriverManager
from webdriver_manager.firefox import GeckoDriverManager

from athenabench.config import DriverConfig
from athenabench.exceptions import SetupError

logger = logging.getLogger(__name__)

PROFILE_ROOT = Path.home() / ".athenabench"


def _fresh_profile(browser: str) -> Path:
    """Create an isolated, per-run profile directory under ~/.athenabench/."""
    prof = PROFILE_ROOT / f"{browser}-profiles" / f"profile-{uuid4().hex}"
    prof.mkdir(parents=True, exist_ok=True)
    return prof


def _chrome_options(cfg: DriverConfig, profile: Path) -> webdriver.ChromeOptions:
    opts = webdriver.ChromeOptions()
    if cfg.headless:
        opts.add_argument("--headless=new")
    for arg in ("--disable-gpu", "--no-sandbox", "--disable-dev-shm-usage", "--no-first-run", "--no-default-browser-check"):
        opts.add_argument(arg)
    opts.add_argument(f"--user-data-dir={profile}")
    opts.add_argument(f"--window-size={cfg.window_w},{cfg.window_h}")

    if cfg.chrome_binary_override:
        opts.binary_location = cfg.chrome_binary_override
    if cfg.ch_page_load_strategy in ("normal", "eager", "none"):
        opts.page_load_strategy = cfg.ch_page_load_strategy
    if cfg.ch_http_proxy:
        opts.proxy = Proxy({"proxyType": ProxyType.MANUAL, "httpProxy": cfg.ch_http_proxy})
    opts.accept_insecure_certs = bool(cfg.ch_accept_insecure_certs)
    return opts


def _firefox_options(cfg: DriverConfig, profile: Path, headless: bool) -> FirefoxOptions:
    os.environ.setdefault("MOZ_DISABLE_AUTO_SAFE_MODE_KEY", "1")

    opts = FirefoxOptions()
    if headless:
        opts.add_argument("--headless")
    opts.add_argument("--no-remote")
    opts.add_argument("-profile")
    opts.add_argument(str(profile))
    if cfg.ff_binary_override:
        opts.binary_location = cfg.ff_binary_override
    opts.set_preference("browser.shell.checkDefaultBrowser", False)
    opts.set_preference("startup.homepage_welcome_url", "about:blank")
    return opts


def _apply_timeouts(drv: webdriver.Remote, cfg: DriverConfig, profile: Path) -> webdriver.Remote:
    setattr(drv, "_temp_profile_dir", str(profile))
    drv.set_page_load_timeout(cfg.page_load_timeout_s)
    drv.implicitly_wait(cfg.implicit_wait_s)
    drv.set_script_timeout(cfg.script_timeout_s)
    drv.set_window_size(cfg.window_w, cfg.window_h)
    return drv


def _start_chrome(cfg: DriverConfig) -> webdriver.Remote:
    profile = _fresh_profile("chrome")
    service = ChromeService(ChromeDriverManager().install())
    return _apply_timeouts(webdriver.Chrome(service=service, options=_chrome_options(cfg, profile)), cfg, profile)


def _start_firefox(cfg: DriverConfig, headless: bool) -> webdriver.Remote:
    profile = _fresh_profile("firefox")
    gecko_log = Path("logs") / "geckodriver.log"
    gecko_log.parent.mkdir(parents=True, exist_ok=True)
    service = FirefoxService(GeckoDriverManager().install(), log_output=str(gecko_log))
    drv = webdriver.Firefox(service=service, options=_firefox_options(cfg, profile, headless))
    return _apply_timeouts(drv, cfg, profile)


def create_driver(cfg: DriverConfig, *, firefox_retry_notifier: Callable[[Exception], None] | None = None) -> webdriver.Remote:
    """
    Start a Chrome or Firefox WebDriver for one benchmark run.

    A failed headless Firefox start is retried once with a visible window; the
    optional notifier lets UIs surface that.
    """
    try:
        if cfg.browser.lower() != "firefox":
            return _start_chrome(cfg)
        try:
            return _start_firefox(cfg, headless=cfg.headless)
        except Exception as exc:
            if not cfg.headless:
                raise
            if firefox_retry_notifier:
                firefox_retry_notifier(exc)
            else:
                logger.warning("Firefox headless failed; retrying with visible window: %s", exc)
            return _start_firefox(cfg, headless=False)
    except Exception as exc:  # pragma: no cover - wraps webdriver init errors
        raise SetupError(f"Failed to initialize WebDriver: {exc}") from exc


def cleanup_temp_profile(driver: webdriver.Remote) -> None:
    """Remove the per-run profile directory created during driver startup."""
    temp_dir = getattr(driver, "_temp_profile_dir", None)
    if temp_dir and Path(temp_dir).exists():
        shutil.rmtree(temp_dir, ignore_errors=True)
