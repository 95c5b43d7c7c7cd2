"""Profile app: standalone NiceGUI application for the minute-of-day chart.

Loads the four CSV recordings from the configured data directory,
aggregates them and shows a ProfilePanel. Uses the @ui.page("/") pattern.

Run:
    python -m mousecycle.profile_app.profile_app

Env vars:
    MOUSECYCLE_GUI_NATIVE: 1/0 (default 0)
    MOUSECYCLE_GUI_RELOAD: 1/0 (default 0)
    MOUSECYCLE_DATA_DIR: overrides the data_dir of the app config
    MOUSECYCLE_LOG_LEVEL: log level (default INFO)
    HOST: bind host (default 127.0.0.1 native, 0.0.0.0 web)
    PORT: bind port (default find_open_port native, 8080 web)
"""

from __future__ import annotations

import os
import multiprocessing as mp
from multiprocessing import freeze_support
from pathlib import Path
from typing import Optional

from nicegui import ui

from mousecycle.utils.gui_defaults import setUpGuiDefaults
from mousecycle.utils.logging import configure_logging, get_logger
from mousecycle.profile_app.header import build_profile_header
from mousecycle.profile_widget.aggregator import MalformedDatasetError
from mousecycle.profile_widget.app_config import AppConfig
from mousecycle.profile_widget.data_source import load_profiles
from mousecycle.profile_widget.profile import Metric, Profile
from mousecycle.profile_widget.profile_panel import ProfilePanel
from mousecycle.profile_widget.view_controller import ProfileViewController

logger = get_logger(__name__)

configure_logging()

STORAGE_SECRET = "mousecycle-profile-session-secret"


def _env_bool(name: str, default: bool) -> bool:
    """Parse env var as bool; if unset/invalid returns default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _env_int(name: str, default: int) -> int:
    """Parse env var as int; if unset/invalid returns default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def resolve_data_dir(cfg: AppConfig, env: Optional[str] = None) -> Path:
    """MOUSECYCLE_DATA_DIR wins over the app config's data_dir."""
    if env is None:
        env = os.getenv("MOUSECYCLE_DATA_DIR")
    if env:
        return Path(env).expanduser()
    return cfg.get_data_dir(base_dir=Path.cwd())


def build_controller(cfg: AppConfig, data_dir: Path) -> ProfileViewController:
    """Load and aggregate the recordings, and wrap them in a controller."""
    profiles_by_metric = load_profiles(data_dir, cfg.get_files())
    metric = cfg.get_default_metric()
    if metric not in profiles_by_metric:
        metric = None
    return ProfileViewController(profiles_by_metric, metric=metric, padding=cfg.get_padding())


def remember_metric(cfg: AppConfig, metric: Metric) -> None:
    """Store the shown metric as the default for the next page load."""
    if cfg.get_default_metric() is metric:
        return
    cfg.set_default_metric(metric)
    try:
        cfg.save()
    except OSError as e:
        logger.warning(f"Could not remember metric {metric.value}: {e}")


def _log_clicked(subject_id: str, profiles: list[Profile]) -> None:
    logger.info(f"Clicked on mouse: {subject_id} phases={[p.category for p in profiles]}")


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------

@ui.page("/")
def home() -> None:
    """Home page: header + ProfilePanel over the configured recordings."""

    setUpGuiDefaults("text-sm")

    ui.page_title("Mouse Day Profiles")

    build_profile_header()

    with ui.column().classes("w-full gap-4 p-4"):
        main_container = ui.column().classes("w-full")

        cfg = AppConfig.load(create_if_missing=True)
        data_dir = resolve_data_dir(cfg)
        try:
            ctrl = build_controller(cfg, data_dir)
            ProfilePanel(
                ctrl,
                on_profile_clicked=_log_clicked,
                on_metric_changed=lambda metric: remember_metric(cfg, metric),
            ).build(container=main_container)
        except FileNotFoundError as e:
            logger.error(str(e))
            with main_container:
                ui.label(f"{e}. Set MOUSECYCLE_DATA_DIR or data_dir in {cfg.path}.").classes(
                    "text-negative"
                )
        except MalformedDatasetError as e:
            logger.error(f"Malformed dataset in {data_dir}: {e}")
            with main_container:
                ui.label(f"Malformed dataset: {e}").classes("text-negative")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(*, reload: bool | None = None, native_bool: bool | None = None) -> None:
    """Start the profile application.

    Env vars (used when arg is None):
      - MOUSECYCLE_GUI_NATIVE: 1/0
      - MOUSECYCLE_GUI_RELOAD: 1/0
      - HOST: bind host
      - PORT: bind port
    """
    native_bool = _env_bool("MOUSECYCLE_GUI_NATIVE", False) if native_bool is None else native_bool
    reload = _env_bool("MOUSECYCLE_GUI_RELOAD", False) if reload is None else reload

    if native_bool:
        from nicegui import native as native_module
        port = _env_int("PORT", native_module.find_open_port())
    else:
        port = _env_int("PORT", 8080)

    default_host = "127.0.0.1" if native_bool else "0.0.0.0"
    host = os.getenv("HOST", default_host)

    logger.info(
        "Starting profile app: port=%s reload=%s native=%s",
        port,
        reload,
        native_bool,
    )

    run_kwargs: dict = {
        "host": host,
        "port": port,
        "reload": reload,
        "native": native_bool,
        "storage_secret": STORAGE_SECRET,
        "title": "Mouse Day Profiles",
    }
    if native_bool:
        run_kwargs["window_size"] = (1200, 800)
    ui.run(**run_kwargs)


if __name__ in {"__main__", "__mp_main__"}:
    freeze_support()
    logger.debug("profile_app: __name__=%s process=%s", __name__, mp.current_process().name)
    main()
