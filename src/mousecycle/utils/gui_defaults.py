"""Default classes and props for the NiceGUI elements used by mousecycle."""

from __future__ import annotations

from nicegui import ui

from mousecycle.utils.logging import get_logger

logger = get_logger(__name__)

# tailwind text size -> quasar size
_QUASAR_SIZES = {
    "text-xs": "xs",
    "text-sm": "sm",
    "text-base": "md",
    "text-lg": "lg",
}


def quasar_size(text_size: str) -> str:
    """Map a tailwind text size class to the matching quasar size name."""
    try:
        return _QUASAR_SIZES[text_size]
    except KeyError:
        raise ValueError(
            f"Unsupported text_size {text_size!r}; expected one of {sorted(_QUASAR_SIZES)}"
        ) from None


def setUpGuiDefaults(text_size: str = "text-base") -> None:
    """Set up default classes and props for the ui elements of the profile page.

    Args:
        text_size: Tailwind CSS text size class ('text-xs', 'text-sm',
                   'text-base', 'text-lg'). Defaults to 'text-base'.
    """
    size = quasar_size(text_size)
    logger.debug(f'using classes text_size:"{text_size}" text_size_quasar:{size}')

    ui.label.default_classes(f"{text_size} select-text")
    ui.label.default_props("dense")
    #
    ui.button.default_classes(text_size)
    ui.button.default_props("dense")
    #
    ui.toggle.default_classes(text_size)
    ui.toggle.default_props(f"dense size={size}")
