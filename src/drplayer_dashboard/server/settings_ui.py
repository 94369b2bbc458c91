"""NiceGUI page for editing skip settings."""

from fastapi import FastAPI
from nicegui import ui

from ..exceptions import StorageError
from ..logging import get_logger
from ..skip import SkipSettings, SkipSettingsStore

log = get_logger("server.settings_ui")

# NiceGUI pages live under this prefix so they never shadow /apps or /api
UI_MOUNT_PATH = "/ui"


def settings_from_form(
    intro_enabled: bool,
    outro_enabled: bool,
    intro_seconds,
    outro_seconds,
) -> SkipSettings:
    """Build settings from raw form values; empty number fields become 0."""
    return SkipSettings(
        intro_enabled=bool(intro_enabled),
        outro_enabled=bool(outro_enabled),
        intro_seconds=float(intro_seconds or 0),
        outro_seconds=float(outro_seconds or 0),
    )


def save_from_form(
    settings_store: SkipSettingsStore,
    intro_enabled: bool,
    outro_enabled: bool,
    intro_seconds,
    outro_seconds,
) -> tuple[bool, str]:
    """Save the dialog values; returns (ok, message to show the user)."""
    settings = settings_from_form(intro_enabled, outro_enabled, intro_seconds, outro_seconds)
    try:
        settings_store.save(settings)
    except StorageError as e:
        log.error(str(e))
        return False, f"Could not save settings: {e}"
    log.info(f"Skip settings saved from UI: {settings}")
    return True, "Settings saved"


def _describe(settings: SkipSettings) -> str:
    intro = f"skip first {settings.intro_seconds:g}s" if settings.intro_enabled else "off"
    outro = f"skip last {settings.outro_seconds:g}s" if settings.outro_enabled else "off"
    return f"Intro: {intro} | Outro: {outro}"


def mount_settings_ui(
    app: FastAPI,
    settings_store: SkipSettingsStore,
    title: str = "DrPlayer Dashboard",
) -> None:
    """Register the settings page and mount NiceGUI onto ``app``."""

    @ui.page("/settings")
    def settings_page():
        """Skip settings page."""
        ui.dark_mode(True)

        with ui.header().classes("items-center justify-between"):
            ui.label("Intro / Outro Skipping").classes("text-xl font-bold")
            ui.link("Home", "/").classes("text-white")

        summary = ui.label().classes("text-lg mt-4")

        def refresh():
            summary.text = _describe(settings_store.load())

        with ui.dialog() as dialog, ui.card().classes("w-96"):
            current = settings_store.load()
            ui.label("Skip Settings").classes("text-lg font-semibold")

            intro_enabled = ui.switch("Skip intro", value=current.intro_enabled)
            intro_seconds = ui.number(
                "Intro length (seconds)",
                value=current.intro_seconds,
                min=0,
            ).classes("w-full")

            outro_enabled = ui.switch("Skip outro", value=current.outro_enabled)
            outro_seconds = ui.number(
                "Outro length (seconds)",
                value=current.outro_seconds,
                min=0,
            ).classes("w-full")

            def save():
                ok, message = save_from_form(
                    settings_store,
                    intro_enabled.value,
                    outro_enabled.value,
                    intro_seconds.value,
                    outro_seconds.value,
                )
                ui.notify(message, type="positive" if ok else "negative")
                if not ok:
                    return
                refresh()
                dialog.close()

            with ui.row().classes("justify-end w-full mt-2"):
                ui.button("Cancel", on_click=dialog.close).props("flat")
                ui.button("Save", on_click=save).props("color=primary")

        ui.button("Edit", on_click=dialog.open).classes("mt-4")
        refresh()

    ui.run_with(app, title=title, mount_path=UI_MOUNT_PATH)
