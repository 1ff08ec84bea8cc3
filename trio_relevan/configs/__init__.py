from .settings_repo import SettingsRepo

__all__ = ["SettingsRepo"]
