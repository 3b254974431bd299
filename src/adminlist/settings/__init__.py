from .store import NamespacedPreferences, PreferenceStore, default_preferences_path

__all__ = ["NamespacedPreferences", "PreferenceStore", "default_preferences_path"]
