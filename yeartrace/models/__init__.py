from .plugin_data import PluginData

__all__ = [
    "PluginData",
]
