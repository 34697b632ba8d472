"""配置层：WingmanSettings 与 load_settings()。"""

from wingman_core.config.settings import WingmanSettings, load_settings

__all__ = ["WingmanSettings", "load_settings"]
