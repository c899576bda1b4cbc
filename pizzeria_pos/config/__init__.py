from .settings import settings, Settings, load_settings
from .environments.development import DevelopmentSettings


def get_settings(env: str = None) -> Settings:
    """返回配置实例；未指定环境时返回启动时按 PIZZERIA_ENV 选定的全局设置"""
    if env is None:
        return settings
    return load_settings(env)


__all__ = ["settings", "Settings", "DevelopmentSettings", "get_settings", "load_settings"]
