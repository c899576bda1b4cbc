from pydantic_settings import BaseSettings
from typing import List
import os

class Settings(BaseSettings):
    # 数据库配置（菜单目录快照）
    database_url: str = "duckdb://./pizzeria_pos/data/pizzeria.duckdb"
    
    # API配置
    api_title: str = "Pizzeria POS Pricing API"
    api_version: str = "1.0.0"
    api_prefix: str = "/api/v1"
    
    # 开发模式
    debug: bool = False
    log_level: str = "INFO"
    
    # 目录快照缓存（秒），0 表示每次请求都重新读取
    catalog_cache_seconds: int = 0
    
    # 客户端重算价格的防抖窗口（秒）
    price_debounce_seconds: float = 0.4
    
    # 计价规则
    default_prep_time_minutes: int = 15
    default_credit_limit_percentage: float = 0.50
    deep_dish_styles: List[str] = ["deep_dish", "stuffed"]
    deep_dish_item_names: List[str] = ["stuffed pizza", "the chub"]
    gluten_free_excluded_sizes: List[str] = ["small", "10in"]
    
    model_config = {
        "env_file": os.getenv("PIZZERIA_ENV_FILE", ".env"),
        "case_sensitive": False,
    }


def load_settings(env: str = None) -> Settings:
    """按运行环境（PIZZERIA_ENV）创建配置实例"""
    env = (env or os.getenv("PIZZERIA_ENV", "production")).lower()
    if env in ("dev", "development"):
        from .environments.development import DevelopmentSettings
        return DevelopmentSettings()
    return Settings()


# 全局设置实例
settings = load_settings()
