"""
数据库连接和管理模块
DuckDB 保存计价引擎读取的菜单目录快照（菜品、规格、配料、饼底价格、特色披萨模板）
"""

import duckdb
from pathlib import Path
from typing import Optional, Generator
from contextlib import contextmanager
import threading
from .exceptions import DatabaseError
from ..config.settings import settings

# 菜单目录表结构定义
# JSON 字段以 TEXT 存储，读取时再解析
SCHEMA_SQL = r"""
CREATE TABLE IF NOT EXISTS menu_items (
  id TEXT PRIMARY KEY,
  restaurant_id TEXT NOT NULL,
  name TEXT NOT NULL,
  description TEXT,
  item_type TEXT DEFAULT 'standard',
  pizza_style TEXT,
  base_price DOUBLE NOT NULL,
  prep_time_minutes INTEGER,
  is_available BOOLEAN DEFAULT TRUE,
  sort_order INTEGER DEFAULT 0
);

CREATE INDEX IF NOT EXISTS idx_menu_items_restaurant ON menu_items(restaurant_id);

CREATE TABLE IF NOT EXISTS menu_item_variants (
  id TEXT PRIMARY KEY,
  menu_item_id TEXT NOT NULL,
  name TEXT NOT NULL,
  size_code TEXT,
  crust_type TEXT,
  price DOUBLE NOT NULL,
  serves TEXT,
  prep_time_minutes INTEGER,
  white_meat_upcharge DOUBLE DEFAULT 0,
  is_available BOOLEAN DEFAULT TRUE,
  sort_order INTEGER DEFAULT 0
);

CREATE INDEX IF NOT EXISTS idx_variants_item ON menu_item_variants(menu_item_id);

CREATE TABLE IF NOT EXISTS customizations (
  id TEXT PRIMARY KEY,
  restaurant_id TEXT NOT NULL,
  name TEXT NOT NULL,
  category TEXT NOT NULL,
  base_price DOUBLE NOT NULL,
  price_type TEXT DEFAULT 'fixed',
  pricing_rules_json TEXT,
  applies_to_json TEXT,
  sort_order INTEGER DEFAULT 0,
  is_available BOOLEAN DEFAULT TRUE,
  description TEXT
);

CREATE INDEX IF NOT EXISTS idx_customizations_restaurant ON customizations(restaurant_id);

CREATE TABLE IF NOT EXISTS crust_pricing (
  restaurant_id TEXT NOT NULL,
  size_code TEXT NOT NULL,
  crust_type TEXT NOT NULL,
  base_price DOUBLE NOT NULL,
  upcharge DOUBLE DEFAULT 0,
  is_available BOOLEAN DEFAULT TRUE,
  PRIMARY KEY (restaurant_id, size_code, crust_type)
);

CREATE TABLE IF NOT EXISTS pizza_templates (
  id TEXT PRIMARY KEY,
  restaurant_id TEXT NOT NULL,
  menu_item_id TEXT NOT NULL,
  name TEXT NOT NULL,
  markup_type TEXT DEFAULT 'additive',
  credit_limit_percentage DOUBLE,
  is_active BOOLEAN DEFAULT TRUE
);

CREATE INDEX IF NOT EXISTS idx_templates_item ON pizza_templates(menu_item_id);

CREATE TABLE IF NOT EXISTS pizza_template_toppings (
  template_id TEXT NOT NULL,
  customization_id TEXT NOT NULL,
  default_amount TEXT DEFAULT 'normal',
  default_placement TEXT DEFAULT 'whole',
  is_removable BOOLEAN DEFAULT TRUE,
  substitution_tier TEXT NOT NULL,
  sort_order INTEGER DEFAULT 0,
  PRIMARY KEY (template_id, customization_id)
);

CREATE SEQUENCE IF NOT EXISTS logs_id_seq;
CREATE TABLE IF NOT EXISTS logs (
  log_id INTEGER DEFAULT nextval('logs_id_seq') PRIMARY KEY,
  actor_id TEXT,
  action TEXT,
  detail_json TEXT,
  created_at TIMESTAMP DEFAULT now()
);

CREATE INDEX IF NOT EXISTS idx_logs_action ON logs(action);
"""


class DatabaseManager:
    """数据库管理器，封装所有数据库操作"""

    def __init__(self, db_path: Optional[str] = None):
        self._connection: Optional[duckdb.DuckDBPyConnection] = None
        self._lock = threading.RLock()
        self.db_path = db_path or self._get_db_path_from_settings()

    def _get_db_path_from_settings(self) -> str:
        """从设置中获取数据库路径"""
        db_url = settings.database_url
        if db_url.startswith("duckdb://"):
            db_url = db_url.replace("duckdb://", "")
        if db_url != ":memory:":
            Path(db_url).parent.mkdir(parents=True, exist_ok=True)
        return db_url

    @property
    def connection(self) -> duckdb.DuckDBPyConnection:
        """获取数据库连接"""
        with self._lock:
            if self._connection is None:
                try:
                    self._connection = duckdb.connect(self.db_path)
                except duckdb.Error as e:
                    raise DatabaseError(f"无法打开数据库 {self.db_path}: {e}")
                self._init_schema()
            return self._connection

    def get_connection(self) -> duckdb.DuckDBPyConnection:
        """获取数据库连接 - 保持向后兼容"""
        return self.connection

    def _init_schema(self):
        """初始化数据库表结构"""
        try:
            self._connection.execute(SCHEMA_SQL)
        except duckdb.Error as e:
            raise DatabaseError(f"Failed to initialize schema: {e}")

    def init_database(self):
        """初始化数据库"""
        self.get_connection()

    @contextmanager
    def transaction(self) -> Generator[duckdb.DuckDBPyConnection, None, None]:
        """数据库事务上下文管理器"""
        with self._lock:
            conn = self.connection
            conn.execute("BEGIN")
            try:
                yield conn
            except Exception:
                conn.execute("ROLLBACK")
                raise
            try:
                conn.execute("COMMIT")
            except duckdb.Error as e:
                raise DatabaseError(f"数据库操作失败: {str(e)}")

    def execute_query(self, query: str, params: list = None) -> list:
        """执行查询并返回结果"""
        with self._lock:
            try:
                con = self.get_connection()
                if params:
                    return con.execute(query, params).fetchall()
                return con.execute(query).fetchall()
            except duckdb.Error as e:
                raise DatabaseError(f"Query execution failed: {e}")

    def execute_one(self, query: str, params: list = None) -> Optional[tuple]:
        """执行查询并返回单条结果"""
        with self._lock:
            try:
                con = self.get_connection()
                if params:
                    return con.execute(query, params).fetchone()
                return con.execute(query).fetchone()
            except duckdb.Error as e:
                raise DatabaseError(f"Query execution failed: {e}")

    def close(self):
        """关闭连接"""
        with self._lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None


# 全局数据库管理器实例
db_manager = DatabaseManager()
