from ..settings import Settings

class DevelopmentSettings(Settings):
    debug: bool = True
    log_level: str = "DEBUG"
    database_url: str = "duckdb://./pizzeria_pos/data/pizzeria_dev.duckdb"
