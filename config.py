# ============================================================
# DBPane - Terminal Database Browser
# config.py — Central Configuration Management
# ============================================================

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field
from dotenv import load_dotenv

# Load .env file
BASE_DIR = Path(__file__).parent
load_dotenv(BASE_DIR / ".env")


class DatabaseConfig(BaseSettings):
    """Which gateway backend to browse with."""
    backend: str = Field(default="postgres")

    class Config:
        env_prefix = "DB_"
        extra = "ignore"


class PostgreSQLConfig(BaseSettings):
    """PostgreSQL server connection configuration."""
    host: str = Field(default="localhost")
    port: int = Field(default=5432)
    user: str = Field(default="postgres")
    password: str = Field(default="")
    connect_timeout: int = Field(default=10)
    # Catalog queries (database listing) run while connected here
    maintenance_db: str = Field(default="postgres")

    class Config:
        env_prefix = "POSTGRES_"
        extra = "ignore"

    def get_connection_params(self, dbname: Optional[str] = None) -> dict:
        params = {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "connect_timeout": self.connect_timeout,
        }
        if dbname:
            params["dbname"] = dbname
        return params


class MySQLConfig(BaseSettings):
    """MySQL server connection configuration."""
    host: str = Field(default="localhost")
    port: int = Field(default=3306)
    user: str = Field(default="root")
    password: str = Field(default="")
    connect_timeout: int = Field(default=10)

    class Config:
        env_prefix = "MYSQL_"
        extra = "ignore"

    def get_connection_params(self, database: Optional[str] = None) -> dict:
        params = {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "autocommit": True,
            "connection_timeout": self.connect_timeout,
        }
        if database:
            params["database"] = database
        return params


class AppConfig(BaseSettings):
    """Application-level configuration."""
    name: str = Field(default="DBPane")
    version: str = Field(default="1.0.0")
    log_level: str = Field(default="INFO")
    log_file: str = Field(default="logs/dbpane.log")
    result_min_column_width: int = Field(default=10)

    class Config:
        env_prefix = "APP_"
        extra = "ignore"


# ── Singleton Config Instances ────────────────────────────────
database_config = DatabaseConfig()
postgres_config = PostgreSQLConfig()
mysql_config = MySQLConfig()
app_config = AppConfig()
