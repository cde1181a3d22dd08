"""核心配置模块

处理环境变量和 .env 文件的读取
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """应用配置类

    自动从环境变量读取配置，变量名不区分大小写（例如 PORT、LOG_LEVEL）
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # 应用配置
    app_name: str = Field(default="User Directory", description="应用名称")
    app_version: str = Field(default="1.0.0", description="应用版本")
    debug: bool = Field(default=False, description="调试模式")
    host: str = Field(default="0.0.0.0", description="服务器主机")
    port: int = Field(default=3000, description="服务器端口")

    # 日志配置
    log_level: str = Field(default="INFO", description="日志级别")
    log_file: Optional[str] = Field(
        default=None,
        description="日志文件路径，未配置时只输出到控制台"
    )

    # CORS配置
    cors_origins: list[str] = Field(
        default=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        description="允许跨域访问的来源"
    )


@lru_cache
def get_settings() -> Settings:
    """获取应用配置单例

    使用lru_cache确保配置只被加载一次

    Returns:
        Settings: 应用配置实例
    """
    return Settings()


# 导出配置实例供其他模块使用
settings = get_settings()
