#!/usr/bin/env python3
"""应用启动脚本

用于本地开发和生产环境启动用户目录服务
"""

import argparse
import sys
from pathlib import Path

# 添加项目根目录到Python路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from app.core.config import settings


def start_dev(host: str, port: int) -> None:
    """启动开发服务器

    使用uvicorn启动开发服务器，启用热重载
    """
    import uvicorn

    print(f"🔧 启动开发服务器...")
    print(f"📝 API文档: http://{host}:{port}/docs")
    print(f"💚 健康检查: http://{host}:{port}/health")

    uvicorn.run(
        "app.main:app",
        host=host,
        port=port,
        reload=True,
        log_level=settings.log_level.lower(),
        access_log=True
    )


def start_prod(host: str, port: int) -> None:
    """启动生产服务器

    用户数据保存在进程内存中，只能使用单个工作进程
    """
    import uvicorn

    print(f"🚀 启动生产服务器...")
    print(f"🌍 服务地址: http://{host}:{port}")

    uvicorn.run(
        "app.main:app",
        host=host,
        port=port,
        workers=1,
        log_level=settings.log_level.lower(),
        access_log=True
    )


def main() -> None:
    """主函数

    解析命令行参数并启动相应的服务器
    """
    parser = argparse.ArgumentParser(description="用户目录服务启动脚本")
    parser.add_argument(
        "--mode",
        choices=["dev", "prod"],
        default="dev",
        help="启动模式: dev(开发) 或 prod(生产)"
    )
    parser.add_argument(
        "--host",
        default=settings.host,
        help=f"服务器主机地址 (默认: {settings.host})"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help=f"服务器端口 (默认: {settings.port})"
    )

    args = parser.parse_args()

    # 确保日志目录存在
    if settings.log_file:
        Path(settings.log_file).parent.mkdir(parents=True, exist_ok=True)

    if args.mode == "dev":
        start_dev(args.host, args.port)
    else:
        start_prod(args.host, args.port)


if __name__ == "__main__":
    main()
