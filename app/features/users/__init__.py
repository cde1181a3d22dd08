"""用户功能模块

提供用户管理相关的功能
包括内存用户存储、字段校验和CRUD接口
"""

from .router import router
from .service import UserStore

__all__ = ["router", "UserStore"]
