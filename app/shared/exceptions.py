"""自定义异常类定义

定义用户目录服务中使用的各种业务异常
所有异常都继承自HTTPException，由全局异常处理器统一转换为 {"error": ...} 响应
"""

from fastapi import HTTPException
from typing import Any, Optional


class BaseAPIException(HTTPException):
    """API异常基类

    所有自定义API异常都应该继承这个类
    提供统一的异常处理接口
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_type: str = "APIError",
        headers: Optional[dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_type = error_type


class ValidationError(BaseAPIException):
    """数据验证异常

    请求体中的字段缺失或格式不正确时抛出
    """

    def __init__(self, detail: str = "Invalid user data"):
        super().__init__(
            status_code=400,
            detail=detail,
            error_type="ValidationError"
        )


class InvalidInputError(BaseAPIException):
    """非法参数异常

    路径中的ID或查询参数无法解析为整数时抛出
    """

    def __init__(self, detail: str = "Invalid input"):
        super().__init__(
            status_code=400,
            detail=detail,
            error_type="InvalidInputError"
        )


class NotFoundError(BaseAPIException):
    """资源不存在异常"""

    def __init__(self, detail: str = "User not found"):
        super().__init__(
            status_code=404,
            detail=detail,
            error_type="NotFoundError"
        )


class ConflictError(BaseAPIException):
    """资源冲突异常

    用户名（忽略大小写）已被其他用户占用时抛出
    """

    def __init__(self, detail: str = "Username already exists"):
        super().__init__(
            status_code=409,
            detail=detail,
            error_type="ConflictError"
        )
