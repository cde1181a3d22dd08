"""用户数据模型定义

定义用户记录和创建/更新请求体
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """用户记录

    记录创建后不可修改，更新操作会生成一个保留原ID的新记录
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1, description="用户ID，由存储分配，永不复用")
    username: str = Field(..., description="用户名（已去除首尾空白）")
    age: int = Field(..., description="年龄")
    email: str = Field(..., description="邮箱（已去除首尾空白）")


class UserPayload(BaseModel):
    """创建/更新用户的请求体

    字段类型在这里不做约束，缺失或类型错误统一交给
    validation模块处理，以保证错误信息和校验顺序一致
    """

    model_config = ConfigDict(extra="ignore")

    username: Any = Field(default=None, description="用户名")
    age: Any = Field(default=None, description="年龄，必须不小于18")
    email: Any = Field(default=None, description="邮箱，例如 name@domain.com")

    @classmethod
    def from_body(cls, body: Any) -> "UserPayload":
        """从已解析的JSON请求体构造请求对象

        请求体缺失或不是JSON对象时返回空请求体，
        由字段校验给出“Username”错误
        """
        if not isinstance(body, dict):
            return cls()
        return cls.model_validate(body)
