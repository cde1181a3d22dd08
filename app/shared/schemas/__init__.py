"""共享数据模式

定义错误响应和健康检查等通用响应格式
"""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """统一错误响应格式

    所有失败的请求都返回只包含一个 error 字段的JSON对象
    """
    error: str = Field(description="错误描述")


class HealthCheckResponse(BaseModel):
    """健康检查响应

    用于系统健康状态检查
    """
    status: str = Field(description="服务状态")
    timestamp: str = Field(description="检查时间")
    version: str = Field(description="应用版本")
    users: int = Field(description="当前存储的用户数量")


class ServiceInfo(BaseModel):
    """服务信息"""
    name: str = Field(description="应用名称")
    version: str = Field(description="应用版本")
    docs_url: str = Field(description="API文档地址")
    health_url: str = Field(description="健康检查地址")
