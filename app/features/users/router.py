"""用户管理路由模块

将HTTP请求转换为UserStore调用，成功时直接返回用户记录，
失败时由存储抛出的业务异常交给全局异常处理器转换为错误响应
"""

from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, Request, Response, status
from loguru import logger

from app.shared.schemas import ErrorResponse

from .models import User, UserPayload
from .service import UserStore

# 创建路由器实例
router = APIRouter()

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_409_CONFLICT: {"model": ErrorResponse},
}


def get_user_store(request: Request) -> UserStore:
    """获取应用持有的用户存储实例"""
    return request.app.state.user_store


def get_payload(body: Any = Body(default=None)) -> UserPayload:
    """读取创建/更新用户的请求体

    缺失或非对象的请求体按空对象处理，只有无法解析的JSON才会返回请求体错误
    """
    return UserPayload.from_body(body)


@router.post(
    "",
    response_model=User,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
    summary="创建用户"
)
async def create_user(
    payload: UserPayload = Depends(get_payload),
    store: UserStore = Depends(get_user_store)
) -> User:
    """创建新用户

    Raises:
        ValidationError: 字段校验失败
        ConflictError: 用户名已存在
    """
    return store.create(payload)


@router.get(
    "",
    response_model=List[User],
    responses=ERROR_RESPONSES,
    summary="获取用户列表"
)
async def list_users(
    age: Optional[str] = None,
    store: UserStore = Depends(get_user_store)
) -> List[User]:
    """获取用户列表，可按年龄精确过滤

    Args:
        age: 年龄过滤条件
    """
    users = store.list(age)
    logger.info(f"获取用户列表成功，共{len(users)}个用户")
    return users


@router.get(
    "/username/{username}",
    response_model=User,
    responses=ERROR_RESPONSES,
    summary="根据用户名获取用户"
)
async def get_user_by_username(
    username: str,
    store: UserStore = Depends(get_user_store)
) -> User:
    """根据用户名获取用户信息（忽略大小写）

    Args:
        username: 用户名

    Raises:
        NotFoundError: 用户不存在
    """
    return store.get_by_username(username)


@router.get(
    "/{user_id}",
    response_model=User,
    responses=ERROR_RESPONSES,
    summary="根据ID获取用户"
)
async def get_user(
    user_id: str,
    store: UserStore = Depends(get_user_store)
) -> User:
    """根据ID获取用户信息

    Raises:
        InvalidInputError: ID不是整数
        NotFoundError: 用户不存在
    """
    return store.get_by_id(user_id)


@router.put(
    "/{user_id}",
    response_model=User,
    responses=ERROR_RESPONSES,
    summary="更新用户"
)
async def update_user(
    user_id: str,
    payload: UserPayload = Depends(get_payload),
    store: UserStore = Depends(get_user_store)
) -> User:
    """整体替换用户的用户名、年龄和邮箱"""
    return store.update(user_id, payload)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=ERROR_RESPONSES,
    summary="删除用户"
)
async def delete_user(
    user_id: str,
    store: UserStore = Depends(get_user_store)
) -> Response:
    """删除用户，成功时返回空响应体"""
    store.delete(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
