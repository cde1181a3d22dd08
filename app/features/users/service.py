"""用户存储服务

在内存中维护按用户名（忽略大小写）升序排列的用户集合，
保证ID和用户名的唯一性
"""

import bisect
import threading
from typing import Any, List, Optional

from loguru import logger

from app.shared.exceptions import ConflictError, NotFoundError

from .models import User, UserPayload
from .validation import parse_int, validate_candidate


INVALID_ID_ERROR = "Invalid user ID"
INVALID_AGE_FILTER_ERROR = "Age filter must be a number"


def _sort_key(user: User) -> str:
    return user.username.lower()


class UserStore:
    """用户存储类

    所有操作都在同一把锁内完成，ID分配、唯一性检查和插入不会交错执行。
    集合始终按用户名（忽略大小写）升序排列，ID单调递增且删除后不复用。
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._users: List[User] = []
        self._next_id = 1

        logger.debug("用户存储初始化完成")

    def _index_of(self, user_id: int) -> Optional[int]:
        for index, user in enumerate(self._users):
            if user.id == user_id:
                return index
        return None

    def _find_username(self, username: str, exclude_id: Optional[int] = None) -> Optional[User]:
        key = username.lower()
        for user in self._users:
            if user.username.lower() == key and user.id != exclude_id:
                return user
        return None

    def _insert_sorted(self, user: User) -> None:
        # 插入到第一个用户名更大的记录之前
        bisect.insort_right(self._users, user, key=_sort_key)

    def create(self, candidate: UserPayload) -> User:
        """创建新用户

        Args:
            candidate: 用户请求体

        Returns:
            User: 创建的用户记录

        Raises:
            ValidationError: 字段校验失败
            ConflictError: 用户名已存在
        """
        username, age, email = validate_candidate(candidate)

        with self._lock:
            if self._find_username(username):
                logger.info(f"创建用户失败，用户名已存在: {username}")
                raise ConflictError("Username already exists")

            user = User(id=self._next_id, username=username, age=age, email=email)
            self._next_id += 1
            self._insert_sorted(user)

        logger.info(f"用户创建成功: {user.username} (ID: {user.id})")
        return user

    def get_by_id(self, raw_id: Any) -> User:
        """根据ID获取用户

        Raises:
            InvalidInputError: ID不是整数
            NotFoundError: 用户不存在
        """
        user_id = parse_int(raw_id, INVALID_ID_ERROR)

        with self._lock:
            index = self._index_of(user_id)
            if index is None:
                logger.debug(f"用户ID {user_id} 不存在")
                raise NotFoundError("User not found")
            return self._users[index]

    def get_by_username(self, username: str) -> User:
        """根据用户名获取用户（忽略大小写，不去除空白）

        Raises:
            NotFoundError: 用户不存在
        """
        with self._lock:
            user = self._find_username(username)

        if user is None:
            logger.debug(f"用户名 {username} 不存在")
            raise NotFoundError("User not found")
        return user

    def update(self, raw_id: Any, candidate: UserPayload) -> User:
        """更新用户

        检查顺序：解析ID -> 校验字段 -> 检查用户是否存在 -> 检查用户名冲突

        Args:
            raw_id: 用户ID
            candidate: 新的用户数据（整体替换）

        Returns:
            User: 更新后的用户记录

        Raises:
            InvalidInputError: ID不是整数
            ValidationError: 字段校验失败
            NotFoundError: 用户不存在
            ConflictError: 用户名与其他用户冲突
        """
        user_id = parse_int(raw_id, INVALID_ID_ERROR)
        username, age, email = validate_candidate(candidate)

        with self._lock:
            index = self._index_of(user_id)
            if index is None:
                logger.debug(f"尝试更新不存在的用户ID: {user_id}")
                raise NotFoundError("User not found")

            if self._find_username(username, exclude_id=user_id):
                logger.info(f"更新用户失败，用户名已被占用: {username}")
                raise ConflictError("Username already exists")

            # 先移除再按新用户名重新插入
            del self._users[index]
            user = User(id=user_id, username=username, age=age, email=email)
            self._insert_sorted(user)

        logger.info(f"用户更新成功: {user.username} (ID: {user_id})")
        return user

    def delete(self, raw_id: Any) -> None:
        """删除用户，已分配的ID不会被复用

        Raises:
            InvalidInputError: ID不是整数
            NotFoundError: 用户不存在
        """
        user_id = parse_int(raw_id, INVALID_ID_ERROR)

        with self._lock:
            index = self._index_of(user_id)
            if index is None:
                logger.warning(f"尝试删除不存在的用户ID: {user_id}")
                raise NotFoundError("User not found")
            deleted = self._users.pop(index)

        logger.info(f"用户删除成功: {deleted.username} (ID: {user_id})")

    def list(self, age_filter: Any = None) -> List[User]:
        """获取用户列表

        Args:
            age_filter: 年龄过滤条件，None或空字符串表示不过滤

        Returns:
            List[User]: 按用户名排序的用户列表，没有匹配时返回空列表

        Raises:
            InvalidInputError: 过滤条件不是整数
        """
        if age_filter is None or age_filter == "":
            with self._lock:
                return list(self._users)

        age = parse_int(age_filter, INVALID_AGE_FILTER_ERROR)
        with self._lock:
            users = [user for user in self._users if user.age == age]

        logger.debug(f"按年龄 {age} 过滤，共{len(users)}个用户")
        return users

    def count(self) -> int:
        """获取用户总数"""
        with self._lock:
            return len(self._users)

    def reset(self) -> None:
        """清空所有用户并将ID计数器重置为1

        仅用于测试之间的隔离，不对外提供HTTP接口
        """
        with self._lock:
            self._users.clear()
            self._next_id = 1

        logger.debug("用户存储已重置")
