"""用户字段校验规则

在任何修改操作之前执行，按 用户名 -> 年龄 -> 邮箱 的顺序校验，
遇到第一个错误立即抛出
"""

import re
from typing import Any

from app.shared.exceptions import InvalidInputError, ValidationError

from .models import UserPayload


MIN_AGE = 18

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
# 只读取开头的整数部分，例如 "12abc" -> 12，"25.0" -> 25
INTEGER_PREFIX = re.compile(r"[+-]?[0-9]+")

USERNAME_ERROR = "Username is required and must be a non-empty string"
AGE_ERROR = f"Age is required and must be at least {MIN_AGE}"
EMAIL_ERROR = "Valid email is required (format: name@domain.com)"


def is_valid_email(value: str) -> bool:
    """检查邮箱格式（local-part@domain.tld）"""
    return EMAIL_PATTERN.fullmatch(value) is not None


def validate_candidate(payload: UserPayload) -> tuple[str, int, str]:
    """校验用户请求体

    Args:
        payload: 创建或更新用户的请求体

    Returns:
        tuple: 去除首尾空白后的 (username, age, email)

    Raises:
        ValidationError: 任一字段缺失或格式不正确
    """
    username = payload.username
    if not isinstance(username, str) or not username.strip():
        raise ValidationError(USERNAME_ERROR)

    age = payload.age
    # bool是int的子类，需要单独排除
    if isinstance(age, bool) or not isinstance(age, int) or age < MIN_AGE:
        raise ValidationError(AGE_ERROR)

    email = payload.email
    if not isinstance(email, str) or not is_valid_email(email.strip()):
        raise ValidationError(EMAIL_ERROR)

    return username.strip(), age, email.strip()


def parse_int(raw: Any, detail: str) -> int:
    """将路径参数或查询参数解析为整数

    去除首尾空白后读取开头的整数部分，后面的字符被忽略

    Args:
        raw: 原始参数值，通常是字符串
        detail: 解析失败时的错误信息

    Returns:
        int: 解析后的整数

    Raises:
        InvalidInputError: 参数不以整数开头
    """
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        match = INTEGER_PREFIX.match(raw.strip())
        if match:
            return int(match.group())
    raise InvalidInputError(detail)
