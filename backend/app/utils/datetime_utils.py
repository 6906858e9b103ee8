"""
日期时间工具模块
数据库中统一存储不带时区的UTC时间
"""

from datetime import datetime, timedelta, timezone
from typing import Optional


def utc_now() -> datetime:
    """获取当前UTC时间（去掉tzinfo，与数据库字段保持一致）"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def get_today_start(now: Optional[datetime] = None) -> datetime:
    """获取今天的开始时间（00:00:00）"""
    now = now or utc_now()
    return datetime(now.year, now.month, now.day)


def get_week_start(now: Optional[datetime] = None) -> datetime:
    """获取本周的开始时间（周一00:00:00）"""
    now = now or utc_now()
    monday = now - timedelta(days=now.weekday())
    return datetime(monday.year, monday.month, monday.day)


def get_month_start(now: Optional[datetime] = None) -> datetime:
    """获取本月的开始时间（1号00:00:00）"""
    now = now or utc_now()
    return datetime(now.year, now.month, 1)


def days_ago(days: int, now: Optional[datetime] = None) -> datetime:
    """获取N天前的时间点"""
    return (now or utc_now()) - timedelta(days=days)


def is_expired(expire_time: datetime, check_time: Optional[datetime] = None) -> bool:
    """
    检查是否已过期

    Args:
        expire_time: 过期时间
        check_time: 要检查的时间，如果为None则使用当前UTC时间

    Returns:
        bool: 是否已过期
    """
    if check_time is None:
        check_time = utc_now()
    return check_time > expire_time


def format_datetime_iso(dt: Optional[datetime] = None) -> Optional[str]:
    """格式化日期时间为ISO字符串，None原样返回"""
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.isoformat()
