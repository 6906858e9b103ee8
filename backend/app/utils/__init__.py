"""
通用工具模块包
提供项目通用的工具函数和辅助类
"""

from .config_utils import (
    get_project_root,
    get_workspace_path,
    get_config_path,
    parse_list_config,
    parse_json_config
)

from .id_utils import (
    generate_uuid,
    generate_id_with_prefix,
    generate_task_id,
    generate_video_id,
    generate_model_id,
    generate_reset_token
)

from .datetime_utils import (
    utc_now,
    get_today_start,
    get_week_start,
    get_month_start,
    days_ago,
    is_expired,
    format_datetime_iso
)

from .async_utils import (
    run_async,
    AsyncRunner
)

__all__ = [
    # config_utils
    'get_project_root', 'get_workspace_path', 'get_config_path',
    'parse_list_config', 'parse_json_config',

    # id_utils
    'generate_uuid', 'generate_id_with_prefix', 'generate_task_id',
    'generate_video_id', 'generate_model_id', 'generate_reset_token',

    # datetime_utils
    'utc_now', 'get_today_start', 'get_week_start', 'get_month_start',
    'days_ago', 'is_expired', 'format_datetime_iso',

    # async_utils
    'run_async', 'AsyncRunner'
]
