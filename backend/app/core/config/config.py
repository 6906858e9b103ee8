"""
应用配置管理模块
统一管理所有配置信息，包括环境变量和文件配置
"""

from typing import Dict, List, Optional
from pydantic_settings import BaseSettings
from pydantic import field_validator, ConfigDict

from app.utils.config_utils import (
    get_workspace_path, get_config_path, parse_list_config, parse_json_config
)


class Settings(BaseSettings):
    """应用配置类 - 统一管理所有配置信息"""

    # ==================== 基础配置 ====================
    app_name: str = "Pixshop"
    app_version: str = "1.0.0"
    app_debug: bool = True
    app_env: str = "development"

    # ==================== API配置 ====================
    api_v1_str: str = "/api/v1"
    project_name: str = "Pixshop 360 Video API"

    # ==================== 数据库配置 ====================
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "pixshop_dev"
    POSTGRES_PASSWORD: str = "dev_password"
    POSTGRES_DB: str = "pixshop_dev"
    db_echo: bool = False

    # ==================== Redis / Celery配置 ====================
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: Optional[str] = None
    celery_result_db: int = 1

    # ==================== 安全配置 ====================
    SECRET_KEY: str = "development-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 7 * 24 * 60
    password_reset_expire_minutes: int = 60

    # 默认超级管理员
    create_default_admin: bool = True
    default_admin_email: str = "admin@pixshop.com"
    default_admin_password: str = "admin123!"

    # ==================== 文件存储配置 ====================
    upload_dir: str = "uploads"
    videos_dir: str = "videos"
    log_dir: str = "workspace/log"

    max_image_size: int = 10485760   # 10MB
    max_source_images: int = 4
    image_formats: str = "jpg,jpeg,png,gif,bmp,webp"

    # ==================== Google Drive配置 ====================
    drive_enabled: bool = False
    drive_api_url: str = "https://www.googleapis.com/drive/v3"
    drive_upload_url: str = "https://www.googleapis.com/upload/drive/v3/files"
    drive_folder_template: str = "Pixshop_Videos_User_{user_id}"
    drive_timeout: int = 120

    # ==================== Gemini / Veo 视频生成配置 ====================
    gemini_api_key: str = ""
    gemini_base_url: Optional[str] = None
    video_default_model: str = "veo-2.0-generate-001"
    video_default_provider: str = "gemini_veo"

    # 轮询策略（单位：秒），max_polls / max_wait 为空表示不限制
    video_poll_interval: float = 10.0
    video_max_polls: Optional[int] = None
    video_max_wait_seconds: Optional[float] = None
    video_progress_milestones: Dict[int, str] = {
        3: "The AI is composing the scene and setting up the camera path...",
        6: "Rendering frames. This is the longest step, thank you for your patience.",
    }

    # worker 检查取消标记的间隔（秒）
    video_cancel_check_interval: float = 2.0

    # 结果下载：query 表示以 ?key= 携带密钥，header 表示使用 x-goog-api-key
    video_fetch_auth_mode: str = "query"
    video_fetch_timeout: int = 300

    # ==================== MLflow配置 ====================
    enable_mlflow: bool = False
    mlflow_tracking_uri: str = "http://localhost:5001"
    mlflow_experiment_name: str = "pixshop-video-generation"

    # ==================== 日志配置 ====================
    log_level: str = "INFO"
    log_file: str = "backend.log"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # ==================== 应用服务配置 ====================
    app_port: int = 8080
    app_host: str = "0.0.0.0"

    # ==================== CORS配置 ====================
    frontend_url: str = "http://localhost:3000"
    cors_origins: str = '["http://localhost:3000", "http://127.0.0.1:3000"]'

    # ==================== 验证器 ====================
    @field_validator("image_formats")
    @classmethod
    def split_image_formats(cls, value: str) -> List[str]:
        """将图片格式字符串转换为列表"""
        return parse_list_config(value)

    @field_validator("cors_origins")
    @classmethod
    def parse_cors_origins(cls, value: str) -> List[str]:
        """解析CORS origins配置"""
        return parse_json_config(value)

    @field_validator("video_fetch_auth_mode")
    @classmethod
    def validate_fetch_auth_mode(cls, value: str) -> str:
        """校验结果下载的鉴权方式"""
        value = value.strip().lower()
        if value not in ("query", "header"):
            raise ValueError("video_fetch_auth_mode 只能是 query 或 header")
        return value

    # ==================== 计算属性 ====================
    @property
    def database_url(self) -> str:
        """构建数据库连接URL"""
        return (
            f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@"
            f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def async_database_url(self) -> str:
        """构建异步数据库连接URL"""
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@"
            f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    def _redis_url(self, db: int) -> str:
        if self.redis_password:
            return f"redis://:{self.redis_password}@{self.redis_host}:{self.redis_port}/{db}"
        return f"redis://{self.redis_host}:{self.redis_port}/{db}"

    @property
    def redis_url(self) -> str:
        """构建Redis连接URL（Celery broker）"""
        return self._redis_url(self.redis_db)

    @property
    def celery_result_backend_url(self) -> str:
        """Celery结果存储使用独立的Redis库"""
        return self._redis_url(self.celery_result_db)

    @property
    def absolute_upload_dir(self) -> str:
        """获取绝对上传目录路径"""
        return str(get_workspace_path(self.upload_dir))

    @property
    def absolute_videos_dir(self) -> str:
        """获取绝对视频目录路径"""
        return str(get_workspace_path(self.videos_dir))

    @property
    def workspace_dir(self) -> str:
        """获取workspace目录路径"""
        return str(get_workspace_path())

    @property
    def supported_image_mime_types(self) -> List[str]:
        """获取支持的图片MIME类型列表"""
        mime_type_map = {
            "jpg": "image/jpeg",
            "jpeg": "image/jpeg",
            "png": "image/png",
            "gif": "image/gif",
            "bmp": "image/bmp",
            "webp": "image/webp",
        }
        return sorted({mime_type_map[fmt] for fmt in self.image_formats if fmt in mime_type_map})

    @property
    def absolute_log_file(self) -> str:
        """获取绝对日志文件路径"""
        return str(get_workspace_path("log") / self.log_file)

    model_config = ConfigDict(
        env_file=get_config_path(".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
        validate_default=True
    )


def get_settings() -> Settings:
    """获取应用配置实例"""
    # 环境变量文件加载由外部环境控制（Docker Compose、launch.json等）
    return Settings()


# 全局配置实例
settings = get_settings()
