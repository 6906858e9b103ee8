"""
认证相关的Pydantic模型
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


def _normalize_email(v: str) -> str:
    v = v.strip().lower()
    if "@" not in v or v.startswith("@") or v.endswith("@"):
        raise ValueError("Invalid email address")
    return v


# bcrypt 只接受不超过72字节的密码
PASSWORD_MAX_BYTES = 72


def _check_password_bytes(v: str) -> str:
    if len(v.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    return v


class SignupRequest(BaseModel):
    """注册请求"""
    email: str = Field(..., max_length=255, description="邮箱")
    password: str = Field(..., min_length=6, max_length=72, description="密码（至少6位）")
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return _normalize_email(v)

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        return _check_password_bytes(v)


class LoginRequest(BaseModel):
    """登录请求"""
    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=1)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return _normalize_email(v)


class ForgotPasswordRequest(BaseModel):
    """找回密码请求"""
    email: str = Field(..., max_length=255)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return _normalize_email(v)


class ResetPasswordRequest(BaseModel):
    """重置密码请求"""
    token: str = Field(..., min_length=1, description="重置令牌")
    new_password: str = Field(..., min_length=6, max_length=72, description="新密码（至少6位）")

    @field_validator('new_password')
    @classmethod
    def validate_new_password(cls, v):
        return _check_password_bytes(v)


class DriveSettingsRequest(BaseModel):
    """Google Drive 同步设置"""
    enabled: bool = Field(..., description="是否把生成的视频同步到 Google Drive")
    access_token: Optional[str] = Field(None, description="Google OAuth 访问令牌（drive.file 权限）")
