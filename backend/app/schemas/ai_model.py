"""
AI模型配置的Pydantic验证模型（统一架构）
"""

from typing import Optional, Dict, Any, List
from pydantic import BaseModel, Field, field_validator

VALID_CAPABILITIES = {'video_gen'}


def _check_base_url(v: Optional[str]) -> Optional[str]:
    if v is not None:
        v = v.strip()
        if v and not (v.startswith('http://') or v.startswith('https://')):
            raise ValueError("Base URL必须以 http:// 或 https:// 开头")
    return v


class AIModelBase(BaseModel):
    """AI模型基础模型"""
    name: str = Field(..., min_length=1, max_length=255, description="模型显示名称")
    ai_model_name: str = Field(..., min_length=1, max_length=255, description="远程模型名称")
    base_url: Optional[str] = Field(None, max_length=512, description="API基础URL")
    api_key: Optional[str] = Field(None, description="API密钥")

    model_config = {
        "protected_namespaces": ()
    }


class AIModelCreate(AIModelBase):
    """创建AI模型请求模型"""
    capabilities: List[str] = Field(default_factory=lambda: ['video_gen'], description="模型支持的能力列表")
    provider_mapping: Dict[str, str] = Field(default_factory=dict, description="能力到Provider的映射，缺省使用默认Provider")
    parameters: Optional[Dict[str, Any]] = Field(default_factory=dict, description="模型参数配置")

    is_enabled: bool = Field(True, description="是否启用")
    is_default: bool = Field(False, description="是否为默认模型")

    @field_validator('api_key')
    @classmethod
    def validate_api_key(cls, v):
        """验证API密钥"""
        if v is not None and len(v.strip()) == 0:
            raise ValueError("API密钥不能为空字符串")
        return v

    @field_validator('base_url')
    @classmethod
    def validate_base_url(cls, v):
        """验证Base URL格式"""
        return _check_base_url(v)

    @field_validator('capabilities')
    @classmethod
    def validate_capabilities(cls, v):
        """验证能力列表"""
        if not v:
            raise ValueError("至少需要指定一个能力")
        for cap in v:
            if cap not in VALID_CAPABILITIES:
                raise ValueError(f"无效的能力: {cap}，有效的能力包括: {', '.join(sorted(VALID_CAPABILITIES))}")
        return v


class AIModelUpdate(BaseModel):
    """更新AI模型请求模型"""
    name: Optional[str] = Field(None, min_length=1, max_length=255, description="模型显示名称")
    ai_model_name: Optional[str] = Field(None, min_length=1, max_length=255, description="远程模型名称")
    base_url: Optional[str] = Field(None, max_length=512, description="API基础URL")
    api_key: Optional[str] = Field(None, description="API密钥")

    capabilities: Optional[List[str]] = Field(None, description="模型支持的能力列表")
    provider_mapping: Optional[Dict[str, str]] = Field(None, description="能力到Provider的映射")
    parameters: Optional[Dict[str, Any]] = Field(None, description="模型参数配置")

    is_enabled: Optional[bool] = Field(None, description="是否启用")
    is_default: Optional[bool] = Field(None, description="是否为默认模型")

    model_config = {
        "protected_namespaces": ()
    }

    @field_validator('base_url')
    @classmethod
    def validate_base_url(cls, v):
        """验证Base URL格式"""
        return _check_base_url(v)

    @field_validator('capabilities')
    @classmethod
    def validate_capabilities(cls, v):
        if v is not None:
            if len(v) == 0:
                raise ValueError("至少需要指定一个能力")
            for cap in v:
                if cap not in VALID_CAPABILITIES:
                    raise ValueError(f"无效的能力: {cap}")
        return v


class AIModelResponse(AIModelBase):
    """AI模型响应模型（API密钥已脱敏）"""
    id: str
    capabilities: List[str]
    provider_mapping: Dict[str, str]
    parameters: Optional[Dict[str, Any]] = {}
    is_enabled: bool
    is_default: bool
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
