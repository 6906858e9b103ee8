"""
站点设置相关的Pydantic模型
"""

from typing import Optional

from pydantic import BaseModel, Field


class SiteAccessUpdate(BaseModel):
    """站点访问开关"""
    is_enabled: bool = Field(..., description="是否允许普通用户访问")


class MaintenanceUpdate(BaseModel):
    """维护模式设置"""
    is_maintenance_mode: bool = Field(..., description="是否开启维护模式")
    maintenance_title: Optional[str] = Field(None, max_length=200, description="维护页标题")
    maintenance_message: Optional[str] = Field(None, max_length=2000, description="维护页说明")
    estimated_completion: Optional[str] = Field(None, max_length=100, description="预计恢复时间")
