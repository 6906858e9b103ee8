"""
视频生成相关的Pydantic模型
"""

from typing import Optional

from pydantic import BaseModel


class VideoTaskResponse(BaseModel):
    """视频生成任务状态"""
    task_id: str
    status: str
    progress_message: Optional[str] = None
    poll_count: int = 0
    error_message: Optional[str] = None
    video_id: Optional[str] = None
    prompt: Optional[str] = None
    animation_style: Optional[str] = None
    created_at: Optional[str] = None
    started_at: Optional[str] = None
    completed_at: Optional[str] = None


class VideoResponse(BaseModel):
    """已生成的视频"""
    id: str
    prompt: Optional[str] = None
    animation_style: Optional[str] = None
    mime_type: Optional[str] = None
    file_size: Optional[int] = None
    content_url: str
    drive_file_id: Optional[str] = None
    drive_view_link: Optional[str] = None
    drive_download_link: Optional[str] = None
    is_stored_in_drive: bool = False
    created_at: Optional[str] = None
