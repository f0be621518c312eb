"""Centralized FastAPI dependency type aliases.

Import these ``*Dep`` aliases in route modules instead of manually
writing ``Annotated[T, Depends(get_xxx)]`` everywhere.  Each alias
corresponds to a single ``get_*`` factory and can be overridden in
tests via ``app.dependency_overrides[get_xxx] = ...``.
"""

from typing import Annotated

from fastapi import Depends

from inobot.configs.config import AppConfig, get_app_config
from inobot.core.feedback import FeedbackService, get_feedback_service
from inobot.core.ingestion import UploadService, get_upload_service
from inobot.core.service.deps import get_ask_pipeline
from inobot.core.service.rag import AskPipeline
from inobot.infra.real_ip import get_real_ip

AppConfigDep = Annotated[AppConfig, Depends(get_app_config)]
AskPipelineDep = Annotated[AskPipeline, Depends(get_ask_pipeline)]
UploadServiceDep = Annotated[UploadService, Depends(get_upload_service)]
FeedbackServiceDep = Annotated[FeedbackService, Depends(get_feedback_service)]
RealIPDep = Annotated[str, Depends(get_real_ip)]
