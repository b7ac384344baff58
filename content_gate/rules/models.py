from pydantic import BaseModel, Field


class ProjectRules(BaseModel):
    slug: str
    rules_version: str


class PreviewRules(BaseModel):
    ceiling_seconds: int = Field(default=300, gt=0)
    warning_ratio: float = Field(default=0.8, gt=0, le=1)
    tick_interval_seconds: float = Field(default=1.0, gt=0)


class ArticlePreviewRules(BaseModel):
    ratio: float = Field(default=0.3, gt=0, le=1)
    min_lines: int = Field(default=30, ge=0)


class AuditRules(BaseModel):
    enabled: bool = True
    # Informational preview checks are not trust-boundary checks
    log_informational: bool = False


class VideoRules(BaseModel):
    # Catalog tier per video; ids not listed use premium_by_default
    premium_ids: list[str] = Field(default_factory=list)
    premium_by_default: bool = False


class MessageRules(BaseModel):
    login_link: str = "/login"
    upgrade_link: str = "/membership/upgrade"


class Rules(BaseModel):
    project: ProjectRules
    preview: PreviewRules = Field(default_factory=PreviewRules)
    article_preview: ArticlePreviewRules = Field(default_factory=ArticlePreviewRules)
    audit: AuditRules = Field(default_factory=AuditRules)
    messages: MessageRules = Field(default_factory=MessageRules)
    videos: VideoRules = Field(default_factory=VideoRules)
