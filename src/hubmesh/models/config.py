"""Inventory behaviour settings stored alongside the snapshot."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from .issues import IssueCategory


class WebhookConfig(BaseModel):
    model_config = {"extra": "forbid"}

    url: str | None = None
    enabled: bool = False


class NotificationConfig(BaseModel):
    model_config = {"extra": "forbid"}

    enabled: bool = False
    global_url: str | None = None
    global_url_enabled: bool = False
    categories: dict[IssueCategory, WebhookConfig] = Field(default_factory=dict)
    timeout: float = Field(default=10.0, gt=0)


class ReportConfig(BaseModel):
    model_config = {"extra": "forbid"}

    html: bool = False
    csv: bool = False
    output_dir: str = "."


class InventoryConfig(BaseModel):
    model_config = {"extra": "forbid"}

    low_battery_charge_threshold: int = Field(default=20, ge=0, le=100)
    inactivity_threshold_minutes: int = Field(default=1440, ge=1)
    exclusions: dict[IssueCategory, list[str]] = Field(default_factory=dict)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    reports: ReportConfig = Field(default_factory=ReportConfig)
    last_updated: datetime | None = None

    def excluded(self, category: IssueCategory) -> set[str]:
        return set(self.exclusions.get(category, []))
