from __future__ import annotations

from pydantic import BaseModel, Field


class MenuItemOut(BaseModel):
    title: str
    target: str
    children: list[MenuItemOut] = Field(default_factory=list)


class NavigationOut(BaseModel):
    role: str
    items: list[MenuItemOut]
