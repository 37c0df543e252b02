"""Data models for SVN projects."""

from .project import Project

__all__ = ['Project']
