"""External command execution and helper assets."""

from .runner import JobRunner, JobResult
from .assets import HelperAssets

__all__ = ['JobRunner', 'JobResult', 'HelperAssets']
