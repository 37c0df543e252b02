"""SVN Migration Tool

Bulk conversion of Subversion repositories into Git repositories, cloning
projects concurrently and serializing the cleanup of branches and tags.
"""

__version__ = '0.1.0'
__author__ = 'SVN Migration Team'
__email__ = 'team@example.com'

from .cli.main import main

__all__ = ['main']
