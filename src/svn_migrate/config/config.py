"""Configuration management for SVN Migration Tool."""

from typing import Optional, Dict, Any, List
from pathlib import Path
import os

from pydantic import BaseModel, Field, validator
import yaml
from dotenv import load_dotenv

from ..models.project import Project


DEFAULT_CONFIG_PATHS = ['projects.yaml', 'projects.yml', '.svn-migrate.yaml']


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default='INFO', description='Log level')
    file: Optional[str] = Field(default=None, description='Log file path')
    format: Optional[str] = Field(default=None, description='Console log format')

    @validator('level')
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'Log level must be one of: {valid_levels}')
        return v.upper()


class Config(BaseModel):
    """Main configuration class for SVN Migration Tool."""

    base_path: str = Field(
        ..., description='Directory receiving converted repositories and logs'
    )
    users_path: str = Field(..., description='SVN to Git authors mapping file')
    bash_path: str = Field(
        default='bash', description='Interpreter used to run cleanup scripts'
    )
    git_path: str = Field(default='git', description='Git executable')
    projects: List[Project] = Field(
        default_factory=list, description='Projects to migrate'
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description='Logging settings'
    )

    class Config:
        """Pydantic configuration."""

        extra = 'forbid'  # Don't allow extra fields

    @validator('base_path', 'users_path')
    def validate_path(cls, v):
        """Expand user home and make the path absolute."""
        if not v or not v.strip():
            raise ValueError('Path must not be empty')
        return os.path.abspath(os.path.expanduser(v.strip()))

    @validator('projects')
    def validate_unique_projects(cls, v):
        """Validate project names are unique within a run."""
        seen = set()
        duplicates = []
        for project in v:
            if project.name in seen:
                duplicates.append(project.name)
            seen.add(project.name)
        if duplicates:
            raise ValueError(f'Duplicate project names: {", ".join(duplicates)}')
        return v

    def project_path(self, project: Project) -> str:
        """Absolute path of the repository directory for a project."""
        return os.path.join(self.base_path, project.name)

    def log_path(self, project: Project) -> str:
        """Absolute path of the command transcript for a project."""
        return os.path.join(self.base_path, f'{project.name}.log')

    @classmethod
    def from_file(cls, config_path: str) -> 'Config':
        """Load configuration from YAML file, applying environment overrides."""
        config_file = Path(config_path)

        if not config_file.exists():
            raise FileNotFoundError(f'Configuration file not found: {config_path}')

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        if not isinstance(config_data, dict):
            raise ValueError(f'Configuration must be a mapping: {config_path}')

        return cls(**cls._apply_env_overrides(config_data))

    @classmethod
    def _apply_env_overrides(cls, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Overlay values from the environment (and a .env file) on file data."""
        # Load .env file if it exists
        load_dotenv()

        overrides = {
            'base_path': os.getenv('SVN_MIGRATE_BASE_PATH'),
            'users_path': os.getenv('SVN_MIGRATE_USERS_PATH'),
            'bash_path': os.getenv('SVN_MIGRATE_BASH_PATH'),
            'git_path': os.getenv('SVN_MIGRATE_GIT_PATH'),
        }
        logging_overrides = {
            'level': os.getenv('LOG_LEVEL'),
            'file': os.getenv('LOG_FILE'),
        }

        merged = dict(config_data)
        merged.update(cls._remove_none_values(overrides))

        logging_data = dict(merged.get('logging') or {})
        logging_data.update(cls._remove_none_values(logging_overrides))
        if logging_data:
            merged['logging'] = logging_data

        return merged

    @staticmethod
    def _remove_none_values(data: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively remove None values from dictionary."""
        if isinstance(data, dict):
            return {
                k: Config._remove_none_values(v)
                for k, v in data.items()
                if v is not None
            }
        return data

    def to_file(self, config_path: str) -> None:
        """Save configuration to YAML file."""
        config_file = Path(config_path)
        config_file.parent.mkdir(parents=True, exist_ok=True)

        data = self.dict()

        with open(config_file, 'w', encoding='utf-8') as f:
            yaml.dump(data, f, default_flow_style=False, indent=2, sort_keys=False)

    @staticmethod
    def create_template(output_path: str) -> None:
        """Create a configuration template file."""
        template_config = {
            'base_path': '/srv/svn-migration',
            'users_path': '/srv/svn-migration-authors.txt',
            'bash_path': 'bash',
            'git_path': 'git',
            'projects': [
                {
                    'name': 'example-standard',
                    'svn': 'https://svn.example.com/repos/example-standard',
                    'title': 'Example (standard layout)',
                    'std': True,
                },
                {
                    'name': 'example-flat',
                    'svn': 'https://svn.example.com/repos/example-flat',
                    'std': False,
                },
            ],
            'logging': {
                'level': 'INFO',
                'file': 'svn-migrate.log',
            },
        }

        config_file = Path(output_path)
        config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(config_file, 'w', encoding='utf-8') as f:
            yaml.dump(
                template_config, f, default_flow_style=False, indent=2, sort_keys=False
            )
