"""Helper scripts and authors file written under the base path."""

import os
import shutil

from loguru import logger

from ..exceptions import AssetGenerationError


TAGS_SCRIPT = (
    "for t in $(git for-each-ref --format='%(refname:short)' refs/remotes/tags); "
    'do git tag ${t/tags\\//} $t && git branch -D -r $t; done\n'
)
BRANCHES_SCRIPT = (
    "for b in $(git for-each-ref --format='%(refname:short)' refs/remotes); "
    'do git branch $b refs/remotes/$b && git branch -D -r $b; done\n'
)
PEGS_SCRIPT = (
    "for p in $(git for-each-ref --format='%(refname:short)' | grep @); "
    'do git branch -D $p; done\n'
)

SCRIPTS = {
    'tags.sh': TAGS_SCRIPT,
    'branches.sh': BRANCHES_SCRIPT,
    'pegs.sh': PEGS_SCRIPT,
}

AUTHORS_FILE = 'users.txt'


class HelperAssets:
    """Cleanup scripts and authors mapping consumed by project migrations."""

    def __init__(self, base_path: str):
        self.base_path = base_path
        self.logger = logger.bind(component='HelperAssets')

    @property
    def tags_script(self) -> str:
        return os.path.join(self.base_path, 'tags.sh')

    @property
    def branches_script(self) -> str:
        return os.path.join(self.base_path, 'branches.sh')

    @property
    def pegs_script(self) -> str:
        return os.path.join(self.base_path, 'pegs.sh')

    @property
    def authors_file(self) -> str:
        return os.path.join(self.base_path, AUTHORS_FILE)

    def generate(self, users_path: str) -> None:
        """Write the cleanup scripts and copy the authors mapping.

        Args:
            users_path: Authors mapping file to copy as ``users.txt``

        Raises:
            AssetGenerationError: If any asset cannot be written
        """
        for filename, body in SCRIPTS.items():
            script_path = os.path.join(self.base_path, filename)
            try:
                with open(script_path, 'w', encoding='utf-8', newline='\n') as f:
                    f.write(body)
                os.chmod(script_path, 0o755)
            except OSError as e:
                raise AssetGenerationError(
                    f'Could not write {filename}: {e}', path=script_path
                ) from e
            self.logger.debug(f'Wrote helper script: {script_path}')

        if os.path.abspath(users_path) == os.path.abspath(self.authors_file):
            if not os.path.isfile(users_path):
                raise AssetGenerationError(
                    f'Authors file not found: {users_path}', path=users_path
                )
            return

        try:
            shutil.copyfile(users_path, self.authors_file)
        except OSError as e:
            raise AssetGenerationError(
                f'Could not copy authors file {users_path}: {e}', path=users_path
            ) from e

        self.logger.debug(f'Copied authors file {users_path} -> {self.authors_file}')
