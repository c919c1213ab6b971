"""
Document writer for execution packages.

Persists the rendered documents of an ExecutionPackage to a directory.
This is the only component that touches the filesystem; it owns directory
creation and the overwrite policy.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from ..governance.models import ExecutionPackage

logger = logging.getLogger(__name__)


class QueryDocumentWriter:
    """Writes package documents as files named by the package."""

    def __init__(
        self,
        output_dir: Optional[Union[str, Path]] = None,
        overwrite: bool = False,
    ):
        """
        Initialize the writer.

        Args:
            output_dir: Directory for the documents (defaults to ``queries``)
            overwrite: Replace existing files instead of refusing
        """
        self.output_dir = Path(output_dir or "queries")
        self.overwrite = overwrite

    def write(self, package: ExecutionPackage) -> list[Path]:
        """
        Write every document of a package.

        Args:
            package: The package to persist

        Returns:
            Paths of the written files, in document order

        Raises:
            FileExistsError: If a target exists and overwrite is disabled
        """
        targets = [
            (self.output_dir / document.filename, document.content)
            for document in package.documents
        ]

        if not self.overwrite:
            existing = [str(path) for path, _ in targets if path.exists()]
            if existing:
                raise FileExistsError(
                    f"Refusing to overwrite existing files: {', '.join(existing)}"
                )

        self.output_dir.mkdir(parents=True, exist_ok=True)

        written = []
        for path, content in targets:
            path.write_text(content, encoding="utf-8")
            written.append(path)

        logger.info(f"Wrote {len(written)} document(s) for '{package.slug}' to {self.output_dir}")
        return written
