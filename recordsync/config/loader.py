"""
Seed loader for in-memory repositories.

Loads and validates YAML seed files.
"""
from pathlib import Path
from typing import List, Optional

import structlog
import yaml
from pydantic import ValidationError

from ..exceptions import SeedFileError
from .schemas import SeedData

logger = structlog.get_logger(__name__)

DEFAULT_SEED_DIR = Path(__file__).parent / "seeds"


class SeedLoader:
    """Loads and validates seed files."""

    def __init__(self, seed_dir: Optional[Path] = None):
        """
        Initialize seed loader.

        Args:
            seed_dir: Directory containing seed files (defaults to the packaged seeds)
        """
        self.seed_dir = Path(seed_dir) if seed_dir is not None else DEFAULT_SEED_DIR

    def load(self, name: str) -> SeedData:
        """
        Load a seed by name from the seed directory.

        Args:
            name: Seed name without extension (e.g., "demo_portfolio")

        Returns:
            Validated SeedData

        Raises:
            SeedFileError: If the file doesn't exist or is invalid
        """
        seed_file = self.seed_dir / f"{name}.yaml"
        if not seed_file.exists():
            available = self.get_available_seeds()
            raise SeedFileError(
                f"Seed file not found: {seed_file}\n"
                f"Available seeds: {', '.join(available) or 'none'}"
            )
        return self.load_path(seed_file)

    def load_path(self, path: Path) -> SeedData:
        """Load and validate a seed from an explicit path."""
        path = Path(path)
        if not path.exists():
            raise SeedFileError(f"Seed file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise SeedFileError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(raw, dict):
            raise SeedFileError(f"Seed file {path} must contain a mapping at the top level")

        try:
            seed = SeedData(**raw)
        except ValidationError as e:
            raise SeedFileError(f"Invalid seed in {path}: {e}") from e

        logger.info("Loaded seed file",
                    path=str(path),
                    record_types=len(seed.record_types),
                    records=len(seed.records),
                    templates=len(seed.templates),
                    reports=len(seed.reports))
        return seed

    def get_available_seeds(self) -> List[str]:
        """
        Get list of available seed names.

        Returns:
            Seed names (without .yaml extension), sorted
        """
        if not self.seed_dir.exists():
            return []
        return sorted(f.stem for f in self.seed_dir.glob("*.yaml"))


# Convenience functions
def load_seed_file(path: Path) -> SeedData:
    """Load a seed file from an explicit path (convenience function)."""
    return SeedLoader().load_path(path)


def load_seed(name: str, seed_dir: Optional[Path] = None) -> SeedData:
    """Load a named seed (convenience function)."""
    return SeedLoader(seed_dir).load(name)


def get_available_seeds(seed_dir: Optional[Path] = None) -> List[str]:
    """Get list of available seeds (convenience function)."""
    return SeedLoader(seed_dir).get_available_seeds()
