"""Pack registry: load pack documents and look them up by key."""

from importlib import resources
from pathlib import Path

from pydantic import ValidationError

from agentpack.observability.logging import get_logger
from agentpack.packs.exceptions import PackLoadError, PackNotFoundError
from agentpack.packs.models import AgentTemplatePack, PackSummary, summarize_pack

logger = get_logger(__name__)

BUNDLED_PACKAGE = "agentpack.packs.data"


def parse_pack(text: str | bytes, source: str = "<memory>") -> AgentTemplatePack:
    """Parse a JSON pack document.

    Raises:
        PackLoadError: If the document is not valid JSON or does not match
            the pack schema
    """
    try:
        return AgentTemplatePack.model_validate_json(text)
    except ValidationError as e:
        raise PackLoadError(f"Invalid pack document {source}: {e}", source=source) from e


def load_pack_file(path: Path) -> AgentTemplatePack:
    """Load one pack from a JSON file."""
    try:
        text = path.read_bytes()
    except OSError as e:
        raise PackLoadError(f"Cannot read pack file {path}: {e}", source=str(path)) from e
    return parse_pack(text, source=str(path))


class PackRegistry:
    """In-memory catalogue of packs keyed by `metadata.key`."""

    def __init__(self) -> None:
        self._packs: dict[str, AgentTemplatePack] = {}

    def register(self, pack: AgentTemplatePack) -> None:
        """Add a pack, replacing any pack already registered under its key."""
        if pack.key in self._packs:
            logger.warning("pack_replaced", pack_key=pack.key)
        self._packs[pack.key] = pack

    def get(self, key: str) -> AgentTemplatePack | None:
        return self._packs.get(key)

    def require(self, key: str) -> AgentTemplatePack:
        """Get a pack by key.

        Raises:
            PackNotFoundError: If no pack has that key
        """
        pack = self._packs.get(key)
        if pack is None:
            raise PackNotFoundError(key)
        return pack

    def list_packs(self) -> list[AgentTemplatePack]:
        return list(self._packs.values())

    def list_summaries(self) -> list[PackSummary]:
        return [summarize_pack(pack) for pack in self._packs.values()]

    def load_bundled(self) -> int:
        """Register the packs shipped inside agentpack. Returns how many."""
        loaded = 0
        for entry in sorted(resources.files(BUNDLED_PACKAGE).iterdir(), key=lambda e: e.name):
            if not entry.name.endswith(".json"):
                continue
            self.register(parse_pack(entry.read_bytes(), source=entry.name))
            loaded += 1
        logger.info("bundled_packs_loaded", count=loaded)
        return loaded

    def load_directory(self, directory: Path) -> int:
        """Register every `*.json` pack in a directory. Returns how many.

        Raises:
            PackLoadError: If the directory is missing or a file is malformed
        """
        if not directory.is_dir():
            raise PackLoadError(f"Pack directory not found: {directory}", source=str(directory))

        loaded = 0
        for path in sorted(directory.glob("*.json")):
            self.register(load_pack_file(path))
            loaded += 1
        logger.info("pack_directory_loaded", directory=str(directory), count=loaded)
        return loaded

    def __contains__(self, key: object) -> bool:
        return key in self._packs

    def __len__(self) -> int:
        return len(self._packs)
