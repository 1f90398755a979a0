"""Pack catalogue and deployment behaviour configuration."""

from pathlib import Path

from pydantic import BaseModel, Field


class PacksConfig(BaseModel):
    """Which packs are available and how they are applied."""

    packs_dir: Path | None = Field(
        default=None,
        description="Directory of additional *.json packs",
    )
    include_bundled: bool = Field(
        default=True,
        description="Register the packs shipped with agentpack",
    )
    report_unresolved_refs: bool = Field(
        default=False,
        description=(
            "Record an error for every dependent entity skipped because its "
            "parent was not created, instead of only for playbooks"
        ),
    )
