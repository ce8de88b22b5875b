"""Report data model and Markdown rendering."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

FENCE = "```"
# Backticks separated by zero-width spaces render the same but cannot close a fence
ESCAPED_FENCE = "`\u200b`\u200b`"


class PatchFailure(str, Enum):
    """Ways a patch can fail, as phrased by the mod's WebpackInterceptor."""

    NO_EFFECT = "had no effect"
    ERRORED = "errored"
    NOT_FOUND = "found no module"


class BadPatch(BaseModel):
    """A patch that failed to apply."""

    plugin: str = Field(..., description="Name of the plugin owning the patch")
    type: PatchFailure = Field(..., description="How the patch failed")
    id: str = Field(..., description="Webpack module id, '-' if none matched")
    match: str = Field(..., description="Find/match pattern of the patch")
    error: str | None = Field(None, description="Underlying error message")


class BadStart(BaseModel):
    """A plugin whose start routine threw."""

    plugin: str = Field(..., description="Plugin name")
    error: str | None = Field(None, description="Underlying error message")


@dataclass
class Report:
    """Diagnostics collected during one run, in arrival order."""

    bad_patches: list[BadPatch] = field(default_factory=list)
    bad_starts: list[BadStart] = field(default_factory=list)
    other_errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert report to dictionary for JSON serialization."""
        return {
            "badPatches": [p.model_dump(mode="json") for p in self.bad_patches],
            "badStarts": [s.model_dump(mode="json") for s in self.bad_starts],
            "otherErrors": list(self.other_errors),
        }


def to_code_block(text: str) -> str:
    """Wrap text in an inline fenced block that its content cannot break."""
    return FENCE + text.replace(FENCE, ESCAPED_FENCE) + " " + FENCE


def render_markdown(report: Report) -> str:
    """Render a report as Markdown.

    Sections always appear in the order Bad Patches, Bad Starts, Discord
    Errors, even when empty.
    """
    lines = ["# Vencord Report", "", "## Bad Patches"]

    for patch in report.bad_patches:
        lines.append(f"- {patch.plugin} ({patch.type.value})")
        lines.append(f"  - ID: `{patch.id}`")
        lines.append(f"  - Match: {to_code_block(patch.match)}")
        if patch.error:
            lines.append(f"  - Error: {to_code_block(patch.error)}")

    lines += ["", "## Bad Starts"]
    for start in report.bad_starts:
        lines.append(f"- {start.plugin}")
        if start.error:
            lines.append(f"  - Error: {to_code_block(start.error)}")

    lines += ["", "## Discord Errors"]
    for error in report.other_errors:
        lines.append(f"- {to_code_block(error)}")

    return "\n".join(lines) + "\n"
