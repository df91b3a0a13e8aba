"""Validity checking options (profiles)."""

from pydantic import BaseModel, Field


class ValidityOptions(BaseModel):
    """Options applied uniformly to every geometry checked by one checker.

    The default follows the OGC Simple Features rules. Enabling
    ``allow_inverted_rings_forming_holes`` switches to the ESRI ring model,
    where a shell may self-touch to form a hole and a hole may self-touch
    to form two holes, as long as the interior stays connected.
    """

    name: str = Field(default="ogc", description="Profile name")
    description: str | None = Field(default=None, description="Profile description")
    allow_inverted_rings_forming_holes: bool = Field(
        default=False,
        description="Accept self-touching rings that form holes without disconnecting the interior",
    )

    @classmethod
    def from_yaml(cls, yaml_content: str) -> "ValidityOptions":
        """Load options from a YAML string."""
        import yaml
        data = yaml.safe_load(yaml_content) or {}
        return cls(**data)

    def merge_override(self, override: dict) -> "ValidityOptions":
        """Return a copy with the given fields replaced (validated)."""
        base = self.model_dump()
        base.update(override)
        return ValidityOptions(**base)
