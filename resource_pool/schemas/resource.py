"""Resource pool API schemas.

Wire format keeps the controller's field names: "sha1" and "size".
"""

from pydantic import BaseModel, ConfigDict, Field

from resource_pool.domain.value_objects import ResourceDescriptor

SHA1_PATTERN = r"^[0-9a-f]{40}$"


class ResourceDescriptorSchema(BaseModel):
    """One entry of a resource manifest."""

    model_config = ConfigDict(frozen=True)

    sha1: str = Field(..., pattern=SHA1_PATTERN, description="SHA-1 hex digest")
    size: int = Field(..., ge=0, description="Declared size in bytes")

    def to_domain(self) -> ResourceDescriptor:
        return ResourceDescriptor(self.sha1, self.size)

    @classmethod
    def from_domain(cls, descriptor: ResourceDescriptor) -> "ResourceDescriptorSchema":
        return cls(sha1=descriptor.checksum, size=descriptor.size)


class ResourceMatchResponse(BaseModel):
    """Response for PUT /resources/match."""

    matched: list[ResourceDescriptorSchema] = Field(default_factory=list)
    unmatched: list[ResourceDescriptorSchema] = Field(default_factory=list)
    rejected: list[ResourceDescriptorSchema] = Field(default_factory=list)
