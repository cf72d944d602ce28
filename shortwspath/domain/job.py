"""Job entity - Identity of a build definition on the host."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Job:
    """A configured build definition.

    Attributes:
        full_name: Hierarchical name, folders separated by "/"
        name: Short display name (defaults to the last segment of full_name)
    """

    full_name: str
    name: str = ""

    def __post_init__(self) -> None:
        if not self.full_name:
            raise ValueError("Job full name is required")
        if not self.name:
            object.__setattr__(self, "name", self.full_name.rsplit("/", 1)[-1])

    def __str__(self) -> str:
        return self.full_name
