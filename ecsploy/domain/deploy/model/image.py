"""Container image references."""

from ecsploy.domain.shared.error import MalformedImageReference
from ecsploy.domain.shared.model.value import ValueObject


class ImageRef(ValueObject):
    """A ``repository:tag`` image reference.

    Build instances with :meth:`parse`; both parts are always non-empty.
    """

    repository: str
    tag: str

    @classmethod
    def parse(cls, value: str) -> "ImageRef":
        """Split ``repository:tag`` into its two parts.

        Raises:
            MalformedImageReference: If there is not exactly one ``:`` or
                either side of it is empty.
        """
        parts = value.split(":")
        if len(parts) != 2 or not parts[0] or not parts[1]:
            raise MalformedImageReference(value)
        return cls(repository=parts[0], tag=parts[1])

    def __str__(self) -> str:
        return f"{self.repository}:{self.tag}"
