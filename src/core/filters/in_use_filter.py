"""Exclusion of images that are still referenced."""

from collections.abc import Collection

from core.models.image import MachineImage


class InUseFilter:
    """Drop images whose id appears in a set of in-use references.

    Relative order of the remaining images is preserved.
    """

    @staticmethod
    def apply(
        images: list[MachineImage],
        in_use_ids: Collection[str],
    ) -> list[MachineImage]:
        if not in_use_ids:
            return list(images)

        return [image for image in images if image.image_id not in in_use_ids]
