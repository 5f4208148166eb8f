"""Cleanup configuration model.

Keys use the camelCase names of the ``AMI_CLEANUP_OPTIONS`` JSON document;
snake_case field names are accepted as well.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, field_validator

from core.utils.constants import DEFAULT_IMAGE_FILTERS, DEFAULT_MINIMUM_DAYS_OLD


class ImageFilter(BaseModel):
    """A single EC2 DescribeImages filter (field = any of values)."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    name: StrictStr = Field(..., alias="Name", min_length=1)
    values: list[StrictStr] = Field(..., alias="Values", min_length=1)

    def to_boto(self) -> dict[str, Any]:
        return {"Name": self.name, "Values": list(self.values)}


def _default_filters() -> list[ImageFilter]:
    return [ImageFilter(name=name, values=list(values)) for name, values in DEFAULT_IMAGE_FILTERS]


class CleanupOptions(BaseModel):
    """Fully-resolved configuration of a cleanup run."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    minimum_days_old: int = Field(
        DEFAULT_MINIMUM_DAYS_OLD,
        alias="minimumDaysOld",
        ge=0,
        description="Images must be older than this many days to be deleted",
    )
    max_items: int | None = Field(
        None,
        alias="maxItems",
        ge=0,
        description=(
            "Caps the raw DescribeImages listing, not the number of deletions. "
            "In-use images inside the cap still count against it. 0 means no cap."
        ),
    )
    filters: list[ImageFilter] = Field(
        default_factory=_default_filters,
        alias="filters",
        description="DescribeImages filters, defaults to available machine images",
    )
    launch_template_names: list[StrictStr] | None = Field(
        None,
        alias="launchTemplateNames",
        description="Launch templates to inspect; None inspects all of them",
    )
    ssm_parameter_names: list[StrictStr] | None = Field(
        None,
        alias="ssmParameterNames",
        description="When unset or empty, SSM parameters are not consulted",
    )
    dry_run: StrictBool = Field(
        False,
        alias="dryRun",
        description="Log the deletions that would happen without performing them",
    )

    @field_validator("max_items")
    @classmethod
    def zero_means_unbounded(cls, value: int | None) -> int | None:
        return value or None

    @classmethod
    def merged(cls, overrides: Mapping[str, Any] | None = None) -> "CleanupOptions":
        """Overlay caller-supplied values on the defaults.

        Keys that are absent or set to None keep their default value.

        Raises:
            pydantic.ValidationError: If any supplied value is invalid
        """
        present = {key: value for key, value in (overrides or {}).items() if value is not None}
        return cls.model_validate(present)

    def boto_filters(self) -> list[dict[str, Any]]:
        return [image_filter.to_boto() for image_filter in self.filters]

    @property
    def uses_ssm_parameters(self) -> bool:
        return bool(self.ssm_parameter_names)
