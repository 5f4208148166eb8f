"""Machine image model built from EC2 DescribeImages items."""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from core.utils.time import parse_iso_timestamp


class MachineImage(BaseModel):
    """An owned AMI together with the EBS snapshots backing it."""

    model_config = ConfigDict(frozen=True)

    image_id: StrictStr = Field(..., min_length=1, description="AMI identifier")
    name: StrictStr | None = Field(None, description="AMI name, if any")
    creation_date: datetime | None = Field(
        None,
        description="Creation timestamp (UTC); None when EC2 does not report one",
    )
    snapshot_ids: list[StrictStr] = Field(
        default_factory=list,
        description="EBS snapshot ids referenced by the block device mappings",
    )

    @classmethod
    def from_ec2(cls, item: Mapping[str, Any]) -> "MachineImage":
        """Build a MachineImage from a raw DescribeImages item.

        An unparsable CreationDate is treated the same as a missing one.
        """
        snapshot_ids = [
            mapping["Ebs"]["SnapshotId"]
            for mapping in item.get("BlockDeviceMappings") or []
            if (mapping.get("Ebs") or {}).get("SnapshotId")
        ]

        return cls(
            image_id=item["ImageId"],
            name=item.get("Name"),
            creation_date=parse_iso_timestamp(item.get("CreationDate")),
            snapshot_ids=snapshot_ids,
        )

    @property
    def display_name(self) -> str:
        return self.name or self.image_id
