"""AMI Housekeeper Package."""

__version__ = "1.0.0"
__description__ = (
    "Scheduled AWS Lambda that deregisters unused AMIs and deletes their EBS snapshots"
)

__all__ = ["handlers", "core"]
