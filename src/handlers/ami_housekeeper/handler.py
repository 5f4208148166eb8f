"""
Lambda handler that removes unused AMIs on a schedule.
"""

import os
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.models.result import CleanupResult
from core.utils.config import load_cleanup_options
from core.utils.constants import (
    DEFAULT_METRICS_NAMESPACE,
    DEFAULT_SERVICE_NAME,
    ENV_POWERTOOLS_METRICS_NAMESPACE,
    ENV_POWERTOOLS_SERVICE_NAME,
    METRIC_IMAGES_DELETED,
    METRIC_IMAGES_FAILED,
    METRIC_IMAGES_NOT_IN_USE,
    METRIC_IMAGES_SKIPPED,
    METRIC_SNAPSHOTS_DELETED,
    METRIC_SNAPSHOTS_FAILED,
)
from core.utils.decorators import scheduled_handler

from .service import HousekeeperService

logger = Logger(service=os.getenv(ENV_POWERTOOLS_SERVICE_NAME, DEFAULT_SERVICE_NAME), UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=os.getenv(ENV_POWERTOOLS_METRICS_NAMESPACE, DEFAULT_METRICS_NAMESPACE))


def _publish_metrics(result: CleanupResult) -> None:
    metrics.add_metric(name=METRIC_IMAGES_NOT_IN_USE, unit=MetricUnit.Count, value=result.not_in_use_count)
    metrics.add_metric(name=METRIC_IMAGES_DELETED, unit=MetricUnit.Count, value=result.deleted_count)
    metrics.add_metric(name=METRIC_IMAGES_SKIPPED, unit=MetricUnit.Count, value=result.skipped_count)
    metrics.add_metric(name=METRIC_IMAGES_FAILED, unit=MetricUnit.Count, value=result.failed_count)
    metrics.add_metric(name=METRIC_SNAPSHOTS_DELETED, unit=MetricUnit.Count, value=result.snapshots_deleted_count)
    metrics.add_metric(name=METRIC_SNAPSHOTS_FAILED, unit=MetricUnit.Count, value=result.snapshots_failed_count)


@scheduled_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> None:
    """
    Run one AMI cleanup pass.

    This function:
    - Ignores the scheduler event payload (logged at debug level)
    - Loads cleanup options from the AMI_CLEANUP_OPTIONS environment variable
    - Delegates the cleanup to the service layer
    - Publishes run counts as CloudWatch metrics

    Errors never escape: the decorator logs them and the invocation
    completes normally.

    Args:
        event: EventBridge scheduled event (unused)
        context: AWS Lambda execution context
    """
    logger.info(
        "Received AMI cleanup request",
        extra={
            "request_id": getattr(context, "aws_request_id", None),
            "function_name": getattr(context, "function_name", None),
            "remaining_time_ms": context.get_remaining_time_in_millis()
            if hasattr(context, "get_remaining_time_in_millis")
            else None,
        },
    )
    logger.debug("Scheduler event", extra={"event": event})

    options = load_cleanup_options()
    logger.debug("Clean-up options", extra={"options": options.model_dump(by_alias=True)})

    remaining_time_ms = getattr(context, "get_remaining_time_in_millis", None)

    service = HousekeeperService()
    result = service.run_cleanup(options, remaining_time_ms=remaining_time_ms)

    _publish_metrics(result)
