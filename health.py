# ============================================================================
# MODULE CONTEXT - HEALTH CHECK MODULE
# ============================================================================
# STATUS: Core Infrastructure - Health Monitoring
# PURPOSE: Health checks for APIM integration and monitoring
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: get_public_health, get_detailed_health, get_app_identity, HealthStatus
# DEPENDENCIES: config, util_logger, edr_api
# PATTERNS: Two-tier health checks (public/detailed) for APIM
# ============================================================================

"""
Health Check Module

Provides two-tier health monitoring optimized for Azure APIM integration:

1. Public Health (/api/health):
   - Minimal response for external callers
   - Returns only status and timestamp
   - Always returns 200 (status in body indicates health)

2. Detailed Health (/api/health/detailed):
   - Catalogue load and query link counts
   - Encoder coverage of every advertised output format
   - API module status
   - Returns 503 if unhealthy

Critical checks: catalogue, encoders. Non-critical: api_modules.

Usage:
    from health import get_public_health, get_detailed_health

    result = get_public_health()
    # {"status": "healthy", "timestamp": "2026-10-19T12:00:00+00:00"}
"""

import time
import uuid
from enum import Enum
from datetime import datetime, timezone
from dataclasses import dataclass
from typing import Optional, Dict, Any

from config import get_app_config
from util_logger import LoggerFactory, ComponentType

# Create module logger
logger = LoggerFactory.create_logger(ComponentType.SERVICE, "HealthService")


# ============================================================================
# Health Status Enum
# ============================================================================

class HealthStatus(str, Enum):
    """Health status values."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"      # Non-critical components failing
    UNHEALTHY = "unhealthy"    # Critical components failing


# ============================================================================
# Data Classes
# ============================================================================

@dataclass
class CheckResult:
    """Result of a single health check."""
    status: str              # "pass" or "fail"
    latency_ms: float        # Time taken for check
    message: str             # Human-readable status message
    details: Optional[Dict[str, Any]] = None  # Additional details

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, excluding None values."""
        result = {
            "status": self.status,
            "latency_ms": round(self.latency_ms, 2),
            "message": self.message
        }
        if self.details:
            result["details"] = self.details
        return result


# ============================================================================
# Health Check Functions
# ============================================================================

def check_catalogue() -> CheckResult:
    """
    Check that the collection catalogue loads.

    This is a critical check - failure means UNHEALTHY status.

    Returns:
        CheckResult with collection and query link counts
    """
    start_time = time.perf_counter()

    try:
        from edr_api.catalogue import get_catalogue

        catalogue = get_catalogue()
        collection_ids = [collection.id for collection in catalogue]
        query_count = sum(len(collection.queries) for collection in catalogue)

        latency_ms = (time.perf_counter() - start_time) * 1000

        return CheckResult(
            status="pass",
            latency_ms=latency_ms,
            message=f"{len(collection_ids)} collections, {query_count} queries",
            details={
                "collection_count": len(collection_ids),
                "query_count": query_count,
                "collections": collection_ids
            }
        )

    except Exception as e:
        latency_ms = (time.perf_counter() - start_time) * 1000
        logger.error(f"Catalogue check failed: {e}")

        return CheckResult(
            status="fail",
            latency_ms=latency_ms,
            message=f"Catalogue check failed: {type(e).__name__}",
            details={"error": str(e)}
        )


def check_encoders() -> CheckResult:
    """
    Check that every advertised output format has an encoder.

    This is a critical check - failure means UNHEALTHY status.
    """
    start_time = time.perf_counter()

    try:
        from edr_api.catalogue import get_catalogue
        from edr_api.encoders import SERVABLE_FORMATS
        from edr_api.formats import format_name

        advertised = set()
        for collection in get_catalogue():
            advertised.update(collection.output_formats)

        missing = sorted(format_name(f) for f in advertised - SERVABLE_FORMATS)
        servable = sorted(format_name(f) for f in SERVABLE_FORMATS)

        latency_ms = (time.perf_counter() - start_time) * 1000

        if missing:
            return CheckResult(
                status="fail",
                latency_ms=latency_ms,
                message=f"No encoder for advertised formats: {', '.join(missing)}",
                details={"missing": missing, "servable": servable}
            )

        return CheckResult(
            status="pass",
            latency_ms=latency_ms,
            message=f"{len(advertised)} advertised formats, all servable",
            details={
                "advertised": sorted(format_name(f) for f in advertised),
                "servable": servable
            }
        )

    except Exception as e:
        latency_ms = (time.perf_counter() - start_time) * 1000
        logger.error(f"Encoder check failed: {e}")

        return CheckResult(
            status="fail",
            latency_ms=latency_ms,
            message=f"Encoder check failed: {type(e).__name__}",
            details={"error": str(e)}
        )


def check_api_modules() -> CheckResult:
    """
    Check API module availability.

    Verifies the edr_api module imports and registers its triggers.
    This is a non-critical check - failure means DEGRADED status.
    """
    start_time = time.perf_counter()

    edr_status = {"available": False, "endpoints": 0}

    try:
        from edr_api import get_edr_triggers, get_edr_config
        triggers = get_edr_triggers()
        config = get_edr_config()
        edr_status = {
            "available": True,
            "endpoints": len(triggers),
            "title": config.title
        }
    except Exception as e:
        logger.error(f"API module check failed: {e}")
        edr_status["error"] = str(e)

    latency_ms = (time.perf_counter() - start_time) * 1000

    return CheckResult(
        status="pass" if edr_status["available"] else "fail",
        latency_ms=latency_ms,
        message="All modules loaded" if edr_status["available"] else "No API modules available",
        details={"edr_api": edr_status}
    )


# ============================================================================
# Main Entry Points
# ============================================================================

def get_app_identity() -> Dict[str, str]:
    """Application name, description and environment from AppConfig."""
    config = get_app_config()
    return {
        "name": config.app_name,
        "description": config.app_description,
        "environment": config.environment
    }


def get_public_health() -> Dict[str, Any]:
    """
    Get minimal health status for public endpoint.

    Returns only status and timestamp - no internal details.

    Returns:
        Dict with status and timestamp only
    """
    start_time = time.perf_counter()

    catalogue_result = check_catalogue()

    if catalogue_result.status == "pass":
        status = HealthStatus.HEALTHY
    else:
        status = HealthStatus.UNHEALTHY

    total_duration = (time.perf_counter() - start_time) * 1000

    logger.info("Public health check completed", extra={
        'custom_dimensions': {
            'status': status.value,
            'duration_ms': round(total_duration, 2),
            'check_type': 'public'
        }
    })

    return {
        "status": status.value,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


def get_detailed_health() -> Dict[str, Any]:
    """
    Get detailed health status for APIM probes and operations.

    SECURITY NOTE: Block this endpoint from external access via APIM policy.

    Returns:
        Dict with full health metrics
    """
    start_time = time.perf_counter()
    request_id = str(uuid.uuid4())[:8]

    checks = {}
    critical_failures = []
    non_critical_failures = []

    # Critical
    catalogue_result = check_catalogue()
    checks["catalogue"] = catalogue_result.to_dict()
    if catalogue_result.status == "fail":
        critical_failures.append("catalogue")

    encoders_result = check_encoders()
    checks["encoders"] = encoders_result.to_dict()
    if encoders_result.status == "fail":
        critical_failures.append("encoders")

    # Non-critical
    modules_result = check_api_modules()
    checks["api_modules"] = modules_result.to_dict()
    if modules_result.status == "fail":
        non_critical_failures.append("api_modules")

    if critical_failures:
        status = HealthStatus.UNHEALTHY
    elif non_critical_failures:
        status = HealthStatus.DEGRADED
    else:
        status = HealthStatus.HEALTHY

    total_duration = (time.perf_counter() - start_time) * 1000

    logger.info("Detailed health check completed", extra={
        'custom_dimensions': {
            'status': status.value,
            'duration_ms': round(total_duration, 2),
            'check_type': 'detailed',
            'request_id': request_id,
            'critical_failures': critical_failures,
            'non_critical_failures': non_critical_failures
        }
    })

    identity = get_app_identity()

    return {
        "status": status.value,
        "app": identity["name"],
        "description": identity["description"],
        "environment": identity["environment"],
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "request_id": request_id,
        "checks": checks,
        "total_duration_ms": round(total_duration, 2)
    }
