"""
Structured logging for the action history service.
Request/response lines, action operations, retention sweeps and error logs.
"""

import logging
from typing import Any, Dict, List, Optional

# Keys whose values never reach the log output
SENSITIVE_FIELDS = ['action', 'payload', 'token', 'authorization', 'x-auth-identity']


class StructuredLogger:
    """Structured logger for history operations."""

    def __init__(self, name: str = "action_history"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None, level: int = logging.INFO):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {sanitize_payload(details)}"

        self.logger.log(level, message)

    def log_request(self, method: str, path: str, request_id: Optional[str] = None):
        """Log an incoming HTTP request."""
        details = {"method": method, "path": path}
        if request_id:
            details["request_id"] = request_id
        self.log_operation("http.request", "received", details)

    def log_response(self, method: str, path: str, status_code: int, duration_ms: float, request_id: Optional[str] = None):
        """Log an outgoing HTTP response with its execution time."""
        details = {
            "method": method,
            "path": path,
            "http_status": status_code,
            "execution_time_ms": round(duration_ms, 2)
        }
        if request_id:
            details["request_id"] = request_id
        self.log_operation("http.response", "sent", details)

    def log_action_operation(self, operation: str, user_id: Optional[str], status: str = "success", details: Dict[str, Any] = None):
        """Log a create/list/delete operation on action records."""
        log_details = {"user_id": user_id if user_id is not None else "*"}
        if details:
            log_details.update(details)
        self.log_operation(f"actions.{operation}", status, log_details)

    def log_sweep(self, cutoff: str, deleted: int, status: str = "success", details: Dict[str, Any] = None):
        """Log a retention sweep pass."""
        log_details = {"cutoff": cutoff, "deleted": deleted}
        if details:
            log_details.update(details)
        level = logging.INFO if status == "success" else logging.ERROR
        self.log_operation("retention.sweep", status, log_details, level=level)

    def log_access_denied(self, reason: str, requested_user_id: Optional[str] = None, request_id: Optional[str] = None):
        """Log a rejected self-service request. The caller's subject is never logged."""
        details = {"reason": reason}
        if requested_user_id:
            details["requested_user_id"] = requested_user_id
        if request_id:
            details["request_id"] = request_id
        self.log_operation("access.denied", "rejected", details, level=logging.WARNING)

    def error_log(self, request_id: Optional[str], message: str, user_id: Optional[str] = None):
        """Log an error tied to a request and, where known, a user."""
        self.logger.error(f"History - error - [{request_id or '-'}] {message} {user_id or ''}".rstrip())

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)


def sanitize_payload(payload: Any, sensitive_fields: List[str] = None) -> Any:
    """Redact sensitive keys and truncate long strings for log output."""
    if sensitive_fields is None:
        sensitive_fields = SENSITIVE_FIELDS

    if isinstance(payload, dict):
        sanitized = {}
        for k, v in payload.items():
            if isinstance(k, str) and k.lower() in sensitive_fields:
                sanitized[k] = "[REDACTED]"
            else:
                sanitized[k] = sanitize_payload(v, sensitive_fields)
        return sanitized
    elif isinstance(payload, str):
        # Truncate long strings
        return payload[:100] + "..." if len(payload) > 100 else payload
    elif isinstance(payload, list):
        return [sanitize_payload(item, sensitive_fields) for item in payload]
    else:
        return payload


# Global logger instance
logger = StructuredLogger()
