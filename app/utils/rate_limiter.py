"""
Rate limiting for API endpoints
"""
import time
from collections import defaultdict
from fastapi import Request
from typing import Dict
import logging

logger = logging.getLogger(__name__)


class RateLimitExceeded(Exception):
    """Raised when a client exhausts its request window"""

    def __init__(self, message: str, retry_after: int):
        super().__init__(message)
        self.message = message
        self.retry_after = retry_after


class RateLimiter:
    """
    In-memory sliding-window rate limiter
    Production: Use Redis for distributed rate limiting
    """

    def __init__(self, requests_per_minute: int = 300, requests_per_hour: int = 5000):
        self.requests_per_minute = requests_per_minute
        self.requests_per_hour = requests_per_hour

        # Storage: {client_id: [timestamp, ...]}
        self.minute_tracker: Dict[str, list] = defaultdict(list)
        self.hour_tracker: Dict[str, list] = defaultdict(list)

    def _get_client_id(self, request: Request) -> str:
        """Extract client identifier from request"""
        if hasattr(request.state, "user_id"):
            return str(request.state.user_id)

        client_ip = request.client.host if request.client else "unknown"
        return client_ip

    def _cleanup_old_entries(self, tracker: Dict[str, list], window_seconds: int):
        """Remove entries older than window"""
        cutoff_time = time.time() - window_seconds

        for client_id in list(tracker.keys()):
            tracker[client_id] = [ts for ts in tracker[client_id] if ts > cutoff_time]

            if not tracker[client_id]:
                del tracker[client_id]

    def check_rate_limit(self, request: Request) -> None:
        """
        Record the request and check it against both windows

        Raises:
            RateLimitExceeded: if either window is full
        """
        client_id = self._get_client_id(request)
        current_time = time.time()

        self._cleanup_old_entries(self.minute_tracker, 60)
        self._cleanup_old_entries(self.hour_tracker, 3600)

        minute_requests = len(self.minute_tracker[client_id])
        if minute_requests >= self.requests_per_minute:
            logger.warning(f"Rate limit exceeded (minute): {client_id}")
            raise RateLimitExceeded(
                f"Too many requests. Limit: {self.requests_per_minute} requests per minute",
                retry_after=60,
            )

        hour_requests = len(self.hour_tracker[client_id])
        if hour_requests >= self.requests_per_hour:
            logger.warning(f"Rate limit exceeded (hour): {client_id}")
            raise RateLimitExceeded(
                f"Too many requests. Limit: {self.requests_per_hour} requests per hour",
                retry_after=3600,
            )

        self.minute_tracker[client_id].append(current_time)
        self.hour_tracker[client_id].append(current_time)

        logger.debug(f"Rate limit check passed: {client_id} (minute: {minute_requests+1}, hour: {hour_requests+1})")
