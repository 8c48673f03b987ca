"""Built-in configuration, the lowest-precedence layer."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "mirrorarr",
    "environment": "dev",
    "http": {
        "timeout_seconds": 30.0,
        "follow_redirects": True,
        "user_agent": "Mirrorarr/0.1.0",
    },
    "logging": {"level": "INFO"},
    "mirrors": {
        "bootstrap_url": "https://filmuworker.entertainmentfilmu.workers.dev/",
        "proxy_url": "https://filmueproxy.vercel.app",
        "title_similarity_threshold": 0.9,
        "progress_initial": 10,
        "progress_step": 5,
        "progress_ceiling": 90,
        "progress_interval_seconds": 0.1,
    },
}
