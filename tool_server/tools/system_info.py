"""
System Information Tool

CPU, memory and host snapshot collected with psutil.
"""

import os
import platform
import sys
import time
from typing import Any, Dict

import psutil

from ..base import Tool


def _cpu_info() -> Dict[str, Any]:
    try:
        freq = psutil.cpu_freq()
    except (OSError, NotImplementedError):
        freq = None

    return {
        "cores": psutil.cpu_count(logical=True) or os.cpu_count() or 0,
        "model": platform.processor() or platform.machine(),
        "speed": int(freq.current) if freq else 0,  # MHz
    }


def _memory_info() -> Dict[str, int]:
    vm = psutil.virtual_memory()
    return {
        "total": vm.total,
        "free": vm.available,
        "used": vm.total - vm.available,
    }


def _system_info() -> Dict[str, Any]:
    return {
        "platform": sys.platform,
        "arch": platform.machine(),
        "uptime": round(time.time() - psutil.boot_time(), 2),
        "loadAverage": list(psutil.getloadavg()),
    }


class SystemInfoTool(Tool):
    """Point-in-time host information."""

    @property
    def name(self) -> str:
        return "systemInfo"

    @property
    def description(self) -> str:
        return "Get system information including CPU, memory, and process info"

    async def execute(self, **kwargs) -> Dict[str, Any]:
        return {
            "cpu": _cpu_info(),
            "memory": _memory_info(),
            "system": _system_info(),
        }
