"""
Мониторинг ресурсов процесса во время прогона.
"""

import psutil
from typing import Dict, Any
from dataclasses import dataclass, field
from datetime import datetime

from ..utils.logger import get_logger


logger = get_logger(__name__)


@dataclass
class ResourceSnapshot:
    """Снимок ресурсов текущего процесса."""
    memory_rss_mb: float = 0.0
    cpu_user: float = 0.0
    cpu_system: float = 0.0
    num_threads: int = 0
    timestamp: datetime = field(default_factory=datetime.now)

    @classmethod
    def take(cls) -> 'ResourceSnapshot':
        """Снять показания через psutil."""
        try:
            process = psutil.Process()
            with process.oneshot():
                memory = process.memory_info()
                cpu = process.cpu_times()
                return cls(
                    memory_rss_mb=memory.rss / (1024 * 1024),
                    cpu_user=cpu.user,
                    cpu_system=cpu.system,
                    num_threads=process.num_threads()
                )
        except psutil.Error as e:
            logger.warning(f"Could not collect resource snapshot: {e}")
            return cls()


@dataclass
class ResourceUsage:
    """Разница ресурсов между двумя снимками."""
    cpu_seconds: float = 0.0
    memory_delta_mb: float = 0.0
    peak_threads: int = 0

    @classmethod
    def between(
        cls,
        start: ResourceSnapshot,
        end: ResourceSnapshot,
        *samples: ResourceSnapshot
    ) -> 'ResourceUsage':
        """Разница между снимками; samples - промежуточные снимки для пика потоков."""
        cpu_start = start.cpu_user + start.cpu_system
        cpu_end = end.cpu_user + end.cpu_system
        return cls(
            cpu_seconds=max(cpu_end - cpu_start, 0.0),
            memory_delta_mb=end.memory_rss_mb - start.memory_rss_mb,
            peak_threads=max(s.num_threads for s in (start, end) + samples)
        )

    def to_dict(self) -> Dict[str, Any]:
        """Преобразование в словарь."""
        return {
            'cpu_seconds': self.cpu_seconds,
            'memory_delta_mb': self.memory_delta_mb,
            'peak_threads': self.peak_threads
        }
