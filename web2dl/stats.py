from dataclasses import dataclass
from datetime import datetime

MB = 1024 * 1024
GB = 1024 * MB


@dataclass
class RunStats:
    """File count / byte count accumulated over one run (only ever grows)"""
    files: int = 0
    bytes: int = 0

    def add_file(self, size):
        self.add_files(1, size)

    def add_files(self, count, size):
        if count < 0 or size < 0:
            raise ValueError("Statistics can only grow")
        self.files += count
        self.bytes += size


def format_timestamp(ts):
    return datetime.fromtimestamp(ts).strftime("%Y-%m-%d %H:%M:%S")


def format_report(stats, start_time, end_time):
    """Build the final statistics block printed at the end of a run
    :param stats: RunStats of the run
    :param start_time: Start wall-clock time (epoch seconds)
    :param end_time: End wall-clock time (epoch seconds)
    :return: Multi-line report text
    """
    elapsed = max(end_time - start_time, 0)
    lines = [
        "=" * 40,
        "📊 Download Statistics",
        "=" * 40,
        f"   ├─ Total files : {stats.files}",
        f"   ├─ Total MB    : {stats.bytes / MB:.2f} MB",
        f"   ├─ Total GB    : {stats.bytes / GB:.4f} GB",
        f"   ├─ Start time  : {format_timestamp(start_time)}",
        f"   ├─ End time    : {format_timestamp(end_time)}",
        f"   └─ Elapsed     : {elapsed:.0f}s / {elapsed / 60:.2f}min / {elapsed / 3600:.4f}hrs",
        "=" * 40,
    ]
    return "\n".join(lines)


def print_report(stats, start_time, end_time):
    print()
    print(format_report(stats, start_time, end_time))
    print()
