DAY_SECONDS = 86_400
HOUR_SECONDS = 3_600
MINUTE_SECONDS = 60

BYTE_UNITS = ["B", "KB", "MB", "GB", "TB"]


def format_bytes(bytes_size: int | float) -> str:
    if bytes_size < 0:
        raise ValueError("Bytes size must be non-negative")

    for unit in BYTE_UNITS:
        if bytes_size < 1024.0:
            return f"{bytes_size:.2f} {unit}"

        bytes_size /= 1024.0

    return f"{bytes_size:.2f} PB"


def format_time(elapsed_seconds: float) -> str:
    days, remainder = divmod(elapsed_seconds, DAY_SECONDS)
    hours, remainder = divmod(remainder, HOUR_SECONDS)
    minutes, seconds = divmod(remainder, MINUTE_SECONDS)

    return f"{int(days):02d}d {int(hours):02d}h {int(minutes):02d}m {seconds:05.2f}s"


def format_response_time(response_time_ms: int) -> str:
    if response_time_ms < 1_000:
        return f"{response_time_ms}ms"

    return f"{response_time_ms / 1_000:.2f}s"
