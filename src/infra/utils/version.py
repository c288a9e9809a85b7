import importlib.util
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION_NAME = "uptime-engine"
DEFAULT_VERSION = "0.1.0"


def _read_version_module(path: Path) -> str | None:
    if not path.is_file():
        return None

    spec = importlib.util.spec_from_file_location("version", path)
    if spec is None or spec.loader is None:
        return None

    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    return getattr(module, "__version__", None)


def get_version() -> str:
    """Installed distribution metadata first, then a ``version.py`` at the project root."""
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        pass

    project_root = Path(__file__).parent.parent.parent.parent

    return _read_version_module(project_root / "version.py") or DEFAULT_VERSION
