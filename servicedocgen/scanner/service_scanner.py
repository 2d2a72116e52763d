"""Scanner locating REST service classes in Python packages."""
import importlib
import inspect
import logging
import pkgutil
import re
from typing import Iterable, List

from servicedocgen.rest.annotations import PATH_ATTRIBUTE

logger = logging.getLogger(__name__)


class ServiceLoadError(RuntimeError):
    """Raised when a requested service class cannot be loaded."""


class ServiceScanner:
    """Finds service classes by package and class name pattern."""

    def __init__(self, classname_regex: str = ".*Service.*"):
        self.classname_regex = classname_regex
        self._pattern = re.compile(classname_regex)

    def scan(self, packages: Iterable[str]) -> List[type]:
        """
        Scan packages (and their subpackages) for service classes.

        Args:
            packages: Importable package or module names

        Returns:
            List[type]: Service classes, ordered by qualified name

        Raises:
            ServiceLoadError: If a package cannot be imported
        """
        found = {}
        for package_name in packages:
            for module in self._walk(package_name):
                for name, member in inspect.getmembers(module, inspect.isclass):
                    if member.__module__ != module.__name__:
                        continue
                    if not self._pattern.fullmatch(name):
                        continue
                    if getattr(member, PATH_ATTRIBUTE, None) is None:
                        logger.debug(f"Skipping {name}: no service path")
                        continue
                    found[f"{member.__module__}.{member.__qualname__}"] = member

        logger.info(f"Found {len(found)} service classes in {', '.join(packages)}")
        return [found[key] for key in sorted(found)]

    def load(self, name: str) -> type:
        """
        Load a single service class.

        Args:
            name: Qualified class name (`package.module.Class`)

        Returns:
            type: The service class

        Raises:
            ServiceLoadError: If the class cannot be imported
        """
        module_name, _, class_name = name.rpartition(".")
        if not module_name:
            raise ServiceLoadError(f"Not a qualified class name: {name}")
        try:
            module = importlib.import_module(module_name)
            service_class = getattr(module, class_name)
        except (ImportError, AttributeError) as e:
            raise ServiceLoadError(f"Failed to load service class {name}: {e}") from e

        if not inspect.isclass(service_class):
            raise ServiceLoadError(f"{name} is not a class")
        return service_class

    def _walk(self, package_name: str):
        """Import a package and yield it with all its submodules."""
        try:
            package = importlib.import_module(package_name)
        except ImportError as e:
            raise ServiceLoadError(f"Failed to import package {package_name}: {e}") from e

        yield package
        search_path = getattr(package, "__path__", None)
        if search_path is None:
            return

        for module_info in pkgutil.walk_packages(search_path, prefix=f"{package.__name__}."):
            try:
                yield importlib.import_module(module_info.name)
            except Exception as e:
                logger.warning(f"Skipping module {module_info.name}: {e}")
