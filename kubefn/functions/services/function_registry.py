"""
Function registry.

Loads the service description (serverless.yml) and provides
name-to-FunctionSpec mapping. Provider-level settings act as defaults for
every function.
"""

from typing import Any, Dict, List, Optional
import yaml
import logging
import os
import string

from ..config import config
from ..core.exceptions import DescriptionError, NotFoundError
from ..models import FunctionSpec
from ..models.function import HTTP_TRIGGER, PUBSUB_TRIGGER

logger = logging.getLogger("kubefn.function_registry")


def _topic(events: Any) -> Optional[str]:
    for event in events or []:
        if isinstance(event, dict) and event.get("trigger"):
            return str(event["trigger"])
    return None


class FunctionRegistry:
    def __init__(self, config_path: Optional[str] = None, default_namespace: Optional[str] = None):
        self.config_path = config_path or config.FUNCTIONS_CONFIG_PATH
        self.default_namespace = default_namespace or config.NAMESPACE
        self.service_name: Optional[str] = None
        self._provider: Dict[str, Any] = {}
        self._registry: Dict[str, Dict[str, Any]] = {}

    def load_functions_config(self) -> Dict[str, Dict[str, Any]]:
        """
        Load and cache the service description.

        Returns:
            Dict of function name -> raw entry
        """
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                # Substitute environment variables using string.Template.
                template = string.Template(f.read())
                content = template.safe_substitute(os.environ)
                cfg = yaml.safe_load(content) or {}

            self.service_name = cfg.get("service")
            self._provider = cfg.get("provider") or {}
            self._registry = cfg.get("functions") or {}

            logger.info(f"Loaded {len(self._registry)} functions from {self.config_path}")

        except FileNotFoundError:
            logger.warning(f"Service description not found at {self.config_path}")
            self._provider = {}
            self._registry = {}

        except yaml.YAMLError as e:
            logger.error(f"Error parsing service description: {e}")
            self._provider = {}
            self._registry = {}

        return self._registry

    def names(self) -> List[str]:
        return list(self._registry)

    def _read_deps(self, function_name: str, entry: Dict[str, Any]) -> str:
        if entry.get("deps"):
            return str(entry["deps"])
        deps_file = entry.get("deps_file")
        if not deps_file:
            return ""
        path = os.path.join(os.path.dirname(os.path.abspath(self.config_path)), deps_file)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except OSError as e:
            raise DescriptionError(function_name, f"cannot read deps_file {deps_file}: {e}") from e

    def namespace_of(self, function_name: str) -> str:
        entry = self._registry.get(function_name) or {}
        return (
            entry.get("namespace")
            or self._provider.get("namespace")
            or self.default_namespace
        )

    def get_spec(self, function_name: str) -> Optional[FunctionSpec]:
        """
        Build the FunctionSpec for one function.

        Returns:
            FunctionSpec (provider defaults merged), or None if missing

        Raises:
            DescriptionError: the entry's deps_file cannot be read
        """
        if function_name not in self._registry:
            return None

        entry = self._registry[function_name] or {}
        topic = _topic(entry.get("events"))

        return FunctionSpec(
            name=function_name,
            namespace=self.namespace_of(function_name),
            handler=entry.get("handler"),
            runtime=entry.get("runtime") or self._provider.get("runtime"),
            deps=self._read_deps(function_name, entry),
            trigger_type=PUBSUB_TRIGGER if topic else HTTP_TRIGGER,
            topic=topic,
            description=entry.get("description"),
            labels={str(k): str(v) for k, v in (entry.get("labels") or {}).items()},
        )

    def specs(self) -> List[FunctionSpec]:
        return [self.get_spec(name) for name in self._registry]

    def namespaces(self) -> Dict[str, str]:
        return {name: self.namespace_of(name) for name in self._registry}

    def select(self, function_name: str) -> "FunctionRegistry":
        """
        A registry holding only function_name. This registry is left untouched.

        Raises:
            NotFoundError: the function is not in the service description
        """
        if function_name not in self._registry:
            raise NotFoundError(function_name, "the current description")

        view = FunctionRegistry(self.config_path, self.default_namespace)
        view.service_name = self.service_name
        view._provider = dict(self._provider)
        view._registry = {function_name: self._registry[function_name]}
        return view
