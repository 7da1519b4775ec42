"""Content Type Loader Service - discovers content type declarations at startup"""

from typing import Dict, Iterable, Type
import importlib
import inspect
import pkgutil

from core.logging_config import get_logger
from schemas.content_type import ContentTypeDeclaration, ContentTypeSchema
from services.content_type_registry import ContentTypeRegistry

logger = get_logger(__name__)


class ContentTypeLoader:
    """
    Loads content type declarations from Python packages.

    Every module of each configured package is imported and scanned for
    ContentTypeDeclaration subclasses that declare a slug, the same way the
    host application drops ``*_type`` modules into its content types package.
    """

    def __init__(self, packages: Iterable[str]):
        self.packages = list(packages)

    def discover(self) -> Dict[str, Type[ContentTypeDeclaration]]:
        """Import the packages and return declarations keyed by slug"""
        declarations: Dict[str, Type[ContentTypeDeclaration]] = {}

        for package_name in self.packages:
            for module in self._iter_modules(package_name):
                for attr_name in dir(module):
                    attr = getattr(module, attr_name)

                    if (
                        inspect.isclass(attr) and
                        issubclass(attr, ContentTypeDeclaration) and
                        attr is not ContentTypeDeclaration and
                        attr.__module__ == module.__name__ and
                        attr.slug
                    ):
                        if attr.slug in declarations:
                            logger.warning(
                                f"Content type '{attr.slug}' declared twice, "
                                f"{attr.__module__}.{attr.__name__} wins"
                            )
                        declarations[attr.slug] = attr
                        logger.info(f"Loaded content type: {attr.slug} ({attr.name or attr.__name__})")

        logger.info(f"Discovered {len(declarations)} content types")
        return declarations

    def load_schemas(self) -> list[ContentTypeSchema]:
        return [declaration.to_schema() for declaration in self.discover().values()]

    def load_into(self, registry: ContentTypeRegistry) -> list[ContentTypeSchema]:
        """Register every discovered schema and return them in discovery order"""
        schemas = self.load_schemas()
        for schema in schemas:
            registry.register(schema.slug, schema)
        return schemas

    def _iter_modules(self, package_name: str):
        try:
            package = importlib.import_module(package_name)
        except Exception as e:
            logger.error(f"Failed to import content type package {package_name}: {e}")
            raise

        yield package

        # Plain modules have no __path__ and nothing else to scan
        for module_info in pkgutil.walk_packages(getattr(package, "__path__", []), prefix=f"{package_name}."):
            yield importlib.import_module(module_info.name)
